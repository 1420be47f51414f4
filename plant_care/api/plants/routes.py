# plant_care/api/plants/routes.py
import logging
from contextlib import contextmanager
from dataclasses import replace, asdict
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from plant_care.core.exceptions import PlantValidationError, PlantNotFoundError, StorageError
from .schedule import PlantPatch
from .schemas import PlantCreateSchema, PlantUpdateSchema, PlantResponseSchema

plants_bp = Blueprint('plants_bp', __name__)


def _request_payload() -> dict:
    """multipart(사진 포함) 요청과 JSON 요청을 모두 딕셔너리로 변환합니다."""
    if request.files or request.form:
        return request.form.to_dict()
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("요청 본문은 JSON 객체여야 합니다.")
    return data


def _save_uploaded_image():
    image = request.files.get('image')
    if image is None or not image.filename:
        return None
    return current_app.services['images'].save_image(image)


@contextmanager
def _uploaded_image():
    """요청의 사진을 저장하고 경로를 넘겨줍니다. 이후 처리에서 예외가 나면 저장한 파일을 지웁니다."""
    image_url = _save_uploaded_image()
    try:
        yield image_url
    except Exception:
        if image_url:
            current_app.services['images'].delete_image(image_url)
        raise


def _dump(plant):
    return PlantResponseSchema().dump(asdict(plant))


@plants_bp.route('/', methods=['POST'])
@jwt_required()
def create_plant():
    """식물 등록 API. 다음 물 줄 날짜는 서버에서 계산합니다."""
    user_id = get_jwt_identity()
    plant_service = current_app.services['plants']
    try:
        validated_data = PlantCreateSchema().load(_request_payload())
        with _uploaded_image() as image_url:
            new_plant = plant_service.create_plant(user_id, validated_data, image_url=image_url)
        return jsonify({"message": "식물이 등록되었습니다.", "plant": _dump(new_plant)}), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PlantValidationError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500
    except Exception as e:
        logging.error(f"Create plant API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PLANT_CREATION_FAILED", "message": "식물 등록 중 오류가 발생했습니다."}), 500


@plants_bp.route('/', methods=['GET'])
@jwt_required()
def get_all_plants():
    """등록된 모든 식물 목록을 조회합니다."""
    plant_service = current_app.services['plants']
    try:
        plants = plant_service.list_all_plants()
        return jsonify({"plants": [_dump(plant) for plant in plants]}), 200
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500


@plants_bp.route('/user/<string:user_id>', methods=['GET'])
@jwt_required()
def get_user_plants(user_id: str):
    """특정 사용자의 식물 목록을 조회합니다."""
    plant_service = current_app.services['plants']
    try:
        plants = plant_service.list_plants_by_user(user_id)
        return jsonify([_dump(plant) for plant in plants]), 200
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500


@plants_bp.route('/<string:plant_id>', methods=['GET'])
@jwt_required()
def get_plant(plant_id: str):
    """[소유자 전용] 식물 한 건을 조회합니다."""
    user_id = get_jwt_identity()
    plant_service = current_app.services['plants']
    try:
        plant = plant_service.get_plant(plant_id, user_id)
        return jsonify(_dump(plant)), 200
    except PlantNotFoundError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500


@plants_bp.route('/<string:plant_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_plant(plant_id: str):
    """[소유자 전용] 식물 정보를 부분 업데이트합니다. 물 주기 관련 필드가 바뀌면 다음 물 줄 날짜를 다시 계산합니다."""
    user_id = get_jwt_identity()
    plant_service = current_app.services['plants']
    try:
        update_data = PlantUpdateSchema().load(_request_payload())
        patch = PlantPatch.from_dict(update_data)
        with _uploaded_image() as image_url:
            if image_url:
                patch = replace(patch, image_url=image_url)
            updated_plant = plant_service.update_plant(plant_id, user_id, patch)
        return jsonify(_dump(updated_plant)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PlantValidationError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 400
    except PlantNotFoundError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500
    except Exception as e:
        logging.error(f"Update plant API error (plant_id: {plant_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "식물 정보 수정 중 오류가 발생했습니다."}), 500


@plants_bp.route('/<string:plant_id>', methods=['DELETE'])
@jwt_required()
def delete_plant(plant_id: str):
    """[소유자 전용] 식물을 삭제합니다."""
    user_id = get_jwt_identity()
    plant_service = current_app.services['plants']
    try:
        plant_service.delete_plant(plant_id, user_id)
        return jsonify({"message": "식물이 삭제되었습니다."}), 200
    except PlantNotFoundError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except StorageError as e:
        return jsonify({"error_code": e.error_code, "message": str(e)}), 500
