# plant_care/api/nurseries/routes.py
from flask import Blueprint, request, jsonify, current_app
from marshmallow import Schema, fields, validate, ValidationError

nurseries_bp = Blueprint('nurseries_bp', __name__)


class CoordinatesSchema(Schema):
    """주변 화원 검색 좌표 쿼리 파라미터 스키마"""
    lat = fields.Float(required=True, validate=validate.Range(min=-90, max=90))
    lon = fields.Float(required=True, validate=validate.Range(min=-180, max=180))


@nurseries_bp.route('/nearby-nurseries', methods=['GET'])
def nearby_nurseries():
    """위도/경도 주변의 화원 목록을 반환합니다. 외부 API 실패 시에도 임시 좌표를 반환합니다."""
    try:
        coords = CoordinatesSchema().load(request.args.to_dict())
    except ValidationError as err:
        return jsonify({"error_code": "MISSING_COORDINATES", "details": err.messages}), 400

    nursery_service = current_app.services['nurseries']
    return jsonify(nursery_service.find_nearby(coords['lat'], coords['lon'])), 200
