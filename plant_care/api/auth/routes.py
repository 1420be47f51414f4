# plant_care/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token
from marshmallow import ValidationError

from .schemas import RegisterSchema, LoginSchema, UserResponseSchema
from .services import UserAlreadyExistsError, UserNotFoundError, IncorrectPasswordError

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호 회원가입."""
    auth_service = current_app.services['auth']
    try:
        data = RegisterSchema().load(request.get_json(silent=True) or {})
        user = auth_service.register_user(data['name'], data['email'], data['password'])
        user_dict = auth_service.to_public_dict(user)
        return jsonify({
            "message": "회원가입이 완료되었습니다.",
            "success": True,
            "user": UserResponseSchema().dump(user_dict)
        }), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "success": False, "details": err.messages}), 400
    except UserAlreadyExistsError as e:
        return jsonify({"error_code": "USER_ALREADY_EXISTS", "success": False, "message": str(e)}), 400
    except Exception as e:
        logging.error(f"회원가입 처리 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "success": False, "message": "서버 내부 오류가 발생했습니다."}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """로그인. 성공 시 하루 동안 유효한 Access Token을 발급합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
        user = auth_service.authenticate(data['email'], data['password'])
        access_token = create_access_token(identity=user.user_id)
        return jsonify({
            "message": "로그인되었습니다.",
            "success": True,
            "token": access_token,
            "user": UserResponseSchema().dump(auth_service.to_public_dict(user))
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "success": False, "details": err.messages}), 400
    except UserNotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "success": False, "message": str(e)}), 404
    except IncorrectPasswordError as e:
        return jsonify({"error_code": "INCORRECT_PASSWORD", "success": False, "message": str(e)}), 401
    except Exception as e:
        logging.error(f"로그인 처리 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "success": False, "message": "서버 내부 오류가 발생했습니다."}), 500
