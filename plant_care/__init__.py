# plant_care/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify, send_from_directory
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
from flask_bcrypt import Bcrypt
from flask_cors import CORS
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정 및 예외
from plant_care.core.config import config_by_name
from plant_care.core.exceptions import PlantValidationError, PlantNotFoundError, StorageError

# - API 블루프린트
from plant_care.api.auth.routes import auth_bp
from plant_care.api.plants.routes import plants_bp
from plant_care.api.nurseries.routes import nurseries_bp

# - 서비스 모듈
from plant_care.services.image_storage_service import ImageStorageService
from plant_care.api.auth.services import AuthService
from plant_care.api.plants.services import PlantService
from plant_care.api.nurseries.services import NurseryService


def _init_firestore(app: Flask):
    """Firebase Admin SDK를 초기화하고 Firestore 클라이언트를 반환합니다."""
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        firebase_admin.initialize_app(credentials.Certificate(cred_path))
    return firestore.client()


def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param db: 사용할 Firestore 클라이언트. 없으면 Firebase 인증 파일로 새로 연결합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)
    bcrypt = Bcrypt(app)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    if db is None:
        db = _init_firestore(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    image_storage = ImageStorageService()
    image_storage.init_app(app)
    app.services['images'] = image_storage

    app.services['auth'] = AuthService(db, bcrypt)
    app.services['plants'] = PlantService(db)
    app.services['nurseries'] = NurseryService(
        api_url=app.config['OVERPASS_API_URL'],
        radius=app.config['NURSERY_SEARCH_RADIUS'],
        timeout=app.config['OVERPASS_TIMEOUT']
    )

    # =====================================================================================
    # 6. 블루프린트 및 공용 라우트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(plants_bp, url_prefix='/api/plants')
    app.register_blueprint(nurseries_bp)

    @app.route('/health')
    def health():
        return "OK", 200

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(PlantValidationError)
    def handle_plant_validation(err):
        return jsonify({"error_code": err.error_code, "message": str(err)}), 400

    @app.errorhandler(PlantNotFoundError)
    def handle_plant_not_found(err):
        return jsonify({"error_code": err.error_code, "message": str(err)}), 404

    @app.errorhandler(StorageError)
    def handle_storage_error(err):
        return jsonify({"error_code": err.error_code, "message": str(err)}), 500

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # HTTP 예외(404, 405 등)는 Werkzeug 기본 응답을 그대로 사용
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
