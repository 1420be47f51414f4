# plant_care/core/config.py

import os
from datetime import timedelta

basedir = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명 키. 로그인 시 발급되는 Access Token의 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    # 로그인 토큰은 하루 동안 유효합니다.
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=1)

    # 식물 사진 업로드 경로 및 최대 요청 크기(10MB)
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(basedir, 'uploads'))
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # 프론트엔드 도메인만 허용
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'https://plant-care-client.onrender.com')

    # 주변 화원 검색 (Overpass API)
    OVERPASS_API_URL = os.getenv('OVERPASS_API_URL', 'https://overpass-api.de/api/interpreter')
    NURSERY_SEARCH_RADIUS = int(os.getenv('NURSERY_SEARCH_RADIUS', 1000))
    OVERPASS_TIMEOUT = float(os.getenv('OVERPASS_TIMEOUT', 10))


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다. Firestore 클라이언트는 테스트에서 직접 주입합니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'plant-care-test-secret-key-0123456789')
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    """운영 환경 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')


# FLASK_ENV 값에 따라 create_app에서 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
