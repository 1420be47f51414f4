# plant_care/core/exceptions.py
"""
식물 관리 서비스 전용 예외 모음.

라우트와 전역 에러 핸들러는 이 예외 타입을 기준으로 HTTP 상태 코드를 결정합니다.
- PlantValidationError 계열 -> 400
- PlantNotFoundError -> 404
- StorageError -> 500
"""


class PlantCareError(Exception):
    """서비스 예외의 공통 부모 클래스."""
    error_code = "PLANT_CARE_ERROR"


class PlantValidationError(PlantCareError, ValueError):
    """필수 입력 누락 또는 형식 오류."""
    error_code = "VALIDATION_ERROR"


class InvalidDate(PlantValidationError):
    """마지막 물 준 날짜를 해석할 수 없는 경우."""
    error_code = "INVALID_DATE"


class InvalidFrequency(PlantValidationError):
    """물 주기(일)가 양의 정수가 아닌 경우."""
    error_code = "INVALID_FREQUENCY"


class PlantNotFoundError(PlantCareError, LookupError):
    error_code = "PLANT_NOT_FOUND"


class StorageError(PlantCareError, RuntimeError):
    """Firestore 읽기/쓰기 실패."""
    error_code = "STORAGE_ERROR"
