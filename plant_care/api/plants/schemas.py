# plant_care/api/plants/schemas.py
from marshmallow import Schema, fields, validate, pre_load, ValidationError, EXCLUDE

from plant_care.core.exceptions import InvalidDate, InvalidFrequency
from .schedule import parse_last_watered_date, parse_watering_frequency


class LastWateredDateField(fields.Field):
    """'2024-01-15' 등 날짜 문자열을 date로 변환하는 필드. 물 주기 계산과 같은 파서를 사용합니다."""
    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_last_watered_date(value)
        except InvalidDate as e:
            raise ValidationError(str(e)) from e


class WateringFrequencyField(fields.Field):
    """JSON 숫자와 multipart 폼의 숫자 문자열을 모두 받아 양의 정수로 변환합니다."""
    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_watering_frequency(value)
        except InvalidFrequency as e:
            raise ValidationError(str(e)) from e


class _PlantInputSchema(Schema):
    """JSON/multipart 공통 입력 처리. 알 수 없는 필드(nextWateringDate 등)는 무시합니다."""
    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        return {k: v.strip() if isinstance(v, str) else v for k, v in data.items()}


class PlantCreateSchema(_PlantInputSchema):
    """POST /api/plants/ 식물 등록 요청 스키마."""
    plant_name = fields.Str(required=True, data_key="plantName", validate=validate.Length(min=1, max=100))
    species = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    watering_frequency = WateringFrequencyField(required=True, data_key="wateringFrequency")
    last_watered_date = LastWateredDateField(required=True, data_key="lastWateredDate")
    is_indoor = fields.Bool(load_default=True, data_key="isIndoor")
    location = fields.Str(load_default=None, allow_none=True)


class PlantUpdateSchema(_PlantInputSchema):
    """PUT/PATCH /api/plants/<plant_id> 부분 업데이트 스키마. 전달된 필드만 결과에 포함됩니다."""
    plant_name = fields.Str(data_key="plantName", validate=validate.Length(min=1, max=100))
    species = fields.Str(validate=validate.Length(min=1, max=100))
    watering_frequency = WateringFrequencyField(data_key="wateringFrequency")
    last_watered_date = LastWateredDateField(data_key="lastWateredDate")
    is_indoor = fields.Bool(data_key="isIndoor")
    location = fields.Str(allow_none=True)


class PlantResponseSchema(Schema):
    """식물 정보 응답 스키마."""
    plant_id = fields.Str(data_key="id")
    user_id = fields.Str(data_key="userId")
    plant_name = fields.Str(data_key="plantName")
    species = fields.Str()
    watering_frequency = fields.Int(data_key="wateringFrequency")
    last_watered_date = fields.Date(data_key="lastWateredDate")
    next_watering_date = fields.Date(data_key="nextWateringDate", allow_none=True)
    is_indoor = fields.Bool(data_key="isIndoor")
    location = fields.Str(allow_none=True)
    image_url = fields.Str(data_key="imageUrl", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
