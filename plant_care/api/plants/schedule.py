# plant_care/api/plants/schedule.py
"""
물 주기 계산 로직.

next_watering_date = last_watered_date + watering_frequency(일)
위 관계는 생성/수정 경로 모두에서 이 모듈을 통해서만 계산됩니다.
"""
import math
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Dict, Optional, Tuple

from plant_care.core.exceptions import (
    InvalidDate,
    InvalidFrequency,
    PlantNotFoundError,
    PlantValidationError,
)
from plant_care.models.plant import Plant
from plant_care.utils.datetime_utils import DateTimeUtils


class _Missing:
    """요청에 필드가 아예 없었음을 나타내는 표식 (None과 구분)."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING = _Missing()

SCHEDULE_FIELDS = ('last_watered_date', 'watering_frequency')
REQUIRED_TEXT_FIELDS = ('plant_name', 'species')


@dataclass(frozen=True)
class PlantPatch:
    """
    부분 업데이트 요청.
    각 필드는 MISSING(미전달), None(null로 전달), 값 세 가지 상태를 가집니다.
    """
    plant_name: Any = MISSING
    species: Any = MISSING
    watering_frequency: Any = MISSING
    last_watered_date: Any = MISSING
    is_indoor: Any = MISSING
    location: Any = MISSING
    image_url: Any = MISSING

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlantPatch":
        """검증된 요청 딕셔너리에서 존재하는 키만 골라 패치를 만듭니다."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def supplied(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not MISSING}

    @property
    def touches_schedule(self) -> bool:
        return any(getattr(self, name) is not MISSING for name in SCHEDULE_FIELDS)


def parse_last_watered_date(value: Any) -> date:
    try:
        return DateTimeUtils.validate_date_field(value, 'lastWateredDate')
    except ValueError as e:
        raise InvalidDate(str(e)) from e


def parse_watering_frequency(value: Any) -> int:
    """
    물 주기를 양의 정수(일)로 변환합니다.
    "7" 같은 숫자 문자열은 허용하고, bool / 소수 / NaN / Infinity / 0 이하는 거부합니다.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidFrequency(f"wateringFrequency는 숫자여야 합니다: {value!r}")

    number = value
    if isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise InvalidFrequency(f"wateringFrequency는 숫자여야 합니다: {value!r}")

    if isinstance(number, float):
        if not math.isfinite(number) or not number.is_integer():
            raise InvalidFrequency(f"wateringFrequency는 유한한 정수여야 합니다: {value!r}")
        number = int(number)

    if not isinstance(number, int):
        raise InvalidFrequency(f"wateringFrequency는 숫자여야 합니다: {value!r}")
    if number < 1:
        raise InvalidFrequency(f"wateringFrequency는 1 이상이어야 합니다: {value!r}")
    return number


# date.min ~ date.max 사이의 전체 일 수. 이보다 긴 물 주기는 어떤 날짜에도 더할 수 없음
MAX_DAY_SPAN = (date.max - date.min).days


def _advance(last: date, frequency: int) -> date:
    """날짜 범위(9999-12-31)를 넘어가면 원인에 따라 InvalidFrequency / InvalidDate로 변환합니다."""
    try:
        return DateTimeUtils.add_days(last, frequency)
    except OverflowError as e:
        if frequency > MAX_DAY_SPAN:
            raise InvalidFrequency(f"wateringFrequency가 너무 큽니다: {frequency}") from e
        raise InvalidDate(f"다음 물 줄 날짜가 지원 범위를 벗어납니다: {last} + {frequency}일") from e


def compute_next_watering_date(last_watered_date: Any, frequency_days: Any) -> date:
    """마지막으로 물 준 날짜에 물 주기(일)를 더해 다음 물 줄 날짜를 계산합니다."""
    last = parse_last_watered_date(last_watered_date)
    frequency = parse_watering_frequency(frequency_days)
    return _advance(last, frequency)


def resolve_schedule(last_watered_date: Any, frequency_days: Any) -> Tuple[date, int, date]:
    """생성 시 세 필드를 함께 계산합니다: (last, frequency, next)."""
    last = parse_last_watered_date(last_watered_date)
    frequency = parse_watering_frequency(frequency_days)
    return last, frequency, _advance(last, frequency)


def merge_update(existing: Optional[Plant], patch: PlantPatch) -> Plant:
    """
    저장된 식물 기록에 부분 업데이트를 적용한 새 Plant를 반환합니다.

    - 물 주기 관련 필드가 하나라도 전달되면 (전달값 또는 기존값으로) 다음 물 줄 날짜를 다시 계산
    - 둘 다 전달되지 않으면 next_watering_date는 그대로 유지
    - 잘못된 값이 하나라도 있으면 아무것도 반영하지 않고 예외 발생
    """
    if existing is None:
        raise PlantNotFoundError("식물을 찾을 수 없습니다.")

    changes: Dict[str, Any] = {}

    if patch.last_watered_date is not MISSING:
        changes['last_watered_date'] = parse_last_watered_date(patch.last_watered_date)
    if patch.watering_frequency is not MISSING:
        changes['watering_frequency'] = parse_watering_frequency(patch.watering_frequency)

    for name in REQUIRED_TEXT_FIELDS:
        value = getattr(patch, name)
        if value is MISSING:
            continue
        if value is None or not str(value).strip():
            raise PlantValidationError(f"{name}은(는) 비워둘 수 없습니다.")
        changes[name] = str(value).strip()

    if patch.is_indoor is not MISSING:
        if patch.is_indoor is None:
            raise PlantValidationError("is_indoor는 null일 수 없습니다.")
        changes['is_indoor'] = bool(patch.is_indoor)
    if patch.location is not MISSING:
        changes['location'] = patch.location
    if patch.image_url is not MISSING:
        changes['image_url'] = patch.image_url

    if patch.touches_schedule:
        last = changes.get('last_watered_date', existing.last_watered_date)
        frequency = changes.get('watering_frequency', existing.watering_frequency)
        if last is not None and frequency is not None:
            changes['next_watering_date'] = compute_next_watering_date(last, frequency)

    return replace(existing, **changes)
