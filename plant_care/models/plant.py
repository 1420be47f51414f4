# plant_care/models/plant.py
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional, Dict, Any
import logging

from plant_care.core.exceptions import StorageError
from plant_care.utils.datetime_utils import DateTimeUtils


@dataclass
class Plant:
    """
    Firestore 'plants' 컬렉션 문서 구조.
    next_watering_date는 last_watered_date + watering_frequency(일)로 항상 파생되는 값이며,
    요청으로 직접 설정되지 않습니다.
    """
    plant_id: str
    user_id: str
    plant_name: str
    species: str
    watering_frequency: int
    last_watered_date: date
    next_watering_date: Optional[date] = None
    is_indoor: bool = True
    location: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Plant":
        """
        Firestore에서 받은 딕셔너리로부터 Plant 인스턴스를 생성합니다.
        UTC 자정 datetime으로 저장된 날짜 필드를 date 객체로 되돌립니다.
        """
        processed_data = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}

        for key in ('last_watered_date', 'next_watering_date'):
            value = processed_data.get(key)
            if value is not None:
                processed_data[key] = DateTimeUtils.to_date(value)

        for key in ('created_at', 'updated_at'):
            if processed_data.get(key) is not None:
                processed_data[key] = DateTimeUtils.from_firestore(processed_data[key])

        frequency = processed_data.get('watering_frequency')
        if frequency is not None and not isinstance(frequency, int):
            # 숫자 필드가 float로 저장된 경우 정수값만 받아들임
            if isinstance(frequency, float) and frequency.is_integer():
                processed_data['watering_frequency'] = int(frequency)
            else:
                logging.error(f"Invalid stored watering_frequency {frequency!r} for plant {processed_data.get('plant_id')}")
                raise StorageError(f"저장된 물 주기 값이 올바르지 않습니다: {frequency!r}")

        return cls(**processed_data)

    def to_firestore(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리 (date -> UTC 자정 datetime)."""
        return DateTimeUtils.for_firestore(asdict(self))
