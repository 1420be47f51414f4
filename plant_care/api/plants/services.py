# plant_care/api/plants/services.py
import logging
import uuid
from contextlib import contextmanager
from typing import Dict, Any, List, Optional

from google.api_core.exceptions import GoogleAPICallError

from plant_care.core.exceptions import PlantNotFoundError, StorageError
from plant_care.models.plant import Plant
from plant_care.utils.datetime_utils import DateTimeUtils
from .schedule import PlantPatch, merge_update, resolve_schedule

logger = logging.getLogger(__name__)


@contextmanager
def _storage_guard(action: str):
    """Firestore 호출 실패를 StorageError로 변환합니다."""
    try:
        yield
    except GoogleAPICallError as e:
        logger.error(f"Firestore {action} 실패: {e}", exc_info=True)
        raise StorageError(f"식물 정보 {action} 중 저장소 오류가 발생했습니다.") from e


class PlantService:
    """식물 기록의 생성/조회/수정/삭제와 물 주기 계산 결과 저장을 전담하는 서비스."""

    def __init__(self, db):
        # Firestore 클라이언트는 create_app에서 주입됩니다 (테스트에서는 가짜 클라이언트).
        self.db = db
        self.plants_ref = self.db.collection('plants')
        logger.info("PlantService initialized.")

    def create_plant(self, user_id: str, plant_data: Dict[str, Any], image_url: Optional[str] = None) -> Plant:
        """식물을 등록하고 마지막 물 준 날짜/주기/다음 물 줄 날짜를 함께 저장합니다."""
        last, frequency, next_date = resolve_schedule(
            plant_data.get('last_watered_date'), plant_data.get('watering_frequency')
        )
        now = DateTimeUtils.now()
        new_plant = Plant(
            plant_id=str(uuid.uuid4()),
            user_id=user_id,
            plant_name=plant_data['plant_name'],
            species=plant_data['species'],
            watering_frequency=frequency,
            last_watered_date=last,
            next_watering_date=next_date,
            is_indoor=plant_data.get('is_indoor', True),
            location=plant_data.get('location'),
            image_url=image_url,
            created_at=now,
            updated_at=now
        )
        with _storage_guard("저장"):
            self.plants_ref.document(new_plant.plant_id).set(new_plant.to_firestore())

        logger.info(f"Plant {new_plant.plant_id} created for user {user_id} (next watering: {next_date})")
        return new_plant

    def find_plant(self, plant_id: str) -> Optional[Plant]:
        with _storage_guard("조회"):
            doc = self.plants_ref.document(plant_id).get()
        if not doc.exists:
            return None
        return Plant.from_dict(doc.to_dict())

    def get_plant(self, plant_id: str, user_id: str) -> Plant:
        """[소유자 전용] 식물 한 건을 조회합니다."""
        plant = self.find_plant(plant_id)
        if plant is None:
            raise PlantNotFoundError("해당 ID의 식물을 찾을 수 없습니다.")
        if plant.user_id != user_id:
            raise PermissionError("이 식물에 접근할 권한이 없습니다.")
        return plant

    def list_plants_by_user(self, user_id: str) -> List[Plant]:
        with _storage_guard("목록 조회"):
            docs = self.plants_ref.where('user_id', '==', user_id).stream()
            return [Plant.from_dict(doc.to_dict()) for doc in docs]

    def list_all_plants(self) -> List[Plant]:
        with _storage_guard("전체 조회"):
            return [Plant.from_dict(doc.to_dict()) for doc in self.plants_ref.stream()]

    def update_plant(self, plant_id: str, user_id: str, patch: PlantPatch) -> Plant:
        """
        부분 업데이트. 기존 기록을 읽어 merge_update로 병합한 뒤 변경된 필드만 기록합니다.
        검증 오류는 쓰기 전에 모두 발생하므로 부분 반영되지 않습니다.
        """
        existing = self.find_plant(plant_id)
        if existing is not None and existing.user_id != user_id:
            raise PermissionError("이 식물을 수정할 권한이 없습니다.")

        merged = merge_update(existing, patch)

        changed_fields = set(patch.supplied())
        if patch.touches_schedule:
            changed_fields.add('next_watering_date')
        merged.updated_at = DateTimeUtils.now()
        changed_fields.add('updated_at')

        update_data = {name: getattr(merged, name) for name in changed_fields}
        with _storage_guard("수정"):
            self.plants_ref.document(plant_id).update(DateTimeUtils.for_firestore(update_data))

        logger.info(f"Plant {plant_id} updated with fields: {sorted(changed_fields)}")
        return merged

    def delete_plant(self, plant_id: str, user_id: str) -> None:
        self.get_plant(plant_id, user_id)
        with _storage_guard("삭제"):
            self.plants_ref.document(plant_id).delete()
        logger.info(f"Plant {plant_id} deleted by user {user_id}")
