# plant_care/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from plant_care.utils.datetime_utils import DateTimeUtils

DEFAULT_PROFILE_PIC = "https://www.nicepng.com/png/detail/933-9332131_profile-picture-default-png.png"


@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    user_id: str
    name: str
    email: str
    password_hash: str
    profile_pic: str = DEFAULT_PROFILE_PIC
    created_at: Optional[datetime] = field(default_factory=DateTimeUtils.now)
