# plant_care/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 날짜 처리를 위한 유틸리티 모듈

이 모듈의 목적:
1. 요청으로 들어온 날짜 문자열 파싱을 한 곳에서 처리
2. Firestore 호환성 보장 (date 타입이 없으므로 UTC 자정 datetime으로 저장)
3. 물 주기 계산에 쓰이는 달력 기준 날짜 덧셈 제공
"""

import logging
from datetime import datetime, date, timezone, time, timedelta
from typing import Any
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """날짜/시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        날짜 문자열을 date 객체로 파싱

        지원 포맷:
        - 2024-01-15
        - 2024/01/15
        - 2024-01-15T10:30:00Z (날짜 부분만 사용)
        """
        try:
            if not date_string or not date_string.strip():
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            dt = dateutil_parser.parse(date_string)
            # timezone 정보가 있으면 UTC 기준 날짜로 맞춤
            if dt.tzinfo is not None:
                dt = dt.astimezone(timezone.utc)
            return dt.date()

        except (ValueError, OverflowError, TypeError) as e:
            logger.warning(f"날짜 문자열 파싱 실패: {date_string!r} - {e}")
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")

    @staticmethod
    def to_date(value: Any) -> date:
        """
        Firestore Timestamp, datetime, date, 문자열을 date로 통일

        datetime은 UTC로 정규화한 뒤 날짜 부분만 사용합니다.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            return DateTimeUtils.parse_date_string(value)
        raise ValueError(f"date로 변환할 수 없는 값입니다: {value!r} ({type(value).__name__})")

    @staticmethod
    def add_days(d: date, days: int) -> date:
        """달력 기준으로 날짜에 일 수를 더함 (월/연도 넘어감은 date 연산에 맡김)"""
        return d + timedelta(days=days)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)

        elif isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)

        elif isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]

        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC timezone-aware datetime으로 정규화
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)

        elif isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]

        return obj

    @staticmethod
    def validate_date_field(value: Any, field_name: str = "date") -> date:
        """
        API 요청에서 받은 date 값을 검증하고 변환

        Args:
            value: 검증할 값 (문자열, date/datetime 객체)
            field_name: 필드명 (오류 메시지용)

        Returns:
            검증된 date 객체

        Raises:
            ValueError: 값이 없거나 파싱할 수 없는 경우
        """
        if value is None:
            raise ValueError(f"{field_name}은 필수 필드입니다")
        if isinstance(value, (str, date)):
            try:
                return DateTimeUtils.to_date(value)
            except ValueError:
                raise ValueError(f"잘못된 {field_name} 형식입니다: {value}")
        raise ValueError(f"{field_name}은 문자열 또는 date/datetime 객체여야 합니다")
