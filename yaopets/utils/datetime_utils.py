# yaopets/utils/datetime_utils.py
"""
Firestore 문서에 저장되는 시간 값을 일관되게 다루기 위한 유틸리티 모듈

- 백엔드의 모든 시간은 UTC timezone-aware datetime으로 통일합니다.
- 클라이언트에는 ISO 8601 문자열로 전달합니다.
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """ISO 포맷 문자열을 UTC datetime으로 파싱합니다. ('Z' 접미사 지원)"""
        if not iso_string:
            raise ValueError("빈 문자열은 파싱할 수 없습니다")
        try:
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'
            dt = dateutil_parser.isoparse(iso_string)
        except (ValueError, OverflowError) as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")
        return DateTimeUtils.ensure_utc(dt)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """timezone-naive datetime은 UTC로 간주하고, 나머지는 UTC로 변환합니다."""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def coerce(value: Any) -> Any:
        """문서에서 읽은 ISO 문자열 시간 값을 UTC datetime으로 바꿉니다. 그 외 값은 그대로 둡니다."""
        if isinstance(value, str) and value:
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, datetime):
            return DateTimeUtils.ensure_utc(value)
        return value

    @staticmethod
    def for_firestore(data: Any) -> Any:
        """
        딕셔너리/리스트를 재귀적으로 순회하며 Firestore에 저장할 수 있도록 변환합니다.
        Firestore는 date 타입을 지원하지 않으므로 UTC 자정 datetime으로 바꿉니다.
        """
        if isinstance(data, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in data.items()}
        if isinstance(data, list):
            return [DateTimeUtils.for_firestore(v) for v in data]
        if isinstance(data, datetime):
            return DateTimeUtils.ensure_utc(data)
        if isinstance(data, date):
            return datetime.combine(data, time.min, tzinfo=timezone.utc)
        return data


def for_firestore(data: Any) -> Any:
    """DateTimeUtils.for_firestore의 단축 함수"""
    return DateTimeUtils.for_firestore(data)
