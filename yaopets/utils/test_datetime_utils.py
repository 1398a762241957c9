# yaopets/utils/test_datetime_utils.py
"""
시간 유틸리티 테스트

사용법: python -m pytest yaopets/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from yaopets.utils.datetime_utils import DateTimeUtils, for_firestore

def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함

def test_parse_iso_datetime_converts_offset():
    dt = DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00-03:00")
    assert dt == datetime(2024, 1, 15, 13, 30, tzinfo=timezone.utc)

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'birthdate': date(2020, 1, 15),
        'timestamp': datetime(2024, 1, 15, 10, 30, tzinfo=timezone(timedelta(hours=-3))),
        'nested': {
            'event_date': date(2023, 12, 25)
        },
        'list_data': [
            {'created_at': datetime(2024, 1, 1)}
        ]
    }

    converted = for_firestore(test_data)

    # date는 datetime으로 변환되어야 함
    assert isinstance(converted['birthdate'], datetime)
    assert isinstance(converted['nested']['event_date'], datetime)
    assert isinstance(converted['list_data'][0]['created_at'], datetime)

    # 모든 datetime은 UTC여야 함
    assert converted['birthdate'].tzinfo == timezone.utc
    assert converted['timestamp'].hour == 13

def test_now_is_utc():
    assert DateTimeUtils.now().tzinfo == timezone.utc

def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

def test_coerce_parses_strings_only():
    assert DateTimeUtils.coerce("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.coerce(datetime(2024, 1, 15, 10, 30)).tzinfo == timezone.utc
    assert DateTimeUtils.coerce(None) is None

def test_user_from_dict_accepts_iso_timestamps():
    from yaopets.models.user import User, UserType
    user = User.from_dict({
        'user_id': 'u1', 'email': 'a@b.com', 'username': 'a',
        'user_type': 'unknown', 'created_at': '2024-01-15T10:30:00Z'
    })
    assert user.user_type == UserType.TUTOR
    assert user.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
