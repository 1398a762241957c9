# yaopets/utils/__init__.py
"""
유틸리티 모듈 패키지

프로젝트 전체에서 공통으로 사용되는 시간 처리 및 페이지네이션 함수들을 포함합니다.
"""

from .datetime_utils import DateTimeUtils, for_firestore
from .pagination import pagination_params, pagination_meta

__all__ = [
    'DateTimeUtils', 'for_firestore',
    'pagination_params', 'pagination_meta'
]
