# yaopets/utils/pagination.py
from typing import Dict, Tuple
from flask import request

DEFAULT_LIMIT = 20
MAX_LIMIT = 100

def pagination_params(default_limit: int = DEFAULT_LIMIT) -> Tuple[int, int]:
    """쿼리 스트링의 limit/offset 값을 읽어 허용 범위로 보정합니다."""
    limit = request.args.get('limit', default_limit, type=int)
    offset = request.args.get('offset', 0, type=int)
    limit = max(1, min(limit or default_limit, MAX_LIMIT))
    offset = max(0, offset or 0)
    return limit, offset

def pagination_meta(total: int, limit: int, offset: int) -> Dict[str, int]:
    """목록 응답에 포함될 pagination 객체를 만듭니다."""
    return {"total": total, "limit": limit, "offset": offset}
