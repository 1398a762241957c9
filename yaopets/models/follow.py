# yaopets/models/follow.py
from dataclasses import dataclass, field
from datetime import datetime

from yaopets.utils.datetime_utils import DateTimeUtils

def follow_doc_id(follower_id: str, followee_id: str) -> str:
    """팔로우 문서 ID. 같은 관계가 두 번 저장되지 않도록 두 ID를 조합합니다."""
    return f"{follower_id}_{followee_id}"

@dataclass
class Follow:
    """Firestore 'follows' 컬렉션 문서 구조. follower → followee 방향의 관계입니다."""
    follower_id: str
    followee_id: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
