# yaopets/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from yaopets.utils.datetime_utils import DateTimeUtils

MEDIA_TYPES = ("image", "gif", "video")
VISIBILITY_TYPES = ("public", "followers", "private")
POST_TYPES = ("regular", "event", "question", "story")

@dataclass
class Author:
    """Post/Comment 문서 내부에 저장될 작성자 정보."""
    user_id: str
    username: str
    profile_image: Optional[str] = None

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    is_liked / is_saved 는 조회하는 사용자마다 다른 값이므로 문서에 저장하지 않습니다.
    """
    post_id: str
    user_id: str
    author: Author
    content: str
    media_urls: List[str] = field(default_factory=list)
    media_type: str = "image"
    visibility_type: str = "public"
    post_type: str = "regular"
    location: Optional[Dict[str, Any]] = None
    likes_count: int = 0
    comments_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
