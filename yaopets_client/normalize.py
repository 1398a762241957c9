# yaopets_client/normalize.py
"""
서버 응답을 클라이언트 모델(dict)로 정규화하는 경계 모듈

- 식별자는 'id' 또는 '_id' 어느 쪽으로 와도 문자열 'id' 하나로 맞춥니다.
- 목록 응답은 배열 그대로이거나 {<컬렉션>: [...], pagination: {total}} 형태일 수 있습니다.
- 화면 코드는 이 모듈을 거친 snake_case 키만 사용합니다.
"""

from typing import Any, Dict, List, Optional

PET_STATUS_LABELS = {
    "adoption": "Available",
    "lost": "Lost",
    "found": "Found",
}

def _first(raw: Dict[str, Any], *keys, default=None):
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default

def normalize_id(record: Any) -> Optional[str]:
    if not isinstance(record, dict):
        return None
    value = _first(record, 'id', '_id')
    return str(value) if value is not None else None

def extract_collection(data: Any, key: str) -> List[Any]:
    """배열 응답과 {key: [...]} 응답을 모두 리스트로 변환합니다."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get(key)
        if isinstance(items, list):
            return items
        # 컬렉션 이름이 다른 래핑 응답 (예: 팔로워 목록이 {posts: [...]} 로 오는 경우)
        for value in data.values():
            if isinstance(value, list):
                return value
    return []

def extract_total(data: Any, key: str) -> int:
    """전체 개수. pagination.total 또는 total이 있으면 그 값을, 없으면 받은 목록 길이를 사용합니다."""
    if isinstance(data, dict):
        pagination = data.get('pagination')
        if isinstance(pagination, dict) and pagination.get('total') is not None:
            return int(pagination['total'])
        if data.get('total') is not None:
            return int(data['total'])
    return len(extract_collection(data, key))

def normalize_author(raw: Any, fallback_id: Optional[str] = None) -> Dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    return {
        'id': normalize_id(raw) or fallback_id,
        'username': raw.get('username') or 'User',
        'profile_image': _first(raw, 'profileImage', 'profile_image', default=''),
    }

def normalize_user(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'id': normalize_id(raw),
        'username': raw.get('username') or 'User',
        'name': raw.get('name') or raw.get('username') or '',
        'email': raw.get('email'),
        'profile_image': _first(raw, 'profileImage', 'profile_image', default=''),
        'user_type': _first(raw, 'userType', 'user_type', default='tutor'),
        'bio': raw.get('bio') or '',
        'city': raw.get('city') or '',
        'website': raw.get('website') or '',
        'points': raw.get('points') or 0,
        'level': raw.get('level') or 'Beginner',
        'verified': bool(raw.get('verified')),
        'followers_count': _first(raw, 'followersCount', default=0),
        'following_count': _first(raw, 'followingCount', default=0),
        'posts_count': _first(raw, 'postsCount', default=0),
        'is_following': bool(raw.get('isFollowing')),
    }

def normalize_post(raw: Dict[str, Any]) -> Dict[str, Any]:
    user_id = _first(raw, 'userId')
    author = normalize_author(raw.get('user'), fallback_id=str(user_id) if user_id is not None else None)
    media_urls = raw.get('mediaUrls')
    return {
        'id': normalize_id(raw),
        'user_id': author['id'],
        'user': author,
        'content': raw.get('content') or '',
        'media_urls': list(media_urls) if isinstance(media_urls, list) else [],
        'media_type': raw.get('mediaType') or 'image',
        'visibility_type': raw.get('visibilityType') or 'public',
        'post_type': raw.get('postType') or 'regular',
        'location': raw.get('location') or None,
        'created_at': raw.get('createdAt'),
        'likes_count': max(0, raw.get('likesCount') or 0),
        'comments_count': raw.get('commentsCount') or 0,
        'is_liked': bool(raw.get('isLiked')),
        'is_saved': bool(raw.get('isSaved')),
    }

def normalize_comment(raw: Dict[str, Any]) -> Dict[str, Any]:
    user_id = _first(raw, 'userId')
    author = normalize_author(raw.get('user'), fallback_id=str(user_id) if user_id is not None else None)
    return {
        'id': normalize_id(raw),
        'post_id': raw.get('postId'),
        'user_id': author['id'],
        'user': author,
        'content': raw.get('content') or '',
        'created_at': raw.get('createdAt'),
        'likes_count': max(0, raw.get('likesCount') or 0),
        'is_liked': bool(raw.get('isLiked')),
    }

def normalize_pet(raw: Dict[str, Any]) -> Dict[str, Any]:
    owner = raw.get('user') if isinstance(raw.get('user'), dict) else {}
    photos = raw.get('photos') if isinstance(raw.get('photos'), list) else []
    status = raw.get('status')
    if status not in PET_STATUS_LABELS:
        status = 'adoption'
    owner_id = normalize_id(owner) or raw.get('ownerId')
    return {
        'id': normalize_id(raw),
        'name': raw.get('name') or 'Pet for adoption',
        'species': raw.get('species') or 'Not specified',
        'breed': raw.get('breed'),
        'size': raw.get('size') or 'Medium',
        'age': raw.get('age') or 'Not specified',
        'color': raw.get('color'),
        'eye_color': raw.get('eyeColor'),
        'status': status,
        'status_label': PET_STATUS_LABELS[status],
        'address': raw.get('address') or 'Not informed',
        'description': raw.get('description') or raw.get('content') or 'New pet for adoption',
        'contact_phone': raw.get('contactPhone'),
        'owner_id': str(owner_id) if owner_id is not None else None,
        'owner_name': owner.get('name') or raw.get('ownerName'),
        'photos': photos,
        'image_url': photos[0] if photos else raw.get('imageUrl'),
        'lat': raw.get('lat'),
        'lng': raw.get('lng'),
    }

def normalize_donation(raw: Dict[str, Any]) -> Dict[str, Any]:
    donor = raw.get('user') if isinstance(raw.get('user'), dict) else {}
    location = raw.get('location')
    if isinstance(location, dict):
        location = location.get('address') or ''
    photos = raw.get('photos') if isinstance(raw.get('photos'), list) else []
    donor_id = raw.get('donorId') or normalize_id(donor)
    return {
        'id': normalize_id(raw),
        'title': raw.get('title') or '',
        'description': raw.get('description') or '',
        'category': raw.get('category'),
        'condition': raw.get('condition'),
        'location': location or '',
        'image': photos[0] if photos else raw.get('image'),
        'donor_name': raw.get('donorName') or donor.get('username') or donor.get('name') or 'Anonymous',
        'donor_id': str(donor_id) if donor_id else '',
    }
