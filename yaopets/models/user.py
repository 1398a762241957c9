# yaopets/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from yaopets.utils.datetime_utils import DateTimeUtils

class UserType(Enum):
    TUTOR = "tutor"
    VETERINARIAN = "veterinarian"
    VOLUNTEER = "volunteer"
    DONOR = "donor"
    ADMIN = "admin"

class AuthProvider(Enum):
    LOCAL = "local"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"

# 소셜 로그인 제공자별로 사용자 문서에 저장되는 ID 필드 이름
PROVIDER_ID_FIELDS = {
    AuthProvider.GOOGLE: "google_id",
    AuthProvider.FACEBOOK: "facebook_id",
    AuthProvider.LINKEDIN: "linkedin_id",
}

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    Enum 필드는 저장 시 문자열 값으로 변환됩니다. (to_dict 참고)
    """
    user_id: str
    email: str
    username: str
    name: Optional[str] = None
    password_hash: Optional[str] = None  # 소셜 로그인 전용 계정은 None
    profile_image: str = ""
    city: str = ""
    bio: str = ""
    website: str = ""
    user_type: UserType = UserType.TUTOR
    points: int = 0
    level: str = "Beginner"
    verified: bool = False
    achievement_badges: List[str] = field(default_factory=list)
    provider: AuthProvider = AuthProvider.LOCAL
    google_id: Optional[str] = None
    facebook_id: Optional[str] = None
    linkedin_id: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다."""
        data = dict(self.__dict__)
        data['achievement_badges'] = list(self.achievement_badges)
        data['user_type'] = self.user_type.value
        data['provider'] = self.provider.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Firestore 문서 딕셔너리로부터 User 인스턴스를 생성합니다."""
        processed = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        try:
            processed['user_type'] = UserType(processed.get('user_type', UserType.TUTOR.value))
        except ValueError:
            processed['user_type'] = UserType.TUTOR
        try:
            processed['provider'] = AuthProvider(processed.get('provider', AuthProvider.LOCAL.value))
        except ValueError:
            processed['provider'] = AuthProvider.LOCAL
        for key in ('created_at', 'updated_at'):
            if key in processed:
                processed[key] = DateTimeUtils.coerce(processed[key])
        return cls(**processed)
