# yaopets/models/pet.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from yaopets.utils.datetime_utils import DateTimeUtils

class PetStatus(Enum):
    """반려동물 게시글의 상태. 세 가지 중 정확히 하나만 가집니다."""
    LOST = "lost"
    FOUND = "found"
    ADOPTION = "adoption"

@dataclass
class PetListing:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    실종/발견 신고와 입양 공고를 하나의 컬렉션에서 status로 구분합니다.
    """
    pet_id: str
    owner_id: str
    owner_name: Optional[str]
    name: str
    species: str
    size: str
    age: str
    status: PetStatus
    address: str
    description: str
    breed: Optional[str] = None
    color: Optional[str] = None
    eye_color: Optional[str] = None
    contact_phone: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    lat: Optional[float] = None
    lng: Optional[float] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data['photos'] = list(self.photos)
        data['status'] = self.status.value
        return data
