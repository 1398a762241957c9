# yaopets/models/donation.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from yaopets.utils.datetime_utils import DateTimeUtils

class DonationCategory(Enum):
    FOOD = "food"
    ACCESSORY = "accessory"
    TOY = "toy"
    MEDICINE = "medicine"
    EQUIPMENT = "equipment"
    OTHER = "other"

class DonationCondition(Enum):
    NEW = "new"
    ALMOST_NEW = "almost new"
    USED_GOOD = "used - good"
    USED_WORN = "used - worn"

@dataclass
class DonationItem:
    """
    Firestore 'donations' 컬렉션 문서 구조. 기부 물품은 한 명의 기부자(donor)에 속합니다.
    """
    donation_id: str
    donor_id: str
    donor_name: str
    title: str
    description: str
    category: DonationCategory
    condition: DonationCondition
    location: Dict[str, Any]  # {'address': ...}
    photos: List[str] = field(default_factory=list)
    available: bool = True
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.__dict__)
        data['photos'] = list(self.photos)
        data['category'] = self.category.value
        data['condition'] = self.condition.value
        return data
