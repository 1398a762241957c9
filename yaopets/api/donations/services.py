# yaopets/api/donations/services.py
import logging
import uuid
from typing import Optional, Dict, Any, List, Tuple
from firebase_admin import firestore

from yaopets.models.donation import DonationItem, DonationCategory, DonationCondition
from yaopets.services.base import BaseFirestoreService

class DonationService(BaseFirestoreService):
    """기부 물품(donations 컬렉션) 등록과 조회를 담당합니다."""

    def __init__(self, db=None):
        super().__init__(db)
        self.donations_ref = self.db.collection('donations')

    def create_donation(self, donor_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        donor = self._get_user(donor_id)
        if not donor:
            raise ValueError("기부자를 찾을 수 없습니다.")

        item = DonationItem(
            donation_id=str(uuid.uuid4()),
            donor_id=donor_id,
            donor_name=donor.get('name') or donor.get('username') or "Anonymous",
            title=data['title'],
            description=data['description'],
            category=DonationCategory(data['category']),
            condition=DonationCondition(data['condition']),
            location={'address': data['location']['address']},
            photos=data.get('photos') or []
        )
        item_data = item.to_dict()
        self.donations_ref.document(item.donation_id).set(item_data)
        logging.info(f"기부 물품 등록 (donation_id: {item.donation_id})")
        return item_data

    def list_donations(self, category: Optional[str], limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        query = self.donations_ref.where('available', '==', True)
        if category:
            query = query.where('category', '==', DonationCategory(category).value)
        query = query.order_by('created_at', direction=firestore.Query.DESCENDING)
        return self._page(query, limit, offset)
