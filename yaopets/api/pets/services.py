# yaopets/api/pets/services.py
import logging
import uuid
from typing import Optional, Dict, Any, List, Tuple
from firebase_admin import firestore

from yaopets.models.pet import PetListing, PetStatus
from yaopets.services.base import BaseFirestoreService

class PetListingService(BaseFirestoreService):
    """실종/발견 신고와 입양 공고(pets 컬렉션)를 관리하는 서비스 클래스."""

    def __init__(self, db=None):
        super().__init__(db)
        self.pets_ref = self.db.collection('pets')

    def create_listing(self, owner_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        owner = self._get_user(owner_id)
        if not owner:
            raise ValueError("등록자를 찾을 수 없습니다.")

        listing = PetListing(
            pet_id=str(uuid.uuid4()),
            owner_id=owner_id,
            owner_name=owner.get('name') or owner.get('username'),
            status=PetStatus(data['status']),
            **{k: data.get(k) for k in ('name', 'species', 'size', 'age', 'address', 'description',
                                         'breed', 'color', 'eye_color', 'contact_phone', 'lat', 'lng')},
            photos=data.get('photos') or []
        )
        listing_data = listing.to_dict()
        self.pets_ref.document(listing.pet_id).set(listing_data)
        logging.info(f"반려동물 게시글 등록 (pet_id: {listing.pet_id}, status: {listing.status.value})")
        return listing_data

    def list_listings(self, status: Optional[str], limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """상태(status)로 필터링할 수 있는 최신순 목록을 반환합니다."""
        query = self.pets_ref
        if status:
            query = query.where('status', '==', PetStatus(status).value)
        query = query.order_by('created_at', direction=firestore.Query.DESCENDING)
        return self._page(query, limit, offset)

    def get_listing(self, pet_id: str) -> Optional[Dict[str, Any]]:
        doc = self.pets_ref.document(pet_id).get()
        return doc.to_dict() if doc.exists else None
