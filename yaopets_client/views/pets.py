# yaopets_client/views/pets.py
import logging
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from yaopets_client.effects import UiEffects, LOGIN_ROUTE
from yaopets_client.errors import ApiError
from yaopets_client.normalize import PET_STATUS_LABELS, extract_collection, normalize_pet

logger = logging.getLogger(__name__)

PETS_ROUTE = "/pets"
PET_TABS = tuple(PET_STATUS_LABELS)  # ('adoption', 'lost', 'found')
PET_SIZES = ("small", "medium", "large")
REQUIRED_REPORT_FIELDS = ("name", "species", "size", "age", "status", "address", "description")
OPTIONAL_REPORT_FIELDS = {
    "breed": "breed",
    "color": "color",
    "eye_color": "eyeColor",
    "contact_phone": "contactPhone",
    "photos": "photos",
    "lat": "lat",
    "lng": "lng",
}


class PetAction(Enum):
    CONTACT_OWNER = "contact-owner"
    VIEW_LOCATION = "view-location"
    NONE = "none"


def map_url(address: str) -> str:
    return f"https://www.google.com/maps/search/?api=1&query={quote(address, safe='')}"

def chat_route(owner_id: str) -> str:
    return f"/chat/{owner_id}"

def primary_action(pet: Dict[str, Any], viewer_id: Optional[str]) -> PetAction:
    """
    상태별 주요 동작
    - adoption: 보호자에게 연락 (본인 게시글이면 동작 없음)
    - lost / found: 지도에서 위치 보기
    """
    if pet['status'] == 'adoption':
        if viewer_id and pet.get('owner_id') == viewer_id:
            return PetAction.NONE
        return PetAction.CONTACT_OWNER
    return PetAction.VIEW_LOCATION

def action_label(pet: Dict[str, Any]) -> str:
    return "I want to adopt" if pet['status'] == 'adoption' else "View on map"


class _PetActions:
    """목록/상세 화면이 공유하는 연락하기/지도 열기 동작"""

    def __init__(self, session, effects: UiEffects):
        self.session = session
        self.effects = effects

    def open_map(self, pet: Dict[str, Any]) -> str:
        url = map_url(pet['address'])
        self.effects.notify("Opening map", f"Navigating to {pet['address']}")
        self.effects.open_url(url)
        return url

    def contact_owner(self, pet: Dict[str, Any]) -> bool:
        if not self.session.is_authenticated:
            self.effects.error("Login required", "Login to contact the owner")
            self.effects.navigate(LOGIN_ROUTE)
            return False
        if pet.get('owner_id') and pet['owner_id'] == self.session.user_id:
            self.effects.notify("Notice", "You are the owner of this pet.")
            return False
        if not pet.get('owner_id'):
            self.effects.error("Error", "Could not start chat. Owner not found.")
            return False
        self.effects.navigate(chat_route(pet['owner_id']))
        return True

    def run_primary_action(self, pet: Dict[str, Any]) -> bool:
        action = primary_action(pet, self.session.user_id)
        if action == PetAction.VIEW_LOCATION:
            self.open_map(pet)
            return True
        if action == PetAction.CONTACT_OWNER:
            return self.contact_owner(pet)
        self.effects.notify("Notice", "You are the owner of this pet.")
        return False


class PetsView(_PetActions):
    """입양/실종/발견 탭으로 나뉜 반려동물 목록과 신고 폼"""

    def __init__(self, api, session, effects: UiEffects):
        super().__init__(session, effects)
        self.api = api
        self.pets: List[Dict[str, Any]] = []
        self.active_tab = "adoption"
        self.loading = False
        self.error: Optional[str] = None
        self.closed = False

    @property
    def filtered(self) -> List[Dict[str, Any]]:
        return [pet for pet in self.pets if pet['status'] == self.active_tab]

    def set_tab(self, tab: str) -> None:
        if tab not in PET_TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab

    def close(self) -> None:
        self.closed = True

    async def load(self) -> bool:
        self.loading = True
        try:
            data = await self.api.pets.list()
        except ApiError as e:
            logger.warning(f"반려동물 목록 조회 실패: {e}")
            if not self.closed:
                self.pets = []
                self.error = "Unable to fetch pets. Please try again later."
                self.effects.error("Error", self.error)
            return False
        finally:
            self.loading = False

        if self.closed:
            return False
        self.error = None
        self.pets = [normalize_pet(p) for p in extract_collection(data, 'pets')]
        return True

    def primary_action(self, pet_id: str) -> bool:
        pet = next((p for p in self.pets if p['id'] == pet_id), None)
        if pet is None:
            return False
        return self.run_primary_action(pet)

    async def report_pet(self, form: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """실종/발견 신고 및 입양 공고 등록. 성공하면 목록 맨 앞에 추가하고 해당 탭으로 이동합니다."""
        if not self.session.is_authenticated:
            self.effects.error("Login required", "You must be logged in to report a pet.")
            self.effects.navigate(LOGIN_ROUTE)
            return None

        missing = [f for f in REQUIRED_REPORT_FIELDS if not str(form.get(f) or '').strip()]
        if missing or form['status'] not in PET_TABS or form['size'] not in PET_SIZES:
            self.effects.error("Fill all fields", "Please fill all required fields.")
            return None

        payload = {f: str(form[f]).strip() for f in REQUIRED_REPORT_FIELDS}
        for key, wire_key in OPTIONAL_REPORT_FIELDS.items():
            if form.get(key) not in (None, '', []):
                payload[wire_key] = form[key]

        try:
            created = await self.api.pets.create(payload)
        except ApiError as e:
            logger.warning(f"반려동물 등록 실패: {e}")
            self.effects.error("Error", "Could not register the pet. Please try again.")
            return None

        pet = normalize_pet(created)
        self.pets = [pet] + self.pets
        self.active_tab = pet['status']
        self.effects.notify("Pet registered", f"{pet['name']} was registered successfully.")
        return pet


class PetDetailsView(_PetActions):
    def __init__(self, api, session, effects: UiEffects, pet_id: str):
        super().__init__(session, effects)
        self.api = api
        self.pet_id = pet_id
        self.pet: Optional[Dict[str, Any]] = None
        self.loading = False
        self.closed = False

    async def load(self) -> bool:
        self.loading = True
        try:
            data = await self.api.pets.get(self.pet_id)
        except ApiError as e:
            if self.closed:
                return False
            if e.is_not_found:
                self.effects.error("Pet not found", "The requested pet does not exist")
                self.effects.navigate(PETS_ROUTE)
            else:
                logger.warning(f"반려동물 상세 조회 실패 (pet_id: {self.pet_id}): {e}")
                self.effects.error("Error", "Failed to load pet details")
            return False
        finally:
            self.loading = False

        if self.closed:
            return False
        self.pet = normalize_pet(data)
        return True

    @property
    def show_action_button(self) -> bool:
        return self.pet is not None and primary_action(self.pet, self.session.user_id) != PetAction.NONE

    @property
    def action_label(self) -> Optional[str]:
        return action_label(self.pet) if self.pet else None

    def main_action(self) -> bool:
        if self.pet is None:
            return False
        return self.run_primary_action(self.pet)

    def go_back(self) -> None:
        self.effects.navigate(PETS_ROUTE)

    def close(self) -> None:
        self.closed = True
