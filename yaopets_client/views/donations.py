# yaopets_client/views/donations.py
import logging
from typing import Any, Dict, List, Optional

from yaopets_client.effects import UiEffects, LOGIN_ROUTE
from yaopets_client.errors import ApiError
from yaopets_client.normalize import extract_collection, normalize_donation
from yaopets_client.views.pets import chat_route

logger = logging.getLogger(__name__)

DONATION_CATEGORIES = ("food", "accessory", "toy", "medicine", "equipment", "other")
DONATION_CONDITIONS = ("new", "almost new", "used - good", "used - worn")
ITEM_FIELDS = ("title", "description", "category", "condition", "location")
# 결제 금액은 최소 화폐 단위(센타보)의 정수입니다.
MIN_DONATION_AMOUNT = 100


class DonationsView:
    """물품 기부 목록, 물품 등록, 관심 표시, 금전 후원"""

    def __init__(self, api, session, effects: UiEffects):
        self.api = api
        self.session = session
        self.effects = effects
        self.donations: List[Dict[str, Any]] = []
        self.category: Optional[str] = None
        self.loading = False
        self.closed = False

    @property
    def filtered(self) -> List[Dict[str, Any]]:
        if not self.category:
            return self.donations
        return [d for d in self.donations if d['category'] == self.category]

    def set_category(self, category: Optional[str]) -> None:
        if category is not None and category not in DONATION_CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        self.category = category

    def close(self) -> None:
        self.closed = True

    async def load(self) -> bool:
        self.loading = True
        try:
            data = await self.api.donations.list()
        except ApiError as e:
            logger.warning(f"기부 목록 조회 실패: {e}")
            if not self.closed:
                self.effects.error("Error loading donations", "Please try again later.")
            return False
        finally:
            self.loading = False

        if self.closed:
            return False
        self.donations = [normalize_donation(d) for d in extract_collection(data, 'donations')]
        return True

    async def register_item(self, form: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.session.is_authenticated:
            self.effects.error("Error", "You must be logged in to donate an item.")
            self.effects.navigate(LOGIN_ROUTE)
            return None

        values = {f: str(form.get(f) or '').strip() for f in ITEM_FIELDS}
        if (not all(values.values())
                or values['category'] not in DONATION_CATEGORIES
                or values['condition'] not in DONATION_CONDITIONS):
            self.effects.error("Fill all fields", "Please fill all item fields.")
            return None

        payload = {
            "title": values['title'],
            "description": values['description'],
            "category": values['category'],
            "condition": values['condition'],
            "location": {"address": values['location']},
        }
        if form.get('photos'):
            payload['photos'] = list(form['photos'])

        try:
            created = await self.api.donations.create(payload)
        except ApiError as e:
            logger.warning(f"기부 물품 등록 실패: {e}")
            self.effects.error("Error", "Could not register the item. Please try again.")
            return None

        donation = normalize_donation(created)
        self.donations = [donation] + self.donations
        self.effects.notify("Item registered successfully!", "Your item is now available for donation.")
        return donation

    def express_interest(self, donation_id: str) -> bool:
        """기부자와의 대화를 시작합니다. 본인 물품에는 관심을 표시할 수 없습니다."""
        donation = next((d for d in self.donations if d['id'] == donation_id), None)
        if donation is None:
            return False
        if not self.session.is_authenticated:
            self.effects.error("Error", "You must be logged in to express interest.")
            self.effects.navigate(LOGIN_ROUTE)
            return False
        if donation['donor_id'] and donation['donor_id'] == self.session.user_id:
            self.effects.notify("Notice", "You cannot show interest in your own item.")
            return False
        if not donation['donor_id']:
            self.effects.error("Error", "Could not start chat. Donor not found.")
            return False

        self.effects.notify(
            "Interest sent!",
            f"A conversation was started with {donation['donor_name']} about \"{donation['title']}\".")
        self.effects.navigate(chat_route(donation['donor_id']))
        return True

    async def donate_money(self, amount: Any, checkout: bool = False,
                           description: Optional[str] = None, fundraiser: Optional[str] = None) -> Optional[str]:
        """
        금전 후원
        - checkout=False: PaymentIntent를 만들고 clientSecret을 반환합니다.
        - checkout=True: Checkout 세션을 만들고 결제 페이지를 엽니다.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < MIN_DONATION_AMOUNT:
            self.effects.error("Invalid amount", "Please enter a valid donation amount.")
            return None
        try:
            if checkout:
                data = await self.api.payments.create_checkout_session(amount, description, fundraiser)
            else:
                data = await self.api.payments.create_payment_intent(amount, description, fundraiser)
        except ApiError as e:
            logger.warning(f"후원 결제 요청 실패: {e}")
            self.effects.error("Error", "Could not process the donation. Please try again.")
            return None

        if checkout:
            url = data.get('url')
            if url:
                self.effects.open_url(url)
            return url
        return data.get('clientSecret')
