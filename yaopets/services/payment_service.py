# yaopets/services/payment_service.py
import logging
from typing import Optional, Dict, Any

import stripe
from flask import Flask


class PaymentService:
    """
    Stripe 결제(기부금) 관련 로직을 담당하는 서비스 클래스입니다.
    - 카드 결제 폼용 PaymentIntent 생성
    - 리다이렉트 방식의 Checkout Session 생성
    """

    def __init__(self):
        self.currency = "brl"
        self.min_amount = 100
        self.client_url = ""

    def init_app(self, app: Flask):
        """앱 설정에서 Stripe 키와 통화 정보를 읽어옵니다."""
        secret_key = app.config.get('STRIPE_SECRET_KEY')
        if not secret_key:
            logging.warning("STRIPE_SECRET_KEY가 설정되지 않았습니다. 결제 API 호출은 실패합니다.")
        stripe.api_key = secret_key
        self.currency = app.config.get('PAYMENT_CURRENCY', 'brl')
        self.min_amount = app.config.get('PAYMENT_MIN_AMOUNT', 100)
        self.client_url = app.config.get('CLIENT_URL', '').rstrip('/')

    def validate_amount(self, amount: Any) -> int:
        """금액은 최소 단위 정수(예: 센타보)여야 하며 최소 금액 이상이어야 합니다."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < self.min_amount:
            raise ValueError(f"결제 금액은 {self.min_amount} 이상의 정수여야 합니다.")
        return amount

    @staticmethod
    def _metadata(fundraiser: Optional[str]) -> Dict[str, str]:
        return {"fundraiser": fundraiser} if fundraiser else {}

    def create_payment_intent(self, amount: int, description: Optional[str], fundraiser: Optional[str]) -> str:
        """PaymentIntent를 생성하고 client_secret을 반환합니다."""
        amount = self.validate_amount(amount)
        intent = stripe.PaymentIntent.create(
            amount=amount,
            currency=self.currency,
            description=description or "Donation",
            metadata=self._metadata(fundraiser),
            automatic_payment_methods={"enabled": True},
        )
        logging.info(f"PaymentIntent 생성 완료 (id: {intent.id}, amount: {amount})")
        return intent.client_secret

    def create_checkout_session(self, amount: int, description: Optional[str], fundraiser: Optional[str]) -> str:
        """Checkout Session을 생성하고 결제 페이지 URL을 반환합니다."""
        amount = self.validate_amount(amount)
        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            line_items=[{
                "price_data": {
                    "currency": self.currency,
                    "product_data": {"name": description or "Donation"},
                    "unit_amount": amount,
                },
                "quantity": 1,
            }],
            mode="payment",
            metadata=self._metadata(fundraiser),
            success_url=f"{self.client_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.client_url}/checkout?cancelled=true",
        )
        logging.info(f"Checkout Session 생성 완료 (id: {session.id}, amount: {amount})")
        return session.url
