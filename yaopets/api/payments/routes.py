# yaopets/api/payments/routes.py
import logging
import stripe
from flask import Blueprint, request, jsonify, current_app
from marshmallow import Schema, fields, validate, ValidationError

payments_bp = Blueprint('payments_bp', __name__)

class PaymentRequestSchema(Schema):
    """기부금 결제 요청. amount는 통화의 최소 단위(센타보) 정수입니다."""
    amount = fields.Int(required=True, strict=True)
    description = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=200))
    fundraiser = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=100))


def _load_payment_request():
    data = PaymentRequestSchema().load(request.get_json() or {})
    current_app.services['payments'].validate_amount(data['amount'])
    return data

def _invalid_amount(message):
    return jsonify({"error_code": "INVALID_AMOUNT", "message": message}), 400


@payments_bp.route('/create-payment-intent', methods=['POST'])
def create_payment_intent():
    """카드 결제 폼에서 사용할 PaymentIntent를 생성하고 clientSecret을 반환합니다."""
    payment_service = current_app.services['payments']
    try:
        data = _load_payment_request()
    except ValidationError as err:
        return _invalid_amount(err.messages)
    except ValueError as e:
        return _invalid_amount(str(e))

    try:
        client_secret = payment_service.create_payment_intent(data['amount'], data['description'], data['fundraiser'])
        return jsonify({"clientSecret": client_secret}), 200
    except stripe.StripeError as e:
        logging.error(f"PaymentIntent 생성 실패: {e}", exc_info=True)
        return jsonify({"error_code": "PAYMENT_PROVIDER_ERROR", "message": "결제 요청을 처리할 수 없습니다."}), 502
    except Exception as e:
        logging.error(f"PaymentIntent 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "PAYMENT_FAILED", "message": "결제 요청 중 오류가 발생했습니다."}), 500


@payments_bp.route('/create-checkout-session', methods=['POST'])
def create_checkout_session():
    """Stripe Checkout 결제 페이지 URL을 생성합니다."""
    payment_service = current_app.services['payments']
    try:
        data = _load_payment_request()
    except ValidationError as err:
        return _invalid_amount(err.messages)
    except ValueError as e:
        return _invalid_amount(str(e))

    try:
        url = payment_service.create_checkout_session(data['amount'], data['description'], data['fundraiser'])
        return jsonify({"url": url}), 200
    except stripe.StripeError as e:
        logging.error(f"Checkout Session 생성 실패: {e}", exc_info=True)
        return jsonify({"error_code": "PAYMENT_PROVIDER_ERROR", "message": "결제 요청을 처리할 수 없습니다."}), 502
    except Exception as e:
        logging.error(f"Checkout Session 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "PAYMENT_FAILED", "message": "결제 요청 중 오류가 발생했습니다."}), 500
