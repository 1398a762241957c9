# yaopets/api/donations/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import DonationCreateSchema, DonationResponseSchema, DONATION_CATEGORIES
from yaopets.utils.pagination import pagination_params, pagination_meta

donations_bp = Blueprint('donations_bp', __name__)

@donations_bp.route('', methods=['GET'])
def list_donations():
    """기부 물품 목록. ?category= 로 필터링할 수 있습니다."""
    donation_service = current_app.services['donations']
    category = request.args.get('category') or None
    if category and category not in DONATION_CATEGORIES:
        return jsonify({"error_code": "INVALID_CATEGORY", "message": f"지원하지 않는 카테고리입니다: {category}"}), 400
    limit, offset = pagination_params()
    try:
        donations, total = donation_service.list_donations(category, limit, offset)
        return jsonify({
            "donations": DonationResponseSchema(many=True).dump(donations),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"기부 물품 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "목록 조회 중 오류가 발생했습니다."}), 500

@donations_bp.route('', methods=['POST'])
@jwt_required()
def create_donation():
    """기부 물품을 등록합니다."""
    donation_service = current_app.services['donations']
    user_id = get_jwt_identity()
    try:
        data = DonationCreateSchema().load(request.get_json() or {})
        new_item = donation_service.create_donation(user_id, data)
        return jsonify(DonationResponseSchema().dump(new_item)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"기부 물품 등록 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "DONATION_CREATION_FAILED", "message": "기부 물품 등록 중 오류가 발생했습니다."}), 500
