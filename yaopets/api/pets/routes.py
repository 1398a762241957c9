# yaopets/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import PetListingCreateSchema, PetListingResponseSchema, PET_STATUSES
from yaopets.utils.pagination import pagination_params, pagination_meta

pets_bp = Blueprint('pets_bp', __name__)

@pets_bp.route('', methods=['GET'])
def list_pets():
    """반려동물 게시글 목록. ?status=lost|found|adoption 으로 필터링합니다."""
    pet_service = current_app.services['pets']
    status = request.args.get('status') or None
    if status and status not in PET_STATUSES:
        return jsonify({"error_code": "INVALID_STATUS", "message": f"지원하지 않는 상태 값입니다: {status}"}), 400
    limit, offset = pagination_params()
    try:
        pets, total = pet_service.list_listings(status, limit, offset)
        return jsonify({
            "pets": PetListingResponseSchema(many=True).dump(pets),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"Pet listing API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "목록 조회 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['GET'])
def get_pet(pet_id: str):
    pet_service = current_app.services['pets']
    pet = pet_service.get_listing(pet_id)
    if not pet:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": "반려동물 정보를 찾을 수 없습니다."}), 404
    return jsonify(PetListingResponseSchema().dump(pet)), 200

@pets_bp.route('', methods=['POST'])
@jwt_required()
def create_pet():
    """실종/발견 신고 또는 입양 공고를 등록합니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        validated_data = PetListingCreateSchema().load(request.get_json() or {})
        new_pet = pet_service.create_listing(user_id, validated_data)
        return jsonify(PetListingResponseSchema().dump(new_pet)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Pet registration API error: {e}", exc_info=True)
        return jsonify({"error_code": "PET_REGISTRATION_FAILED", "message": "등록 중 오류가 발생했습니다."}), 500
