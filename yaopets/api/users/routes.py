# yaopets/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from yaopets.api.users.schemas import (
    UserPublicResponseSchema, UserPrivateResponseSchema, UserSummarySchema,
    ProfileUpdateSchema, ProfileImageSchema
)
from yaopets.api.posts.schemas import PostResponseSchema
from yaopets.utils.pagination import pagination_params, pagination_meta

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보(팔로워/팔로잉/게시물 수, 팔로우 여부 포함)를 조회합니다."""
    user_service = current_app.services['users']
    viewer_id = get_jwt_identity()
    try:
        user_profile = user_service.get_user_profile(user_id, viewer_id)
        if not user_profile:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserPublicResponseSchema().dump(user_profile)), 200
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500


@users_bp.route('/me', methods=['PATCH'])
@jwt_required()
def update_my_profile():
    """현재 로그인된 사용자의 이름/소개/도시/웹사이트를 수정합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = ProfileUpdateSchema().load(request.get_json() or {})
        updated_user = user_service.update_profile(user_id, data)
        if not updated_user:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserPrivateResponseSchema().dump(updated_user)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"프로필 수정 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_UPDATE_FAILED", "message": "프로필 수정 중 서버 오류가 발생했습니다."}), 500


@users_bp.route('/me/profile-image', methods=['PATCH'])
@jwt_required()
def update_my_profile_image():
    """
    현재 로그인된 사용자의 프로필 이미지를 업데이트합니다.
    - 파일은 /api/uploads/url 로 발급받은 URL에 먼저 업로드되어 있어야 합니다.
    """
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = ProfileImageSchema().load(request.get_json() or {})
        url = user_service.update_profile_image(user_id, data['file_path'])
        if not url:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify({"url": url}), 200
    except ValidationError as err:
        return jsonify({"error_code": "INVALID_PAYLOAD", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except FileNotFoundError as e:
        return jsonify({"error_code": "FILE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"프로필 이미지 업데이트 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "프로필 이미지 업데이트 중 서버 오류가 발생했습니다."}), 500


@users_bp.route('/me/saved', methods=['GET'])
@jwt_required()
def get_my_saved_posts():
    """현재 로그인된 사용자가 저장한 게시물 목록을 조회합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    limit, offset = pagination_params()
    try:
        posts, total = post_service.get_saved_posts(user_id, limit, offset)
        return jsonify({
            "posts": PostResponseSchema(many=True).dump(posts),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"저장한 게시물 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "저장한 게시물 조회 중 오류가 발생했습니다."}), 500


@users_bp.route('/<string:user_id>/posts', methods=['GET'])
@jwt_required(optional=True)
def get_user_posts(user_id: str):
    """특정 사용자가 작성한 게시물 목록을 조회합니다."""
    post_service = current_app.services['posts']
    viewer_id = get_jwt_identity()
    limit, offset = pagination_params()
    try:
        posts, total = post_service.get_posts_by_user_id(user_id, viewer_id, limit, offset)
        return jsonify({
            "posts": PostResponseSchema(many=True).dump(posts),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"사용자 게시물 목록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시물 목록 조회 중 오류가 발생했습니다."}), 500


def _relationship_list(user_id: str, relation: str):
    user_service = current_app.services['users']
    limit, offset = pagination_params(default_limit=50)
    try:
        if relation == 'followers':
            users, total = user_service.get_followers(user_id, limit, offset)
        else:
            users, total = user_service.get_following(user_id, limit, offset)
        return jsonify({
            "users": UserSummarySchema(many=True).dump(users),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"{relation} 목록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "목록 조회 중 오류가 발생했습니다."}), 500

@users_bp.route('/<string:user_id>/followers', methods=['GET'])
@jwt_required(optional=True)
def get_followers(user_id: str):
    return _relationship_list(user_id, 'followers')

@users_bp.route('/<string:user_id>/following', methods=['GET'])
@jwt_required(optional=True)
def get_following(user_id: str):
    return _relationship_list(user_id, 'following')


def _set_follow(target_id: str, follow: bool):
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        if follow:
            followers_count = user_service.follow(user_id, target_id)
        else:
            followers_count = user_service.unfollow(user_id, target_id)
        return jsonify({"isFollowing": follow, "followersCount": followers_count}), 200
    except PermissionError as e:
        return jsonify({"error_code": "CANNOT_FOLLOW_SELF", "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"팔로우 처리 중 오류 발생 ({user_id} -> {target_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FOLLOW_FAILED", "message": "팔로우 처리 중 오류가 발생했습니다."}), 500

@users_bp.route('/<string:user_id>/follow', methods=['POST'])
@jwt_required()
def follow_user(user_id: str):
    """대상 사용자를 팔로우합니다. 이미 팔로우 중이면 그대로 유지됩니다."""
    return _set_follow(user_id, True)

@users_bp.route('/<string:user_id>/follow', methods=['DELETE'])
@jwt_required()
def unfollow_user(user_id: str):
    """대상 사용자 팔로우를 취소합니다."""
    return _set_follow(user_id, False)
