# yaopets/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from yaopets.api.posts.schemas import PostCreateSchema, PostResponseSchema
from yaopets.utils.pagination import pagination_params, pagination_meta


posts_bp = Blueprint('posts_bp', __name__)

@posts_bp.route('', methods=['POST'])
@jwt_required()
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 미디어는 /api/uploads/url 로 먼저 업로드한 뒤 URL 목록을 전달합니다.
    - 성공 시, 생성된 게시글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        data = PostCreateSchema().load(request.get_json() or {})
        new_post = post_service.create_post(user_id, data)
        return jsonify(PostResponseSchema().dump(new_post)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"게시글 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "POST_CREATION_FAILED", "message": "게시글 생성 중 오류가 발생했습니다."}), 500

@posts_bp.route('', methods=['GET'])
@jwt_required(optional=True) # 비로그인 사용자도 피드는 볼 수 있도록 허용
def get_posts():
    """공개 게시글 피드를 페이지네이션으로 조회합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity() # 로그인 시 좋아요/저장 여부 확인, 비로그인 시 None
    limit, offset = pagination_params()
    try:
        posts, total = post_service.get_feed(user_id, limit, offset)
        return jsonify({
            "posts": PostResponseSchema(many=True).dump(posts),
            "pagination": pagination_meta(total, limit, offset)
        }), 200
    except Exception as e:
        logging.error(f"게시글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시물 목록 조회 중 오류가 발생했습니다."}), 500


@posts_bp.route('/<string:post_id>', methods=['GET'])
@jwt_required(optional=True)
def get_post(post_id: str):
    """특정 게시글의 상세 정보를 조회합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    post = post_service.get_post_by_id(post_id, user_id)
    if not post:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": "게시물을 찾을 수 없습니다."}), 404
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """특정 게시글을 삭제합니다. (작성자 본인만 가능)"""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.delete_post(post_id, user_id)
        return Response(status=204)
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404


def _set_like(post_id: str, liked: bool):
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        likes_count = post_service.set_post_like(user_id, post_id, liked)
        return jsonify({"isLiked": liked, "likesCount": likes_count}), 200
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"게시글 좋아요 처리 실패 (user_id: {user_id}, post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_TOGGLE_FAILED", "message": "좋아요 처리 중 오류가 발생했습니다."}), 500

@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def like_post(post_id: str):
    """게시글에 좋아요를 누릅니다. 이미 누른 상태면 그대로 유지됩니다."""
    return _set_like(post_id, True)

@posts_bp.route('/<string:post_id>/like', methods=['DELETE'])
@jwt_required()
def unlike_post(post_id: str):
    """게시글 좋아요를 취소합니다."""
    return _set_like(post_id, False)


def _set_saved(post_id: str, saved: bool):
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        is_saved = post_service.set_post_saved(user_id, post_id, saved)
        return jsonify({"isSaved": is_saved}), 200
    except ValueError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"게시글 저장 처리 실패 (user_id: {user_id}, post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SAVE_TOGGLE_FAILED", "message": "게시글 저장 처리 중 오류가 발생했습니다."}), 500

@posts_bp.route('/<string:post_id>/save', methods=['POST'])
@jwt_required()
def save_post(post_id: str):
    return _set_saved(post_id, True)

@posts_bp.route('/<string:post_id>/save', methods=['DELETE'])
@jwt_required()
def unsave_post(post_id: str):
    return _set_saved(post_id, False)
