# yaopets/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import Schema, fields, validate, ValidationError

from yaopets.services.storage_service import UPLOAD_PATHS, owns_path

# 이 블루프린트에 속한 모든 API는 '/api/uploads' 라는 접두사 URL을 갖게 됩니다.
uploads_bp = Blueprint('uploads', __name__)

class UploadUrlRequestSchema(Schema):
    """Pre-signed URL 발급 요청 스키마"""
    upload_type = fields.Str(required=True, validate=validate.OneOf(list(UPLOAD_PATHS)))
    filename = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    content_type = fields.Str(required=True, validate=validate.Regexp(r'^(image|video)/[\w.+-]+$', error="이미지 또는 동영상 파일만 업로드할 수 있습니다."))

class FilePathSchema(Schema):
    """파일 경로 유효성 검사를 위한 스키마"""
    file_path = fields.Str(required=True, error_messages={"required": "파일 경로는 필수입니다."})


@uploads_bp.route('/url', methods=['POST'])
@jwt_required()
def get_upload_url():
    """
    모든 파일 업로드를 위한 범용 Pre-signed URL을 발급합니다.
    클라이언트는 이 API를 먼저 호출하여 업로드할 권한이 있는 임시 URL을 받아야 합니다.
    """
    user_id = get_jwt_identity()
    try:
        data = UploadUrlRequestSchema().load(request.get_json() or {})
    except ValidationError as err:
        logging.warning(f"URL 발급 요청 실패 (잘못된 파라미터): {err.messages}")
        return jsonify({"error_code": "INVALID_PARAMETERS", "details": err.messages}), 400

    storage_service = current_app.services['storage']
    try:
        url_info = storage_service.generate_upload_url(user_id, data['upload_type'], data['filename'], data['content_type'])
        return jsonify(url_info), 200
    except ValueError as e:
        return jsonify({"error_code": "INVALID_UPLOAD_TYPE", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"Pre-signed URL 생성 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "URL_GENERATION_FAILED", "message": "URL 생성 중 서버 오류가 발생했습니다."}), 500


@uploads_bp.route('/finalize', methods=['POST'])
@jwt_required()
def finalize_upload():
    """
    업로드가 끝난 게시물/반려동물/기부 물품 사진을 공개로 전환하고 URL을 반환합니다.
    본인 폴더에 올린 파일만 처리할 수 있습니다.
    """
    user_id = get_jwt_identity()
    storage_service = current_app.services['storage']
    try:
        file_path = FilePathSchema().load(request.get_json() or {})['file_path']
        if not owns_path(user_id, file_path):
            return jsonify({"error_code": "FORBIDDEN", "message": "본인이 업로드한 파일만 처리할 수 있습니다."}), 403

        public_url = storage_service.make_public_and_get_url(file_path)
        return jsonify({"url": public_url}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "FILE_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"파일 공개 전환 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "파일 처리 중 오류가 발생했습니다."}), 500
