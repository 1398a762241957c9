# yaopets/api/auth/routes.py

import logging
from urllib.parse import urlencode
from flask import Blueprint, request, jsonify, current_app, redirect
from flask_jwt_extended import (
    create_access_token,
    jwt_required,
    get_jwt_identity,
    get_jwt
)
from marshmallow import ValidationError

from yaopets.api.auth.schemas import RegisterSchema, LoginSchema, ChangePasswordSchema, AuthResponseSchema
from yaopets.api.users.schemas import UserPrivateResponseSchema
from yaopets.services.base import ConflictError
from yaopets.services.oauth_service import SUPPORTED_PROVIDERS

auth_bp = Blueprint('auth_bp', __name__)

def _auth_response(user, status_code: int):
    """토큰을 발급하고 {token, user} 형태로 응답합니다."""
    token = create_access_token(identity=user.user_id)
    return jsonify(AuthResponseSchema().dump({"token": token, "user": user.to_dict()})), status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호로 회원가입하고 바로 로그인 토큰을 발급합니다."""
    auth_service = current_app.services['auth']
    try:
        data = RegisterSchema().load(request.get_json() or {})
        user = auth_service.register_user(data)
        return _auth_response(user, 201)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ConflictError as e:
        return jsonify({"error_code": "ALREADY_EXISTS", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"회원가입 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "REGISTRATION_FAILED", "message": "회원가입 처리 중 오류가 발생했습니다."}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """이메일/비밀번호 로그인. 소셜 로그인 전용 계정은 비밀번호로 로그인할 수 없습니다."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json() or {})
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    user = auth_service.authenticate(data['email'], data['password'])
    if not user:
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": "이메일 또는 비밀번호가 올바르지 않습니다."}), 401
    return _auth_response(user, 200)


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    """현재 토큰의 사용자 정보를 반환합니다. 클라이언트 세션 복원에 사용됩니다."""
    auth_service = current_app.services['auth']
    user = auth_service.get_user(get_jwt_identity())
    if not user:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPrivateResponseSchema().dump(user.to_dict())), 200


@auth_bp.route('/change-password', methods=['POST'])
@jwt_required()
def change_password():
    auth_service = current_app.services['auth']
    try:
        data = ChangePasswordSchema().load(request.get_json() or {})
        auth_service.change_password(get_jwt_identity(), data['current_password'], data['new_password'])
        return jsonify({"message": "비밀번호가 변경되었습니다."}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": str(e)}), 401
    except ValueError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """로그아웃. 현재 Access Token을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        jwt_payload = get_jwt()
        auth_service.revoke_token(jwt_payload['jti'], jwt_payload['exp'])
        return jsonify({"message": "로그아웃 되었습니다."}), 200
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500


# --- 소셜 로그인 (리다이렉트 방식) ---
@auth_bp.route('/<string:provider>', methods=['GET'])
def social_login(provider: str):
    """소셜 로그인 제공자의 동의 화면으로 리다이렉트합니다."""
    if provider not in SUPPORTED_PROVIDERS:
        return jsonify({"error_code": "UNSUPPORTED_PROVIDER", "message": f"지원하지 않는 제공자입니다: {provider}"}), 404
    oauth_service = current_app.services['oauth']
    try:
        return redirect(oauth_service.get_authorization_url(provider))
    except ValueError as e:
        logging.error(f"{provider} 로그인 설정 오류: {e}")
        return jsonify({"error_code": "OAUTH_NOT_CONFIGURED", "message": str(e)}), 500


@auth_bp.route('/<string:provider>/callback', methods=['GET'])
def social_callback(provider: str):
    """
    제공자 콜백. 인증 코드를 사용자 정보로 교환한 뒤
    CLIENT_URL/auth/social-callback?token=... 으로 리다이렉트합니다.
    실패 시 CLIENT_URL/auth-failed 로 보냅니다.
    """
    client_url = current_app.config['CLIENT_URL'].rstrip('/')
    failure_url = f"{client_url}/auth-failed"
    if provider not in SUPPORTED_PROVIDERS:
        return redirect(failure_url)

    code = request.args.get('code')
    if not code:
        logging.warning(f"{provider} 콜백에 인증 코드가 없습니다. (error: {request.args.get('error')})")
        return redirect(failure_url)

    try:
        profile = current_app.services['oauth'].exchange_code_for_user_info(provider, code)
        user, is_new_user = current_app.services['auth'].get_or_create_user_by_oauth(provider, profile)
    except Exception as e:
        logging.error(f"{provider} 소셜 로그인 처리 실패: {e}", exc_info=True)
        return redirect(failure_url)

    token = create_access_token(identity=user.user_id)
    query = urlencode({"token": token, "isNewUser": str(is_new_user).lower()})
    return redirect(f"{client_url}/auth/social-callback?{query}")
