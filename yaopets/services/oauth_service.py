# 파일 경로: yaopets/services/oauth_service.py

import logging
from typing import Dict, Optional, Tuple

import jwt
import requests
from google_auth_oauthlib.flow import Flow
from requests_oauthlib import OAuth2Session
from requests_oauthlib.compliance_fixes import facebook_compliance_fix

SUPPORTED_PROVIDERS = ("google", "facebook", "linkedin")

GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
    "openid"
]

# requests_oauthlib로 처리하는 제공자들의 엔드포인트 정보
_OAUTH2_PROVIDERS = {
    "facebook": {
        "authorize_url": "https://www.facebook.com/v18.0/dialog/oauth",
        "token_url": "https://graph.facebook.com/v18.0/oauth/access_token",
        "profile_url": "https://graph.facebook.com/me?fields=id,name,email,picture.type(large)",
        "scope": ["email", "public_profile"],
        "client_id_key": "FACEBOOK_CLIENT_ID",
        "client_secret_key": "FACEBOOK_CLIENT_SECRET",
    },
    "linkedin": {
        "authorize_url": "https://www.linkedin.com/oauth/v2/authorization",
        "token_url": "https://www.linkedin.com/oauth/v2/accessToken",
        "profile_url": "https://api.linkedin.com/v2/userinfo",
        "scope": ["openid", "profile", "email"],
        "client_id_key": "LINKEDIN_CLIENT_ID",
        "client_secret_key": "LINKEDIN_CLIENT_SECRET",
    },
}


class OAuthService:
    """
    소셜 로그인(OAuth 2.0) 통신을 담당하는 서비스 클래스입니다.
    제공자별 응답을 {'provider_id', 'email', 'name', 'picture'} 형태로 통일해서 반환합니다.
    """
    _google_user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(self, config):
        self.config = config

    def _redirect_uri(self, provider: str) -> str:
        base = self.config.get('OAUTH_REDIRECT_BASE', '').rstrip('/')
        return f"{base}/api/auth/{provider}/callback"

    # --- Google (google-auth-oauthlib) ---
    def _google_flow(self) -> Flow:
        client_secrets_path = self.config.get('GOOGLE_CLIENT_SECRETS_PATH')
        if not client_secrets_path:
            raise ValueError("GOOGLE_CLIENT_SECRETS_PATH is not configured.")
        # 인가 요청과 콜백이 서로 다른 요청에서 처리되므로 PKCE verifier는 사용하지 않습니다.
        return Flow.from_client_secrets_file(
            client_secrets_path,
            scopes=GOOGLE_SCOPES,
            redirect_uri=self._redirect_uri("google"),
            autogenerate_code_verifier=False
        )

    def _google_user_info(self, code: str) -> Dict[str, Optional[str]]:
        flow = self._google_flow()
        flow.fetch_token(code=code)
        credentials = flow.credentials

        response = requests.get(
            self._google_user_info_url,
            headers={"Authorization": f"Bearer {credentials.token}"},
            timeout=10
        )
        response.raise_for_status()
        info = response.json()

        # userinfo에 이메일이 없으면 ID Token에서 보충합니다. (서명은 Google이 이미 검증)
        if not info.get('email') and getattr(credentials, 'id_token', None):
            try:
                decoded = jwt.decode(credentials.id_token, options={"verify_signature": False})
                info['email'] = decoded.get('email')
            except jwt.PyJWTError as e:
                logging.warning(f"ID Token 디코딩 실패 (무시됨): {e}")

        return {
            "provider_id": info.get('sub'),
            "email": info.get('email'),
            "name": info.get('name'),
            "picture": info.get('picture'),
        }

    # --- Facebook / LinkedIn (requests-oauthlib) ---
    def _oauth2_session(self, provider: str) -> Tuple[OAuth2Session, dict]:
        conf = _OAUTH2_PROVIDERS[provider]
        client_id = self.config.get(conf['client_id_key'])
        if not client_id:
            raise ValueError(f"{conf['client_id_key']} is not configured.")
        session = OAuth2Session(client_id, scope=conf['scope'], redirect_uri=self._redirect_uri(provider))
        if provider == "facebook":
            session = facebook_compliance_fix(session)
        return session, conf

    def _oauth2_user_info(self, provider: str, code: str) -> Dict[str, Optional[str]]:
        session, conf = self._oauth2_session(provider)
        session.fetch_token(
            conf['token_url'],
            code=code,
            client_secret=self.config.get(conf['client_secret_key']),
            include_client_id=True
        )
        response = session.get(conf['profile_url'], timeout=10)
        response.raise_for_status()
        info = response.json()

        if provider == "facebook":
            picture = (info.get('picture') or {}).get('data', {}).get('url')
            return {"provider_id": info.get('id'), "email": info.get('email'), "name": info.get('name'), "picture": picture}
        return {"provider_id": info.get('sub'), "email": info.get('email'), "name": info.get('name'), "picture": info.get('picture')}

    # --- 공개 메서드 ---
    def get_authorization_url(self, provider: str) -> str:
        """제공자의 로그인(동의) 화면 URL을 생성합니다."""
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"지원하지 않는 소셜 로그인 제공자입니다: {provider}")

        if provider == "google":
            url, _state = self._google_flow().authorization_url(prompt="select_account")
            return url

        session, conf = self._oauth2_session(provider)
        url, _state = session.authorization_url(conf['authorize_url'])
        return url

    def exchange_code_for_user_info(self, provider: str, code: str) -> Dict[str, Optional[str]]:
        """인증 코드를 토큰으로 교환하고, 이를 사용해 사용자 정보를 가져옵니다."""
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"지원하지 않는 소셜 로그인 제공자입니다: {provider}")
        try:
            if provider == "google":
                return self._google_user_info(code)
            return self._oauth2_user_info(provider, code)
        except Exception as e:
            logging.error(f"{provider} OAuth failed: {e}", exc_info=True)
            raise
