# yaopets_client/api.py
"""
YaoPets REST API 비동기 클라이언트

- httpx.AsyncClient 위에서 동작하며, 토큰이 있으면 Bearer 헤더를 붙입니다.
- 2xx가 아닌 응답은 ApiError로, 네트워크 오류는 status_code=None인 ApiError로 변환합니다.
- 엔드포인트는 리소스별 그룹(auth, users, posts, pets, donations, payments, uploads)으로 나눕니다.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from yaopets_client.errors import ApiError

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, base_url: str, token: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self._client = httpx.AsyncClient(base_url=self.base_url, transport=transport, timeout=timeout)
        self._token = None
        self.token = token

        self.auth = AuthApi(self)
        self.users = UsersApi(self)
        self.posts = PostsApi(self)
        self.pets = PetsApi(self)
        self.donations = DonationsApi(self)
        self.payments = PaymentsApi(self)
        self.uploads = UploadsApi(self)

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]):
        self._token = value
        if value:
            self._client.headers['Authorization'] = f"Bearer {value}"
        else:
            self._client.headers.pop('Authorization', None)

    async def request(self, method: str, path: str, *, json: Any = None,
                      params: Optional[Dict[str, Any]] = None) -> Any:
        """요청을 보내고 응답 본문(JSON)을 반환합니다. 본문이 없으면 None."""
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} 요청 실패: {e}")
            raise ApiError(None, str(e)) from e

        payload = None
        if response.content:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text

        if response.is_error:
            message = ""
            if isinstance(payload, dict):
                message = payload.get('message') or payload.get('error_code') or ""
            raise ApiError(response.status_code, str(message), payload)
        return payload

    async def upload_file(self, upload_url: str, content: bytes, content_type: str) -> None:
        """발급받은 서명 URL로 파일을 직접 PUT 업로드합니다. (인증 헤더 없음)"""
        request = self._client.build_request("PUT", upload_url, content=content, headers={'Content-Type': content_type})
        # 서명 URL에는 API 토큰을 보내지 않습니다.
        request.headers.pop('Authorization', None)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            raise ApiError(None, str(e)) from e
        if response.is_error:
            raise ApiError(response.status_code, "파일 업로드에 실패했습니다.")

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()


class _ResourceApi:
    def __init__(self, client: ApiClient):
        self._client = client

    def _request(self, method: str, path: str, **kwargs):
        return self._client.request(method, path, **kwargs)


class AuthApi(_ResourceApi):
    SOCIAL_PROVIDERS = ("google", "facebook", "linkedin")

    async def register(self, email: str, password: str, username: str, name: Optional[str] = None,
                       user_type: Optional[str] = None):
        body = {"email": email, "password": password, "username": username}
        if name:
            body["name"] = name
        if user_type:
            body["userType"] = user_type
        return await self._request("POST", "/auth/register", json=body)

    async def login(self, email: str, password: str):
        return await self._request("POST", "/auth/login", json={"email": email, "password": password})

    async def me(self):
        return await self._request("GET", "/auth/me")

    async def change_password(self, current_password: str, new_password: str):
        return await self._request("POST", "/auth/change-password",
                                   json={"currentPassword": current_password, "newPassword": new_password})

    async def logout(self):
        return await self._request("POST", "/auth/logout")

    def social_login_url(self, provider: str) -> str:
        """소셜 로그인 시작 URL. 브라우저를 이 주소로 보내면 서버가 제공자로 리다이렉트합니다."""
        if provider not in self.SOCIAL_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")
        return f"{self._client.base_url}/auth/{provider}"


class UsersApi(_ResourceApi):
    async def get_profile(self, user_id: str):
        return await self._request("GET", f"/users/{user_id}")

    async def get_posts(self, user_id: str, limit: Optional[int] = None, offset: Optional[int] = None):
        return await self._request("GET", f"/users/{user_id}/posts", params={"limit": limit, "offset": offset})

    async def get_followers(self, user_id: str):
        return await self._request("GET", f"/users/{user_id}/followers")

    async def get_following(self, user_id: str):
        return await self._request("GET", f"/users/{user_id}/following")

    async def get_saved_posts(self):
        return await self._request("GET", "/users/me/saved")

    async def update_profile(self, fields: Dict[str, Any]):
        return await self._request("PATCH", "/users/me", json=fields)

    async def update_profile_image(self, file_path: str):
        return await self._request("PATCH", "/users/me/profile-image", json={"file_path": file_path})

    async def follow(self, user_id: str):
        return await self._request("POST", f"/users/{user_id}/follow")

    async def unfollow(self, user_id: str):
        return await self._request("DELETE", f"/users/{user_id}/follow")


class PostsApi(_ResourceApi):
    async def list(self, limit: Optional[int] = None, offset: Optional[int] = None):
        return await self._request("GET", "/posts", params={"limit": limit, "offset": offset})

    async def get(self, post_id: str):
        return await self._request("GET", f"/posts/{post_id}")

    async def create(self, payload: Dict[str, Any]):
        return await self._request("POST", "/posts", json=payload)

    async def delete(self, post_id: str):
        return await self._request("DELETE", f"/posts/{post_id}")

    async def like(self, post_id: str):
        return await self._request("POST", f"/posts/{post_id}/like")

    async def unlike(self, post_id: str):
        return await self._request("DELETE", f"/posts/{post_id}/like")

    async def save(self, post_id: str):
        return await self._request("POST", f"/posts/{post_id}/save")

    async def unsave(self, post_id: str):
        return await self._request("DELETE", f"/posts/{post_id}/save")

    # 댓글
    async def list_comments(self, post_id: str):
        return await self._request("GET", f"/posts/{post_id}/comments")

    async def add_comment(self, post_id: str, content: str):
        return await self._request("POST", f"/posts/{post_id}/comments", json={"content": content})

    async def delete_comment(self, comment_id: str):
        return await self._request("DELETE", f"/comments/{comment_id}")

    async def like_comment(self, comment_id: str):
        return await self._request("POST", f"/comments/{comment_id}/like")

    async def unlike_comment(self, comment_id: str):
        return await self._request("DELETE", f"/comments/{comment_id}/like")


class PetsApi(_ResourceApi):
    async def list(self, status: Optional[str] = None):
        return await self._request("GET", "/pets", params={"status": status})

    async def get(self, pet_id: str):
        return await self._request("GET", f"/pets/{pet_id}")

    async def create(self, payload: Dict[str, Any]):
        return await self._request("POST", "/pets", json=payload)


class DonationsApi(_ResourceApi):
    async def list(self, category: Optional[str] = None):
        return await self._request("GET", "/donations", params={"category": category})

    async def create(self, payload: Dict[str, Any]):
        return await self._request("POST", "/donations", json=payload)


class PaymentsApi(_ResourceApi):
    @staticmethod
    def _body(amount, description, fundraiser):
        body = {"amount": amount}
        if description:
            body["description"] = description
        if fundraiser:
            body["fundraiser"] = fundraiser
        return body

    async def create_payment_intent(self, amount: int, description: Optional[str] = None,
                                    fundraiser: Optional[str] = None):
        return await self._request("POST", "/payments/create-payment-intent",
                                   json=self._body(amount, description, fundraiser))

    async def create_checkout_session(self, amount: int, description: Optional[str] = None,
                                      fundraiser: Optional[str] = None):
        return await self._request("POST", "/payments/create-checkout-session",
                                   json=self._body(amount, description, fundraiser))


class UploadsApi(_ResourceApi):
    async def request_url(self, upload_type: str, filename: str, content_type: str):
        return await self._request("POST", "/uploads/url",
                                   json={"upload_type": upload_type, "filename": filename, "content_type": content_type})

    async def finalize(self, file_path: str):
        return await self._request("POST", "/uploads/finalize", json={"file_path": file_path})
