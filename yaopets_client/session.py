# yaopets_client/session.py
"""
프로세스 단위의 로그인 세션 저장소

init()으로 저장된 토큰에서 세션을 복원하고, logout()으로 정리합니다.
토큰은 FileTokenStorage(JSON 파일) 또는 MemoryTokenStorage에 보관합니다.
"""

import json
import logging
import os
from typing import Any, Callable, Dict, List, Optional

from yaopets_client.api import ApiClient
from yaopets_client.errors import ApiError, AuthRequiredError
from yaopets_client.normalize import normalize_user

logger = logging.getLogger(__name__)


class MemoryTokenStorage:
    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStorage:
    """토큰을 {"token": ...} 형태의 JSON 파일로 저장합니다."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f).get('token')
        except (OSError, ValueError, AttributeError) as e:
            logger.warning(f"토큰 파일을 읽을 수 없습니다 ({self.path}): {e}")
            return None

    def save(self, token: str) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'token': token}, f)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class SessionStore:
    def __init__(self, api: ApiClient, storage=None):
        self.api = api
        self.storage = storage or MemoryTokenStorage()
        self._user: Optional[Dict[str, Any]] = None
        self._token: Optional[str] = None
        self._listeners: List[Callable[["SessionStore"], None]] = []
        self.initialized = False

    # --- 조회 ---
    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._user

    @property
    def user_id(self) -> Optional[str]:
        return self._user.get('id') if self._user else None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None and self._token is not None

    def add_listener(self, listener: Callable[["SessionStore"], None]) -> Callable[[], None]:
        """세션 변경 시 호출될 콜백을 등록하고, 등록 해제 함수를 반환합니다."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)

    # --- 수명 주기 ---
    def start_session(self, token: str, user: Dict[str, Any]) -> None:
        self._token = token
        self._user = normalize_user(user)
        self.api.token = token
        self.storage.save(token)
        self._notify()

    def _clear(self) -> None:
        self._token = None
        self._user = None
        self.api.token = None
        self.storage.clear()
        self._notify()

    async def init(self) -> Optional[Dict[str, Any]]:
        """저장된 토큰으로 /auth/me를 호출해 세션을 복원합니다. 401/404면 토큰을 지웁니다."""
        token = self.storage.load()
        if token:
            self.api.token = token
            try:
                me = await self.api.auth.me()
                self._token = token
                self._user = normalize_user(me)
                self._notify()
            except ApiError as e:
                if e.is_unauthorized or e.is_not_found or e.status_code == 422:
                    logger.info("저장된 토큰이 더 이상 유효하지 않아 세션을 정리합니다.")
                    self._clear()
                else:
                    # 일시적인 오류라면 토큰은 남겨두고 다음 init에서 다시 시도합니다.
                    logger.warning(f"세션 복원 실패: {e}")
                    self.api.token = None
        self.initialized = True
        return self._user

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.api.auth.login(email, password)
        self.start_session(data['token'], data['user'])
        return self._user

    async def register(self, email: str, password: str, username: str, **extra) -> Dict[str, Any]:
        data = await self.api.auth.register(email, password, username, **extra)
        self.start_session(data['token'], data['user'])
        return self._user

    async def complete_social_login(self, token: str) -> Dict[str, Any]:
        """소셜 로그인 콜백(/auth/social-callback?token=...)에서 받은 토큰으로 세션을 시작합니다."""
        self.api.token = token
        try:
            me = await self.api.auth.me()
        except ApiError:
            self.api.token = self._token
            raise
        self.start_session(token, me)
        return self._user

    async def logout(self) -> None:
        """서버 토큰 무효화는 최선을 다해 시도하고, 로컬 세션은 항상 정리합니다."""
        if self._token:
            try:
                await self.api.auth.logout()
            except ApiError as e:
                logger.warning(f"서버 로그아웃 실패 (로컬 세션은 정리합니다): {e}")
        self._clear()

    def update_user(self, **fields) -> Optional[Dict[str, Any]]:
        if self._user is None:
            return None
        self._user = {**self._user, **fields}
        self._notify()
        return self._user

    def require_user(self) -> Dict[str, Any]:
        if not self.is_authenticated:
            raise AuthRequiredError("로그인이 필요합니다.")
        return self._user

    async def change_password(self, current_password: str, new_password: str) -> None:
        self.require_user()
        await self.api.auth.change_password(current_password, new_password)
