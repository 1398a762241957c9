# yaopets_client/__init__.py
from typing import Optional

import httpx

from yaopets_client.api import ApiClient
from yaopets_client.errors import ApiError, AuthRequiredError
from yaopets_client.session import SessionStore, FileTokenStorage, MemoryTokenStorage
from yaopets_client.settings import ClientSettings


def create_session(settings: Optional[ClientSettings] = None,
                   transport: Optional[httpx.AsyncBaseTransport] = None) -> SessionStore:
    """
    설정에 맞는 ApiClient와 토큰 저장소를 만들어 SessionStore로 묶어 반환합니다.
    반환된 세션은 init()을 호출해야 저장된 토큰으로 복원됩니다.
    """
    settings = settings or ClientSettings.from_env()
    api = ApiClient(settings.api_url, transport=transport, timeout=settings.timeout)
    storage = FileTokenStorage(settings.token_path) if settings.token_path else MemoryTokenStorage()
    return SessionStore(api, storage)


__all__ = [
    "ApiClient", "ApiError", "AuthRequiredError", "ClientSettings",
    "SessionStore", "FileTokenStorage", "MemoryTokenStorage", "create_session",
]
