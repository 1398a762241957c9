# yaopets_client/conftest.py
import asyncio
import inspect
import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from yaopets_client.api import ApiClient
from yaopets_client.effects import RecordingEffects
from yaopets_client.session import SessionStore, MemoryTokenStorage

API_URL = "http://testserver/api"

Reply = Union[Tuple[int, Any], Callable[[httpx.Request], Any]]


class FakeBackend:
    """
    httpx.MockTransport에 연결하는 가짜 서버.
    (메서드, 경로) 별로 응답을 등록하고, 받은 요청을 순서대로 기록합니다.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Reply] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None, handler: Callable = None):
        self.routes[(method.upper(), path)] = handler or (status, body)
        return self

    def gate(self, method: str, path: str, status: int = 200, body: Any = None):
        """release.set()이 호출될 때까지 응답을 보류하는 경로를 등록합니다."""
        entered, release = asyncio.Event(), asyncio.Event()

        async def handler(request):
            entered.set()
            await release.wait()
            return status, body

        self.on(method, path, handler=handler)
        return entered, release

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and self._path(r) == path]

    def json_body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api/") else path

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get((request.method, self._path(request)))
        if reply is None:
            return httpx.Response(404, json={"error_code": "NOT_FOUND", "message": "not found"})
        if callable(reply):
            reply = reply(request)
            if inspect.isawaitable(reply):
                reply = await reply
        status, body = reply
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def backend():
    return FakeBackend()

@pytest.fixture
def api(backend):
    return ApiClient(API_URL, transport=httpx.MockTransport(backend))

@pytest.fixture
def effects():
    return RecordingEffects()

@pytest.fixture
def session(api):
    return SessionStore(api, MemoryTokenStorage())

@pytest.fixture
def viewer():
    return {"id": "user-1", "username": "ana", "name": "Ana"}

@pytest.fixture
def logged_in(session, viewer):
    session.start_session("token-1", viewer)
    return session
