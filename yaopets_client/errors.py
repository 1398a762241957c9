# yaopets_client/errors.py
from typing import Any, Optional


class ApiError(Exception):
    """
    서버 호출 실패를 나타내는 예외.
    status_code가 None이면 응답을 받지 못한 경우(네트워크 오류, 타임아웃)입니다.
    """

    def __init__(self, status_code: Optional[int], message: str = "", payload: Any = None):
        super().__init__(message or f"API request failed ({status_code})")
        self.status_code = status_code
        self.message = message
        self.payload = payload

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def error_code(self) -> Optional[str]:
        if isinstance(self.payload, dict):
            return self.payload.get('error_code')
        return None


class AuthRequiredError(Exception):
    """로그인이 필요한 동작을 비로그인 상태에서 호출했을 때 발생합니다."""
