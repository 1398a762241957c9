# yaopets_client/settings.py
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_TOKEN_PATH = os.path.join(os.path.expanduser("~"), ".yaopets", "session.json")

@dataclass
class ClientSettings:
    """클라이언트 실행 설정. 서버 주소와 토큰 저장 위치를 가집니다."""
    api_url: str = DEFAULT_API_URL
    token_path: Optional[str] = DEFAULT_TOKEN_PATH
    timeout: float = 10.0

    @classmethod
    def from_env(cls, load_env: bool = True) -> "ClientSettings":
        """YAOPETS_API_URL, YAOPETS_TOKEN_PATH, YAOPETS_TIMEOUT 환경 변수에서 설정을 읽습니다."""
        if load_env:
            load_dotenv()
        return cls(
            api_url=os.getenv('YAOPETS_API_URL', DEFAULT_API_URL),
            token_path=os.getenv('YAOPETS_TOKEN_PATH', DEFAULT_TOKEN_PATH) or None,
            timeout=float(os.getenv('YAOPETS_TIMEOUT', 10.0)),
        )
