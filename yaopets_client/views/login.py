# yaopets_client/views/login.py
import logging
from typing import Optional

from yaopets_client.effects import UiEffects
from yaopets_client.errors import ApiError

logger = logging.getLogger(__name__)

AFTER_LOGIN_ROUTE = "/home"


class LoginForm:
    """이메일/비밀번호 로그인 폼과 소셜 로그인 버튼"""

    def __init__(self, session, effects: UiEffects):
        self.session = session
        self.effects = effects
        self.email = ""
        self.password = ""
        self.submitting = False
        self.error: Optional[str] = None

    @staticmethod
    def error_message(error: ApiError) -> str:
        if error.status_code == 401:
            if 'verify' in (error.message or '').lower():
                return "You must verify your email before logging in."
            return "Incorrect email or password."
        if error.status_code is None:
            return "Could not reach the server. Check your connection."
        return "Login failed. Please try again."

    async def submit(self) -> bool:
        email = self.email.strip()
        if not email or not self.password:
            self.error = "Fill in all fields"
            self.effects.error("Error", self.error)
            return False
        if self.submitting:
            return False

        self.submitting = True
        try:
            await self.session.login(email, self.password)
        except ApiError as e:
            logger.info(f"로그인 실패 ({email}): {e}")
            self.error = self.error_message(e)
            self.effects.error("Login failed", self.error)
            return False
        finally:
            self.submitting = False

        self.error = None
        self.password = ""
        self.effects.notify("Login successful", "Welcome back!")
        self.effects.navigate(AFTER_LOGIN_ROUTE)
        return True

    def social_login_url(self, provider: str) -> str:
        return self.session.api.auth.social_login_url(provider)

    def social_login(self, provider: str) -> str:
        url = self.social_login_url(provider)
        self.effects.open_url(url)
        return url
