# yaopets_client/effects.py
"""
화면 밖으로 나가는 부수 효과(알림 표시, 화면 이동)를 추상화합니다.
뷰 모델은 UiEffects만 알고, 실제 UI(또는 테스트)는 구현체를 주입합니다.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

HOME_ROUTE = "/"
LOGIN_ROUTE = "/auth/login"

@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    variant: str = "default"  # 'default' | 'destructive'


class Notifier:
    """기본 구현은 로그로만 남깁니다."""

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        level = logging.WARNING if variant == "destructive" else logging.INFO
        logger.log(level, f"[{title}] {description}")


class Navigator:
    def navigate(self, route: str) -> None:
        logger.info(f"navigate -> {route}")

    def open_url(self, url: str) -> None:
        """외부 주소(지도, 결제 페이지, 소셜 로그인) 열기"""
        logger.info(f"open -> {url}")


class UiEffects:
    def __init__(self, notifier: Optional[Notifier] = None, navigator: Optional[Navigator] = None):
        self.notifier = notifier or Notifier()
        self.navigator = navigator or Navigator()

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        self.notifier.notify(title, description, variant)

    def error(self, title: str, description: str = "") -> None:
        self.notifier.notify(title, description, "destructive")

    def navigate(self, route: str) -> None:
        self.navigator.navigate(route)

    def open_url(self, url: str) -> None:
        self.navigator.open_url(url)


class RecordingEffects(UiEffects):
    """발생한 알림과 이동 기록을 모아두는 구현. 테스트와 스크립트에서 사용합니다."""

    def __init__(self):
        super().__init__(notifier=self, navigator=self)
        self.notifications: List[Notification] = []
        self.routes: List[str] = []
        self.opened_urls: List[str] = []

    def notify(self, title: str, description: str = "", variant: str = "default") -> None:
        self.notifications.append(Notification(title, description, variant))

    def navigate(self, route: str) -> None:
        self.routes.append(route)

    def open_url(self, url: str) -> None:
        self.opened_urls.append(url)

    @property
    def last_notification(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    @property
    def current_route(self) -> Optional[str]:
        return self.routes[-1] if self.routes else None
