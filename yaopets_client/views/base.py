# yaopets_client/views/base.py
import logging
from typing import Any, Dict, List

from yaopets_client.effects import UiEffects
from yaopets_client.errors import ApiError
from yaopets_client.optimistic import (
    OptimisticMutation, toggle_like, toggle_save, find_item, replace_item, reconcile_likes
)

logger = logging.getLogger(__name__)


async def tolerant(awaitable, default=None):
    """보조 리소스 조회. 실패하면 알림 없이 빈 값으로 대체합니다."""
    try:
        return await awaitable
    except ApiError as e:
        logger.info(f"보조 데이터 조회 실패, 빈 값으로 대체: {e}")
        return [] if default is None else default

async def capture(awaitable):
    """주요 리소스 조회. (결과, 예외) 튜플을 반환해 함께 실행 중인 다른 요청을 중단시키지 않습니다."""
    try:
        return await awaitable, None
    except ApiError as e:
        return None, e


class PostListView:
    """게시글 목록을 가진 화면의 공통 동작 (좋아요/저장 낙관적 토글)."""

    like_error = "Could not update like"
    save_error = "Could not update saved post"

    def __init__(self, api, session, effects: UiEffects):
        self.api = api
        self.session = session
        self.effects = effects
        self.posts: List[Dict[str, Any]] = []
        self.loading = False
        self.error = None
        self.closed = False
        self._mutation = OptimisticMutation(session, effects)

    def _set_post(self, post_id: str, post: Dict[str, Any]) -> None:
        self.posts = replace_item(self.posts, post_id, post)

    def close(self) -> None:
        """화면이 닫힌 뒤 도착한 응답은 버립니다."""
        self.closed = True

    async def toggle_like(self, post_id: str) -> bool:
        post = find_item(self.posts, post_id)
        if post is None:
            return False
        request = self.api.posts.unlike if post['is_liked'] else self.api.posts.like
        return await self._mutation.run(
            ('like', post_id),
            get_state=lambda: find_item(self.posts, post_id),
            set_state=lambda p: self._set_post(post_id, p),
            apply=toggle_like,
            request=lambda: request(post_id),
            reconcile=reconcile_likes,
            error_message=self.like_error,
            auth_message="Login to like posts",
        )

    async def toggle_save(self, post_id: str) -> bool:
        post = find_item(self.posts, post_id)
        if post is None:
            return False
        saving = not post['is_saved']
        request = self.api.posts.save if saving else self.api.posts.unsave
        ok = await self._mutation.run(
            ('save', post_id),
            get_state=lambda: find_item(self.posts, post_id),
            set_state=lambda p: self._set_post(post_id, p),
            apply=toggle_save,
            request=lambda: request(post_id),
            error_message=self.save_error,
            auth_message="Login to save posts",
        )
        if ok:
            self._on_saved_changed(find_item(self.posts, post_id), saving)
        return ok

    def _on_saved_changed(self, post, saved: bool) -> None:
        pass
