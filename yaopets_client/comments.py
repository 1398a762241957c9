# yaopets_client/comments.py
import logging
from typing import Any, Callable, Dict, List, Optional

from yaopets_client.effects import UiEffects, LOGIN_ROUTE
from yaopets_client.errors import ApiError
from yaopets_client.normalize import extract_collection, extract_total, normalize_comment
from yaopets_client.optimistic import OptimisticMutation, toggle_like, find_item, replace_item, reconcile_likes

logger = logging.getLogger(__name__)


class CommentThread:
    """
    게시글 하나의 댓글 목록.
    작성은 낙관적으로 처리하지 않고 서버가 만든 댓글(실제 id)을 받은 뒤 맨 위에 추가합니다.
    """

    def __init__(self, api, session, effects: UiEffects, post_id: str,
                 on_count_change: Optional[Callable[[int], None]] = None):
        self.api = api
        self.session = session
        self.effects = effects
        self.post_id = post_id
        self.on_count_change = on_count_change

        self.comments: List[Dict[str, Any]] = []
        self.total = 0
        self.draft = ""
        self.loading = False
        self.submitting = False
        self.scroll_offset = 0
        self.closed = False
        self._mutation = OptimisticMutation(session, effects)

    async def load(self) -> None:
        self.loading = True
        try:
            data = await self.api.posts.list_comments(self.post_id)
        except ApiError as e:
            logger.warning(f"댓글 목록 조회 실패 (post_id: {self.post_id}): {e}")
            data = []
        finally:
            self.loading = False
        if self.closed:
            return
        self.comments = [normalize_comment(c) for c in extract_collection(data, 'comments')]
        self.total = extract_total(data, 'comments')

    async def submit(self) -> bool:
        content = (self.draft or "").strip()
        if not content or self.submitting:
            return False
        if not self.session.is_authenticated:
            self.effects.error("Login required", "Login to comment on posts")
            self.effects.navigate(LOGIN_ROUTE)
            return False

        self.submitting = True
        try:
            created = await self.api.posts.add_comment(self.post_id, content)
        except ApiError as e:
            logger.warning(f"댓글 작성 실패 (post_id: {self.post_id}): {e}")
            self.effects.error("Error", "Could not post your comment. Please try again.")
            return False
        finally:
            self.submitting = False

        comment = normalize_comment(created or {})
        viewer = self.session.user or {}
        if not comment['user']['id']:
            comment['user'] = {'id': viewer.get('id'), 'username': viewer.get('username') or 'You',
                               'profile_image': viewer.get('profile_image', '')}
            comment['user_id'] = viewer.get('id')
        comment['content'] = comment['content'] or content

        if self.closed:
            return True
        self.comments = [comment] + self.comments
        self.total += 1
        self.draft = ""
        self.scroll_offset = 0
        if self.on_count_change:
            self.on_count_change(self.total)
        return True

    async def toggle_like(self, comment_id: str) -> bool:
        comment = find_item(self.comments, comment_id)
        if comment is None:
            return False
        request = self.api.posts.unlike_comment if comment['is_liked'] else self.api.posts.like_comment

        def set_comment(new_comment):
            self.comments = replace_item(self.comments, comment_id, new_comment)

        return await self._mutation.run(
            ('comment-like', comment_id),
            get_state=lambda: find_item(self.comments, comment_id),
            set_state=set_comment,
            apply=toggle_like,
            request=lambda: request(comment_id),
            reconcile=reconcile_likes,
            error_message="Could not update like",
            auth_message="Login to like comments",
        )

    def close(self) -> None:
        self.closed = True

