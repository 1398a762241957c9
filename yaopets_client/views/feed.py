# yaopets_client/views/feed.py
import logging

from yaopets_client.effects import UiEffects
from yaopets_client.errors import ApiError
from yaopets_client.normalize import extract_collection, extract_total, normalize_post
from yaopets_client.optimistic import find_item, insert_item, remove_item
from yaopets_client.views.base import PostListView

logger = logging.getLogger(__name__)


class FeedView(PostListView):
    """홈 피드. 좋아요는 서버 likesCount로 보정하고, 삭제 성공 후에는 목록을 다시 불러옵니다."""

    like_error = "Failed to update like. Please try again."
    save_error = "Failed to update saved state. Please try again."

    def __init__(self, api, session, effects: UiEffects):
        super().__init__(api, session, effects)
        self.total = 0

    async def load(self) -> bool:
        self.loading = True
        try:
            data = await self.api.posts.list()
        except ApiError as e:
            logger.warning(f"피드 조회 실패: {e}")
            if not self.closed:
                self.error = "load_failed"
                self.effects.error("Error", "Failed to load posts")
            return False
        finally:
            self.loading = False

        if self.closed:
            return False
        self.error = None
        self.posts = [normalize_post(p) for p in extract_collection(data, 'posts')]
        self.total = extract_total(data, 'posts')
        return True

    def can_delete(self, post_id: str) -> bool:
        post = find_item(self.posts, post_id)
        return bool(post and self.session.user_id and post['user_id'] == self.session.user_id)

    async def delete_post(self, post_id: str) -> bool:
        if self.session.is_authenticated and not self.can_delete(post_id):
            return False

        # 실패 시 목록 전체가 아니라 삭제한 게시글만 원래 위치에 되돌립니다.
        removed = find_item(self.posts, post_id)
        index = self.posts.index(removed) if removed is not None else 0

        def set_posts(posts):
            self.posts = posts

        ok = await self._mutation.run(
            ('delete', post_id),
            get_state=lambda: self.posts,
            set_state=set_posts,
            apply=lambda posts: remove_item(posts, post_id),
            rollback=lambda posts: insert_item(posts, index, removed) if removed is not None else posts,
            request=lambda: self.api.posts.delete(post_id),
            error_message="Failed to delete post. Please try again.",
            auth_message="Login to delete posts",
        )
        if ok:
            self.effects.notify("Post deleted", "Your post was deleted successfully.")
            await self.load()
        return ok
