# yaopets_client/views/profile.py
import asyncio
import logging
from typing import Any, Dict, List, Optional

from yaopets_client.effects import UiEffects, HOME_ROUTE, LOGIN_ROUTE
from yaopets_client.errors import ApiError
from yaopets_client.follow import FollowToggle
from yaopets_client.normalize import (
    extract_collection, extract_total, normalize_post, normalize_user
)
from yaopets_client.optimistic import remove_item
from yaopets_client.views.base import PostListView, capture, tolerant

logger = logging.getLogger(__name__)

# 프로필에서 직접 수정할 수 있는 필드와 알림에 쓰는 이름
EDITABLE_FIELDS = {
    'name': 'Name',
    'bio': 'Bio',
    'city': 'City',
    'website': 'Website',
}

async def _empty():
    return []


class ProfileView(PostListView):
    """
    프로필 화면.
    프로필/게시글/팔로워/팔로잉/저장한 게시글을 동시에 요청하고,
    프로필 조회 실패만 화면 오류로 취급합니다.
    """

    def __init__(self, api, session, effects: UiEffects, user_id: Optional[str] = None):
        super().__init__(api, session, effects)
        self.requested_id = user_id
        self.profile: Optional[Dict[str, Any]] = None
        self.following: List[Dict[str, Any]] = []
        self.following_count = 0
        self.saved_posts: List[Dict[str, Any]] = []
        self.follow: Optional[FollowToggle] = None

    @property
    def is_own_profile(self) -> bool:
        return self.requested_id is None or (
            self.session.user_id is not None and str(self.requested_id) == str(self.session.user_id))

    @property
    def target_id(self) -> Optional[str]:
        return self.session.user_id if self.is_own_profile else self.requested_id

    @property
    def followers(self) -> List[Dict[str, Any]]:
        return self.follow.followers if self.follow else []

    @property
    def followers_count(self) -> int:
        return self.follow.followers_count if self.follow else 0

    @property
    def is_following(self) -> bool:
        return bool(self.follow and self.follow.is_following)

    async def load(self) -> bool:
        target_id = self.target_id
        if not target_id:
            self.effects.error("Login required", "Login to view your profile")
            self.effects.navigate(LOGIN_ROUTE)
            return False

        own = self.is_own_profile
        self.loading = True
        try:
            (profile_raw, profile_error), posts_raw, followers_raw, following_raw, saved_raw = await asyncio.gather(
                capture(self.api.users.get_profile(target_id)),
                tolerant(self.api.users.get_posts(target_id)),
                tolerant(self.api.users.get_followers(target_id)),
                tolerant(self.api.users.get_following(target_id)),
                tolerant(self.api.users.get_saved_posts()) if own else _empty(),
            )
        finally:
            self.loading = False

        if self.closed:
            return False

        if profile_error is not None or not profile_raw:
            self._handle_profile_error(profile_error)
            return False

        self.error = None
        self.profile = normalize_user(profile_raw)
        self.posts = [normalize_post(p) for p in extract_collection(posts_raw, 'posts')]
        self.saved_posts = [normalize_post(p) for p in extract_collection(saved_raw, 'posts')]
        self.following = [normalize_user(u) for u in extract_collection(following_raw, 'users')]
        self.following_count = extract_total(following_raw, 'users')

        # isFollowing은 서버가 조회자 기준으로 계산한 값을 그대로 사용합니다.
        self.follow = FollowToggle(
            self.api, self.session, self.effects,
            target_id=target_id,
            target_name=self.profile['name'] or self.profile['username'],
            is_following=self.profile['is_following'] and not own,
            followers_count=extract_total(followers_raw, 'users'),
            followers=[normalize_user(u) for u in extract_collection(followers_raw, 'users')],
        )
        return True

    def _handle_profile_error(self, error: Optional[ApiError]) -> None:
        if error is None or error.is_not_found:
            self.error = "not_found"
            self.effects.error("User not found", "The requested user profile does not exist")
            self.effects.navigate(HOME_ROUTE)
        else:
            logger.warning(f"프로필 조회 실패 (user_id: {self.target_id}): {error}")
            self.error = "load_failed"
            self.effects.error("Error", "Failed to load profile data")

    async def toggle_follow(self) -> bool:
        if not self.follow or self.is_own_profile:
            return False
        return await self.follow.toggle()

    def _on_saved_changed(self, post, saved: bool) -> None:
        if not self.is_own_profile or post is None:
            return
        if saved:
            self.saved_posts = self.saved_posts + [post]
        else:
            self.saved_posts = remove_item(self.saved_posts, post['id'])

    # --- 내 프로필 수정 ---
    async def update_field(self, field: str, value: str) -> bool:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"'{field}' is not an editable profile field")
        if not self.is_own_profile or self.profile is None:
            return False
        try:
            await self.api.users.update_profile({field: value})
        except ApiError as e:
            logger.warning(f"프로필 수정 실패 ({field}): {e}")
            self.effects.error("Error", f"Failed to update {field}")
            return False

        self.profile = {**self.profile, field: value}
        self.session.update_user(**{field: value})
        self.effects.notify("Profile updated", f"{EDITABLE_FIELDS[field]} updated successfully!")
        return True

    async def update_profile_image(self, filename: str, content: bytes, content_type: str) -> Optional[str]:
        """서명 URL 발급 → 직접 업로드 → 프로필 이미지로 확정 순서로 처리합니다."""
        if not self.is_own_profile or self.profile is None:
            return None
        try:
            upload = await self.api.uploads.request_url('user_profile', filename, content_type)
            await self.api.upload_file(upload['upload_url'], content, content_type)
            result = await self.api.users.update_profile_image(upload['file_path'])
        except ApiError as e:
            logger.warning(f"프로필 이미지 변경 실패: {e}")
            self.effects.error("Error", "Failed to update profile photo")
            return None

        url = result.get('url') if isinstance(result, dict) else None
        self.profile = {**self.profile, 'profile_image': url or ''}
        self.session.update_user(profile_image=url or '')
        self.effects.notify("Profile updated", "Profile photo updated!")
        return url

    async def logout(self) -> None:
        await self.session.logout()
        self.effects.navigate(LOGIN_ROUTE)
