# yaopets_client/follow.py
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from yaopets_client.effects import UiEffects
from yaopets_client.optimistic import OptimisticMutation

class FollowState(Enum):
    NOT_FOLLOWING = "not-following"
    PENDING = "pending"
    FOLLOWING = "following"


@dataclass(frozen=True)
class FollowSnapshot:
    state: FollowState
    followers_count: int
    followers: Tuple[Dict[str, Any], ...]
    target: Optional[FollowState] = None  # PENDING일 때 성공하면 도달할 상태


def begin_toggle(snapshot: FollowSnapshot, viewer: Dict[str, Any]) -> FollowSnapshot:
    """요청을 보내기 직전의 전이. 팔로워 수와 목록을 미리 반영합니다."""
    if snapshot.state == FollowState.FOLLOWING:
        return replace(
            snapshot,
            state=FollowState.PENDING,
            target=FollowState.NOT_FOLLOWING,
            followers_count=max(0, snapshot.followers_count - 1),
            followers=tuple(f for f in snapshot.followers if f.get('id') != viewer.get('id')),
        )
    entry = {'id': viewer.get('id'), 'username': viewer.get('username'), 'profile_image': viewer.get('profile_image', '')}
    return replace(
        snapshot,
        state=FollowState.PENDING,
        target=FollowState.FOLLOWING,
        followers_count=snapshot.followers_count + 1,
        followers=snapshot.followers + (entry,),
    )

def settle(snapshot: FollowSnapshot, result: Any) -> FollowSnapshot:
    """서버 응답으로 PENDING을 확정합니다. followersCount가 오면 그 값을 사용합니다."""
    count = snapshot.followers_count
    if isinstance(result, dict) and isinstance(result.get('followersCount'), int):
        count = result['followersCount']
    return replace(snapshot, state=snapshot.target or snapshot.state, target=None, followers_count=count)


class FollowToggle:
    """
    not-following --toggle--> pending --success--> following
    following --toggle--> pending --success--> not-following
    pending --failure--> 이전 상태
    """

    def __init__(self, api, session, effects: UiEffects, target_id: str, target_name: str = "",
                 is_following: bool = False, followers_count: int = 0,
                 followers: Optional[List[Dict[str, Any]]] = None,
                 on_change: Optional[Callable[["FollowToggle"], None]] = None):
        self.api = api
        self.session = session
        self.effects = effects
        self.target_id = target_id
        self.target_name = target_name
        self.on_change = on_change
        self._mutation = OptimisticMutation(session, effects)
        self.snapshot = FollowSnapshot(
            state=FollowState.FOLLOWING if is_following else FollowState.NOT_FOLLOWING,
            followers_count=followers_count,
            followers=tuple(followers or ()),
        )

    @property
    def state(self) -> FollowState:
        return self.snapshot.state

    @property
    def is_following(self) -> bool:
        return self.snapshot.state == FollowState.FOLLOWING

    @property
    def followers_count(self) -> int:
        return self.snapshot.followers_count

    @property
    def followers(self) -> List[Dict[str, Any]]:
        return list(self.snapshot.followers)

    def _set(self, snapshot: FollowSnapshot):
        self.snapshot = snapshot
        if self.on_change:
            self.on_change(self)

    async def toggle(self) -> bool:
        viewer = self.session.user or {}
        if self.state == FollowState.PENDING or viewer.get('id') == self.target_id:
            return False

        following_before = self.is_following
        request = self.api.users.unfollow if following_before else self.api.users.follow
        ok = await self._mutation.run(
            ('follow', self.target_id),
            get_state=lambda: self.snapshot,
            set_state=self._set,
            apply=lambda snapshot: begin_toggle(snapshot, viewer),
            request=lambda: request(self.target_id),
            reconcile=settle,
            error_message="Could not update follow status",
            auth_message="Login to follow users",
        )
        if ok:
            if following_before:
                self.effects.notify("Unfollowed", f"You are no longer following {self.target_name}")
            else:
                self.effects.notify("Following", f"You are now following {self.target_name}")
        return ok
