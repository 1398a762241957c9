# yaopets_client/optimistic.py
"""
낙관적 업데이트(optimistic update) 계층

상태 전이는 apply(state) -> new_state 형태의 순수 함수로 만들고,
요청 전 상태(pre-image)를 보관했다가 실패하면 그대로 되돌립니다.
같은 엔티티에 대한 요청이 진행 중이면 새 요청은 무시합니다.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

from yaopets_client.effects import UiEffects, LOGIN_ROUTE
from yaopets_client.errors import ApiError

logger = logging.getLogger(__name__)

Item = Dict[str, Any]

# --- 순수 상태 전이 함수 ---
def toggle_like(item: Item) -> Item:
    """is_liked를 뒤집고 likes_count를 ±1 합니다. (0 미만 불가)"""
    liked = not item.get('is_liked', False)
    count = item.get('likes_count', 0) + (1 if liked else -1)
    return {**item, 'is_liked': liked, 'likes_count': max(0, count)}

def toggle_save(item: Item) -> Item:
    return {**item, 'is_saved': not item.get('is_saved', False)}

def find_item(items: List[Item], item_id: str) -> Optional[Item]:
    return next((item for item in items if item.get('id') == item_id), None)

def replace_item(items: List[Item], item_id: str, new_item: Item) -> List[Item]:
    return [new_item if item.get('id') == item_id else item for item in items]

def remove_item(items: List[Item], item_id: str) -> List[Item]:
    return [item for item in items if item.get('id') != item_id]

def insert_item(items: List[Item], index: int, new_item: Item) -> List[Item]:
    """new_item을 index 위치에 다시 넣습니다. 이미 목록에 있으면 그대로 둡니다."""
    if find_item(items, new_item.get('id')) is not None:
        return list(items)
    index = max(0, min(index, len(items)))
    return items[:index] + [new_item] + items[index:]



class InFlightGuard:
    """엔티티별로 진행 중인 요청을 추적합니다. 잠금 대신 '진행 중이면 무시' 방식입니다."""

    def __init__(self):
        self._keys = set()

    def is_busy(self, key: Hashable) -> bool:
        return key in self._keys

    def acquire(self, key: Hashable) -> bool:
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def release(self, key: Hashable) -> None:
        self._keys.discard(key)


class OptimisticMutation:
    """
    1. 현재 상태를 스냅샷으로 보관
    2. 전이 함수를 즉시 적용
    3. 서버 요청
    4. 성공: 그대로 두거나 reconcile로 서버 값 반영
    5. 실패: 스냅샷(또는 rollback 결과) 복원 후 오류 알림
    """

    def __init__(self, session, effects: UiEffects, guard: Optional[InFlightGuard] = None):
        self.session = session
        self.effects = effects
        self.guard = guard or InFlightGuard()

    async def run(
        self,
        key: Hashable,
        *,
        get_state: Callable[[], Any],
        set_state: Callable[[Any], None],
        apply: Callable[[Any], Any],
        request: Callable[[], Awaitable[Any]],
        error_message: str,
        reconcile: Optional[Callable[[Any, Any], Any]] = None,
        rollback: Optional[Callable[[Any], Any]] = None,
        requires_auth: bool = True,
        auth_message: str = "Login required to continue",
    ) -> bool:
        if requires_auth and not self.session.is_authenticated:
            self.effects.error("Login required", auth_message)
            self.effects.navigate(LOGIN_ROUTE)
            return False

        snapshot = get_state()
        if snapshot is None or not self.guard.acquire(key):
            return False

        try:
            set_state(apply(snapshot))
            try:
                result = await request()
            except ApiError as e:
                logger.warning(f"optimistic mutation rolled back ({key}): {e}")
                # rollback이 있으면 현재 상태에서 이 요청의 변경분만 되돌립니다.
                set_state(rollback(get_state()) if rollback is not None else snapshot)
                self.effects.error("Error", error_message)
                return False

            if reconcile is not None:
                current = get_state()
                if current is not None:
                    set_state(reconcile(current, result))
            return True
        finally:
            self.guard.release(key)


def reconcile_likes(item: Item, result: Any) -> Item:
    """서버가 돌려준 likesCount가 있으면 그 값으로 맞춥니다."""
    if isinstance(result, dict) and isinstance(result.get('likesCount'), int):
        return {**item, 'likes_count': max(0, result['likesCount'])}
    return item
