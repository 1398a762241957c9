# yaopets_client/test_optimistic.py
import pytest

from yaopets_client.effects import LOGIN_ROUTE
from yaopets_client.errors import ApiError
from yaopets_client.optimistic import (
    InFlightGuard, OptimisticMutation, toggle_like, toggle_save, remove_item, replace_item, insert_item,
    reconcile_likes
)

def test_toggle_like_is_its_own_inverse():
    post = {'id': 'p1', 'is_liked': False, 'likes_count': 3}

    assert toggle_like(post) == {'id': 'p1', 'is_liked': True, 'likes_count': 4}
    assert toggle_like(toggle_like(post)) == post

def test_toggle_like_never_goes_negative():
    assert toggle_like({'is_liked': True, 'likes_count': 0})['likes_count'] == 0

def test_toggle_save_does_not_touch_input():
    post = {'id': 'p1', 'is_saved': False}
    toggle_save(post)
    assert post['is_saved'] is False

def test_list_helpers():
    items = [{'id': 'a'}, {'id': 'b'}]

    assert remove_item(items, 'a') == [{'id': 'b'}]
    assert replace_item(items, 'b', {'id': 'b', 'x': 1}) == [{'id': 'a'}, {'id': 'b', 'x': 1}]
    assert len(items) == 2

def test_insert_item_restores_position_once():
    items = [{'id': 'a'}, {'id': 'c'}]

    assert insert_item(items, 1, {'id': 'b'}) == [{'id': 'a'}, {'id': 'b'}, {'id': 'c'}]
    assert insert_item(items, 9, {'id': 'b'})[-1] == {'id': 'b'}
    assert insert_item(items, 0, {'id': 'c'}) == items

def test_reconcile_likes_uses_server_count():
    assert reconcile_likes({'likes_count': 5}, {'likesCount': 2}) == {'likes_count': 2}
    assert reconcile_likes({'likes_count': 5}, None) == {'likes_count': 5}

def test_guard():
    guard = InFlightGuard()

    assert guard.acquire('k')
    assert not guard.acquire('k')
    assert guard.is_busy('k')
    guard.release('k')
    assert guard.acquire('k')


class _Holder:
    def __init__(self, value):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


@pytest.mark.asyncio
async def test_failed_mutation_restores_pre_image(logged_in, effects):
    holder = _Holder({'id': 'p1', 'is_liked': False, 'likes_count': 1})
    before = dict(holder.value)

    async def failing():
        raise ApiError(500, "boom")

    ok = await OptimisticMutation(logged_in, effects).run(
        'like', get_state=holder.get, set_state=holder.set, apply=toggle_like,
        request=failing, error_message="Failed to update like. Please try again.")

    assert ok is False
    assert holder.value == before
    assert effects.last_notification.variant == "destructive"
    assert effects.last_notification.description == "Failed to update like. Please try again."

@pytest.mark.asyncio
async def test_unauthenticated_mutation_redirects_to_login(session, effects):
    holder = _Holder({'id': 'p1', 'is_liked': False, 'likes_count': 1})
    calls = []

    async def request():
        calls.append(1)

    ok = await OptimisticMutation(session, effects).run(
        'like', get_state=holder.get, set_state=holder.set, apply=toggle_like,
        request=request, error_message="x", auth_message="Login to like posts")

    assert ok is False
    assert calls == []
    assert effects.current_route == LOGIN_ROUTE
    assert effects.last_notification.title == "Login required"
    assert effects.last_notification.description == "Login to like posts"

@pytest.mark.asyncio
async def test_reconcile_runs_after_success(logged_in, effects):
    holder = _Holder({'id': 'p1', 'is_liked': False, 'likes_count': 1})

    async def request():
        return {'isLiked': True, 'likesCount': 10}

    ok = await OptimisticMutation(logged_in, effects).run(
        'like', get_state=holder.get, set_state=holder.set, apply=toggle_like,
        request=request, reconcile=reconcile_likes, error_message="x")

    assert ok is True
    assert holder.value == {'id': 'p1', 'is_liked': True, 'likes_count': 10}
    assert effects.notifications == []
