# yaopets_client/views/test_feed_view.py
import asyncio

import pytest

from yaopets_client.effects import LOGIN_ROUTE
from yaopets_client.views.feed import FeedView

FEED = {
    'posts': [
        {'id': 'p1', 'userId': 'user-1', 'user': {'id': 'user-1', 'username': 'ana'},
         'likesCount': 5, 'isLiked': False, 'isSaved': False},
        {'id': 'p2', 'userId': 'user-2', 'user': {'id': 'user-2', 'username': 'bia'},
         'likesCount': 0, 'isLiked': False, 'isSaved': False},
    ],
    'pagination': {'total': 2},
}

async def _loaded(api, session, effects, backend):
    backend.on('GET', '/posts', body=FEED)
    view = FeedView(api, session, effects)
    await view.load()
    return view

def _post(view, post_id):
    return next(p for p in view.posts if p['id'] == post_id)

@pytest.mark.asyncio
async def test_like_then_unlike_leaves_count_unchanged(api, logged_in, effects, backend):
    backend.on('POST', '/posts/p1/like', body={'isLiked': True, 'likesCount': 6})
    backend.on('DELETE', '/posts/p1/like', body={'isLiked': False, 'likesCount': 5})
    view = await _loaded(api, logged_in, effects, backend)

    assert await view.toggle_like('p1') is True
    assert _post(view, 'p1')['likes_count'] == 6
    assert await view.toggle_like('p1') is True

    assert _post(view, 'p1')['likes_count'] == 5
    assert _post(view, 'p1')['is_liked'] is False

@pytest.mark.asyncio
async def test_like_is_reconciled_with_server_count(api, logged_in, effects, backend):
    backend.on('POST', '/posts/p1/like', body={'isLiked': True, 'likesCount': 42})
    view = await _loaded(api, logged_in, effects, backend)

    await view.toggle_like('p1')

    assert _post(view, 'p1')['likes_count'] == 42

@pytest.mark.asyncio
async def test_failed_like_restores_previous_state(api, logged_in, effects, backend):
    backend.on('POST', '/posts/p1/like', status=500)
    view = await _loaded(api, logged_in, effects, backend)
    before = [dict(p) for p in view.posts]

    assert await view.toggle_like('p1') is False

    assert view.posts == before
    assert effects.last_notification.description == "Failed to update like. Please try again."

@pytest.mark.asyncio
async def test_failed_save_restores_previous_state(api, logged_in, effects, backend):
    backend.on('POST', '/posts/p2/save', status=503)
    view = await _loaded(api, logged_in, effects, backend)
    before = [dict(p) for p in view.posts]

    assert await view.toggle_save('p2') is False

    assert view.posts == before
    assert effects.last_notification.description == "Failed to update saved state. Please try again."

@pytest.mark.asyncio
async def test_rapid_double_toggle_changes_state_once(api, logged_in, effects, backend):
    view = await _loaded(api, logged_in, effects, backend)
    entered, release = backend.gate('POST', '/posts/p1/like', body={'isLiked': True, 'likesCount': 6})

    first = asyncio.create_task(view.toggle_like('p1'))
    await entered.wait()
    second = await view.toggle_like('p1')
    release.set()

    assert await first is True
    assert second is False
    assert _post(view, 'p1')['is_liked'] is True
    assert _post(view, 'p1')['likes_count'] == 6
    assert len(backend.calls('POST', '/posts/p1/like')) == 1
    assert backend.calls('DELETE', '/posts/p1/like') == []

@pytest.mark.asyncio
async def test_like_requires_login(api, session, effects, backend):
    view = await _loaded(api, session, effects, backend)

    assert await view.toggle_like('p1') is False

    assert effects.current_route == LOGIN_ROUTE
    assert effects.last_notification.description == "Login to like posts"
    assert _post(view, 'p1')['likes_count'] == 5

@pytest.mark.asyncio
async def test_delete_notifies_and_refetches(api, logged_in, effects, backend):
    view = await _loaded(api, logged_in, effects, backend)
    backend.on('DELETE', '/posts/p1', status=204)
    backend.on('GET', '/posts', body={'posts': [FEED['posts'][1]], 'pagination': {'total': 1}})

    assert await view.delete_post('p1') is True

    assert [p['id'] for p in view.posts] == ['p2']
    assert len(backend.calls('GET', '/posts')) == 2
    assert effects.last_notification.title == "Post deleted"
    assert effects.last_notification.description == "Your post was deleted successfully."

@pytest.mark.asyncio
async def test_failed_delete_puts_post_back(api, logged_in, effects, backend):
    view = await _loaded(api, logged_in, effects, backend)
    backend.on('DELETE', '/posts/p1', status=500)
    before = list(view.posts)

    assert await view.delete_post('p1') is False

    assert view.posts == before
    assert effects.last_notification.description == "Failed to delete post. Please try again."

@pytest.mark.asyncio
async def test_cannot_delete_other_users_post(api, logged_in, effects, backend):
    view = await _loaded(api, logged_in, effects, backend)

    assert not view.can_delete('p2')
    assert await view.delete_post('p2') is False
    assert backend.calls('DELETE', '/posts/p2') == []

@pytest.mark.asyncio
async def test_load_failure_notifies(api, session, effects, backend):
    backend.on('GET', '/posts', status=500)
    view = FeedView(api, session, effects)

    assert await view.load() is False

    assert view.error == "load_failed"
    assert effects.last_notification.variant == "destructive"

@pytest.mark.asyncio
async def test_failed_delete_keeps_like_confirmed_meanwhile(api, logged_in, effects, backend):
    """삭제 요청이 진행 중일 때 확정된 다른 게시글의 좋아요는 삭제 실패 후에도 유지됩니다."""
    backend.on('POST', '/posts/p2/like', body={'isLiked': True, 'likesCount': 4})
    view = await _loaded(api, logged_in, effects, backend)
    entered, release = backend.gate('DELETE', '/posts/p1', status=500)

    deleting = asyncio.create_task(view.delete_post('p1'))
    await entered.wait()
    assert await view.toggle_like('p2') is True
    release.set()

    assert await deleting is False
    assert [p['id'] for p in view.posts] == ['p1', 'p2']
    assert _post(view, 'p2')['is_liked'] is True
    assert _post(view, 'p2')['likes_count'] == 4
    assert effects.last_notification.description == "Failed to delete post. Please try again."
