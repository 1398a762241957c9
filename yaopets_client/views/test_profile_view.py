# yaopets_client/views/test_profile_view.py
import pytest

from yaopets_client.effects import HOME_ROUTE, LOGIN_ROUTE
from yaopets_client.follow import FollowState
from yaopets_client.views.profile import ProfileView

PROFILE = {'id': 'user-2', 'username': 'bia', 'name': 'Bia', 'followersCount': 40, 'isFollowing': False}
POSTS = {'posts': [{'id': 'p1', 'userId': 'user-2', 'likesCount': 2, 'isLiked': False, 'isSaved': False}],
         'pagination': {'total': 1}}

def _other_profile(backend, **profile):
    backend.on('GET', '/users/user-2', body=dict(PROFILE, **profile))
    backend.on('GET', '/users/user-2/posts', body=POSTS)
    backend.on('GET', '/users/user-2/followers', body={'posts': [{'id': 'user-3', 'username': 'caio'}],
                                                      'pagination': {'total': 40}})
    backend.on('GET', '/users/user-2/following', body={'users': [{'id': 'user-4'}, {'id': 'user-5'}],
                                                      'pagination': {'total': 17}})

@pytest.mark.asyncio
async def test_counts_come_from_pagination_total(api, logged_in, effects, backend):
    _other_profile(backend)
    view = ProfileView(api, logged_in, effects, user_id='user-2')

    assert await view.load() is True

    assert view.followers_count == 40
    assert len(view.followers) == 1
    assert view.following_count == 17
    assert [p['id'] for p in view.posts] == ['p1']

@pytest.mark.asyncio
async def test_saved_posts_only_for_other_profiles_are_not_requested(api, logged_in, effects, backend):
    _other_profile(backend)
    view = ProfileView(api, logged_in, effects, user_id='user-2')

    await view.load()

    assert not view.is_own_profile
    assert backend.calls('GET', '/users/me/saved') == []
    assert view.saved_posts == []

@pytest.mark.asyncio
async def test_own_profile_loads_saved_posts(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-1', body={'id': 'user-1', 'username': 'ana'})
    backend.on('GET', '/users/me/saved', body={'posts': [{'id': 'p9', 'isSaved': True}]})
    view = ProfileView(api, logged_in, effects)

    assert await view.load() is True

    assert view.is_own_profile
    assert [p['id'] for p in view.saved_posts] == ['p9']
    # 보조 목록이 404여도 화면은 정상적으로 표시됩니다.
    assert view.posts == []
    assert view.followers_count == 0
    assert effects.notifications == []

@pytest.mark.asyncio
async def test_not_found_goes_home(api, logged_in, effects, backend):
    backend.on('GET', '/users/ghost', status=404, body={'error_code': 'USER_NOT_FOUND'})
    view = ProfileView(api, logged_in, effects, user_id='ghost')

    assert await view.load() is False

    assert effects.current_route == HOME_ROUTE
    assert effects.last_notification.title == "User not found"
    assert effects.last_notification.description == "The requested user profile does not exist"

@pytest.mark.asyncio
async def test_other_failure_stays_on_page(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-2', status=500)
    view = ProfileView(api, logged_in, effects, user_id='user-2')

    assert await view.load() is False

    assert effects.routes == []
    assert effects.last_notification.title == "Error"
    assert effects.last_notification.description == "Failed to load profile data"
    assert view.error == "load_failed"

@pytest.mark.asyncio
async def test_own_profile_requires_login(api, session, effects, backend):
    view = ProfileView(api, session, effects)

    assert await view.load() is False
    assert effects.current_route == LOGIN_ROUTE
    assert backend.requests == []

@pytest.mark.asyncio
async def test_follow_uses_server_flag_and_updates_count(api, logged_in, effects, backend):
    _other_profile(backend, isFollowing=True)
    backend.on('DELETE', '/users/user-2/follow', body={'isFollowing': False, 'followersCount': 39})
    view = ProfileView(api, logged_in, effects, user_id='user-2')
    await view.load()
    assert view.is_following

    assert await view.toggle_follow() is True

    assert view.follow.state == FollowState.NOT_FOLLOWING
    assert view.followers_count == 39

@pytest.mark.asyncio
async def test_closed_view_discards_results(api, logged_in, effects, backend):
    _other_profile(backend)
    view = ProfileView(api, logged_in, effects, user_id='user-2')
    view.close()

    assert await view.load() is False
    assert view.profile is None

@pytest.mark.asyncio
async def test_update_field_syncs_session(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-1', body={'id': 'user-1', 'username': 'ana'})
    backend.on('PATCH', '/users/me', body={'id': 'user-1', 'bio': 'Adoro gatos'})
    view = ProfileView(api, logged_in, effects)
    await view.load()

    assert await view.update_field('bio', 'Adoro gatos') is True

    assert backend.json_body(backend.calls('PATCH', '/users/me')[0]) == {'bio': 'Adoro gatos'}
    assert view.profile['bio'] == 'Adoro gatos'
    assert logged_in.user['bio'] == 'Adoro gatos'
    assert effects.last_notification.title == "Profile updated"
    assert effects.last_notification.description == "Bio updated successfully!"

@pytest.mark.asyncio
async def test_update_field_failure(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-1', body={'id': 'user-1', 'username': 'ana', 'city': 'Recife'})
    backend.on('PATCH', '/users/me', status=500)
    view = ProfileView(api, logged_in, effects)
    await view.load()

    assert await view.update_field('city', 'Olinda') is False

    assert view.profile['city'] == 'Recife'
    assert effects.last_notification.description == "Failed to update city"

@pytest.mark.asyncio
async def test_update_unknown_field(api, logged_in, effects):
    view = ProfileView(api, logged_in, effects)
    with pytest.raises(ValueError):
        await view.update_field('points', '100')

@pytest.mark.asyncio
async def test_update_profile_image(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-1', body={'id': 'user-1', 'username': 'ana'})
    backend.on('POST', '/uploads/url', body={'upload_url': 'http://testserver/upload/abc',
                                             'file_path': 'user_profiles/user-1/abc.jpg'})
    backend.on('PUT', '/upload/abc', status=200)
    backend.on('PATCH', '/users/me/profile-image', body={'url': 'https://cdn/abc.jpg'})
    view = ProfileView(api, logged_in, effects)
    await view.load()

    url = await view.update_profile_image('me.jpg', b'jpeg-bytes', 'image/jpeg')

    assert url == 'https://cdn/abc.jpg'
    assert backend.json_body(backend.calls('PATCH', '/users/me/profile-image')[0]) == {
        'file_path': 'user_profiles/user-1/abc.jpg'}
    assert logged_in.user['profile_image'] == 'https://cdn/abc.jpg'
    assert effects.last_notification.description == "Profile photo updated!"

@pytest.mark.asyncio
async def test_unsave_removes_from_saved_list(api, logged_in, effects, backend):
    backend.on('GET', '/users/user-1', body={'id': 'user-1', 'username': 'ana'})
    backend.on('GET', '/users/user-1/posts', body={'posts': [{'id': 'p1', 'userId': 'user-1', 'isSaved': True}]})
    backend.on('GET', '/users/me/saved', body={'posts': [{'id': 'p1', 'userId': 'user-1', 'isSaved': True}]})
    backend.on('DELETE', '/posts/p1/save', body={'isSaved': False})
    view = ProfileView(api, logged_in, effects)
    await view.load()

    assert await view.toggle_save('p1') is True

    assert view.posts[0]['is_saved'] is False
    assert view.saved_posts == []

@pytest.mark.asyncio
async def test_logout(api, logged_in, effects, backend):
    backend.on('POST', '/auth/logout', body={'message': 'ok'})
    view = ProfileView(api, logged_in, effects)

    await view.logout()

    assert not logged_in.is_authenticated
    assert effects.current_route == LOGIN_ROUTE
