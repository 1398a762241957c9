# yaopets_client/test_session.py
import pytest

from yaopets_client.errors import ApiError, AuthRequiredError
from yaopets_client.session import SessionStore, MemoryTokenStorage, FileTokenStorage

AUTH_RESPONSE = {'token': 'token-1', 'user': {'id': 'user-1', 'username': 'ana', 'name': 'Ana'}}

@pytest.mark.asyncio
async def test_login_starts_session(session, backend):
    backend.on('POST', '/auth/login', body=AUTH_RESPONSE)
    changes = []
    session.add_listener(lambda s: changes.append(s.is_authenticated))

    user = await session.login('ana@example.com', 'secret1')

    assert user['id'] == 'user-1'
    assert session.is_authenticated
    assert session.storage.load() == 'token-1'
    assert session.api.token == 'token-1'
    assert changes == [True]

@pytest.mark.asyncio
async def test_failed_login_keeps_session_empty(session, backend):
    backend.on('POST', '/auth/login', status=401, body={'error_code': 'INVALID_CREDENTIALS'})

    with pytest.raises(ApiError):
        await session.login('ana@example.com', 'wrong')
    assert not session.is_authenticated

@pytest.mark.asyncio
async def test_init_restores_from_stored_token(api, backend):
    backend.on('GET', '/auth/me', body={'id': 'user-1', 'username': 'ana'})
    session = SessionStore(api, MemoryTokenStorage('token-1'))

    await session.init()

    assert session.initialized
    assert session.user_id == 'user-1'
    assert backend.requests[-1].headers['Authorization'] == 'Bearer token-1'

@pytest.mark.asyncio
async def test_init_clears_rejected_token(api, backend):
    backend.on('GET', '/auth/me', status=401, body={'msg': 'Token has been revoked'})
    storage = MemoryTokenStorage('stale')
    session = SessionStore(api, storage)

    await session.init()

    assert session.initialized
    assert not session.is_authenticated
    assert storage.load() is None

@pytest.mark.asyncio
async def test_init_keeps_token_on_server_error(api, backend):
    backend.on('GET', '/auth/me', status=503)
    storage = MemoryTokenStorage('token-1')
    session = SessionStore(api, storage)

    await session.init()

    assert not session.is_authenticated
    assert storage.load() == 'token-1'

@pytest.mark.asyncio
async def test_logout_clears_even_when_server_fails(logged_in, backend):
    backend.on('POST', '/auth/logout', status=500)

    await logged_in.logout()

    assert not logged_in.is_authenticated
    assert logged_in.storage.load() is None
    assert logged_in.api.token is None

@pytest.mark.asyncio
async def test_social_login_completes_with_callback_token(session, backend):
    backend.on('GET', '/auth/me', body={'id': 'user-9', 'username': 'joao'})

    await session.complete_social_login('social-token')

    assert session.token == 'social-token'
    assert session.user['username'] == 'joao'

@pytest.mark.asyncio
async def test_change_password_requires_login(session):
    with pytest.raises(AuthRequiredError):
        await session.change_password('old', 'newsecret')

def test_update_user_merges_fields(logged_in):
    logged_in.update_user(bio='Cat person')
    assert logged_in.user['bio'] == 'Cat person'
    assert logged_in.user['username'] == 'ana'

def test_listener_can_unsubscribe(session):
    seen = []
    unsubscribe = session.add_listener(lambda s: seen.append(1))
    unsubscribe()
    session.start_session('t', {'id': 'u'})
    assert seen == []

def test_file_storage_round_trip(tmp_path):
    storage = FileTokenStorage(str(tmp_path / 'nested' / 'session.json'))

    assert storage.load() is None
    storage.save('token-1')
    assert FileTokenStorage(str(tmp_path / 'nested' / 'session.json')).load() == 'token-1'
    storage.clear()
    assert storage.load() is None
