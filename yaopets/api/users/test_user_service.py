# yaopets/api/users/test_user_service.py
from unittest.mock import MagicMock

import pytest

from yaopets.api.users.services import UserService


def test_update_profile_ignores_non_editable_fields(firestore_db):
    firestore_db.set_document('users', {'user_id': 'user-1', 'bio': 'new'})
    service = UserService(db=firestore_db.client)

    service.update_profile('user-1', {'bio': 'new', 'points': 1000, 'verified': True})

    update = firestore_db.collection('users').document.return_value.update.call_args[0][0]
    assert update['bio'] == 'new'
    assert 'points' not in update
    assert 'verified' not in update
    assert 'updated_at' in update

def test_update_profile_of_missing_user(firestore_db):
    firestore_db.set_document('users', None)
    service = UserService(db=firestore_db.client)

    assert service.update_profile('ghost', {'bio': 'x'}) is None

def test_profile_image_must_be_in_own_folder(firestore_db):
    firestore_db.set_document('users', {'user_id': 'user-1'})
    storage = MagicMock()
    service = UserService(storage_service=storage, db=firestore_db.client)

    with pytest.raises(PermissionError):
        service.update_profile_image('user-1', 'user_profiles/user-2/photo.jpg')
    storage.make_public_and_get_url.assert_not_called()

def test_profile_image_replaces_previous_file(firestore_db):
    firestore_db.set_document('users', {'user_id': 'user-1', 'profile_image': 'https://cdn/old.jpg'})
    storage = MagicMock()
    storage.make_public_and_get_url.return_value = 'https://cdn/new.jpg'
    service = UserService(storage_service=storage, db=firestore_db.client)

    url = service.update_profile_image('user-1', 'user_profiles/user-1/new.jpg')

    assert url == 'https://cdn/new.jpg'
    storage.delete_by_url.assert_called_once_with('https://cdn/old.jpg')

def test_follow_self_is_rejected(firestore_db):
    service = UserService(db=firestore_db.client)

    with pytest.raises(PermissionError):
        service.follow('user-1', 'user-1')
    with pytest.raises(PermissionError):
        service.unfollow('user-1', 'user-1')

def test_follow_missing_user(firestore_db):
    firestore_db.set_document('users', None)
    service = UserService(db=firestore_db.client)

    with pytest.raises(ValueError):
        service.follow('user-1', 'ghost')

def test_anonymous_viewer_is_never_following(firestore_db):
    service = UserService(db=firestore_db.client)

    assert service.is_following(None, 'user-2') is False
    assert service.is_following('user-2', 'user-2') is False
