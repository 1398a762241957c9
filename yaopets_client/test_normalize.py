# yaopets_client/test_normalize.py
from yaopets_client.normalize import (
    extract_collection, extract_total, normalize_id, normalize_user, normalize_post,
    normalize_comment, normalize_pet, normalize_donation
)

def test_id_from_either_key():
    assert normalize_id({'id': 7}) == '7'
    assert normalize_id({'_id': 'abc'}) == 'abc'
    assert normalize_id({}) is None
    assert normalize_id(None) is None

def test_collection_from_bare_list_or_wrapper():
    assert extract_collection([1, 2], 'users') == [1, 2]
    assert extract_collection({'users': [1]}, 'users') == [1]
    # 이름이 다른 래퍼도 목록으로 취급합니다.
    assert extract_collection({'posts': [1, 2, 3], 'pagination': {'total': 3}}, 'users') == [1, 2, 3]
    assert extract_collection(None, 'users') == []

def test_total_prefers_pagination_over_page_length():
    data = {'posts': [{'id': 1}, {'id': 2}], 'pagination': {'total': 57}}
    assert extract_total(data, 'users') == 57

def test_total_fallbacks():
    assert extract_total({'comments': [1, 2], 'total': 9}, 'comments') == 9
    assert extract_total([1, 2, 3], 'users') == 3
    assert extract_total({}, 'users') == 0

def test_post_defaults():
    post = normalize_post({'_id': 10, 'userId': 'u1', 'likesCount': -2})

    assert post['id'] == '10'
    assert post['user'] == {'id': 'u1', 'username': 'User', 'profile_image': ''}
    assert post['user_id'] == 'u1'
    assert post['media_type'] == 'image'
    assert post['visibility_type'] == 'public'
    assert post['post_type'] == 'regular'
    assert post['media_urls'] == []
    assert post['likes_count'] == 0
    assert post['is_liked'] is False
    assert post['is_saved'] is False

def test_post_with_author():
    post = normalize_post({'id': 'p1', 'user': {'id': 'u2', 'username': 'bia', 'profileImage': 'https://img'},
                           'mediaUrls': ['https://a.jpg'], 'mediaType': 'video', 'isLiked': True, 'likesCount': 4})

    assert post['user']['username'] == 'bia'
    assert post['user']['profile_image'] == 'https://img'
    assert post['media_type'] == 'video'
    assert post['is_liked'] is True
    assert post['likes_count'] == 4

def test_user_defaults():
    user = normalize_user({'_id': 'u1'})

    assert user['id'] == 'u1'
    assert user['username'] == 'User'
    assert user['user_type'] == 'tutor'
    assert user['level'] == 'Beginner'
    assert user['is_following'] is False

def test_comment():
    comment = normalize_comment({'id': 'c1', 'postId': 'p1', 'userId': 'u1', 'content': 'oi', 'isLiked': True})

    assert comment['user']['id'] == 'u1'
    assert comment['post_id'] == 'p1'
    assert comment['is_liked'] is True

def test_pet_status_label_and_defaults():
    pet = normalize_pet({'id': 'pet-1', 'status': 'lost', 'ownerId': 'u1'})

    assert pet['status_label'] == 'Lost'
    assert pet['size'] == 'Medium'
    assert pet['address'] == 'Not informed'
    assert pet['owner_id'] == 'u1'

def test_pet_with_unknown_status_is_treated_as_adoption():
    pet = normalize_pet({'id': 'pet-1', 'status': 'sold', 'photos': ['https://p.jpg']})

    assert pet['status'] == 'adoption'
    assert pet['status_label'] == 'Available'
    assert pet['image_url'] == 'https://p.jpg'

def test_donation_flattens_location():
    donation = normalize_donation({'id': 'd1', 'title': 'Ração', 'donorId': 'u1',
                                   'location': {'address': 'Olinda'}, 'photos': []})

    assert donation['location'] == 'Olinda'
    assert donation['donor_name'] == 'Anonymous'
    assert donation['donor_id'] == 'u1'
    assert donation['image'] is None
