# yaopets/api/users/services.py
import logging
from typing import Optional, Dict, Any, List, Tuple
from firebase_admin import firestore

from yaopets.models.follow import Follow, follow_doc_id
from yaopets.services.base import BaseFirestoreService
from yaopets.services.storage_service import StorageService, owns_path
from yaopets.utils.datetime_utils import DateTimeUtils

# 프로필에서 사용자가 직접 수정할 수 있는 필드
EDITABLE_PROFILE_FIELDS = ('name', 'bio', 'city', 'website')

class UserService(BaseFirestoreService):
    """
    사용자 프로필과 팔로우 관계를 담당하는 서비스 클래스.
    """
    def __init__(self, storage_service: Optional[StorageService] = None, db=None):
        super().__init__(db)
        self.storage_service = storage_service

    def is_following(self, follower_id: Optional[str], followee_id: str) -> bool:
        if not follower_id or follower_id == followee_id:
            return False
        return self.follows_ref.document(follow_doc_id(follower_id, followee_id)).get().exists

    def count_followers(self, user_id: str) -> int:
        return self._count(self.follows_ref.where('followee_id', '==', user_id))

    def count_following(self, user_id: str) -> int:
        return self._count(self.follows_ref.where('follower_id', '==', user_id))

    def get_user_profile(self, user_id: str, viewer_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        공개 프로필 정보와 팔로워/팔로잉/게시물 수를 함께 조회합니다.
        is_following 값은 조회하는 사용자(viewer) 기준으로 서버에서 계산합니다.
        """
        user_data = self._get_user(user_id)
        if not user_data:
            return None

        user_data['followers_count'] = self.count_followers(user_id)
        user_data['following_count'] = self.count_following(user_id)
        user_data['posts_count'] = self._count(self.posts_ref.where('user_id', '==', user_id))
        user_data['is_following'] = self.is_following(viewer_id, user_id)
        return user_data

    def update_profile(self, user_id: str, fields_to_update: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """이름/소개/도시/웹사이트 중 전달된 필드만 수정합니다."""
        user_ref = self.users_ref.document(user_id)
        if not user_ref.get().exists:
            return None

        update_data = {k: v for k, v in fields_to_update.items() if k in EDITABLE_PROFILE_FIELDS}
        if update_data:
            update_data['updated_at'] = DateTimeUtils.now()
            user_ref.update(update_data)
        return user_ref.get().to_dict()

    def update_profile_image(self, user_id: str, file_path: str) -> Optional[str]:
        """업로드된 파일을 공개로 전환하고 프로필 이미지 URL로 저장합니다."""
        user_ref = self.users_ref.document(user_id)
        user_doc = user_ref.get()
        if not user_doc.exists:
            return None
        if not owns_path(user_id, file_path, "user_profile"):
            raise PermissionError("본인의 프로필 이미지 경로만 사용할 수 있습니다.")

        public_url = self.storage_service.make_public_and_get_url(file_path)
        previous_url = user_doc.to_dict().get('profile_image')
        user_ref.update({'profile_image': public_url, 'updated_at': DateTimeUtils.now()})

        if previous_url and previous_url != public_url:
            self.storage_service.delete_by_url(previous_url)
        return public_url

    # --- 팔로우 ---
    def _relationship_page(self, field: str, other_field: str, user_id: str, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        query = self.follows_ref.where(field, '==', user_id).order_by('created_at', direction=firestore.Query.DESCENDING)
        edges, total = self._page(query, limit, offset)
        users = self._get_users_by_ids([edge.get(other_field) for edge in edges])
        return users, total

    def get_followers(self, user_id: str, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """user_id를 팔로우하는 사용자 목록과 전체 수를 반환합니다."""
        return self._relationship_page('followee_id', 'follower_id', user_id, limit, offset)

    def get_following(self, user_id: str, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """user_id가 팔로우하는 사용자 목록과 전체 수를 반환합니다."""
        return self._relationship_page('follower_id', 'followee_id', user_id, limit, offset)

    def follow(self, follower_id: str, followee_id: str) -> int:
        """
        팔로우 관계를 생성합니다. 이미 팔로우 중이면 아무것도 하지 않습니다.
        :return: 대상 사용자의 팔로워 수
        """
        if follower_id == followee_id:
            raise PermissionError("자기 자신은 팔로우할 수 없습니다.")
        if not self.users_ref.document(followee_id).get().exists:
            raise ValueError("팔로우할 사용자를 찾을 수 없습니다.")

        follow_ref = self.follows_ref.document(follow_doc_id(follower_id, followee_id))
        transaction = self.db.transaction()

        @firestore.transactional
        def _create_in_transaction(transaction):
            if follow_ref.get(transaction=transaction).exists:
                return False
            follow = Follow(follower_id=follower_id, followee_id=followee_id)
            transaction.set(follow_ref, follow.__dict__.copy())
            return True

        created = _create_in_transaction(transaction)
        if created:
            logging.info(f"팔로우 생성: {follower_id} -> {followee_id}")
        return self.count_followers(followee_id)

    def unfollow(self, follower_id: str, followee_id: str) -> int:
        """팔로우 관계를 삭제합니다. 관계가 없으면 아무것도 하지 않습니다."""
        if follower_id == followee_id:
            raise PermissionError("자기 자신은 언팔로우할 수 없습니다.")
        self.follows_ref.document(follow_doc_id(follower_id, followee_id)).delete()
        return self.count_followers(followee_id)
