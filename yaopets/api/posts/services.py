# yaopets/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, Tuple, List
from firebase_admin import firestore

from yaopets.models.post import Post, Author
from yaopets.services.base import BaseFirestoreService, IN_QUERY_CHUNK, like_transition
from yaopets.services.storage_service import StorageService
from yaopets.utils.datetime_utils import DateTimeUtils

def post_like_id(user_id: str, post_id: str) -> str:
    return f"post_{user_id}_{post_id}"

def save_id(user_id: str, post_id: str) -> str:
    return f"{user_id}_{post_id}"

class PostService(BaseFirestoreService):
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    좋아요/저장 여부(is_liked, is_saved)는 항상 요청한 사용자 기준으로 서버에서 계산합니다.
    """
    def __init__(self, storage_service: Optional[StorageService] = None, db=None):
        super().__init__(db)
        self.storage_service = storage_service

    # --- 조회 보조 ---
    def _apply_viewer_flags(self, posts: List[Dict[str, Any]], viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        """게시글 목록에 조회자 기준 is_liked / is_saved 값을 일괄로 채웁니다."""
        if not viewer_id or not posts:
            for post in posts:
                post['is_liked'] = False
                post['is_saved'] = False
            return posts

        post_ids = [p['post_id'] for p in posts]
        liked = self._existing_doc_ids(self.likes_ref, [post_like_id(viewer_id, pid) for pid in post_ids])
        saved = self._existing_doc_ids(self.saves_ref, [save_id(viewer_id, pid) for pid in post_ids])
        for post in posts:
            post['is_liked'] = post_like_id(viewer_id, post['post_id']) in liked
            post['is_saved'] = save_id(viewer_id, post['post_id']) in saved
        return posts

    def _get_posts_by_ids(self, post_ids: List[str]) -> List[Dict[str, Any]]:
        posts_by_id = {}
        for i in range(0, len(post_ids), IN_QUERY_CHUNK):
            refs = [self.posts_ref.document(pid) for pid in post_ids[i:i + IN_QUERY_CHUNK]]
            for snapshot in self.db.get_all(refs):
                if snapshot.exists:
                    posts_by_id[snapshot.id] = snapshot.to_dict()
        return [posts_by_id[pid] for pid in post_ids if pid in posts_by_id]

    # --- CRUD ---
    def create_post(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """새로운 게시글을 생성하고 Firestore에 저장합니다."""
        user_data = self._get_user(user_id)
        if not user_data:
            raise ValueError("게시글 작성자를 찾을 수 없습니다.")

        author = Author(
            user_id=user_id,
            username=user_data.get('username'),
            profile_image=user_data.get('profile_image')
        )
        new_post = Post(
            post_id=str(uuid.uuid4()),
            user_id=user_id,
            author=author,
            content=data.get('content', ''),
            media_urls=data.get('media_urls', []),
            media_type=data.get('media_type', 'image'),
            visibility_type=data.get('visibility_type', 'public'),
            post_type=data.get('post_type', 'regular'),
            location=data.get('location')
        )
        post_data = asdict(new_post)
        self.posts_ref.document(new_post.post_id).set(post_data)
        logging.info(f"게시글 생성 완료 (post_id: {new_post.post_id}, user_id: {user_id})")

        post_data['is_liked'] = False
        post_data['is_saved'] = False
        return post_data

    def get_feed(self, viewer_id: Optional[str], limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """공개 게시글 피드를 최신순으로 조회합니다."""
        query = (self.posts_ref
                 .where('visibility_type', '==', 'public')
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        posts, total = self._page(query, limit, offset)
        return self._apply_viewer_flags(posts, viewer_id), total

    def get_post_by_id(self, post_id: str, viewer_id: Optional[str]) -> Optional[Dict[str, Any]]:
        doc = self.posts_ref.document(post_id).get()
        if not doc.exists:
            return None
        return self._apply_viewer_flags([doc.to_dict()], viewer_id)[0]

    def get_posts_by_user_id(self, author_id: str, viewer_id: Optional[str], limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """특정 사용자가 작성한 게시물 목록을 조회합니다."""
        query = (self.posts_ref
                 .where('user_id', '==', author_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        posts, total = self._page(query, limit, offset)
        return self._apply_viewer_flags(posts, viewer_id), total

    def get_saved_posts(self, user_id: str, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """사용자가 저장한 게시물을 저장한 순서(최신순)대로 조회합니다."""
        query = (self.saves_ref
                 .where('user_id', '==', user_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        saves, total = self._page(query, limit, offset)
        posts = self._get_posts_by_ids([s['post_id'] for s in saves])
        return self._apply_viewer_flags(posts, user_id), total

    def delete_post(self, post_id: str, user_id: str) -> None:
        """
        게시글을 삭제합니다. (작성자 본인만 가능)
        게시글에 달린 댓글, 좋아요, 저장 기록과 업로드된 미디어도 함께 정리합니다.
        """
        post_ref = self.posts_ref.document(post_id)
        doc = post_ref.get()
        if not doc.exists:
            raise ValueError("삭제할 게시글을 찾을 수 없습니다.")
        post_data = doc.to_dict()
        if post_data.get('user_id') != user_id:
            raise PermissionError("게시글을 삭제할 권한이 없습니다.")

        comment_docs = list(self.comments_ref.where('post_id', '==', post_id).stream())
        refs = [doc.reference for doc in comment_docs]
        refs.extend(self._comment_like_refs([doc.id for doc in comment_docs]))
        refs.extend(doc.reference for doc in self.likes_ref.where('post_id', '==', post_id).stream())
        refs.extend(doc.reference for doc in self.saves_ref.where('post_id', '==', post_id).stream())
        # 딸린 문서를 먼저 나누어 지우고, 게시글 문서는 마지막에 지웁니다.
        self._delete_in_batches(refs)
        post_ref.delete()

        if self.storage_service:
            for url in post_data.get('media_urls', []):
                self.storage_service.delete_by_url(url)
        logging.info(f"게시글 삭제 완료 (post_id: {post_id})")

    # --- 좋아요 / 저장 ---
    def set_post_like(self, user_id: str, post_id: str, liked: bool) -> int:
        """
        게시글 좋아요 상태를 지정한 값으로 맞춥니다. (멱등)
        - likes 컬렉션에 'post_{user_id}_{post_id}' 문서를 생성/삭제합니다.
        - posts 문서의 likes_count를 트랜잭션 안에서 함께 변경하며, 0 미만으로 내려가지 않습니다.
        :return: 변경 후 좋아요 수
        """
        like_ref = self.likes_ref.document(post_like_id(user_id, post_id))
        post_ref = self.posts_ref.document(post_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _update_in_transaction(transaction):
            post_doc = post_ref.get(transaction=transaction)
            if not post_doc.exists:
                raise ValueError("게시글을 찾을 수 없습니다.")
            write, count = like_transition(liked, like_ref.get(transaction=transaction).exists,
                                           post_doc.to_dict().get('likes_count', 0))
            if write is None:
                return count
            if write == 'set':
                transaction.set(like_ref, {'user_id': user_id, 'post_id': post_id, 'created_at': DateTimeUtils.now()})
            else:
                transaction.delete(like_ref)
            transaction.update(post_ref, {'likes_count': count})
            return count

        return _update_in_transaction(transaction)

    def set_post_saved(self, user_id: str, post_id: str, saved: bool) -> bool:
        """게시글 저장 상태를 지정한 값으로 맞춥니다. (멱등)"""
        if not self.posts_ref.document(post_id).get().exists:
            raise ValueError("게시글을 찾을 수 없습니다.")
        save_ref = self.saves_ref.document(save_id(user_id, post_id))
        if saved:
            if not save_ref.get().exists:
                save_ref.set({'user_id': user_id, 'post_id': post_id, 'created_at': DateTimeUtils.now()})
        else:
            save_ref.delete()
        return saved
