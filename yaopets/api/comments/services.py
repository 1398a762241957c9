# yaopets/api/comments/services.py

import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List, Tuple
from firebase_admin import firestore

from yaopets.models.comment import Comment
from yaopets.services.base import BaseFirestoreService, like_transition
from yaopets.utils.datetime_utils import DateTimeUtils

def comment_like_id(user_id: str, comment_id: str) -> str:
    return f"comment_{user_id}_{comment_id}"

class CommentService(BaseFirestoreService):
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 댓글 작성/조회/삭제와 좋아요를 처리하고, 게시글의 comments_count를 함께 관리합니다.
    """

    def create_comment(self, post_id: str, author_id: str, content: str) -> Dict[str, Any]:
        """새로운 댓글을 생성하고 게시글의 댓글 수를 1 증가시킵니다."""
        author_info = self._get_user(author_id)
        if not author_info:
            raise ValueError("댓글 작성자를 찾을 수 없습니다.")

        author_data = {
            "user_id": author_id,
            "username": author_info.get("username"),
            "profile_image": author_info.get("profile_image")
        }
        transaction = self.db.transaction()

        @firestore.transactional
        def _create_in_transaction(transaction):
            post_ref = self.posts_ref.document(post_id)
            if not post_ref.get(transaction=transaction).exists:
                raise ValueError("댓글을 작성할 게시물이 존재하지 않습니다.")

            new_comment = Comment(
                comment_id=str(uuid.uuid4()),
                post_id=post_id,
                user_id=author_id,
                author=author_data,
                content=content
            )
            transaction.set(self.comments_ref.document(new_comment.comment_id), asdict(new_comment))
            transaction.update(post_ref, {'comments_count': firestore.Increment(1)})
            return new_comment

        new_comment = _create_in_transaction(transaction)
        comment_data = asdict(new_comment)
        comment_data['is_liked'] = False
        return comment_data

    def get_comments_for_post(self, post_id: str, current_user_id: Optional[str], limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """특정 게시글의 댓글 목록을 최신순으로 조회하고 전체 댓글 수를 함께 반환합니다."""
        query = (self.comments_ref
                 .where('post_id', '==', post_id)
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        comments, total = self._page(query, limit, offset)

        liked = set()
        if current_user_id and comments:
            liked = self._existing_doc_ids(
                self.likes_ref, [comment_like_id(current_user_id, c['comment_id']) for c in comments])
        for comment in comments:
            comment['is_liked'] = bool(current_user_id) and comment_like_id(current_user_id, comment['comment_id']) in liked
        return comments, total

    def delete_comment(self, comment_id: str, user_id: str) -> None:
        """댓글을 삭제합니다. (작성자 본인만 가능)"""
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction):
            comment_ref = self.comments_ref.document(comment_id)
            comment_doc = comment_ref.get(transaction=transaction)
            if not comment_doc.exists:
                raise ValueError("삭제할 댓글이 없습니다.")
            comment_data = comment_doc.to_dict()
            if comment_data.get('user_id') != user_id:
                raise PermissionError("댓글을 삭제할 권한이 없습니다.")

            post_ref = self.posts_ref.document(comment_data.get('post_id'))
            post_doc = post_ref.get(transaction=transaction)
            transaction.delete(comment_ref)
            if post_doc.exists:
                count = post_doc.to_dict().get('comments_count', 0)
                transaction.update(post_ref, {'comments_count': max(0, count - 1)})

        _delete_in_transaction(transaction)
        # 댓글 좋아요 문서는 post_id가 없으므로 comment_id로 찾아 지웁니다.
        self._delete_in_batches(self._comment_like_refs([comment_id]))
        logging.info(f"댓글 삭제 완료 (comment_id: {comment_id})")

    def set_comment_like(self, user_id: str, comment_id: str, liked: bool) -> int:
        """
        댓글 좋아요 상태를 지정한 값으로 맞춥니다. (멱등)
        :return: 변경 후 좋아요 수
        """
        like_ref = self.likes_ref.document(comment_like_id(user_id, comment_id))
        comment_ref = self.comments_ref.document(comment_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _update_in_transaction(transaction):
            comment_doc = comment_ref.get(transaction=transaction)
            if not comment_doc.exists:
                raise ValueError("좋아요를 누를 댓글을 찾을 수 없습니다.")
            write, count = like_transition(liked, like_ref.get(transaction=transaction).exists,
                                           comment_doc.to_dict().get('likes_count', 0))
            if write is None:
                return count
            if write == 'set':
                transaction.set(like_ref, {'user_id': user_id, 'comment_id': comment_id, 'created_at': DateTimeUtils.now()})
            else:
                transaction.delete(like_ref)
            transaction.update(comment_ref, {'likes_count': count})
            return count

        return _update_in_transaction(transaction)
