# yaopets/api/comments/test_comment_service.py
import pytest

from yaopets.api.comments.services import CommentService


def test_delete_comment_removes_its_likes(firestore_db, plain_transactions, doc_factory):
    """댓글 좋아요 문서(comment_id 기준)도 댓글과 함께 삭제됩니다."""
    firestore_db.set_document('comments', {'comment_id': 'c1', 'post_id': 'p1', 'user_id': 'user-1'})
    firestore_db.set_document('posts', {'post_id': 'p1', 'comments_count': 2})
    likes = [doc_factory('comment_user-2_c1'), doc_factory('comment_user-3_c1')]
    firestore_db.set_query('likes', 'comment_id', likes)
    batches = firestore_db.track_batches()
    transaction = firestore_db.transaction

    CommentService(db=firestore_db.client).delete_comment('c1', 'user-1')

    transaction.delete.assert_called_once()
    assert transaction.update.call_args[0][1] == {'comments_count': 1}
    assert [c.args[0] for c in batches[0].delete.call_args_list] == [like.reference for like in likes]
    batches[0].commit.assert_called_once()

def test_delete_comment_of_other_user_keeps_likes(firestore_db, plain_transactions):
    firestore_db.set_document('comments', {'comment_id': 'c1', 'post_id': 'p1', 'user_id': 'user-1'})
    batches = firestore_db.track_batches()

    with pytest.raises(PermissionError):
        CommentService(db=firestore_db.client).delete_comment('c1', 'user-2')
    assert batches == []

def test_comment_unlike_without_like_doc_writes_nothing(firestore_db, plain_transactions):
    firestore_db.set_document('comments', {'comment_id': 'c1', 'likes_count': 2})
    firestore_db.set_document('likes', None)
    transaction = firestore_db.transaction

    assert CommentService(db=firestore_db.client).set_comment_like('user-1', 'c1', False) == 2

    transaction.delete.assert_not_called()
    transaction.update.assert_not_called()

def test_comment_like_stores_comment_id(firestore_db, plain_transactions):
    firestore_db.set_document('comments', {'comment_id': 'c1', 'likes_count': 0})
    firestore_db.set_document('likes', None)
    transaction = firestore_db.transaction

    assert CommentService(db=firestore_db.client).set_comment_like('user-1', 'c1', True) == 1

    assert transaction.set.call_args[0][1]['comment_id'] == 'c1'
    assert transaction.update.call_args[0][1] == {'likes_count': 1}
