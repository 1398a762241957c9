# yaopets/services/test_base_service.py
import pytest

from yaopets.services.base import BaseFirestoreService, BATCH_WRITE_LIMIT, like_transition


@pytest.mark.parametrize("liked, exists, count, expected", [
    (True, False, 3, ('set', 4)),
    (True, True, 3, (None, 3)),        # 이미 좋아요 상태면 쓰기 없음
    (False, True, 3, ('delete', 2)),
    (False, False, 3, (None, 3)),      # 좋아요 문서가 없으면 쓰기 없음
    (False, True, 0, ('delete', 0)),   # 0 미만으로 내려가지 않음
    (True, False, None, ('set', 1)),
    (False, False, -2, (None, 0)),
])
def test_like_transition(liked, exists, count, expected):
    assert like_transition(liked, exists, count) == expected

def test_like_then_unlike_returns_to_original_count():
    write, count = like_transition(True, False, 7)
    assert write == 'set'
    assert like_transition(False, True, count) == ('delete', 7)

def test_delete_in_batches_respects_write_limit(firestore_db, doc_factory):
    batches = firestore_db.track_batches()
    service = BaseFirestoreService(db=firestore_db.client)
    refs = [doc_factory(f"d{i}").reference for i in range(BATCH_WRITE_LIMIT + 150)]

    assert service._delete_in_batches(refs) == len(refs)

    assert len(batches) == 2
    assert batches[0].delete.call_count == BATCH_WRITE_LIMIT
    assert batches[1].delete.call_count == 150
    for batch in batches:
        batch.commit.assert_called_once()
        assert batch.delete.call_count < 500

def test_delete_in_batches_with_nothing_to_delete(firestore_db):
    batches = firestore_db.track_batches()
    service = BaseFirestoreService(db=firestore_db.client)

    assert service._delete_in_batches([]) == 0
    assert all(not b.commit.called for b in batches)
