# yaopets/services/base.py
"""
Firestore를 사용하는 도메인 서비스들의 기본 클래스
공통 컬렉션 참조와 조회/집계 헬퍼를 제공합니다.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from firebase_admin import firestore

logger = logging.getLogger(__name__)

# Firestore 'in' 쿼리는 한 번에 30개까지만 허용합니다.
IN_QUERY_CHUNK = 30

# WriteBatch 하나에는 최대 500개의 쓰기만 담을 수 있습니다.
BATCH_WRITE_LIMIT = 450

def like_transition(liked: bool, exists: bool, count: int) -> Tuple[Optional[str], int]:
    """
    좋아요 요청 값(liked)과 좋아요 문서 존재 여부로 (쓰기 종류, 변경 후 좋아요 수)를 계산합니다.
    쓰기 종류는 'set', 'delete' 또는 None(변경 없음)이며, 좋아요 수는 0 미만으로 내려가지 않습니다.
    """
    count = max(0, count or 0)
    if liked and not exists:
        return 'set', count + 1
    if not liked and exists:
        return 'delete', max(0, count - 1)
    return None, count

class ConflictError(Exception):
    """이미 존재하는 리소스(이메일, 사용자명 등)와 충돌할 때 발생합니다."""


class BaseFirestoreService:
    """
    모든 Firestore 서비스가 상속받는 기본 클래스.
    테스트에서는 db 인자로 대체 클라이언트를 주입할 수 있습니다.
    """

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.posts_ref = self.db.collection('posts')
        self.comments_ref = self.db.collection('comments')
        self.likes_ref = self.db.collection('likes')
        self.saves_ref = self.db.collection('saves')
        self.follows_ref = self.db.collection('follows')

    @staticmethod
    def _count(query) -> int:
        """문서를 모두 읽지 않고 count() 집계로 개수만 가져옵니다."""
        try:
            result = query.count().get()
            return result[0][0].value
        except Exception as e:
            logger.error(f"문서 수 집계 실패: {e}", exc_info=True)
            return 0

    def _page(self, query, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
        """offset 기반으로 한 페이지를 조회하고 전체 개수를 함께 반환합니다."""
        total = self._count(query)
        docs = query.offset(offset).limit(limit).stream()
        return [doc.to_dict() for doc in docs], total

    def _delete_in_batches(self, refs: Iterable) -> int:
        """문서 참조들을 BATCH_WRITE_LIMIT개씩 나누어 커밋하며 삭제하고, 삭제한 문서 수를 반환합니다."""
        deleted = 0
        batch, pending = self.db.batch(), 0
        for ref in refs:
            batch.delete(ref)
            pending += 1
            if pending == BATCH_WRITE_LIMIT:
                batch.commit()
                deleted += pending
                batch, pending = self.db.batch(), 0
        if pending:
            batch.commit()
            deleted += pending
        return deleted

    def _comment_like_refs(self, comment_ids: List[str]):
        """댓글 좋아요 문서(comment_id 필드 기준) 참조를 모읍니다."""
        for i in range(0, len(comment_ids), IN_QUERY_CHUNK):
            for like_doc in self.likes_ref.where('comment_id', 'in', comment_ids[i:i + IN_QUERY_CHUNK]).stream():
                yield like_doc.reference

    def _existing_doc_ids(self, collection_ref, doc_ids: List[str]) -> Set[str]:
        """주어진 문서 ID 중 실제로 존재하는 것들의 집합을 반환합니다."""
        found = set()
        for i in range(0, len(doc_ids), IN_QUERY_CHUNK):
            chunk = doc_ids[i:i + IN_QUERY_CHUNK]
            refs = [collection_ref.document(doc_id) for doc_id in chunk]
            for snapshot in self.db.get_all(refs):
                if snapshot.exists:
                    found.add(snapshot.id)
        return found

    def _get_users_by_ids(self, user_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """사용자 ID 목록 순서를 유지하며 사용자 문서를 일괄 조회합니다."""
        ids = [uid for uid in user_ids if uid]
        users_by_id = {}
        for i in range(0, len(ids), IN_QUERY_CHUNK):
            refs = [self.users_ref.document(uid) for uid in ids[i:i + IN_QUERY_CHUNK]]
            for snapshot in self.db.get_all(refs):
                if snapshot.exists:
                    users_by_id[snapshot.id] = snapshot.to_dict()
        return [users_by_id[uid] for uid in ids if uid in users_by_id]

    def _get_user(self, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not user_id:
            return None
        doc = self.users_ref.document(user_id).get()
        return doc.to_dict() if doc.exists else None
