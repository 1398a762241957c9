# yaopets/conftest.py
from unittest.mock import MagicMock

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token

from yaopets import create_app

SERVICE_NAMES = ('storage', 'payments', 'oauth', 'auth', 'users', 'posts', 'comments', 'pets', 'donations')

# --- 라우트 테스트용 ---
@pytest.fixture
def services():
    """Firestore 없이 라우트만 검증하기 위한 서비스 목(mock) 묶음"""
    mocks = {name: MagicMock(name=f"{name}_service") for name in SERVICE_NAMES}
    mocks['auth'].is_token_revoked.return_value = False
    return mocks

@pytest.fixture
def app(services):
    return create_app('testing', services=services)

@pytest.fixture
def client(app):
    return app.test_client()

@pytest.fixture
def auth_headers(app):
    def _make(user_id: str = "user-1"):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make


# --- 서비스 테스트용 ---
class FakeFirestore:
    """컬렉션 이름별로 독립된 MagicMock을 돌려주는 Firestore 클라이언트 대역"""

    def __init__(self):
        self.client = MagicMock(name="firestore_client")
        self.collections = {}
        self.query_results = {}
        self.client.collection.side_effect = self.collection

    def collection(self, name: str):
        if name not in self.collections:
            self.collections[name] = MagicMock(name=f"{name}_ref")
        return self.collections[name]

    def set_document(self, collection: str, data):
        """collection.document(...).get()이 data를 가진 스냅샷을 돌려주도록 설정합니다. (None이면 없는 문서)"""
        snapshot = MagicMock()
        snapshot.exists = data is not None
        snapshot.to_dict.return_value = dict(data) if data is not None else None
        self.collection(collection).document.return_value.get.return_value = snapshot
        return snapshot

    def set_query(self, collection: str, field: str, docs):
        """collection.where(field, ...).stream()이 docs를 돌려주도록 설정합니다. 설정하지 않은 필드는 빈 결과입니다."""
        results = self.query_results.setdefault(collection, {})
        results[field] = list(docs)

        def where(field_name, op, value):
            query = MagicMock(name=f"{collection}_where_{field_name}")
            query.stream.return_value = iter(results.get(field_name, []))
            return query

        self.collection(collection).where.side_effect = where

    def track_batches(self):
        """batch() 호출마다 새 WriteBatch 대역을 만들고, 그 목록을 반환합니다."""
        batches = []

        def new_batch():
            batches.append(MagicMock(name=f"batch_{len(batches)}"))
            return batches[-1]

        self.client.batch.side_effect = new_batch
        return batches

    @property
    def transaction(self):
        return self.client.transaction.return_value

def make_doc(doc_id: str, data=None):
    """stream() 결과로 쓰이는 문서 스냅샷 대역"""
    doc = MagicMock(name=f"doc_{doc_id}")
    doc.id = doc_id
    doc.reference = MagicMock(name=f"ref_{doc_id}")
    doc.to_dict.return_value = dict(data or {})
    return doc

@pytest.fixture
def firestore_db():
    return FakeFirestore()

@pytest.fixture
def plain_transactions(monkeypatch):
    """@firestore.transactional 을 그대로 호출하는 함수로 바꿔 트랜잭션 본문을 직접 실행합니다."""
    monkeypatch.setattr(firestore, 'transactional', lambda fn: fn)

@pytest.fixture
def doc_factory():
    return make_doc
