# conftest.py
"""
공용 pytest 픽스처

Firestore 대신 메모리 기반 가짜 클라이언트를 create_app(db=...)에 주입해
Firebase 인증 파일 없이 API 전체를 테스트합니다.
"""
import copy
import uuid

import pytest
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import NotFound, ServiceUnavailable

from plant_care import create_app
from plant_care.core.config import TestingConfig


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def _check(self):
        if self._store.client.unavailable:
            raise ServiceUnavailable("firestore unavailable")

    def get(self):
        self._check()
        return FakeSnapshot(self.id, self._store.docs.get(self.id))

    def set(self, data):
        self._check()
        self._store.docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        self._check()
        if self.id not in self._store.docs:
            raise NotFound(f"No document to update: {self.id}")
        self._store.docs[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._check()
        self._store.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, filters=None, limit=None):
        self._store = store
        self._filters = filters or []
        self._limit = limit

    def where(self, field, op, value):
        assert op == '==', "가짜 클라이언트는 '==' 조건만 지원합니다."
        return FakeQuery(self._store, self._filters + [(field, value)], self._limit)

    def limit(self, count):
        return FakeQuery(self._store, self._filters, count)

    def stream(self):
        if self._store.client.unavailable:
            raise ServiceUnavailable("firestore unavailable")
        results = [
            FakeSnapshot(doc_id, copy.deepcopy(data))
            for doc_id, data in self._store.docs.items()
            if all(data.get(field) == value for field, value in self._filters)
        ]
        if self._limit is not None:
            results = results[:self._limit]
        return iter(results)


class FakeCollection(FakeQuery):
    def __init__(self, client):
        self.client = client
        self.docs = {}
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentRef(self, doc_id or str(uuid.uuid4()))


class FakeFirestore:
    """firestore.client()가 반환하는 Client 중 이 프로젝트가 사용하는 부분만 흉내냅니다."""
    def __init__(self):
        self.collections = {}
        self.unavailable = False

    def collection(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(self)
        return self.collections[name]


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def app(fake_db, tmp_path, monkeypatch):
    monkeypatch.setattr(TestingConfig, 'UPLOAD_FOLDER', str(tmp_path / 'uploads'))
    return create_app('testing', db=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_auth_headers(app):
    def _make(user_id='user-1'):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def auth_headers(make_auth_headers):
    return make_auth_headers('user-1')
