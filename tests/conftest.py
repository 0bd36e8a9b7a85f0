import copy
import uuid

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as gexc
from google.cloud.firestore import GeoPoint

from aidrelief.firebase_admin_client import get_db
from aidrelief.settings import settings


class FakeSnapshot:
    def __init__(self, reference, data, update_time=None):
        self.reference = reference
        self.id = reference.id
        self.update_time = update_time
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeWriteOption:
    def __init__(self, last_update_time):
        self.last_update_time = last_update_time


class FakeDocRef:
    def __init__(self, client, collection, doc_id):
        self._client = client
        self._collection = collection
        self.id = doc_id

    @property
    def _docs(self):
        return self._client.data.setdefault(self._collection, {})

    @property
    def _key(self):
        return (self._collection, self.id)

    def get(self, **kwargs):
        self._client.record("get", kwargs)
        data = copy.deepcopy(self._docs.get(self.id))
        return FakeSnapshot(self, data, self._client.versions.get(self._key, 0) if data is not None else None)

    def set(self, data, **kwargs):
        self._client.record("set", kwargs)
        self._docs[self.id] = copy.deepcopy(data)
        self._client.touch(self._key)

    def update(self, data, **kwargs):
        self._client.record("update", kwargs)
        if self.id not in self._docs:
            raise gexc.NotFound(f"No document to update: {self._collection}/{self.id}")
        self._docs[self.id].update(copy.deepcopy(data))
        self._client.touch(self._key)

    def delete(self, **kwargs):
        self._client.record("delete", kwargs)
        self._docs.pop(self.id, None)
        self._client.touch(self._key)


class FakeQuery:
    def __init__(self, collection, count):
        self._collection = collection
        self._count = count

    def get(self, **kwargs):
        return list(self._collection.stream(**kwargs))[: self._count]


class FakeCollection:
    def __init__(self, client, name):
        self._client = client
        self.name = name

    def document(self, doc_id=None):
        return FakeDocRef(self._client, self.name, doc_id or uuid.uuid4().hex[:20])

    def limit(self, count):
        return FakeQuery(self, count)

    def stream(self, **kwargs):
        self._client.record("stream", kwargs)
        for doc_id, data in list(self._client.data.get(self.name, {}).items()):
            yield FakeSnapshot(self.document(doc_id), copy.deepcopy(data),
                               self._client.versions.get((self.name, doc_id), 0))


class FakeBatch:
    """Write batch applying all ops or none, honouring ``last_update_time``."""

    def __init__(self, client):
        self._client = client
        self.ops = []

    def update(self, ref, data, option=None):
        self.ops.append(("update", ref, data, option))

    def delete(self, ref, option=None):
        self.ops.append(("delete", ref, None, option))

    def commit(self, **kwargs):
        self._client.record("commit", kwargs)
        hook, self._client.before_commit = self._client.before_commit, None
        if hook is not None:
            hook()
        if self._client.fail_commit:
            raise gexc.ServiceUnavailable("commit failed")
        for op, ref, _, option in self.ops:
            exists = ref.id in ref._docs
            if option is not None:
                if not exists or self._client.versions.get(ref._key, 0) != option.last_update_time:
                    raise gexc.FailedPrecondition(f"Document changed since read: {ref.id}")
            if op == "update" and not exists:
                raise gexc.NotFound(f"No document to update: {ref.id}")
        for op, ref, data, _ in self.ops:
            if op == "update":
                ref._docs[ref.id].update(copy.deepcopy(data))
            else:
                ref._docs.pop(ref.id, None)
            self._client.touch(ref._key)
        self._client.commits += 1


class FakeFirestore:
    """In-memory stand-in for the Firestore client used by the stores."""

    def __init__(self):
        self.data = {}
        self.versions = {}
        self.calls = []
        self.commits = 0
        self.unavailable = False
        self.fail_commit = False
        # called once inside the next commit, after the caller's reads
        self.before_commit = None

    def record(self, op, kwargs):
        if self.unavailable:
            raise gexc.ServiceUnavailable("firestore down")
        self.calls.append((op, kwargs))

    def touch(self, key):
        self.versions[key] = self.versions.get(key, 0) + 1

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)

    @staticmethod
    def write_option(last_update_time=None):
        return FakeWriteOption(last_update_time)

    def doc(self, collection, doc_id):
        return copy.deepcopy(self.data.get(collection, {}).get(doc_id))


def add_request(db, request_id, title, category="Food", severity="Moderate",
                needed_by="2024-05-01", status="Pending", lat=10.0, lng=20.0, **extra):
    data = {
        "requestTitle": title,
        "requestDescription": f"{title} needed",
        "category": category,
        "severity": severity,
        "neededBy": needed_by,
        "contact": "555-0100",
        "location": GeoPoint(lat, lng),
        "status": status,
    }
    data.update(extra)
    db.data.setdefault(settings.REQUESTS_COLLECTION, {})[request_id] = data
    return data


def add_warehouse(db, warehouse_id, name, lat=1.0, lng=2.0, requests=None):
    data = {"name": name, "location": GeoPoint(lat, lng), "requests": list(requests or [])}
    db.data.setdefault(settings.WAREHOUSES_COLLECTION, {})[warehouse_id] = data
    return data


@pytest.fixture()
def db():
    return FakeFirestore()


@pytest.fixture()
def seeded(db):
    add_warehouse(db, "W1", "North Depot")
    add_warehouse(db, "W2", "Harbor Depot", lat=3.0, lng=4.0)
    add_request(db, "R1", "Water", category="Water", severity="High", needed_by="2024-05-03")
    add_request(db, "R2", "Rice", category="Food", severity="Low", needed_by="2024-05-01", status="Started")
    add_request(db, "R3", "Blankets", category="Shelter", severity="Moderate", needed_by="2024-05-02")
    return db


@pytest.fixture()
def client(seeded, monkeypatch):
    from aidrelief.main import app

    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "")
    app.dependency_overrides[get_db] = lambda: seeded
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
