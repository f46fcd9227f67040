"""
Shared fixtures: an in-memory stand-in for the bits of the Firestore client
the migrator uses (collection queries with cursors, batched updates).
"""
import copy

import pytest
from google.api_core import exceptions as gexc


class FakeDocRef:
    def __init__(self, coll, doc_id):
        self.collection = coll
        self.id = doc_id
        self.path = f"{coll.id}/{doc_id}"


class FakeSnapshot:
    def __init__(self, ref, data):
        self.reference = ref
        self.id = ref.id
        self._data = data

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeQuery:
    def __init__(self, coll, limit=None, after=None):
        self._coll = coll
        self._limit = limit
        self._after = after

    def limit(self, n):
        return FakeQuery(self._coll, n, self._after)

    def start_after(self, snap):
        return FakeQuery(self._coll, self._limit, snap.id)

    def get(self):
        db = self._coll.db
        db.reads += 1
        if db.fail_read_on is not None and db.reads == db.fail_read_on:
            raise gexc.ServiceUnavailable("firestore unavailable")
        docs = db.data.get(self._coll.id, {})
        ids = sorted(i for i in docs if self._after is None or i > self._after)
        if self._limit is not None:
            ids = ids[: self._limit]
        return [FakeSnapshot(FakeDocRef(self._coll, i), docs[i]) for i in ids]

    def stream(self):
        return iter(self.get())


class FakeCollection:
    def __init__(self, db, name):
        self.db = db
        self.id = name

    def order_by(self, field_path):
        assert field_path == "__name__"
        return FakeQuery(self)

    def document(self, doc_id):
        return FakeDocRef(self, doc_id)

    def get(self):
        return FakeQuery(self).get()


class FakeBatch:
    def __init__(self, db):
        self._db = db
        self._writes = []

    def update(self, ref, fields):
        self._writes.append((ref, dict(fields)))

    def commit(self):
        db = self._db
        db.commit_attempts += 1
        if db.commit_attempts in db.fail_commit_on:
            raise gexc.Aborted("batch aborted")
        if len(self._writes) > 500:
            raise gexc.InvalidArgument("maximum 500 writes allowed per request")
        for ref, _ in self._writes:
            if ref.id not in db.data.get(ref.collection.id, {}):
                raise gexc.NotFound(f"No document to update: {ref.path}")
        # all checks passed: apply every write or none
        for ref, fields in self._writes:
            db.data[ref.collection.id][ref.id].update(fields)
        db.commits.append(len(self._writes))


class FakeFirestore:
    def __init__(self, data=None):
        self.data = copy.deepcopy(data or {})
        self.reads = 0
        self.commits = []           # write count per successful commit
        self.commit_attempts = 0
        self.fail_commit_on = set() # 1-based commit attempts that raise
        self.fail_read_on = None    # 1-based page read that raises

    def collection(self, name):
        return FakeCollection(self, name)

    def batch(self):
        return FakeBatch(self)


@pytest.fixture
def make_db():
    return FakeFirestore


@pytest.fixture
def vehicles_db():
    """Three vehicles, one already carrying a maintenance figure."""
    return FakeFirestore({
        "vehicles": {
            "civic": {"make": "Honda", "model": "Civic", "year": 2019},
            "golf": {"make": "VW", "model": "Golf", "monthly_maintenance": 5.0},
            "model3": {"make": "Tesla", "model": "Model 3", "owner": {"name": "Ana"}},
        }
    })
