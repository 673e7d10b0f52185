import copy
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from rentalhub.api.deps import mongo_db
from rentalhub.domain.repositories.product_repo import ProductRepo
from rentalhub.domain.services.auth_service import LocalAuthService
from rentalhub.domain.services.session_gate import SessionGate


# ============================================================
# In-memory stand-in for a Motor collection
# ============================================================

def _matches(doc, query):
    for field, cond in query.items():
        value = doc.get(field)
        if isinstance(cond, dict):
            if "$ne" in cond and value == cond["$ne"]:
                return False
            if "$nin" in cond and value in cond["$nin"]:
                return False
        elif value != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def skip(self, n):
        self._skip = n
        return self

    def limit(self, n):
        self._limit = n
        return self

    def _window(self):
        docs = self._docs[self._skip:]
        return docs[: self._limit] if self._limit else docs

    def __aiter__(self):
        self._iter = iter(self._window())
        return self

    async def __anext__(self):
        try:
            return copy.deepcopy(next(self._iter))
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """Keeps insertion order; records every find() so tests can check query shapes."""

    def __init__(self):
        self.docs = []
        self.find_calls = []

    async def find_one(self, query):
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query):
        call = {"query": query}
        self.find_calls.append(call)
        cursor = FakeCursor([d for d in self.docs if _matches(d, query)])
        original_limit = cursor.limit

        def limit(n):
            call["limit"] = n
            return original_limit(n)

        cursor.limit = limit
        return cursor

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    async def insert_one(self, doc):
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc.get("_id"))


class FakeDB:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    async def command(self, name):
        return {"ok": 1}


def product_doc(pid, category=None, **fields):
    doc = {"_id": pid, "productName": f"Product {pid}", "price": 10.0}
    if category is not None:
        doc["category"] = category
    doc.update(fields)
    return doc


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def fake_db():
    return FakeDB()


@pytest.fixture
def products(fake_db):
    """The `products` collection; tests append documents to `.docs`."""
    return fake_db["products"]


@pytest.fixture
def repo(fake_db):
    return ProductRepo(fake_db)


@pytest.fixture
def storefront(fake_db):
    """
    App wired to the fake store with a fresh auth service and session gate.
    The lifespan is not run: the gate starts in `checking` until the test
    restores or signs in.
    """
    from rentalhub.main import create_app

    app = create_app()
    auth = LocalAuthService()
    gate = SessionGate(auth).init()
    app.state.auth_service = auth
    app.state.session_gate = gate
    app.dependency_overrides[mongo_db] = lambda: fake_db

    client = TestClient(app)
    yield SimpleNamespace(app=app, client=client, auth=auth, gate=gate, db=fake_db)
    gate.dispose()
    app.dependency_overrides.clear()
