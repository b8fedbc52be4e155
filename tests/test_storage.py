from datetime import datetime, timezone

import pytest

from push_relay.database import Base, make_session_factory
from push_relay.models.device_token import DeviceToken
from push_relay.models.webhook import Webhook
from push_relay.services.device_registry import DeviceRegistry
from push_relay.services.webhook_registry import WebhookRegistry
from push_relay.storage import FirestoreStore, MemoryStore, SqlStore


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, docs, key):
        self.docs = docs
        self.key = key

    def get(self):
        return FakeSnapshot(self.docs.get(self.key))

    def set(self, data):
        self.docs[self.key] = dict(data)

    def delete(self):
        self.docs.pop(self.key, None)


class FakeQuery:
    def __init__(self, docs, field_filter):
        self.docs = docs
        self.field_filter = field_filter

    def stream(self):
        assert self.field_filter.op_string == "=="
        for data in list(self.docs.values()):
            if data.get(self.field_filter.field_path) == self.field_filter.value:
                yield FakeSnapshot(data)


class FakeCollection:
    """In-process stand-in for a Firestore CollectionReference."""

    def __init__(self):
        self.docs = {}

    def document(self, key):
        return FakeDocument(self.docs, key)

    def where(self, filter=None):
        return FakeQuery(self.docs, filter)


@pytest.fixture
def session_factory(tmp_path):
    factory = make_session_factory(f"sqlite:///{tmp_path / 'relay.db'}")
    Base.metadata.create_all(bind=factory.kw["bind"])
    return factory


def test_memory_store_returns_copies():
    store = MemoryStore()
    store.set("k", {"user_id": "u1", "token": "t"})
    doc = store.get("k")
    doc["token"] = "changed"
    assert store.get("k")["token"] == "t"


def test_memory_store_query_and_delete():
    store = MemoryStore()
    store.set("a", {"user_id": "u1"})
    store.set("b", {"user_id": "u2"})
    store.set("c", {"user_id": "u1"})

    assert len(store.query("user_id", "u1")) == 2
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert store.get("a") is None


def test_sql_store_upserts_and_queries(session_factory):
    store = SqlStore(session_factory, DeviceToken)
    now = datetime.now(timezone.utc)
    store.set("u1", {"user_id": "u1", "token": "t1", "platform": "android", "registered_at": now, "updated_at": now})
    store.set("u1", {"user_id": "u1", "token": "t2", "platform": "android", "registered_at": now, "updated_at": now})

    doc = store.get("u1")
    assert doc["token"] == "t2"
    assert store.query("platform", "android") == [doc]
    assert store.delete("u1") is True
    assert store.delete("u1") is False
    assert store.get("u1") is None


def test_registries_run_on_sql_backend(session_factory):
    devices = DeviceRegistry(SqlStore(session_factory, DeviceToken))
    webhooks = WebhookRegistry(SqlStore(session_factory, Webhook))

    devices.register("u1", "tok-1", "ios")
    assert devices.lookup("u1").platform == "ios"
    assert devices.lookup_many(["u1", "ghost"]) == [("u1", "tok-1")]

    hook = webhooks.register("u1", "https://hooks.example.com/a", ["sms:sent", "sms:received"])
    listed = webhooks.list_active_for_user("u1")
    assert [r.webhook_id for r in listed] == [hook.webhook_id]
    assert listed[0].events == ["sms:sent", "sms:received"]

    webhooks.unregister(hook.webhook_id)
    assert webhooks.list_for_user("u1") == []


def test_firestore_store_operations():
    collection = FakeCollection()
    store = FirestoreStore(collection)

    store.set("a", {"user_id": "u1", "token": "t1"})
    store.set("b", {"user_id": "u2", "token": "t2"})

    assert store.get("a") == {"user_id": "u1", "token": "t1"}
    assert store.get("missing") is None
    assert store.query("user_id", "u2") == [{"user_id": "u2", "token": "t2"}]
    assert store.delete("a") is True
    assert store.delete("a") is False
    assert list(collection.docs) == ["b"]


def test_registries_run_on_firestore_backend():
    devices = DeviceRegistry(FirestoreStore(FakeCollection()))
    webhooks = WebhookRegistry(FirestoreStore(FakeCollection()))

    devices.register("u1", "tok-1", "android")
    devices.register("u1", "tok-2", "android")
    assert devices.lookup("u1").token == "tok-2"
    assert devices.lookup_many(["ghost", "u1"]) == [("u1", "tok-2")]
    assert devices.remove("u1") is True
    assert devices.remove("u1") is False

    hook = webhooks.register("u1", "https://hooks.example.com/a", ["sms:sent"])
    webhooks.register("u2", "https://hooks.example.com/b", ["sms:sent"])
    assert [r.webhook_id for r in webhooks.list_active_for_user("u1")] == [hook.webhook_id]

    webhooks.unregister(hook.webhook_id)
    assert webhooks.list_for_user("u1") == []
