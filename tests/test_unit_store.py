"""
DocumentStore persistence and query behaviour.
"""
import pickle

import pytest

from carrental.exceptions import StoreError
from carrental.models.store import DocumentStore, SERVER_TIMESTAMP, subcollection


def test_put_get_returns_copy_with_id(store):
    store.put("vehicles", "v1", {"make": "Kia", "features": ["A"]})
    doc = store.get("vehicles", "v1")
    assert doc == {"make": "Kia", "features": ["A"], "id": "v1"}

    doc["features"].append("B")
    assert store.get("vehicles", "v1")["features"] == ["A"]


def test_add_generates_id_and_timestamp(store):
    did = store.add("bookings", {"created_at": SERVER_TIMESTAMP})
    doc = store.get("bookings", did)
    assert doc["id"] == did
    assert isinstance(doc["created_at"], str) and doc["created_at"].startswith("20")


def test_update_merges_and_requires_existing_doc(store):
    store.put("vehicles", "v1", {"make": "Kia", "rate_per_day": 10})
    store.update("vehicles", "v1", {"rate_per_day": 20, "id": "hijack"})
    assert store.get("vehicles", "v1") == {"make": "Kia", "rate_per_day": 20, "id": "v1"}

    with pytest.raises(StoreError):
        store.update("vehicles", "ghost", {"make": "X"})


def test_delete(store):
    store.put("vehicles", "v1", {})
    assert store.delete("vehicles", "v1") is True
    assert store.delete("vehicles", "v1") is False


def test_query_where_order_limit(store):
    store.put("bookings", "a", {"user_id": "u1", "created_at": "2030-01-02"})
    store.put("bookings", "b", {"user_id": "u1", "created_at": "2030-01-03"})
    store.put("bookings", "c", {"user_id": "u2", "created_at": "2030-01-01"})
    store.put("bookings", "d", {"user_id": "u1"})

    rows = store.query("bookings", where={"user_id": "u1"}, order_by="created_at", descending=True, limit=2)
    assert [r["id"] for r in rows] == ["b", "a"]

    rows = store.query("bookings", order_by="created_at")
    assert rows[0]["id"] == "d"


def test_subcollections_are_separate(store):
    path = subcollection("vehicles", "v1", "reviews")
    assert path == "vehicles/v1/reviews"
    store.add(path, {"rating": 5})
    assert store.count(path) == 1
    assert store.count("vehicles") == 0


def test_data_survives_reopen(store):
    store.put("users", "u1", {"name": "Amy"})
    reopened = DocumentStore(store.path)
    assert reopened.get("users", "u1")["name"] == "Amy"


def test_incompatible_file_is_backed_up(tmp_path):
    path = tmp_path / "old.pkl"
    with open(path, "wb") as f:
        pickle.dump({"users": {}, "vehicles": {}}, f)

    st = DocumentStore(path)
    assert st.count("users") == 0
    assert (tmp_path / "old.pkl.bak").exists()


def test_clear(store):
    store.put("users", "u1", {})
    store.clear()
    assert store.count("users") == 0


def _fail_dump(store, monkeypatch, after=0):
    """Make every `_dump` after the first `after` calls fail like a full disk."""
    real_dump = store._dump
    calls = {"n": 0}

    def dump():
        calls["n"] += 1
        if calls["n"] > after:
            raise StoreError("Error: could not write data store (disk full)")
        real_dump()

    monkeypatch.setattr(store, "_dump", dump)


def test_failed_write_leaves_memory_unchanged(store, monkeypatch):
    store.put("vehicles", "v1", {"availability_status": "available"})
    _fail_dump(store, monkeypatch)

    with pytest.raises(StoreError):
        store.update("vehicles", "v1", {"availability_status": "rented"})
    with pytest.raises(StoreError):
        store.put("vehicles", "v1", {"availability_status": "maintenance"})
    with pytest.raises(StoreError):
        store.add("bookings", {"user_id": "u1"})
    with pytest.raises(StoreError):
        store.delete("vehicles", "v1")
    with pytest.raises(StoreError):
        store.clear()

    assert store.get("vehicles", "v1")["availability_status"] == "available"
    assert store.count("bookings") == 0


def test_failed_write_is_not_saved_later(store, monkeypatch):
    store.put("vehicles", "v1", {"availability_status": "available"})
    _fail_dump(store, monkeypatch)
    with pytest.raises(StoreError):
        store.update("vehicles", "v1", {"availability_status": "rented"})

    # what the save-on-exit hook would write once the disk recovers
    DocumentStore._dump(store)
    assert DocumentStore(store.path).get("vehicles", "v1")["availability_status"] == "available"
