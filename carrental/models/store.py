"""
Pickle-backed document store.

Documents are plain dicts grouped by collection path. A collection path may
name a subcollection of a document, e.g. ``vehicles/<id>/reviews`` or
``users/<uid>/favorites``. Every single operation is guarded by one lock and
persisted with an atomic file replace. A write whose file replace fails is
rolled back in memory too. There is no multi-document transaction
and no version token, so concurrent writers are last-write-wins.
"""
import atexit
import copy
import logging
import os
import pickle
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

from carrental.exceptions import StoreError

logger = logging.getLogger(__name__)

# ---- Paths ----
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_DATA_PATH = os.getenv("CARRENTAL_DATA_PATH") or str(BASE_DIR / "data.pkl")


class _ServerTimestamp:
    """Sentinel replaced with the store's clock when a document is written."""

    def __repr__(self):
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def server_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def subcollection(collection: str, doc_id: str, name: str) -> str:
    """Path of a subcollection: subcollection('vehicles', 'v1', 'reviews') -> 'vehicles/v1/reviews'."""
    return f"{collection}/{doc_id}/{name}"


class DocumentStore:
    _inst = None
    _inst_lock = threading.Lock()
    _atexit_registered = False

    def __init__(self, path: str | os.PathLike | None = None):
        self.path = str(path or DEFAULT_DATA_PATH)
        self.collections: dict[str, dict[str, dict]] = {}
        self._rw = threading.RLock()

        logger.info("[Store] Using file: %s", self.path)
        self._load()

        # Automatically save on exit (skipped in test environments)
        if not DocumentStore._atexit_registered and os.getenv("APP_ENV") != "test":
            atexit.register(self.save)
            DocumentStore._atexit_registered = True

    # ---------- Singleton ----------
    @classmethod
    def instance(cls, path: str | os.PathLike | None = None):
        """Return the global singleton instance of DocumentStore."""
        with cls._inst_lock:
            if cls._inst is None:
                cls._inst = DocumentStore(path or DEFAULT_DATA_PATH)
        return cls._inst

    @classmethod
    def configure(cls, path: str | os.PathLike):
        """Point the singleton at `path`, reopening it if it currently uses another file."""
        with cls._inst_lock:
            if cls._inst is None or cls._inst.path != str(path):
                cls._inst = DocumentStore(path)
        return cls._inst

    # ---------- Persistence ----------
    def _load(self):
        """Load data from the pickle file, or start empty if unavailable or invalid."""
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "rb") as f:
                data = pickle.load(f)
        except (OSError, pickle.UnpicklingError, EOFError) as e:
            logger.warning("[Store] Load failed (%s); starting empty.", e)
            return

        if isinstance(data, dict) and isinstance(data.get("collections"), dict):
            self.collections = data["collections"]
            logger.info("[Store] Loaded: %s", {k: len(v) for k, v in self.collections.items()})
        else:
            # Handle incompatible data format: backup the old file and start empty
            bak = self.path + ".bak"
            try:
                os.replace(self.path, bak)
                logger.warning("[Store] Incompatible store (%s); backed up to %s. Starting empty.",
                               type(data).__name__, bak)
            except OSError as e:
                logger.error("[Store] Backup failed: %s", e)

    def _dump(self):
        """Write the in-memory data to the pickle file safely (atomic replace)."""
        tmp = self.path + ".tmp"
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(tmp, "wb") as f:
                pickle.dump({"collections": self.collections}, f, protocol=pickle.HIGHEST_PROTOCOL)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except (OSError, pickle.PicklingError) as e:
            raise StoreError(f"Error: could not write data store ({e})") from e

    def save(self):
        """Thread-safe save method."""
        with self._rw:
            logger.debug("[Store] Saving to %s ...", self.path)
            self._dump()

    def clear(self):
        """Drop every collection (used by reset_data.py)."""
        with self._rw:
            previous = self.collections
            self.collections = {}
            try:
                self._dump()
            except StoreError:
                self.collections = previous
                raise

    # ---------- Helpers ----------
    @staticmethod
    def _resolve(data: dict) -> dict:
        """Deep-copy `data`, replacing SERVER_TIMESTAMP sentinels with the store clock."""
        now = server_now()
        out = {}
        for k, v in data.items():
            out[k] = now if v is SERVER_TIMESTAMP else copy.deepcopy(v)
        return out

    def _write(self, collection: str, did: str, doc: dict | None) -> None:
        """
        Swap `doc` in (None removes it) and persist. If the file cannot be
        written the previous document is restored, so memory never holds a
        change the file does not.
        """
        docs = self.collections.get(collection)
        created = docs is None
        if created:
            docs = self.collections[collection] = {}
        previous = docs.get(did)
        if doc is None:
            docs.pop(did, None)
        else:
            docs[did] = doc
        try:
            self._dump()
        except StoreError:
            if previous is None:
                docs.pop(did, None)
            else:
                docs[did] = previous
            if created:
                self.collections.pop(collection, None)
            logger.error("[Store] Write to %s/%s rolled back", collection, did)
            raise

    # ---------- Documents ----------
    def get(self, collection: str, doc_id) -> dict | None:
        """Return a copy of the document (with its `id`), or None."""
        with self._rw:
            doc = self.collections.get(collection, {}).get(str(doc_id))
            return copy.deepcopy(doc) if doc is not None else None

    def put(self, collection: str, doc_id, data: dict) -> str:
        """Create or overwrite a document under a caller-chosen id."""
        with self._rw:
            did = str(doc_id)
            doc = self._resolve(data)
            doc["id"] = did
            self._write(collection, did, doc)
            return did

    def add(self, collection: str, data: dict) -> str:
        """Create a document under a store-generated id and return the id."""
        with self._rw:
            did = uuid.uuid4().hex[:20]
            doc = self._resolve(data)
            doc["id"] = did
            self._write(collection, did, doc)
            return did

    def update(self, collection: str, doc_id, partial: dict) -> None:
        """Merge `partial` into an existing document; raise StoreError if it does not exist."""
        with self._rw:
            did = str(doc_id)
            doc = self.collections.get(collection, {}).get(did)
            if doc is None:
                raise StoreError(f"Error: no document '{did}' in '{collection}'")
            changes = self._resolve(partial)
            changes.pop("id", None)
            self._write(collection, did, {**doc, **changes})

    def delete(self, collection: str, doc_id) -> bool:
        """Delete a document; deleting a missing document is a no-op returning False."""
        with self._rw:
            did = str(doc_id)
            if did not in self.collections.get(collection, {}):
                return False
            self._write(collection, did, None)
            return True

    # ---------- Queries ----------
    def query(self, collection: str, where: dict | None = None, predicate=None,
              order_by: str | None = None, descending: bool = False, limit: int | None = None) -> list[dict]:
        """
        Return copies of matching documents.
        - `where`: field equality filters, e.g. {"user_id": uid}
        - `predicate`: optional callable(doc) -> bool for anything else
        - `order_by`: field name; documents missing the field sort first
        """
        with self._rw:
            docs = list(self.collections.get(collection, {}).values())

        if where:
            docs = [d for d in docs if all(d.get(k) == v for k, v in where.items())]
        if predicate is not None:
            docs = [d for d in docs if predicate(d)]
        if order_by:
            def key(d):
                v = d.get(order_by)
                return (v is not None, v if v is not None else "")

            docs.sort(key=key, reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    def list_all(self, collection: str) -> list[dict]:
        """Every document of a (sub)collection."""
        return self.query(collection)

    def count(self, collection: str) -> int:
        with self._rw:
            return len(self.collections.get(collection, {}))
