"""
item_store.py
─────────────
In-memory item collection kept in sync with a JSON document on disk.

OS concepts demonstrated:
  - threading.RLock for shared state protection (save runs inside the
    critical section of every mutation)
  - write-temp-then-rename persistence (see storage.py)
  - fail-soft loading: a malformed file is left on disk and copied aside
    before the next save replaces it
"""

import copy
import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional

import storage
from errors import (
    CorruptStore,
    DuplicateBackendId,
    InvalidBackendId,
    NotFound,
    PersistenceFailure,
)
from ids import BackendIdGenerator

log = logging.getLogger(__name__)

BACKEND_ID = "__backendId"
TIMESTAMP = "timestamp"
MANAGED_FIELDS = (BACKEND_ID, TIMESTAMP)

Record = Dict[str, Any]


class ItemStore:
    """
    Owns the ordered list of item records for one backing file.

    Every public method takes the same lock, and disk I/O happens while
    holding it, so readers never see a half-applied mutation.
    """

    def __init__(self, path: str, id_generator: Optional[BackendIdGenerator] = None):
        self.path = path
        self._ids = id_generator or BackendIdGenerator()
        self._items: List[Record] = []
        self._lock = threading.RLock()
        self._stamp: Optional[storage.Stamp] = None
        self._corrupt_on_disk = False
        self._corrupt_copy: Optional[str] = None
        self._corrupt_stamp: Optional[storage.Stamp] = None

    # ── Load / save ───────────────────────────────────────────────────────────

    def load(self) -> None:
        """Replace the in-memory collection with the file's content. Never raises."""
        with self._lock:
            try:
                items = storage.read_document(self.path)
            except FileNotFoundError:
                log.info("No store at %s, creating an empty one", self.path)
                self._corrupt_on_disk = False
                self._items = []
                if not self.save():
                    log.error("Could not initialise empty store at %s", self.path)
                return
            except CorruptStore as exc:
                log.warning("%s; serving an empty collection and keeping the file", exc)
                self._items = []
                self._stamp = storage.stat_stamp(self.path)
                self._keep_corrupt_copy()
                return
            except OSError as exc:
                log.error("Error loading store %s: %s", self.path, exc)
                self._items = []
                self._stamp = None
                return

            self._items = items
            self._stamp = storage.stat_stamp(self.path)
            self._corrupt_on_disk = False
            log.debug("Loaded %d items from %s", len(items), self.path)
            if self._assign_missing_ids():
                self.save()

    def save(self) -> bool:
        """Persist the collection atomically. False means the write did not land."""
        with self._lock:
            try:
                storage.write_document(self.path, self._items)
            except OSError as exc:
                log.error("Error saving store %s: %s", self.path, exc)
                return False
            if self._corrupt_on_disk:
                log.warning("Replaced corrupt store %s (copy kept at %s)", self.path,
                            self._corrupt_copy or "nowhere, copy failed")
                self._corrupt_on_disk = False
            self._stamp = storage.stat_stamp(self.path)
            log.debug("Saved %d items to %s", len(self._items), self.path)
            return True

    def flush(self) -> bool:
        """Final save attempt, used at shutdown."""
        ok = self.save()
        if not ok:
            log.error("Final flush of %s failed; the last durable save stands", self.path)
        return ok

    def has_changed_on_disk(self) -> bool:
        with self._lock:
            current = storage.stat_stamp(self.path)
            return current is None or current != self._stamp

    # ── Mutations ─────────────────────────────────────────────────────────────

    def append(self, record: Mapping[str, Any]) -> Record:
        item = copy.deepcopy(dict(record))
        with self._lock:
            if BACKEND_ID in item:
                if not _valid_id(item[BACKEND_ID]):
                    raise InvalidBackendId(item[BACKEND_ID])
                if self._find(item[BACKEND_ID]) is not None:
                    raise DuplicateBackendId(item[BACKEND_ID])
            else:
                item[BACKEND_ID] = self._ids.next_id()
            if TIMESTAMP not in item:
                item[TIMESTAMP] = int(time.time())

            self._items.append(item)
            if not self.save():
                self._items.pop()
                raise PersistenceFailure("create", applied_in_memory=False)
            return copy.deepcopy(item)

    def merge_update(self, backend_id: str, fields: Mapping[str, Any]) -> None:
        with self._lock:
            item = self._find(backend_id)
            if item is None:
                raise NotFound(backend_id)
            for key, value in fields.items():
                if key in MANAGED_FIELDS:
                    continue
                item[key] = copy.deepcopy(value)
            if not self.save():
                # the merge stays applied; the caller is told it is not durable
                raise PersistenceFailure("update", applied_in_memory=True)

    def delete(self, backend_id: str) -> None:
        with self._lock:
            kept = [item for item in self._items if item.get(BACKEND_ID) != backend_id]
            if len(kept) == len(self._items):
                raise NotFound(backend_id)
            self._items = kept
            if not self.save():
                raise PersistenceFailure("delete", applied_in_memory=True)

    # ── Reads ─────────────────────────────────────────────────────────────────

    def snapshot(self) -> List[Record]:
        with self._lock:
            return copy.deepcopy(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _find(self, backend_id: str) -> Optional[Record]:
        for item in self._items:
            if item.get(BACKEND_ID) == backend_id:
                return item
        return None

    def _assign_missing_ids(self) -> int:
        """Give fresh ids to loaded records whose id is absent, malformed or repeated."""
        seen = set()
        repaired = 0
        for item in self._items:
            backend_id = item.get(BACKEND_ID)
            if _valid_id(backend_id) and backend_id not in seen:
                seen.add(backend_id)
                continue
            item[BACKEND_ID] = self._ids.next_id()
            seen.add(item[BACKEND_ID])
            repaired += 1
            log.warning("Record %r in %s had backend id %r, assigned %s",
                        item.get("item_id"), self.path, backend_id, item[BACKEND_ID])
        return repaired

    def _keep_corrupt_copy(self) -> None:
        self._corrupt_on_disk = True
        if self._stamp is not None and self._stamp == self._corrupt_stamp:
            return   # this version of the file is already copied
        try:
            self._corrupt_copy = storage.preserve_copy(self.path)
        except OSError as exc:
            log.error("Could not copy corrupt store %s aside: %s", self.path, exc)
            self._corrupt_copy = None
            return
        self._corrupt_stamp = self._stamp
        log.warning("Copied corrupt store %s to %s", self.path, self._corrupt_copy)


def _valid_id(backend_id: Any) -> bool:
    return isinstance(backend_id, str) and backend_id != ""
