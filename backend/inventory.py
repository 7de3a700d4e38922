"""
inventory.py
────────────
The operations the HTTP layer calls: list_all, create, update, delete.
"""

import logging
from typing import Any, List, Mapping, Optional

from item_store import BACKEND_ID, ItemStore, Record
from models import validate_new_item
from reload_policy import ReloadPolicy

log = logging.getLogger(__name__)


class Inventory:
    def __init__(self, store: ItemStore, reload_policy: Optional[ReloadPolicy] = None):
        self.store = store
        self.reload_policy = reload_policy or ReloadPolicy()

    def start(self):
        """Initial load of the backing file."""
        self.store.load()
        log.info("Inventory ready: %d items from %s", len(self.store), self.store.path)

    def stop(self):
        self.store.flush()

    # ── Operations ────────────────────────────────────────────────────────────

    def list_all(self) -> List[Record]:
        self.reload_policy.refresh(self.store)
        return self.store.snapshot()

    def create(self, fields: Mapping[str, Any]) -> Record:
        validate_new_item(fields)
        item = self.store.append(fields)
        log.info("Created item %s (%s)", item[BACKEND_ID], item.get("item_id"))
        return item

    def update(self, backend_id: str, fields: Mapping[str, Any]) -> None:
        self.store.merge_update(backend_id, fields)
        log.info("Updated item %s", backend_id)

    def delete(self, backend_id: str) -> None:
        self.store.delete(backend_id)
        log.info("Deleted item %s", backend_id)
