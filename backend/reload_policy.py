"""
reload_policy.py
────────────────
Decides whether the item collection is re-read from disk before a list
request, so edits made to the file by other processes become visible.
"""

import logging

from item_store import ItemStore

log = logging.getLogger(__name__)

ALWAYS = "always"
ON_CHANGE = "on_change"
POLICIES = (ALWAYS, ON_CHANGE)


class ReloadPolicy:
    """
    always    → load() before every read
    on_change → load() only when the file's (mtime, size, inode) stamp
                differs from the one seen at the last load/save
    """

    def __init__(self, mode: str = ALWAYS):
        if mode not in POLICIES:
            raise ValueError(f"unknown reload policy {mode!r}, expected one of {POLICIES}")
        self.mode = mode

    def refresh(self, store: ItemStore) -> bool:
        """Reload `store` if the policy asks for it. Returns True when it reloaded."""
        if self.mode == ON_CHANGE and not store.has_changed_on_disk():
            return False
        if self.mode == ON_CHANGE:
            log.debug("Store file %s changed on disk, reloading", store.path)
        store.load()
        return True
