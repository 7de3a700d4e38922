"""
storage.py
──────────
JSON document persistence for the items collection.

OS concepts demonstrated:
  - os.path for portable file-system paths
  - Atomic file writes via os.replace() (rename-over-old-file trick)
  - os.fsync so the renamed file is on disk, not just in the page cache
  - os.stat version stamps for cheap change detection
  - shutil.copy2 to keep a malformed file aside before it is replaced
"""

import os
import json
import shutil
import time
from typing import Any, Dict, List, Optional, Tuple

from errors import CorruptStore

ITEMS_KEY = "items"
TMP_SUFFIX = ".tmp"
CORRUPT_SUFFIX = ".corrupt-"

Stamp = Tuple[int, int, int]


def tmp_path_for(path: str) -> str:
    return path + TMP_SUFFIX


def read_document(path: str) -> List[Dict[str, Any]]:
    """
    Read the items list from `path`.

    Raises FileNotFoundError when the file is missing, CorruptStore when the
    content is not {"items": [<object>, ...]}, and OSError for anything else
    the filesystem throws at us.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptStore(path, f"invalid json: {exc}") from exc

    if not isinstance(data, dict):
        raise CorruptStore(path, "document is not an object")
    items = data.get(ITEMS_KEY)
    if not isinstance(items, list):
        raise CorruptStore(path, f'"{ITEMS_KEY}" is not an array')
    if not all(isinstance(item, dict) for item in items):
        raise CorruptStore(path, f'"{ITEMS_KEY}" holds a non-object entry')
    return items


def write_document(path: str, items: List[Dict[str, Any]]) -> None:
    """Atomic write: write to a tmp file, fsync, then rename (os.replace)."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    tmp = tmp_path_for(path)
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump({ITEMS_KEY: items}, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)   # Atomic on POSIX; near-atomic on Windows
    except OSError:
        _discard(tmp)
        raise


def preserve_copy(path: str) -> str:
    """Copy `path` to a timestamped sibling and return the copy's path."""
    backup = f"{path}{CORRUPT_SUFFIX}{int(time.time() * 1000)}"
    shutil.copy2(path, backup)
    return backup


def stat_stamp(path: str) -> Optional[Stamp]:
    """Version stamp of the file, or None when it does not exist."""
    try:
        st = os.stat(path)
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size, st.st_ino)


def _discard(tmp: str) -> None:
    try:
        os.remove(tmp)
    except FileNotFoundError:
        pass
    except OSError:
        # leave it; the next successful save overwrites it
        pass
