"""
Persistence for port mappings.

The whole mapping list lives in one JSON blob on disk. JsonBlobStore
reads and replaces that blob; MappingRepository layers the CRUD rules
(id assignment, merge-on-update) on top.
"""

import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

Mapping = Dict[str, Any]


class JsonBlobStore:
    """A single JSON list stored at `path`."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> List[Mapping]:
        """
        Return the stored list.

        A missing blob, unparseable JSON, or a payload that is not a list
        all read as an empty list; the latter two are logged. Entries that
        are not JSON objects are dropped and logged.
        """
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading config %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.error("Invalid config data in %s: %r", self.path, data)
            return []
        items = [m for m in data if isinstance(m, dict)]
        if len(items) != len(data):
            logger.error("Dropped %d invalid entries from %s", len(data) - len(items), self.path)
        return items

    def write(self, items: List[Mapping]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def ensure(self) -> None:
        """Initialise the blob with an empty list if nothing usable is stored."""
        if not self.read():
            self.write([])


class MappingRepository:
    """CRUD over the mapping list. Writes are serialised by a lock."""

    def __init__(self, store: JsonBlobStore):
        self.store = store
        self._lock = threading.Lock()

    def list(self) -> List[Mapping]:
        return self.store.read()

    def get(self, mapping_id: int) -> Optional[Mapping]:
        for mapping in self.store.read():
            if mapping.get("id") == mapping_id:
                return mapping
        return None

    def add(self, data: Mapping) -> Mapping:
        with self._lock:
            items = self.store.read()
            next_id = max((_int_id(m) for m in items), default=0) + 1
            mapping = {**data, "id": next_id}
            items.append(mapping)
            self.store.write(items)
        logger.info("Added mapping %d", next_id)
        return mapping

    def update(self, mapping_id: int, data: Mapping) -> Optional[Mapping]:
        """Merge `data` onto an existing mapping. Returns None if it does not exist."""
        with self._lock:
            items = self.store.read()
            for index, mapping in enumerate(items):
                if mapping.get("id") == mapping_id:
                    items[index] = {**mapping, **data, "id": mapping_id}
                    self.store.write(items)
                    return items[index]
        return None

    def delete(self, mapping_id: int) -> bool:
        with self._lock:
            items = self.store.read()
            remaining = [m for m in items if m.get("id") != mapping_id]
            self.store.write(remaining)
        removed = len(remaining) != len(items)
        if removed:
            logger.info("Deleted mapping %d", mapping_id)
        return removed


def _int_id(mapping: Mapping) -> int:
    # Hand-edited blobs may carry null or string ids; those never win the max.
    value = mapping.get("id")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return 0


def mapping_url(mapping: Mapping) -> str:
    return f"https://{mapping['subdomain']}.{mapping['cloudIdeUrl']}:{mapping['port']}"
