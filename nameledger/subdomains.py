"""
nameledger.subdomains — per-record sub-record arena.

SubRecords are stored under a stable key `(parent_record_id, sub_key)` and each
parent keeps a tuple of its sub keys in insertion order, which is what listing
walks. There are no parent/child object references; a SubRecord only carries
its parent's id.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .hashing import sub_key
from .state.store import LedgerStore
from .types.record import SubRecord


class SubdomainIndex:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def keys(self, parent_record_id: int) -> Tuple[bytes, ...]:
        return tuple(self._store.get("sub_keys", int(parent_record_id), ()))

    def find(self, parent_record_id: int, full_name: str) -> Optional[SubRecord]:
        return self._store.get("subrecords", (int(parent_record_id), sub_key(full_name)))

    def list(self, parent_record_id: int) -> List[SubRecord]:
        pid = int(parent_record_id)
        return [self._store.get("subrecords", (pid, k)) for k in self.keys(pid)]

    def put(self, sub: SubRecord) -> None:
        """
        Insert or replace a SubRecord. A key is appended to the parent's
        ordered list only the first time it is seen.
        """
        pid = sub.parent_record_id
        key = sub_key(sub.full_name)
        if not self._store.contains("subrecords", (pid, key)):
            self._store.put("sub_keys", pid, self.keys(pid) + (key,))
        self._store.put("subrecords", (pid, key), sub)


__all__ = ["SubdomainIndex"]
