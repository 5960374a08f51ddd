"""
nameledger.ledger — the authoritative ownership store.

`RegistryLedger` owns three pieces of state inside `LedgerStore`:

    names    name_key(name, tld) -> record_id   (at most one live id per key)
    records  record_id -> Record                 (never deleted)
    meta.next_record_id                          (monotonic, starts at 1)

It enforces shape invariants (non-null owner, expiry never moving backwards)
but no business rules: pricing, payment and ownership checks live in the
services, which always call in here inside a store transaction.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from .errors import InvalidInput, NotFound
from .hashing import name_key
from .state.store import LedgerStore
from .types.record import NULL_IDENTITY, Record

NOT_FOUND_ID = 0


class RegistryLedger:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def lookup_id(self, name: str, tld: str) -> int:
        """Record id mapped for (name, tld), or 0."""
        return int(self._store.get("names", name_key(name, tld), NOT_FOUND_ID))

    def is_available(self, name: str, tld: str) -> bool:
        return self.lookup_id(name, tld) == NOT_FOUND_ID

    def find(self, record_id: int) -> Optional[Record]:
        return self._store.get("records", int(record_id))

    def get(self, record_id: int) -> Record:
        rec = self.find(record_id)
        if rec is None:
            raise NotFound("record not found", record_id=record_id)
        return rec

    def get_by_name(self, name: str, tld: str) -> Record:
        rid = self.lookup_id(name, tld)
        if rid == NOT_FOUND_ID:
            raise NotFound("name not registered", name=name, tld=tld)
        return self.get(rid)

    def records_of(self, owner: str) -> List[int]:
        return sorted(rid for rid, rec in self._store.items("records") if rec.owner == owner)

    def next_record_id(self) -> int:
        return int(self._store.meta("next_record_id"))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, *, name: str, tld: str, owner: str, expires_at: int, metadata: str = "") -> Record:
        """Allocate the next id, store the record and index its name."""
        if owner == NULL_IDENTITY:
            raise InvalidInput("owner must not be the null identity")
        rid = self.next_record_id()
        rec = Record(
            record_id=rid,
            name=name,
            tld=tld,
            owner=owner,
            expires_at=int(expires_at),
            active=True,
            metadata=metadata,
        )
        self._store.set_meta("next_record_id", rid + 1)
        self._store.put("records", rid, rec)
        self._store.put("names", name_key(name, tld), rid)
        return rec

    def extend(self, record_id: int, seconds: int) -> Record:
        if seconds < 0:
            raise InvalidInput("expiry can only be extended", seconds=seconds)
        rec = self.get(record_id)
        updated = replace(rec, expires_at=rec.expires_at + int(seconds))
        self._store.put("records", rec.record_id, updated)
        return updated

    def set_owner(self, record_id: int, new_owner: str) -> Record:
        if new_owner == NULL_IDENTITY:
            raise InvalidInput("owner must not be the null identity")
        rec = self.get(record_id)
        updated = replace(rec, owner=new_owner)
        self._store.put("records", rec.record_id, updated)
        return updated


__all__ = ["NOT_FOUND_ID", "RegistryLedger"]
