"""
nameledger.services.subdomain — sub-records under an owned record.

A sub-record's full name is `sub_name + "." + parent.name + "." + parent.tld`
and it is keyed under its parent by the hash of that full name.

Rules
-----
- create: parent must exist (NotFound), caller must own it (NotOwner), parent
  must be active (Inactive) and unexpired (Expired); a sub-record with the
  same full name that is still active fails AlreadyExists. A deactivated
  sub-record may be created again: the entry is replaced by a fresh active
  one and keeps its original position in the listing.
- deactivate: parent must exist and be owned by the caller; the sub-record
  must be present (NotFound, regardless of its active flag) and still active
  (AlreadyInactive). Deactivation only flips the flag.
- list / get: read-only.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from ..clock import Clock, SystemClock
from ..errors import AlreadyExists, AlreadyInactive, Expired, Inactive, InvalidInput, NotFound, NotOwner
from ..hashing import compose_full_name
from ..ledger import RegistryLedger
from ..state.store import LedgerStore
from ..subdomains import SubdomainIndex
from ..types.events import SUBDOMAIN_CREATED, SUBDOMAIN_REMOVED
from ..types.record import Record, SubRecord

log = logging.getLogger(__name__)


def _check_sub_name(sub_name: str) -> None:
    if not isinstance(sub_name, str) or not sub_name:
        raise InvalidInput("sub-name must be a non-empty string", sub_name=sub_name)


class SubdomainService:
    def __init__(self, store: LedgerStore, clock: Optional[Clock] = None) -> None:
        self._store = store
        self._clock = clock or SystemClock()
        self.ledger = RegistryLedger(store)
        self.index = SubdomainIndex(store)

    def _owned_parent(self, caller: str, parent_record_id: int) -> Record:
        parent = self.ledger.get(parent_record_id)
        if caller != parent.owner:
            raise NotOwner(record_id=parent.record_id, caller=caller)
        return parent

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self, parent_record_id: int) -> List[SubRecord]:
        with self._store.reading():
            parent = self.ledger.get(parent_record_id)
            return self.index.list(parent.record_id)

    def get(self, parent_record_id: int, sub_name: str) -> SubRecord:
        with self._store.reading():
            parent = self.ledger.get(parent_record_id)
            full_name = compose_full_name(sub_name, parent.name, parent.tld)
            sub = self.index.find(parent.record_id, full_name)
            if sub is None:
                raise NotFound("sub-record not found", parent_record_id=parent.record_id, full_name=full_name)
            return sub

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, caller: str, parent_record_id: int, sub_name: str, metadata: str = "") -> str:
        """Create `sub_name` under the parent record; returns the full name."""
        with self._store.transaction():
            parent = self._owned_parent(caller, parent_record_id)
            if not parent.active:
                raise Inactive(record_id=parent.record_id)
            now = self._clock.now()
            if parent.is_expired(now):
                raise Expired(record_id=parent.record_id, expires_at=parent.expires_at, now=now)
            _check_sub_name(sub_name)

            full_name = compose_full_name(sub_name, parent.name, parent.tld)
            existing = self.index.find(parent.record_id, full_name)
            if existing is not None and existing.active:
                raise AlreadyExists(parent_record_id=parent.record_id, full_name=full_name)

            self.index.put(
                SubRecord(
                    full_name=full_name,
                    metadata=metadata or "",
                    parent_record_id=parent.record_id,
                    active=True,
                )
            )
            self._store.emit(
                SUBDOMAIN_CREATED,
                parent_record_id=parent.record_id,
                full_name=full_name,
                owner=caller,
            )

        log.info(
            "sub-record created",
            extra={"parent_record_id": parent.record_id, "full_name": full_name, "recreated": existing is not None},
        )
        return full_name

    def deactivate(self, caller: str, parent_record_id: int, sub_name: str) -> None:
        with self._store.transaction():
            parent = self._owned_parent(caller, parent_record_id)
            full_name = compose_full_name(sub_name, parent.name, parent.tld)
            sub = self.index.find(parent.record_id, full_name)
            if sub is None:
                raise NotFound("sub-record not found", parent_record_id=parent.record_id, full_name=full_name)
            if not sub.active:
                raise AlreadyInactive(parent_record_id=parent.record_id, full_name=full_name)

            self.index.put(replace(sub, active=False))
            self._store.emit(SUBDOMAIN_REMOVED, parent_record_id=parent.record_id, full_name=full_name)

        log.info("sub-record deactivated", extra={"parent_record_id": parent.record_id, "full_name": full_name})


__all__ = ["SubdomainService"]
