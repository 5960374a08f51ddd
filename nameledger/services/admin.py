"""
nameledger.services.admin — administrator-only operations.

Each operation checks the ADMIN capability before anything else; a
non-administrator gets `Unauthorized` and the store is untouched. Pricing
changes apply to the next fee computation only. Fees already settled are never
recomputed.
"""

from __future__ import annotations

import logging

from ..access import Capability, admin_of, require_capability
from ..errors import InvalidInput
from ..state.store import LedgerStore
from ..state.treasury import Treasury
from ..tld_catalog import TldCatalog
from ..types.record import TldEntry

log = logging.getLogger(__name__)


class AdminConsole:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store
        self.catalog = TldCatalog(store)
        self.treasury = Treasury(store)

    @property
    def administrator(self) -> str:
        return admin_of(self._store)

    def add_tld(self, caller: str, tld: str, multiplier: int) -> TldEntry:
        with self._store.transaction():
            require_capability(self._store, caller, Capability.ADMIN)
            entry = self.catalog.add(tld, multiplier)
        log.info("tld added", extra={"tld": entry.tld, "multiplier": entry.fee_multiplier})
        return entry

    def update_base_fee(self, caller: str, new_fee: int) -> int:
        with self._store.transaction():
            require_capability(self._store, caller, Capability.ADMIN)
            if isinstance(new_fee, bool) or not isinstance(new_fee, int) or new_fee < 0:
                raise InvalidInput("base fee must be a non-negative integer", new_fee=new_fee)
            old = int(self._store.meta("base_fee"))
            self._store.set_meta("base_fee", int(new_fee))
        log.info("base fee updated", extra={"old_fee": old, "new_fee": new_fee})
        return int(new_fee)

    def update_tld_multiplier(self, caller: str, tld: str, new_multiplier: int) -> TldEntry:
        with self._store.transaction():
            require_capability(self._store, caller, Capability.ADMIN)
            entry = self.catalog.set_multiplier(tld, new_multiplier)
        log.info("tld multiplier updated", extra={"tld": entry.tld, "multiplier": entry.fee_multiplier})
        return entry

    def withdraw(self, caller: str) -> int:
        """Move the whole accumulated fee balance to the administrator."""
        with self._store.transaction():
            require_capability(self._store, caller, Capability.ADMIN)
            amount = self.treasury.withdraw_to(caller)
        log.info("fees withdrawn", extra={"amount": amount})
        return amount

    def collected_balance(self) -> int:
        with self._store.reading():
            return self.treasury.collected()

    def base_fee(self) -> int:
        with self._store.reading():
            return int(self._store.meta("base_fee"))


__all__ = ["AdminConsole"]
