"""
nameledger.tld_catalog — supported top-level domains and their multipliers.

TLDs are only ever added; a multiplier can change later but an entry cannot
be removed. Authorization is the caller's job (see `AdminConsole`); this
module validates values and writes them.
"""

from __future__ import annotations

from typing import List

from .errors import Duplicate, InvalidInput, InvalidMultiplier, UnsupportedTld
from .state.store import LedgerStore
from .types.record import TldEntry


def check_multiplier(multiplier: int) -> None:
    if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier <= 0:
        raise InvalidMultiplier(multiplier=multiplier)


class TldCatalog:
    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def contains(self, tld: str) -> bool:
        return self._store.contains("tlds", tld)

    def multiplier(self, tld: str) -> int:
        m = self._store.get("tlds", tld)
        if m is None:
            raise UnsupportedTld(tld=tld)
        return int(m)

    def entries(self) -> List[TldEntry]:
        return [TldEntry(tld=t, fee_multiplier=int(m)) for t, m in sorted(self._store.items("tlds"))]

    def add(self, tld: str, multiplier: int) -> TldEntry:
        if not isinstance(tld, str) or not tld:
            raise InvalidInput("tld must be a non-empty string", tld=tld)
        if self.contains(tld):
            raise Duplicate("tld already supported", tld=tld)
        check_multiplier(multiplier)
        self._store.put("tlds", tld, int(multiplier))
        return TldEntry(tld=tld, fee_multiplier=int(multiplier))

    def set_multiplier(self, tld: str, multiplier: int) -> TldEntry:
        if not self.contains(tld):
            raise UnsupportedTld(tld=tld)
        check_multiplier(multiplier)
        self._store.put("tlds", tld, int(multiplier))
        return TldEntry(tld=tld, fee_multiplier=int(multiplier))


__all__ = ["TldCatalog", "check_multiplier"]
