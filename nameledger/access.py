"""
nameledger.access — capability checks.

A single administrator identity, fixed when the store is created, holds the
ADMIN capability. Gated operations call `require_capability` first, before
reading or validating anything else, so an unauthorized caller learns nothing
and changes nothing.

Typical usage
-------------
    from nameledger.access import Capability, require_capability

    def update_base_fee(self, caller: str, new_fee: int) -> None:
        require_capability(self._store, caller, Capability.ADMIN)
        ...
"""

from __future__ import annotations

import enum

from .errors import Unauthorized
from .state.store import LedgerStore


class Capability(str, enum.Enum):
    ADMIN = "admin"


def admin_of(store: LedgerStore) -> str:
    return str(store.meta("admin"))


def has_capability(store: LedgerStore, caller: str, capability: Capability) -> bool:
    if capability is Capability.ADMIN:
        return bool(caller) and caller == admin_of(store)
    return False


def require_capability(store: LedgerStore, caller: str, capability: Capability) -> None:
    """Raise `Unauthorized` unless `caller` holds `capability`."""
    if not has_capability(store, caller, capability):
        raise Unauthorized(caller=caller, capability=capability.value)


__all__ = ["Capability", "admin_of", "has_capability", "require_capability"]
