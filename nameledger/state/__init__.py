"""
nameledger.state — the store handle, its undo journal, notification sinks and
the treasury.

Typical usage:
    from nameledger.state import LedgerStore, Treasury

    store = LedgerStore(admin="admin", base_fee=10_000, length_multipliers=LENGTH_MULTIPLIERS)
    with store.transaction():
        Treasury(store).credit("alice", 5_000_000)
"""

from .events import EventBus, EventSink, InMemoryEventSink, JsonlEventSink, NullEventSink
from .store import LedgerStore
from .treasury import Settlement, Treasury

__all__ = [
    "EventBus",
    "EventSink",
    "InMemoryEventSink",
    "JsonlEventSink",
    "LedgerStore",
    "NullEventSink",
    "Settlement",
    "Treasury",
]
