"""
nameledger.boot
===============

Wires a complete registry from configuration: one `LedgerStore` (fresh or
loaded from a snapshot), its `EventBus` and sinks, a clock, and the three
services sharing that store.

Usage
-----
    from nameledger.boot import build_registry
    from nameledger.clock import ManualClock

    reg = build_registry(clock=ManualClock())
    with reg.store.transaction():
        reg.treasury.credit("alice", 10_000_000)
    rid = reg.registrar.register("alice", "hello", "com", 1, "ipfs://…", 3_000_000)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from .clock import Clock, SystemClock
from .config import RegistryConfig, get_config
from .errors import InvalidInput
from .pricing import LENGTH_MULTIPLIERS
from .services import AdminConsole, RegistrarService, SubdomainService
from .state.events import EventBus, EventSink, InMemoryEventSink, JsonlEventSink
from .state.snapshot import load_snapshot, save_snapshot
from .state.store import LedgerStore
from .state.treasury import Treasury

log = logging.getLogger(__name__)


@dataclass
class Registry:
    """A wired ledger: the store handle plus every service bound to it."""

    config: RegistryConfig
    store: LedgerStore
    bus: EventBus
    clock: Clock
    registrar: RegistrarService
    subdomains: SubdomainService
    admin: AdminConsole
    treasury: Treasury
    history: InMemoryEventSink

    def deposit(self, identity: str, amount: int) -> int:
        """Dev faucet: credit `identity`'s account. Returns the new balance."""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidInput("deposit amount must be a positive integer", amount=amount)
        with self.store.transaction():
            balance = self.treasury.credit(identity, amount)
        log.info("deposit", extra={"account": identity, "amount": amount, "balance": balance})
        return balance

    def balance_of(self, identity: str) -> int:
        with self.store.reading():
            return self.treasury.balance_of(identity)

    def save(self, path: Optional[Path] = None) -> Path:
        return save_snapshot(self.store, path or self.config.state_path)

    def close(self) -> None:
        self.bus.close()


def new_store(cfg: RegistryConfig, bus: Optional[EventBus] = None) -> LedgerStore:
    return LedgerStore(
        admin=cfg.admin,
        base_fee=cfg.pricing.base_fee,
        tlds=cfg.pricing.tlds,
        length_multipliers=LENGTH_MULTIPLIERS,
        bus=bus,
    )


def build_registry(
    cfg: Optional[RegistryConfig] = None,
    *,
    clock: Optional[Clock] = None,
    store: Optional[LedgerStore] = None,
    snapshot: Optional[Path] = None,
    sinks: Sequence[EventSink] = (),
) -> Registry:
    """
    Build a Registry.

    Store resolution: an explicit `store`, else `snapshot` if given (loaded
    from disk), else a fresh store initialized from `cfg`. An in-memory
    history sink is always attached; a JSONL sink is added when
    `cfg.events_path` is set.
    """
    cfg = cfg or get_config()
    history = InMemoryEventSink()
    all_sinks: list = [history, *sinks]
    if cfg.events_path is not None:
        all_sinks.append(JsonlEventSink(cfg.events_path))
    bus = EventBus(all_sinks)

    if store is not None:
        store.bus = bus
    elif snapshot is not None:
        store = load_snapshot(snapshot, bus=bus)
    else:
        store = new_store(cfg, bus)

    clock = clock or SystemClock()
    reg = Registry(
        config=cfg,
        store=store,
        bus=bus,
        clock=clock,
        registrar=RegistrarService(store, clock),
        subdomains=SubdomainService(store, clock),
        admin=AdminConsole(store),
        treasury=Treasury(store),
        history=history,
    )
    log.debug("registry ready", extra={"admin": cfg.admin, "sinks": len(all_sinks)})
    return reg


__all__ = ["Registry", "build_registry", "new_store"]
