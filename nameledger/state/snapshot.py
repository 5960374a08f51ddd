"""
nameledger.state.snapshot — read/write a store as a JSON snapshot file.

Used by the CLI to carry ledger state between invocations. Writes go to a
temporary sibling file first and are moved into place with `os.replace`, so a
crash never leaves a half-written snapshot.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from .events import EventBus
from .store import LedgerStore


def save_snapshot(store: LedgerStore, path: str | os.PathLike[str]) -> Path:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + ".tmp")
    with open(tmp, "w", encoding="utf-8") as fh:
        json.dump(store.export_state(), fh, indent=2, sort_keys=True)
        fh.write("\n")
    os.replace(tmp, p)
    return p


def load_snapshot(path: str | os.PathLike[str], *, bus: Optional[EventBus] = None) -> LedgerStore:
    p = Path(path).expanduser()
    with open(p, "r", encoding="utf-8") as fh:
        state = json.load(fh)
    return LedgerStore.from_state(state, bus=bus)


__all__ = ["load_snapshot", "save_snapshot"]
