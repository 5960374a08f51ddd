"""
nameledger.state.store — the explicit ledger store handle.

`LedgerStore` owns every persisted table and is passed by reference into each
service; there is no module-level ledger state.

Tables
------
    meta                key -> scalar
                          next_record_id      (starts at 1; 0 means "not found")
                          base_fee            (smallest currency unit)
                          balance             (accumulated fees)
                          admin               (administrator identity)
                          notification_seq    (last assigned notification seq)
    names               name_key(name, tld) -> record_id
    records             record_id -> Record
    sub_keys            record_id -> tuple of sub_key, insertion ordered
    subrecords          (record_id, sub_key) -> SubRecord
    tlds                tld -> fee multiplier
    length_multipliers  bucket (1..5, 5 meaning "5+") -> multiplier, fixed
    accounts            identity -> balance

Atomicity
---------
Every mutation runs inside `with store.transaction():`. The transaction holds
the store's re-entrant lock for its whole duration (mutations are totally
ordered), opens a journal checkpoint, and on any exception restores every
touched slot and discards staged notifications. Only after the outermost
transaction commits are notifications handed to the `EventBus`. Reads go
through `with store.reading():`, which takes the same lock and therefore only
ever observes committed state.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Hashable, Iterator, List, Mapping, MutableMapping, Optional, Tuple

from ..types.events import Notification
from ..types.record import Record, SubRecord
from .events import EventBus
from .journal import Journal

log = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 2

TABLES = (
    "meta",
    "names",
    "records",
    "sub_keys",
    "subrecords",
    "tlds",
    "length_multipliers",
    "accounts",
)


class LedgerStore:
    """
    Parameters
    ----------
    admin : str
        Administrator identity; the only holder of the admin capability.
    base_fee : int
        Initial base fee.
    tlds : Mapping[str, int]
        Initial TLD catalog (tld -> multiplier).
    length_multipliers : Mapping[int, int]
        Fixed name-length bucket table.
    bus : EventBus | None
        Receives committed notifications.
    """

    def __init__(
        self,
        *,
        admin: str,
        base_fee: int,
        length_multipliers: Mapping[int, int],
        tlds: Optional[Mapping[str, int]] = None,
        bus: Optional[EventBus] = None,
    ) -> None:
        self._tables: Dict[str, MutableMapping[Hashable, Any]] = {t: {} for t in TABLES}
        self._journal = Journal(self._tables)
        self._lock = threading.RLock()
        self.bus = bus if bus is not None else EventBus()

        meta = self._tables["meta"]
        meta["next_record_id"] = 1
        meta["base_fee"] = int(base_fee)
        meta["balance"] = 0
        meta["admin"] = str(admin)
        meta["notification_seq"] = 0
        self._tables["length_multipliers"].update({int(k): int(v) for k, v in length_multipliers.items()})
        self._tables["tlds"].update({str(k): int(v) for k, v in (tlds or {}).items()})

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["LedgerStore"]:
        """
        Atomic unit: all writes and notifications inside commit together or
        not at all. Nested transactions fold into the enclosing one.
        """
        with self._lock:
            cid = self._journal.begin()
            try:
                yield self
            except BaseException:
                self._journal.revert(cid)
                raise
            committed = self._journal.commit(cid)
            if committed:
                # Still under the lock so sinks see commit order.
                self.bus.publish(committed)

    @contextmanager
    def reading(self) -> Iterator["LedgerStore"]:
        with self._lock:
            yield self

    @property
    def commit_count(self) -> int:
        """Number of committed transactions that wrote to the store."""
        return self._journal.commits

    # ------------------------------------------------------------------
    # Table access
    # ------------------------------------------------------------------

    def get(self, table: str, key: Hashable, default: Any = None) -> Any:
        return self._tables[table].get(key, default)

    def contains(self, table: str, key: Hashable) -> bool:
        return key in self._tables[table]

    def items(self, table: str) -> List[Tuple[Hashable, Any]]:
        return list(self._tables[table].items())

    def put(self, table: str, key: Hashable, value: Any) -> None:
        self._journal.put(table, key, value)

    def meta(self, key: str) -> Any:
        return self._tables["meta"][key]

    def set_meta(self, key: str, value: Any) -> None:
        self._journal.put("meta", key, value)

    def emit(self, event: str, /, **args: Any) -> Notification:
        """Stage a notification; it is published only if the transaction commits."""
        seq = int(self.meta("notification_seq")) + 1
        self.set_meta("notification_seq", seq)
        n = Notification(name=event, args=args, seq=seq)
        self._journal.stage(n)
        return n

    # ------------------------------------------------------------------
    # Snapshot export / import
    # ------------------------------------------------------------------

    def export_state(self) -> Dict[str, Any]:
        """
        JSON-safe dump of every table. Byte keys are hex encoded; sub-records
        are listed per parent in their insertion order.
        """
        with self.reading():
            t = self._tables
            return {
                "version": STATE_FORMAT_VERSION,
                "meta": dict(t["meta"]),
                "names": {k.hex(): v for k, v in t["names"].items()},
                "records": [r.to_dict() for _, r in sorted(t["records"].items())],
                "subrecords": [
                    dict(t["subrecords"][(rid, k)].to_dict(), key=k.hex())
                    for rid, keys in sorted(t["sub_keys"].items())
                    for k in keys
                ],
                "tlds": dict(sorted(t["tlds"].items())),
                "length_multipliers": {str(k): v for k, v in sorted(t["length_multipliers"].items())},
                "accounts": dict(sorted(t["accounts"].items())),
            }

    @classmethod
    def from_state(cls, state: Mapping[str, Any], *, bus: Optional[EventBus] = None) -> "LedgerStore":
        version = int(state.get("version", 0))
        if version != STATE_FORMAT_VERSION:
            raise ValueError(f"unsupported state format version: {version}")
        meta = dict(state["meta"])
        store = cls(
            admin=str(meta["admin"]),
            base_fee=int(meta["base_fee"]),
            length_multipliers={int(k): int(v) for k, v in state["length_multipliers"].items()},
            tlds=state.get("tlds") or {},
            bus=bus,
        )
        t = store._tables
        t["meta"].update(meta)
        t["names"].update({bytes.fromhex(k): int(v) for k, v in state.get("names", {}).items()})
        for rd in state.get("records", []):
            rec = Record.from_dict(rd)
            t["records"][rec.record_id] = rec
        for sd in state.get("subrecords", []):
            sub = SubRecord.from_dict(sd)
            key = bytes.fromhex(sd["key"])
            t["subrecords"][(sub.parent_record_id, key)] = sub
            t["sub_keys"][sub.parent_record_id] = t["sub_keys"].get(sub.parent_record_id, ()) + (key,)
        t["accounts"].update({str(k): int(v) for k, v in state.get("accounts", {}).items()})
        log.debug("store loaded", extra={"records": len(t["records"]), "tlds": len(t["tlds"])})
        return store


__all__ = ["LedgerStore", "STATE_FORMAT_VERSION", "TABLES"]
