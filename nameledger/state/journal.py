"""
nameledger.state.journal — first-write undo log with nested checkpoints.

The store's tables are plain dicts mutated in place. Before the first write to
a (table, key) inside a checkpoint, the journal remembers the previous value
(or that the key was missing). `revert()` restores those values in reverse
first-touch order; `commit()` folds the log into the parent checkpoint without
overwriting the parent's own entries, so an outer revert still restores the
state as it was before the outer checkpoint began.

Notifications staged during a checkpoint travel the same way: dropped on
revert, handed to the parent on commit, and returned to the caller when the
outermost checkpoint commits.

Key properties
--------------
- Pure Python, no I/O; cost is O(keys touched), no deep copies.
- Values must be treated as immutable (frozen dataclasses, tuples, ints, str).
- Checkpoints form a strict stack (LIFO commit/revert).
- `commits` counts outermost commits that wrote something; readers compare
  it before and after a request to tell whether state changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, MutableMapping, Tuple

from ..types.events import Notification

_MISSING = object()

Slot = Tuple[str, Hashable]


@dataclass
class _Checkpoint:
    id: int
    # first-write log: (table, key) -> previous value (or _MISSING)
    prev: Dict[Slot, Any] = field(default_factory=dict)
    staged: List[Notification] = field(default_factory=list)


class Journal:
    """
    Undo journal over a mapping of named tables.

    Parameters
    ----------
    tables : MutableMapping[str, MutableMapping]
        The live tables. The journal mutates them directly.
    """

    def __init__(self, tables: MutableMapping[str, MutableMapping[Hashable, Any]]) -> None:
        self._tables = tables
        self._stack: List[_Checkpoint] = []
        self._next_id = 1
        # outermost commits that changed at least one slot
        self.commits = 0

    # --- checkpoints ----

    def begin(self) -> int:
        cid = self._next_id
        self._next_id += 1
        self._stack.append(_Checkpoint(cid))
        return cid

    def _pop_top(self, cid: int) -> _Checkpoint:
        if not self._stack or self._stack[-1].id != cid:
            raise RuntimeError(f"checkpoint {cid} is not the top-most checkpoint")
        return self._stack.pop()

    def commit(self, cid: int) -> List[Notification]:
        """
        Commit the top checkpoint. Returns the notifications that became final
        (non-empty only when the outermost checkpoint commits).
        """
        cp = self._pop_top(cid)
        if self._stack:
            parent = self._stack[-1]
            for slot, prev in cp.prev.items():
                parent.prev.setdefault(slot, prev)
            parent.staged.extend(cp.staged)
            return []
        if cp.prev:
            self.commits += 1
        return cp.staged

    def revert(self, cid: int) -> None:
        cp = self._pop_top(cid)
        for (table, key), prev in reversed(list(cp.prev.items())):
            t = self._tables[table]
            if prev is _MISSING:
                t.pop(key, None)
            else:
                t[key] = prev

    # --- mutations ----

    def _touch(self, table: str, key: Hashable) -> None:
        if not self._stack:
            raise RuntimeError("ledger writes require an open transaction")
        top = self._stack[-1]
        slot = (table, key)
        if slot not in top.prev:
            top.prev[slot] = self._tables[table].get(key, _MISSING)

    def put(self, table: str, key: Hashable, value: Any) -> None:
        self._touch(table, key)
        self._tables[table][key] = value

    def stage(self, notification: Notification) -> None:
        if not self._stack:
            raise RuntimeError("notifications require an open transaction")
        self._stack[-1].staged.append(notification)


__all__ = ["Journal"]
