"""
nameledger.types.events — the notification payload published after commit.

Canonical names and argument keys:
  Registered            {record_id, name, tld, owner}
  Renewed               {record_id, new_expiry}
  OwnershipTransferred  {record_id, old_owner, new_owner}
  SubdomainCreated      {parent_record_id, full_name, owner}
  SubdomainRemoved      {parent_record_id, full_name}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

REGISTERED = "Registered"
RENEWED = "Renewed"
OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
SUBDOMAIN_CREATED = "SubdomainCreated"
SUBDOMAIN_REMOVED = "SubdomainRemoved"


@dataclass(frozen=True)
class Notification:
    """
    A committed ledger notification.

    `seq` is assigned by the store at commit time and strictly increases across
    the store's lifetime, so sinks can page through notifications in order.
    """

    name: str
    args: Mapping[str, Any] = field(default_factory=dict)
    seq: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "name": self.name, "args": dict(self.args)}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Notification":
        return cls(name=str(d["name"]), args=dict(d.get("args") or {}), seq=int(d.get("seq", 0)))


__all__ = [
    "Notification",
    "REGISTERED",
    "RENEWED",
    "OWNERSHIP_TRANSFERRED",
    "SUBDOMAIN_CREATED",
    "SUBDOMAIN_REMOVED",
]
