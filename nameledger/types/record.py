"""
nameledger.types.record — Record, SubRecord and TldEntry.

Identities are plain strings; the empty string is the null identity and is
never stored as an owner. Timestamps are integer Unix seconds.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

NULL_IDENTITY = ""


@dataclass(frozen=True)
class Record:
    """
    A registered (name, tld) pair.

    Fields
    ------
    record_id : int
        Allocated from a counter starting at 1; 0 means "not found".
    name, tld : str
        The registered label and its top-level domain.
    owner : str
        Current owner identity (never the null identity).
    expires_at : int
        Unix seconds; only ever extended by renewal.
    active : bool
        Read by the transfer and sub-record guards.
    metadata : str
        Opaque side-channel value (e.g. a content URI) returned by resolve.
    """

    record_id: int
    name: str
    tld: str
    owner: str
    expires_at: int
    active: bool = True
    metadata: str = ""

    @property
    def fqdn(self) -> str:
        return f"{self.name}.{self.tld}"

    def is_expired(self, now: int) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Record":
        return cls(
            record_id=int(d["record_id"]),
            name=str(d["name"]),
            tld=str(d["tld"]),
            owner=str(d["owner"]),
            expires_at=int(d["expires_at"]),
            active=bool(d.get("active", True)),
            metadata=str(d.get("metadata", "")),
        )


@dataclass(frozen=True)
class SubRecord:
    full_name: str
    metadata: str
    parent_record_id: int
    active: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SubRecord":
        return cls(
            full_name=str(d["full_name"]),
            metadata=str(d.get("metadata", "")),
            parent_record_id=int(d["parent_record_id"]),
            active=bool(d.get("active", True)),
        )


@dataclass(frozen=True)
class TldEntry:
    tld: str
    fee_multiplier: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["NULL_IDENTITY", "Record", "SubRecord", "TldEntry"]
