"""
RPC models: JSON shapes returned by the JSON-RPC methods.

These are *views* over the ledger dataclasses and keep field names stable
(camelCase) for clients and SDKs.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from nameledger.types import Notification, Record, SubRecord, TldEntry


class _View(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class RecordView(_View):
    record_id: int = Field(alias="recordId")
    name: str
    tld: str
    owner: str
    expires_at: int = Field(alias="expiresAt")
    active: bool
    metadata: str

    @classmethod
    def of(cls, rec: Record) -> "RecordView":
        return cls(
            record_id=rec.record_id,
            name=rec.name,
            tld=rec.tld,
            owner=rec.owner,
            expires_at=rec.expires_at,
            active=rec.active,
            metadata=rec.metadata,
        )


class SubRecordView(_View):
    full_name: str = Field(alias="fullName")
    metadata: str
    parent_record_id: int = Field(alias="parentRecordId")
    active: bool

    @classmethod
    def of(cls, sub: SubRecord) -> "SubRecordView":
        return cls(
            full_name=sub.full_name,
            metadata=sub.metadata,
            parent_record_id=sub.parent_record_id,
            active=sub.active,
        )


class TldView(_View):
    tld: str
    fee_multiplier: int = Field(alias="feeMultiplier")

    @classmethod
    def of(cls, entry: TldEntry) -> "TldView":
        return cls(tld=entry.tld, fee_multiplier=entry.fee_multiplier)


class NotificationView(_View):
    """
    Committed notification. `args` keeps the ledger's snake_case keys so the
    JSONL log and the RPC agree on payloads.
    """

    seq: int
    name: str
    args: Dict[str, Any]

    @classmethod
    def of(cls, n: Notification) -> "NotificationView":
        return cls(seq=n.seq, name=n.name, args=dict(n.args))


__all__ = ["NotificationView", "RecordView", "SubRecordView", "TldView"]
