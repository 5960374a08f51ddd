"""
nameledger.errors — typed failures raised by the registry ledger.

Every precondition the ledger enforces has its own exception type. All of them
derive from `LedgerError`, which carries a human-readable message, a stable
machine `code` (the error kind) and optional JSON-safe `data`. Client layers
(RPC, CLI) surface `code` and `message` verbatim.

Hierarchy
---------
LedgerError (base)
 ├─ InvalidInput          : empty name/identity, malformed argument
 │   └─ InvalidTerm       : term years outside 1..10
 ├─ UnsupportedTld        : TLD not present in the catalog
 ├─ NameTaken             : (name, tld) already mapped to a record
 ├─ NotFound              : record / sub-record absent
 ├─ NotOwner              : caller does not own the record
 ├─ Unauthorized          : caller lacks the administrator capability
 ├─ AlreadyExists         : active sub-record with the same full name
 ├─ AlreadyInactive       : sub-record already deactivated
 ├─ Inactive              : record is not active
 ├─ Expired               : record's term has elapsed
 ├─ InsufficientPayment   : payment below the computed fee
 ├─ InsufficientFunds     : caller's account cannot cover the payment
 ├─ Duplicate             : TLD already in the catalog
 └─ InvalidMultiplier     : zero or negative fee multiplier

Errors are raised before any mutation; the store's transaction rolls back on
any exception, so a raised `LedgerError` always means "nothing happened".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable error kind (e.g. 'NameTaken', 'NotOwner').
        data:    Optional structured details (kept JSON-serializable).
    """

    message: str = "ledger error"
    code: str = "LedgerError"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for RPC errors and CLI output."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class _Kind(LedgerError):
    """
    Concrete error kinds: `kind` becomes the stable code, keyword arguments
    become `data`.

    Usage:
        raise NotOwner("caller is not the record owner", record_id=7, caller="alice")
    """

    kind = "LedgerError"
    default_message = "ledger error"

    def __init__(self, message: Optional[str] = None, **data: Any) -> None:
        super().__init__(
            message=message or self.default_message,
            code=self.kind,
            data=data or None,
        )


class InvalidInput(_Kind):
    """Malformed argument (empty name, null identity, negative amount)."""

    kind = "InvalidInput"
    default_message = "invalid input"


class InvalidTerm(InvalidInput):
    kind = "InvalidTerm"
    default_message = "term must be between 1 and 10 years"


class UnsupportedTld(_Kind):
    kind = "UnsupportedTld"
    default_message = "top-level domain is not supported"


class NameTaken(_Kind):
    kind = "NameTaken"
    default_message = "name is already registered"


class NotFound(_Kind):
    kind = "NotFound"
    default_message = "not found"


class NotOwner(_Kind):
    kind = "NotOwner"
    default_message = "caller is not the owner"


class Unauthorized(_Kind):
    kind = "Unauthorized"
    default_message = "caller lacks the required capability"


class AlreadyExists(_Kind):
    kind = "AlreadyExists"
    default_message = "sub-record already exists"


class AlreadyInactive(_Kind):
    kind = "AlreadyInactive"
    default_message = "sub-record is already inactive"


class Inactive(_Kind):
    kind = "Inactive"
    default_message = "record is inactive"


class Expired(_Kind):
    kind = "Expired"
    default_message = "record has expired"


class InsufficientPayment(_Kind):
    """
    Payment below the computed fee. The whole payment stays with the caller.
    """

    kind = "InsufficientPayment"
    default_message = "payment is below the required fee"


class InsufficientFunds(_Kind):
    kind = "InsufficientFunds"
    default_message = "account balance cannot cover the payment"


class Duplicate(_Kind):
    kind = "Duplicate"
    default_message = "entry already exists"


class InvalidMultiplier(_Kind):
    kind = "InvalidMultiplier"
    default_message = "multiplier must be a positive integer"


# -------- helper utilities ---------------------------------------------------


def error_to_response_fields(err: LedgerError) -> Dict[str, Any]:
    """
    Map a LedgerError to the rejection object the CLI prints under --json.

    Returns:
        {"status": "REJECTED", "error": {code, message, data?}}
    """
    return {"status": "REJECTED", "error": err.to_dict()}


__all__ = [
    "LedgerError",
    "InvalidInput",
    "InvalidTerm",
    "UnsupportedTld",
    "NameTaken",
    "NotFound",
    "NotOwner",
    "Unauthorized",
    "AlreadyExists",
    "AlreadyInactive",
    "Inactive",
    "Expired",
    "InsufficientPayment",
    "InsufficientFunds",
    "Duplicate",
    "InvalidMultiplier",
    "error_to_response_fields",
]
