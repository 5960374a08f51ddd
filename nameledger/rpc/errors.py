"""
JSON-RPC errors for the nameledger server.

This module provides:
- Canonical JSON-RPC 2.0 error codes (parse/invalid request/method not found/invalid params/internal).
- Ledger error codes in the reserved -32000..-32099 range, one per `LedgerError` kind.
- `RpcError`, an exception carrying (code, message, data).
- `to_error`, which converts any exception raised by a handler into an `RpcError`.

Ledger failures keep their human-readable reason verbatim:

    {"code": -32020, "message": "name is already registered",
     "data": {"kind": "NameTaken", "reason": "name is already registered",
              "name": "hello", "tld": "com"}}

Notes:
- All custom codes live in -32000..-32099 and are stable across releases.
- `data` only ever holds what the ledger put in its error plus kind/reason.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from nameledger.errors import LedgerError


# ───────────────────────────────────────────────────────────────────────────────
# JSON-RPC 2.0 codes
# ───────────────────────────────────────────────────────────────────────────────

class JsonRpcCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


# ───────────────────────────────────────────────────────────────────────────────
# Ledger server codes (-32000..-32099)
# Keep these stable; append new codes at the end of a group.
# ───────────────────────────────────────────────────────────────────────────────

class LedgerCode(IntEnum):
    SERVER_ERROR = -32000
    FAUCET_DISABLED = -32001

    # malformed arguments
    INVALID_INPUT = -32010
    INVALID_TERM = -32011
    UNSUPPORTED_TLD = -32012
    INVALID_MULTIPLIER = -32013

    # uniqueness
    NAME_TAKEN = -32020
    ALREADY_EXISTS = -32021
    DUPLICATE = -32022

    # lookup & permission
    NOT_FOUND = -32030
    NOT_OWNER = -32031
    UNAUTHORIZED = -32032

    # record lifecycle
    INACTIVE = -32040
    ALREADY_INACTIVE = -32041
    EXPIRED = -32042

    # payment
    INSUFFICIENT_PAYMENT = -32050
    INSUFFICIENT_FUNDS = -32051


KIND_TO_CODE: Dict[str, LedgerCode] = {
    "InvalidInput": LedgerCode.INVALID_INPUT,
    "InvalidTerm": LedgerCode.INVALID_TERM,
    "UnsupportedTld": LedgerCode.UNSUPPORTED_TLD,
    "InvalidMultiplier": LedgerCode.INVALID_MULTIPLIER,
    "NameTaken": LedgerCode.NAME_TAKEN,
    "AlreadyExists": LedgerCode.ALREADY_EXISTS,
    "Duplicate": LedgerCode.DUPLICATE,
    "NotFound": LedgerCode.NOT_FOUND,
    "NotOwner": LedgerCode.NOT_OWNER,
    "Unauthorized": LedgerCode.UNAUTHORIZED,
    "Inactive": LedgerCode.INACTIVE,
    "AlreadyInactive": LedgerCode.ALREADY_INACTIVE,
    "Expired": LedgerCode.EXPIRED,
    "InsufficientPayment": LedgerCode.INSUFFICIENT_PAYMENT,
    "InsufficientFunds": LedgerCode.INSUFFICIENT_FUNDS,
}


# ───────────────────────────────────────────────────────────────────────────────
# Base exception
# ───────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class RpcError(Exception):
    code: int
    message: str
    data: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        err: Dict[str, Any] = {"code": int(self.code), "message": str(self.message)}
        if self.data:
            err["data"] = _safe_jsonable(self.data)
        return err

    def __str__(self) -> str:  # pragma: no cover
        return f"[{self.code}] {self.message} ({self.data})"


class ParseError(RpcError):
    def __init__(self, detail: str = "Parse error", **data: Any) -> None:
        super().__init__(JsonRpcCode.PARSE_ERROR, detail, data or None)

class InvalidRequest(RpcError):
    def __init__(self, detail: str = "Invalid request", **data: Any) -> None:
        super().__init__(JsonRpcCode.INVALID_REQUEST, detail, data or None)

class MethodNotFound(RpcError):
    def __init__(self, method: str) -> None:
        super().__init__(JsonRpcCode.METHOD_NOT_FOUND, "Method not found", {"method": method})

class InvalidParams(RpcError):
    def __init__(self, detail: str = "Invalid params", **data: Any) -> None:
        super().__init__(JsonRpcCode.INVALID_PARAMS, detail, data or None)

class InternalError(RpcError):
    def __init__(self, detail: str = "Internal error", **data: Any) -> None:
        super().__init__(JsonRpcCode.INTERNAL_ERROR, detail, data or None)

class FaucetDisabled(RpcError):
    def __init__(self) -> None:
        super().__init__(
            LedgerCode.FAUCET_DISABLED,
            "Faucet disabled",
            {"hint": "set NAMELEDGER_ENABLE_FAUCET=1 on the server"},
        )


# ───────────────────────────────────────────────────────────────────────────────
# Helpers
# ───────────────────────────────────────────────────────────────────────────────

def from_ledger_error(err: LedgerError) -> RpcError:
    """Wrap a ledger failure, keeping its kind and reason visible to clients."""
    code = KIND_TO_CODE.get(err.code, LedgerCode.SERVER_ERROR)
    data: Dict[str, Any] = {"kind": err.code, "reason": err.message}
    if err.data:
        for k, v in err.data.items():
            data.setdefault(k, v)
    return RpcError(code, err.message, data)


def error_response(req_id: Optional[Union[str, int]], err: RpcError) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": req_id, "error": err.to_dict()}


def _safe_jsonable(obj: Any) -> Any:
    """Convert exotic values to strings, ints, or dicts."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, (bytes, bytearray)):
        return "0x" + bytes(obj).hex()
    if isinstance(obj, Mapping):
        return {str(k): _safe_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_safe_jsonable(x) for x in obj]
    return str(obj)


def to_error(exc: Exception) -> RpcError:
    """
    Convert any Exception into a RpcError.
    - RpcError passes through.
    - LedgerError maps to its stable ledger code.
    - pydantic ValidationError (strict argument checks) becomes InvalidParams with per-field errors.
    - Anything else becomes InternalError with only the exception class name;
      argument binding raises InvalidParams itself, so a TypeError or
      ValueError reaching here is a server-side fault.
    """
    if isinstance(exc, RpcError):
        return exc
    if isinstance(exc, LedgerError):
        return from_ledger_error(exc)
    if isinstance(exc, ValidationError):
        errors = [
            {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", ""), "type": e.get("type", "")}
            for e in exc.errors()
        ]
        return InvalidParams("Invalid params", errors=errors)
    return InternalError(reason=exc.__class__.__name__)


__all__ = [
    "RpcError",
    "JsonRpcCode",
    "LedgerCode",
    "KIND_TO_CODE",
    "ParseError",
    "InvalidRequest",
    "MethodNotFound",
    "InvalidParams",
    "InternalError",
    "FaucetDisabled",
    "from_ledger_error",
    "error_response",
    "to_error",
]
