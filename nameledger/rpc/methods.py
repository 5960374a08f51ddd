"""
JSON-RPC method bindings.

Every handler takes the request `Context` first and delegates to the wired
`Registry` (ctx.ledger). Methods that act on behalf of an identity take it
from `ctx.caller`, the identity authenticated by bearer token; a request
without a token fails Unauthorized before the ledger is touched.

Arguments are checked strictly with pydantic before the ledger sees them: a
string where an integer is expected is an InvalidParams error, not a coerced
value. Ledger-level checks (empty names, term range, ownership, ...) stay in
the services and surface as ledger codes.

Namespaces
----------
registry.*   availability, pricing, register/renew/transfer, lookups
subdomain.*  sub-records under an owned record
admin.*      TLD catalog, base fee, withdrawal (administrator only)
treasury.*   account balances and the dev faucet
events.*     committed notifications (in-memory history)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from pydantic import ConfigDict, validate_call

from nameledger.errors import Unauthorized

from .errors import FaucetDisabled
from .jsonrpc import Context, registry
from .models import NotificationView, RecordView, SubRecordView, TldView

_STRICT = ConfigDict(strict=True, arbitrary_types_allowed=True)

DEFAULT_EVENTS_LIMIT = 100


def rpc_method(name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Register `fn` under `name` with strict argument validation."""

    def deco(fn: Callable[..., Any]) -> Callable[..., Any]:
        return registry.method(name)(validate_call(config=_STRICT)(fn))

    return deco


def _caller(ctx: Context) -> str:
    """The authenticated identity; methods that act on behalf of someone need one."""
    if ctx.caller is None:
        raise Unauthorized("authentication required: send Authorization: Bearer <token>")
    return ctx.caller


# --------------------------------------------------------------------------------------
# registry.*
# --------------------------------------------------------------------------------------


@rpc_method("registry.isAvailable")
def is_available(ctx: Context, name: str, tld: str) -> bool:
    return ctx.ledger.registrar.is_available(name, tld)


@rpc_method("registry.quote")
def quote(ctx: Context, name: str, tld: str, term_years: int) -> int:
    return ctx.ledger.registrar.quote(name, tld, term_years)


@rpc_method("registry.register")
def register(
    ctx: Context,
    name: str,
    tld: str,
    term_years: int,
    metadata: str = "",
    payment: int = 0,
) -> int:
    """Returns the new record id."""
    return ctx.ledger.registrar.register(_caller(ctx), name, tld, term_years, metadata, payment)


@rpc_method("registry.renew")
def renew(ctx: Context, record_id: int, term_years: int, payment: int = 0) -> int:
    """Returns the new expiry (Unix seconds)."""
    return ctx.ledger.registrar.renew(_caller(ctx), record_id, term_years, payment)


@rpc_method("registry.transfer")
def transfer(ctx: Context, record_id: int, new_owner: str) -> bool:
    ctx.ledger.registrar.transfer(_caller(ctx), record_id, new_owner)
    return True


@rpc_method("registry.resolve")
def resolve(ctx: Context, name: str, tld: str) -> str:
    return ctx.ledger.registrar.resolve(name, tld)


@rpc_method("registry.getRecord")
def get_record(ctx: Context, record_id: int) -> Dict[str, Any]:
    return RecordView.of(ctx.ledger.registrar.get_record(record_id)).dump()


@rpc_method("registry.recordsOf")
def records_of(ctx: Context, owner: str) -> List[int]:
    return ctx.ledger.registrar.records_of(owner)


# --------------------------------------------------------------------------------------
# subdomain.*
# --------------------------------------------------------------------------------------


@rpc_method("subdomain.create")
def create_subdomain(ctx: Context, parent_record_id: int, sub_name: str, metadata: str = "") -> str:
    """Returns the full name of the created sub-record."""
    return ctx.ledger.subdomains.create(_caller(ctx), parent_record_id, sub_name, metadata)


@rpc_method("subdomain.list")
def list_subdomains(ctx: Context, parent_record_id: int) -> List[Dict[str, Any]]:
    return [SubRecordView.of(s).dump() for s in ctx.ledger.subdomains.list(parent_record_id)]


@rpc_method("subdomain.get")
def get_subdomain(ctx: Context, parent_record_id: int, sub_name: str) -> Dict[str, Any]:
    return SubRecordView.of(ctx.ledger.subdomains.get(parent_record_id, sub_name)).dump()


@rpc_method("subdomain.deactivate")
def deactivate_subdomain(ctx: Context, parent_record_id: int, sub_name: str) -> bool:
    ctx.ledger.subdomains.deactivate(_caller(ctx), parent_record_id, sub_name)
    return True


# --------------------------------------------------------------------------------------
# admin.*
# --------------------------------------------------------------------------------------


@rpc_method("admin.addTld")
def add_tld(ctx: Context, tld: str, multiplier: int) -> Dict[str, Any]:
    return TldView.of(ctx.ledger.admin.add_tld(_caller(ctx), tld, multiplier)).dump()


@rpc_method("admin.updateBaseFee")
def update_base_fee(ctx: Context, new_fee: int) -> int:
    return ctx.ledger.admin.update_base_fee(_caller(ctx), new_fee)


@rpc_method("admin.updateTldMultiplier")
def update_tld_multiplier(ctx: Context, tld: str, multiplier: int) -> Dict[str, Any]:
    return TldView.of(ctx.ledger.admin.update_tld_multiplier(_caller(ctx), tld, multiplier)).dump()


@rpc_method("admin.withdraw")
def withdraw(ctx: Context) -> int:
    """Returns the amount moved to the administrator's account."""
    return ctx.ledger.admin.withdraw(_caller(ctx))


@rpc_method("admin.collectedBalance")
def collected_balance(ctx: Context) -> int:
    return ctx.ledger.admin.collected_balance()


# --------------------------------------------------------------------------------------
# treasury.*
# --------------------------------------------------------------------------------------


@rpc_method("treasury.balanceOf")
def balance_of(ctx: Context, identity: str) -> int:
    return ctx.ledger.balance_of(identity)


@rpc_method("treasury.deposit")
def deposit(ctx: Context, identity: str, amount: int) -> int:
    """Dev faucet. Returns the new balance."""
    if not ctx.faucet_enabled:
        raise FaucetDisabled()
    return ctx.ledger.deposit(identity, amount)


# --------------------------------------------------------------------------------------
# events.*
# --------------------------------------------------------------------------------------


@rpc_method("events.list")
def list_events(
    ctx: Context,
    name: Optional[str] = None,
    from_seq: Optional[int] = None,
    limit: int = DEFAULT_EVENTS_LIMIT,
) -> List[Dict[str, Any]]:
    logs = ctx.ledger.history.get_logs(name=name, from_seq=from_seq, limit=limit)
    return [NotificationView.of(n).dump() for n in logs]


__all__ = ["DEFAULT_EVENTS_LIMIT", "rpc_method"]
