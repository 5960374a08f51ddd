"""
nameledger RPC — JSON-RPC 2.0 Dispatcher
========================================

Features
--------
• JSON-RPC 2.0: single & batch, named & positional params, notifications.
• Structured error mapping (standard codes + ledger codes via nameledger.rpc.errors).
• Safe arg binding with context injection for parameters named "ctx".
• Named params may be sent in camelCase (`termYears`) or snake_case (`term_years`).
• Deterministic responses: {"jsonrpc":"2.0", "id":..., "result":...} or {"error":...}.

Handlers live in `nameledger.rpc.methods` and register themselves on the
module-level `registry`. For HTTP usage, `router` is mounted at `/rpc` by
`nameledger.rpc.server.create_app`.
"""

from __future__ import annotations

import inspect
import json
import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError

from nameledger.boot import Registry
from nameledger.errors import LedgerError
from nameledger.logging import bind, trace_scope

from .auth import caller_identity
from .errors import (
    InternalError,
    InvalidParams,
    InvalidRequest,
    MethodNotFound,
    ParseError,
    RpcError,
    error_response,
    to_error,
)

log = logging.getLogger(__name__)

Json = Dict[str, Any]
Params = Union[List[Any], Dict[str, Any]]


# --------------------------------------------------------------------------------------
# Context
# --------------------------------------------------------------------------------------


class Context:
    """
    Per-request context passed to handlers that declare a `ctx` parameter.

    `caller` is the identity authenticated for this request (None when the
    request carried no token).
    """

    __slots__ = ("ledger", "caller", "faucet_enabled", "received_at_ms", "client")

    def __init__(
        self,
        ledger: Registry,
        faucet_enabled: bool,
        received_at_ms: int,
        client: Optional[Tuple[str, int]] = None,
        caller: Optional[str] = None,
    ) -> None:
        self.ledger = ledger
        self.caller = caller
        self.faucet_enabled = faucet_enabled
        self.received_at_ms = received_at_ms
        self.client = client


def _now_ms() -> int:
    return int(time.time() * 1000)


# --------------------------------------------------------------------------------------
# Method registry
# --------------------------------------------------------------------------------------


class MethodRegistry:
    """
    Name → callable registry with decorator sugar.
    """

    def __init__(self) -> None:
        self._methods: Dict[str, Callable[..., Any]] = {}

    def method(self, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def deco(fn: Callable[..., Any]) -> Callable[..., Any]:
            if not isinstance(name, str) or not name:
                raise ValueError("Method name must be non-empty string")
            if name in self._methods:
                raise ValueError(f"Method already registered: {name}")
            self._methods[name] = fn
            log.debug("JSON-RPC register %s → %s.%s", name, fn.__module__, fn.__name__)
            return fn

        return deco

    def get(self, name: str) -> Callable[..., Any]:
        fn = self._methods.get(name)
        if fn is None:
            raise MethodNotFound(name)
        return fn

    @property
    def names(self) -> List[str]:
        return sorted(self._methods.keys())


registry = MethodRegistry()


# --------------------------------------------------------------------------------------
# Arg binding
# --------------------------------------------------------------------------------------

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL.sub("_", key).lower()


def _bind_call_args(fn: Callable[..., Any], params: Optional[Params], ctx: Context) -> Dict[str, Any]:
    """
    Bind positional/named params to `fn` using its signature and inject `ctx`.
    """
    sig = inspect.signature(fn)
    wants_ctx = "ctx" in sig.parameters
    try:
        if params is None:
            bound = sig.bind_partial()
        elif isinstance(params, list):
            bound = sig.bind_partial(*([ctx] if wants_ctx else []), *params)
        else:
            named = {_snake(k): v for k, v in params.items()}
            if "ctx" in named:
                raise InvalidParams("unexpected parameter 'ctx'")
            bound = sig.bind_partial(**named)
    except TypeError as e:
        raise InvalidParams(str(e)) from None

    if wants_ctx:
        bound.arguments["ctx"] = ctx
    missing = [
        p.name
        for p in sig.parameters.values()
        if p.default is inspect.Parameter.empty and p.name not in bound.arguments
    ]
    if missing:
        raise InvalidParams("missing required params", missing=missing)
    return dict(bound.arguments)


# --------------------------------------------------------------------------------------
# Core dispatch
# --------------------------------------------------------------------------------------

_NO_ID = object()  # sentinel for notification


def _validate_request_obj(obj: Json) -> Tuple[str, Optional[Params], Any]:
    """
    Validate base request object; returns (method, params, id).
    Does NOT validate method existence.
    """
    if obj.get("jsonrpc") != "2.0":
        raise InvalidRequest("jsonrpc must be '2.0'")

    method = obj.get("method")
    if not isinstance(method, str) or not method:
        raise InvalidRequest("method must be a non-empty string")

    params: Optional[Params] = obj.get("params")
    if params is not None and not isinstance(params, (list, dict)):
        raise InvalidParams("params, if present, must be array or object")

    req_id = obj.get("id", _NO_ID)
    if req_id is not _NO_ID and req_id is not None and not isinstance(req_id, (str, int, float)):
        raise InvalidRequest("id must be string, number, or null")
    return method, params, req_id


def dispatch_one(obj: Json, ctx: Context) -> Optional[Json]:
    """
    Dispatch a single JSON-RPC request object.
    Returns a response object or None (for notifications).

    Failures while parsing or binding the request map to the standard request
    codes; typed ledger and validation errors map to their own codes. Any
    other exception escaping a handler is an InternalError, never a params
    error.
    """
    req_id = obj.get("id", _NO_ID)
    method_name = obj.get("method")
    with trace_scope():
        if ctx.caller is not None:
            bind(caller=ctx.caller)
        try:
            method_name, params, req_id = _validate_request_obj(obj)
            fn = registry.get(method_name)
            kwargs = _bind_call_args(fn, params, ctx)
            result = fn(**kwargs)
        except (RpcError, LedgerError, ValidationError) as exc:
            log.debug("rpc %s rejected: %s", method_name, exc)
            err = to_error(exc)
        except Exception as exc:
            log.exception("rpc %s failed", method_name)
            err = InternalError(reason=exc.__class__.__name__)
        else:
            if req_id is _NO_ID:
                return None
            return {"jsonrpc": "2.0", "id": req_id, "result": result}

    if req_id is _NO_ID:
        return None
    return error_response(req_id, err)


def _invalid(exc: RpcError) -> Json:
    return error_response(None, exc)


def dispatch(payload: Any, ctx: Context) -> Union[Json, List[Json], None]:
    """
    Dispatch a parsed JSON payload (already json.loads'ed).
    Handles single objects and batches; batch entries run in order.
    """
    if isinstance(payload, list):
        if not payload:
            return _invalid(InvalidRequest("empty batch"))
        out: List[Json] = []
        for obj in payload:
            r = dispatch_one(obj, ctx) if isinstance(obj, dict) else _invalid(InvalidRequest("Request must be an object"))
            if r is not None:
                out.append(r)
        return out or None
    if isinstance(payload, dict):
        return dispatch_one(payload, ctx)
    return _invalid(InvalidRequest("payload must be object or array"))


# --------------------------------------------------------------------------------------
# FastAPI router
# --------------------------------------------------------------------------------------

router = APIRouter()


def _json(content: Any, status_code: int = 200) -> Response:
    return Response(
        content=json.dumps(content, separators=(",", ":")),
        status_code=status_code,
        media_type="application/json",
    )


@router.post("")
@router.post("/")
async def jsonrpc_endpoint(request: Request, caller: Optional[str] = Depends(caller_identity)) -> Response:
    """
    HTTP endpoint for JSON-RPC POST. The acting identity comes from the bearer
    token (see nameledger.rpc.auth), never from request params.
    """
    body = await request.body()
    try:
        payload = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return _json(_invalid(ParseError("malformed JSON")))

    state = request.app.state
    client = request.client
    ctx = Context(
        ledger=state.ledger,
        faucet_enabled=bool(state.ledger.config.enable_faucet),
        received_at_ms=_now_ms(),
        client=(client.host, client.port) if client else None,
        caller=caller,
    )
    try:
        result = dispatch(payload, ctx)
    except Exception as e:  # pragma: no cover
        log.exception("dispatch crashed")
        return _json(_invalid(InternalError(reason=e.__class__.__name__)), status_code=500)
    if result is None:
        return Response(status_code=204)
    return _json(result)


# --------------------------------------------------------------------------------------
# Introspection
# --------------------------------------------------------------------------------------


@registry.method("rpc.listMethods")
def rpc_list_methods() -> List[str]:
    """Return the list of registered method names."""
    return registry.names


__all__ = [
    "Context",
    "MethodRegistry",
    "registry",
    "dispatch",
    "dispatch_one",
    "router",
]
