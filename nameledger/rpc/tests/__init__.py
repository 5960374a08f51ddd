"""
Test utilities for the nameledger RPC.

Usage in tests:
    from nameledger.rpc.tests import new_test_client, rpc_call

    def test_health():
        client, ledger = new_test_client()
        assert client.get("/healthz").json()["ok"] is True

    def test_quote():
        client, _ = new_test_client()
        res = rpc_call(client, "registry.quote", {"name": "hello", "tld": "com", "termYears": 1})
        assert res["result"] == 2_000_000
"""
from __future__ import annotations

import typing as t

from fastapi.testclient import TestClient

from nameledger.boot import Registry, build_registry
from nameledger.clock import ManualClock
from nameledger.config import load_config
from nameledger.rpc import config as rpc_config
from nameledger.rpc import server as rpc_server


# bearer token -> identity used by every test client
TEST_TOKENS = {"tok-alice": "alice", "tok-bob": "bob", "tok-admin": "admin"}


def make_test_config() -> rpc_config.RpcConfig:
    """Quiet logs, wide-open CORS, one token per test identity."""
    return rpc_config.RpcConfig(
        host="127.0.0.1",
        port=0,
        cors_allow_origins=["*"],
        api_tokens=dict(TEST_TOKENS),
        log_level="ERROR",
    )


def auth_headers(identity: str) -> dict:
    token = next(tok for tok, who in TEST_TOKENS.items() if who == identity)
    return {"Authorization": f"Bearer {token}"}


def new_test_ledger(*, faucet: bool = True, clock: ManualClock | None = None) -> Registry:
    cfg = load_config({}, overrides={"enable_faucet": faucet})
    return build_registry(cfg, clock=clock or ManualClock())


def new_test_client(ledger: Registry | None = None, **ledger_kwargs: t.Any) -> tuple[TestClient, Registry]:
    """
    Create a TestClient bound to a fresh app and in-memory ledger.
    Returns (client, ledger).
    """
    ledger = ledger or new_test_ledger(**ledger_kwargs)
    app = rpc_server.create_app(make_test_config(), ledger)
    return TestClient(app), ledger


def rpc_call(
    client: TestClient,
    method: str,
    params: t.Any | None = None,
    *,
    id: t.Any = 1,
    caller: str | None = None,
    expect_error: bool = False,
) -> dict:
    """
    POST a JSON-RPC request to /rpc and return the parsed response.
    `caller` sends that identity's bearer token; omit it for an anonymous call.
    Set expect_error=True to assert an 'error' object is present.
    """
    payload: dict = {"jsonrpc": "2.0", "method": method, "id": id}
    if params is not None:
        payload["params"] = params
    headers = auth_headers(caller) if caller is not None else {}
    resp = client.post("/rpc", json=payload, headers=headers)
    assert resp.status_code == 200, f"HTTP {resp.status_code}: {resp.text}"
    data = resp.json()
    if expect_error:
        assert "error" in data, f"expected JSON-RPC error, got {data}"
    else:
        assert "result" in data, f"expected JSON-RPC result, got {data}"
    return data


__all__ = ["TEST_TOKENS", "auth_headers", "make_test_config", "new_test_client", "new_test_ledger", "rpc_call"]
