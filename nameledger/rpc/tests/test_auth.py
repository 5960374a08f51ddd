from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from nameledger.clock import ManualClock
from nameledger.rpc import server as rpc_server
from nameledger.rpc.config import load_config
from nameledger.rpc.errors import JsonRpcCode, LedgerCode
from nameledger.rpc.tests import make_test_config, new_test_client, new_test_ledger, rpc_call

FEE_HELLO_1Y = 2_000_000


@pytest.fixture
def owned():
    """alice owns hello.com (record 1); fees collected."""
    client, ledger = new_test_client(clock=ManualClock(start=1_700_000_000))
    rpc_call(client, "treasury.deposit", {"identity": "alice", "amount": 10_000_000})
    params = {"name": "hello", "tld": "com", "termYears": 1, "payment": FEE_HELLO_1Y}
    rid = rpc_call(client, "registry.register", params, caller="alice")["result"]
    return client, ledger, rid


def test_anonymous_caller_cannot_act(owned):
    client, ledger, rid = owned
    res = rpc_call(client, "registry.transfer", {"recordId": rid, "newOwner": "mallory"}, expect_error=True)
    assert res["error"]["code"] == LedgerCode.UNAUTHORIZED
    assert res["error"]["data"]["kind"] == "Unauthorized"
    assert ledger.registrar.get_record(rid).owner == "alice"

    for method, params in (("admin.withdraw", {}), ("admin.updateBaseFee", {"newFee": 0})):
        res = rpc_call(client, method, params, expect_error=True)
        assert res["error"]["code"] == LedgerCode.UNAUTHORIZED
    assert ledger.admin.collected_balance() == FEE_HELLO_1Y
    assert rpc_call(client, "registry.quote", ["hello", "com", 1])["result"] == FEE_HELLO_1Y


def test_identity_cannot_be_claimed_through_params(owned):
    client, ledger, rid = owned
    res = rpc_call(
        client,
        "registry.transfer",
        {"caller": "alice", "recordId": rid, "newOwner": "mallory"},
        expect_error=True,
    )
    assert res["error"]["code"] == JsonRpcCode.INVALID_PARAMS
    res = rpc_call(client, "admin.withdraw", {"caller": "admin"}, caller="bob", expect_error=True)
    assert res["error"]["code"] == JsonRpcCode.INVALID_PARAMS
    assert ledger.registrar.get_record(rid).owner == "alice"
    assert ledger.admin.collected_balance() == FEE_HELLO_1Y


def test_token_identity_is_checked_against_owner_and_admin(owned):
    client, ledger, rid = owned
    res = rpc_call(client, "registry.transfer", {"recordId": rid, "newOwner": "bob"}, caller="bob", expect_error=True)
    assert res["error"]["data"]["kind"] == "NotOwner"
    res = rpc_call(client, "admin.withdraw", {}, caller="bob", expect_error=True)
    assert res["error"]["code"] == LedgerCode.UNAUTHORIZED
    assert ledger.registrar.get_record(rid).owner == "alice"
    assert ledger.admin.collected_balance() == FEE_HELLO_1Y


def test_unknown_token_is_rejected_with_401(owned):
    client, ledger, rid = owned
    payload = {"jsonrpc": "2.0", "method": "admin.withdraw", "params": {}, "id": 1}
    r = client.post("/rpc", json=payload, headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"].startswith("Bearer")
    assert ledger.admin.collected_balance() == FEE_HELLO_1Y


def test_read_only_methods_need_no_token(owned):
    client, _, rid = owned
    assert rpc_call(client, "registry.resolve", ["hello", "com"])["result"] == ""
    assert rpc_call(client, "registry.getRecord", [rid])["result"]["owner"] == "alice"


def test_tokens_parse_from_pairs_and_json():
    cfg = load_config({"NAMELEDGER_RPC_TOKENS": "s3cret:alice, 0ther:admin"})
    assert cfg.api_tokens == {"s3cret": "alice", "0ther": "admin"}
    cfg = load_config({"NAMELEDGER_RPC_TOKENS": json.dumps({"t": "bob"})})
    assert cfg.api_tokens == {"t": "bob"}
    assert load_config({}).api_tokens == {}
    with pytest.raises(ValueError):
        load_config({"NAMELEDGER_RPC_TOKENS": "no-identity"})


def test_state_file_is_written_only_after_committed_changes(tmp_path):
    state = tmp_path / "state.json"
    ledger = new_test_ledger()
    client = TestClient(rpc_server.create_app(make_test_config(), ledger, state_path=state))

    rpc_call(client, "registry.quote", ["hello", "com", 1])
    unpaid = {"name": "hello", "tld": "com", "termYears": 1}
    rpc_call(client, "registry.register", unpaid, caller="alice", expect_error=True)
    assert not state.exists()

    rpc_call(client, "treasury.deposit", {"identity": "alice", "amount": 5})
    assert json.loads(state.read_text())["accounts"] == {"alice": 5}
