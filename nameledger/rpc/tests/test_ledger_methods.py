from __future__ import annotations

import pytest

from nameledger.clock import SECONDS_PER_YEAR, ManualClock
from nameledger.rpc.errors import KIND_TO_CODE, LedgerCode
from nameledger.rpc.tests import new_test_client, rpc_call

FEE_HELLO_1Y = 2_000_000


@pytest.fixture
def env():
    clock = ManualClock(start=1_700_000_000)
    client, ledger = new_test_client(clock=clock)
    rpc_call(client, "treasury.deposit", {"identity": "alice", "amount": 10_000_000})
    return client, ledger, clock


def _register(client, name="hello", payment=FEE_HELLO_1Y, caller="alice", **extra):
    params = {"name": name, "tld": "com", "termYears": 1, "metadata": "ipfs://x", "payment": payment}
    params.update(extra)
    return rpc_call(client, "registry.register", params, caller=caller)["result"]


def test_register_resolve_and_get_record(env):
    client, _, clock = env
    rid = _register(client)
    assert rid == 1

    assert rpc_call(client, "registry.isAvailable", ["hello", "com"])["result"] is False
    assert rpc_call(client, "registry.resolve", ["hello", "com"])["result"] == "ipfs://x"

    rec = rpc_call(client, "registry.getRecord", {"recordId": rid})["result"]
    assert rec == {
        "recordId": 1,
        "name": "hello",
        "tld": "com",
        "owner": "alice",
        "expiresAt": clock.now() + SECONDS_PER_YEAR,
        "active": True,
        "metadata": "ipfs://x",
    }
    assert rpc_call(client, "registry.recordsOf", ["alice"])["result"] == [1]


def test_overpayment_refunds_everything_above_fee(env):
    client, _, _ = env
    _register(client, payment=5_000_000)
    assert rpc_call(client, "treasury.balanceOf", ["alice"])["result"] == 10_000_000 - FEE_HELLO_1Y
    assert rpc_call(client, "admin.collectedBalance")["result"] == FEE_HELLO_1Y


def test_ledger_error_shape_carries_kind_and_reason(env):
    client, _, _ = env
    _register(client)
    res = rpc_call(
        client,
        "registry.register",
        {"name": "hello", "tld": "com", "termYears": 1, "payment": FEE_HELLO_1Y},
        caller="alice",
        expect_error=True,
    )
    err = res["error"]
    assert err["code"] == LedgerCode.NAME_TAKEN
    assert err["data"]["kind"] == "NameTaken"
    assert err["data"]["reason"] == err["message"]
    assert err["data"]["name"] == "hello"


@pytest.mark.parametrize(
    "params, kind",
    [
        ({"name": "", "tld": "com", "termYears": 1}, "InvalidInput"),
        ({"name": "hello", "tld": "xyz", "termYears": 1}, "UnsupportedTld"),
        ({"name": "hello", "tld": "com", "termYears": 11}, "InvalidTerm"),
        ({"name": "hello", "tld": "com", "termYears": 1, "payment": 1}, "InsufficientPayment"),
        ({"name": "hello", "tld": "com", "termYears": 1, "payment": 50_000_000}, "InsufficientFunds"),
    ],
)
def test_register_rejections_map_to_codes(env, params, kind):
    client, _, _ = env
    res = rpc_call(client, "registry.register", {"payment": FEE_HELLO_1Y, **params}, caller="alice", expect_error=True)
    assert res["error"]["data"]["kind"] == kind
    assert res["error"]["code"] == KIND_TO_CODE[kind]
    assert rpc_call(client, "treasury.balanceOf", ["alice"])["result"] == 10_000_000


def test_renew_and_transfer(env):
    client, _, clock = env
    rid = _register(client)
    expiry = rpc_call(client, "registry.getRecord", [rid])["result"]["expiresAt"]

    renewal = {"recordId": rid, "termYears": 1, "payment": FEE_HELLO_1Y}
    new_expiry = rpc_call(client, "registry.renew", renewal, caller="alice")["result"]
    assert new_expiry == expiry + SECONDS_PER_YEAR

    res = rpc_call(client, "registry.renew", {"recordId": rid, "termYears": 1}, caller="bob", expect_error=True)
    assert res["error"]["data"]["kind"] == "NotOwner"

    assert rpc_call(client, "registry.transfer", {"recordId": rid, "newOwner": "bob"}, caller="alice")["result"] is True
    assert rpc_call(client, "registry.getRecord", [rid])["result"]["owner"] == "bob"

    clock.set(new_expiry)
    res = rpc_call(client, "registry.transfer", {"recordId": rid, "newOwner": "carol"}, caller="bob", expect_error=True)
    assert res["error"]["data"]["kind"] == "Expired"


def test_subdomain_lifecycle(env):
    client, _, _ = env
    rid = _register(client)
    www = {"parentRecordId": rid, "subName": "www"}
    full = rpc_call(client, "subdomain.create", www, caller="alice")["result"]
    assert full == "www.hello.com"

    dup = rpc_call(client, "subdomain.create", www, caller="alice", expect_error=True)
    assert dup["error"]["data"]["kind"] == "AlreadyExists"

    got = rpc_call(client, "subdomain.get", www)["result"]
    assert got == {"fullName": "www.hello.com", "metadata": "", "parentRecordId": rid, "active": True}

    rpc_call(client, "subdomain.deactivate", www, caller="alice")
    listed = rpc_call(client, "subdomain.list", [rid])["result"]
    assert [s["active"] for s in listed] == [False]

    again = rpc_call(client, "subdomain.deactivate", www, caller="alice", expect_error=True)
    assert again["error"]["data"]["kind"] == "AlreadyInactive"


def test_admin_methods_are_gated(env):
    client, _, _ = env
    res = rpc_call(client, "admin.addTld", {"tld": "net", "multiplier": 150}, caller="alice", expect_error=True)
    assert res["error"]["code"] == LedgerCode.UNAUTHORIZED

    entry = rpc_call(client, "admin.addTld", {"tld": "net", "multiplier": 150}, caller="admin")["result"]
    assert entry == {"tld": "net", "feeMultiplier": 150}

    assert rpc_call(client, "admin.updateBaseFee", {"newFee": 20_000}, caller="admin")["result"] == 20_000
    assert rpc_call(client, "registry.quote", ["hello", "com", 1])["result"] == 2 * FEE_HELLO_1Y

    res = rpc_call(
        client, "admin.updateTldMultiplier", {"tld": "org", "multiplier": 5}, caller="admin", expect_error=True
    )
    assert res["error"]["data"]["kind"] == "UnsupportedTld"


def test_withdraw_moves_collected_balance_to_admin(env):
    client, _, _ = env
    _register(client)
    assert rpc_call(client, "admin.withdraw", {}, caller="admin")["result"] == FEE_HELLO_1Y
    assert rpc_call(client, "admin.withdraw", {}, caller="admin")["result"] == 0
    assert rpc_call(client, "treasury.balanceOf", ["admin"])["result"] == FEE_HELLO_1Y


def test_faucet_disabled_by_default_config():
    client, _ = new_test_client(faucet=False)
    res = rpc_call(client, "treasury.deposit", {"identity": "alice", "amount": 5}, expect_error=True)
    assert res["error"]["code"] == LedgerCode.FAUCET_DISABLED


def test_events_list_in_commit_order(env):
    client, _, _ = env
    rid = _register(client)
    rpc_call(client, "subdomain.create", {"parentRecordId": rid, "subName": "www"}, caller="alice")
    rpc_call(client, "registry.transfer", {"recordId": rid, "newOwner": "bob"}, caller="alice")

    events = rpc_call(client, "events.list")["result"]
    assert [e["name"] for e in events] == ["Registered", "SubdomainCreated", "OwnershipTransferred"]
    assert [e["seq"] for e in events] == [1, 2, 3]
    assert events[0]["args"] == {"record_id": rid, "name": "hello", "tld": "com", "owner": "alice"}

    only = rpc_call(client, "events.list", {"name": "OwnershipTransferred"})["result"]
    assert len(only) == 1 and only[0]["args"]["new_owner"] == "bob"

    later = rpc_call(client, "events.list", {"fromSeq": 2, "limit": 1})["result"]
    assert [e["seq"] for e in later] == [2]


def test_failed_call_emits_no_event(env):
    client, _, _ = env
    unpaid = {"name": "hello", "tld": "com", "termYears": 1}
    rpc_call(client, "registry.register", unpaid, caller="alice", expect_error=True)
    assert rpc_call(client, "events.list")["result"] == []
