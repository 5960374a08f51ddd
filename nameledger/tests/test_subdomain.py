from __future__ import annotations

import pytest

from nameledger.clock import SECONDS_PER_YEAR
from nameledger.errors import AlreadyExists, AlreadyInactive, Expired, InvalidInput, NotFound, NotOwner
from nameledger.hashing import sub_key

from .conftest import START


def test_create_and_list_in_insertion_order(funded, hello):
    subs = funded.subdomains
    assert subs.create("alice", hello, "www", "v1") == "www.hello.com"
    assert subs.create("alice", hello, "api") == "api.hello.com"
    assert subs.create("alice", hello, "mail") == "mail.hello.com"

    listed = subs.list(hello)
    assert [s.full_name for s in listed] == ["www.hello.com", "api.hello.com", "mail.hello.com"]
    assert all(s.active and s.parent_record_id == hello for s in listed)
    assert listed[0].metadata == "v1"


def test_sub_records_are_keyed_by_full_name_hash(funded, hello):
    funded.subdomains.create("alice", hello, "www")
    assert funded.store.get("sub_keys", hello) == (sub_key("www.hello.com"),)


def test_create_emits_subdomain_created(funded, hello):
    funded.subdomains.create("alice", hello, "www")
    n = funded.history.get_logs(name="SubdomainCreated")[0]
    assert dict(n.args) == {"parent_record_id": hello, "full_name": "www.hello.com", "owner": "alice"}


def test_duplicate_active_sub_record_fails(funded, hello):
    funded.subdomains.create("alice", hello, "www")
    with pytest.raises(AlreadyExists):
        funded.subdomains.create("alice", hello, "www", "other")
    assert funded.subdomains.get(hello, "www").metadata == ""
    assert len(funded.subdomains.list(hello)) == 1


def test_recreate_after_deactivation_keeps_position(funded, hello):
    subs = funded.subdomains
    subs.create("alice", hello, "www")
    subs.create("alice", hello, "api")
    subs.deactivate("alice", hello, "www")

    subs.create("alice", hello, "www", "v2")
    listed = subs.list(hello)
    assert [s.full_name for s in listed] == ["www.hello.com", "api.hello.com"]
    assert listed[0].active is True and listed[0].metadata == "v2"


def test_create_guards(funded, hello, clock):
    with pytest.raises(NotFound):
        funded.subdomains.create("alice", 42, "www")
    with pytest.raises(NotOwner):
        funded.subdomains.create("bob", hello, "www")
    with pytest.raises(InvalidInput):
        funded.subdomains.create("alice", hello, "")

    clock.set(START + SECONDS_PER_YEAR)
    with pytest.raises(Expired):
        funded.subdomains.create("alice", hello, "www")
    assert funded.subdomains.list(hello) == []
    assert funded.history.names == ["Registered"]


def test_deactivate_flips_flag_only(funded, hello):
    funded.subdomains.create("alice", hello, "www", "meta")
    funded.subdomains.deactivate("alice", hello, "www")

    sub = funded.subdomains.get(hello, "www")
    assert sub.active is False
    assert sub.metadata == "meta"
    n = funded.history.get_logs(name="SubdomainRemoved")[0]
    assert dict(n.args) == {"parent_record_id": hello, "full_name": "www.hello.com"}


def test_deactivate_guards(funded, hello):
    with pytest.raises(NotFound):
        funded.subdomains.deactivate("alice", hello, "www")
    funded.subdomains.create("alice", hello, "www")
    with pytest.raises(NotOwner):
        funded.subdomains.deactivate("bob", hello, "www")
    funded.subdomains.deactivate("alice", hello, "www")
    with pytest.raises(AlreadyInactive):
        funded.subdomains.deactivate("alice", hello, "www")


def test_deactivate_allowed_after_parent_expiry(funded, hello, clock):
    funded.subdomains.create("alice", hello, "www")
    clock.advance(years=3)
    funded.subdomains.deactivate("alice", hello, "www")
    assert funded.subdomains.get(hello, "www").active is False


def test_new_owner_manages_sub_records(funded, hello):
    funded.subdomains.create("alice", hello, "www")
    funded.registrar.transfer("alice", hello, "bob")
    with pytest.raises(NotOwner):
        funded.subdomains.create("alice", hello, "api")
    funded.subdomains.deactivate("bob", hello, "www")


def test_list_and_get_unknown_parent(funded):
    with pytest.raises(NotFound):
        funded.subdomains.list(7)
    with pytest.raises(NotFound):
        funded.subdomains.get(7, "www")
