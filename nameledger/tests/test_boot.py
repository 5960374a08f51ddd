from __future__ import annotations

import io
import json
import logging

import pytest

from nameledger import logging as ledger_logging
from nameledger.boot import build_registry
from nameledger.config import load_config
from nameledger.errors import InvalidInput, NameTaken, error_to_response_fields


def test_events_path_adds_jsonl_sink(tmp_path, clock):
    cfg = load_config({}, overrides={"events_path": tmp_path / "ev.jsonl"})
    reg = build_registry(cfg, clock=clock)
    reg.deposit("alice", 10_000_000)
    reg.registrar.register("alice", "hello", "com", 1, "", 2_000_000)
    reg.close()
    lines = (tmp_path / "ev.jsonl").read_text().splitlines()
    assert [json.loads(line)["name"] for line in lines] == ["Registered"]


@pytest.mark.parametrize("amount", [0, -1, True, 1.5])
def test_deposit_requires_positive_integer(reg, amount):
    with pytest.raises(InvalidInput):
        reg.deposit("alice", amount)
    assert reg.balance_of("alice") == 0


def test_error_payload_shape():
    err = NameTaken(name="hello", tld="com")
    assert error_to_response_fields(err) == {
        "status": "REJECTED",
        "error": {"code": "NameTaken", "message": "name is already registered", "data": {"name": "hello", "tld": "com"}},
    }
    assert str(err).startswith("NameTaken: ")


def test_json_log_lines_carry_bound_context():
    buf = io.StringIO()
    ledger_logging.configure(json=True, level="INFO", stream=buf)
    try:
        with ledger_logging.trace_scope("t-1"):
            logging.getLogger("nameledger.services.registrar").info("registered", extra={"record_id": 3})
    finally:
        ledger_logging.configure(json=False, level="WARNING")
    rec = json.loads(buf.getvalue().splitlines()[-1])
    assert rec["msg"] == "registered"
    assert rec["trace_id"] == "t-1"
    assert rec["record_id"] == 3
