from __future__ import annotations

from pathlib import Path

import pytest

from nameledger.config import DEFAULT_STATE_PATH, load_config, parse_tld_spec


def test_defaults_from_empty_env():
    cfg = load_config({})
    assert cfg.admin == "admin"
    assert cfg.pricing.base_fee == 10_000
    assert cfg.pricing.tlds == {"com": 200}
    assert cfg.events_path is None
    assert cfg.state_path == DEFAULT_STATE_PATH
    assert cfg.enable_faucet is False


def test_env_values(tmp_path):
    cfg = load_config(
        {
            "NAMELEDGER_ADMIN": "root",
            "NAMELEDGER_BASE_FEE": "500",
            "NAMELEDGER_TLDS": "com:200, net:150",
            "NAMELEDGER_EVENTS_PATH": str(tmp_path / "ev.jsonl"),
            "NAMELEDGER_STATE_PATH": str(tmp_path / "st.json"),
            "NAMELEDGER_ENABLE_FAUCET": "yes",
        }
    )
    assert cfg.admin == "root"
    assert cfg.pricing.base_fee == 500
    assert cfg.pricing.tlds == {"com": 200, "net": 150}
    assert cfg.events_path == tmp_path / "ev.jsonl"
    assert cfg.state_path == tmp_path / "st.json"
    assert cfg.enable_faucet is True


def test_overrides_win_over_env():
    cfg = load_config({"NAMELEDGER_ADMIN": "root"}, overrides={"admin": "ops", "state_path": "x.json"})
    assert cfg.admin == "ops"
    assert cfg.state_path == Path("x.json")
    assert cfg.to_dict()["state_path"] == "x.json"


@pytest.mark.parametrize(
    "spec, expected",
    [
        ('{"io": 3}', {"io": 3}),
        ({"dev": "7"}, {"dev": 7}),
        ("", {}),
        (None, {"com": 200}),
    ],
)
def test_parse_tld_spec(spec, expected):
    assert parse_tld_spec(spec) == expected


@pytest.mark.parametrize("spec", ["com", "com:0", "com:-1", ":5", "[1, 2]"])
def test_parse_tld_spec_rejects(spec):
    with pytest.raises(ValueError):
        parse_tld_spec(spec)


def test_invalid_admin_or_fee_rejected():
    with pytest.raises(ValueError):
        load_config({"NAMELEDGER_ADMIN": "  "})
    with pytest.raises(ValueError):
        load_config({"NAMELEDGER_BASE_FEE": "-1"})
