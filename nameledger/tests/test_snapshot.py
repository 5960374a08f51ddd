from __future__ import annotations

import json

from nameledger.boot import build_registry
from nameledger.state.snapshot import load_snapshot, save_snapshot
from nameledger.state.store import STATE_FORMAT_VERSION

from .conftest import FEE_5CHAR_1Y


def test_snapshot_restores_full_ledger(tmp_path, funded, hello, cfg, clock):
    funded.subdomains.create("alice", hello, "www", "w")
    funded.subdomains.create("alice", hello, "api")
    funded.subdomains.deactivate("alice", hello, "www")
    funded.admin.add_tld("admin", "org", 90)

    path = save_snapshot(funded.store, tmp_path / "state.json")
    assert json.loads(path.read_text())["version"] == STATE_FORMAT_VERSION

    restored = build_registry(cfg, clock=clock, snapshot=path)
    assert restored.store.export_state() == funded.store.export_state()
    assert restored.registrar.resolve("hello", "com") == "ipfs://hello"
    assert [s.full_name for s in restored.subdomains.list(hello)] == ["www.hello.com", "api.hello.com"]
    assert restored.admin.collected_balance() == FEE_5CHAR_1Y
    restored.close()


def test_restored_ledger_continues_counters(tmp_path, funded, hello, cfg, clock):
    path = funded.save(tmp_path / "state.json")
    restored = build_registry(cfg, clock=clock, snapshot=path)
    assert restored.registrar.register("bob", "world", "com", 1, "", FEE_5CHAR_1Y) == hello + 1
    (n,) = restored.history.get_logs()
    assert n.seq == 2
    restored.close()


def test_save_is_atomic_rewrite(tmp_path, funded):
    path = tmp_path / "nested" / "state.json"
    save_snapshot(funded.store, path)
    save_snapshot(funded.store, path)
    assert sorted(p.name for p in path.parent.iterdir()) == ["state.json"]
    assert load_snapshot(path).export_state() == funded.store.export_state()
