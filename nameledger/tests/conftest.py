from __future__ import annotations

import pytest

from nameledger.boot import Registry, build_registry
from nameledger.clock import ManualClock
from nameledger.config import RegistryConfig, load_config

START = 1_700_000_000

# base 10_000, .com x200, 5+ chars, 1 year
FEE_5CHAR_1Y = 2_000_000


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(start=START)


@pytest.fixture
def cfg() -> RegistryConfig:
    return load_config({}, overrides={"tlds": {"com": 200, "net": 150}})


@pytest.fixture
def reg(cfg: RegistryConfig, clock: ManualClock) -> Registry:
    r = build_registry(cfg, clock=clock)
    yield r
    r.close()


@pytest.fixture
def funded(reg: Registry) -> Registry:
    for who in ("alice", "bob"):
        reg.deposit(who, 100_000_000)
    return reg


@pytest.fixture
def hello(funded: Registry) -> int:
    """alice owns hello.com (record 1) for one year."""
    return funded.registrar.register("alice", "hello", "com", 1, "ipfs://hello", FEE_5CHAR_1Y)
