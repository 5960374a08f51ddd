"""
nameledger.config — runtime configuration for the registry ledger.

This module centralizes the knobs a ledger is initialized with:
  • Administrator identity (the only holder of the admin capability)
  • Pricing: base fee and the initial TLD catalog
  • Optional outputs: JSONL notification log, CLI state snapshot path
  • Dev conveniences: the treasury faucet used by the RPC/CLI

Configuration may be provided via environment variables. Safe defaults are
chosen so a local developer run works out of the box.

Environment variables (all optional):
  NAMELEDGER_ADMIN            -> administrator identity (default: "admin")
  NAMELEDGER_BASE_FEE         -> integer base fee in smallest units (default: 10000)
  NAMELEDGER_TLDS             -> "com:200,net:150" or JSON {"com": 200} (default: com:200)
  NAMELEDGER_EVENTS_PATH      -> JSONL file receiving committed notifications
  NAMELEDGER_STATE_PATH       -> JSON snapshot used by the CLI (default: ./nameledger-state.json)
  NAMELEDGER_ENABLE_FAUCET    -> 0/1/true/false (default: 0)

Programmatic usage:
    from nameledger.config import get_config
    cfg = get_config()
    if cfg.enable_faucet:
        ...

The fixed name-length pricing table is not configurable; see
`nameledger.pricing.LENGTH_MULTIPLIERS`.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

# ----------------------------- helpers -------------------------------------


_BOOL_TRUE = {"1", "true", "t", "yes", "y", "on"}
_BOOL_FALSE = {"0", "false", "f", "no", "n", "off"}

DEFAULT_ADMIN = "admin"
DEFAULT_BASE_FEE = 10_000
DEFAULT_TLDS: Dict[str, int] = {"com": 200}
DEFAULT_STATE_PATH = Path("nameledger-state.json")


def _bool_env(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _BOOL_TRUE:
        return True
    if v in _BOOL_FALSE:
        return False
    return bool(v) if v != "" else default


def parse_tld_spec(spec: Union[str, Mapping[str, int], None]) -> Dict[str, int]:
    """
    Parse a TLD catalog description into {tld: multiplier}.

    Accepts a mapping, a JSON object string, or "com:200,net:150". Multipliers
    must be positive integers.
    """
    if spec is None:
        return dict(DEFAULT_TLDS)
    if isinstance(spec, Mapping):
        items = dict(spec)
    else:
        s = spec.strip()
        if not s:
            return {}
        if s.startswith("{"):
            items = json.loads(s)
            if not isinstance(items, dict):
                raise ValueError(f"invalid TLD spec: {spec!r}")
        else:
            items = {}
            for part in s.split(","):
                part = part.strip()
                if not part:
                    continue
                tld, sep, mult = part.partition(":")
                if not sep or not tld.strip():
                    raise ValueError(f"invalid TLD entry: {part!r}")
                items[tld.strip()] = mult.strip()

    out: Dict[str, int] = {}
    for tld, mult in items.items():
        m = int(mult)
        if m <= 0:
            raise ValueError(f"TLD multiplier must be > 0: {tld}={mult}")
        out[str(tld)] = m
    return out


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class PricingConfig:
    base_fee: int = DEFAULT_BASE_FEE
    tlds: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_TLDS))


@dataclass(frozen=True)
class RegistryConfig:
    admin: str = DEFAULT_ADMIN
    pricing: PricingConfig = field(default_factory=PricingConfig)
    events_path: Optional[Path] = None
    state_path: Path = DEFAULT_STATE_PATH
    enable_faucet: bool = False

    def to_dict(self) -> Dict[str, object]:
        d = asdict(self)
        d["events_path"] = str(self.events_path) if self.events_path else None
        d["state_path"] = str(self.state_path)
        return d


# ------------------------------ loader --------------------------------------


def _validate(cfg: RegistryConfig) -> RegistryConfig:
    if not cfg.admin:
        raise ValueError("admin identity must be non-empty")
    if cfg.pricing.base_fee < 0:
        raise ValueError("base_fee must be ≥ 0")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, object]] = None,
) -> RegistryConfig:
    """
    Build a RegistryConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides; keys support:
          'admin', 'base_fee', 'tlds', 'events_path', 'state_path', 'enable_faucet'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    admin = str(overrides.get("admin", env.get("NAMELEDGER_ADMIN", DEFAULT_ADMIN))).strip()
    base_fee = int(overrides.get("base_fee", env.get("NAMELEDGER_BASE_FEE", DEFAULT_BASE_FEE)))
    tlds = parse_tld_spec(overrides.get("tlds", env.get("NAMELEDGER_TLDS")))  # type: ignore[arg-type]

    events_raw = overrides.get("events_path", env.get("NAMELEDGER_EVENTS_PATH"))
    events_path = Path(str(events_raw)).expanduser() if events_raw else None
    state_path = Path(
        str(overrides.get("state_path", env.get("NAMELEDGER_STATE_PATH", DEFAULT_STATE_PATH)))
    ).expanduser()

    if "enable_faucet" in overrides:
        enable_faucet = bool(overrides["enable_faucet"])
    else:
        enable_faucet = _bool_env(env.get("NAMELEDGER_ENABLE_FAUCET"), False)

    return _validate(
        RegistryConfig(
            admin=admin,
            pricing=PricingConfig(base_fee=base_fee, tlds=tlds),
            events_path=events_path,
            state_path=state_path,
            enable_faucet=enable_faucet,
        )
    )


@lru_cache(maxsize=1)
def get_config() -> RegistryConfig:
    """
    Cached global config. Suitable for application bootstraps.
    """
    return load_config()


__all__ = [
    "DEFAULT_ADMIN",
    "DEFAULT_BASE_FEE",
    "DEFAULT_TLDS",
    "PricingConfig",
    "RegistryConfig",
    "get_config",
    "load_config",
    "parse_tld_spec",
]
