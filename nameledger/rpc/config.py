"""
nameledger RPC configuration.

Tunables for the HTTP JSON-RPC service:
- host/port
- CORS policy
- bearer tokens and the identities they act as
- logging level and format

Environment variables (examples):
  NAMELEDGER_RPC_HOST=0.0.0.0
  NAMELEDGER_RPC_PORT=8645
  NAMELEDGER_RPC_CORS=["http://localhost:5173"]   (JSON array or comma-separated)
  NAMELEDGER_RPC_TOKENS=s3cret:alice,0ther:admin   (token:identity pairs, or a JSON object)
  NAMELEDGER_LOG_LEVEL=INFO
  NAMELEDGER_LOG_FORMAT=json

Ledger settings (administrator, pricing, faucet) come from `nameledger.config`.
This module has no external deps (no dotenv). Use your process manager to inject env.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8645


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    v = env.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {v!r}") from None


def _env_list(env: Mapping[str, str], name: str, default: List[str]) -> List[str]:
    """
    Parse JSON array or comma-separated string into a list of strings.
    """
    v = env.get(name)
    if v is None or v.strip() == "":
        return list(default)
    s = v.strip()
    if s.startswith("["):
        try:
            parsed = json.loads(s)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    return [item.strip() for item in s.split(",") if item.strip()]


def _env_tokens(env: Mapping[str, str], name: str) -> Dict[str, str]:
    """
    Parse `token:identity` pairs (comma-separated) or a JSON object into a
    token -> identity map.
    """
    v = (env.get(name) or "").strip()
    if not v:
        return {}
    if v.startswith("{"):
        parsed = json.loads(v)
        if not isinstance(parsed, dict):
            raise ValueError(f"{name} must be a JSON object")
        return {str(k): str(ident) for k, ident in parsed.items()}
    out: Dict[str, str] = {}
    for item in _env_list(env, name, []):
        token, sep, identity = item.partition(":")
        if not sep or not token.strip() or not identity.strip():
            raise ValueError(f"{name}: expected token:identity, got {item!r}")
        out[token.strip()] = identity.strip()
    return out


@dataclass
class RpcConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_allow_origins: List[str] = field(default_factory=list)
    # bearer token -> acting identity
    api_tokens: Dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"
    log_json: Optional[bool] = None

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")


def load_config(env: Optional[Mapping[str, str]] = None) -> RpcConfig:
    env = os.environ if env is None else env
    fmt = env.get("NAMELEDGER_LOG_FORMAT", "").strip().lower()
    return RpcConfig(
        host=env.get("NAMELEDGER_RPC_HOST", DEFAULT_HOST),
        port=_env_int(env, "NAMELEDGER_RPC_PORT", DEFAULT_PORT),
        cors_allow_origins=_env_list(env, "NAMELEDGER_RPC_CORS", []),
        api_tokens=_env_tokens(env, "NAMELEDGER_RPC_TOKENS"),
        log_level=env.get("NAMELEDGER_LOG_LEVEL", "INFO").upper(),
        log_json={"json": True, "text": False}.get(fmt),
    )


__all__ = ["RpcConfig", "load_config", "DEFAULT_HOST", "DEFAULT_PORT"]
