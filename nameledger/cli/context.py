"""
nameledger.cli.context — state shared by every CLI command.

The root callback fills `ctx` from global options; commands then open the
ledger through `open_ledger`, which loads the snapshot file, runs the command
body and (for mutating commands) writes the snapshot back. A `LedgerError`
raised by the body is printed as `code: message` on stderr and the process
exits with status 1; the snapshot is not rewritten in that case.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterator, NoReturn, Optional

import typer

from nameledger.boot import Registry, build_registry
from nameledger.clock import Clock, ManualClock, SystemClock
from nameledger.config import RegistryConfig, load_config
from nameledger.errors import LedgerError, error_to_response_fields


class GlobalContext:
    def __init__(self) -> None:
        self.state_path: Optional[Path] = None
        self.caller: Optional[str] = None
        self.json_output: bool = False
        self.now: Optional[int] = None


ctx = GlobalContext()


def fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(1)


def default_events_path(state_path: Path) -> Path:
    """Notification log kept next to the state file: `<state>.events.jsonl`."""
    return state_path.with_name(state_path.name + ".events.jsonl")


def ledger_config() -> RegistryConfig:
    overrides = {"state_path": ctx.state_path} if ctx.state_path is not None else None
    try:
        cfg = load_config(overrides=overrides)
    except ValueError as e:
        fail(f"config error: {e}")
    if cfg.events_path is None:
        cfg = replace(cfg, events_path=default_events_path(cfg.state_path))
    return cfg


def clock() -> Clock:
    return ManualClock(ctx.now) if ctx.now is not None else SystemClock()


def require_caller() -> str:
    if not ctx.caller:
        fail("this command needs an identity: pass --caller or set NAMELEDGER_CALLER")
    return ctx.caller


@contextmanager
def open_ledger(*, write: bool = False) -> Iterator[Registry]:
    cfg = ledger_config()
    if not cfg.state_path.exists():
        fail(f"state file not found: {cfg.state_path} (run `nameledger init` first)")
    try:
        reg = build_registry(cfg, clock=clock(), snapshot=cfg.state_path)
    except (OSError, ValueError, KeyError) as e:
        fail(f"cannot load state from {cfg.state_path}: {e}")
    try:
        yield reg
        if write:
            reg.save()
    except LedgerError as e:
        if ctx.json_output:
            typer.echo(json.dumps(error_to_response_fields(e), sort_keys=True, default=str))
            raise typer.Exit(1)
        fail(f"{e.code}: {e.message}")
    finally:
        reg.close()


def output(result: Any, text: Optional[str] = None) -> None:
    """Print `result` as JSON under --json, else `text` (or the result itself)."""
    if ctx.json_output:
        typer.echo(json.dumps(result, indent=2, sort_keys=True, ensure_ascii=False))
    else:
        typer.echo(text if text is not None else str(result))


__all__ = [
    "GlobalContext",
    "clock",
    "ctx",
    "default_events_path",
    "fail",
    "ledger_config",
    "open_ledger",
    "output",
    "require_caller",
]
