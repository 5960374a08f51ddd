"""
nameledger — command-line interface for a file-backed naming ledger.

Every command loads the ledger from a JSON snapshot (`--state`, default
./nameledger-state.json), applies one operation and, if it changed anything,
writes the snapshot back. Committed notifications are appended to
`<state>.events.jsonl` unless NAMELEDGER_EVENTS_PATH says otherwise.

Global options:
  --state PATH      Ledger snapshot file                [NAMELEDGER_STATE_PATH]
  --caller TEXT     Identity performing the operation   [NAMELEDGER_CALLER]
  --json            Output JSON instead of human-readable text
  --now INTEGER     Pin the clock to this Unix timestamp
  --log-level TEXT  Log level for ledger logs on stderr [NAMELEDGER_LOG_LEVEL]

Examples:
  nameledger init
  nameledger --caller alice deposit 10000000
  nameledger fee hello com --years 2
  nameledger --caller alice register hello com --metadata ipfs://Qm...
  nameledger --caller alice sub create 1 www
  nameledger --caller admin admin add-tld net 150
  nameledger serve --port 8645
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nameledger import logging as ledger_logging
from nameledger.boot import new_store
from nameledger.state.events import JsonlEventSink
from nameledger.state.snapshot import save_snapshot
from nameledger.version import version_metadata

from . import admin, sub
from .context import ctx, fail, ledger_config, open_ledger, output, require_caller

app = typer.Typer(
    name="nameledger",
    help="Naming-registry ledger: register, renew and transfer names under managed TLDs",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        meta = version_metadata()
        typer.echo(f"nameledger {meta['version']} ({meta['describe']})")
        raise typer.Exit()


@app.callback()
def main_callback(
    state: Optional[Path] = typer.Option(
        None,
        "--state",
        help="Ledger snapshot file",
        envvar="NAMELEDGER_STATE_PATH",
    ),
    caller: Optional[str] = typer.Option(
        None,
        "--caller",
        help="Identity performing the operation",
        envvar="NAMELEDGER_CALLER",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output JSON instead of human-readable text",
    ),
    now: Optional[int] = typer.Option(
        None,
        "--now",
        help="Pin the clock to this Unix timestamp",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Log level for ledger logs on stderr",
        envvar="NAMELEDGER_LOG_LEVEL",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    nameledger CLI — operate a naming ledger kept in a local snapshot file.
    """
    ctx.state_path = state
    ctx.caller = caller
    ctx.json_output = json_output
    ctx.now = now
    ledger_logging.configure(level=log_level)


app.add_typer(sub.app, name="sub")
app.add_typer(admin.app, name="admin")


def _record_text(rec: dict) -> str:
    status = "active" if rec["active"] else "inactive"
    lines = [
        f"Record:    #{rec['record_id']} {rec['name']}.{rec['tld']} ({status})",
        f"Owner:     {rec['owner']}",
        f"Expires:   {rec['expires_at']}",
    ]
    if rec["metadata"]:
        lines.append(f"Metadata:  {rec['metadata']}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing state file"),
) -> None:
    """Create a fresh ledger from configuration (NAMELEDGER_ADMIN, _BASE_FEE, _TLDS)."""
    cfg = ledger_config()
    if cfg.state_path.exists() and not force:
        fail(f"state file already exists: {cfg.state_path} (use --force to overwrite)")
    path = save_snapshot(new_store(cfg), cfg.state_path)
    output(
        {"state": str(path), "admin": cfg.admin, "base_fee": cfg.pricing.base_fee, "tlds": cfg.pricing.tlds},
        f"Initialized ledger at {path} (admin: {cfg.admin})",
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


@app.command()
def fee(
    name: str = typer.Argument(..., help="Name label"),
    tld: str = typer.Argument(..., help="Top-level domain"),
    years: int = typer.Option(1, "--years", "-y", help="Term in years (1-10)"),
) -> None:
    """Quote the fee for registering or renewing NAME.TLD."""
    with open_ledger() as reg:
        amount = reg.registrar.quote(name, tld, years)
    output({"name": name, "tld": tld, "years": years, "fee": amount}, str(amount))


@app.command()
def available(
    name: str = typer.Argument(..., help="Name label"),
    tld: str = typer.Argument(..., help="Top-level domain"),
) -> None:
    """Report whether NAME.TLD can be registered."""
    with open_ledger() as reg:
        free = reg.registrar.is_available(name, tld)
    output({"name": name, "tld": tld, "available": free}, "available" if free else "taken")


@app.command()
def resolve(
    name: str = typer.Argument(..., help="Name label"),
    tld: str = typer.Argument(..., help="Top-level domain"),
) -> None:
    """Print the metadata stored for NAME.TLD."""
    with open_ledger() as reg:
        metadata = reg.registrar.resolve(name, tld)
    output({"name": name, "tld": tld, "metadata": metadata}, metadata)


@app.command()
def record(record_id: int = typer.Argument(..., help="Record id")) -> None:
    """Show one record."""
    with open_ledger() as reg:
        rec = reg.registrar.get_record(record_id).to_dict()
    output(rec, _record_text(rec))


@app.command()
def records(
    owner: Optional[str] = typer.Argument(None, help="Owner identity (default: --caller)"),
) -> None:
    """List record ids owned by OWNER."""
    who = owner or require_caller()
    with open_ledger() as reg:
        ids = reg.registrar.records_of(who)
    output(ids, "\n".join(str(i) for i in ids) if ids else f"no records owned by {who}")


@app.command()
def balance(
    identity: Optional[str] = typer.Argument(None, help="Account identity (default: --caller)"),
) -> None:
    """Show an account balance."""
    who = identity or require_caller()
    with open_ledger() as reg:
        amount = reg.balance_of(who)
    output({"identity": who, "balance": amount}, str(amount))


@app.command()
def events(
    name: Optional[str] = typer.Option(None, "--name", help="Only notifications with this name"),
    from_seq: Optional[int] = typer.Option(None, "--from-seq", help="Start at this sequence number"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of notifications"),
) -> None:
    """List committed notifications from the JSONL log."""
    cfg = ledger_config()
    if cfg.events_path is None or not cfg.events_path.exists():
        output([], "no notifications")
        return
    sink = JsonlEventSink(cfg.events_path)
    try:
        logs = [n.to_dict() for n in sink.get_logs(name=name, from_seq=from_seq, limit=limit)]
    finally:
        sink.close()
    text = "\n".join(f"#{n['seq']} {n['name']} {n['args']}" for n in logs) or "no notifications"
    output(logs, text)


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


@app.command()
def deposit(
    amount: int = typer.Argument(..., help="Amount to credit"),
    to: Optional[str] = typer.Option(None, "--to", help="Account to credit (default: --caller)"),
) -> None:
    """Credit an account (dev faucet)."""
    who = to or require_caller()
    with open_ledger(write=True) as reg:
        new_balance = reg.deposit(who, amount)
    output({"identity": who, "balance": new_balance}, f"{who}: {new_balance}")


@app.command()
def register(
    name: str = typer.Argument(..., help="Name label"),
    tld: str = typer.Argument(..., help="Top-level domain"),
    years: int = typer.Option(1, "--years", "-y", help="Term in years (1-10)"),
    metadata: str = typer.Option("", "--metadata", "-m", help="Opaque metadata (e.g. a content URI)"),
    payment: Optional[int] = typer.Option(None, "--payment", help="Amount offered (default: the exact fee)"),
) -> None:
    """Register NAME.TLD to --caller."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        offered = payment if payment is not None else reg.registrar.quote(name, tld, years)
        rid = reg.registrar.register(caller, name, tld, years, metadata, offered)
        rec = reg.registrar.get_record(rid).to_dict()
    output(rec, f"Registered {name}.{tld} as record #{rid} (expires {rec['expires_at']})")


@app.command()
def renew(
    record_id: int = typer.Argument(..., help="Record id"),
    years: int = typer.Option(1, "--years", "-y", help="Term in years (1-10)"),
    payment: Optional[int] = typer.Option(None, "--payment", help="Amount offered (default: the exact fee)"),
) -> None:
    """Extend a record owned by --caller."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        if payment is None:
            rec = reg.registrar.get_record(record_id)
            payment = reg.registrar.quote(rec.name, rec.tld, years)
        expiry = reg.registrar.renew(caller, record_id, years, payment)
    output({"record_id": record_id, "expires_at": expiry}, f"Record #{record_id} now expires {expiry}")


@app.command()
def transfer(
    record_id: int = typer.Argument(..., help="Record id"),
    new_owner: str = typer.Argument(..., help="Identity receiving the record"),
) -> None:
    """Transfer a record owned by --caller to NEW_OWNER."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        reg.registrar.transfer(caller, record_id, new_owner)
    output({"record_id": record_id, "owner": new_owner}, f"Record #{record_id} transferred to {new_owner}")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address [NAMELEDGER_RPC_HOST]"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port [NAMELEDGER_RPC_PORT]"),
) -> None:
    """
    Serve the ledger over JSON-RPC, persisting to the state file after each
    committed change. Callers authenticate with the bearer tokens listed in
    NAMELEDGER_RPC_TOKENS (token:identity pairs).
    """
    from nameledger.rpc import config as rpc_config
    from nameledger.rpc.server import serve as run_server

    cfg = rpc_config.load_config()
    if host is not None:
        cfg.host = host
    if port is not None:
        cfg.port = port
    ledger_cfg = ledger_config()
    with open_ledger() as reg:
        run_server(cfg, reg, state_path=ledger_cfg.state_path)


def main() -> None:
    """Entry point for the nameledger CLI."""
    app()


if __name__ == "__main__":
    main()
