"""
nameledger.cli.sub — sub-record subcommands.

Implements:
  - nameledger sub create PARENT_ID SUB_NAME [--metadata]
  - nameledger sub list PARENT_ID
  - nameledger sub show PARENT_ID SUB_NAME
  - nameledger sub deactivate PARENT_ID SUB_NAME
"""

from __future__ import annotations

import typer

from .context import open_ledger, output, require_caller

app = typer.Typer(help="Sub-records under a record you own")


def _sub_text(s: dict) -> str:
    return f"{s['full_name']}  {'active' if s['active'] else 'inactive'}  {s['metadata']}".rstrip()


@app.command()
def create(
    parent_id: int = typer.Argument(..., help="Parent record id"),
    sub_name: str = typer.Argument(..., help="Label prepended to the parent name"),
    metadata: str = typer.Option("", "--metadata", "-m", help="Opaque metadata"),
) -> None:
    """Create SUB_NAME under the parent record (caller must own it)."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        full_name = reg.subdomains.create(caller, parent_id, sub_name, metadata)
    output({"parent_record_id": parent_id, "full_name": full_name}, f"Created {full_name}")


@app.command("list")
def list_(parent_id: int = typer.Argument(..., help="Parent record id")) -> None:
    """List sub-records of a parent in creation order."""
    with open_ledger() as reg:
        subs = [s.to_dict() for s in reg.subdomains.list(parent_id)]
    output(subs, "\n".join(_sub_text(s) for s in subs) or "no sub-records")


@app.command()
def show(
    parent_id: int = typer.Argument(..., help="Parent record id"),
    sub_name: str = typer.Argument(..., help="Sub-record label"),
) -> None:
    """Show one sub-record."""
    with open_ledger() as reg:
        s = reg.subdomains.get(parent_id, sub_name).to_dict()
    output(s, _sub_text(s))


@app.command()
def deactivate(
    parent_id: int = typer.Argument(..., help="Parent record id"),
    sub_name: str = typer.Argument(..., help="Sub-record label"),
) -> None:
    """Deactivate a sub-record (caller must own the parent)."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        reg.subdomains.deactivate(caller, parent_id, sub_name)
    output({"parent_record_id": parent_id, "sub_name": sub_name, "active": False}, f"Deactivated {sub_name}")
