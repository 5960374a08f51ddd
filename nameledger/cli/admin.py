"""
nameledger.cli.admin — administrator subcommands.

All of these require --caller to be the ledger's administrator; anyone else
gets `Unauthorized: ...` and the state file is left as it was.
"""

from __future__ import annotations

import typer

from .context import open_ledger, output, require_caller

app = typer.Typer(help="Administrator operations (TLD catalog, pricing, fee withdrawal)")


@app.command("add-tld")
def add_tld(
    tld: str = typer.Argument(..., help="Top-level domain to add"),
    multiplier: int = typer.Argument(..., help="Fee multiplier (> 0)"),
) -> None:
    """Add a TLD to the catalog."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        entry = reg.admin.add_tld(caller, tld, multiplier)
    output(entry.to_dict(), f"Added .{entry.tld} (multiplier {entry.fee_multiplier})")


@app.command("set-base-fee")
def set_base_fee(fee: int = typer.Argument(..., help="New base fee (>= 0)")) -> None:
    """Replace the base fee used by the next fee computation."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        new_fee = reg.admin.update_base_fee(caller, fee)
    output({"base_fee": new_fee}, f"Base fee is now {new_fee}")


@app.command("set-multiplier")
def set_multiplier(
    tld: str = typer.Argument(..., help="Existing top-level domain"),
    multiplier: int = typer.Argument(..., help="New fee multiplier (> 0)"),
) -> None:
    """Change the fee multiplier of an existing TLD."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        entry = reg.admin.update_tld_multiplier(caller, tld, multiplier)
    output(entry.to_dict(), f".{entry.tld} multiplier is now {entry.fee_multiplier}")


@app.command()
def withdraw() -> None:
    """Move all collected fees to the administrator's account."""
    caller = require_caller()
    with open_ledger(write=True) as reg:
        amount = reg.admin.withdraw(caller)
    output({"withdrawn": amount}, f"Withdrew {amount}")


@app.command()
def status() -> None:
    """Show administrator, base fee, collected balance and the TLD catalog."""
    with open_ledger() as reg:
        info = {
            "admin": reg.admin.administrator,
            "base_fee": reg.admin.base_fee(),
            "collected": reg.admin.collected_balance(),
            "tlds": {e.tld: e.fee_multiplier for e in reg.admin.catalog.entries()},
        }
    tlds = ", ".join(f".{t}={m}" for t, m in info["tlds"].items())
    output(
        info,
        f"Admin:      {info['admin']}\nBase fee:   {info['base_fee']}\nCollected:  {info['collected']}\nTLDs:       {tlds}",
    )
