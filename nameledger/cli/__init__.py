"""
nameledger.cli — typer command-line interface (`nameledger` console script).
"""

from .main import app, main

__all__ = ["app", "main"]
