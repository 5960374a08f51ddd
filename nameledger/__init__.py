"""
nameledger — a deterministic naming registry ledger.

Names qualified by a top-level domain map to owned, time-bounded records with
tiered pricing and hierarchical sub-records. This package exposes only
lightweight metadata at import time; import the services from their
subpackages (or build a wired instance via `nameledger.boot`).
"""

from .version import __version__, git_describe

__all__ = ["__version__", "git_describe"]
