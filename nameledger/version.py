"""
nameledger.version — package version and a best-effort VCS describe string.

Kept dependency-free so the CLI, the RPC health endpoint and log lines can
import it early.
"""

from __future__ import annotations

import os
import subprocess
from functools import lru_cache
from typing import Dict

__version__ = "0.3.0"


@lru_cache(maxsize=1)
def git_describe() -> str:
    """
    Resolution order: NAMELEDGER_GIT_DESCRIBE, `git describe`, then
    `<version>+local`.
    """
    override = os.getenv("NAMELEDGER_GIT_DESCRIBE")
    if override:
        return override.strip()
    try:
        out = subprocess.check_output(
            ["git", "describe", "--tags", "--dirty", "--always"],
            stderr=subprocess.DEVNULL,
        )
        desc = out.decode("utf-8", "replace").strip()
        if desc:
            return desc
    except (OSError, subprocess.CalledProcessError):
        pass
    return f"{__version__}+local"


def version_metadata() -> Dict[str, str]:
    """Version info for the RPC health endpoint and `nameledger --version`."""
    return {"version": __version__, "describe": git_describe()}


__all__ = ["__version__", "git_describe", "version_metadata"]
