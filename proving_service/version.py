"""
Version helpers for the proving service.

- ``__version__`` is the semantic version for packaging.
- ``build_version()`` appends the short commit (from ``git`` or CI env) as a
  PEP 440 local version when available.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional

# Bump this when making a release; use semver (MAJOR.MINOR.PATCH)
__version__ = "0.1.0"


def _commit_short() -> Optional[str]:
    root = Path(__file__).resolve().parent.parent
    try:
        out = subprocess.check_output(
            ["git", "-C", str(root), "rev-parse", "--short", "HEAD"],
            stderr=subprocess.DEVNULL,
            timeout=1.5,
        )
        return out.decode().strip() or None
    except (OSError, subprocess.SubprocessError):
        return os.getenv("GIT_COMMIT") or os.getenv("BUILD_SHA") or None


def build_version(base: str = __version__) -> str:
    """
    Examples
    --------
    - "0.1.0"            (no git available)
    - "0.1.0+gabc1234"   (commit attached)
    """
    commit = _commit_short()
    return f"{base}+g{commit}" if commit else base


__all__ = ["__version__", "build_version"]
