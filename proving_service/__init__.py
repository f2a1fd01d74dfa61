"""
Proving Service
===============

FastAPI service around an external ECDSA-P256 proving backend, plus the
verifier assembly → Solidity transpiler.

This package exposes:

- ``__version__``: semantic version string
- ``build_app()``: convenience creator for a configured FastAPI app

The transpiler has no web dependencies and can be used on its own:
``from proving_service.transpiler import transpile``.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__", "build_app"]


def build_app():
    """
    Create and return a fully configured FastAPI application.

    Importing lazily avoids importing FastAPI when consumers only need the
    transpiler or version metadata.
    """
    from .app import create_app

    return create_app()
