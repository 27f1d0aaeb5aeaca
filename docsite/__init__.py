"""Validate and compile MkDocs-style documentation site configurations.

This package exposes the CLI entry points used by the ``docsite`` console
script to check a ``mkdocs.yml`` against its docs tree and to emit redirect
stubs, ``llms.txt`` and configuration dumps.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docsite import main
>>> main()  # doctest: +SKIP
>>> from docsite import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
