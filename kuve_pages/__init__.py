"""Configuration and presentation layer of the Kuve documentation site.

This package validates the sidebar trees and merges the scattered site
configuration into one descriptor for the static-site generator, and renders
the homepage feature section. It exposes the CLI entry points used by
``uv run pages``.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from kuve_pages import main
>>> main()  # doctest: +SKIP
>>> from kuve_pages import app
>>> app.name  # doctest: +SKIP
('pages',)
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
