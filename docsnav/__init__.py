"""Build, validate and export documentation site navigation.

This package exposes the CLI entry points used by ``uv run docsnav`` to check
versioned navigation trees and write the site generator's config modules, plus
the builder functions for programmatic use.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``build``, ``build_sidebar``, ``build_nav``, ``merge_locale``, ``validate``:
  the navigation tree builder API.

Examples
--------
>>> from docsnav import build_nav
>>> build_nav([{"text": "GitHub", "link": "https://github.com/x"}])[0].external
True
"""

from __future__ import annotations

from .cli import app, main
from .navigation import build, build_nav, build_sidebar, merge_locale, validate

__all__ = ["app", "build", "build_nav", "build_sidebar", "main", "merge_locale", "validate"]
