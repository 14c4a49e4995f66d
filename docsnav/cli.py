"""Cyclopts CLI entrypoint for validating and exporting docs navigation.

The ``docsnav`` console script defined here loads the ``site.yaml`` catalogue,
checks every documentation version's navigation tree, and writes the site
generator's ``.vuepress/config.js`` for each version. Typical usage involves
running ``docsnav check`` in CI so broken sidebars fail the pipeline, and
``docsnav build`` before invoking the site generator.

Examples
--------
Check every version, resolving routes against the markdown tree:

>>> from docsnav.cli import app
>>> app(["check", "--content-dir", "docs"])  # doctest: +SKIP

Export a single version into a custom directory:

>>> app(["build", "--version", "v2", "--output-dir", "dist"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import BuildError, SiteCatalog, SiteConfig, load_site_catalog
from .content import collect_content_routes
from .exporter import ConfigExporter
from .navigation import ValidationPolicy, ensure_valid, validate

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(name="docsnav", config=cyclopts.config.Env("DOCSNAV_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _select_versions(
    catalog: SiteCatalog, version: str | None
) -> list[tuple[str, SiteConfig]]:
    """Return the requested version, or every version when none is named."""
    if version:
        return [(version, catalog.get_version(version))]
    return list(catalog.versions.items())


def _policy_for(
    version: str, content_dir: Path | None, *, allow_untitled: bool
) -> ValidationPolicy:
    """Build the validation policy for ``version``.

    ``content_dir`` may hold one subdirectory per version (``docs/v2``); when
    no such subdirectory exists the directory itself is used.
    """
    content_routes = None
    if content_dir is not None:
        version_dir = content_dir / version
        root = version_dir if version_dir.is_dir() else content_dir
        content_routes = collect_content_routes(root)
    return ValidationPolicy(
        require_group_titles=not allow_untitled, content_routes=content_routes
    )


@app.command(help="Validate navigation for every version and report all problems.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site catalogue", env_var="DOCSNAV_CONFIG")
    ] = DEFAULT_CONFIG,
    version: typ.Annotated[
        str | None, Parameter(help="Only check this version")
    ] = None,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Markdown root used to check that routes exist"),
    ] = None,
    allow_untitled: typ.Annotated[
        bool, Parameter(help="Accept untitled multi-child groups")
    ] = False,
) -> None:
    """Validate the navigation of one or all catalogue versions.

    Parameters
    ----------
    config : Path, optional
        Path to the ``site.yaml`` catalogue (overridable via
        ``DOCSNAV_CONFIG``).
    version : str or None, optional
        Version identifier to check; when ``None`` (default) every version
        is checked.
    content_dir : Path or None, optional
        Markdown content root. When given, every route must match a document.
    allow_untitled : bool, optional
        Skip the title requirement for non-collapsable multi-child groups.

    Raises
    ------
    SystemExit
        With status 1 when any problem is found; problems are printed to
        stderr as ``<version>: <kind> at <location>: <message>``.
    """
    catalog = load_site_catalog(config)
    problems = 0
    for key, site in _select_versions(catalog, version):
        policy = _policy_for(key, content_dir, allow_untitled=allow_untitled)
        errors = validate(site, policy=policy)
        for error in errors:
            print(f"{key}: {error}", file=sys.stderr)
        if not errors:
            routes = len(set(site.iter_routes()))
            print(f"ok {key}: {routes} routes")
        problems += len(errors)
    if problems:
        raise SystemExit(1)


@app.command(help="Write the generator config module for each version.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site catalogue", env_var="DOCSNAV_CONFIG")
    ] = DEFAULT_CONFIG,
    version: typ.Annotated[
        str | None, Parameter(help="Only build this version")
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="DOCSNAV_OUTPUT_DIR"),
    ] = None,
    content_dir: typ.Annotated[
        Path | None,
        Parameter(help="Markdown root used to check that routes exist"),
    ] = None,
    allow_untitled: typ.Annotated[
        bool, Parameter(help="Accept untitled multi-child groups")
    ] = False,
) -> None:
    """Validate and export ``.vuepress/config.js`` for the selected versions.

    Every selected version is validated before anything is written, so a
    broken version never leaves a partially updated output tree behind.

    Raises
    ------
    SystemExit
        With status 1 when validation fails; the problems are printed to
        stderr.
    """
    catalog = load_site_catalog(config)
    selected = _select_versions(catalog, version)
    failed = False
    for key, site in selected:
        policy = _policy_for(key, content_dir, allow_untitled=allow_untitled)
        try:
            ensure_valid(site, policy=policy)
        except BuildError as exc:
            failed = True
            for error in exc.errors:
                print(f"{key}: {error}", file=sys.stderr)
    if failed:
        raise SystemExit(1)

    target = output_dir or catalog.output_dir
    for _key, site in selected:
        path = ConfigExporter(site, target).run()
        print(f"wrote {_format_path(path)}")


@app.command(help="Print the generator config object for one version as JSON.")
def show(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site catalogue", env_var="DOCSNAV_CONFIG")
    ] = DEFAULT_CONFIG,
    version: typ.Annotated[
        str | None, Parameter(help="Version to show (defaults to the default version)")
    ] = None,
) -> None:
    """Print the config object of ``version`` without validating it."""
    catalog = load_site_catalog(config)
    site = catalog.get_version(version)
    print(json.dumps(site.to_dict(), indent=2, ensure_ascii=False))


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docsnav`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
