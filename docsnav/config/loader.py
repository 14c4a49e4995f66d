"""Load the site catalogue YAML into typed, per-version site configurations."""

from __future__ import annotations

import typing as typ
from pathlib import Path
from types import MappingProxyType

from ruamel.yaml import YAML

from .helpers import (
    _merge_theme,
    _optional_str,
    _reject_unknown_keys,
    _require_mapping,
)
from .models import SiteCatalog, SiteConfig, SiteConfigError, ThemeConfig

if typ.TYPE_CHECKING:
    from ..versions import SiteVersion

DEFAULT_LANG = "en-US"
DEFAULT_OUTPUT_DIR = "dist"
CATALOG_KEYS = frozenset({"defaults", "template", "versions"})
DEFAULTS_KEYS = frozenset({"title", "lang", "output_dir", "default_version", "theme"})
TEMPLATE_KEYS = frozenset({"sidebar", "nav"})
VERSION_KEYS = frozenset(
    {"base", "title", "locale_title", "sidebar", "nav", "theme", "locales"}
)


def load_site_catalog(path: Path) -> SiteCatalog:
    """Load the YAML catalogue describing every documentation version.

    Parameters
    ----------
    path : Path
        Filesystem path to the catalogue (for example ``config/site.yaml``).

    Returns
    -------
    SiteCatalog
        One unvalidated :class:`SiteConfig` per declared version, the default
        version and the export output directory. Run
        :func:`docsnav.navigation.validate` or
        :func:`docsnav.navigation.ensure_valid` before publishing.

    Raises
    ------
    FileNotFoundError
        If the catalogue does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If required sections are missing, no versions are declared, a key is
        unknown, or the default version is not one of the declared versions.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docsnav.config import load_site_catalog
    >>> catalog = load_site_catalog(Path("config/site.yaml"))  # doctest: +SKIP
    >>> catalog.get_version("v2").base  # doctest: +SKIP
    '/v2/'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    _reject_unknown_keys(raw, CATALOG_KEYS, "site catalogue")

    defaults = _require_mapping(raw.get("defaults"), "defaults")
    _reject_unknown_keys(defaults, DEFAULTS_KEYS, "defaults")
    template_raw = _require_mapping(raw.get("template"), "template")
    _reject_unknown_keys(template_raw, TEMPLATE_KEYS, "template")
    versions_raw = _require_mapping(raw.get("versions"), "versions")
    if not versions_raw:
        msg = "No versions defined in site catalogue."
        raise SiteConfigError(msg)

    title = _optional_str(defaults.get("title"))
    if title is None:
        msg = "defaults.title is required."
        raise SiteConfigError(msg)

    # versions imports navigation, which imports this package.
    from ..versions import SiteTemplate

    template = SiteTemplate(
        title=title,
        lang=_optional_str(defaults.get("lang")) or DEFAULT_LANG,
        sidebar=template_raw.get("sidebar") or {},
        nav=template_raw.get("nav") or (),
        theme=_merge_theme(
            ThemeConfig(), _require_mapping(defaults.get("theme"), "defaults.theme")
        ),
    )

    versions: dict[str, SiteConfig] = {}
    for key, payload in versions_raw.items():
        version = str(key)
        match payload:
            case dict():
                versions[version] = template.instantiate(
                    _build_site_version(version, payload)
                )
            case None:
                versions[version] = template.instantiate(
                    _build_site_version(version, {})
                )
            case _:
                msg = f"Version '{version}' must be a mapping."
                raise SiteConfigError(msg)

    default_version = _optional_str(defaults.get("default_version"))
    if default_version is not None and default_version not in versions:
        available = ", ".join(sorted(versions))
        msg = (
            f"Default version '{default_version}' is not declared. "
            f"Known versions: {available}"
        )
        raise SiteConfigError(msg)

    return SiteCatalog(
        versions=MappingProxyType(versions),
        default_version=default_version,
        output_dir=Path(defaults.get("output_dir") or DEFAULT_OUTPUT_DIR),
    )


def _build_site_version(
    version: str, payload: typ.Mapping[str, typ.Any]
) -> SiteVersion:
    """Build the per-version overrides, defaulting the base path to ``/<version>/``."""
    from ..versions import SiteVersion

    _reject_unknown_keys(payload, VERSION_KEYS, f"version '{version}'")
    locales = _require_mapping(payload.get("locales"), f"versions.{version}.locales")
    return SiteVersion(
        version=version,
        base_path=_optional_str(payload.get("base")) or f"/{version}/",
        locale_title=_optional_str(payload.get("locale_title")),
        title=_optional_str(payload.get("title")),
        sidebar=payload.get("sidebar"),
        nav=payload.get("nav"),
        theme=_require_mapping(payload.get("theme"), f"versions.{version}.theme"),
        locales={
            str(code): _require_mapping(raw, f"versions.{version}.locales['{code}']")
            for code, raw in locales.items()
        },
    )
