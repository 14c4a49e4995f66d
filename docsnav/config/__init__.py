"""Navigation model and site catalogue loading for docsnav.

This subpackage defines the frozen dataclasses (:class:`SiteConfig`,
:class:`NavGroup`, :class:`NavLink`, ...) and the validation error taxonomy
shared by the builder and exporter, and parses the project's ``site.yaml``
catalogue into one :class:`SiteConfig` per documentation version. The primary
entry point is :func:`load_site_catalog`, which applies catalogue defaults
and the shared navigation template and returns a :class:`SiteCatalog`.

Examples
--------
>>> from pathlib import Path
>>> from docsnav.config import load_site_catalog
>>> catalog = load_site_catalog(Path("config/site.yaml"))  # doctest: +SKIP
>>> site = catalog.get_version("v2")  # doctest: +SKIP
>>> site.locales["/"].title  # doctest: +SKIP
'Vue Test Utils (2.0.0-beta.0)'
"""

from .loader import load_site_catalog
from .models import (
    BuildError,
    DuplicatePrefix,
    EmptyGroup,
    LocaleConfig,
    MalformedLink,
    MalformedLocale,
    MalformedRoute,
    MissingContent,
    NavEntry,
    NavGroup,
    NavLink,
    PrefixMismatch,
    Route,
    Sidebar,
    SidebarMap,
    SiteCatalog,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
    UntitledGroup,
    ValidationError,
)

__all__ = [
    "BuildError",
    "DuplicatePrefix",
    "EmptyGroup",
    "LocaleConfig",
    "MalformedLink",
    "MalformedLocale",
    "MalformedRoute",
    "MissingContent",
    "NavEntry",
    "NavGroup",
    "NavLink",
    "PrefixMismatch",
    "Route",
    "Sidebar",
    "SidebarMap",
    "SiteCatalog",
    "SiteConfig",
    "SiteConfigError",
    "ThemeConfig",
    "UntitledGroup",
    "ValidationError",
    "load_site_catalog",
]
