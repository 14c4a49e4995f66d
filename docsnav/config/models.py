"""Typed dataclasses describing the documentation site navigation model."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path
from types import MappingProxyType

from .._constants import DEFAULT_LOCALE

Route = str
"""Absolute path of a documentation page, e.g. ``/guide/installation``."""


class SiteConfigError(ValueError):
    """Raised when the site configuration is structurally unusable."""


class ValidationError(ValueError):
    """A single navigation invariant violation.

    ``location`` points at the offending node using a Python-like accessor
    path (``sidebar['/guide/'][0].children[1]``) so tools can report every
    problem against the declaration that caused it.
    """

    kind: typ.ClassVar[str] = "ValidationError"

    def __init__(self, message: str, *, location: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location:
            return f"{self.kind} at {self.location}: {self.message}"
        return f"{self.kind}: {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (type(self), self.message, self.location) == (
            type(other),
            other.message,
            other.location,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.location))


class MalformedRoute(ValidationError):
    """A route or prefix lacks a leading slash or contains ``//``."""

    kind = "MalformedRoute"


class PrefixMismatch(ValidationError):
    """A route is nested under a sidebar prefix it does not start with."""

    kind = "PrefixMismatch"


class DuplicatePrefix(ValidationError):
    """Two sidebar prefixes normalise to the same path."""

    kind = "DuplicatePrefix"


class EmptyGroup(ValidationError):
    """A navigation group declares no children."""

    kind = "EmptyGroup"


class MalformedLink(ValidationError):
    """A nav link has no text or its target is neither a route nor a URL."""

    kind = "MalformedLink"


class UntitledGroup(ValidationError):
    """A non-collapsable group with several children has no title."""

    kind = "UntitledGroup"


class MalformedLocale(ValidationError):
    """A locale code is not a slash-delimited path or lacks metadata."""

    kind = "MalformedLocale"


class MissingContent(ValidationError):
    """A route does not correspond to any document in the content tree."""

    kind = "MissingContent"


class BuildError(ValueError):
    """Raised by strict entry points when validation reports problems."""

    def __init__(self, errors: cabc.Sequence[ValidationError]) -> None:
        self.errors = list(errors)
        count = len(self.errors)
        noun = "problem" if count == 1 else "problems"
        lines = [f"navigation build failed with {count} {noun}:"]
        lines.extend(f"  - {error}" for error in self.errors)
        super().__init__("\n".join(lines))


@dc.dataclass(frozen=True, slots=True)
class NavGroup:
    """Titled, ordered cluster of routes and nested groups."""

    title: str
    children: tuple[NavEntry, ...]
    collapsable: bool = False

    def iter_routes(self) -> cabc.Iterator[Route]:
        """Yield every route below this group in pre-order."""
        for child in self.children:
            if isinstance(child, NavGroup):
                yield from child.iter_routes()
            else:
                yield child

    def to_dict(self) -> dict[str, typ.Any]:
        """Convert to the generator's sidebar group shape."""
        return {
            "title": self.title,
            "collapsable": self.collapsable,
            "children": [_entry_to_dict(child) for child in self.children],
        }


NavEntry = Route | NavGroup
SidebarMap = cabc.Mapping[str, tuple[NavEntry, ...]]
Sidebar = SidebarMap | tuple[NavEntry, ...]
"""A prefix-keyed :data:`SidebarMap` or one flat list shown on every page."""


def _normalize_prefix(prefix: str) -> str:
    """Return ``prefix`` with a trailing slash so prefixes compare equal."""
    return prefix if prefix.endswith("/") else f"{prefix}/"


def _entry_to_dict(entry: NavEntry) -> str | dict[str, typ.Any]:
    if isinstance(entry, NavGroup):
        return entry.to_dict()
    return entry


def sidebar_to_dict(sidebar: Sidebar) -> dict[str, list[typ.Any]] | list[typ.Any]:
    """Convert a sidebar to plain lists and dicts, keeping order."""
    if isinstance(sidebar, tuple):
        return [_entry_to_dict(entry) for entry in sidebar]
    return {
        prefix: [_entry_to_dict(entry) for entry in entries]
        for prefix, entries in sidebar.items()
    }


def freeze_sidebar(
    sidebar: cabc.Mapping[str, cabc.Iterable[NavEntry]],
) -> SidebarMap:
    """Return a read-only copy of ``sidebar`` with tuple-valued entries."""
    return MappingProxyType(
        {prefix: tuple(entries) for prefix, entries in sidebar.items()}
    )


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    """Top navigation bar entry."""

    text: str
    link: str

    @property
    def external(self) -> bool:
        """Return True when the link leaves the documentation site."""
        return not self.link.startswith("/")

    def to_dict(self) -> dict[str, str]:
        return {"text": self.text, "link": self.link}


LOCALE_LABELS = {
    "label": "label",
    "select_text": "selectText",
    "last_updated": "lastUpdated",
    "edit_link_text": "editLinkText",
}
"""Locale UI labels and the generator's theme key for each."""


@dc.dataclass(frozen=True, slots=True)
class LocaleConfig:
    """Language tag and title for one locale.

    A locale may also own a sidebar, replacing the site sidebar for pages
    below its code, and carry the theme's UI labels for that language (the
    language picker label, its prompt, and the "last updated" and edit-link
    captions).
    """

    lang: str
    title: str
    sidebar: Sidebar | None = None
    label: str | None = None
    select_text: str | None = None
    last_updated: str | None = None
    edit_link_text: str | None = None

    def to_dict(self) -> dict[str, str]:
        return {"lang": self.lang, "title": self.title}

    def theme_dict(self) -> dict[str, typ.Any]:
        """Return the ``themeConfig.locales`` entry, empty when nothing is set."""
        theme: dict[str, typ.Any] = {}
        for field, key in LOCALE_LABELS.items():
            value = getattr(self, field)
            if value is not None:
                theme[key] = value
        if self.sidebar is not None:
            theme["sidebar"] = sidebar_to_dict(self.sidebar)
        return theme


@dc.dataclass(frozen=True, slots=True)
class ThemeConfig:
    """Theme flags passed through to the site generator."""

    edit_links: bool = False
    sidebar_depth: int = 1


@dc.dataclass(frozen=True, slots=True)
class SiteConfig:
    """A complete navigation configuration for one published site."""

    base: str
    title: str
    locales: cabc.Mapping[str, LocaleConfig]
    sidebar: Sidebar
    nav: tuple[NavLink, ...] = ()
    theme: ThemeConfig = ThemeConfig()
    version: str | None = None

    @property
    def default_locale(self) -> LocaleConfig | None:
        """Return the ``'/'`` locale when one is declared."""
        return self.locales.get(DEFAULT_LOCALE)

    def sidebar_for(self, path: str) -> tuple[NavEntry, ...]:
        """Return the sidebar entries the generator would show for ``path``.

        Like the generator, ``path`` gets a trailing slash and the first
        declared prefix it starts with wins. A locale owning a sidebar takes
        precedence for paths below its code; a flat sidebar applies to every
        page it covers.
        """
        target = _normalize_prefix(path)
        sidebar = self.sidebar
        for code in sorted(self.locales, key=len, reverse=True):
            locale = self.locales[code]
            if locale.sidebar is not None and target.startswith(
                _normalize_prefix(code)
            ):
                sidebar = locale.sidebar
                break
        if isinstance(sidebar, tuple):
            return sidebar
        for prefix, entries in sidebar.items():
            if target.startswith(_normalize_prefix(prefix)):
                return entries
        return ()

    def iter_routes(self) -> cabc.Iterator[Route]:
        """Yield every sidebar route, site sidebar first, then locales."""
        yield from _iter_sidebar_routes(self.sidebar)
        for locale in self.locales.values():
            if locale.sidebar is not None:
                yield from _iter_sidebar_routes(locale.sidebar)

    def to_dict(self) -> dict[str, typ.Any]:
        """Convert to the object shape the site generator consumes."""
        theme: dict[str, typ.Any] = {
            "editLinks": self.theme.edit_links,
            "sidebarDepth": self.theme.sidebar_depth,
        }
        if self.sidebar:
            theme["sidebar"] = sidebar_to_dict(self.sidebar)
        if self.nav:
            theme["nav"] = [link.to_dict() for link in self.nav]
        locale_themes = {
            code: locale.theme_dict() for code, locale in self.locales.items()
        }
        locale_themes = {code: entry for code, entry in locale_themes.items() if entry}
        if locale_themes:
            theme["locales"] = locale_themes
        return {
            "base": self.base,
            "title": self.title,
            "locales": {
                code: locale.to_dict() for code, locale in self.locales.items()
            },
            "themeConfig": theme,
        }


def _iter_sidebar_routes(sidebar: Sidebar) -> cabc.Iterator[Route]:
    groups = (sidebar,) if isinstance(sidebar, tuple) else tuple(sidebar.values())
    for entries in groups:
        for entry in entries:
            if isinstance(entry, NavGroup):
                yield from entry.iter_routes()
            else:
                yield entry


@dc.dataclass(frozen=True, slots=True)
class SiteCatalog:
    """Every documentation version alongside shared output defaults."""

    versions: cabc.Mapping[str, SiteConfig]
    default_version: str | None = None
    output_dir: Path = Path("dist")

    def get_version(self, version: str | None) -> SiteConfig:
        """Return the requested version or fall back to the default one."""
        if version is None:
            return self._get_default_version()
        try:
            return self.versions[version]
        except KeyError as exc:
            available = ", ".join(sorted(self.versions))
            msg = f"Unknown version '{version}'. Known versions: {available}"
            raise SiteConfigError(msg) from exc

    def _get_default_version(self) -> SiteConfig:
        """Return the configured default version or the first declared one."""
        if self.default_version and self.default_version in self.versions:
            return self.versions[self.default_version]
        if not self.versions:  # pragma: no cover - loader rejects this
            msg = "No versions configured in site catalogue."
            raise SiteConfigError(msg)
        first_key = next(iter(self.versions))
        return self.versions[first_key]


__all__ = [
    "LOCALE_LABELS",
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
    "freeze_sidebar",
    "sidebar_to_dict",
]
