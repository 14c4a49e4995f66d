"""Build and validate the navigation tree of a documentation site.

Declarations are the plain mappings and sequences an author writes (or that
the YAML catalogue loader produces). This module turns them into the frozen
model from :mod:`docsnav.config.models` and checks every invariant the site
generator silently relies on:

- routes start with ``/`` and contain no ``//``;
- each sidebar route starts with the prefix it is nested under;
- prefixes are unique and none is shadowed by an earlier, broader prefix
  (the generator uses the first prefix that matches a page);
- groups are non-empty, and non-collapsable groups with several children
  carry a title;
- nav links point at a route or an absolute ``scheme://`` URL.

:func:`validate` walks the whole tree in pre-order and returns every problem
at once. :func:`build_sidebar`, :func:`build_nav`, :func:`build` and
:func:`ensure_valid` are the strict variants that raise.

Examples
--------
>>> sidebar = build_sidebar(
...     {
...         "/guide/": [
...             {
...                 "title": "Essentials",
...                 "children": ["/guide/installation", "/guide/introduction"],
...             }
...         ]
...     }
... )
>>> sidebar["/guide/"][0].children
('/guide/installation', '/guide/introduction')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from types import MappingProxyType

from ._constants import DEFAULT_LOCALE
from .config.helpers import (
    GROUP_KEYS,
    LOCALE_KEYS,
    _is_external_url,
    _merge_theme,
    _normalize_prefix,
    _optional_str,
    _reject_unknown_keys,
    _require_bool,
    _require_mapping,
    _require_sequence,
    _route_problem,
)
from .config.models import (
    LOCALE_LABELS,
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
    Sidebar,
    SiteConfig,
    SiteConfigError,
    ThemeConfig,
    UntitledGroup,
    ValidationError,
    freeze_sidebar,
)
from .content import route_key

SITE_KEYS = frozenset({"base", "title", "locales", "sidebar", "nav", "theme", "version"})


@dc.dataclass(frozen=True, slots=True)
class ValidationPolicy:
    """Knobs for checks that are a matter of house style.

    ``content_routes`` enables the existence check: when set, every route
    must match one of these paths (see :func:`docsnav.content.route_key`).
    """

    require_group_titles: bool = True
    content_routes: frozenset[str] | None = None


DEFAULT_POLICY = ValidationPolicy()


# Parsing -------------------------------------------------------------------


def parse_sidebar(declarations: object) -> Sidebar:
    """Convert sidebar declarations into a frozen :data:`Sidebar`.

    A mapping of path prefixes gives a :data:`SidebarMap`; a plain sequence
    of routes and groups gives one flat tuple shown on every page.

    Only the shape is checked here; invariant violations are left for
    :func:`validate` so they can all be reported together.
    """
    if isinstance(declarations, tuple | list):
        return tuple(
            _parse_entry(entry, f"sidebar[{index}]")
            for index, entry in enumerate(declarations)
        )
    payload = _require_mapping(declarations, "sidebar")
    sidebar: dict[str, tuple[NavEntry, ...]] = {}
    for prefix, entries in payload.items():
        where = f"sidebar[{prefix!r}]"
        sidebar[str(prefix)] = tuple(
            _parse_entry(entry, f"{where}[{index}]")
            for index, entry in enumerate(_require_sequence(entries, where))
        )
    return freeze_sidebar(sidebar)


def _parse_entry(declaration: object, where: str) -> NavEntry:
    match declaration:
        case NavGroup() | str():
            return declaration
        case cabc.Mapping():
            _reject_unknown_keys(declaration, GROUP_KEYS, where)
            children = _require_sequence(
                declaration.get("children"), f"{where}.children"
            )
            return NavGroup(
                title=str(declaration.get("title") or ""),
                collapsable=_require_bool(
                    declaration.get("collapsable", False), f"{where}.collapsable"
                ),
                children=tuple(
                    _parse_entry(child, f"{where}.children[{index}]")
                    for index, child in enumerate(children)
                ),
            )
        case _:
            msg = (
                f"{where} must be a route string or a group mapping, "
                f"got {type(declaration).__name__}."
            )
            raise SiteConfigError(msg)


def parse_nav(links: object) -> tuple[NavLink, ...]:
    """Convert ``{text, link}`` declarations into :class:`NavLink` objects."""
    parsed: list[NavLink] = []
    for index, link in enumerate(_require_sequence(links, "nav")):
        match link:
            case NavLink():
                parsed.append(link)
            case cabc.Mapping():
                _reject_unknown_keys(link, frozenset({"text", "link"}), f"nav[{index}]")
                parsed.append(
                    NavLink(text=str(link.get("text") or ""), link=str(link.get("link") or ""))
                )
            case _:
                msg = f"nav[{index}] must be a mapping, got {type(link).__name__}."
                raise SiteConfigError(msg)
    return tuple(parsed)


def parse_locale(code: str, declaration: object) -> LocaleConfig:
    """Convert a locale declaration into a :class:`LocaleConfig`.

    Besides ``lang``, ``title`` and ``sidebar`` the declaration may carry the
    theme labels named in :data:`~docsnav.config.models.LOCALE_LABELS`.
    """
    if isinstance(declaration, LocaleConfig):
        return declaration
    where = f"locales[{code!r}]"
    payload = _require_mapping(declaration, where)
    _reject_unknown_keys(payload, LOCALE_KEYS, where)
    sidebar = payload.get("sidebar")
    return LocaleConfig(
        lang=str(payload.get("lang") or ""),
        title=str(payload.get("title") or ""),
        sidebar=parse_sidebar(sidebar) if sidebar is not None else None,
        **{field: _optional_str(payload.get(field)) for field in LOCALE_LABELS},
    )


def parse_site(declaration: object) -> SiteConfig:
    """Assemble an unvalidated :class:`SiteConfig` from a site declaration."""
    payload = _require_mapping(declaration, "site declaration")
    _reject_unknown_keys(payload, SITE_KEYS, "site declaration")
    locales = _require_mapping(payload.get("locales"), "locales")
    theme = payload.get("theme")
    return SiteConfig(
        base=str(payload.get("base") or "/"),
        title=str(payload.get("title") or ""),
        locales=MappingProxyType(
            {str(code): parse_locale(str(code), raw) for code, raw in locales.items()}
        ),
        sidebar=parse_sidebar(payload.get("sidebar")),
        nav=parse_nav(payload.get("nav")),
        theme=theme
        if isinstance(theme, ThemeConfig)
        else _merge_theme(ThemeConfig(), _require_mapping(theme, "theme")),
        version=_optional_str(payload.get("version")),
    )


# Validation ----------------------------------------------------------------


class _TreeValidator:
    """Collect invariant violations during a pre-order walk."""

    def __init__(self, policy: ValidationPolicy) -> None:
        self.policy = policy
        self.errors: list[ValidationError] = []
        self._known: frozenset[str] | None = None
        if policy.content_routes is not None:
            self._known = frozenset(route_key(path) for path in policy.content_routes)

    def site(self, config: SiteConfig) -> None:
        problem = _route_problem(config.base)
        if problem:
            self.errors.append(MalformedRoute(f"base path: {problem}", location="base"))
        elif not config.base.endswith("/"):
            self.errors.append(
                MalformedRoute(
                    f"base path '{config.base}' must end with '/'", location="base"
                )
            )
        self.locales(config.locales)
        self.sidebar(config.sidebar, location="sidebar", scope=DEFAULT_LOCALE)
        for code, locale in config.locales.items():
            if locale.sidebar is not None:
                self.sidebar(
                    locale.sidebar,
                    location=f"locales[{code!r}].sidebar",
                    scope=_normalize_prefix(code),
                )
        self.nav(config.nav)

    def locales(self, locales: cabc.Mapping[str, LocaleConfig]) -> None:
        if locales and DEFAULT_LOCALE not in locales:
            self.errors.append(
                MalformedLocale(
                    f"locales must include the default locale '{DEFAULT_LOCALE}'",
                    location="locales",
                )
            )
        for code, locale in locales.items():
            where = f"locales[{code!r}]"
            if _route_problem(code) or not code.endswith("/"):
                self.errors.append(
                    MalformedLocale(
                        f"locale code '{code}' must be a path like '/zh/'",
                        location=where,
                    )
                )
            if not locale.lang.strip():
                self.errors.append(
                    MalformedLocale(f"locale '{code}' has no lang tag", location=where)
                )

    def sidebar(self, sidebar: Sidebar, *, location: str, scope: str) -> None:
        if isinstance(sidebar, tuple):
            for index, entry in enumerate(sidebar):
                self.entry(entry, prefix=scope, location=f"{location}[{index}]")
            return
        claimed: list[tuple[str, str]] = []
        for prefix, entries in sidebar.items():
            where = f"{location}[{prefix!r}]"
            normalized = self._prefix(prefix, where, scope, claimed)
            for index, entry in enumerate(entries):
                self.entry(entry, prefix=normalized, location=f"{where}[{index}]")

    def _prefix(
        self, prefix: str, where: str, scope: str, claimed: list[tuple[str, str]]
    ) -> str | None:
        problem = _route_problem(prefix)
        if problem:
            self.errors.append(MalformedRoute(f"sidebar prefix: {problem}", location=where))
            return None
        normalized = _normalize_prefix(prefix)
        for earlier, original in claimed:
            if normalized == earlier:
                self.errors.append(
                    DuplicatePrefix(
                        f"prefix '{prefix}' duplicates '{original}'", location=where
                    )
                )
                break
            if normalized.startswith(earlier):
                self.errors.append(
                    DuplicatePrefix(
                        f"prefix '{prefix}' is unreachable behind earlier prefix "
                        f"'{original}'; declare the more specific prefix first",
                        location=where,
                    )
                )
                break
        claimed.append((normalized, prefix))
        if not normalized.startswith(scope):
            self.errors.append(
                PrefixMismatch(
                    f"prefix '{prefix}' lies outside locale '{scope}'", location=where
                )
            )
        return normalized

    def entry(self, entry: NavEntry, *, prefix: str | None, location: str) -> None:
        if isinstance(entry, NavGroup):
            self.group(entry, prefix=prefix, location=location)
        else:
            self.route(entry, prefix=prefix, location=location)

    def group(self, group: NavGroup, *, prefix: str | None, location: str) -> None:
        if not group.children:
            self.errors.append(
                EmptyGroup(f"group '{group.title}' has no children", location=location)
            )
        elif (
            self.policy.require_group_titles
            and not group.collapsable
            and len(group.children) > 1
            and not group.title.strip()
        ):
            self.errors.append(
                UntitledGroup(
                    "non-collapsable group with several children needs a title",
                    location=location,
                )
            )
        for index, child in enumerate(group.children):
            self.entry(child, prefix=prefix, location=f"{location}.children[{index}]")

    def route(self, route: str, *, prefix: str | None, location: str) -> None:
        problem = _route_problem(route)
        if problem:
            self.errors.append(MalformedRoute(problem, location=location))
            return
        if prefix is not None and not _is_within(route, prefix):
            self.errors.append(
                PrefixMismatch(
                    f"route '{route}' is not under sidebar prefix '{prefix}'",
                    location=location,
                )
            )
        self._content(route, location)

    def nav(self, links: cabc.Sequence[NavLink]) -> None:
        for index, link in enumerate(links):
            where = f"nav[{index}]"
            if not link.text.strip():
                self.errors.append(
                    MalformedLink("nav link text must not be empty", location=where)
                )
            if link.link.startswith("/"):
                problem = _route_problem(link.link)
                if problem:
                    self.errors.append(MalformedLink(problem, location=where))
                else:
                    self._content(link.link, where)
            elif not _is_external_url(link.link):
                self.errors.append(
                    MalformedLink(
                        f"link '{link.link}' is neither a route nor an absolute URL",
                        location=where,
                    )
                )

    def _content(self, route: str, location: str) -> None:
        if self._known is None:
            return
        if route_key(route) not in self._known:
            self.errors.append(
                MissingContent(
                    f"route '{route}' has no matching document", location=location
                )
            )


def _is_within(route: str, prefix: str) -> bool:
    """Return True when ``route`` lives at or below the normalized ``prefix``."""
    return route.startswith(prefix) or route == prefix.rstrip("/")


def _raise_first(errors: cabc.Sequence[ValidationError]) -> None:
    if not errors:
        return
    first = errors[0]
    if len(errors) > 1:
        first.add_note(f"{len(errors) - 1} further problem(s); run validate() for all")
    raise first


def validate(
    config: SiteConfig, *, policy: ValidationPolicy | None = None
) -> list[ValidationError]:
    """Return every invariant violation in ``config`` without raising.

    Parameters
    ----------
    config : SiteConfig
        Assembled configuration, typically from :func:`parse_site` or the
        catalogue loader.
    policy : ValidationPolicy, optional
        Style checks and optional content index; defaults to
        :data:`DEFAULT_POLICY`.

    Returns
    -------
    list[ValidationError]
        Problems in pre-order walk order; empty when the config is valid.
    """
    validator = _TreeValidator(policy or DEFAULT_POLICY)
    validator.site(config)
    return validator.errors


def ensure_valid(
    config: SiteConfig, *, policy: ValidationPolicy | None = None
) -> SiteConfig:
    """Return ``config`` unchanged or raise :class:`BuildError` listing all problems."""
    errors = validate(config, policy=policy)
    if errors:
        raise BuildError(errors)
    return config


# Strict builders -----------------------------------------------------------


def build_sidebar(
    declarations: object, *, policy: ValidationPolicy | None = None
) -> Sidebar:
    """Parse and validate sidebar declarations.

    Raises
    ------
    ValidationError
        The first violation found (``PrefixMismatch``, ``EmptyGroup`` and so
        on); further problems are mentioned in the exception notes.
    SiteConfigError
        If the declarations have the wrong shape.
    """
    sidebar = parse_sidebar(declarations)
    validator = _TreeValidator(policy or DEFAULT_POLICY)
    validator.sidebar(sidebar, location="sidebar", scope=DEFAULT_LOCALE)
    _raise_first(validator.errors)
    return sidebar


def build_nav(links: object) -> tuple[NavLink, ...]:
    """Parse and validate top navigation links, raising ``MalformedLink``."""
    nav = parse_nav(links)
    validator = _TreeValidator(DEFAULT_POLICY)
    validator.nav(nav)
    _raise_first(validator.errors)
    return nav


def build(
    declaration: typ.Mapping[str, typ.Any], *, policy: ValidationPolicy | None = None
) -> SiteConfig:
    """Parse a full site declaration and fail the build on any problem."""
    return ensure_valid(parse_site(declaration), policy=policy)


def merge_locale(
    base: SiteConfig, locale: str, overrides: typ.Mapping[str, typ.Any]
) -> SiteConfig:
    """Return a copy of ``base`` with ``locale`` metadata overlaid.

    ``lang`` and ``title`` missing from ``overrides`` are inherited from the
    default ``'/'`` locale (the site title stands in when there is none). A
    ``sidebar`` override replaces that locale's sidebar wholesale; otherwise
    the locale keeps whatever sidebar it already owned. Theme labels follow
    the sidebar rule field by field.

    Raises
    ------
    SiteConfigError
        If ``overrides`` has unknown keys or no ``lang`` can be resolved.
    """
    _reject_unknown_keys(overrides, LOCALE_KEYS, f"locale '{locale}' overrides")
    default = base.default_locale
    current = base.locales.get(locale)
    lang = _optional_str(overrides.get("lang")) or (default.lang if default else None)
    if lang is None:
        msg = f"Locale '{locale}' has no lang and there is no default locale to inherit from."
        raise SiteConfigError(msg)
    title = _optional_str(overrides.get("title")) or (
        default.title if default else base.title
    )
    sidebar: Sidebar | None
    if "sidebar" in overrides:
        raw_sidebar = overrides["sidebar"]
        sidebar = parse_sidebar(raw_sidebar) if raw_sidebar is not None else None
    else:
        sidebar = current.sidebar if current else None
    locales = dict(base.locales)
    labels = {
        field: _optional_str(overrides[field])
        if field in overrides
        else getattr(current, field, None)
        for field in LOCALE_LABELS
    }
    locales[locale] = LocaleConfig(lang=lang, title=title, sidebar=sidebar, **labels)
    return dc.replace(base, locales=MappingProxyType(locales))


__all__ = [
    "DEFAULT_POLICY",
    "ValidationPolicy",
    "build",
    "build_nav",
    "build_sidebar",
    "ensure_valid",
    "merge_locale",
    "parse_locale",
    "parse_nav",
    "parse_site",
    "parse_sidebar",
    "validate",
]
