"""Utility helpers shared by the navigation builder and catalogue loader."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

from .models import LOCALE_LABELS, SiteConfigError, ThemeConfig, _normalize_prefix

EXTERNAL_URL_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://\S+$")
GROUP_KEYS = frozenset({"title", "collapsable", "children"})
LOCALE_KEYS = frozenset({"lang", "title", "sidebar", *LOCALE_LABELS})
THEME_KEYS = frozenset({"edit_links", "sidebar_depth"})


def _route_problem(path: str) -> str | None:
    """Return why ``path`` is not a syntactically valid route, or None."""
    if not path.startswith("/"):
        return f"route '{path}' must start with '/'"
    if "//" in path:
        return f"route '{path}' contains consecutive slashes"
    if any(char.isspace() for char in path):
        return f"route '{path}' contains whitespace"
    return None


def _is_external_url(link: str) -> bool:
    """Return True when ``link`` is an absolute ``scheme://`` URL."""
    return EXTERNAL_URL_PATTERN.match(link) is not None


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _require_mapping(value: object, what: str) -> typ.Mapping[str, typ.Any]:
    """Return ``value`` as a mapping or raise :class:`SiteConfigError`."""
    if value is None:
        return {}
    if not isinstance(value, cabc.Mapping):
        msg = f"{what} must be a mapping, got {type(value).__name__}."
        raise SiteConfigError(msg)
    return value


def _require_sequence(value: object, what: str) -> list[typ.Any]:
    """Return ``value`` as a list or raise :class:`SiteConfigError`."""
    if value is None:
        return []
    if isinstance(value, str | bytes) or not isinstance(value, cabc.Sequence):
        msg = f"{what} must be a sequence, got {type(value).__name__}."
        raise SiteConfigError(msg)
    return list(value)


def _require_bool(value: object, what: str) -> bool:
    """Return ``value`` when it is a real boolean, else raise."""
    if not isinstance(value, bool):
        msg = f"{what} must be true or false, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _require_int(value: object, what: str) -> int:
    """Return ``value`` when it is an integer (booleans excluded), else raise."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _reject_unknown_keys(
    payload: typ.Mapping[str, typ.Any], allowed: frozenset[str], what: str
) -> None:
    unknown = sorted(set(payload) - allowed)
    if unknown:
        msg = f"Unknown keys in {what}: {', '.join(unknown)}."
        raise SiteConfigError(msg)


def _merge_theme(
    base: ThemeConfig, override: typ.Mapping[str, typ.Any] | None
) -> ThemeConfig:
    """Merge an override theme mapping into the base ThemeConfig."""
    if not override:
        return base
    _reject_unknown_keys(override, THEME_KEYS, "theme")
    sidebar_depth = _require_int(
        override.get("sidebar_depth", base.sidebar_depth), "theme.sidebar_depth"
    )
    if sidebar_depth < 0:
        msg = f"sidebar_depth must be non-negative, got {sidebar_depth}."
        raise SiteConfigError(msg)
    return ThemeConfig(
        edit_links=_require_bool(
            override.get("edit_links", base.edit_links), "theme.edit_links"
        ),
        sidebar_depth=sidebar_depth,
    )


__all__ = [
    "EXTERNAL_URL_PATTERN",
    "GROUP_KEYS",
    "LOCALE_KEYS",
    "THEME_KEYS",
    "_is_external_url",
    "_merge_theme",
    "_normalize_prefix",
    "_optional_str",
    "_reject_unknown_keys",
    "_require_bool",
    "_require_int",
    "_require_mapping",
    "_require_sequence",
    "_route_problem",
]
