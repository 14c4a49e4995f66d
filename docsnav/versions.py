"""Build one site configuration per documentation version from a template.

Every published snapshot of the docs (``/v1/``, ``/v2/``, ...) shares most of
its navigation. Instead of copying the whole configuration per snapshot, a
:class:`SiteTemplate` holds the shared title, language, sidebar and nav, and
:meth:`SiteTemplate.instantiate` stamps out a :class:`SiteConfig` for a
:class:`SiteVersion`, which only names what differs: its identifier, base path
and locale title, plus optional wholesale sidebar/nav replacements and extra
locales.

Instances are independent of one another, so versions can be built in any
order (or concurrently) with identical results.

Examples
--------
>>> template = SiteTemplate(
...     title="Vue Test Utils",
...     lang="en-US",
...     sidebar={"/": [{"title": "Guide", "children": ["/introduction"]}]},
...     nav=[{"text": "Guide", "link": "/introduction"}],
... )
>>> site = template.instantiate(
...     SiteVersion(version="v2", base_path="/v2/", locale_title="VTU (2.0)")
... )
>>> site.base, site.locales["/"].title
('/v2/', 'VTU (2.0)')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_LOCALE
from .config.helpers import _merge_theme
from .config.models import ThemeConfig
from .navigation import merge_locale, parse_site

if typ.TYPE_CHECKING:
    from .config.models import SiteConfig


@dc.dataclass(frozen=True, slots=True)
class SiteVersion:
    """What one documentation version changes relative to the template."""

    version: str
    base_path: str
    locale_title: str | None = None
    title: str | None = None
    sidebar: typ.Mapping[str, typ.Any] | typ.Sequence[typ.Any] | None = None
    nav: typ.Sequence[typ.Any] | None = None
    theme: typ.Mapping[str, typ.Any] | None = None
    locales: typ.Mapping[str, typ.Mapping[str, typ.Any]] = dc.field(
        default_factory=dict
    )


@dc.dataclass(frozen=True, slots=True)
class SiteTemplate:
    """Navigation shared by every version of the site."""

    title: str
    lang: str
    sidebar: typ.Mapping[str, typ.Any] | typ.Sequence[typ.Any] = dc.field(
        default_factory=dict
    )
    nav: typ.Sequence[typ.Any] = ()
    theme: ThemeConfig = ThemeConfig()

    def instantiate(self, release: SiteVersion) -> SiteConfig:
        """Return the unvalidated :class:`SiteConfig` for ``release``.

        Sidebar and nav overrides replace the template's wholesale; theme
        overrides are merged key by key. Extra locales are overlaid with
        :func:`docsnav.navigation.merge_locale`, inheriting unspecified
        fields from the default locale.
        """
        title = release.title or self.title
        site = parse_site(
            {
                "base": release.base_path,
                "title": title,
                "version": release.version,
                "locales": {
                    DEFAULT_LOCALE: {
                        "lang": self.lang,
                        "title": release.locale_title or title,
                    }
                },
                "sidebar": self.sidebar if release.sidebar is None else release.sidebar,
                "nav": self.nav if release.nav is None else release.nav,
                "theme": _merge_theme(self.theme, release.theme),
            }
        )
        for code, overrides in release.locales.items():
            site = merge_locale(site, code, overrides)
        return site


__all__ = ["SiteTemplate", "SiteVersion"]
