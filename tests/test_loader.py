"""Unit tests for the site catalogue loader and version templating.

These tests write small ``site.yaml`` catalogues into ``tmp_path`` and check
that the loader applies defaults, stamps each version out of the shared
template, honours per-version overrides and rejects structurally unusable
input with :class:`SiteConfigError`.

Usage
-----
Run ``pytest tests/test_loader.py -v``.
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from docsnav.config import NavGroup, SiteConfigError, ThemeConfig, load_site_catalog
from docsnav.navigation import validate
from docsnav.versions import SiteTemplate, SiteVersion

REPO_ROOT = Path(__file__).resolve().parents[1]

CATALOGUE = """
defaults:
  title: Widget Docs
  lang: en-US
  output_dir: build/site
  default_version: v2
  theme:
    edit_links: true
template:
  sidebar:
    /guide/:
      - title: Basics
        children:
          - /guide/setup
  nav:
    - text: Guide
      link: /guide/setup
versions:
  v1:
    locale_title: Widget Docs (1.x)
    theme:
      sidebar_depth: 0
  v2:
    base: /next/
    title: Widget
    sidebar:
      /guide/:
        - title: Start here
          children:
            - /guide/quickstart
    locales:
      /zh/:
        lang: zh-CN
        title: 小部件文档
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "site.yaml"
    path.write_text(dedent(text).strip() + "\n", encoding="utf-8")
    return path


def test_catalogue_versions_are_stamped_from_template(tmp_path: Path) -> None:
    """Each version inherits the template and applies its own overrides."""
    catalog = load_site_catalog(_write(tmp_path, CATALOGUE))
    assert list(catalog.versions) == ["v1", "v2"]
    assert catalog.output_dir == Path("build/site")

    v1 = catalog.get_version("v1")
    assert v1.version == "v1"
    assert v1.base == "/v1/"
    assert v1.title == "Widget Docs"
    assert v1.locales["/"].title == "Widget Docs (1.x)"
    assert v1.theme == ThemeConfig(edit_links=True, sidebar_depth=0)
    group = v1.sidebar["/guide/"][0]
    assert isinstance(group, NavGroup)
    assert group.children == ("/guide/setup",)

    v2 = catalog.get_version(None)
    assert v2 is catalog.versions["v2"]
    assert v2.base == "/next/"
    assert v2.title == "Widget"
    assert v2.locales["/"].title == "Widget"
    assert v2.sidebar["/guide/"][0].title == "Start here"
    assert v2.nav == v1.nav
    assert v2.locales["/zh/"].lang == "zh-CN"
    assert v2.theme == ThemeConfig(edit_links=True, sidebar_depth=1)

    assert validate(v1) == []
    assert validate(v2) == []


def test_unknown_version_lists_known_versions(tmp_path: Path) -> None:
    """Asking for an undeclared version names the declared ones."""
    catalog = load_site_catalog(_write(tmp_path, CATALOGUE))
    with pytest.raises(SiteConfigError, match="Known versions: v1, v2"):
        catalog.get_version("v3")


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing catalogue is reported as such."""
    with pytest.raises(FileNotFoundError):
        load_site_catalog(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("defaults:\n  title: X\n", "No versions"),
        ("versions:\n  v1: {}\n", "defaults.title"),
        ("defaults:\n  title: X\n  default_version: v9\nversions:\n  v1: {}\n", "v9"),
        ("defaults:\n  title: X\nversions:\n  v1: [a]\n", "must be a mapping"),
        ("defaults:\n  title: X\nversions:\n  v1:\n    bsae: /v1/\n", "bsae"),
        ("defaults:\n  title: X\n  theme:\n    sidebar_depth: -1\nversions:\n  v1: {}\n", "non-negative"),
        ("defaults:\n  title: X\n  theme:\n    sidebar_depth: deep\nversions:\n  v1: {}\n", "must be an integer"),
        ("defaults:\n  title: X\ntemplate:\n  sidebar: /guide/\nversions:\n  v1: {}\n", "must be a mapping"),
        ("pages: {}\n", "Unknown keys"),
    ],
)
def test_structural_problems_raise_site_config_error(
    tmp_path: Path, text: str, message: str
) -> None:
    """Unusable catalogues fail loading rather than validation."""
    with pytest.raises(SiteConfigError, match=message):
        load_site_catalog(_write(tmp_path, text))


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    """A YAML list at the top level is rejected."""
    with pytest.raises(TypeError):
        load_site_catalog(_write(tmp_path, "- a\n- b\n"))


def test_empty_version_entry_uses_template_defaults(tmp_path: Path) -> None:
    """A bare version key still produces a full site."""
    catalog = load_site_catalog(
        _write(tmp_path, "defaults:\n  title: X\nversions:\n  beta:\n")
    )
    site = catalog.get_version("beta")
    assert site.base == "/beta/"
    assert site.locales["/"].lang == "en-US"
    assert dict(site.sidebar) == {}


def test_repository_catalogue_is_valid() -> None:
    """The checked-in catalogue passes validation."""
    catalog = load_site_catalog(REPO_ROOT / "config" / "site.yaml")
    site = catalog.get_version(None)
    assert site.base == "/v2/"
    assert site.locales["/"].title == "Vue Test Utils (2.0.0-beta.0)"
    assert validate(site) == []


def test_repository_catalogue_carries_the_legacy_snapshot() -> None:
    """The pre-versioning snapshot keeps its flat, locale-owned sidebar."""
    catalog = load_site_catalog(REPO_ROOT / "config" / "site.yaml")
    site = catalog.get_version("docs-next")
    assert site.base == "/vue-test-utils-docs-next/"
    assert site.sidebar == ()
    assert site.nav == ()
    locale = site.locales["/"]
    assert locale.sidebar == ("/", "/guides/", "/api-reference/")
    assert locale.label == "English"
    assert locale.edit_link_text == "Edit this page on GitHub"
    assert site.sidebar_for("/guides/setup") == locale.sidebar
    assert validate(site) == []


def test_template_sidebar_may_be_flat(tmp_path: Path) -> None:
    """A template sidebar given as a list reaches every version unchanged."""
    catalog = load_site_catalog(
        _write(
            tmp_path,
            "defaults:\n  title: X\ntemplate:\n  sidebar:\n    - /\n    - /guide/\n"
            "versions:\n  v1: {}\n",
        )
    )
    assert catalog.get_version("v1").sidebar == ("/", "/guide/")


def test_template_instances_are_independent() -> None:
    """Instantiating one version never affects another."""
    template = SiteTemplate(
        title="Widget Docs",
        lang="en-US",
        sidebar={"/": [{"title": "Guide", "children": ["/intro"]}]},
        nav=[{"text": "Guide", "link": "/intro"}],
    )
    v1 = template.instantiate(SiteVersion(version="v1", base_path="/v1/"))
    v2 = template.instantiate(
        SiteVersion(version="v2", base_path="/v2/", locale_title="Widget Docs 2")
    )
    again = template.instantiate(SiteVersion(version="v1", base_path="/v1/"))
    assert v1 == again
    assert v1.locales["/"].title == "Widget Docs"
    assert v2.locales["/"].title == "Widget Docs 2"
    assert v1.sidebar == v2.sidebar
