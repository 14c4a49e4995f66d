"""Render a validated site configuration into the generator's config module.

The site generator reads its configuration from ``.vuepress/config.js``,
which must export a single object via ``module.exports``. The exporter turns
a :class:`~docsnav.config.SiteConfig` into that object with
:meth:`SiteConfig.to_dict` and renders it through a Jinja template so the
file header and layout live next to the other package templates.

Typical usage follows the catalogue loader:

>>> from pathlib import Path
>>> from docsnav.config import load_site_catalog
>>> from docsnav.exporter import ConfigExporter
>>> site = load_site_catalog(Path("config/site.yaml")).get_version("v2")  # doctest: +SKIP
>>> ConfigExporter(site, Path("dist")).run()  # doctest: +SKIP
PosixPath('dist/v2/.vuepress/config.js')

Key order is preserved in the output: the generator picks the first sidebar
prefix that matches a page, so declaration order is meaningful.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import EXPORT_PATH_TEMPLATE, EXPORT_TEMPLATE_NAME

if typ.TYPE_CHECKING:
    from .config import SiteConfig


class ConfigExporter:
    """Write the generator config module for one site configuration."""

    def __init__(
        self,
        site: SiteConfig,
        output_dir: Path,
        *,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the exporter and Jinja environment.

        Parameters
        ----------
        site : SiteConfig
            Configuration to export. Validate it first with
            :func:`docsnav.navigation.ensure_valid`; the exporter writes
            whatever it is given.
        output_dir : Path
            Root directory receiving one ``<version>/.vuepress/config.js``
            per version (``.vuepress/config.js`` for unversioned sites).
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to
            ``docsnav/templates`` when not supplied.
        """
        self.site = site
        self.output_dir = output_dir
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,  # noqa: S701 - renders JavaScript, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.policies["json.dumps_kwargs"] = {"sort_keys": False}
        self.template = self.env.get_template(EXPORT_TEMPLATE_NAME)

    @property
    def output_path(self) -> Path:
        """Return where :meth:`run` writes the config module."""
        if self.site.version:
            return self.output_dir / EXPORT_PATH_TEMPLATE.format(
                version=self.site.version
            )
        return self.output_dir / ".vuepress" / "config.js"

    def render(self) -> str:
        """Return the config module source, ending with a newline."""
        source = self.template.render(
            version=self.site.version, payload=self.site.to_dict()
        )
        if not source.endswith("\n"):
            source += "\n"
        return source

    def run(self) -> Path:
        """Render and write the config module, returning the output path."""
        output_path = self.output_path
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(), encoding="utf-8")
        return output_path


__all__ = ["ConfigExporter"]
