"""Map a markdown content tree to the routes the site generator serves.

The generator serves ``guide/installation.md`` at ``/guide/installation`` and
a directory's ``README.md`` (or ``index.md``) at the directory route, e.g.
``api/README.md`` at ``/api/``. :func:`collect_content_routes` applies the same
mapping so sidebar and nav routes can be checked against files on disk.

Examples
--------
>>> route_key("/guide/installation.html#setup")
'/guide/installation'
>>> route_key("/api/README.md")
'/api/'
"""

from __future__ import annotations

import typing as typ
from pathlib import Path, PurePosixPath

from ._constants import INDEX_DOCUMENTS

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_INDEX_STEMS = frozenset(PurePosixPath(name).stem for name in INDEX_DOCUMENTS)
_PAGE_SUFFIXES = (".html", ".md")


def route_key(route: str) -> str:
    """Return the canonical form of ``route`` used for existence checks.

    Fragments and query strings are dropped, ``.html``/``.md`` suffixes are
    removed and index documents collapse onto their directory route.
    """
    path = route.split("#", 1)[0].split("?", 1)[0] or "/"
    for suffix in _PAGE_SUFFIXES:
        if path.endswith(suffix):
            path = path[: -len(suffix)]
            break
    head, _, tail = path.rpartition("/")
    if tail in _INDEX_STEMS:
        return f"{head}/"
    return path


def route_for_document(relative: PurePosixPath) -> str:
    """Return the route served for a markdown file relative to the content root."""
    if relative.name in INDEX_DOCUMENTS:
        parent = relative.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{relative.with_suffix('').as_posix()}"


def iter_documents(root: Path) -> cabc.Iterator[PurePosixPath]:
    """Yield markdown documents below ``root`` as POSIX relative paths.

    Dot-directories such as ``.vuepress`` hold generator configuration rather
    than pages and are skipped.
    """
    for path in sorted(root.rglob("*.md")):
        relative = PurePosixPath(path.relative_to(root).as_posix())
        if any(part.startswith(".") for part in relative.parts[:-1]):
            continue
        yield relative


def collect_content_routes(root: Path) -> frozenset[str]:
    """Return every route served from the markdown files under ``root``.

    Raises
    ------
    FileNotFoundError
        If ``root`` is not an existing directory.
    """
    if not root.is_dir():
        msg = f"Content directory '{root}' not found."
        raise FileNotFoundError(msg)
    return frozenset(route_for_document(relative) for relative in iter_documents(root))


__all__ = ["collect_content_routes", "iter_documents", "route_for_document", "route_key"]
