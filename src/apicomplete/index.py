"""In-memory lookup structure over one API's cached paths.

A :class:`PathIndex` pairs an entry's base URL with its
:class:`~apicomplete.models.CachedSpec` and answers the questions the
completion engine and the ``path``/``param`` commands ask. Building one is
cheap and pure; nothing here touches disk or network.

Declaration order of ``paths`` in the source document is preserved
everywhere. :meth:`PathIndex.find` reorders by specificity but keeps
declaration order among equals, so output is fully deterministic.
"""

from __future__ import annotations

from typing import Optional

from apicomplete.models import CachedSpec, PathEntry


def static_prefix(template: str) -> str:
    """Return the part of *template* before its first ``{variable}``."""
    return template.split("{", 1)[0]


def normalize_path(path: str) -> str:
    """Drop a query string, fragment, and trailing ``/`` from a typed path."""
    for sep in ("?", "#"):
        path = path.split(sep, 1)[0]
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _segments_match(template: str, path: str) -> bool:
    template_parts = template.split("/")
    path_parts = path.split("/")
    if len(template_parts) != len(path_parts):
        return False
    for tpl, seg in zip(template_parts, path_parts):
        if tpl.startswith("{") and tpl.endswith("}"):
            if not seg:
                return False
        elif tpl != seg:
            return False
    return True


class PathIndex:
    """Queryable view of the paths one API serves under its base URL.

    Args:
        base_url: The entry's base URL, without a trailing ``/``.
        cached: The entry's cached spec.
    """

    def __init__(self, base_url: str, cached: CachedSpec) -> None:
        self.base_url = base_url.rstrip("/")
        self._paths = list(cached.paths)

    def full_url(self, entry: PathEntry) -> str:
        return self.base_url + entry.template

    def paths_under(self, base_url: Optional[str] = None) -> list[PathEntry]:
        """Return the entries served under *base_url*, in declaration order.

        With no argument, or the index's own base URL, every entry is
        returned. A longer URL narrows the result to entries whose full URL
        starts with it; an unrelated URL yields nothing.
        """
        if base_url is None or base_url.rstrip("/") == self.base_url:
            return list(self._paths)
        return [p for p in self._paths if self.full_url(p).startswith(base_url)]

    def find(self, base_url: str, path_prefix: str) -> list[PathEntry]:
        """Return entries whose URL continues ``base_url + path_prefix``.

        Entries with the longest static part (text before the first
        ``{``) come first; ties keep declaration order.
        """
        wanted = base_url + path_prefix
        matches = [p for p in self._paths if self.full_url(p).startswith(wanted)]
        # sorted() is stable, so equal keys keep declaration order.
        return sorted(matches, key=lambda p: -len(static_prefix(p.template)))

    def lookup(self, path: str) -> Optional[PathEntry]:
        """Return the entry a typed *path* refers to, or ``None``.

        An exact template match (ignoring a trailing ``/``) wins. Otherwise
        the first template whose ``{variable}`` segments line up with
        literal segments of *path* is returned.
        """
        path = normalize_path(path)
        for entry in self._paths:
            if normalize_path(entry.template) == path:
                return entry
        for entry in self._paths:
            if _segments_match(normalize_path(entry.template), path):
                return entry
        return None

    def filter(self, pattern: str) -> list[PathEntry]:
        """Return entries whose template contains *pattern*."""
        return [p for p in self._paths if pattern in p.template]
