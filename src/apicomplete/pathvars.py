"""Rewrite ``:var`` path segments in an HTTPie command line.

HTTPie has no notion of path variables. This module lets a command such as::

    http :8080/users/:id/posts :id=123 -v

be rewritten to::

    http :8080/users/123/posts -v

The first URL-like argument is scanned for segments of the form ``:name``;
every later ``:name=value`` argument naming one of them is consumed and its
value substituted. Other arguments, including ``:name=value`` pairs that do
not name a segment of the URL, are passed through untouched.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_HOST_WITH_PATH = re.compile(r"[A-Za-z0-9.:-]*")
_HOST_WITH_PORT = re.compile(r"[A-Za-z0-9.-]*:\d+")


def is_url_like(arg: str) -> bool:
    """Return True if *arg* looks like an HTTPie URL argument.

    Recognises full ``http://``/``https://`` URLs, ``host:port`` and
    ``:port`` shorthands, and either of those followed by a path.
    """
    if arg.startswith(("http://", "https://")):
        return True
    if "/" in arg:
        host = arg.split("/", 1)[0]
        return _HOST_WITH_PATH.fullmatch(host) is not None
    return _HOST_WITH_PORT.fullmatch(arg) is not None


def _split_url(url: str) -> tuple[str, str]:
    """Split *url* into its host part and its path part (leading ``/`` kept)."""
    start = url.find("://")
    start = start + 3 if start >= 0 else 0
    slash = url.find("/", start)
    if slash < 0:
        return url, ""
    return url[:slash], url[slash:]


def extract_path_vars(url: str) -> list[str]:
    """Return the ``:name`` segments of the path of *url*, first occurrence order."""
    _, path = _split_url(url)
    found: list[str] = []
    for segment in path.split("/"):
        if len(segment) > 1 and segment.startswith(":") and segment not in found:
            found.append(segment)
    return found


def split_assignments(args: list[str], path_vars: list[str]) -> tuple[dict[str, str], list[str]]:
    """Separate ``:name=value`` arguments for *path_vars* from the rest.

    Returns:
        The assigned values keyed by ``:name``, and the remaining arguments
        in their original order.
    """
    values: dict[str, str] = {}
    remaining: list[str] = []
    for arg in args:
        name, sep, value = arg.partition("=")
        if sep and name in path_vars:
            values[name] = value
            continue
        remaining.append(arg)
    return values, remaining


def replace_path_vars(url: str, values: dict[str, str]) -> str:
    """Substitute whole ``:name`` path segments of *url* with their values.

    Segments without a value are left as they are.
    """
    host, path = _split_url(url)
    segments = path.split("/")
    for i, segment in enumerate(segments):
        if segment in values:
            segments[i] = values[segment]
        elif len(segment) > 1 and segment.startswith(":"):
            logger.warning("No value given for path variable %s", segment)
    return host + "/".join(segments)


def find_url(args: list[str]) -> Optional[int]:
    for i, arg in enumerate(args):
        if is_url_like(arg):
            return i
    return None


def rewrite(args: list[str]) -> list[str]:
    """Return *args* with path variables of the URL argument substituted."""
    url_index = find_url(args)
    if url_index is None:
        logger.debug("No URL in %r, leaving arguments unchanged", args)
        return list(args)

    url = args[url_index]
    path_vars = extract_path_vars(url)
    if not path_vars:
        return list(args)

    values, remaining = split_assignments(args[url_index + 1:], path_vars)
    logger.debug("Path variables of %s: %r", url, values)
    return args[:url_index] + [replace_path_vars(url, values)] + remaining
