"""Build a :class:`~apicomplete.models.CachedSpec` from a decoded OpenAPI document.

This module walks the document's ``paths`` object in declaration order and
produces one :class:`~apicomplete.models.PathEntry` per path template, with
the HTTP methods it supports and the parameters it accepts.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values. Because a path entry aggregates
every operation of the path, parameters are merged across operations too: the
first declaration of a ``(name, in)`` pair fixes its position, and an
operation-level declaration replaces a path-level one in place.

``$ref`` parameters are not resolved and are skipped.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from apicomplete.exceptions import SpecParseError
from apicomplete.models import CachedSpec, HTTPMethod, ParamEntry, ParamLocation, PathEntry

logger = logging.getLogger(__name__)

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def extract_cached_spec(
    owner: str,
    spec_url: str,
    document: dict[str, Any],
    openapi_version: str,
    fetched_at: datetime,
) -> CachedSpec:
    """Convert a decoded OpenAPI document into the cache form.

    Args:
        owner: Name of the API entry the cache belongs to.
        spec_url: URL the document was fetched from.
        document: The decoded OpenAPI document.
        openapi_version: The validated ``openapi`` version string.
        fetched_at: Timestamp recorded on the cache.

    Raises:
        SpecParseError: If ``paths`` is not an object or a key does not
            start with ``/``.

    Example::

        fetched = fetch_spec("https://petstore3.swagger.io/api/v3/openapi.json")
        cached = extract_cached_spec(
            "petstore", fetched.url, fetched.document,
            fetched.openapi_version, fetched.fetched_at,
        )
        for path in cached.paths:
            print(path.template, [m.value for m in path.methods])
    """
    info = document.get("info")
    title = info.get("title") if isinstance(info, dict) else None
    return CachedSpec(
        owner=owner,
        spec_url=spec_url,
        fetched_at=fetched_at,
        openapi_version=openapi_version,
        title=title if isinstance(title, str) else None,
        paths=_extract_paths(document, spec_url),
    )


def _extract_paths(document: dict[str, Any], spec_url: str) -> list[PathEntry]:
    """Walk ``paths`` in declaration order.

    Path items that are not objects (or are ``$ref`` path items) are
    skipped rather than rejected.
    """
    paths = document.get("paths", {})
    if paths is None:
        return []
    if not isinstance(paths, dict):
        raise SpecParseError(
            f"'paths' must be an object (got {type(paths).__name__})",
            url=spec_url,
            location="/paths",
        )

    entries: list[PathEntry] = []
    for template, path_item in paths.items():
        if isinstance(template, str) and template.startswith("x-"):
            logger.debug("Skipping paths extension %s", template)
            continue
        if not isinstance(template, str) or not template.startswith("/"):
            raise SpecParseError(
                f"Path template must start with '/': {template!r}",
                url=spec_url,
                location="/paths",
            )
        if not isinstance(path_item, dict) or "$ref" in path_item:
            logger.debug("Skipping path %s: not an inline path item", template)
            continue
        entries.append(_extract_path(template, path_item))

    logger.debug("Extracted %d paths", len(entries))
    return entries


def _extract_path(template: str, path_item: dict[str, Any]) -> PathEntry:
    """Build one :class:`PathEntry` from a path item object."""
    path_params = _as_param_list(path_item.get("parameters"))
    methods: list[HTTPMethod] = []
    summary: Optional[str] = None
    merged: list[dict[str, Any]] = list(path_params)

    # Operation keys are visited in document order, not enum order.
    for key, operation in path_item.items():
        if key not in _HTTP_METHODS or not isinstance(operation, dict):
            continue
        methods.append(HTTPMethod(key))
        if summary is None and isinstance(operation.get("summary"), str):
            summary = operation["summary"]
        op_params = _as_param_list(operation.get("parameters"))
        merged = _merge_parameters(merged, op_params, overridable=path_params)

    if not methods:
        # A path without operations still contributes its own parameters.
        merged = list(path_params)

    return PathEntry(
        template=template,
        methods=methods,
        summary=summary or _as_str(path_item.get("summary")),
        parameters=_extract_parameters(merged),
    )


def _merge_parameters(
    merged: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
    overridable: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge one operation's parameters into the running list.

    An operation-level parameter replaces a path-level one with the same
    ``(name, in)`` key in place. A key already contributed by an earlier
    operation is kept as first declared. New keys are appended.
    """
    overridable_keys = {_param_key(p) for p in overridable}
    positions = {_param_key(p): i for i, p in enumerate(merged)}
    result = list(merged)

    for param in op_params:
        key = _param_key(param)
        if key not in positions:
            positions[key] = len(result)
            result.append(param)
        elif key in overridable_keys and result[positions[key]] in overridable:
            result[positions[key]] = param
    return result


def _extract_parameters(params_list: list[dict[str, Any]]) -> list[ParamEntry]:
    """Convert raw parameter objects into :class:`ParamEntry` models.

    Parameters with an unrecognised ``in`` value or no name are skipped.
    Path parameters are always required.
    """
    parameters: list[ParamEntry] = []
    for param in params_list:
        name = param.get("name")
        if not isinstance(name, str) or not name:
            continue
        try:
            location = ParamLocation(param.get("in", ""))
        except ValueError:
            logger.debug("Skipping parameter %r with location %r", name, param.get("in"))
            continue

        required = bool(param.get("required", False))
        if location == ParamLocation.PATH:
            required = True

        parameters.append(
            ParamEntry(
                name=name,
                location=location,
                required=required,
                description=_as_str(param.get("description")),
            )
        )
    return parameters


def _as_param_list(value: Any) -> list[dict[str, Any]]:
    """Keep only inline parameter objects; ``$ref`` entries are dropped."""
    if not isinstance(value, list):
        return []
    return [p for p in value if isinstance(p, dict) and "$ref" not in p]


def _param_key(param: dict[str, Any]) -> tuple[str, str]:
    return (str(param.get("name", "")), str(param.get("in", "")))


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None
