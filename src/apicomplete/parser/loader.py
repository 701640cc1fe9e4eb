"""Fetch OpenAPI documents over HTTP and decode them into dictionaries.

This module handles all network I/O for spec documents. A document is
fetched with a single bounded GET request (no retries), decoded as JSON, and
checked for a supported OpenAPI version (3.0.x or 3.1.x).

The public functions are:

* :func:`fetch_spec` -- GET a spec URL and return a :class:`FetchedDocument`.
* :func:`parse_document` -- Decode a JSON body into a spec dictionary.
* :func:`validate_openapi_version` -- Check and return the ``openapi``
  version string, rejecting Swagger 2.x and unsupported versions.

Failures are reported through the :class:`~apicomplete.exceptions.FetchError`
family so the caller can tell an unreachable host from a bad status or a
malformed document.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

import httpx

from apicomplete.exceptions import HttpStatusError, SpecParseError, UnreachableError
from apicomplete.models import RequestConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedDocument:
    """A decoded spec document and when the server says it was produced.

    Attributes:
        url: The URL that was fetched.
        document: The decoded JSON object.
        openapi_version: The validated ``openapi`` version string.
        fetched_at: Taken from ``Date``, then ``Last-Modified``, then the
            local clock.
    """

    url: str
    document: dict[str, Any]
    openapi_version: str
    fetched_at: datetime


def fetch_spec(url: str, request: Optional[RequestConfig] = None) -> FetchedDocument:
    """GET *url* and decode the body as an OpenAPI 3.x JSON document.

    Args:
        url: The HTTP(S) URL of the spec.
        request: Timeout and TLS settings; defaults apply when omitted.

    Returns:
        The decoded document.

    Raises:
        UnreachableError: On timeouts, DNS failures, refused connections, or
            an unusable URL.
        HttpStatusError: If the server answers with a non-2xx status.
        SpecParseError: If the body is not a usable OpenAPI 3.x document.
    """
    request = request or RequestConfig()
    logger.debug("Fetching spec from %s (timeout=%ss)", url, request.timeout)
    try:
        response = httpx.get(
            url,
            timeout=request.timeout,
            follow_redirects=request.follow_redirects,
            verify=request.verify_ssl,
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        raise HttpStatusError(
            f"HTTP {status} fetching spec from {url}", url=url, status_code=status
        ) from exc
    except httpx.RequestError as exc:
        raise UnreachableError(f"Failed to fetch spec from {url}: {exc}", url=url) from exc
    except httpx.InvalidURL as exc:
        raise UnreachableError(f"Invalid spec URL {url}: {exc}", url=url) from exc

    document = parse_document(response.text, url=url)
    version = validate_openapi_version(document, url=url)
    logger.debug("Fetched OpenAPI %s document from %s", version, url)
    return FetchedDocument(
        url=url,
        document=document,
        openapi_version=version,
        fetched_at=_response_timestamp(response.headers),
    )


def parse_document(content: str, url: str = "") -> dict[str, Any]:
    """Decode *content* as a JSON object.

    Raises:
        SpecParseError: If the content is empty, not JSON, or not a JSON
            object. JSON syntax errors carry a ``line N column M`` location.
    """
    if not content.strip():
        raise SpecParseError("Spec document is empty", url=url)
    try:
        result = json.loads(content)
    except json.JSONDecodeError as exc:
        raise SpecParseError(
            f"Invalid JSON: {exc.msg}",
            url=url,
            location=f"line {exc.lineno} column {exc.colno}",
        ) from exc
    except RecursionError as exc:
        raise SpecParseError("JSON nesting too deep", url=url) from exc
    if not isinstance(result, dict):
        raise SpecParseError(
            f"Spec must be a JSON object (got {type(result).__name__})",
            url=url,
            location="/",
        )
    return result


def validate_openapi_version(spec: dict[str, Any], url: str = "") -> str:
    """Validate and return the OpenAPI version string.

    Supports OpenAPI 3.x. Raises for Swagger 2.x, missing version fields,
    or other versions.

    Raises:
        SpecParseError: If the version is missing, unsupported, or indicates
            Swagger 2.x.
    """
    if "swagger" in spec:
        swagger_ver = str(spec["swagger"])
        raise SpecParseError(
            f"Swagger {swagger_ver} is not supported. "
            "Only OpenAPI 3.0.x and 3.1.x are supported. "
            "Consider converting with https://converter.swagger.io",
            url=url,
            location="/swagger",
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?",
            url=url,
            location="/openapi",
        )

    version_str = str(openapi_version)
    if version_str.startswith("3."):
        return version_str

    raise SpecParseError(
        f"Unsupported OpenAPI version: {version_str}. "
        "Only OpenAPI 3.0.x and 3.1.x are supported.",
        url=url,
        location="/openapi",
    )


def _response_timestamp(headers: httpx.Headers) -> datetime:
    """Pick a reproducible timestamp for a response."""
    for name in ("date", "last-modified"):
        value = headers.get(name)
        if not value:
            continue
        try:
            stamp = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring unparsable %s header: %r", name, value)
            continue
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        return stamp.astimezone(timezone.utc)
    return datetime.now(timezone.utc)
