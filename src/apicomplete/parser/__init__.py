"""OpenAPI spec parser -- fetch a document and reduce it to the cache form.

This sub-package turns a remote OpenAPI 3.x JSON document into a
:class:`~apicomplete.models.CachedSpec` holding only what completion needs:
path templates, their HTTP methods, and their parameters.

Typical usage::

    from apicomplete.parser import extract_cached_spec, fetch_spec

    fetched = fetch_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    cached = extract_cached_spec(
        "petstore",
        fetched.url,
        fetched.document,
        fetched.openapi_version,
        fetched.fetched_at,
    )

Sub-modules:

* :mod:`~apicomplete.parser.loader` -- HTTP fetch, JSON decoding, and
  OpenAPI version validation.
* :mod:`~apicomplete.parser.extractor` -- Walks ``paths`` in declaration
  order and merges path-level and operation-level parameters.
"""

from apicomplete.parser.extractor import extract_cached_spec
from apicomplete.parser.loader import (
    FetchedDocument,
    fetch_spec,
    parse_document,
    validate_openapi_version,
)

__all__ = [
    "FetchedDocument",
    "extract_cached_spec",
    "fetch_spec",
    "parse_document",
    "validate_openapi_version",
]
