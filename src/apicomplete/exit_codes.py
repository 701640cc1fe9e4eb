"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apicomplete.exceptions.ApiCompleteError` subclass.
Shell wrappers can inspect the exit code to tell a missing API apart from an
unreachable spec URL without parsing stderr.

Example::

    $ apicomplete spec remove nope
    $ echo $?
    4   # EXIT_NOT_FOUND -- no API registered under that name
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments (including duplicate names)."""

EXIT_NOT_FOUND = 4
"""The named API (or path) is not in the registry."""

EXIT_HTTP_STATUS = 5
"""The spec URL answered with a non-2xx HTTP status."""

EXIT_UNREACHABLE = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The fetched document is not a usable OpenAPI 3.x JSON document."""

EXIT_STORAGE_ERROR = 8
"""The registry or a cache file could not be read or written."""
