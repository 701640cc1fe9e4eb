"""Exception hierarchy for apicomplete.

All exceptions inherit from :class:`ApiCompleteError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apicomplete.exit_codes`.
The top-level error handler in :func:`apicomplete.app.main` catches
``ApiCompleteError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ApiCompleteError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- DuplicateNameError   (exit 2)
    +-- NotFoundError        (exit 4)
    +-- FetchError           (exit 6)
    |   +-- UnreachableError (exit 6)
    |   +-- HttpStatusError  (exit 5)
    |   +-- SpecParseError   (exit 7)
    +-- StorageError         (exit 8)
    +-- ConfigError          (exit 1)
"""

from typing import Optional

from apicomplete.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_HTTP_STATUS,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_STORAGE_ERROR,
    EXIT_UNREACHABLE,
)


class ApiCompleteError(Exception):
    """Base exception for all apicomplete errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apicomplete.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApiCompleteError):
    """Raised for invalid CLI arguments such as an unusable API name."""

    exit_code = EXIT_INVALID_USAGE


class DuplicateNameError(ApiCompleteError):
    """Raised when ``spec add`` targets a name that is already registered without ``--force``."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(ApiCompleteError):
    """Raised when a name is absent from the registry."""

    exit_code = EXIT_NOT_FOUND


class FetchError(ApiCompleteError):
    """Base class for failures while retrieving or parsing a spec document.

    Args:
        message: Human-readable error description.
        url: The spec URL that was being fetched.
    """

    exit_code = EXIT_UNREACHABLE

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url


class UnreachableError(FetchError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused)."""

    exit_code = EXIT_UNREACHABLE


class HttpStatusError(FetchError):
    """Raised when the spec URL answers with a non-2xx status.

    Args:
        message: Human-readable error description.
        url: The spec URL that was fetched.
        status_code: The HTTP status code of the response.
    """

    exit_code = EXIT_HTTP_STATUS

    def __init__(self, message: str, url: str = "", status_code: int = 0):
        super().__init__(message, url=url)
        self.status_code = status_code


class SpecParseError(FetchError):
    """Raised when the fetched body is not a usable OpenAPI 3.x JSON document.

    Args:
        message: Human-readable error description.
        url: The spec URL that was fetched.
        location: Where in the document the problem was found, e.g.
            ``"line 3 column 7"`` or ``"/paths"``.
    """

    exit_code = EXIT_SPEC_PARSE_ERROR

    def __init__(self, message: str, url: str = "", location: Optional[str] = None):
        if location:
            message = f"{message} (at {location})"
        super().__init__(message, url=url)
        self.location = location


class StorageError(ApiCompleteError):
    """Raised when the registry or a cache file cannot be read or written."""

    exit_code = EXIT_STORAGE_ERROR


class ConfigError(ApiCompleteError):
    """Raised for configuration problems (invalid JSON, unknown keys)."""

    exit_code = EXIT_GENERIC_FAILURE
