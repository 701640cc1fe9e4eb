"""Canonical Pydantic models shared across all apicomplete modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`CompletionConfig`, and :class:`GlobalConfig`.

**Registry models** -- the authoritative, user-owned data:
    :class:`ApiEntry` and :class:`Registry`.

**Cache models** -- derived from a fetched OpenAPI document and safe to delete
at any time:
    :class:`HTTPMethod`, :class:`ParamLocation`, :class:`ParamEntry`,
    :class:`PathEntry`, and :class:`CachedSpec`.

Registry and cache are persisted in separate files joined by the API name;
no registry model embeds cached data.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator, model_validator


# --- Config ---


class RequestConfig(BaseModel):
    """HTTP settings used when fetching spec documents."""

    timeout: float = Field(default=10.0, gt=0, description="Fetch timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow 3xx redirects")


class CompletionConfig(BaseModel):
    """Defaults for the ``complete`` and ``completions`` commands."""

    descriptions: bool = Field(
        default=False, description="Append a tab-separated description to each candidate"
    )
    commands: list[str] = Field(
        default_factory=lambda: ["http", "https"],
        description="Commands the generated shell script attaches completion to",
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``<config_dir>/config.json``.

    Loaded and saved by :func:`~apicomplete.config.load_global_config` and
    :func:`~apicomplete.config.save_global_config`.
    """

    request: RequestConfig = Field(default_factory=RequestConfig)
    completion: CompletionConfig = Field(default_factory=CompletionConfig)


# --- Registry ---


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of *url*, or ``""`` if it has none."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme}://{parts.netloc}"


class ApiEntry(BaseModel):
    """A user-registered API: a name, where its spec lives, and where it is served.

    ``base_url`` defaults to the origin of ``spec_url`` when it is omitted.
    A trailing ``/`` is stripped so that ``base_url + template`` never
    produces a double slash.
    """

    name: str = Field(min_length=1)
    spec_url: str = Field(min_length=1)
    base_url: str = ""

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _default_base_url(self) -> ApiEntry:
        if not self.base_url:
            self.base_url = origin_of(self.spec_url)
        return self


class Registry(BaseModel):
    """On-disk shape of ``registry.json``: API entries in insertion order."""

    apis: list[ApiEntry] = Field(default_factory=list)


# --- Cache ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParamLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class ParamEntry(BaseModel):
    """A parameter of a path, kept only for rendering completion text."""

    name: str
    location: ParamLocation
    required: bool = False
    description: Optional[str] = None


class PathEntry(BaseModel):
    """One path template from the source document and what it accepts.

    ``parameters`` is the merge of path-level and operation-level
    declarations across every operation of the path.
    """

    template: str
    methods: list[HTTPMethod] = Field(default_factory=list)
    summary: Optional[str] = None
    parameters: list[ParamEntry] = Field(default_factory=list)

    @field_validator("template")
    @classmethod
    def _must_be_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"path template must start with '/': {value!r}")
        return value


class CachedSpec(BaseModel):
    """Parsed, locally stored form of a fetched OpenAPI document.

    ``paths`` keeps the source document's declaration order; completion
    ranking depends on it.
    """

    owner: str
    spec_url: str
    fetched_at: datetime
    openapi_version: str
    title: Optional[str] = None
    paths: list[PathEntry] = Field(default_factory=list)
