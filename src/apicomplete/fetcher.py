"""Fetch/cache lifecycle for registered APIs.

:class:`SpecFetcher` is the only component that combines network access
with the :class:`~apicomplete.store.SpecStore`. It enforces the ordering
rules that keep the registry consistent:

* a new entry is written to the registry only after its spec has been
  fetched and parsed successfully;
* a refresh replaces the cache only after the new fetch succeeded, so a
  failed refresh leaves the previous cache intact;
* looking up an unknown name fails before any request is sent.
"""

from __future__ import annotations

import logging
from typing import Optional

from apicomplete.exceptions import DuplicateNameError
from apicomplete.models import ApiEntry, CachedSpec, RequestConfig
from apicomplete.parser import extract_cached_spec, fetch_spec
from apicomplete.store import SpecStore, validate_name

logger = logging.getLogger(__name__)


class SpecFetcher:
    """Fetch specs for registry entries and keep their caches current.

    Args:
        store: The registry and cache store to update.
        request: HTTP settings for fetches; defaults apply when omitted.
    """

    def __init__(self, store: SpecStore, request: Optional[RequestConfig] = None) -> None:
        self._store = store
        self._request = request or RequestConfig()

    def fetch(self, entry: ApiEntry) -> CachedSpec:
        """Fetch and parse the spec of *entry* without touching the store."""
        fetched = fetch_spec(entry.spec_url, self._request)
        return extract_cached_spec(
            entry.name,
            entry.spec_url,
            fetched.document,
            fetched.openapi_version,
            fetched.fetched_at,
        )

    def refresh(self, entry: ApiEntry) -> CachedSpec:
        """Re-fetch the spec of *entry* unconditionally and replace its cache.

        Raises:
            FetchError: If the fetch or parse fails; the old cache is kept.
        """
        cached = self.fetch(entry)
        self._store.save_cache(entry.name, cached)
        logger.info("Refreshed '%s' (%d paths)", entry.name, len(cached.paths))
        return cached

    def refresh_by_name(self, name: str) -> CachedSpec:
        """Refresh the entry registered under *name*.

        Raises:
            NotFoundError: If *name* is not registered. No request is made.
        """
        return self.refresh(self._store.get(name))

    def register(self, entry: ApiEntry, force: bool = False) -> CachedSpec:
        """Fetch the spec of *entry*, then add it to the registry.

        Args:
            entry: The entry to register.
            force: Overwrite an existing entry with the same name.

        Raises:
            DuplicateNameError: If the name is taken and *force* is false.
            FetchError: If the initial fetch fails; nothing is persisted.
        """
        validate_name(entry.name)
        if not force and self._store.exists(entry.name):
            raise DuplicateNameError(
                f"API '{entry.name}' already exists. Use --force to overwrite."
            )
        cached = self.fetch(entry)
        self._store.upsert(entry)
        self._store.save_cache(entry.name, cached)
        logger.info("Registered '%s' with base URL %s", entry.name, entry.base_url)
        return cached

    def ensure_cache(self, entry: ApiEntry) -> CachedSpec:
        """Return the cache of *entry*, fetching it first when missing."""
        cached = self._store.load_cache(entry.name)
        if cached is not None:
            return cached
        logger.info("No usable cache for '%s', fetching %s", entry.name, entry.spec_url)
        return self.refresh(entry)
