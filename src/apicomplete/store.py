"""Registry of API entries and their cached specs.

:class:`SpecStore` owns two independently keyed stores joined by the API
name:

* the **registry** -- ``<config_dir>/registry.json``, the authoritative list
  of :class:`~apicomplete.models.ApiEntry` objects in insertion order;
* the **cache** -- ``<cache_dir>/specs/<name>.json``, one disposable
  :class:`~apicomplete.models.CachedSpec` per entry.

Every mutating call writes through :func:`~apicomplete.config.atomic_write`
before returning. A cache file that is missing, unreadable, or malformed is
reported as ``None`` (missing) and never raises; a malformed registry is a
:class:`~apicomplete.exceptions.StorageError`.

Example::

    from apicomplete.config import StoragePaths
    from apicomplete.store import SpecStore

    store = SpecStore(StoragePaths.resolve())
    for entry in store.list():
        print(entry.name, entry.base_url)
"""

from __future__ import annotations

import contextlib
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from apicomplete.config import StoragePaths, atomic_write
from apicomplete.exceptions import InvalidUsageError, NotFoundError, StorageError
from apicomplete.models import ApiEntry, CachedSpec, Registry

logger = logging.getLogger(__name__)


def validate_name(name: str) -> str:
    """Reject API names that cannot double as a cache file name.

    Raises:
        InvalidUsageError: If *name* is empty, contains a path separator,
            or starts with ``.``.
    """
    if not name or not name.strip():
        raise InvalidUsageError("API name must not be empty")
    if "/" in name or "\\" in name or name.startswith("."):
        raise InvalidUsageError(
            f"Invalid API name '{name}': must not contain '/' or '\\' or start with '.'"
        )
    return name


class SpecStore:
    """Persistent registry of :class:`ApiEntry` objects plus their caches.

    The registry is read lazily on first use and kept in memory for the rest
    of the invocation; each mutation rewrites the whole file.

    Args:
        paths: Resolved storage locations.
    """

    def __init__(self, paths: StoragePaths) -> None:
        self._paths = paths
        self._registry: Optional[Registry] = None

    @property
    def paths(self) -> StoragePaths:
        return self._paths

    # ------------------------------------------------------------------ #
    # Registry
    # ------------------------------------------------------------------ #

    def list(self) -> list[ApiEntry]:
        """Return all entries in insertion order."""
        return list(self._load_registry().apis)

    def names(self) -> list[str]:
        return [entry.name for entry in self._load_registry().apis]

    def exists(self, name: str) -> bool:
        return any(entry.name == name for entry in self._load_registry().apis)

    def get(self, name: str) -> ApiEntry:
        """Look up an entry by name.

        Raises:
            NotFoundError: If no entry is registered under *name*.
        """
        for entry in self._load_registry().apis:
            if entry.name == name:
                return entry
        raise NotFoundError(f"API '{name}' not found")

    def upsert(self, entry: ApiEntry) -> None:
        """Insert *entry*, or overwrite the entry with the same name in place.

        An existing cache survives only when ``spec_url`` is unchanged;
        otherwise it is cleared so the next use refetches.
        """
        validate_name(entry.name)
        registry = self._load_registry()
        apis = list(registry.apis)
        for i, existing in enumerate(apis):
            if existing.name == entry.name:
                apis[i] = entry
                stale = existing.spec_url != entry.spec_url
                break
        else:
            apis.append(entry)
            stale = False

        self._save_registry(Registry(apis=apis))
        if stale:
            logger.debug("spec_url of '%s' changed, clearing cache", entry.name)
            self.clear_cache(entry.name)

    def remove(self, name: str) -> None:
        """Remove an entry and its cache.

        Raises:
            NotFoundError: If no entry is registered under *name*.
        """
        registry = self._load_registry()
        apis = [entry for entry in registry.apis if entry.name != name]
        if len(apis) == len(registry.apis):
            raise NotFoundError(f"API '{name}' not found")
        self.clear_cache(name)
        self._save_registry(Registry(apis=apis))

    # ------------------------------------------------------------------ #
    # Cache
    # ------------------------------------------------------------------ #

    def cache_path(self, name: str) -> Path:
        return self._paths.specs_dir / f"{validate_name(name)}.json"

    def load_cache(self, name: str) -> Optional[CachedSpec]:
        """Load the cached spec for *name*, or ``None`` when it is missing or unusable."""
        try:
            path = self.cache_path(name)
        except InvalidUsageError:
            return None
        if not path.is_file():
            return None
        try:
            cached = CachedSpec.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable cache %s: %s", path, exc)
            return None
        if cached.owner != name:
            logger.warning("Ignoring cache %s owned by '%s'", path, cached.owner)
            return None
        return cached

    def save_cache(self, name: str, cached: CachedSpec) -> None:
        """Persist *cached* as the cache of *name*.

        Raises:
            StorageError: If the file cannot be written.
        """
        path = self.cache_path(name)
        data = cached.model_dump(mode="json")
        try:
            atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise StorageError(f"Cannot write cache {path}: {exc}") from exc
        logger.debug("Saved %d paths for '%s' to %s", len(cached.paths), name, path)

    def clear_cache(self, name: str) -> None:
        """Delete the cache of *name*; a missing cache is not an error.

        The ``specs/`` directory and the cache directory are removed too once
        they are empty.
        """
        path = self.cache_path(name)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Cannot delete cache {path}: {exc}") from exc
        for directory in (self._paths.specs_dir, self._paths.cache_dir):
            with contextlib.suppress(OSError):
                directory.rmdir()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _load_registry(self) -> Registry:
        if self._registry is not None:
            return self._registry
        path = self._paths.registry_file
        if not path.is_file():
            self._registry = Registry()
            return self._registry
        try:
            text = path.read_text(encoding="utf-8")
            registry = Registry.model_validate_json(text)
        except OSError as exc:
            raise StorageError(f"Cannot read registry {path}: {exc}") from exc
        except ValidationError as exc:
            raise StorageError(f"Invalid registry at {path}: {exc}") from exc

        seen: set[str] = set()
        for entry in registry.apis:
            if entry.name in seen:
                raise StorageError(f"Invalid registry at {path}: duplicate name '{entry.name}'")
            seen.add(entry.name)
        self._registry = registry
        return registry

    def _save_registry(self, registry: Registry) -> None:
        path = self._paths.registry_file
        data = registry.model_dump(mode="json")
        try:
            if not registry.apis:
                # An empty registry is stored as no file at all.
                path.unlink(missing_ok=True)
                with contextlib.suppress(OSError):
                    path.parent.rmdir()
                self._registry = registry
                return
            atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise StorageError(f"Cannot write registry {path}: {exc}") from exc
        self._registry = registry
