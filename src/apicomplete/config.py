"""Storage locations, atomic writes, and global configuration.

This module handles all persistent configuration for apicomplete:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.apicomplete/`` on macOS and Windows. The three directories are
  resolved once at startup into a :class:`StoragePaths` value which is then
  handed to everything that touches disk, so tests can point storage at a
  temporary directory without mutating the environment.
* **Global config** -- A single :class:`~apicomplete.models.GlobalConfig`
  JSON file storing fetch and completion defaults.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that a concurrently running invocation never reads
a half-written registry or cache file.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from apicomplete.exceptions import ConfigError
from apicomplete.models import GlobalConfig

_APP_NAME = "apicomplete"
_CONFIG_FILENAME = "config.json"
_HOME_ENV_VAR = "APICOMPLETE_HOME"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory (registry and ``config.json``).

    On Linux/BSD: ``$XDG_CONFIG_HOME/apicomplete/`` (default ``~/.config/apicomplete/``).
    On macOS/Windows: ``~/.apicomplete/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_cache_dir() -> Path:
    """Return the cache directory (parsed spec caches).

    Cached data can be safely deleted at any time; it is rebuilt by
    ``apicomplete spec refresh``.

    On Linux/BSD: ``$XDG_CACHE_HOME/apicomplete/`` (default ``~/.cache/apicomplete/``).
    On macOS/Windows: ``~/.apicomplete/cache/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    return _fallback_base_dir() / "cache"


def get_data_dir() -> Path:
    """Return the data directory (crash logs).

    On Linux/BSD: ``$XDG_DATA_HOME/apicomplete/`` (default ``~/.local/share/apicomplete/``).
    On macOS/Windows: ``~/.apicomplete/data/``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    return _fallback_base_dir() / "data"


@dataclass(frozen=True)
class StoragePaths:
    """The resolved set of directories apicomplete reads and writes.

    Directories are created lazily on first write, never on resolution, so
    read-only commands such as ``complete`` leave the filesystem untouched.

    Attributes:
        config_dir: Holds ``registry.json`` and ``config.json``.
        cache_dir: Holds ``specs/<name>.json`` cache files.
        data_dir: Holds ``logs/`` crash logs.
    """

    config_dir: Path
    cache_dir: Path
    data_dir: Path

    @classmethod
    def resolve(cls) -> StoragePaths:
        """Resolve storage paths from the environment.

        ``$APICOMPLETE_HOME`` wins when set and places all three directories
        under one root; otherwise the XDG (or fallback) locations are used.
        """
        home = os.environ.get(_HOME_ENV_VAR, "")
        if home:
            return cls.under(Path(home).expanduser())
        return cls(
            config_dir=get_config_dir(),
            cache_dir=get_cache_dir(),
            data_dir=get_data_dir(),
        )

    @classmethod
    def under(cls, root: Path) -> StoragePaths:
        """Lay out all three directories beneath a single *root*."""
        return cls(
            config_dir=root / "config",
            cache_dir=root / "cache",
            data_dir=root / "data",
        )

    @property
    def registry_file(self) -> Path:
        """Path to the registry of API entries."""
        return self.config_dir / "registry.json"

    @property
    def config_file(self) -> Path:
        """Path to the global config file."""
        return self.config_dir / _CONFIG_FILENAME

    @property
    def specs_dir(self) -> Path:
        """Directory holding one cache file per registered API."""
        return self.cache_dir / "specs"

    @property
    def logs_dir(self) -> Path:
        """Directory for crash logs."""
        return self.data_dir / "logs"


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def load_global_config(paths: StoragePaths) -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~apicomplete.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = paths.config_file
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read global config at {path}: {exc}") from exc


def save_global_config(paths: StoragePaths, config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk.

    Raises:
        ConfigError: If the file cannot be written.
    """
    data = config.model_dump(mode="json")
    try:
        atomic_write(paths.config_file, json.dumps(data, indent=2) + "\n")
    except OSError as exc:
        raise ConfigError(f"Cannot write global config at {paths.config_file}: {exc}") from exc
