"""Tests for apicomplete.config -- XDG paths, storage layout, atomic writes, global config."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from apicomplete.config import (
    StoragePaths,
    atomic_write,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    load_global_config,
    save_global_config,
)
from apicomplete.exceptions import ConfigError
from apicomplete.models import CompletionConfig, GlobalConfig, RequestConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "apicomplete"

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "apicomplete"

    def test_cache_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CACHE_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_cache_dir() == tmp_path / ".cache" / "apicomplete"

    def test_data_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_data"
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(custom))

        assert get_data_dir() == custom / "apicomplete"

    def test_resolution_does_not_create_directories(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))

        get_config_dir()
        assert not (tmp_path / "cfg").exists()


class TestXDGPathsFallback:
    """Fallback paths on non-XDG platforms (macOS, Windows)."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".apicomplete"

    def test_cache_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_cache_dir() == tmp_path / ".apicomplete" / "cache"

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".apicomplete" / "data"


# ---------------------------------------------------------------------------
# StoragePaths
# ---------------------------------------------------------------------------


class TestStoragePaths:
    def test_under_lays_out_three_directories(self, tmp_path: Path) -> None:
        paths = StoragePaths.under(tmp_path)
        assert paths.config_dir == tmp_path / "config"
        assert paths.cache_dir == tmp_path / "cache"
        assert paths.data_dir == tmp_path / "data"

    def test_file_locations(self, tmp_path: Path) -> None:
        paths = StoragePaths.under(tmp_path)
        assert paths.registry_file == tmp_path / "config" / "registry.json"
        assert paths.config_file == tmp_path / "config" / "config.json"
        assert paths.specs_dir == tmp_path / "cache" / "specs"
        assert paths.logs_dir == tmp_path / "data" / "logs"

    def test_resolve_uses_xdg(self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("apicomplete.config._is_xdg_platform", lambda: True)

        paths = StoragePaths.resolve()
        assert paths.config_dir == isolated_env / "xdg-config" / "apicomplete"
        assert paths.cache_dir == isolated_env / "xdg-cache" / "apicomplete"
        assert paths.data_dir == isolated_env / "xdg-data" / "apicomplete"

    def test_home_env_var_overrides_xdg(
        self, isolated_env: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APICOMPLETE_HOME", str(isolated_env / "home"))

        assert StoragePaths.resolve() == StoragePaths.under(isolated_env / "home")

    def test_is_immutable(self, tmp_path: Path) -> None:
        paths = StoragePaths.under(tmp_path)
        with pytest.raises(AttributeError):
            paths.config_dir = tmp_path  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c" / "test.txt"
        atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("previous", encoding="utf-8")
        with patch("apicomplete.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                atomic_write(target, "will fail")
        # The previous content survives and no temp file remains.
        assert target.read_text(encoding="utf-8") == "previous"
        assert [f for f in tmp_path.iterdir() if ".tmp" in f.name] == []

    def test_unicode_content(self, tmp_path: Path) -> None:
        target = tmp_path / "unicode.txt"
        content = "Hello 世界 \U0001f30d éàüñ"
        atomic_write(target, content)
        assert target.read_text(encoding="utf-8") == content


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, storage_paths: StoragePaths) -> None:
        cfg = load_global_config(storage_paths)
        assert cfg == GlobalConfig()
        assert cfg.request.timeout == 10.0
        assert cfg.completion.descriptions is False
        assert cfg.completion.commands == ["http", "https"]

    def test_save_and_load_roundtrip(self, storage_paths: StoragePaths) -> None:
        original = GlobalConfig(
            request=RequestConfig(timeout=3.5, verify_ssl=False),
            completion=CompletionConfig(descriptions=True, commands=["http"]),
        )
        save_global_config(storage_paths, original)
        assert load_global_config(storage_paths) == original

    def test_load_invalid_json_raises_config_error(self, storage_paths: StoragePaths) -> None:
        storage_paths.config_dir.mkdir(parents=True)
        storage_paths.config_file.write_text("{invalid json!!!", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config(storage_paths)

    def test_load_invalid_schema_raises_config_error(self, storage_paths: StoragePaths) -> None:
        _write_json(storage_paths.config_file, {"request": {"timeout": -1}})

        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config(storage_paths)

    def test_saved_config_is_valid_json(self, storage_paths: StoragePaths) -> None:
        save_global_config(storage_paths, GlobalConfig())
        data = json.loads(storage_paths.config_file.read_text(encoding="utf-8"))
        assert set(data) == {"request", "completion"}
