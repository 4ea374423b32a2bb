"""Unit tests for configuration loading and platform-aware defaults."""

from __future__ import annotations

from typing import TYPE_CHECKING

import platformdirs

from admindash.config import _DEFAULT_DATA_DIR, _DEFAULT_DB_PATH, CacheSettings, Settings

if TYPE_CHECKING:
    import pytest


class TestPlatformDefaults:
    """Verify config defaults use platformdirs instead of hardcoded Unix paths."""

    def test_default_data_dir_matches_platformdirs(self) -> None:
        expected = platformdirs.user_data_dir("admindash")
        assert expected == _DEFAULT_DATA_DIR

    def test_default_db_path_under_data_dir(self) -> None:
        assert _DEFAULT_DB_PATH.startswith(_DEFAULT_DATA_DIR)
        assert _DEFAULT_DB_PATH.endswith("cache.db")

    def test_cache_settings_uses_platform_default(self) -> None:
        settings = CacheSettings()
        assert settings.db_path == _DEFAULT_DB_PATH
        assert settings.tenant == "default"


class TestSettingsSources:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.api.timeout_seconds == 10.0
        assert settings.api.token is None
        assert settings.logging.format == "json"

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADMINDASH__API__BASE_URL", "https://admin.example.com")
        monkeypatch.setenv("ADMINDASH__CACHE__TENANT", "acme")
        monkeypatch.setenv("ADMINDASH__API__TIMEOUT_SECONDS", "2.5")
        settings = Settings()
        assert settings.api.base_url == "https://admin.example.com"
        assert settings.cache.tenant == "acme"
        assert settings.api.timeout_seconds == 2.5

    def test_constructor_args_win_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ADMINDASH__CACHE__TENANT", "acme")
        settings = Settings(cache={"tenant": "globex"})
        assert settings.cache.tenant == "globex"
