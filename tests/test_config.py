"""Tests for YAML configuration loading and environment settings."""

from pathlib import Path

import pytest

from soilviz.config import (
    ProviderConfig,
    clear_config_cache,
    get_config_dir,
    get_interpretations_config,
    get_provider_config,
    get_provider_or_default,
    get_providers_config,
    get_settings,
    get_soil_properties_config,
    load_yaml_config,
    validate_config,
)


@pytest.fixture
def custom_config_dir(tmp_path, monkeypatch):
    """Point SOILVIZ_CONFIG_DIR at an empty directory for the test."""
    monkeypatch.setenv("SOILVIZ_CONFIG_DIR", str(tmp_path))
    clear_config_cache()
    yield tmp_path
    monkeypatch.delenv("SOILVIZ_CONFIG_DIR")
    clear_config_cache()


class TestConfigFiles:
    """Test loading of the bundled configuration files."""

    def test_config_dir_exists(self):
        """Test that the default config directory is found."""
        config_dir = get_config_dir()
        assert (config_dir / "providers.yaml").exists()

    def test_all_files_validate(self):
        """Test that all bundled configuration files load."""
        assert validate_config() is True

    def test_providers_config_has_services(self):
        """Test that every upstream service family is configured."""
        config = get_providers_config()
        assert {"ssurgo", "osd", "esd", "cdl"} <= set(config)

    def test_interpretations_config(self):
        """Test interpretation tables are present."""
        config = get_interpretations_config()
        assert set(config["land_capability"]["classes"]) == {str(i) for i in range(1, 9)}
        assert {"e", "w", "s", "c"} <= set(config["land_capability"]["subclasses"])

    def test_soil_properties_config(self):
        """Test property ranges and metadata share the same properties."""
        config = get_soil_properties_config()
        assert set(config["ranges"]) == set(config["metadata"])


class TestProviderConfig:
    """Test provider lookups."""

    def test_get_provider_config(self):
        """Test lookup of a configured provider."""
        provider = get_provider_config("ssurgo", "sda")

        assert isinstance(provider, ProviderConfig)
        assert "SDMDataAccess" in provider.endpoint
        assert provider.interpretation_timeout_s == 15.0

    def test_cdl_years(self):
        """Test the CropScape year range."""
        provider = get_provider_config("cdl", "cropscape")
        assert provider.first_year == 2008
        assert provider.last_year == 2023

    def test_unknown_provider_returns_none(self):
        """Test that an unknown provider yields None."""
        assert get_provider_config("ssurgo", "nonexistent") is None

    def test_default_used_for_unknown_provider(self):
        """Test the fallback to a built-in default."""
        default = ProviderConfig(endpoint="https://example.org")
        assert get_provider_or_default("esd", "missing", default) is default

    def test_default_used_when_config_missing(self, custom_config_dir):
        """Test the fallback when providers.yaml is absent."""
        default = ProviderConfig(endpoint="https://example.org")
        assert get_provider_or_default("esd", "edit", default) is default


class TestYamlLoading:
    """Test YAML loading errors."""

    def test_missing_file(self, custom_config_dir):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config("nope.yaml")

    def test_invalid_yaml(self, custom_config_dir):
        """Test that malformed YAML raises ValueError."""
        (custom_config_dir / "bad.yaml").write_text("key: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_yaml_config("bad.yaml")

    def test_empty_yaml(self, custom_config_dir):
        """Test that an empty file loads as an empty dict."""
        (custom_config_dir / "empty.yaml").write_text("")
        assert load_yaml_config("empty.yaml") == {}

    def test_missing_config_dir(self, tmp_path, monkeypatch):
        """Test that a missing config directory is reported."""
        monkeypatch.setenv("SOILVIZ_CONFIG_DIR", str(tmp_path / "absent"))
        clear_config_cache()
        try:
            with pytest.raises(FileNotFoundError):
                get_config_dir()
        finally:
            monkeypatch.delenv("SOILVIZ_CONFIG_DIR")
            clear_config_cache()


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default settings without environment overrides."""
        for var in ("CACHE_NAME", "CACHE_EXPIRE_S", "SOILVIZ_OSD_DESCRIPTIONS", "SOILVIZ_OSD_DIR"):
            monkeypatch.delenv(var, raising=False)

        settings = get_settings()

        assert settings.cache.cache_name == "cache/http"
        assert settings.cache.expire_after_s == 86400
        assert settings.osd_descriptions_path is None

    def test_environment_overrides(self, monkeypatch, tmp_path):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("SOILVIZ_OSD_DESCRIPTIONS", str(tmp_path / "osd.json"))
        monkeypatch.setenv("SOILVIZ_OSD_DIR", str(tmp_path))
        monkeypatch.setenv("CACHE_EXPIRE_S", "3600")

        settings = get_settings()

        assert settings.osd_descriptions_path == Path(tmp_path / "osd.json")
        assert settings.osd_dir == tmp_path
        assert settings.cache.expire_after_s == 3600

    def test_settings_are_cached(self):
        """Test that settings are built once until the cache is cleared."""
        assert get_settings() is get_settings()
