"""Configuration management for soilviz.

Endpoints, interpretation tables and property classification ranges live in
YAML files under the project's ``config/`` directory. Environment variables
(optionally from a ``.env`` file) override runtime paths and cache settings.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from soilviz.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_FILES = ("providers.yaml", "interpretations.yaml", "soil_properties.yaml")


class CacheSettings(BaseModel):
    """HTTP cache configuration."""

    backend: str = "sqlite"
    cache_name: str = "cache/http"
    allowable_codes: tuple[int, ...] = (200,)
    expire_after_s: int = 86400


class AppSettings(BaseModel):
    """Main application settings."""

    cache: CacheSettings = CacheSettings()
    osd_descriptions_path: Path | None = Field(
        None, description="Generated OSD description database (JSON)"
    )
    osd_dir: Path | None = Field(
        None, description="Directory of raw OSD text files, one subdirectory per letter"
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Build settings from the environment.

    ``.env`` is loaded here rather than at import time so that tests can
    control the environment before the first call.
    """
    load_dotenv(override=False)

    cache = CacheSettings(
        backend=os.getenv("CACHE_BACKEND", "sqlite").lower(),
        cache_name=os.getenv("CACHE_NAME", "cache/http"),
        expire_after_s=int(os.getenv("CACHE_EXPIRE_S", "86400")),
    )
    descriptions = os.getenv("SOILVIZ_OSD_DESCRIPTIONS")
    osd_dir = os.getenv("SOILVIZ_OSD_DIR")

    return AppSettings(
        cache=cache,
        osd_descriptions_path=Path(descriptions) if descriptions else None,
        osd_dir=Path(osd_dir) if osd_dir else None,
    )


def clear_settings_cache() -> None:
    """Clear settings cache to force reload from current environment."""
    get_settings.cache_clear()


class ProviderConfig(BaseModel):
    """Configuration for an upstream web service."""

    endpoint: str
    timeout_s: float = 20.0
    enabled: bool = True
    interpretation_timeout_s: float | None = None
    asset_base_url: str | None = None
    user_agent: str | None = None
    first_year: int | None = None
    last_year: int | None = None
    sign_endpoint: str | None = None
    tiles_endpoint: str | None = None


@lru_cache(maxsize=1)
def get_config_dir() -> Path:
    """Get the configuration directory path.

    ``SOILVIZ_CONFIG_DIR`` overrides the default of ``<project root>/config``.
    """
    override = os.getenv("SOILVIZ_CONFIG_DIR")
    if override:
        config_dir = Path(override)
    else:
        config_dir = Path(__file__).resolve().parent.parent / "config"

    if not config_dir.exists():
        raise FileNotFoundError(f"Configuration directory not found: {config_dir}")

    return config_dir


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file."""
    config_file = get_config_dir() / filename

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        logger.debug(f"Loaded configuration from {config_file}")
        return data or {}

    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
    except Exception as e:
        raise RuntimeError(f"Failed to load {config_file}: {e}") from e


@lru_cache(maxsize=1)
def get_providers_config() -> dict[str, Any]:
    """Load upstream provider configuration."""
    return load_yaml_config("providers.yaml")


@lru_cache(maxsize=1)
def get_interpretations_config() -> dict[str, Any]:
    """Load farmer-facing interpretation tables."""
    return load_yaml_config("interpretations.yaml")


@lru_cache(maxsize=1)
def get_soil_properties_config() -> dict[str, Any]:
    """Load soil property classification ranges and metadata."""
    return load_yaml_config("soil_properties.yaml")


def get_provider_config(service_type: str, provider_name: str) -> ProviderConfig | None:
    """Get configuration for a specific provider.

    Args:
        service_type: Service family ('ssurgo', 'osd', 'esd', 'cdl')
        provider_name: Provider key within the family ('sda', 'edit', ...)

    Returns:
        Provider configuration object, or None if not found
    """
    service_config = get_providers_config().get(service_type, {})
    provider_dict = service_config.get("providers", {}).get(provider_name)

    if not provider_dict:
        logger.warning(f"No configuration found for {service_type}.{provider_name}")
        return None

    try:
        return ProviderConfig(**provider_dict)
    except Exception as e:
        logger.error(f"Invalid configuration for {service_type}.{provider_name}: {e}")
        return None


def get_provider_or_default(
    service_type: str, provider_name: str, default: ProviderConfig
) -> ProviderConfig:
    """Return the configured provider, falling back to ``default``.

    Clients call this at construction time so a missing or broken
    providers.yaml degrades to built-in endpoints instead of failing.
    """
    try:
        provider = get_provider_config(service_type, provider_name)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        logger.warning(f"Provider configuration unavailable, using defaults: {e}")
        return default
    return provider or default


def validate_config() -> bool:
    """Validate all configuration files.

    Returns:
        True if all configurations load, False otherwise
    """
    try:
        get_providers_config()
        get_interpretations_config()
        get_soil_properties_config()
        logger.info("Configuration validation successful")
        return True
    except Exception as e:
        logger.error(f"Configuration validation failed: {e}")
        return False


def clear_config_cache() -> None:
    """Clear all cached configuration to force reload from current environment.

    This is useful in tests when environment variables are modified.
    """
    get_config_dir.cache_clear()
    get_providers_config.cache_clear()
    get_interpretations_config.cache_clear()
    get_soil_properties_config.cache_clear()
    clear_settings_cache()
