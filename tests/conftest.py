"""
pytest configuration for soilviz tests.

Loads .env, isolates the HTTP cache per test and provides shared fixtures.
"""

import importlib
import os
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests_cache
from dotenv import load_dotenv

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest session - load environment variables."""
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        load_dotenv(env_path)


# Session isolation harness to prevent test state leakage


@pytest.fixture(autouse=True)
def _reset_http_cache_state():
    """Reset the http_cache singleton and cached settings between tests."""
    hc = importlib.import_module("soilviz.http_cache")
    config = importlib.import_module("soilviz.config")
    hc.reset_session()
    config.clear_settings_cache()
    yield
    config.clear_settings_cache()


@pytest.fixture(autouse=True)
def _ban_global_requests_cache():
    """Ensure no one globally monkey-patches requests via install_cache()."""
    requests_cache.uninstall_cache()
    yield
    requests_cache.uninstall_cache()


@pytest.fixture(autouse=True)
def _route_all_test_cache_to_tmp(tmp_path, monkeypatch):
    """Route all test cache to a temp directory to preserve the real cache."""
    if os.getenv("USE_PROD_CACHE_IN_TESTS"):
        yield
        return

    import soilviz.http_cache as hc

    test_session = requests_cache.CachedSession(
        cache_name=str(tmp_path / "test_cache"),
        backend="sqlite",
        cache_control=True,
        allowable_codes=(200,),
        allowable_methods=("GET", "HEAD", "POST"),
    )
    monkeypatch.setattr(hc, "_SESSION", test_session)

    yield

    test_session.close()


@pytest.fixture(autouse=True)
def _no_log_file(tmp_path, monkeypatch):
    """CLI commands attach a rotating file handler; keep its file in tmp_path."""
    monkeypatch.chdir(tmp_path)
    yield


def _make_response(status_code=200, json_data=None, text=None, reason="OK"):
    """Build a Mock that behaves like a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.reason = reason
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    response.text = text if text is not None else ("" if json_data is None else str(json_data))
    return response


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def osd_text():
    """A trimmed Official Series Description for the Coburg series."""
    return (FIXTURES_DIR / "osd" / "C" / "COBURG.txt").read_text(encoding="utf-8")


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects."""
    return _make_response
