"""
HTTP caching for upstream soil services using requests-cache.

Every client obtains its session through :func:`get_session`, so tests can
swap the module singleton for an isolated cache.
"""

import os
from typing import Any

import requests
from requests_cache import CachedSession, create_key

from soilviz.logging_config import get_logger

logger = get_logger(__name__)

# Module-level singleton (tests can override/reset)
_SESSION: CachedSession | None = None

# Bodies the CDL service returns with HTTP 200 when a point has no value
_CDL_ERROR_MARKERS = ("Failed to get value", "No data")

_COORD_KEYS = {"lat", "latitude", "lon", "lng", "longitude"}


def canonicalize_coords(params: dict[str, Any]) -> dict[str, Any]:
    """Canonicalize coordinate parameters for consistent caching."""
    if not params:
        return params

    canonical: dict[str, Any] = {}
    for key, value in params.items():
        key_lower = key.lower()

        if key_lower in _COORD_KEYS:
            try:
                canonical[key] = round(float(value), 4)
            except (ValueError, TypeError):
                canonical[key] = value
        elif "date" in key_lower or "time" in key_lower:
            if isinstance(value, str) and "T" in value:
                canonical[key] = value.split("T")[0]
            else:
                canonical[key] = value
        else:
            canonical[key] = value

    return canonical


def _cache_key(request, **kwargs):
    return create_key(
        request=request,
        ignored_parameters=[],
        match_headers=["Authorization"],
        **kwargs,
    )


def _cache_ok(response) -> bool:
    if response.status_code != 200:
        return False
    url = getattr(response, "url", "") or ""
    if "CDLService" in url:
        text = getattr(response, "text", "") or ""
        if any(marker in text for marker in _CDL_ERROR_MARKERS):
            return False
    return True


def _sqlite_session(cache_name: str, expire_after: int) -> CachedSession:
    """Create SQLite-backed cached session."""
    logger.info(f"Using SQLite cache backend: {cache_name}")
    return CachedSession(
        cache_name=cache_name,
        backend="sqlite",
        key_fn=_cache_key,
        cache_control=True,
        allowable_codes=(200,),
        allowable_methods=("GET", "HEAD", "POST"),
        expire_after=expire_after,
        filter_fn=_cache_ok,
    )


def _make_session() -> CachedSession:
    """Create a new cached session from the current environment."""
    backend = os.getenv("CACHE_BACKEND", "sqlite").lower()
    cache_name = os.getenv("CACHE_NAME", "cache/http")
    expire_after = int(os.getenv("CACHE_EXPIRE_S", "86400"))

    if backend != "sqlite":
        logger.warning(f"Unsupported cache backend '{backend}', using SQLite")

    # Per-worker cache files under pytest-xdist
    xdist_worker = os.getenv("PYTEST_XDIST_WORKER")
    if xdist_worker:
        cache_name = f"{cache_name}_{xdist_worker}"

    return _sqlite_session(cache_name, expire_after)


def get_session() -> CachedSession:
    """
    Get the shared cached session.

    Environment variables:
    - CACHE_NAME: SQLite cache path without extension (default: 'cache/http')
    - CACHE_EXPIRE_S: Entry lifetime in seconds (default: 86400)
    """
    global _SESSION
    if _SESSION is None:
        _SESSION = _make_session()
    return _SESSION


def reset_session() -> None:
    """Close and clear the module session (for tests)."""
    global _SESSION
    if _SESSION is not None:
        try:
            _SESSION.close()
        except OSError as e:
            logger.debug(f"Error closing cached session: {e}")
    _SESSION = None


def set_session_for_tests(session: CachedSession) -> None:
    """Force get_session() to return a provided session (for tests)."""
    global _SESSION
    _SESSION = session


def cache_stats() -> dict[str, Any]:
    """Summarize the current cache: backend, location and entry counts."""
    session = get_session()
    cache = session.cache
    responses = list(cache.responses.values())
    expired = sum(1 for r in responses if getattr(r, "is_expired", False))
    return {
        "backend": type(cache).__name__,
        "cache_name": str(getattr(cache, "cache_name", "")),
        "total_entries": len(responses),
        "expired_entries": expired,
        "valid_entries": len(responses) - expired,
    }


def clear_cache(expired_only: bool = False) -> int:
    """Delete cached responses. Returns the number of entries removed."""
    cache = get_session().cache
    before = len(cache.responses)
    if expired_only:
        cache.delete(expired=True)
    else:
        cache.clear()
    removed = before - len(cache.responses)
    logger.info(f"Removed {removed} cached responses")
    return removed


def request(
    method: str,
    url: str,
    read_from_cache: bool = True,
    write_to_cache: bool = True,
    **kwargs: Any,
) -> requests.Response:
    """
    Make a cached HTTP request with coordinate canonicalization.

    Args:
        method: HTTP method
        url: Request URL
        read_from_cache: Serve a cached response when one exists
        write_to_cache: Store the response in the cache
        **kwargs: Passed through to ``Session.request``

    Returns:
        HTTP response
    """
    if kwargs.get("params"):
        original_params = dict(kwargs["params"])
        kwargs["params"] = canonicalize_coords(kwargs["params"])
        if original_params != kwargs["params"]:
            logger.debug(
                f"Canonicalized coordinates: {original_params} -> {kwargs['params']}"
            )

    logger.debug(f"Making {method} request to {url}")

    if not read_from_cache and not write_to_cache:
        with requests.Session() as plain:
            response = plain.request(method, url, **kwargs)
        cache_status = "BYPASS"
    else:
        session = get_session()
        if not write_to_cache:
            # Read-only: serve a cached copy if present, never store a new one
            response = session.request(method, url, only_if_cached=True, **kwargs)
            if response.status_code == 504 and not getattr(response, "from_cache", False):
                with session.cache_disabled():
                    response = session.request(method, url, **kwargs)
        else:
            response = session.request(
                method, url, force_refresh=not read_from_cache, **kwargs
            )
        cache_status = "HIT" if getattr(response, "from_cache", False) else "MISS"
        if not read_from_cache:
            cache_status = "REFRESH"

    logger.debug(f"{method} {url} -> {response.status_code} (Cache: {cache_status})")
    return response
