"""Client for the EDIT (Ecological Dynamics Interpretive Tool) API."""

import re
from typing import Any, Literal

import requests

from soilviz.base import UpstreamProvider
from soilviz.config import ProviderConfig, get_provider_or_default
from soilviz.esd.models import EcoclassId
from soilviz.http_cache import request
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PROVIDER = ProviderConfig(
    endpoint="https://edit.jornada.nmsu.edu/services",
    timeout_s=20.0,
    asset_base_url="https://edit.jornada.nmsu.edu",
)

# F128XY001TN -> geo unit 128X; R039XA011NM -> 039X
_ECOCLASS_RE = re.compile(r"^[FR](\d{3,4}[A-Z])[A-Z]\d{3}[A-Z]{2}$")

MeasurementSystem = Literal["usc", "metric"]


class EcologicalSiteNotFoundError(LookupError):
    """EDIT has no published description for the requested ecological site."""

    def __init__(self, ecoclass_id: str):
        super().__init__(f"Ecological site description not available: {ecoclass_id}")
        self.ecoclass_id = ecoclass_id


def parse_ecoclass_id(ecoclass_id: str) -> EcoclassId | None:
    """Split an SSURGO ecoclassid into catalog, geo unit and ecoclass."""
    match = _ECOCLASS_RE.match(ecoclass_id)
    if not match:
        logger.debug(f"Failed to parse ecoclassid: {ecoclass_id}")
        return None
    return EcoclassId(catalog="esd", geo_unit=match.group(1), ecoclass=ecoclass_id)


class EditClient(UpstreamProvider):
    """Fetch ecological site descriptions from EDIT."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        provider = get_provider_or_default("esd", "edit", DEFAULT_PROVIDER)
        self.base_url = (base_url or provider.endpoint).rstrip("/")
        self.timeout = timeout or provider.timeout_s
        self.asset_base_url = provider.asset_base_url or DEFAULT_PROVIDER.asset_base_url

    @property
    def name(self) -> str:
        return "EDIT Ecological Site Descriptions"

    @property
    def coverage_description(self) -> str:
        return "United States ecological sites by MLRA"

    def is_available(self) -> bool:
        try:
            response = request("GET", f"{self.base_url}/descriptions/esd.json", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def _description_url(self, ecoclass_id: str, suffix: str) -> str:
        parsed = parse_ecoclass_id(ecoclass_id)
        if parsed is None:
            raise ValueError(f"Invalid ecoclassid format: {ecoclass_id}")
        return (
            f"{self.base_url}/descriptions/{parsed.catalog}/"
            f"{parsed.geo_unit}/{parsed.ecoclass}{suffix}"
        )

    def _get_json(
        self,
        ecoclass_id: str,
        url: str,
        params: dict[str, str] | None = None,
        read_from_cache: bool = True,
        write_to_cache: bool = True,
    ) -> dict[str, Any]:
        logger.debug(f"Fetching EDIT data from {url}")
        response = request(
            "GET",
            url,
            read_from_cache=read_from_cache,
            write_to_cache=write_to_cache,
            params=params,
            timeout=self.timeout,
        )

        if response.status_code == 404:
            logger.info(f"No EDIT description for {ecoclass_id}")
            raise EcologicalSiteNotFoundError(ecoclass_id)

        if not response.ok:
            logger.error(f"EDIT API error for {ecoclass_id}: {response.status_code}")
            raise RuntimeError(f"EDIT API error: {response.status_code} - {response.text}")

        return response.json()

    def get_description(
        self,
        ecoclass_id: str,
        measurement_system: MeasurementSystem = "usc",
        read_from_cache: bool = True,
        write_to_cache: bool = True,
    ) -> dict[str, Any]:
        """
        Get the full ecological site description.

        Raises:
            ValueError: If the id is not a valid ecoclassid
            EcologicalSiteNotFoundError: If EDIT returns 404
            RuntimeError: On any other non-OK response
        """
        url = self._description_url(ecoclass_id, ".json")
        return self._get_json(
            ecoclass_id,
            url,
            params={"measurementSystem": measurement_system},
            read_from_cache=read_from_cache,
            write_to_cache=write_to_cache,
        )

    def get_overview(self, ecoclass_id: str) -> dict[str, Any]:
        """Get the lighter-weight overview document for an ecological site."""
        url = self._description_url(ecoclass_id, "/overview.json")
        return self._get_json(ecoclass_id, url)
