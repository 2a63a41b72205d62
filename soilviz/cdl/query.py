"""Point queries against the CropScape GetCDLValue service."""

import re

import requests

from soilviz.base import UpstreamProvider
from soilviz.cdl.crop_types import (
    NO_DATA_CODES,
    CropHistoryEntry,
    analyze_crop_history,
    get_crop_info,
    get_crop_type,
    get_estimated_accuracy,
)
from soilviz.cdl.models import CDLYearData
from soilviz.cdl.projection import wgs84_to_albers
from soilviz.config import ProviderConfig, get_provider_or_default
from soilviz.http_cache import request
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PROVIDER = ProviderConfig(
    endpoint="https://nassgeodata.gmu.edu/axis2/services/CDLService/GetCDLValue",
    timeout_s=30.0,
    user_agent="SoilViz-Pro/1.0",
    first_year=2008,
    last_year=2023,
)

NO_DATA_RESULT = "<Result>0</Result>"
_NO_DATA_MARKERS = ("Failed to get value", "No data")

_RESULT_RE = re.compile(r"<Result>(.*?)</Result>", re.DOTALL)
_VALUE_RE = re.compile(r"value:\s*(\d+)")
_CONFIDENCE_RE = re.compile(r"confidence:\s*(\d+(?:\.\d+)?)")


class CDLClient(UpstreamProvider):
    """CropScape point-value client; coordinates are projected to EPSG:5070."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        provider = get_provider_or_default("cdl", "cropscape", DEFAULT_PROVIDER)
        self.base_url = base_url or provider.endpoint
        self.timeout = timeout or provider.timeout_s
        self.user_agent = provider.user_agent or DEFAULT_PROVIDER.user_agent
        self.first_year = provider.first_year or DEFAULT_PROVIDER.first_year
        self.last_year = provider.last_year or DEFAULT_PROVIDER.last_year

    @property
    def name(self) -> str:
        return "USDA NASS CropScape"

    @property
    def coverage_description(self) -> str:
        return f"Contiguous United States, {self.first_year}-{self.last_year}"

    @property
    def years(self) -> list[int]:
        """Available CDL years, newest first."""
        return list(range(self.last_year, self.first_year - 1, -1))

    def is_available(self) -> bool:
        try:
            self.get_value_xml(41.5, -93.6, self.last_year)
            return True
        except (requests.RequestException, RuntimeError):
            return False

    def get_value_xml(self, lat: float, lon: float, year: int) -> str:
        """
        Raw GetCDLValue XML for a point and year.

        Locations the service has no value for yield ``<Result>0</Result>``.

        Raises:
            RuntimeError: On any other non-OK response
            requests.RequestException: On transport failure
        """
        x, y = wgs84_to_albers(lon, lat)
        logger.debug(
            f"Transforming WGS84 ({lat}, {lon}) to Albers ({x:.2f}, {y:.2f}) for {year}"
        )

        response = request(
            "GET",
            self.base_url,
            params={"year": str(year), "x": f"{x:.2f}", "y": f"{y:.2f}"},
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/xml,application/xml,*/*",
            },
            timeout=self.timeout,
        )

        if not response.ok:
            body = response.text or ""
            if any(marker in body for marker in _NO_DATA_MARKERS):
                logger.info(f"No CDL data available for {year} at ({lat}, {lon})")
                return NO_DATA_RESULT
            logger.error(f"CropScape HTTP {response.status_code}: {body[:200]}")
            raise RuntimeError(
                f"CropScape API error: {response.status_code} {response.reason}"
            )

        return response.text


def parse_cdl_result(xml: str) -> tuple[int, int | None] | None:
    """
    Extract ``(crop_code, confidence)`` from a GetCDLValue response.

    The service returns either ``<Result>24</Result>`` or a JSON-like body
    such as ``<Result>{x: .., y: .., value: 24, category: "Winter Wheat"}</Result>``.
    """
    match = _RESULT_RE.search(xml)
    if not match:
        return None

    content = match.group(1).strip()
    if content.startswith("{"):
        value = _VALUE_RE.search(content)
        if not value:
            return None
        confidence = _CONFIDENCE_RE.search(content)
        return (
            int(value.group(1)),
            round(float(confidence.group(1))) if confidence else None,
        )

    leading = re.match(r"^[+-]?\d+", content)
    if not leading:
        return None
    return int(leading.group(0)), None


def query_cdl_point(
    lat: float, lon: float, year: int, client: CDLClient | None = None
) -> CDLYearData | None:
    """Crop classification at a point for one year; None when there is no data."""
    client = client or CDLClient()
    try:
        xml = client.get_value_xml(lat, lon, year)
    except (requests.RequestException, RuntimeError) as e:
        logger.error(f"CDL query failed for {year} at ({lat}, {lon}): {e}")
        return None

    parsed = parse_cdl_result(xml)
    if parsed is None:
        logger.debug(f"No crop data for {year}")
        return None

    code, confidence = parsed
    if code in NO_DATA_CODES:
        logger.debug(f"No data value ({code}) for {year}")
        return None

    info = get_crop_info(code)
    return CDLYearData(
        year=year,
        crop_code=code,
        crop_name=info.name,
        color=info.color,
        crop_type=get_crop_type(code),
        confidence=confidence or get_estimated_accuracy(code),
    )


def query_cdl_history(
    lat: float,
    lon: float,
    years: list[int] | None = None,
    client: CDLClient | None = None,
) -> list[CDLYearData]:
    """
    Crop history at a point, newest year first, with plausibility warnings.

    Years are queried one at a time; CropScape is slow and rate sensitive.
    """
    client = client or CDLClient()
    years = years or client.years
    logger.info(f"Querying {len(years)} CDL years for ({lat}, {lon})")

    results = [
        r for r in (query_cdl_point(lat, lon, year, client) for year in years) if r
    ]
    results.sort(key=lambda r: r.year, reverse=True)

    warnings = analyze_crop_history(
        [
            CropHistoryEntry(
                year=r.year,
                crop_type=r.crop_type,
                crop_name=r.crop_name,
                confidence=r.confidence,
            )
            for r in results
        ]
    )
    by_year = {r.year: r for r in results}
    for w in warnings:
        if w.year in by_year:
            by_year[w.year].transition_warning = w.warning

    logger.info(
        f"Found {len(results)} CDL results with {len(warnings)} transition warnings"
    )
    return results
