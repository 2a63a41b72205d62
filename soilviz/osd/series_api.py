"""UC Davis SoilWeb soil-series API client and response formatter.

API: https://casoilresource.lawr.ucdavis.edu/api/soil-series.php
"""

from typing import Any

import requests

from soilviz.base import UpstreamProvider
from soilviz.config import ProviderConfig, get_provider_or_default
from soilviz.http_cache import request
from soilviz.logging_config import get_logger
from soilviz.osd.models import (
    ClimateStat,
    DepthRange,
    FormattedSeries,
    HorizonColor,
    ParentMaterial,
    SeriesClassification,
    SeriesClimate,
    SeriesExtent,
    SeriesGeomorphology,
    SeriesHorizon,
    SeriesProperties,
)

logger = get_logger(__name__)

DEFAULT_PROVIDER = ProviderConfig(
    endpoint="https://casoilresource.lawr.ucdavis.edu/api/soil-series.php",
    timeout_s=20.0,
)

CLIMATE_VARIABLES = {
    "elevation": ("Elevation (m)", "m"),
    "precipitation": ("Mean Annual Precipitation (mm)", "mm"),
    "temperature": ("Mean Annual Air Temperature (degrees C)", "°C"),
    "frost_free_days": ("Frost-Free Days", None),
    "growing_degree_days": ("Growing Degree Days (degrees C)", None),
}


class SoilSeriesClient(UpstreamProvider):
    """Fetch soil-series summaries (horizons, climate, extent) by series name."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        provider = get_provider_or_default("osd", "ucdavis", DEFAULT_PROVIDER)
        self.base_url = base_url or provider.endpoint
        self.timeout = timeout or provider.timeout_s

    @property
    def name(self) -> str:
        return "UC Davis SoilWeb soil-series"

    @property
    def coverage_description(self) -> str:
        return "Established and tentative US soil series"

    def is_available(self) -> bool:
        try:
            response = request(
                "GET", self.base_url, params={"q": "all", "s": "ABBOTT"}, timeout=5
            )
            return response.status_code == 200
        except requests.RequestException:
            return False

    def fetch(self, series_name: str) -> dict[str, Any] | None:
        """Return the raw API payload, or None when the series is unknown."""
        logger.debug(f"Fetching soil-series data for {series_name}")
        try:
            response = request(
                "GET",
                self.base_url,
                params={"q": "all", "s": series_name.strip().lower()},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error fetching soil-series data for {series_name}: {e}")
            return None

        if not response.ok:
            logger.error(f"Soil-series API HTTP error: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from soil-series API for {series_name}: {e}")
            return None

        if not isinstance(data, dict) or not data.get("site"):
            logger.warning(f"No soil-series data found for {series_name}")
            return None

        return data

    def get_formatted(self, series_name: str) -> FormattedSeries | None:
        raw = self.fetch(series_name)
        return format_series_data(raw) if raw else None


def _munsell(hue: str | None, value: Any, chroma: Any) -> str | None:
    if not hue or value is None or chroma is None:
        return None
    return f"{hue} {value}/{chroma}"


def _inches(cm: float) -> str:
    return f'{round(cm / 2.54)}"'


def _climate_stat(climate: list[dict[str, Any]], var_name: str, unit: str | None) -> ClimateStat:
    row = next((c for c in climate if c.get("climate_var") == var_name), None)
    if row is None:
        return ClimateStat(unit=unit)
    return ClimateStat(
        min=row.get("minimum") or 0,
        median=row.get("q50") or 0,
        max=row.get("maximum") or 0,
        unit=unit,
    )


def format_series_data(raw: dict[str, Any]) -> FormattedSeries | None:
    """Reshape a raw soil-series payload for display; None when it has no site."""
    sites = raw.get("site") or []
    if not sites:
        return None
    site = sites[0]

    horizons = []
    for hz in raw.get("hz") or []:
        top, bottom = hz.get("top") or 0, hz.get("bottom") or 0
        horizons.append(
            SeriesHorizon(
                name=hz.get("hzname"),
                depth=f"{_inches(top)}-{_inches(bottom)}",
                depth_cm=DepthRange(top=int(top), bottom=int(bottom)),
                texture=hz.get("texture_class"),
                color=HorizonColor(
                    dry=_munsell(
                        hz.get("matrix_dry_color_hue"),
                        hz.get("matrix_dry_color_value"),
                        hz.get("matrix_dry_color_chroma"),
                    ),
                    moist=_munsell(
                        hz.get("matrix_wet_color_hue"),
                        hz.get("matrix_wet_color_value"),
                        hz.get("matrix_wet_color_chroma"),
                    ),
                ),
                ph=hz.get("ph"),
                ph_class=hz.get("ph_class"),
                narrative=hz.get("narrative"),
            )
        )

    parent_material = [
        ParentMaterial(material=pm.get("q_param"), percentage=round((pm.get("p") or 0) * 100))
        for pm in raw.get("pmkind") or []
    ]

    climate_rows = raw.get("climate") or []
    climate = SeriesClimate(
        **{
            key: _climate_stat(climate_rows, var_name, unit)
            for key, (var_name, unit) in CLIMATE_VARIABLES.items()
        }
    )

    return FormattedSeries(
        series_name=site.get("seriesname"),
        classification=SeriesClassification(
            family=site.get("family"),
            order=site.get("soilorder"),
            suborder=site.get("suborder"),
            great_group=site.get("greatgroup"),
            sub_group=site.get("subgroup"),
            particle_size=site.get("tax_partsize"),
            mineralogy=site.get("tax_minclass"),
            temperature_regime=site.get("tax_tempcl"),
            reaction=site.get("tax_reaction"),
        ),
        properties=SeriesProperties(
            drainage=site.get("drainagecl"),
            established=site.get("establishedyear"),
            benchmark=site.get("benchmarksoilflag") == "TRUE",
            status=site.get("series_status"),
            type_location=site.get("soilseries_typelocst"),
            mlra_office=site.get("mlraoffice"),
        ),
        extent=SeriesExtent(
            acres=site.get("ac"),
            polygons=site.get("n_polygons"),
            mlra=[m.get("mlra") for m in raw.get("mlra") or [] if m.get("mlra")],
        ),
        horizons=horizons,
        parent_material=parent_material,
        climate=climate,
        geomorphology=SeriesGeomorphology(
            terrace=raw.get("terrace") or [],
            flats=raw.get("flats") or [],
            shape_across=raw.get("shape_across") or [],
            shape_down=raw.get("shape_down") or [],
        ),
        ecological_sites=raw.get("ecoclassid") or [],
        associated_soils=[g.get("gas") for g in raw.get("geog_assoc_soils") or [] if g.get("gas")],
    )


def get_formatted_series(series_name: str) -> FormattedSeries | None:
    """Fetch and format soil-series data in one call."""
    return SoilSeriesClient().get_formatted(series_name)
