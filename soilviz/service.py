"""Site report orchestration across SSURGO, EDIT, OSD and CDL."""

from pathlib import Path

import requests

from soilviz.base import UpstreamProvider
from soilviz.cdl.query import CDLClient, query_cdl_history
from soilviz.config import get_settings
from soilviz.esd.client import EcologicalSiteNotFoundError, EditClient, parse_ecoclass_id
from soilviz.esd.formatter import format_esd_for_farmers
from soilviz.geo import format_coordinates, us_region, validate_coordinates
from soilviz.lcc.formatter import format_lcc_data
from soilviz.logging_config import get_logger
from soilviz.models import ProviderStatus, SiteReport
from soilviz.osd.descriptions import OSDDescriptionStore
from soilviz.osd.series_api import SoilSeriesClient
from soilviz.ssurgo.sda import SoilDataAccessClient

logger = get_logger(__name__)

PROGRESS_EVERY = 10


class SoilSurveyService:
    """Builds site reports for points in the United States.

    - SSURGO map unit, components and horizons (Soil Data Access)
    - Land capability for irrigated and non-irrigated use
    - Ecological site description for the dominant component (EDIT)
    - Plain-language series description (generated OSD database)
    - Crop history (CropScape CDL)
    """

    def __init__(
        self,
        sda: SoilDataAccessClient | None = None,
        edit: EditClient | None = None,
        cdl: CDLClient | None = None,
        series: SoilSeriesClient | None = None,
        description_store: OSDDescriptionStore | None = None,
    ):
        self.sda = sda or SoilDataAccessClient()
        self.edit = edit or EditClient()
        self.cdl = cdl or CDLClient()
        self.series = series or SoilSeriesClient()

        if description_store is None:
            path = get_settings().osd_descriptions_path
            if path and Path(path).exists():
                description_store = OSDDescriptionStore(path)
        self.description_store = description_store

        self.providers: dict[str, UpstreamProvider] = {
            "ssurgo": self.sda,
            "esd": self.edit,
            "osd": self.series,
            "cdl": self.cdl,
        }
        logger.info(
            f"Initialized SoilSurveyService with providers: {list(self.providers)}"
        )

    def site_report(
        self,
        lat: float,
        lon: float,
        include_cdl: bool = True,
        include_esd: bool = True,
    ) -> SiteReport:
        """Build a report for one point.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            include_cdl: Query the crop history (slow: one request per year)
            include_esd: Fetch the dominant component's ecological site

        Returns:
            SiteReport; upstream failures are recorded, never raised

        Raises:
            ValueError: If the coordinates are out of range
        """
        validate_coordinates(lat, lon)
        logger.info(f"Building site report for ({lat}, {lon})")

        report = SiteReport(
            latitude=lat,
            longitude=lon,
            coordinates=format_coordinates(lat, lon),
            us_region=us_region(lat, lon),
        )

        map_unit = self.sda.query_map_unit(lat, lon)
        if map_unit is None:
            report.errors.append("No SSURGO map unit found at this location")
        else:
            report.map_unit = map_unit
            report.lcc = format_lcc_data(map_unit.components)
            dominant = map_unit.dominant_component()
            if dominant is not None:
                report.dominant_component = dominant.compname
                if include_esd:
                    self._add_ecological_site(report, dominant.ecoclassid)
                self._add_osd_description(report, dominant.compname)

        if include_cdl:
            self._add_cdl_history(report)

        logger.info(
            f"Site report for ({lat}, {lon}): {len(report.errors)} errors, "
            f"{len(report.warnings)} warnings"
        )
        return report

    def _add_ecological_site(self, report: SiteReport, ecoclass_id: str | None) -> None:
        if not ecoclass_id or parse_ecoclass_id(ecoclass_id) is None:
            logger.debug(f"No usable ecoclass id: {ecoclass_id}")
            return
        try:
            data = self.edit.get_description(ecoclass_id)
            report.ecological_site = format_esd_for_farmers(data, self.edit.asset_base_url)
        except EcologicalSiteNotFoundError as e:
            report.warnings.append(str(e))
        except Exception as e:
            logger.error(f"Error fetching ecological site {ecoclass_id}: {e}")
            report.errors.append(f"Ecological site {ecoclass_id}: {e}")

    def _add_osd_description(self, report: SiteReport, series_name: str | None) -> None:
        if not series_name or self.description_store is None:
            return
        try:
            entry = self.description_store.get_description(series_name)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading OSD descriptions: {e}")
            report.errors.append(f"OSD descriptions: {e}")
            return
        if entry is None:
            report.warnings.append(f"No OSD description for series {series_name.upper()}")
        report.osd_description = entry

    def _add_cdl_history(self, report: SiteReport) -> None:
        if report.us_region is None:
            report.warnings.append("Cropland Data Layer covers the United States only")
            return
        try:
            report.cdl_history = query_cdl_history(
                report.latitude, report.longitude, client=self.cdl
            )
        except (requests.RequestException, RuntimeError) as e:
            logger.error(f"Error querying crop history: {e}")
            report.errors.append(f"Crop history: {e}")

    def site_reports(
        self,
        locations: list[tuple[float, float]],
        include_cdl: bool = True,
        include_esd: bool = True,
    ) -> list[SiteReport]:
        """Build reports for many points; invalid points become error reports."""
        logger.info(f"Building site reports for {len(locations)} locations")

        reports = []
        for i, (lat, lon) in enumerate(locations):
            try:
                reports.append(self.site_report(lat, lon, include_cdl, include_esd))
            except ValueError as e:
                logger.error(f"Error processing location ({lat}, {lon}): {e}")
                reports.append(
                    SiteReport(
                        latitude=lat,
                        longitude=lon,
                        coordinates=f"{lat}, {lon}",
                        errors=[str(e)],
                    )
                )

            if (i + 1) % PROGRESS_EVERY == 0:
                logger.info(f"Processed {i + 1}/{len(locations)} locations")

        logger.info(f"Completed site reports for {len(locations)} locations")
        return reports

    def get_provider_status(self) -> dict[str, ProviderStatus]:
        """Availability and coverage of each upstream service."""
        status = {}
        for key, provider in self.providers.items():
            try:
                status[key] = ProviderStatus(
                    name=provider.name,
                    available=provider.is_available(),
                    coverage=provider.coverage_description,
                )
            except Exception as e:
                status[key] = ProviderStatus(
                    name=provider.name, available=False, error=str(e)
                )
        return status
