"""Tests for the site report service."""

from unittest.mock import Mock, patch

import pytest
import requests

from soilviz.cdl.models import CDLYearData
from soilviz.esd.client import EcologicalSiteNotFoundError
from soilviz.osd.models import OSDDescriptionEntry
from soilviz.service import SoilSurveyService
from soilviz.ssurgo.models import Component, MapUnit

MAP_UNIT = MapUnit(
    mukey="2468",
    muname="Coburg silty clay loam",
    components=[
        Component(
            cokey="101",
            compname="Coburg",
            comppct_r=85,
            majcompflag="Yes",
            nirrcapcl="3",
            nirrcapscl="w",
            ecoclassid="R002XC008OR",
        ),
        Component(cokey="102", compname="Willamette", comppct_r=10, majcompflag="No"),
    ],
)

ENTRY = OSDDescriptionEntry(
    series="COBURG",
    description="These are very deep, moderately well drained soils.",
    last_updated="2024-01-01T00:00:00+00:00",
)

CORN = CDLYearData(year=2023, crop_code=1, crop_name="Corn", color="#ffd300")


def _provider(name, available=True):
    provider = Mock()
    provider.name = name
    provider.coverage_description = f"{name} coverage"
    provider.is_available.return_value = available
    return provider


@pytest.fixture
def clients():
    sda = _provider("SDA")
    sda.query_map_unit.return_value = MAP_UNIT
    edit = _provider("EDIT")
    edit.asset_base_url = "https://edit.example.org"
    edit.get_description.return_value = {
        "generalInformation": {"narratives": {"ecoclassName": "Valley Terrace"}}
    }
    store = Mock()
    store.get_description.return_value = ENTRY
    return {
        "sda": sda,
        "edit": edit,
        "cdl": _provider("CDL"),
        "series": _provider("UC Davis"),
        "description_store": store,
    }


@pytest.fixture
def service(clients):
    return SoilSurveyService(**clients)


class TestSiteReport:
    """Test single-point reports."""

    def test_full_report(self, service, clients):
        """Test that every section is filled for a CONUS point."""
        with patch("soilviz.service.query_cdl_history", return_value=[CORN]) as mock_history:
            report = service.site_report(44.1, -123.0)

        assert report.ok
        assert report.us_region == "CONUS"
        assert report.map_unit.mukey == "2468"
        assert report.dominant_component == "Coburg"
        assert report.lcc.dominant_lcc.nonirrigated.lcc_class == "III"
        assert report.ecological_site.basic_info.site_name == "Valley Terrace"
        assert report.osd_description.series == "COBURG"
        assert report.cdl_history == [CORN]
        assert report.warnings == []

        clients["sda"].query_map_unit.assert_called_once_with(44.1, -123.0)
        clients["edit"].get_description.assert_called_once_with("R002XC008OR")
        clients["description_store"].get_description.assert_called_once_with("Coburg")
        mock_history.assert_called_once_with(44.1, -123.0, client=clients["cdl"])

    def test_no_map_unit(self, service, clients):
        """Test the error when SSURGO has no map unit."""
        clients["sda"].query_map_unit.return_value = None

        report = service.site_report(44.1, -123.0, include_cdl=False)

        assert report.errors == ["No SSURGO map unit found at this location"]
        assert report.lcc is None
        clients["edit"].get_description.assert_not_called()

    def test_missing_osd_description(self, service, clients):
        """Test the warning for a series absent from the database."""
        clients["description_store"].get_description.return_value = None

        report = service.site_report(44.1, -123.0, include_cdl=False)

        assert report.warnings == ["No OSD description for series COBURG"]
        assert report.osd_description is None

    def test_ecological_site_not_found(self, service, clients):
        """Test that an unpublished ESD is a warning."""
        clients["edit"].get_description.side_effect = EcologicalSiteNotFoundError("R002XC008OR")

        report = service.site_report(44.1, -123.0, include_cdl=False)

        assert report.ok
        assert report.warnings == [
            "Ecological site description not available: R002XC008OR"
        ]

    def test_ecological_site_failure(self, service, clients):
        """Test that other EDIT failures are errors."""
        clients["edit"].get_description.side_effect = RuntimeError("EDIT request failed: 503")

        report = service.site_report(44.1, -123.0, include_cdl=False)

        assert report.errors == ["Ecological site R002XC008OR: EDIT request failed: 503"]

    def test_skip_esd(self, service, clients):
        """Test that the ESD lookup can be disabled."""
        report = service.site_report(44.1, -123.0, include_cdl=False, include_esd=False)

        assert report.ecological_site is None
        clients["edit"].get_description.assert_not_called()

    def test_cdl_outside_us(self, service):
        """Test the CDL warning for points outside the United States."""
        with patch("soilviz.service.query_cdl_history") as mock_history:
            report = service.site_report(51.5, -0.1)

        assert "Cropland Data Layer covers the United States only" in report.warnings
        mock_history.assert_not_called()

    def test_cdl_failure(self, service):
        """Test that crop history failures are recorded."""
        with patch(
            "soilviz.service.query_cdl_history", side_effect=requests.ConnectionError("down")
        ):
            report = service.site_report(44.1, -123.0)

        assert report.errors == ["Crop history: down"]

    def test_description_store_read_error(self, service, clients):
        """Test that a broken description database is an error."""
        clients["description_store"].get_description.side_effect = ValueError("bad JSON")

        report = service.site_report(44.1, -123.0, include_cdl=False)

        assert report.errors == ["OSD descriptions: bad JSON"]

    def test_invalid_coordinates(self, service):
        """Test that invalid coordinates raise."""
        with pytest.raises(ValueError):
            service.site_report(120.0, -123.0)


class TestSiteReports:
    """Test batch reports."""

    def test_invalid_point_becomes_error_report(self, service):
        """Test that one bad point does not stop the batch."""
        reports = service.site_reports([(44.1, -123.0), (120.0, 0.0)], include_cdl=False)

        assert len(reports) == 2
        assert reports[0].ok
        assert not reports[1].ok
        assert reports[1].coordinates == "120.0, 0.0"


class TestProviderStatus:
    """Test the provider status table."""

    def test_status(self, service, clients):
        """Test availability and coverage per provider."""
        clients["cdl"].is_available.return_value = False

        status = service.get_provider_status()

        assert list(status) == ["ssurgo", "esd", "osd", "cdl"]
        assert status["ssurgo"].available is True
        assert status["ssurgo"].coverage == "SDA coverage"
        assert status["cdl"].available is False

    def test_probe_exception(self, service, clients):
        """Test that a failing probe is reported, not raised."""
        clients["edit"].is_available.side_effect = RuntimeError("boom")

        status = service.get_provider_status()

        assert status["esd"].available is False
        assert status["esd"].error == "boom"
