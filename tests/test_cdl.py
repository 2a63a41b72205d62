"""Tests for Cropland Data Layer lookups, crop history checks and STAC tiles."""

from unittest.mock import Mock, patch

import pytest
import requests

from soilviz.cdl.crop_types import (
    CropHistoryEntry,
    analyze_crop_history,
    get_crop_info,
    get_crop_type,
    get_estimated_accuracy,
    validate_transition,
)
from soilviz.cdl.models import STACItem
from soilviz.cdl.projection import wgs84_to_albers
from soilviz.cdl.query import (
    NO_DATA_RESULT,
    CDLClient,
    parse_cdl_result,
    query_cdl_history,
    query_cdl_point,
)
from soilviz.cdl.stac import CDLStacClient, get_cdl_legend


def _result(code):
    return f"<?xml version='1.0'?><returnURL><Result>{code}</Result></returnURL>"


class TestProjection:
    """Test the EPSG:5070 Albers projection."""

    def test_origin(self):
        """Test that the projection origin maps to (0, 0)."""
        x, y = wgs84_to_albers(-96.0, 23.0)
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y == pytest.approx(0.0, abs=1e-6)

    def test_central_meridian_has_zero_x(self):
        """Test points on the central meridian have x == 0."""
        x, y = wgs84_to_albers(-96.0, 41.0)
        assert x == pytest.approx(0.0, abs=1e-6)
        assert y > 0

    def test_east_and_west(self):
        """Test that x grows eastward."""
        west, _ = wgs84_to_albers(-120.0, 44.0)
        east, _ = wgs84_to_albers(-75.0, 44.0)
        assert west < 0 < east


class TestParseCdlResult:
    """Test GetCDLValue response parsing."""

    def test_plain_value(self):
        """Test a bare integer result."""
        assert parse_cdl_result(_result(24)) == (24, None)

    def test_json_like_value(self):
        """Test the object-style result with a confidence."""
        xml = '<Result>{x: -93521.3, y: 2024311.5, value: 5, category: "Soybeans", confidence: 87.6}</Result>'
        assert parse_cdl_result(xml) == (5, 88)

    @pytest.mark.parametrize("xml", ["", "<Result>abc</Result>", "<Result>{category: x}</Result>"])
    def test_unparseable(self, xml):
        """Test that missing or malformed values return None."""
        assert parse_cdl_result(xml) is None


class TestCdlClient:
    """Test the CropScape client with the request helper mocked."""

    def test_request_uses_albers_coordinates(self, make_response):
        """Test that the point is projected and formatted to centimeters."""
        client = CDLClient(base_url="https://cdl.example.org/GetCDLValue")
        x, y = wgs84_to_albers(-93.6, 41.6)

        with patch("soilviz.cdl.query.request") as mock_request:
            mock_request.return_value = make_response(text=_result(1))
            xml = client.get_value_xml(41.6, -93.6, 2022)

        assert xml == _result(1)
        _, kwargs = mock_request.call_args
        assert kwargs["params"] == {"year": "2022", "x": f"{x:.2f}", "y": f"{y:.2f}"}
        assert kwargs["headers"]["User-Agent"]

    def test_no_data_error_body(self, make_response):
        """Test that a 'Failed to get value' error means no data."""
        response = make_response(status_code=500, text="Failed to get value", reason="Error")

        with patch("soilviz.cdl.query.request", return_value=response):
            assert CDLClient().get_value_xml(41.6, -93.6, 2022) == NO_DATA_RESULT

    def test_other_error_raises(self, make_response):
        """Test that other HTTP failures raise RuntimeError."""
        response = make_response(status_code=502, text="gateway", reason="Bad Gateway")

        with patch("soilviz.cdl.query.request", return_value=response):
            with pytest.raises(RuntimeError, match="502"):
                CDLClient().get_value_xml(41.6, -93.6, 2022)

    def test_years_newest_first(self):
        """Test the configured year range."""
        years = CDLClient().years
        assert years[0] == 2023
        assert years[-1] == 2008


class TestQueryPoint:
    """Test single-year point queries."""

    def test_crop_found(self):
        """Test crop name, type, color and estimated confidence."""
        client = Mock()
        client.get_value_xml.return_value = _result(1)

        data = query_cdl_point(41.6, -93.6, 2022, client=client)

        assert data.crop_name == "Corn"
        assert data.crop_type == "annual"
        assert data.color == "#ffd300"
        assert data.confidence == 90

    @pytest.mark.parametrize("code", [0, 81])
    def test_no_data_codes(self, code):
        """Test that background and cloud codes yield None."""
        client = Mock()
        client.get_value_xml.return_value = _result(code)
        assert query_cdl_point(41.6, -93.6, 2022, client=client) is None

    def test_request_failure(self):
        """Test that transport failures yield None."""
        client = Mock()
        client.get_value_xml.side_effect = requests.ConnectionError("down")
        assert query_cdl_point(41.6, -93.6, 2022, client=client) is None

    def test_unknown_code(self):
        """Test an unlisted crop code."""
        client = Mock()
        client.get_value_xml.return_value = _result(999)

        data = query_cdl_point(41.6, -93.6, 2022, client=client)

        assert data.crop_name == "Unknown (999)"
        assert data.crop_type == "non-cropland"


class TestQueryHistory:
    """Test multi-year histories with plausibility warnings."""

    def test_history_sorted_with_warnings(self):
        """Test newest-first ordering and transition warnings."""
        codes = {2021: 1, 2022: 75, 2023: 1, 2020: 81}
        client = Mock()
        client.get_value_xml.side_effect = lambda lat, lon, year: _result(codes[year])

        history = query_cdl_history(41.6, -93.6, years=[2020, 2021, 2022, 2023], client=client)

        assert [h.year for h in history] == [2023, 2022, 2021]
        assert history[0].transition_warning is None
        assert history[1].transition_warning.startswith("Almonds typically requires 3-7 years")
        assert history[2].transition_warning.startswith(
            "Unlikely transition from established Almonds to Corn"
        )

    def test_default_years_from_client(self):
        """Test that the client's year range is used by default."""
        client = Mock()
        client.years = [2023, 2022]
        client.get_value_xml.return_value = _result(5)

        history = query_cdl_history(41.6, -93.6, client=client)

        assert [h.crop_name for h in history] == ["Soybeans", "Soybeans"]


class TestCropTypes:
    """Test crop metadata and history analysis."""

    def test_crop_info(self):
        """Test known crop metadata."""
        assert get_crop_info(141).name == "Deciduous Forest"
        assert get_crop_type(141) == "forest"

    def test_estimated_accuracy(self):
        """Test per-code, per-type and default accuracy."""
        assert get_estimated_accuracy(111) == 95
        assert get_estimated_accuracy(12) == 75
        assert get_estimated_accuracy(999) == 65

    def test_transitions(self):
        """Test unlikely and ordinary transitions."""
        assert validate_transition("annual", "annual", "Corn", "Soybeans") is None
        assert validate_transition(None, "annual", "?", "Corn") is None
        assert "typically permanent" in validate_transition(
            "annual", "developed", "Corn", "Developed", 80
        )
        assert "(80% confidence)" in validate_transition(
            "annual", "developed", "Corn", "Developed", 80
        )

    def test_single_permanent_year(self):
        """Test that an isolated permanent crop is flagged."""
        history = [
            CropHistoryEntry(year=2023, crop_type="annual", crop_name="Corn"),
            CropHistoryEntry(year=2022, crop_type="permanent", crop_name="Grapes"),
        ]

        warnings = analyze_crop_history(history)

        assert warnings[0].year == 2022
        assert warnings[0].warning.startswith("Single year of Grapes is highly unlikely")

    def test_consecutive_permanent_years_not_flagged(self):
        """Test that an established orchard raises no single-year warning."""
        history = [
            CropHistoryEntry(year=2023, crop_type="permanent", crop_name="Almonds"),
            CropHistoryEntry(year=2022, crop_type="permanent", crop_name="Almonds"),
        ]
        warnings = analyze_crop_history(history)
        assert not any("Single year" in w.warning for w in warnings)

    def test_low_confidence(self):
        """Test the low confidence warning."""
        history = [CropHistoryEntry(year=2023, crop_type="annual", crop_name="Rye", confidence=40)]
        assert analyze_crop_history(history)[0].warning == (
            "Low confidence (40%) for Rye classification."
        )


class TestStac:
    """Test the Planetary Computer STAC client."""

    ITEM = {
        "id": "cdl-2023-iowa",
        "bbox": [-94.0, 41.0, -93.0, 42.0],
        "assets": {
            "image": {"href": "https://store.blob.core.windows.net/cdl/2023.tif", "roles": ["data"]}
        },
    }

    def test_search_items(self, make_response):
        """Test the search body and parsed items."""
        client = CDLStacClient(base_url="https://stac.example.org/v1/")

        with patch("soilviz.cdl.stac.request") as mock_request:
            mock_request.return_value = make_response(json_data={"features": [self.ITEM]})
            items = client.search_items([-94.0, 41.0, -93.0, 42.0], year=2023)

        assert items[0].id == "cdl-2023-iowa"
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://stac.example.org/v1/search")
        assert kwargs["json"]["collections"] == ["usda-cdl"]
        assert kwargs["json"]["datetime"].startswith("2023-01-01")

    def test_malformed_features_skipped(self, make_response):
        """Test that invalid features are dropped and valid ones kept."""
        features = [{"bbox": "bad"}, self.ITEM, "not a feature"]

        with patch(
            "soilviz.cdl.stac.request",
            return_value=make_response(json_data={"features": features}),
        ):
            items = CDLStacClient().search_items([-94.0, 41.0, -93.0, 42.0])

        assert [item.id for item in items] == ["cdl-2023-iowa"]

    def test_search_error_returns_empty(self, make_response):
        """Test that failed searches return no items."""
        with patch("soilviz.cdl.stac.request", return_value=make_response(status_code=500)):
            assert CDLStacClient().search_items([0, 0, 1, 1]) == []

    def test_sign_blob_asset(self, make_response):
        """Test signing of unsigned blob storage hrefs without caching."""
        item = STACItem.model_validate(self.ITEM)
        signed = make_response(json_data={"href": "https://store.blob.core.windows.net/cdl/2023.tif?st=x"})

        with patch("soilviz.cdl.stac.request", return_value=signed) as mock_request:
            url = CDLStacClient().get_signed_asset_url(item)

        assert url.endswith("?st=x")
        _, kwargs = mock_request.call_args
        assert kwargs["read_from_cache"] is False
        assert kwargs["write_to_cache"] is False

    def test_missing_asset(self):
        """Test that a missing asset yields None."""
        item = STACItem(id="x")
        assert CDLStacClient().get_signed_asset_url(item) is None

    def test_tile_url_falls_back_to_collection(self, make_response):
        """Test the collection tile template when the bbox has no items."""
        client = CDLStacClient()

        with patch("soilviz.cdl.stac.request", return_value=make_response(json_data={"features": []})):
            url = client.get_cdl_tile_url(2023, bbox=[-94.0, 41.0, -93.0, 42.0])

        assert url == client.collection_tile_url()
        assert "/collection/tiles/WebMercatorQuad/{z}/{x}/{y}@1x.png" in url

    def test_tile_url_for_item(self, make_response):
        """Test the item tile template when an item is found."""
        client = CDLStacClient()
        responses = [
            make_response(json_data={"features": [self.ITEM]}),
            make_response(json_data={"href": "https://signed.example.org/2023.tif"}),
        ]

        with patch("soilviz.cdl.stac.request", side_effect=responses):
            url = client.get_cdl_tile_url(2023, bbox=[-94.0, 41.0, -93.0, 42.0])

        assert "item=cdl-2023-iowa" in url

    def test_legend(self):
        """Test the legend entries."""
        legend = get_cdl_legend()
        assert legend[0].label == "Corn"
        assert legend[0].value == 1
        assert all(entry.color.startswith("#") for entry in legend)


@pytest.mark.integration
class TestCdlIntegration:
    """Live CropScape queries."""

    def test_iowa_cropland(self):
        """Test a point in Iowa cropland returns a crop."""
        data = query_cdl_point(42.0, -93.6, 2022)
        assert data is not None
        assert data.crop_code > 0
