"""Tests for map colors, code interpretations and property classification."""

import pytest

from soilviz.colors import (
    CLAY_RAMP,
    DEFAULT_ORDER_COLOR,
    DEFAULT_TEXTURE_COLOR,
    get_carbon_color,
    get_color_from_ramp,
    get_ph_color,
    get_soil_order_color,
    get_texture_color,
)
from soilviz.interpretations import (
    DEFAULT_COLOR,
    get_capability_color,
    get_capability_interpretation,
    get_drainage_color,
    get_drainage_interpretation,
    get_hydrologic_group_interpretation,
    get_hydrology_color,
    get_subclass_interpretation,
)
from soilviz.properties import (
    DEFAULT_PROPERTY_COLOR,
    calculate_soil_quality,
    classify_property,
    format_property_value,
    generate_property_legend,
    get_properties_by_quality,
    get_property_color,
    get_property_status,
    get_regional_optimal,
    list_properties,
)


class TestColors:
    """Test taxonomy colors and color ramps."""

    def test_soil_order_color(self):
        """Test known and unknown soil orders."""
        assert get_soil_order_color("Mollisols") == "#654321"
        assert get_soil_order_color("Unknownsols") == DEFAULT_ORDER_COLOR
        assert get_soil_order_color(None) == DEFAULT_ORDER_COLOR

    def test_texture_color(self):
        """Test known and unknown texture classes."""
        assert get_texture_color("Silt Loam") == "#A0826D"
        assert get_texture_color("gravel") == DEFAULT_TEXTURE_COLOR

    def test_ramp_clamps_at_ends(self):
        """Test that values beyond the ramp use the end colors."""
        assert get_color_from_ramp(-5, CLAY_RAMP) == "#FFFFCC"
        assert get_color_from_ramp(150, CLAY_RAMP) == "#0C2C84"

    def test_ramp_uses_lower_stop(self):
        """Test that in-range values take the lower stop's color."""
        assert get_color_from_ramp(20, CLAY_RAMP) == "#C7E9B4"
        assert get_ph_color(6.0) == "#FD8D3C"
        assert get_carbon_color(3) == "#FC8D59"


class TestInterpretations:
    """Test farmer-facing code interpretations."""

    def test_capability_class(self):
        """Test class lookup by number or string."""
        assert get_capability_interpretation(1)["name"] == "Excellent for Crops"
        assert get_capability_interpretation("4")["name"] == "Severe Limitations"
        assert get_capability_interpretation(9) is None

    def test_subclass(self):
        """Test subclass lookup is case-insensitive."""
        assert get_subclass_interpretation("E") == get_subclass_interpretation("e")
        assert get_subclass_interpretation("") is None

    def test_dual_hydrologic_group(self):
        """Test that A/D resolves to the drained group A."""
        assert get_hydrologic_group_interpretation("A/D")["name"] == "High Infiltration"
        assert get_hydrologic_group_interpretation("") is None

    def test_drainage_interpretation(self):
        """Test drainage class lookup ignores case."""
        result = get_drainage_interpretation("moderately well drained")
        assert result["name"] == "Moderately Well Drained"
        assert get_drainage_interpretation("swampy") is None

    def test_colors(self):
        """Test capability, hydrology and drainage colors."""
        assert get_capability_color(1) == "#10b981"
        assert get_capability_color("x") == DEFAULT_COLOR
        assert get_hydrology_color("D") == "#ef4444"
        assert get_drainage_color("Excessively drained") == "#f97316"
        assert get_drainage_color("Well drained") == "#22c55e"
        assert get_drainage_color("Very poorly drained") == "#eab308"
        assert get_drainage_color("Subaqueous") == DEFAULT_COLOR


class TestPropertyClassification:
    """Test classification of horizon properties."""

    def test_list_properties(self):
        """Test the supported properties."""
        assert set(list_properties()) == {"clay", "om", "ph", "awc", "ksat"}

    def test_bins_are_half_open(self):
        """Test that a bin boundary belongs to the upper bin."""
        result = classify_property(15, "clay")
        assert result.label == "Moderate"
        assert result.index == 2
        assert result.outlier is None

    def test_last_bin_includes_max(self):
        """Test that the maximum of the last bin is inside it."""
        result = classify_property(100, "clay")
        assert result.label == "Maximum"
        assert result.outlier is None

    def test_outliers_are_clamped(self):
        """Test values beyond the table are clamped and flagged."""
        low = classify_property(2.0, "ph")
        high = classify_property(12.0, "ph")

        assert low.label == "Extremely Acid"
        assert low.outlier == "low"
        assert high.label == "Strongly Alkaline"
        assert high.outlier == "high"

    def test_invalid_inputs(self):
        """Test unknown properties and non-numeric values."""
        assert classify_property(10, "sodium") is None
        assert classify_property("10", "clay") is None
        assert classify_property(float("nan"), "clay") is None
        assert classify_property(True, "clay") is None

    def test_property_color(self):
        """Test property colors with a fallback."""
        assert get_property_color(6.8, "ph") == "#10b981"
        assert get_property_color(None, "ph") == DEFAULT_PROPERTY_COLOR

    def test_status(self):
        """Test status against the optimal window."""
        assert get_property_status(6.5, "ph") == "optimal"
        assert get_property_status(5.0, "ph") == "low"
        assert get_property_status(8.0, "ph") == "high"
        assert get_property_status(5.0, "unknown") == "unknown"


class TestSoilQuality:
    """Test the aggregate soil quality score."""

    def test_all_optimal(self):
        """Test that optimal values score 100."""
        result = calculate_soil_quality({"ph": 6.5, "om": 3.0, "clay": 20})
        assert result.overall_score == 100
        assert result.valid_properties == 3

    def test_distance_penalty(self):
        """Test the penalty of 50 points per optimal-window width."""
        # om window 2-6: midpoint 4, width 4; value 10 is 1.5 widths away
        result = calculate_soil_quality({"om": 10})
        assert result.property_scores["om"].score == pytest.approx(25.0)
        assert result.property_scores["om"].status == "high"
        assert result.overall_score == 25

    def test_ignores_unknown_and_non_numeric(self):
        """Test that unusable inputs are skipped."""
        result = calculate_soil_quality({"sodium": 5, "ph": None})
        assert result.overall_score == 0
        assert result.valid_properties == 0


class TestPropertyDisplay:
    """Test formatting, legends and regional optima."""

    def test_format_property_value(self):
        """Test per-property precision and units."""
        assert format_property_value(6.53, "ph") == "6.5"
        assert format_property_value(0.183, "awc") == "0.18 in/in"
        assert format_property_value(0.0456, "ksat") == "0.046 μm/s"
        assert format_property_value(9.12, "ksat") == "9.1 μm/s"
        assert format_property_value(28.0, "clay") == "28.0 %"
        assert format_property_value(3.3, "sodium") == "3.3"

    def test_legend(self):
        """Test legend labels for each bin."""
        legend = generate_property_legend("clay")

        assert len(legend) == 8
        assert legend[0].display_label == "0-5 %"
        assert legend[-1].display_label == "70+ %"
        assert legend[2].full_label == "Moderate: Loam, silt loam"
        assert generate_property_legend("sodium") == []

    def test_properties_by_quality(self):
        """Test bins selected by quality level labels."""
        labels = [r.label for r in get_properties_by_quality("poor", "clay")]
        assert "Very Low" in labels
        assert "Low" in labels

    def test_regional_optimal(self):
        """Test regional adjustments of optimal windows."""
        assert get_regional_optimal("ph", "great_plains").min == 6.8
        assert get_regional_optimal("ph").min == 6.0
        assert get_regional_optimal("sodium") is None
