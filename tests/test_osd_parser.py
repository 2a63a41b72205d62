"""Tests for the structured OSD parser."""

import pytest

from soilviz.osd.parser import (
    extract_colors,
    extract_effervescence,
    extract_section,
    extract_texture,
    find_osd_file,
    format_osd_for_display,
    load_osd_file,
    parse_drainage,
    parse_osd,
)


@pytest.fixture
def record(osd_text):
    return parse_osd(osd_text)


class TestParseOsd:
    """Test parsing of the Coburg OSD."""

    def test_header(self, record):
        """Test series name, state and establishment info."""
        assert record.series_name == "COBURG"
        assert record.state == "OR"
        assert record.established.revision == "JRR-GMK"
        assert record.established.date == "02/2000"
        assert record.taxonomic_class == "Fine, mixed, superactive, mesic Oxyaquic Argixerolls"

    def test_typical_pedon_description(self, record):
        """Test the pedon description spans its wrapped lines."""
        assert record.typical_pedon.description.startswith(
            "Coburg silty clay loam, on a 1 percent slope in a cultivated field."
        )
        assert "(Colors are for moist soil" in record.typical_pedon.description

    def test_horizons(self, record):
        """Test the three typical pedon horizons."""
        horizons = record.typical_pedon.horizons

        assert [h.name for h in horizons] == ["Ap", "Bt1", "C"]
        assert [h.depth for h in horizons] == ["0-8 inches", "8-30 inches", "30-60 inches"]
        assert horizons[2].depth_range.bottom == 60

    def test_surface_horizon_fields(self, record):
        """Test the properties extracted from the Ap horizon."""
        ap = record.typical_pedon.horizons[0]

        assert ap.texture == "silty clay loam"
        assert ap.color.dry == "brown (10YR 4/2)"
        assert ap.color.moist is None
        assert ap.ph == 5.8
        assert ap.reaction == "moderately acid"
        assert ap.structure == "moderate fine granular structure"
        assert ap.consistence == "hard, friable, slightly sticky and slightly plastic"
        assert ap.effervescence == "None"

    def test_horizon_features(self, record):
        """Test redoximorphic and iron features."""
        _, bt1, c = record.typical_pedon.horizons

        assert bt1.texture == "silty clay"
        assert bt1.features == ["Iron accumulation"]
        assert c.features == ["Redoximorphic features"]
        assert c.ph == 6.8

    def test_range_in_characteristics(self, record):
        """Test soil temperature, clay and organic matter ranges."""
        ric = record.range_in_characteristics

        assert ric.mean_annual_soil_temp == "52 to 56 degrees F"
        assert ric.clay_content == "35 to 45 percent"
        assert ric.organic_matter == "3 to 6 percent in the surface layer"

    def test_geographic_setting(self, record):
        """Test landforms, parent material and climate."""
        geo = record.geographic_setting

        assert geo.landforms == ["low stream terraces"]
        assert geo.parent_material == "mixed alluvium"
        assert geo.slopes == "0 to 3 percent"
        assert geo.precipitation == "40 to 60 inches"
        assert geo.temperature == "52 to 54 degrees F"
        assert geo.frost_free_period == "165 to 210 days"

    def test_drainage(self, record):
        """Test drainage class and water table."""
        drainage = record.drainage

        assert drainage.drainage_class == "Moderately well drained"
        assert drainage.water_table == "is at a depth of 18 to 36 inches from December to April"
        assert drainage.permeability == ""
        assert drainage.runoff == ""

    def test_use_distribution_remarks(self, record):
        """Test use, distribution and diagnostic horizons."""
        assert record.use_and_vegetation.vegetation.startswith("is Oregon white oak")
        assert record.distribution.extent == "moderately extensive"
        assert record.distribution.mlra == ["2"]
        assert [r.name for r in record.remarks.diagnostic_horizons] == [
            "Mollic epipedon",
            "Argillic horizon",
        ]

    def test_drainage_serializes_class_alias(self, record):
        """Test the drainage class is written under its 'class' key."""
        dumped = record.model_dump(mode="json", by_alias=True)
        assert dumped["drainage"]["class"] == "Moderately well drained"

    @pytest.mark.parametrize("text", ["", "   \n  "])
    def test_blank_text(self, text):
        """Test that blank input returns None."""
        assert parse_osd(text) is None


class TestExtractors:
    """Test individual field extractors."""

    def test_section_name_case_insensitive(self):
        """Test section names match in any case but end at an upper-case header."""
        text = "Remarks: first line\nDepth class: deep\nTYPE LOCATION: x"
        assert extract_section(text, "REMARKS") == "first line\nDepth class: deep"

    def test_texture_fallback(self):
        """Test texture without a preceding Munsell color."""
        assert extract_texture("; gravelly sandy loam; massive") == "gravelly sandy loam"
        assert extract_texture("; massive; firm") == "Unknown"

    def test_moist_color(self):
        """Test a color explicitly marked moist."""
        colors = extract_colors("pale brown (10YR 6/3) loam, brown (10YR 4/3) moist")
        assert colors.moist == "brown (10YR 4/3)"

    def test_effervescence(self):
        """Test carbonate effervescence classes."""
        assert extract_effervescence("violently effervescent; pH 8.4") == "violently effervescent"

    def test_poorly_drained_not_confused(self):
        """Test that longer drainage classes win over their substrings."""
        assert parse_drainage("Somewhat poorly drained").drainage_class == "Somewhat poorly drained"
        assert parse_drainage("Very poorly drained").drainage_class == "Very poorly drained"


class TestOsdFiles:
    """Test locating and loading OSD files."""

    def test_find_in_letter_folder(self, fixtures_dir):
        """Test lookup under the first-letter subdirectory."""
        path = find_osd_file("coburg", fixtures_dir / "osd")
        assert path == fixtures_dir / "osd" / "C" / "COBURG.txt"

    def test_find_missing(self, fixtures_dir):
        """Test that an unknown series is not found."""
        assert find_osd_file("NOSUCH", fixtures_dir / "osd") is None
        assert load_osd_file("NOSUCH", fixtures_dir / "osd") is None

    def test_load_file(self, fixtures_dir):
        """Test reading the OSD text."""
        text = load_osd_file("Coburg", fixtures_dir / "osd")
        assert text.startswith("LOCATION COBURG")


class TestDisplay:
    """Test the dashboard display grouping."""

    def test_format_for_display(self, record):
        """Test the display panels."""
        display = format_osd_for_display(record)

        assert display["header"]["name"] == "COBURG"
        assert display["header"]["established"] == "02/2000"
        assert display["physical"]["landforms"] == "low stream terraces"
        assert display["physical"]["drainage"] == "Moderately well drained"
        assert len(display["horizons"]) == 3
        assert display["characteristics"]["clay_content"] == "35 to 45 percent"
