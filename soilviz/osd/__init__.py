"""Official Series Description (OSD) handling.

Provides:
- Farmer-friendly narratives generated from OSD text files
- A batch JSON description database and its runtime loader
- A structured parse of OSD sections and typical-pedon horizons
- The UC Davis SoilWeb soil-series API client
"""

from soilviz.osd.descriptions import (
    OSDDescriptionStore,
    build_descriptions,
    check_descriptions,
)
from soilviz.osd.models import FormattedSeries, OSDNarrative, OSDRecord
from soilviz.osd.narrative import parse_osd_text
from soilviz.osd.parser import parse_osd
from soilviz.osd.series_api import SoilSeriesClient, format_series_data

__all__ = [
    "FormattedSeries",
    "OSDDescriptionStore",
    "OSDNarrative",
    "OSDRecord",
    "SoilSeriesClient",
    "build_descriptions",
    "check_descriptions",
    "format_series_data",
    "parse_osd",
    "parse_osd_text",
]
