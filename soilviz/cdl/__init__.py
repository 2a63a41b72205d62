"""USDA NASS Cropland Data Layer: point values, crop history and STAC tiles."""

from soilviz.cdl.crop_types import (
    CDL_CROP_CODES,
    CROP_TYPE_MAP,
    analyze_crop_history,
    get_estimated_accuracy,
    validate_transition,
)
from soilviz.cdl.models import CDLYearData
from soilviz.cdl.projection import wgs84_to_albers
from soilviz.cdl.query import (
    CDLClient,
    parse_cdl_result,
    query_cdl_history,
    query_cdl_point,
)
from soilviz.cdl.stac import CDL_COLORS, CDLStacClient, get_cdl_legend

__all__ = [
    "CDLClient",
    "CDLStacClient",
    "CDLYearData",
    "CDL_COLORS",
    "CDL_CROP_CODES",
    "CROP_TYPE_MAP",
    "analyze_crop_history",
    "get_cdl_legend",
    "get_estimated_accuracy",
    "parse_cdl_result",
    "query_cdl_history",
    "query_cdl_point",
    "validate_transition",
    "wgs84_to_albers",
]
