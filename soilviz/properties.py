"""Classification of SSURGO horizon properties into mapped quality classes.

Supported properties are clay, om (organic matter), ph, awc (available water
capacity) and ksat (saturated hydraulic conductivity). Range tables and
optimal windows are loaded from ``config/soil_properties.yaml``.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, Field

from soilviz.config import get_soil_properties_config
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PROPERTY_COLOR = "#9ca3af"

PropertyStatus = Literal["optimal", "low", "high", "unknown"]


class PropertyRange(BaseModel):
    """One classification bin."""

    min: float
    max: float
    label: str
    color: str
    description: str


class PropertyClassification(PropertyRange):
    """A bin chosen for a value, with its position in the table."""

    index: int
    outlier: Literal["low", "high"] | None = None


class OptimalRange(BaseModel):
    min: float
    max: float


class PropertyMetadata(BaseModel):
    name: str
    unit: str
    full_name: str
    optimal: OptimalRange
    category: str


class PropertyScore(BaseModel):
    value: float
    score: float
    status: PropertyStatus


class SoilQuality(BaseModel):
    """Aggregate score across the properties supplied."""

    overall_score: int = Field(..., ge=0, le=100)
    property_scores: dict[str, PropertyScore] = Field(default_factory=dict)
    valid_properties: int = 0


class LegendEntry(PropertyRange):
    index: int
    display_label: str
    full_label: str


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def _fmt(value: float) -> str:
    """Render 5.0 as ``5`` and 0.05 as ``0.05``."""
    return f"{value:g}"


def get_property_ranges(prop: str) -> list[PropertyRange]:
    raw = get_soil_properties_config().get("ranges", {}).get(prop)
    return [PropertyRange(**r) for r in raw] if raw else []


def get_property_metadata(prop: str) -> PropertyMetadata | None:
    raw = get_soil_properties_config().get("metadata", {}).get(prop)
    return PropertyMetadata(**raw) if raw else None


def list_properties() -> list[str]:
    return list(get_soil_properties_config().get("metadata", {}).keys())


def classify_property(value: Any, prop: str) -> PropertyClassification | None:
    """Place a value in its property bin.

    Bins are half-open except the last, which includes its maximum. Values
    below the first or above the last bin are clamped and flagged as
    outliers. Returns None for unknown properties and non-numeric values.
    """
    ranges = get_property_ranges(prop)
    if not ranges or not _is_number(value):
        return None

    for i, r in enumerate(ranges[:-1]):
        if r.min <= value < r.max:
            return PropertyClassification(**r.model_dump(), index=i)

    last = ranges[-1]
    if last.min <= value <= last.max:
        return PropertyClassification(**last.model_dump(), index=len(ranges) - 1)

    if value < ranges[0].min:
        return PropertyClassification(**ranges[0].model_dump(), index=0, outlier="low")
    if value > last.max:
        return PropertyClassification(
            **last.model_dump(), index=len(ranges) - 1, outlier="high"
        )

    return None


def get_property_status(value: Any, prop: str) -> PropertyStatus:
    """Compare a value with the optimal window for its property."""
    metadata = get_property_metadata(prop)
    if metadata is None or not _is_number(value):
        return "unknown"

    if metadata.optimal.min <= value <= metadata.optimal.max:
        return "optimal"
    if value < metadata.optimal.min:
        return "low"
    return "high"


def calculate_soil_quality(properties: dict[str, Any]) -> SoilQuality:
    """Score each known numeric property 0-100 and average the scores.

    Optimal values score 100. Others lose 50 points per optimal-window width
    of distance from the window midpoint, floored at 0.
    """
    scores: dict[str, PropertyScore] = {}
    total = 0.0

    for prop, value in properties.items():
        metadata = get_property_metadata(prop)
        if metadata is None or not _is_number(value):
            continue

        status = get_property_status(value, prop)
        if status == "optimal":
            score = 100.0
        else:
            mid = (metadata.optimal.min + metadata.optimal.max) / 2
            width = metadata.optimal.max - metadata.optimal.min
            score = max(0.0, 100 - (abs(value - mid) / width) * 50)

        scores[prop] = PropertyScore(value=value, score=score, status=status)
        total += score

    overall = round(total / len(scores)) if scores else 0
    return SoilQuality(
        overall_score=overall, property_scores=scores, valid_properties=len(scores)
    )


def get_property_color(value: Any, prop: str) -> str:
    classification = classify_property(value, prop)
    return classification.color if classification else DEFAULT_PROPERTY_COLOR


def format_property_value(value: float, prop: str) -> str:
    """Format a value with the precision and unit appropriate to its property."""
    metadata = get_property_metadata(prop)
    if metadata is None:
        return str(value)

    if prop == "ph":
        formatted = f"{value:.1f}"
    elif prop == "awc":
        formatted = f"{value:.2f}"
    elif prop == "ksat":
        if value < 1:
            formatted = f"{value:.3f}"
        elif value < 10:
            formatted = f"{value:.1f}"
        else:
            formatted = str(round(value))
    else:
        formatted = f"{value:.1f}"

    return f"{formatted} {metadata.unit}" if metadata.unit else formatted


def get_properties_by_quality(quality_level: str, prop: str) -> list[PropertyRange]:
    """Bins whose label contains one of the labels mapped to ``quality_level``."""
    labels = get_soil_properties_config().get("quality_labels", {}).get(quality_level, [])
    return [r for r in get_property_ranges(prop) if any(lbl in r.label for lbl in labels)]


def generate_property_legend(prop: str) -> list[LegendEntry]:
    ranges = get_property_ranges(prop)
    metadata = get_property_metadata(prop)
    if not ranges or metadata is None:
        return []

    legend = []
    for i, r in enumerate(ranges):
        span = f"{_fmt(r.min)}+" if i == len(ranges) - 1 else f"{_fmt(r.min)}-{_fmt(r.max)}"
        display = f"{span} {metadata.unit}" if metadata.unit else span
        legend.append(
            LegendEntry(
                **r.model_dump(),
                index=i,
                display_label=display,
                full_label=f"{r.label}: {r.description}",
            )
        )
    return legend


def get_regional_optimal(prop: str, region: str = "default") -> OptimalRange | None:
    """Optimal window for a property, adjusted for a named region when known."""
    metadata = get_property_metadata(prop)
    if metadata is None:
        return None

    regional = get_soil_properties_config().get("regional_optimal", {})
    adjusted = regional.get(region, {}).get(prop)
    if adjusted:
        logger.debug(f"Using {region} optimal range for {prop}: {adjusted}")
        return OptimalRange(**adjusted)
    return metadata.optimal
