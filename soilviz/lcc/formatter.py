"""Turn SSURGO land capability fields into farmer-friendly guidance.

SSURGO stores the capability class (``nirrcapcl``/``irrcapcl``) and the
subclass letters (``nirrcapscl``/``irrcapscl``) in separate component
columns. Classes may arrive as digits ("3", "3e") or Roman numerals ("IIIe").
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from soilviz.lcc.models import (
    ROMAN_CLASSES,
    ComponentLCCSummary,
    DominantLCC,
    FormattedLCC,
    LCCDescription,
    LCCLimitation,
    LCCRating,
    LimitationSeverity,
    LimitationType,
    ManagementSummary,
    SubclassDescription,
)
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

CROPLAND = {"I", "II", "III", "IV"}
GRAZING = {"V", "VI"}
NON_AGRICULTURAL = {"VII", "VIII"}

UNAVAILABLE_DESCRIPTION = LCCDescription(
    summary="Classification unavailable",
    description="Land capability classification not available for this area.",
    management="Consult local soil scientist for management recommendations.",
    crops="Contact your local NRCS office for crop suitability information.",
)

# (cropland, grazing, non-agricultural, no class context)
_SUBCLASS_TEXT: dict[str, dict[str, Any]] = {
    "e": {
        "name": "Erosion Risk",
        "description": (
            "Risk of soil erosion by water or wind that affects crop production and soil productivity",
            "Risk of soil erosion by water or wind that limits grazing management and vegetation maintenance",
            "Risk of soil erosion by water or wind that threatens natural vegetation and watershed integrity",
            "Risk of soil erosion by water or wind",
        ),
        "management": (
            "Use conservation tillage, cover crops, terracing, or windbreaks",
            "Manage grazing intensity, maintain vegetation cover, install erosion control structures",
            "Maintain natural vegetation, minimize disturbance, install erosion control structures where needed",
            "Use conservation tillage, cover crops, terracing, or windbreaks",
        ),
    },
    "w": {
        "name": "Wetness",
        "description": (
            "Excess water limits field access, delays planting and harvest, and can cause crop loss",
            "Excess water limits livestock access, creates muddy conditions, and may require seasonal grazing restrictions",
            "Excess water creates wetland conditions best suited for wildlife habitat and watershed protection",
            "Excess water limits use during wet periods",
        ),
        "management": (
            "May need controlled drainage, raised beds, or timing adjustments for field operations",
            "Restrict grazing during wet periods, establish stable access routes and livestock paths",
            "Protect wetland functions, maintain buffer zones, preserve natural hydrology",
            "May need drainage, raised beds, or timing adjustments for field operations",
        ),
    },
    "s": {
        "name": "Soil Limitations",
        "description": (
            "Soil depth, stones, low water-holding capacity, or chemical problems that restrict root development and reduce crop yield",
            "Soil depth, stones, low water-holding capacity, or chemical problems that limit forage production and carrying capacity",
            "Soil depth, stones, low water-holding capacity, or chemical problems that limit vegetation establishment",
            "Soil depth, stones, low water capacity, or chemical problems",
        ),
        "management": (
            "May require soil amendments, specialized equipment, adapted crop selection, or modified tillage practices",
            "Select adapted forage species, manage stocking rates based on productivity, consider soil amendments for pasture improvement",
            "Allow natural vegetation adapted to soil conditions, avoid soil disturbance",
            "May require soil amendments, specialized equipment, or crop selection",
        ),
    },
    "c": {
        "name": "Climate Limitations",
        "description": (
            "Temperature or moisture deficiency that shortens growing season and limits crop selection",
            "Temperature or moisture deficiency that reduces forage production and extends dormant season",
            "Temperature or moisture deficiency that determines natural vegetation type and productivity",
            "Temperature or moisture deficiency affects crop growth",
        ),
        "management": (
            "Select appropriate varieties for shorter seasons, consider irrigation, adjust planting and harvest dates",
            "Adjust stocking rates for climate-limited forage production, provide supplemental feed during dormant periods",
            "Preserve native vegetation adapted to local climate conditions",
            "Select appropriate varieties, consider irrigation, or adjust planting dates",
        ),
    },
}


def parse_lcc_class(rating: str | None) -> str | None:
    """Roman numeral class from '2', '2e', 'II' or 'IIe'; None if unparseable."""
    if not rating:
        return None

    numeric = re.match(r"^(\d)", rating)
    if numeric:
        num = int(numeric.group(1))
        return ROMAN_CLASSES[num - 1] if 1 <= num <= 8 else None

    roman = re.match(r"^([IV]{1,4})", rating)
    if roman and roman.group(1) in ROMAN_CLASSES:
        return roman.group(1)
    return None


def parse_lcc_subclass(rating: str | None) -> str:
    """Subclass letters following the class, e.g. 'IVew' -> 'ew'."""
    if not rating:
        return ""
    match = re.match(r"^(?:[IV]+|\d)([ewsc]+)?", rating)
    return (match.group(1) or "") if match else ""


def get_class_description(lcc_class: str | None, irrigated: bool = False) -> LCCDescription:
    if not lcc_class:
        return UNAVAILABLE_DESCRIPTION.model_copy()

    condition = "with irrigation" if irrigated else "without irrigation"

    descriptions = {
        "I": LCCDescription(
            summary=f"Excellent cropland {condition}",
            description=(
                "This is prime agricultural land with few limitations. Suitable for all "
                "common crops with proper management. "
                + (
                    "Irrigation enhances productivity and crop options."
                    if irrigated
                    else "Well-suited for rainfed agriculture."
                )
            ),
            management="Standard farming practices. Focus on maintaining soil health and preventing erosion.",
            crops="All common field crops, vegetables, orchards, and pasture.",
        ),
        "II": LCCDescription(
            summary=f"Good cropland {condition}",
            description=(
                "High-quality agricultural land with minor limitations that reduce crop "
                "choice or require special management."
                + (" Irrigation helps overcome moisture limitations." if irrigated else "")
            ),
            management="Conservation practices recommended. May need terracing, drainage, or specific tillage practices.",
            crops="Most field crops and pasture. Some specialty crops may have limitations.",
        ),
        "III": LCCDescription(
            summary=f"Moderate cropland {condition}",
            description=(
                "Agricultural land with noticeable limitations that reduce crop choice "
                "and require careful management."
                + (" Irrigation significantly improves productivity." if irrigated else "")
            ),
            management="Intensive conservation practices required. May need specialized equipment or modified farming systems.",
            crops="Limited crop rotation options. Best suited for hay, pasture, or specific adapted crops.",
        ),
        "IV": LCCDescription(
            summary=f"Limited cropland {condition}",
            description=(
                "Land with severe limitations that restrict crop choice to a few adapted "
                "species or require very careful management."
                + (" Irrigation may enable limited crop production." if irrigated else "")
            ),
            management="Intensive conservation required. Consider alternative land uses if cropping is not profitable.",
            crops="Very limited crop options. Primarily hay, pasture, or specialty crops with specific adaptations.",
        ),
        "V": LCCDescription(
            summary=f"Non-cropland {condition}",
            description=(
                "Land not suitable for cultivation due to wetness, stones, or other "
                "factors, but suitable for grazing or forestry. "
                + (
                    "Irrigation does not overcome fundamental limitations."
                    if irrigated
                    else "Physical limitations prevent cultivation."
                )
            ),
            management="Managed grazing, forestry, or wildlife habitat. Protect from overgrazing.",
            crops="Native pasture, improved pasture with limitations, or forestry.",
        ),
        "VI": LCCDescription(
            summary="Limited grazing land",
            description=(
                "Land with severe limitations that make it unsuitable for cultivation and "
                "limit its use for grazing or forestry. Steep slopes, shallow soils, or "
                "excessive wetness are common."
            ),
            management="Light grazing only. Focus on erosion control and vegetation maintenance.",
            crops="Native vegetation, wildlife habitat, limited grazing.",
        ),
        "VII": LCCDescription(
            summary="Very limited grazing land",
            description=(
                "Land with very severe limitations that make it unsuitable for cultivation "
                "and severely limit grazing use. Best for wildlife, watershed protection, "
                "or recreation."
            ),
            management="Minimal disturbance. Protect natural vegetation and prevent erosion.",
            crops="Wildlife habitat, watershed protection, recreation. Very limited grazing if any.",
        ),
        "VIII": LCCDescription(
            summary="Non-agricultural land",
            description=(
                "Land not suitable for agriculture, grazing, or commercial forestry due to "
                "extreme limitations. Best used for wildlife, watershed protection, "
                "recreation, or aesthetic purposes."
            ),
            management="Preserve in natural state. No agricultural use recommended.",
            crops="Wildlife habitat, watershed protection, recreation only.",
        ),
    }
    return descriptions.get(lcc_class, UNAVAILABLE_DESCRIPTION.model_copy())


def get_subclass_descriptions(
    subclass: str, lcc_class: str | None = None
) -> list[SubclassDescription]:
    """Describe each subclass letter in the context of the land's capability."""
    if lcc_class in CROPLAND:
        context = 0
    elif lcc_class in GRAZING:
        context = 1
    elif lcc_class in NON_AGRICULTURAL:
        context = 2
    else:
        context = 3

    result = []
    for code in subclass:
        info = _SUBCLASS_TEXT.get(code)
        if info is None:
            continue
        result.append(
            SubclassDescription(
                code=code,
                name=info["name"],
                description=info["description"][context],
                management=info["management"][context],
            )
        )
    return result


def _as_dict(component: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    return component.model_dump() if isinstance(component, BaseModel) else component


def _class_number(value: Any) -> int:
    match = re.match(r"^\s*(\d+)", str(value)) if value is not None else None
    return int(match.group(1)) if match else 0


def _severity_by_class(class_num: int, very_severe_at: int | None = 7) -> LimitationSeverity:
    if very_severe_at is not None and class_num >= very_severe_at:
        return LimitationSeverity.VERY_SEVERE
    if class_num >= 5:
        return LimitationSeverity.SEVERE
    if class_num >= 3:
        return LimitationSeverity.MODERATE
    return LimitationSeverity.SLIGHT


def _is_present(frequency: str | None) -> bool:
    if not frequency:
        return False
    lowered = frequency.lower()
    return not any(term in lowered for term in ("none", "very rare"))


def _fmt(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _erosion(c: Mapping[str, Any], class_num: int, lcc_class: Any) -> LCCLimitation:
    slope = c.get("slope_r")
    if slope is None:
        slope = c.get("slope_percent")

    if slope is None:
        return LCCLimitation(
            type=LimitationType.EROSION,
            severity=_severity_by_class(class_num),
            description="Erosion risk present due to slope, wind, or other factors",
            value=f"Class {lcc_class} erosion limitation",
        )

    shown = _fmt(slope)
    if slope > 20:
        severity = LimitationSeverity.VERY_SEVERE
        text = f"Very steep slopes ({shown}%) greatly increase erosion risk and limit equipment use"
    elif slope > 12:
        severity = LimitationSeverity.SEVERE
        text = f"Steep slopes ({shown}%) increase erosion risk and require special equipment"
    elif slope > 6:
        severity = LimitationSeverity.MODERATE
        text = f"Moderate slopes ({shown}%) require conservation practices to prevent erosion"
    else:
        severity = LimitationSeverity.SLIGHT
        text = f"Gentle slopes ({shown}%) may have erosion concerns requiring conservation practices"
    return LCCLimitation(
        type=LimitationType.EROSION, severity=severity, description=text, value=slope
    )


def _wetness(c: Mapping[str, Any], class_num: int, lcc_class: Any) -> LCCLimitation:
    drainage = c.get("drainagecl") or c.get("drainage_class")
    flooding = c.get("flodfreqcl")
    ponding = c.get("pondfreqcl")

    if _is_present(flooding):
        lowered = flooding.lower()
        if "frequent" in lowered:
            severity = LimitationSeverity.SEVERE
        elif "occasional" in lowered:
            severity = LimitationSeverity.MODERATE
        else:
            severity = LimitationSeverity.SLIGHT
        return LCCLimitation(
            type=LimitationType.WETNESS,
            severity=severity,
            description=(
                f"Wetness due to {lowered} flooding affects crop timing, equipment "
                "access, and may cause crop loss"
            ),
            value=flooding,
        )

    if _is_present(ponding):
        return LCCLimitation(
            type=LimitationType.WETNESS,
            severity=LimitationSeverity.MODERATE,
            description=(
                f"Wetness due to {ponding.lower()} ponding can delay planting and "
                "affect crop establishment"
            ),
            value=ponding,
        )

    if drainage:
        lowered = drainage.lower()
        if "very poorly" in lowered:
            severity = LimitationSeverity.VERY_SEVERE
            text = "Wetness from very poor drainage severely restricts root development and limits field access"
        elif "somewhat poorly" in lowered:
            severity = LimitationSeverity.MODERATE
            text = "Wetness from somewhat poor drainage - seasonal wetness affects field operations"
        elif "poorly" in lowered:
            severity = LimitationSeverity.SEVERE
            text = "Wetness from poor drainage limits root development and machinery use during wet periods"
        else:
            severity = _severity_by_class(class_num, very_severe_at=None)
            text = f"Excess water limits use - drainage class: {drainage}"
        return LCCLimitation(
            type=LimitationType.WETNESS, severity=severity, description=text, value=drainage
        )

    return LCCLimitation(
        type=LimitationType.WETNESS,
        severity=_severity_by_class(class_num, very_severe_at=None),
        description="Excess water limits use - may be due to poor drainage, flooding, or ponding",
        value=f"Class {lcc_class} wetness limitation",
    )


def _soil(c: Mapping[str, Any], class_num: int, lcc_class: Any) -> LCCLimitation:
    restriction = c.get("reskind")
    depth = c.get("resdept_r")
    severity = _severity_by_class(class_num)

    if restriction or depth is not None:
        details = []
        if restriction:
            details.append(restriction)
        if depth is not None:
            details.append(f"restrictive layer at {_fmt(depth)}cm")
        return LCCLimitation(
            type=LimitationType.SOIL_LIMITATIONS,
            severity=severity,
            description="Soil limitations: " + ", ".join(details),
            value=restriction or f"{_fmt(depth)}cm depth",
        )

    return LCCLimitation(
        type=LimitationType.SOIL_LIMITATIONS,
        severity=severity,
        description="Soil limitations such as depth, stones, low water capacity, or chemical problems",
        value=f"Class {lcc_class} soil limitation",
    )


def _climate(c: Mapping[str, Any], class_num: int, lcc_class: Any) -> LCCLimitation:
    temp_class = c.get("taxtempcl")
    frost_action = c.get("frostact")
    severity = _severity_by_class(class_num)

    if temp_class or frost_action:
        details = []
        if temp_class:
            details.append(f"{temp_class} temperature regime")
        if frost_action:
            details.append(f"{frost_action} frost action")
        return LCCLimitation(
            type=LimitationType.CLIMATE,
            severity=severity,
            description="Climate limitations: " + ", ".join(details),
            value=temp_class or frost_action,
        )

    return LCCLimitation(
        type=LimitationType.CLIMATE,
        severity=severity,
        description="Climate limitations such as temperature or moisture deficiency affect crop growth",
        value=f"Class {lcc_class} climate limitation",
    )


_LIMITATION_BUILDERS = {"e": _erosion, "w": _wetness, "s": _soil, "c": _climate}


def identify_limitations(
    component: Mapping[str, Any] | BaseModel, irrigated: bool = False
) -> list[LCCLimitation]:
    """
    Expand a component's subclass letters into limitations with severities.

    Severity comes from component data (slope, drainage, flooding, ...)
    when present and from the capability class number otherwise.

    Args:
        component: SSURGO component row or ``Component`` model
        irrigated: Use the irrigated class/subclass columns

    Returns:
        One limitation per distinct subclass letter, in order of appearance
    """
    c = _as_dict(component)
    if irrigated:
        subclass = c.get("irrcapscl") or ""
        lcc_class = c.get("irrcapcl") or c.get("nirrcapcl")
    else:
        subclass = c.get("nirrcapscl") or ""
        lcc_class = c.get("nirrcapcl") or c.get("irrcapcl")
    class_num = _class_number(lcc_class)

    limitations = []
    for letter in dict.fromkeys(subclass):
        builder = _LIMITATION_BUILDERS.get(letter)
        if builder:
            limitations.append(builder(c, class_num, lcc_class))
    return limitations


def generate_management_summary(
    rating: LCCRating | None,
    limitations: list[LCCLimitation],
    comparison: LCCRating | None = None,
) -> ManagementSummary:
    """
    Suggest crops, conservation practices and key considerations.

    Args:
        rating: Capability rating the summary is for
        limitations: Limitations identified for that rating
        comparison: Irrigated rating to compare against, if any
    """
    summary = ManagementSummary()
    primary = rating.lcc_class if rating else None

    if primary in ("I", "II"):
        summary.suitable_crops += ["All common field crops", "Vegetables", "Orchards", "Pasture"]
    elif primary in ("III", "IV"):
        summary.suitable_crops += ["Hay", "Pasture", "Small grains", "Adapted row crops"]
    elif primary in GRAZING:
        summary.suitable_crops += ["Native pasture", "Improved pasture", "Forestry"]

    types = {lim.type for lim in limitations}
    practices = summary.conservation_practices

    if types & {LimitationType.EROSION, LimitationType.SLOPE}:
        if primary in CROPLAND:
            practices += ["Contour farming", "Terracing", "Cover crops", "No-till or reduced tillage"]
        elif primary in GRAZING:
            practices += ["Managed grazing intensity", "Erosion control structures", "Vegetation maintenance"]
        elif primary in NON_AGRICULTURAL:
            practices += ["Maintain natural vegetation", "Erosion control structures", "Minimize disturbance"]

    if LimitationType.WETNESS in types:
        if primary in CROPLAND:
            practices += ["Controlled drainage", "Raised beds", "Crop timing adjustments"]
        elif primary in GRAZING:
            practices += ["Restrict grazing during wet periods", "Establish stable access routes", "Wetland protection"]
        elif primary in NON_AGRICULTURAL:
            practices += ["Wetland conservation", "Wildlife habitat protection", "Buffer zones"]

    if LimitationType.FLOODING in types:
        if primary in CROPLAND:
            practices += ["Flood-tolerant crops", "Crop insurance", "Alternative land use during flood season"]
        elif primary in GRAZING:
            practices += ["Emergency livestock management plan", "Floodplain grazing restrictions"]
        elif primary in NON_AGRICULTURAL:
            practices += ["Floodplain conservation", "Riparian buffer maintenance", "Natural flood storage"]

    if rating and comparison and comparison.rank < rating.rank:
        summary.key_considerations.append("Irrigation significantly improves productivity on this soil")
    if len(limitations) > 3:
        summary.key_considerations.append("Multiple limitations require careful, integrated management")
    if primary in ("VI", "VII", "VIII"):
        summary.key_considerations.append(
            "Consider non-crop uses: wildlife habitat, recreation, or conservation"
        )

    return summary


def _rating(class_value: Any, subclass_value: Any) -> LCCRating | None:
    lcc_class = parse_lcc_class(str(class_value) if class_value is not None else None)
    if not lcc_class:
        return None
    subclass = subclass_value or parse_lcc_subclass(str(class_value))
    return LCCRating(lcc_class=lcc_class, subclass=subclass)


def _dominant(components: list[Mapping[str, Any]]) -> Mapping[str, Any]:
    major = [c for c in components if c.get("majcompflag") == "Yes"]
    if not major:
        return components[0]
    return max(major, key=lambda c: c.get("comppct_r") or 0)


def format_lcc_data(components: Sequence[Mapping[str, Any] | BaseModel]) -> FormattedLCC:
    """Summarize land capability for a map unit from its components."""
    if not components:
        return FormattedLCC(
            irrigated_description=get_class_description(None, True),
            nonirrigated_description=get_class_description(None, False),
        )

    rows = [_as_dict(c) for c in components]
    dominant = _dominant(rows)
    logger.debug(f"Dominant LCC component: {dominant.get('compname')}")

    irrigated = _rating(dominant.get("irrcapcl"), dominant.get("irrcapscl"))
    nonirrigated = _rating(dominant.get("nirrcapcl"), dominant.get("nirrcapscl"))

    irrigated_limitations = identify_limitations(dominant, True) if irrigated else []
    nonirrigated_limitations = identify_limitations(dominant, False) if nonirrigated else []

    summaries = [
        ComponentLCCSummary(
            name=c.get("compname"),
            percent=c.get("comppct_r"),
            irrigated_class=str(c["irrcapcl"]) if c.get("irrcapcl") else None,
            irrigated_subclass=c.get("irrcapscl") or None,
            nonirrigated_class=str(c["nirrcapcl"]) if c.get("nirrcapcl") else None,
            nonirrigated_subclass=c.get("nirrcapscl") or None,
        )
        for c in rows
        if (c.get("comppct_r") or 0) >= 5
    ]

    return FormattedLCC(
        dominant_lcc=DominantLCC(irrigated=irrigated, nonirrigated=nonirrigated),
        irrigated_description=get_class_description(
            irrigated.lcc_class if irrigated else None, True
        ),
        nonirrigated_description=get_class_description(
            nonirrigated.lcc_class if nonirrigated else None, False
        ),
        irrigated_limitations=irrigated_limitations,
        nonirrigated_limitations=nonirrigated_limitations,
        components=summaries,
        irrigated_management=(
            generate_management_summary(irrigated, irrigated_limitations)
            if irrigated
            else ManagementSummary()
        ),
        nonirrigated_management=(
            generate_management_summary(nonirrigated, nonirrigated_limitations, irrigated)
            if nonirrigated
            else ManagementSummary()
        ),
    )
