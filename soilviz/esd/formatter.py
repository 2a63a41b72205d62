"""Summarize EDIT ecological site descriptions for farmers and land managers."""

from typing import Any

from soilviz.esd.models import (
    BasicInfo,
    ESDImage,
    FarmerFriendlyESD,
    LandCharacteristics,
    Management,
    Productivity,
    Resources,
)
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

EDIT_ASSET_BASE_URL = "https://edit.jornada.nmsu.edu"

# First keyword found in the ecoclass concept wins
SUITABILITY_KEYWORDS = [
    ("forested", "forestry and timber production"),
    ("grassland", "grazing and grassland management"),
    ("pasture", "pasture and livestock grazing"),
    ("cropland", "crop production"),
    ("grazing", "livestock grazing"),
    ("timber", "timber production"),
    ("wildlife", "wildlife habitat"),
    ("conservation", "conservation and habitat management"),
    ("rangeland", "rangeland management"),
    ("wetland", "wetland conservation"),
]


def _num(value: Any) -> Any:
    """Render whole floats without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _find_property(props: list[dict[str, Any]] | None, name: str) -> dict[str, Any] | None:
    return next((p for p in props or [] if p.get("property") == name), None)


def format_location(geo_unit_name: str | None, geo_unit_symbol: str | None) -> str:
    name = (geo_unit_name or "").strip()
    symbol = (geo_unit_symbol or "").strip()
    if name and symbol:
        return f"{name} ({symbol})"
    return name or symbol or "Location information not available"


def extract_suitability(concept: str | None) -> str:
    if not concept:
        return "Suitability information not available"

    lowered = concept.lower()
    for keyword, label in SUITABILITY_KEYWORDS:
        if keyword in lowered:
            return f"Primarily suitable for {label}"

    first_sentence = concept.split(".")[0].strip()
    if 20 < len(first_sentence) < 150:
        return first_sentence

    return "Multiple land use potential - see description below"


def summarize_key_message(concept: str | None) -> str:
    if not concept:
        return ""
    first_sentence = concept.split(".")[0] + "."
    if len(first_sentence) > 200:
        return concept[:197] + "..."
    return first_sentence


def format_terrain(physiographic: dict[str, Any] | None) -> str:
    aspects = ", ".join((physiographic or {}).get("aspect") or [])
    return f"Aspects: {aspects}" if aspects else "Terrain information not available"


def format_landforms(physiographic: dict[str, Any] | None) -> str:
    landforms = ", ".join(
        lf.get("landform", "") for lf in (physiographic or {}).get("landforms") or []
    )
    return landforms or "Landform information not available"


def format_soils(soil_features: dict[str, Any] | None) -> str:
    soil_features = soil_features or {}
    drainage = _find_property(soil_features.get("ordinalProperties"), "Drainage class")
    textures = soil_features.get("texture") or []
    depth = _find_property(soil_features.get("intervalProperties"), "Soil depth")

    parts = []
    if drainage:
        parts.append(
            f"{drainage.get('representativeLow')} to "
            f"{drainage.get('representativeHigh')} drainage"
        )
    if textures:
        texture = textures[0]
        desc = f"{texture.get('modifier1') or ''} {texture.get('texture', '')}".strip()
        parts.append(f"{desc} texture")
    if depth:
        parts.append(
            f"{_num(depth.get('representativeLow'))}-"
            f"{_num(depth.get('representativeHigh'))} {depth.get('unit')} deep"
        )

    return ", ".join(parts) or "Soil information not available"


def format_climate(climatic: dict[str, Any] | None) -> str:
    climatic = climatic or {}
    precip = (climatic.get("map") or {}).get("average")
    frost_free = (climatic.get("frostFreeDays") or {}).get("average")

    parts = []
    if precip:
        parts.append(f'{_num(precip)}" annual precipitation')
    if frost_free:
        parts.append(f"{_num(frost_free)} frost-free days")
    return ", ".join(parts) or "Climate information not available"


def format_elevation(interval_props: list[dict[str, Any]] | None) -> str:
    elev = _find_property(interval_props, "Elevation")
    if not elev:
        return "Elevation data not available"
    return (
        f"{_num(elev.get('representativeLow'))}-"
        f"{_num(elev.get('representativeHigh'))} {elev.get('unit')}"
    )


def format_slopes(interval_props: list[dict[str, Any]] | None) -> str:
    slope = _find_property(interval_props, "Slope")
    if not slope:
        return "Slope data not available"
    return (
        f"{_num(slope.get('representativeLow'))}-"
        f"{_num(slope.get('representativeHigh'))}{slope.get('unit')}"
    )


def format_dominant_species(dominant: dict[str, Any] | None) -> str:
    if dominant is None:
        return "Vegetation information not available"

    species = []
    if dominant.get("dominantTree1"):
        species.append(f"Trees: {dominant['dominantTree1']}")
    if dominant.get("dominantShrub1"):
        species.append(f"Shrubs: {dominant['dominantShrub1']}")
    if dominant.get("dominantHerb1"):
        species.append(f"Herbs: {dominant['dominantHerb1']}")
    return ", ".join(species) or "Vegetation data not available"


def format_productivity(productivity: list[dict[str, Any]] | None) -> str:
    return ", ".join(
        f"{p.get('commonName')}: Site Index {_num(p.get('indexMin'))}-{_num(p.get('indexMax'))}"
        for p in productivity or []
    )


def extract_best_uses(interpretations: dict[str, Any] | None) -> list[str]:
    narratives = (interpretations or {}).get("narratives") or {}
    uses = []
    if narratives.get("woodProducts"):
        uses.append("Timber/Forestry")
    if narratives.get("animalCommunity"):
        uses.append("Wildlife Habitat")
    if narratives.get("recreationalUses"):
        uses.append("Recreation")
    return uses or ["Land use information not available"]


def extract_limitations(
    soil_features: dict[str, Any] | None, physiographic: dict[str, Any] | None
) -> list[str]:
    limitations = []

    slope = _find_property((physiographic or {}).get("intervalProperties"), "Slope")
    if slope and (slope.get("representativeHigh") or 0) > 30:
        limitations.append("Steep slopes limit machinery access")

    drainage = _find_property((soil_features or {}).get("ordinalProperties"), "Drainage class")
    if drainage and "poor" in str(drainage.get("representativeLow") or "").lower():
        limitations.append("Poor drainage may limit use")

    depth = _find_property((soil_features or {}).get("intervalProperties"), "Soil depth")
    if depth and depth.get("representativeLow") is not None and depth["representativeLow"] < 20:
        limitations.append("Shallow soils limit root development")

    return limitations or ["No major limitations identified"]


def _dynamics_text(dynamics_narratives: dict[str, Any] | None) -> str:
    return ((dynamics_narratives or {}).get("ecologicalDynamics") or "").lower()


def extract_opportunities(
    dynamics_narratives: dict[str, Any] | None, interpretations: dict[str, Any] | None
) -> list[str]:
    narratives = (interpretations or {}).get("narratives") or {}
    opportunities = []
    if narratives.get("woodProducts"):
        opportunities.append("Timber production potential")
    if narratives.get("animalCommunity"):
        opportunities.append("Wildlife habitat enhancement")
    if "restoration" in _dynamics_text(dynamics_narratives):
        opportunities.append("Habitat restoration potential")
    return opportunities or ["Contact local extension for opportunities"]


def extract_challenges(dynamics_narratives: dict[str, Any] | None) -> list[str]:
    dynamics = _dynamics_text(dynamics_narratives)
    challenges = []
    if "invasive" in dynamics:
        challenges.append("Invasive species management needed")
    if "fire" in dynamics:
        challenges.append("Fire management considerations")
    if "erosion" in dynamics:
        challenges.append("Erosion control needed")
    return challenges or ["No major challenges identified"]


def extract_management_considerations(interpretations: dict[str, Any] | None) -> list[str]:
    narratives = (interpretations or {}).get("narratives") or {}
    considerations = []
    if narratives.get("hydrologicalFunctions"):
        considerations.append("Consider water quality impacts")
    if narratives.get("animalCommunity"):
        considerations.append("Wildlife timing considerations")
    return considerations or ["Follow best management practices"]


def format_images(
    images: list[dict[str, Any]], asset_base_url: str = EDIT_ASSET_BASE_URL
) -> list[ESDImage]:
    """Resolve image paths to absolute URLs; entries without a path are dropped."""
    formatted = []
    for img in images:
        if not img:
            continue
        url = img.get("path") or img.get("url") or ""
        if not url:
            continue
        if not url.startswith("http"):
            sep = "" if url.startswith("/") else "/"
            url = f"{asset_base_url}{sep}{url}"
        caption = img.get("caption") or img.get("title") or "Site image"
        formatted.append(ESDImage(url=url, caption=caption))
    return formatted


def format_esd_for_farmers(
    data: dict[str, Any], asset_base_url: str = EDIT_ASSET_BASE_URL
) -> FarmerFriendlyESD:
    """
    Transform a raw EDIT description into a farmer-friendly summary.

    Args:
        data: JSON payload from ``EditClient.get_description``
        asset_base_url: Prefix for relative image paths

    Returns:
        FarmerFriendlyESD with the raw payload attached
    """
    general = data.get("generalInformation") or {}
    narratives = general.get("narratives") or {}
    physiographic = data.get("physiographicFeatures") or {}
    soil_features = data.get("soilFeatures") or {}
    dynamics = data.get("ecologicalDynamics") or {}
    interpretations = data.get("interpretations") or {}
    concept = narratives.get("ecoclassConcept")

    images = [
        *(physiographic.get("images") or []),
        *(soil_features.get("images") or []),
        *(dynamics.get("images") or []),
    ]
    logger.debug(f"ESD formatter: {len(images)} images found")

    return FarmerFriendlyESD(
        basic_info=BasicInfo(
            site_name=narratives.get("ecoclassName") or "Unknown Site",
            location=format_location(general.get("geoUnitName"), general.get("geoUnitSymbol")),
            suitability=extract_suitability(concept),
            key_message=summarize_key_message(concept),
            ecoclass_concept=concept or "",
        ),
        land_characteristics=LandCharacteristics(
            terrain=format_terrain(physiographic),
            landforms=format_landforms(physiographic),
            soils=format_soils(soil_features),
            climate=format_climate(data.get("climaticFeatures")),
            elevation=format_elevation(physiographic.get("intervalProperties")),
            slopes=format_slopes(physiographic.get("intervalProperties")),
        ),
        productivity=Productivity(
            dominant_vegetation=format_dominant_species(general.get("dominantSpecies")),
            expected_yields=format_productivity(interpretations.get("siteProductivity")),
            best_uses=extract_best_uses(interpretations),
            limitations=extract_limitations(soil_features, physiographic),
        ),
        management=Management(
            opportunities=extract_opportunities(dynamics.get("narratives"), interpretations),
            challenges=extract_challenges(dynamics.get("narratives")),
            considerations=extract_management_considerations(interpretations),
        ),
        resources=Resources(
            images=format_images(images, asset_base_url),
            additional_info=narratives.get("classification"),
        ),
        raw_data=data,
    )
