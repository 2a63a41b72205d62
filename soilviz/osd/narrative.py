"""Turn Official Series Description text into plain-language narratives.

OSD files are semi-structured: a ``<NAME> SERIES`` header, an opening
paragraph (or a block of ``Key--value`` / ``Key: value`` lines on newer
descriptions), then all-caps sections such as ``GEOGRAPHIC SETTING``. The
functions here pull those pieces apart and rewrite them for farmers and land
managers.
"""

import re

from soilviz.osd.models import OSDNarrative, RangeCharacteristic

RANGE_SECTION = "RANGE IN CHARACTERISTICS"
GEOGRAPHIC_SECTION = "GEOGRAPHIC SETTING"
DRAINAGE_SECTION = "DRAINAGE AND PERMEABILITY"
USE_SECTION = "USE AND VEGETATION"

_HEADER_RE = re.compile(r"^([A-Z\s]+):.*$")
_CAPS_KEY_RE = re.compile(r"^[A-Z\s]+:")
_SECTION_STOP_RE = re.compile(r"^[A-Z\s:]+$")

TECHNICAL_TERMS: dict[str, str] = {
    "lacustrine deposits": "lake sediments",
    "alluvium": "river sediments",
    "colluvium": "hillslope sediments",
    "eolian": "wind-deposited",
    "moderately alkaline": "slightly alkaline",
    "strongly alkaline": "alkaline",
    "gleyed": "waterlogged",
    "smectitic": "clay-rich",
    "vertic": "shrink-swell clay",
    "endoaquepts": "wet soils",
    "endosaturation": "seasonal water saturation",
}

PARENT_MATERIAL_TERMS: dict[str, str] = {
    "alluvium": "river sediments",
    "colluvium": "hillslope sediments",
    "lacustrine": "lake sediments",
    "eolian": "wind-deposited sediments",
}

USE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("crop",), "suitable for crop production"),
    (("pasture", "grazing"), "used for pasture and grazing"),
    (("hay",), "suitable for hay production"),
    (("range",), "used as rangeland"),
    (("forest",), "supports forest growth"),
    (("wildlife",), "provides wildlife habitat"),
]

COMMON_VEGETATION = [
    "grass",
    "grasses",
    "sagebrush",
    "saltgrass",
    "bluegrass",
    "wheatgrass",
    "sedge",
    "rush",
    "cottonwood",
    "willow",
    "juniper",
    "pinyon",
    "pine",
    "oak",
    "aspen",
    "fir",
    "spruce",
    "greasewood",
    "rabbitbrush",
]

REACTION_CLASSES = (
    "strongly acid|moderately acid|slightly acid|neutral|"
    "slightly alkaline|moderately alkaline|strongly alkaline"
)


def _replace_all(text: str, replacements: dict[str, str]) -> str:
    for technical, simple in replacements.items():
        text = re.sub(re.escape(technical), simple, text, flags=re.IGNORECASE)
    return text


def _structured_key(raw: str) -> str:
    return re.sub(r"\s+", "_", raw.strip().lower())


def extract_first_description(lines: list[str]) -> str:
    """Return the opening paragraph that follows the ``<NAME> SERIES`` line.

    Newer OSDs replace the paragraph with ``Depth class: ...`` style lines;
    when no prose is present a sentence is synthesized from those values.
    """
    found_series = False
    prose: list[str] = []
    structured: dict[str, str] = {}

    for line in lines:
        stripped = line.strip()
        if stripped.endswith("SERIES"):
            found_series = True
            continue
        if not found_series or not stripped:
            continue

        header = _HEADER_RE.match(stripped)
        if header and len(header.group(1).strip()) > 5:
            break

        if "--" in line:
            parts = [p.strip() for p in line.split("--")]
            key, value = parts[0], parts[1]
            if key and value:
                structured[_structured_key(key)] = value
        elif ":" in line and not _CAPS_KEY_RE.match(line) and stripped.index(":") < 30:
            key, _, value = line.partition(":")
            key, value = key.strip(), value.strip()
            if key and value and len(key) < 30:
                structured[_structured_key(key)] = value
        else:
            prose.append(stripped)

    if prose:
        return " ".join(prose).strip()
    if structured:
        return _synthesize_description(structured)
    return ""


def _synthesize_description(data: dict[str, str]) -> str:
    traits = [data[k] for k in ("depth_class", "drainage_class") if data.get(k)]
    description = "These are " + (", ".join(traits) + " soils" if traits else "soils")

    if data.get("parent_material"):
        material = _replace_all(data["parent_material"], PARENT_MATERIAL_TERMS)
        description += f" that formed in {material}"

    if data.get("landform"):
        description += f". They are found on {data['landform'].lower()}"

    if data.get("slopes"):
        description += f" with {data['slopes'].lower()} slopes"

    climate = []
    if data.get("mean_annual_precipitation"):
        climate.append(f"rainfall of {data['mean_annual_precipitation']}")
    if data.get("mean_annual_temperature"):
        climate.append(f"average temperatures of {data['mean_annual_temperature']}")
    if climate:
        description += f". The climate provides {' and '.join(climate)}"

    return description + "."


def extract_section(lines: list[str], header: str) -> str:
    """Join the lines of one all-caps OSD section into a single string."""
    in_section = False
    collected: list[str] = []

    for line in lines:
        stripped = line.strip()
        if stripped in (header, f"{header}:"):
            in_section = True
            continue
        if not in_section:
            continue

        is_caps = stripped == stripped.upper() and len(stripped) > 5
        if is_caps and _SECTION_STOP_RE.match(stripped) and "--" not in stripped:
            break
        if stripped:
            collected.append(stripped)

    return " ".join(collected).strip()


def simplify_technical_terms(text: str) -> str:
    return _replace_all(text, TECHNICAL_TERMS)


def extract_location_info(geographic_text: str) -> str:
    match = re.search(r"on\s+([\w\s,]+?)\.", geographic_text, re.IGNORECASE)
    return f"on {match.group(1).lower()}" if match else ""


def extract_climate_info(geographic_text: str) -> str:
    climate = []

    precip = re.search(
        r"mean annual precipitation is (\d+\s+to\s+\d+\s+inches)",
        geographic_text,
        re.IGNORECASE,
    )
    if precip:
        climate.append(f"The climate provides {precip.group(1)} of annual rainfall")

    temp = re.search(
        r"mean annual (?:air )?temperature is (\d+\s+to\s+\d+\s+degrees\s+F)",
        geographic_text,
        re.IGNORECASE,
    )
    if temp:
        climate.append(f"average temperatures of {temp.group(1)}")

    frost = re.search(
        r"frost-free period is (\d+\s+to\s+\d+\s+days)", geographic_text, re.IGNORECASE
    )
    if frost:
        climate.append(f"a growing season of {frost.group(1)}")

    return ", ".join(climate) + "." if climate else ""


def simplify_drainage_info(drainage_text: str) -> str:
    info = []

    if "Well drained" in drainage_text:
        info.append("Water drains readily through this soil")
    elif "Moderately well drained" in drainage_text:
        info.append("Water drains at a moderate rate, with occasional wetness")
    elif (
        "Somewhat poorly drained" in drainage_text
        or "Poorly drained" in drainage_text
        or "poorly drained" in drainage_text
    ):
        info.append("This soil tends to stay wet and may have drainage challenges")
    elif "Excessively drained" in drainage_text:
        info.append("Water drains very quickly through this soil")

    lowered = drainage_text.lower()
    if "slow permeability" in lowered:
        info.append("water moves slowly through the soil layers")
    elif "moderate permeability" in lowered:
        info.append("water moves at a moderate pace through the soil")
    elif "rapid" in lowered and "permeability" in lowered:
        info.append("water moves rapidly through the soil")

    water_table = re.search(
        r"water table[^.]*(?:between|at)[^.]*\.", drainage_text, re.IGNORECASE
    )
    if water_table:
        sentence = re.sub(
            "endosaturation", "water saturation", water_table.group(0), flags=re.IGNORECASE
        )
        sentence = re.sub("apparent seasonal", "seasonal", sentence, flags=re.IGNORECASE)
        info.append(sentence.strip().rstrip("."))

    return ", ".join(info) + "." if info else ""


def extract_vegetation_types(text: str, limit: int = 5) -> str:
    lowered = text.lower()
    return ", ".join([veg for veg in COMMON_VEGETATION if veg in lowered][:limit])


def simplify_use_info(use_text: str) -> str:
    lowered = use_text.lower()
    info = [
        phrase
        for keywords, phrase in USE_KEYWORDS
        if any(keyword in lowered for keyword in keywords)
    ]

    vegetation = re.search(
        r"(?:vegetation is|native plants include)[^.]*\.", use_text, re.IGNORECASE
    )
    if vegetation:
        remainder = re.split(
            r"vegetation is|native plants include",
            vegetation.group(0),
            maxsplit=1,
            flags=re.IGNORECASE,
        )[1]
        info.append("Native vegetation includes" + remainder.rstrip("."))
    elif re.search(
        r"\b(?:grass|shrub|tree|sagebrush|greasewood|saltgrass|bluegrass|wheatgrass)\b",
        use_text,
        re.IGNORECASE,
    ):
        info.append(f"Natural vegetation: {extract_vegetation_types(use_text)}")

    return "Land use: " + "; ".join(info) + "." if info else ""


def extract_range_characteristics_list(text: str) -> list[RangeCharacteristic] | None:
    """Pick the farmer-relevant facts out of RANGE IN CHARACTERISTICS."""
    found: list[RangeCharacteristic] = []

    soil_temp = re.search(r"mean annual soil temperature[^\d]+(\d+ to \d+)", text, re.I)
    if soil_temp:
        found.append(
            RangeCharacteristic(
                property="Soil Temperature",
                value=f"{soil_temp.group(1)} degrees C",
                importance="Affects plant growth and microbial activity",
            )
        )

    clay = re.search(r"clay content[^\d]+(\d+ to \d+) percent", text, re.I)
    if clay:
        found.append(
            RangeCharacteristic(
                property="Clay Content",
                value=f"{clay.group(1)} percent",
                importance="Affects water retention and workability",
            )
        )

    if "usually moist" in text.lower():
        found.append(
            RangeCharacteristic(
                property="Moisture Regime",
                value="Typically maintains moisture",
                importance="Good water availability for crops",
            )
        )
    else:
        dry = re.search(r"dry (?:for |in )(\d+ to \d+) (?:consecutive )?days", text, re.I)
        if dry:
            found.append(
                RangeCharacteristic(
                    property="Dry Period",
                    value=f"{dry.group(1)} days",
                    importance="May require irrigation during dry periods",
                )
            )

    reaction = re.search(rf"reaction[^\d:]*({REACTION_CLASSES})", text, re.I)
    if reaction:
        found.append(
            RangeCharacteristic(
                property="Soil Reaction",
                value=reaction.group(1),
                importance="Affects nutrient availability and crop selection",
            )
        )
    else:
        ph = re.search(r"(?:pH|reaction)[^\d]+([\d.]+ to [\d.]+)", text, re.I)
        if ph and _plausible_ph(ph.group(1)):
            found.append(
                RangeCharacteristic(
                    property="Soil pH",
                    value=ph.group(1),
                    importance="Affects nutrient availability and crop selection",
                )
            )

    depth = re.search(
        r"depth to [\w\s]+ (?:is |ranges from )(\d+ to \d+)", text, re.I
    )
    if depth:
        found.append(
            RangeCharacteristic(
                property="Depth to Restrictive Layer",
                value=f"{depth.group(1)} cm",
                importance="Affects root development",
            )
        )

    return found or None


def _plausible_ph(range_text: str) -> bool:
    try:
        values = [float(v) for v in range_text.split(" to ")]
    except ValueError:
        return False
    return all(3 <= v <= 10 for v in values)


def format_for_general_audience(
    description: str,
    geographic_setting: str,
    drainage_and_permeability: str,
    use_and_vegetation: str,
) -> str:
    paragraphs = []

    if description:
        paragraphs.append(simplify_technical_terms(description))

    if geographic_setting:
        location = extract_location_info(geographic_setting)
        climate = extract_climate_info(geographic_setting)
        if location or climate:
            paragraph = "These soils are typically found"
            if location:
                paragraph += f" {location}"
            if climate:
                paragraph += f". {climate}"
            paragraphs.append(paragraph)

    if drainage_and_permeability:
        drainage = simplify_drainage_info(drainage_and_permeability)
        if drainage:
            paragraphs.append(drainage)

    if use_and_vegetation:
        uses = simplify_use_info(use_and_vegetation)
        if uses:
            paragraphs.append(uses)

    return "\n\n".join(paragraphs)


def parse_osd_text(content: str, series_name: str) -> OSDNarrative:
    """Parse an OSD text file into its narrative sections and summary."""
    lines = content.splitlines()

    description = extract_first_description(lines)
    range_text = extract_section(lines, RANGE_SECTION)
    geographic = extract_section(lines, GEOGRAPHIC_SECTION)
    drainage = extract_section(lines, DRAINAGE_SECTION)
    use = extract_section(lines, USE_SECTION)

    return OSDNarrative(
        series_name=series_name,
        description=description,
        range_in_characteristics=range_text,
        geographic_setting=geographic,
        drainage_and_permeability=drainage,
        use_and_vegetation=use,
        full_description=format_for_general_audience(
            description, geographic, drainage, use
        ),
        range_characteristics=(
            extract_range_characteristics_list(range_text) if range_text else None
        ),
    )
