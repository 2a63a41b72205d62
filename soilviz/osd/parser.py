"""Structured parser for USDA-NRCS Official Series Description text files."""

import re
from pathlib import Path
from typing import Any

from soilviz.logging_config import get_logger
from soilviz.osd.models import (
    DepthRange,
    DrainageInfo,
    Distribution,
    EstablishedInfo,
    GeographicSetting,
    HorizonColor,
    NamedRemark,
    OSDHorizon,
    OSDRecord,
    RangeInCharacteristics,
    Remarks,
    TypicalPedon,
    UseAndVegetation,
)

logger = get_logger(__name__)

# Horizon lines are indented four spaces: "    Ap--0 to 8 inches; ..."
_HORIZON_RE = re.compile(
    r"^\s{4}([A-Z][A-Z0-9]*[a-z]*\d*)--(\d+)\s+to\s+(\d+)\s+inches;(.+?)"
    r"(?=\n\s{4}[A-Z][A-Z0-9]*[a-z]*\d*--|\n\s*\n|\Z)",
    re.MULTILINE | re.DOTALL,
)


def extract_section(text: str, name: str) -> str:
    """Return the body of a named section, up to the next ``HEADER:`` line.

    The section name matches in any case; the terminating header must be
    upper case so that ``Depth class:`` style lines do not end a section.
    """
    pattern = rf"(?i:{re.escape(name)}):?\s*(.*?)(?=\n[A-Z][A-Z ]+:|\Z)"
    match = re.search(pattern, text, re.DOTALL)
    return match.group(1).strip() if match else ""


def _squash(text: str) -> str:
    return " ".join(text.split())


def extract_texture(description: str) -> str:
    """Texture class named after the first Munsell color, e.g. 'silt loam'."""
    after_color = re.search(
        r"\)\s+([a-z ]*(?:loam|clay|sand|silt))\b", description, re.I
    )
    if after_color:
        return after_color.group(1).strip()

    if re.search(r";\s+([^;]+?)\s+(?:loam|clay|sand|silt)", description, re.I):
        full = re.search(r";\s+([^;,]+?)(?:;|,|\s+\()", description, re.I)
        if full:
            return full.group(1).strip()
    return "Unknown"


def extract_colors(description: str) -> HorizonColor:
    dry = re.search(r"([^\s]+\s+\([^)]+\))\s+[^,;]*(?:dry)", description, re.I)
    moist = re.search(r"([^\s]+\s+\([^)]+\))\s+moist", description, re.I)
    return HorizonColor(
        dry=dry.group(1) if dry else None,
        moist=moist.group(1) if moist else None,
    )


def extract_structure(description: str) -> str:
    match = re.search(
        r";\s+([^;]*(?:structure|blocky|granular|prismatic|massive)[^;]*)",
        description,
        re.I,
    )
    return match.group(1).strip() if match else "Unknown"


def extract_consistence(description: str) -> str:
    match = re.search(
        r";\s+([^;]*(?:hard|firm|friable|sticky|plastic)[^;]*)", description, re.I
    )
    return match.group(1).strip() if match else "Unknown"


_FEATURE_PATTERNS = [
    (r"masses of iron", "Iron accumulation"),
    (r"redox|mottles", "Redoximorphic features"),
    (r"carbonates", "Carbonates present"),
    (r"saline", "Saline"),
    (r"cracks", "Cracks present"),
]


def extract_features(description: str) -> list[str]:
    return [
        label for pattern, label in _FEATURE_PATTERNS if re.search(pattern, description, re.I)
    ]


def extract_ph(description: str) -> float | None:
    match = re.search(r"pH\s+([\d.]+)", description, re.I)
    if not match:
        return None
    try:
        return float(match.group(1).rstrip("."))
    except ValueError:
        return None


def extract_reaction(description: str) -> str:
    match = re.search(
        r"(strongly|moderately|slightly|very)?\s*(acid|alkaline|neutral)", description, re.I
    )
    return match.group(0).strip() if match else "Unknown"


def extract_effervescence(description: str) -> str:
    match = re.search(r"(violently|strongly|slightly)\s+effervescent", description, re.I)
    return match.group(0).strip() if match else "None"


def parse_horizons(text: str) -> list[OSDHorizon]:
    horizons = []
    for match in _HORIZON_RE.finditer(text):
        name, top, bottom, body = match.groups()
        description = _squash(body)
        horizons.append(
            OSDHorizon(
                name=name,
                depth=f"{top}-{bottom} inches",
                depth_range=DepthRange(top=int(top), bottom=int(bottom)),
                # Leading "; " lets the field extractors anchor on separators
                texture=extract_texture(f"; {description}"),
                color=extract_colors(description),
                structure=extract_structure(f"; {description}"),
                consistence=extract_consistence(f"; {description}"),
                features=extract_features(description),
                ph=extract_ph(description),
                reaction=extract_reaction(description),
                effervescence=extract_effervescence(description),
            )
        )
    return horizons


def parse_range_in_characteristics(text: str) -> RangeInCharacteristics:
    result = RangeInCharacteristics()

    temp = re.search(
        r"Mean annual soil temperature[:\s-]+(\d+\s+to\s+\d+\s+degrees\s+F)", text, re.I
    )
    if temp:
        result.mean_annual_soil_temp = temp.group(1)

    clay = re.search(r"Clay content[:\s-]+.*?(\d+\s+to\s+\d+\s+percent)", text, re.I)
    if clay:
        result.clay_content = clay.group(1)

    om = re.search(r"Organic matter[:\s-]+([^\n]+)", text, re.I)
    if om:
        result.organic_matter = om.group(1).strip()

    return result


def parse_geographic_setting(text: str) -> GeographicSetting:
    setting = GeographicSetting(climate=_squash(text))

    landforms = re.search(r"(?:are on|occur on)\s+([^.]+)", text, re.I)
    if landforms:
        setting.landforms = [
            s.strip() for s in re.split(r",|\sand\s", _squash(landforms.group(1))) if s.strip()
        ]

    parent = re.search(r"formed in\s+([^.]+)", text, re.I)
    if parent:
        setting.parent_material = _squash(parent.group(1))

    slopes = re.search(r"Slopes are\s+([\d.]+\s+to\s+[\d.]+\s+percent)", text, re.I)
    if slopes:
        setting.slopes = slopes.group(1)

    precip = re.search(
        r"precipitation is\s+(?:about\s+)?([\d.]+\s+to\s+[\d.]+\s+inches)", text, re.I
    )
    if precip:
        setting.precipitation = precip.group(1)

    temp = re.search(
        r"temperature is\s+(?:about\s+)?([\d.]+\s+to\s+[\d.]+\s+degrees\s+F)", text, re.I
    )
    if temp:
        setting.temperature = temp.group(1)

    frost = re.search(r"frost-free period is\s+(\d+\s+to\s+\d+\s+days)", text, re.I)
    if frost:
        setting.frost_free_period = frost.group(1)

    return setting


def parse_drainage(text: str) -> DrainageInfo:
    drainage = DrainageInfo()

    cls = re.search(
        r"(somewhat poorly|very poorly|poorly|moderately well|well|"
        r"somewhat excessively|excessively)\s+drained",
        text,
        re.I,
    )
    if cls:
        drainage.drainage_class = cls.group(0)

    for field, pattern in (
        ("permeability", r"permeability[:\s-]+([^.;]+)"),
        ("runoff", r"runoff[:\s-]+([^.;]+)"),
        ("water_table", r"water table[:\s-]+([^.]+)"),
    ):
        match = re.search(pattern, text, re.I)
        if match:
            setattr(drainage, field, _squash(match.group(1)))

    return drainage


def parse_use_and_vegetation(text: str) -> UseAndVegetation:
    parts = re.split(r"vegetation", text, maxsplit=2, flags=re.I)
    return UseAndVegetation(
        use=parts[0].strip() if parts else "",
        vegetation=parts[1].strip() if len(parts) > 1 else "",
    )


def parse_distribution(text: str) -> Distribution:
    distribution = Distribution()

    extent = re.search(r"(moderately extensive|extensive|small extent)", text, re.I)
    if extent:
        distribution.extent = extent.group(1)

    mlra = re.search(r"MLRA\s+([\d\w,\s]+)", text, re.I)
    if mlra:
        distribution.mlra = [m.strip() for m in mlra.group(1).split(",") if m.strip()]

    return distribution


def parse_remarks(text: str) -> Remarks:
    remarks = Remarks()
    for match in re.finditer(
        r"([A-Z][a-z]+\s+(?:epipedon|horizon))\s+-\s+([^.]+)", text, re.I
    ):
        remarks.diagnostic_horizons.append(
            NamedRemark(name=match.group(1), description=_squash(match.group(2)))
        )
    for match in re.finditer(
        r"([A-Z][a-z]+(?:\s+[a-z]+)*\s+feature)\s+-\s+([^.]+)", text, re.I
    ):
        remarks.features.append(
            NamedRemark(name=match.group(1), description=_squash(match.group(2)))
        )
    return remarks


def parse_osd(text: str) -> OSDRecord | None:
    """Parse OSD text into an :class:`OSDRecord`; None for blank input."""
    if not text or not text.strip():
        return None

    record = OSDRecord()
    first_line = text.splitlines()[0]

    header = re.search(r"LOCATION\s+(\w+)\s+(\w+)", first_line)
    if header:
        record.series_name, record.state = header.group(1), header.group(2)

    established = extract_section(text, "Established Series")
    if established:
        revision = re.search(r"Rev\.\s+(.+)", established)
        date = re.search(r"(\d{2}/\d{4})", established)
        record.established = EstablishedInfo(
            revision=revision.group(1).split("\n")[0].strip() if revision else "",
            date=date.group(1) if date else "",
        )

    taxonomic = re.search(r"TAXONOMIC CLASS:\s+(.+)", text)
    if taxonomic:
        record.taxonomic_class = taxonomic.group(1).strip()

    pedon = extract_section(text, "TYPICAL PEDON")
    if pedon:
        description = re.search(
            r"TYPICAL PEDON:\s+(.+?)(?=\n\n|\n\s{4}[A-Z])", text, re.DOTALL
        )
        record.typical_pedon = TypicalPedon(
            description=_squash(description.group(1)) if description else "",
            horizons=parse_horizons(pedon),
        )

    record.range_in_characteristics = parse_range_in_characteristics(
        extract_section(text, "RANGE IN CHARACTERISTICS")
    )
    record.geographic_setting = parse_geographic_setting(
        extract_section(text, "GEOGRAPHIC SETTING")
    )
    record.drainage = parse_drainage(extract_section(text, "DRAINAGE AND PERMEABILITY"))
    record.use_and_vegetation = parse_use_and_vegetation(
        extract_section(text, "USE AND VEGETATION")
    )
    record.distribution = parse_distribution(
        extract_section(text, "DISTRIBUTION AND EXTENT")
    )
    record.remarks = parse_remarks(extract_section(text, "REMARKS"))

    logger.debug(
        f"Parsed OSD {record.series_name or '?'}: "
        f"{len(record.typical_pedon.horizons)} horizons"
    )
    return record


def find_osd_file(component: str, osd_dir: str | Path) -> Path | None:
    """Locate ``<COMPONENT>.txt`` directly under ``osd_dir`` or its letter folder."""
    name = f"{component.strip().upper()}.txt"
    base = Path(osd_dir)
    for candidate in (base / name, base / name[0] / name):
        if candidate.is_file():
            return candidate
    return None


def load_osd_file(component: str, osd_dir: str | Path) -> str | None:
    path = find_osd_file(component, osd_dir)
    if path is None:
        logger.warning(f"OSD file not found for component {component} in {osd_dir}")
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error loading OSD file for {component}: {e}")
        return None


def format_osd_for_display(record: OSDRecord) -> dict[str, Any]:
    """Group a parsed OSD into the panels the dashboard shows."""
    geo = record.geographic_setting
    return {
        "header": {
            "name": record.series_name,
            "state": record.state,
            "taxonomic_class": record.taxonomic_class,
            "established": record.established.date,
        },
        "climate": {
            "temperature": geo.temperature,
            "precipitation": geo.precipitation,
            "frost_free_period": geo.frost_free_period,
        },
        "physical": {
            "landforms": ", ".join(geo.landforms),
            "slopes": geo.slopes,
            "parent_material": geo.parent_material,
            "drainage": record.drainage.drainage_class,
            "permeability": record.drainage.permeability,
        },
        "horizons": [h.model_dump() for h in record.typical_pedon.horizons],
        "use": {
            "primary": record.use_and_vegetation.use,
            "vegetation": record.use_and_vegetation.vegetation,
        },
        "characteristics": record.range_in_characteristics.model_dump(),
    }
