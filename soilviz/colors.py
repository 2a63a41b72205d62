"""USDA soil taxonomy colors and scientific color ramps for map symbology."""

from typing import TypedDict

DEFAULT_ORDER_COLOR = "#808080"
DEFAULT_TEXTURE_COLOR = "#C19A6B"

SOIL_ORDER_COLORS: dict[str, str] = {
    "Alfisols": "#8B4513",
    "Andisols": "#2F4F4F",
    "Aridisols": "#DEB887",
    "Entisols": "#F5DEB3",
    "Gelisols": "#E6E6FA",
    "Histosols": "#000000",
    "Inceptisols": "#9ACD32",
    "Mollisols": "#654321",
    "Oxisols": "#B22222",
    "Spodosols": "#778899",
    "Ultisols": "#CD853F",
    "Vertisols": "#696969",
}

TEXTURE_COLORS: dict[str, str] = {
    "Sand": "#F5E6D3",
    "Loamy Sand": "#E6D3A3",
    "Sandy Loam": "#D4A574",
    "Loam": "#C19A6B",
    "Silt Loam": "#A0826D",
    "Silt": "#8B7355",
    "Sandy Clay Loam": "#8B4513",
    "Clay Loam": "#654321",
    "Silty Clay Loam": "#5D4037",
    "Sandy Clay": "#4E342E",
    "Silty Clay": "#3E2723",
    "Clay": "#2E1B14",
}


class RampStop(TypedDict, total=False):
    value: float
    color: str
    label: str


CARBON_RAMP: list[RampStop] = [
    {"value": 0, "color": "#FEF0D9"},
    {"value": 1, "color": "#FDD49E"},
    {"value": 2, "color": "#FC8D59"},
    {"value": 5, "color": "#D7301F"},
    {"value": 10, "color": "#B30000"},
]

PH_RAMP: list[RampStop] = [
    {"value": 3.5, "color": "#E31A1C", "label": "Very acidic"},
    {"value": 5.5, "color": "#FD8D3C", "label": "Acidic"},
    {"value": 7.0, "color": "#33A02C", "label": "Neutral"},
    {"value": 8.5, "color": "#1F78B4", "label": "Alkaline"},
    {"value": 10.0, "color": "#6A3D9A", "label": "Very alkaline"},
]

# g/cm3
BULK_DENSITY_RAMP: list[RampStop] = [
    {"value": 0.5, "color": "#FFF7BC"},
    {"value": 1.0, "color": "#FEE391"},
    {"value": 1.3, "color": "#FEC44F"},
    {"value": 1.6, "color": "#FE9929"},
    {"value": 2.0, "color": "#D95F0E"},
]

CLAY_RAMP: list[RampStop] = [
    {"value": 0, "color": "#FFFFCC"},
    {"value": 15, "color": "#C7E9B4"},
    {"value": 25, "color": "#7FCDBB"},
    {"value": 40, "color": "#41B6C4"},
    {"value": 60, "color": "#1D91C0"},
    {"value": 100, "color": "#0C2C84"},
]

NRCS_COLORS: dict[str, str] = {
    "green": "#006837",
    "dark_green": "#004d29",
    "light_green": "#8BC34A",
    "brown": "#6B4423",
    "tan": "#D4A574",
    "blue": "#0066A1",
    "gray": "#5E6A71",
}


def get_color_from_ramp(value: float, ramp: list[RampStop]) -> str:
    """Return the color of the ramp bin containing ``value``.

    Values at or beyond either end clamp to the end colors; otherwise the
    lower stop of the containing bin wins (no interpolation).
    """
    if value <= ramp[0]["value"]:
        return ramp[0]["color"]
    if value >= ramp[-1]["value"]:
        return ramp[-1]["color"]

    for lower, upper in zip(ramp, ramp[1:]):
        if lower["value"] <= value <= upper["value"]:
            return lower["color"]

    return ramp[0]["color"]


def get_soil_order_color(soil_order: str | None) -> str:
    return SOIL_ORDER_COLORS.get(soil_order or "", DEFAULT_ORDER_COLOR)


def get_texture_color(texture: str | None) -> str:
    return TEXTURE_COLORS.get(texture or "", DEFAULT_TEXTURE_COLOR)


def get_ph_color(ph: float) -> str:
    return get_color_from_ramp(ph, PH_RAMP)


def get_carbon_color(carbon: float) -> str:
    return get_color_from_ramp(carbon, CARBON_RAMP)


def get_clay_color(clay: float) -> str:
    return get_color_from_ramp(clay, CLAY_RAMP)


def get_bulk_density_color(bulk_density: float) -> str:
    return get_color_from_ramp(bulk_density, BULK_DENSITY_RAMP)
