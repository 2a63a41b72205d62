"""Cropland Data Layer crop codes, crop types and classification accuracy.

Crop types drive the plausibility checks on a point's crop history: an
orchard that appears for a single year, or cropland that becomes forest for
one season, is more likely a misclassification than a real land-use change.
"""

from typing import NamedTuple

from pydantic import BaseModel


class CropInfo(NamedTuple):
    name: str
    color: str


CROP_TYPES = (
    "annual",
    "perennial",
    "permanent",
    "pasture",
    "forest",
    "developed",
    "water",
    "other",
)

DEFAULT_CROP_TYPE = "non-cropland"
UNKNOWN_CROP_COLOR = "#cccccc"
NO_DATA_CODES = frozenset({0, 81})
LOW_CONFIDENCE = 50

# Common CDL classes; full list at
# https://www.nass.usda.gov/Research_and_Science/Cropland/sarsfaqs2.php
CDL_CROP_CODES: dict[int, CropInfo] = {
    1: CropInfo("Corn", "#ffd300"),
    2: CropInfo("Cotton", "#ff2626"),
    3: CropInfo("Rice", "#00a8e5"),
    4: CropInfo("Sorghum", "#ff9e0c"),
    5: CropInfo("Soybeans", "#267000"),
    6: CropInfo("Sunflower", "#ffff00"),
    10: CropInfo("Peanuts", "#70a800"),
    11: CropInfo("Tobacco", "#00af49"),
    12: CropInfo("Sweet Corn", "#ffd300"),
    13: CropInfo("Pop or Orn Corn", "#ffd300"),
    14: CropInfo("Mint", "#00af49"),
    21: CropInfo("Barley", "#ffd300"),
    22: CropInfo("Durum Wheat", "#e2007c"),
    23: CropInfo("Spring Wheat", "#896054"),
    24: CropInfo("Winter Wheat", "#d8b56b"),
    25: CropInfo("Other Small Grains", "#a57000"),
    26: CropInfo("Dbl Crop WinWht/Soybeans", "#d69ebc"),
    27: CropInfo("Rye", "#707000"),
    28: CropInfo("Oats", "#ab6c00"),
    29: CropInfo("Millet", "#b29200"),
    30: CropInfo("Speltz", "#a57000"),
    31: CropInfo("Canola", "#ffd300"),
    32: CropInfo("Flaxseed", "#a800e5"),
    33: CropInfo("Safflower", "#ff6666"),
    34: CropInfo("Rape Seed", "#ff6666"),
    35: CropInfo("Mustard", "#ffcc66"),
    36: CropInfo("Alfalfa", "#ff00ff"),
    37: CropInfo("Other Hay/Non Alfalfa", "#e57ae5"),
    38: CropInfo("Camelina", "#ffcc00"),
    39: CropInfo("Buckwheat", "#e56300"),
    41: CropInfo("Sugarbeets", "#ff2626"),
    42: CropInfo("Dry Beans", "#70a800"),
    43: CropInfo("Potatoes", "#ffae42"),
    44: CropInfo("Other Crops", "#ffd300"),
    45: CropInfo("Sugarcane", "#a800e5"),
    46: CropInfo("Sweet Potatoes", "#ff6666"),
    47: CropInfo("Misc Vegs & Fruits", "#ffae42"),
    48: CropInfo("Watermelons", "#ff6666"),
    49: CropInfo("Onions", "#ffae42"),
    50: CropInfo("Cucumbers", "#70a800"),
    51: CropInfo("Chick Peas", "#ff8c00"),
    52: CropInfo("Lentils", "#d68900"),
    53: CropInfo("Peas", "#00af49"),
    54: CropInfo("Tomatoes", "#ff2626"),
    55: CropInfo("Caneberries", "#ff6666"),
    56: CropInfo("Hops", "#00af49"),
    57: CropInfo("Herbs", "#00af49"),
    58: CropInfo("Clover/Wildflowers", "#ffc0e5"),
    59: CropInfo("Sod/Grass Seed", "#00af49"),
    60: CropInfo("Switchgrass", "#ddc91b"),
    61: CropInfo("Fallow/Idle Cropland", "#896054"),
    63: CropInfo("Forest", "#004d00"),
    64: CropInfo("Shrubland", "#d69ebc"),
    65: CropInfo("Barren", "#ff6666"),
    66: CropInfo("Cherries", "#ff0000"),
    67: CropInfo("Peaches", "#ff6666"),
    68: CropInfo("Apples", "#ff0000"),
    69: CropInfo("Grapes", "#a800e5"),
    70: CropInfo("Christmas Trees", "#004d00"),
    71: CropInfo("Other Tree Crops", "#70a800"),
    72: CropInfo("Citrus", "#ff9e0c"),
    74: CropInfo("Pecans", "#70a800"),
    75: CropInfo("Almonds", "#ffae42"),
    76: CropInfo("Walnuts", "#896054"),
    77: CropInfo("Pears", "#70a800"),
    81: CropInfo("Clouds/No Data", "#cccccc"),
    82: CropInfo("Developed", "#e5cee5"),
    83: CropInfo("Water", "#00ffe5"),
    87: CropInfo("Wetlands", "#0096a0"),
    88: CropInfo("Nonag/Undefined", "#ffff00"),
    92: CropInfo("Aquaculture", "#00ffff"),
    111: CropInfo("Open Water", "#4d70a3"),
    112: CropInfo("Perennial Ice/Snow", "#ffffff"),
    121: CropInfo("Developed/Open Space", "#e5cee5"),
    122: CropInfo("Developed/Low Intensity", "#d69ebc"),
    123: CropInfo("Developed/Med Intensity", "#e5007c"),
    124: CropInfo("Developed/High Intensity", "#a80000"),
    131: CropInfo("Barren", "#d69ebc"),
    141: CropInfo("Deciduous Forest", "#70a800"),
    142: CropInfo("Evergreen Forest", "#00af49"),
    143: CropInfo("Mixed Forest", "#d8b56b"),
    152: CropInfo("Shrubland", "#ffc0e5"),
    176: CropInfo("Grassland/Pasture", "#ffd300"),
    190: CropInfo("Woody Wetlands", "#b5b5ff"),
    195: CropInfo("Herbaceous Wetlands", "#00ffff"),
    204: CropInfo("Pistachios", "#d69ebc"),
    205: CropInfo("Triticale", "#d69ebc"),
    206: CropInfo("Carrots", "#ff9e0c"),
    207: CropInfo("Asparagus", "#70a800"),
    208: CropInfo("Garlic", "#ffae42"),
    209: CropInfo("Cantaloupes", "#ff6666"),
    210: CropInfo("Prunes", "#a800e5"),
    211: CropInfo("Olives", "#70a800"),
    212: CropInfo("Oranges", "#ff9e0c"),
    213: CropInfo("Honeydew Melons", "#70a800"),
    214: CropInfo("Broccoli", "#00af49"),
    216: CropInfo("Peppers", "#ff2626"),
    217: CropInfo("Pomegranates", "#ff0000"),
    218: CropInfo("Nectarines", "#ff6666"),
    219: CropInfo("Greens", "#00af49"),
    220: CropInfo("Plums", "#a800e5"),
    221: CropInfo("Strawberries", "#ff0000"),
    222: CropInfo("Squash", "#ff9e0c"),
    223: CropInfo("Apricots", "#ff9e0c"),
    224: CropInfo("Vetch", "#a800e5"),
    225: CropInfo("Dbl Crop WinWht/Corn", "#d8b56b"),
    226: CropInfo("Dbl Crop Oats/Corn", "#d8b56b"),
    227: CropInfo("Lettuce", "#70a800"),
    229: CropInfo("Pumpkins", "#ff9e0c"),
    230: CropInfo("Dbl Crop Lettuce/Durum Wht", "#d8b56b"),
    231: CropInfo("Dbl Crop Lettuce/Cantaloupe", "#d8b56b"),
    232: CropInfo("Dbl Crop Lettuce/Cotton", "#d8b56b"),
    233: CropInfo("Dbl Crop Lettuce/Barley", "#d8b56b"),
    234: CropInfo("Dbl Crop Durum Wht/Sorghum", "#d8b56b"),
    235: CropInfo("Dbl Crop Barley/Sorghum", "#d8b56b"),
    236: CropInfo("Dbl Crop WinWht/Sorghum", "#d8b56b"),
    237: CropInfo("Dbl Crop Barley/Corn", "#d8b56b"),
    238: CropInfo("Dbl Crop WinWht/Cotton", "#d8b56b"),
    239: CropInfo("Dbl Crop Soybeans/Cotton", "#d8b56b"),
    240: CropInfo("Dbl Crop Soybeans/Oats", "#d8b56b"),
    241: CropInfo("Dbl Crop Corn/Soybeans", "#d8b56b"),
    242: CropInfo("Blueberries", "#0000ff"),
    243: CropInfo("Cabbage", "#70a800"),
    244: CropInfo("Cauliflower", "#ffffff"),
    245: CropInfo("Celery", "#70a800"),
    246: CropInfo("Radishes", "#ff0000"),
    247: CropInfo("Turnips", "#a800e5"),
    248: CropInfo("Eggplants", "#a800e5"),
    249: CropInfo("Gourds", "#ff9e0c"),
    250: CropInfo("Cranberries", "#ff0000"),
    254: CropInfo("Dbl Crop Barley/Soybeans", "#d8b56b"),
}

CROP_TYPE_MAP: dict[int, str] = {
    1: "annual",
    2: "annual",
    3: "annual",
    4: "annual",
    5: "annual",
    6: "annual",
    10: "annual",
    11: "annual",
    12: "annual",
    13: "annual",
    14: "perennial",
    21: "annual",
    22: "annual",
    23: "annual",
    24: "annual",
    25: "annual",
    26: "annual",
    27: "annual",
    28: "annual",
    29: "annual",
    30: "annual",
    31: "annual",
    32: "annual",
    33: "annual",
    34: "annual",
    35: "annual",
    36: "perennial",
    37: "perennial",
    38: "annual",
    39: "annual",
    41: "annual",
    42: "annual",
    43: "annual",
    44: "annual",
    45: "perennial",
    46: "annual",
    47: "annual",
    48: "annual",
    49: "annual",
    50: "annual",
    51: "annual",
    52: "annual",
    53: "annual",
    54: "annual",
    55: "perennial",
    56: "perennial",
    57: "perennial",
    58: "perennial",
    59: "pasture",
    60: "perennial",
    61: "other",
    63: "forest",
    64: "other",
    65: "other",
    66: "permanent",
    67: "permanent",
    68: "permanent",
    69: "permanent",
    70: "permanent",
    71: "permanent",
    72: "permanent",
    74: "permanent",
    75: "permanent",
    76: "permanent",
    77: "permanent",
    81: "other",
    82: "developed",
    83: "water",
    87: "water",
    88: "other",
    92: "water",
    111: "water",
    112: "other",
    121: "developed",
    122: "developed",
    123: "developed",
    124: "developed",
    131: "other",
    141: "forest",
    142: "forest",
    143: "forest",
    152: "other",
    176: "pasture",
    190: "water",
    195: "water",
    204: "permanent",
    205: "annual",
    206: "annual",
    207: "perennial",
    208: "annual",
    209: "annual",
    210: "permanent",
    211: "permanent",
    212: "permanent",
    213: "annual",
    214: "annual",
    216: "annual",
    217: "permanent",
    218: "permanent",
    219: "annual",
    220: "permanent",
    221: "perennial",
    222: "annual",
    223: "permanent",
    224: "annual",
    225: "annual",
    226: "annual",
    227: "annual",
    229: "annual",
    230: "annual",
    231: "annual",
    232: "annual",
    233: "annual",
    234: "annual",
    235: "annual",
    236: "annual",
    237: "annual",
    238: "annual",
    239: "annual",
    240: "annual",
    241: "annual",
    242: "perennial",
    243: "annual",
    244: "annual",
    245: "annual",
    246: "annual",
    247: "annual",
    248: "annual",
    249: "annual",
    250: "perennial",
    254: "annual",
}

# Per-class accuracy (percent) from NASS CDL accuracy assessments
CROP_ACCURACY_ESTIMATES: dict[int, int] = {
    1: 90,
    5: 90,
    24: 88,
    23: 87,
    21: 85,
    2: 82,
    3: 83,
    4: 82,
    6: 80,
    22: 84,
    27: 82,
    28: 83,
    31: 81,
    36: 75,
    37: 72,
    10: 78,
    42: 76,
    43: 80,
    176: 70,
    59: 68,
    47: 65,
    54: 72,
    49: 68,
    206: 70,
    214: 68,
    227: 66,
    69: 75,
    68: 78,
    66: 76,
    67: 74,
    72: 80,
    75: 78,
    76: 77,
    204: 75,
    211: 76,
    63: 85,
    141: 86,
    142: 88,
    82: 80,
    83: 92,
    111: 95,
    121: 78,
    122: 80,
    123: 82,
    124: 85,
    26: 70,
    225: 68,
    226: 67,
    241: 72,
    0: 50,
    81: 0,
}

_TYPE_ACCURACY = {
    "annual": 75,
    "perennial": 70,
    "permanent": 73,
    "pasture": 68,
    "forest": 85,
    "developed": 80,
    "water": 92,
}
_DEFAULT_ACCURACY = 65


class HistoryWarning(BaseModel):
    year: int
    warning: str


class CropHistoryEntry(BaseModel):
    year: int
    crop_type: str | None = None
    crop_name: str
    confidence: int | None = None


def get_crop_info(code: int) -> CropInfo:
    return CDL_CROP_CODES.get(code) or CropInfo(f"Unknown ({code})", UNKNOWN_CROP_COLOR)


def get_crop_type(code: int) -> str:
    return CROP_TYPE_MAP.get(code, DEFAULT_CROP_TYPE)


def get_estimated_accuracy(code: int) -> int:
    """Estimated classification accuracy (percent) for a CDL code."""
    if code in CROP_ACCURACY_ESTIMATES:
        return CROP_ACCURACY_ESTIMATES[code]
    return _TYPE_ACCURACY.get(CROP_TYPE_MAP.get(code, ""), _DEFAULT_ACCURACY)


def _confidence_note(confidence: int | None) -> str:
    return f" ({confidence}% confidence)" if confidence else ""


def validate_transition(
    from_type: str | None,
    to_type: str | None,
    from_name: str,
    to_name: str,
    confidence: int | None = None,
) -> str | None:
    """Warning text for an unlikely year-to-year change, or None."""
    if not from_type or not to_type:
        return None

    note = _confidence_note(confidence)

    if to_type == "permanent":
        return (
            f"{to_name} typically requires 3-7 years to establish. "
            f"Single-year detection may indicate misclassification{note}."
        )

    if from_type == "permanent" and to_type in ("annual", "pasture"):
        return (
            f"Unlikely transition from established {from_name} to {to_name}. "
            f"Permanent crops are not typically removed after establishment{note}."
        )

    if to_type in ("forest", "developed") and from_type != to_type:
        return (
            f"Land use change to {to_name} is typically permanent. "
            f"Brief detection may indicate misclassification{note}."
        )

    return None


def analyze_crop_history(history: list[CropHistoryEntry]) -> list[HistoryWarning]:
    """
    Flag implausible entries in a crop history.

    Args:
        history: Entries in the order they will be displayed (newest first)

    Returns:
        Warnings in input order; a year may receive more than one
    """
    warnings: list[HistoryWarning] = []

    for i, current in enumerate(history):
        prev = history[i - 1] if i > 0 else None
        nxt = history[i + 1] if i < len(history) - 1 else None

        if current.crop_type == "permanent":
            prev_different = prev is None or prev.crop_type != "permanent"
            next_different = nxt is None or nxt.crop_type != "permanent"
            if prev_different and next_different:
                warnings.append(
                    HistoryWarning(
                        year=current.year,
                        warning=(
                            f"Single year of {current.crop_name} is highly unlikely. "
                            "Permanent crops take years to establish and produce"
                            f"{_confidence_note(current.confidence)}."
                        ),
                    )
                )

        if prev is not None and current.crop_type:
            transition = validate_transition(
                prev.crop_type,
                current.crop_type,
                prev.crop_name,
                current.crop_name,
                current.confidence,
            )
            if transition:
                warnings.append(HistoryWarning(year=current.year, warning=transition))

        if current.confidence and current.confidence < LOW_CONFIDENCE:
            warnings.append(
                HistoryWarning(
                    year=current.year,
                    warning=(
                        f"Low confidence ({current.confidence}%) for "
                        f"{current.crop_name} classification."
                    ),
                )
            )

    return warnings
