"""USDA Cropland Data Layer rasters via the Microsoft Planetary Computer STAC API."""

from typing import Any

import requests
from pydantic import ValidationError

from soilviz.cdl.models import CDLLegendEntry, STACItem
from soilviz.config import ProviderConfig, get_provider_or_default
from soilviz.http_cache import request
from soilviz.logging_config import get_logger

logger = get_logger(__name__)

COLLECTION = "usda-cdl"
SEARCH_LIMIT = 100

DEFAULT_PROVIDER = ProviderConfig(
    endpoint="https://planetarycomputer.microsoft.com/api/stac/v1",
    timeout_s=30.0,
    sign_endpoint="https://planetarycomputer.microsoft.com/api/sas/v1/sign",
    tiles_endpoint="https://planetarycomputer.microsoft.com/api/data/v1",
)

_TILE_PATH = "tiles/WebMercatorQuad/{z}/{x}/{y}@1x.png"

# USDA NASS standard display colors
CDL_COLORS: dict[int, str] = {
    1: "#FFD300",  # Corn
    2: "#FFD300",  # Cotton
    3: "#267000",  # Rice
    4: "#FFD300",  # Sorghum
    5: "#267000",  # Soybeans
    6: "#FFD300",  # Sunflower
    10: "#70A800",  # Peanuts
    11: "#00AF49",  # Tobacco
    12: "#DDA50A",  # Sweet Corn
    13: "#DDA50A",  # Pop or Orn Corn
    14: "#7CD3FF",  # Mint
    21: "#E2007C",  # Barley
    22: "#896054",  # Durum Wheat
    23: "#D8B56B",  # Spring Wheat
    24: "#A57000",  # Winter Wheat
    25: "#D69EBC",  # Other Small Grains
    26: "#707000",  # Dbl Crop WinWht/Soybeans
    27: "#AA007C",  # Rye
    28: "#A05989",  # Oats
    29: "#700049",  # Millet
    30: "#D69EBC",  # Speltz
    31: "#D1FF00",  # Canola
    32: "#7C99FF",  # Flaxseed
    33: "#D6D600",  # Safflower
    34: "#D1FF00",  # Rape Seed
    35: "#00AF49",  # Mustard
    36: "#FFA800",  # Alfalfa
    37: "#267000",  # Other Hay/Non Alfalfa
    38: "#FFFF00",  # Camelina
    39: "#70A800",  # Buckwheat
    41: "#00AF49",  # Sugarbeets
    42: "#B35C00",  # Dry Beans
    43: "#B35C00",  # Potatoes
    44: "#267000",  # Other Crops
    45: "#E07400",  # Sugarcane
    46: "#B35C00",  # Sweet Potatoes
    47: "#FFD300",  # Misc Vegs & Fruits
    48: "#B35C00",  # Watermelons
    49: "#267000",  # Onions
    50: "#267000",  # Cucumbers
    51: "#FFA800",  # Chick Peas
    52: "#FFA800",  # Lentils
    53: "#267000",  # Peas
    54: "#00AF49",  # Tomatoes
    55: "#B35C00",  # Caneberries
    56: "#267000",  # Hops
    57: "#267000",  # Herbs
    58: "#FFD300",  # Clover/Wildflowers
    59: "#70A800",  # Sod/Grass Seed
    60: "#267000",  # Switchgrass
    61: "#000000",  # Fallow/Idle Cropland
    63: "#00AF49",  # Forest
    64: "#00AF49",  # Shrubland
    65: "#FFFF00",  # Barren
    66: "#FFFF00",  # Cherries
    67: "#FFA800",  # Peaches
    68: "#00AF49",  # Apples
    69: "#FFA800",  # Grapes
    70: "#FF6666",  # Christmas Trees
    71: "#00AF49",  # Other Tree Crops
    72: "#B35C00",  # Citrus
    74: "#B35C00",  # Pecans
    75: "#FFA800",  # Almonds
    76: "#FFA800",  # Walnuts
    77: "#B35C00",  # Pears
    81: "#CCFFCC",  # Clouds/No Data
    82: "#00AF49",  # Developed
    83: "#00AF49",  # Water
    87: "#FFFF00",  # Wetlands
    88: "#267000",  # Nonag/Undefined
    92: "#00AF49",  # Aquaculture
    111: "#FFFF00",  # Open Water
    112: "#00AF49",  # Perennial Ice/Snow
    121: "#FFFF00",  # Developed/Open Space
    122: "#00AF49",  # Developed/Low Intensity
    123: "#B35C00",  # Developed/Med Intensity
    124: "#000000",  # Developed/High Intensity
    131: "#FFFF00",  # Barren
    141: "#9C9C9C",  # Deciduous Forest
    142: "#006400",  # Evergreen Forest
    143: "#00AF49",  # Mixed Forest
    152: "#267000",  # Shrubland
    176: "#FFFF99",  # Grassland/Pasture
    190: "#CCFFCC",  # Woody Wetlands
    195: "#0000FF",  # Herbaceous Wetlands
    204: "#267000",  # Pistachios
    205: "#FFA800",  # Triticale
    206: "#267000",  # Carrots
    207: "#B35C00",  # Asparagus
    208: "#267000",  # Garlic
    209: "#267000",  # Cantaloupes
    210: "#FFA800",  # Prunes
    211: "#FFA800",  # Olives
    212: "#00AF49",  # Oranges
    213: "#267000",  # Honeydew Melons
    214: "#B35C00",  # Broccoli
    216: "#B35C00",  # Peppers
    217: "#267000",  # Pomegranates
    218: "#B35C00",  # Nectarines
    219: "#B35C00",  # Greens
    220: "#FFA800",  # Plums
    221: "#FFA800",  # Strawberries
    222: "#267000",  # Squash
    223: "#B35C00",  # Apricots
    224: "#267000",  # Vetch
    225: "#FFD300",  # Dbl Crop WinWht/Corn
    226: "#707000",  # Dbl Crop Oats/Corn
    227: "#B35C00",  # Lettuce
    229: "#FFD300",  # Pumpkins
    230: "#707000",  # Dbl Crop Lettuce/Durum Wht
    231: "#FFD300",  # Dbl Crop Lettuce/Cantaloupe
    232: "#B35C00",  # Dbl Crop Lettuce/Cotton
    233: "#FFD300",  # Dbl Crop Lettuce/Barley
    234: "#707000",  # Dbl Crop Durum Wht/Sorghum
    235: "#707000",  # Dbl Crop Barley/Sorghum
    236: "#D69EBC",  # Dbl Crop WinWht/Sorghum
    237: "#A57000",  # Dbl Crop Barley/Corn
    238: "#707000",  # Dbl Crop WinWht/Cotton
    239: "#267000",  # Dbl Crop Soybeans/Cotton
    240: "#267000",  # Dbl Crop Soybeans/Oats
    241: "#FFD300",  # Dbl Crop Corn/Soybeans
    242: "#00AF49",  # Blueberries
    243: "#267000",  # Cabbage
    244: "#B35C00",  # Cauliflower
    245: "#B35C00",  # Celery
    246: "#267000",  # Radishes
    247: "#B35C00",  # Turnips
    248: "#267000",  # Eggplants
    249: "#B35C00",  # Gourds
    250: "#B35C00",  # Cranberries
    254: "#707000",  # Dbl Crop Barley/Soybeans
}

_LEGEND = [
    ("Corn", 1),
    ("Soybeans", 5),
    ("Winter Wheat", 24),
    ("Alfalfa", 36),
    ("Other Hay", 37),
    ("Fallow", 61),
    ("Deciduous Forest", 141),
    ("Evergreen Forest", 142),
    ("Grassland/Pasture", 176),
    ("Woody Wetlands", 190),
    ("Herbaceous Wetlands", 195),
]


def get_cdl_legend() -> list[CDLLegendEntry]:
    """Legend for the most common CDL classes."""
    return [
        CDLLegendEntry(label=label, color=CDL_COLORS[code], value=code)
        for label, code in _LEGEND
    ]


class CDLStacClient:
    """Search, sign and tile CDL items from the Planetary Computer."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        provider = get_provider_or_default("cdl", "planetary_computer", DEFAULT_PROVIDER)
        self.base_url = (base_url or provider.endpoint).rstrip("/")
        self.timeout = timeout or provider.timeout_s
        self.sign_endpoint = provider.sign_endpoint or DEFAULT_PROVIDER.sign_endpoint
        self.tiles_endpoint = (
            provider.tiles_endpoint or DEFAULT_PROVIDER.tiles_endpoint
        ).rstrip("/")

    def search_items(self, bbox: list[float], year: int = 2023) -> list[STACItem]:
        """
        Find CDL items intersecting a bbox for one year.

        Args:
            bbox: [west, south, east, north] in WGS84
            year: CDL year

        Returns:
            Matching items; empty on any error
        """
        body = {
            "collections": [COLLECTION],
            "bbox": bbox,
            "datetime": f"{year}-01-01T00:00:00Z/{year}-12-31T23:59:59Z",
            "limit": SEARCH_LIMIT,
        }
        logger.debug(f"Searching STAC for CDL data: {body}")

        try:
            response = request(
                "POST", f"{self.base_url}/search", json=body, timeout=self.timeout
            )
            if not response.ok:
                raise RuntimeError(
                    f"STAC search failed: {response.status_code} {response.reason}"
                )
            features = response.json().get("features") or []
        except (requests.RequestException, RuntimeError, ValueError) as e:
            logger.error(f"Error fetching CDL items: {e}")
            return []

        logger.info(f"Found {len(features)} CDL items")
        items = []
        for feature in features:
            try:
                items.append(STACItem.model_validate(feature))
            except ValidationError as e:
                logger.warning(f"Skipping malformed STAC feature: {e}")
        return items

    def get_signed_asset_url(self, item: STACItem, asset_key: str = "image") -> str | None:
        """Href for an item asset, signed when it points at unsigned blob storage."""
        asset = item.assets.get(asset_key)
        if asset is None:
            logger.warning(f"Asset '{asset_key}' not found in item {item.id}")
            return None

        href = asset.href
        if "blob.core.windows.net" not in href or "st=" in href:
            return href

        try:
            response = request(
                "POST",
                self.sign_endpoint,
                read_from_cache=False,
                write_to_cache=False,
                json={"href": href},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error signing asset URL: {e}")
            return None

        if not response.ok:
            logger.warning(f"Asset signing failed: {response.status_code}")
            return href

        signed: dict[str, Any] = response.json()
        return (
            signed.get("href")
            or (signed.get("msft_planetary_computer") or {}).get("signed_url")
            or href
        )

    def collection_tile_url(self) -> str:
        return (
            f"{self.tiles_endpoint}/collection/{_TILE_PATH}?collection={COLLECTION}"
            "&assets=image&asset_bidx=image%7C1&nodata=0&colormap_name=viridis"
            "&resampling=nearest"
        )

    def item_tile_url(self, item_id: str) -> str:
        return (
            f"{self.tiles_endpoint}/item/{_TILE_PATH}?collection={COLLECTION}"
            f"&item={item_id}&assets=image&asset_bidx=image%7C1&nodata=0"
            "&resampling=nearest"
        )

    def get_cdl_tile_url(self, year: int = 2023, bbox: list[float] | None = None) -> str:
        """XYZ tile template: item-level when the bbox has items, else collection-level."""
        if bbox:
            items = self.search_items(bbox, year)
            if items and self.get_signed_asset_url(items[0]):
                return self.item_tile_url(items[0].id)
            logger.warning("No usable CDL items for bbox; using collection tiles")
        return self.collection_tile_url()
