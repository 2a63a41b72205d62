"""Geographic helpers: distances, coordinate display and bounding boxes."""

import math
from collections.abc import Iterable

EARTH_RADIUS_KM = 6371.0

# (south, west, north, east)
US_REGIONS: dict[str, tuple[float, float, float, float]] = {
    "CONUS": (24.0, -125.0, 50.0, -66.0),
    "AK": (60.0, -180.0, 72.0, -140.0),
    "HI": (18.0, -161.0, 23.0, -154.0),
}

BBox = tuple[float, float, float, float]


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise ValueError for coordinates outside the WGS84 range."""
    if not (-90 <= latitude <= 90):
        raise ValueError(f"Latitude must be between -90 and 90, got {latitude}")

    if not (-180 <= longitude <= 180):
        raise ValueError(f"Longitude must be between -180 and 180, got {longitude}")


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle (haversine) distance between two points in kilometers."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def format_coordinates(lat: float, lon: float) -> str:
    """Format a point as ``45.000000°N, 120.000000°W``."""
    lat_dir = "N" if lat >= 0 else "S"
    lon_dir = "E" if lon >= 0 else "W"
    return f"{abs(lat):.6f}°{lat_dir}, {abs(lon):.6f}°{lon_dir}"


def bounds_to_bbox(south: float, west: float, north: float, east: float) -> BBox:
    """Convert map bounds to a ``(west, south, east, north)`` bbox."""
    return (west, south, east, north)


def parse_bbox(text: str) -> BBox:
    """Parse ``"west,south,east,north"`` into a bbox tuple."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Bounding box needs 4 comma-separated values, got '{text}'")
    try:
        west, south, east, north = (float(p) for p in parts)
    except ValueError as e:
        raise ValueError(f"Bounding box values must be numeric: '{text}'") from e
    if west > east or south > north:
        raise ValueError(f"Bounding box is inverted: '{text}'")
    return (west, south, east, north)


def is_point_in_bounds(lat: float, lon: float, bbox: BBox) -> bool:
    """Inclusive containment test against a ``(west, south, east, north)`` bbox."""
    west, south, east, north = bbox
    return south <= lat <= north and west <= lon <= east


def calculate_centroid(coordinates: Iterable[tuple[float, float]]) -> tuple[float, float]:
    """Arithmetic mean of ``(lat, lon)`` pairs; ``(0, 0)`` for no points."""
    points = list(coordinates)
    if not points:
        return (0.0, 0.0)
    return (
        sum(lat for lat, _ in points) / len(points),
        sum(lon for _, lon in points) / len(points),
    )


def us_region(lat: float, lon: float) -> str | None:
    """Return the US region code containing the point, if any."""
    for code, (south, west, north, east) in US_REGIONS.items():
        if south <= lat <= north and west <= lon <= east:
            return code
    return None
