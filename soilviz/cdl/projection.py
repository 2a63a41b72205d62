"""WGS84 to CONUS Albers Equal Area Conic (EPSG:5070).

CropScape's GetCDLValue service takes x/y in EPSG:5070 meters.
"""

import math

SEMI_MAJOR_AXIS = 6378137.0
ECCENTRICITY = 0.08181919084262
LAT_ORIGIN = 23.0
STANDARD_PARALLEL_1 = 29.5
STANDARD_PARALLEL_2 = 45.5
CENTRAL_MERIDIAN = -96.0
FALSE_EASTING = 0.0
FALSE_NORTHING = 0.0


def _m(phi: float) -> float:
    sin_phi = math.sin(phi)
    return math.cos(phi) / math.sqrt(1 - ECCENTRICITY**2 * sin_phi**2)


def _q(phi: float) -> float:
    e = ECCENTRICITY
    sin_phi = math.sin(phi)
    return (1 - e**2) * (
        sin_phi / (1 - e**2 * sin_phi**2)
        - (1 / (2 * e)) * math.log((1 - e * sin_phi) / (1 + e * sin_phi))
    )


def wgs84_to_albers(lon: float, lat: float) -> tuple[float, float]:
    """Project a longitude/latitude pair to EPSG:5070 (x, y) meters."""
    phi0 = math.radians(LAT_ORIGIN)
    phi1 = math.radians(STANDARD_PARALLEL_1)
    phi2 = math.radians(STANDARD_PARALLEL_2)
    lam0 = math.radians(CENTRAL_MERIDIAN)

    m1, m2 = _m(phi1), _m(phi2)
    q0, q1, q2 = _q(phi0), _q(phi1), _q(phi2)
    q = _q(math.radians(lat))

    n = (m1**2 - m2**2) / (q2 - q1)
    c = m1**2 + n * q1
    rho0 = SEMI_MAJOR_AXIS * math.sqrt(c - n * q0) / n
    rho = SEMI_MAJOR_AXIS * math.sqrt(c - n * q) / n
    theta = n * (math.radians(lon) - lam0)

    x = FALSE_EASTING + rho * math.sin(theta)
    y = FALSE_NORTHING + rho0 - rho * math.cos(theta)
    return x, y
