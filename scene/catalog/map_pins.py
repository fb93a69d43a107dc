"""
Map pin placement.

Venues carry no coordinates, so pins are scattered deterministically
around a neighborhood centroid: the same venue id always lands on the
same spot, within roughly half a kilometre of the centroid.
"""

from typing import Dict, Tuple
import math

Coordinates = Tuple[float, float]

DEFAULT_CENTER: Coordinates = (40.725, -73.995)

SCATTER_SPAN = 0.008
HASH_FACTOR = 43758.5453

NEIGHBORHOOD_COORDS: Dict[str, Coordinates] = {
    # Manhattan
    "SoHo": (40.723, -74.002),
    "West Village": (40.735, -74.004),
    "East Village": (40.728, -73.983),
    "Lower East Side": (40.715, -73.988),
    "Tribeca": (40.716, -74.008),
    "Chinatown": (40.715, -73.997),
    "Little Italy": (40.719, -73.997),
    "NoHo": (40.727, -73.993),
    "Nolita": (40.722, -73.995),
    "Greenwich Village": (40.733, -73.997),
    "Chelsea": (40.746, -74.001),
    "Meatpacking District": (40.740, -74.006),
    "Hell's Kitchen": (40.763, -73.991),
    "Flatiron": (40.741, -73.989),
    "Gramercy": (40.737, -73.981),
    "Midtown": (40.754, -73.983),
    "Upper East Side": (40.773, -73.956),
    "Upper West Side": (40.787, -73.975),
    "Harlem": (40.811, -73.946),
    "Financial District": (40.707, -74.009),
    # Brooklyn
    "Williamsburg": (40.714, -73.961),
    "Greenpoint": (40.727, -73.951),
    "Bushwick": (40.700, -73.916),
    "DUMBO": (40.703, -73.989),
    "Brooklyn Heights": (40.696, -73.993),
    "Cobble Hill": (40.686, -73.993),
    "Boerum Hill": (40.684, -73.984),
    "Carroll Gardens": (40.679, -73.995),
    "Park Slope": (40.671, -73.977),
    "Fort Greene": (40.688, -73.972),
    "Clinton Hill": (40.689, -73.963),
    "Bed-Stuy": (40.687, -73.941),
    "Red Hook": (40.673, -74.010),
    # Queens
    "Astoria": (40.764, -73.923),
    "Long Island City": (40.744, -73.948),
    "Sunnyside": (40.743, -73.918),
    "Ridgewood": (40.710, -73.902),
}


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(text: str) -> int:
    """Signed 32-bit ``h * 31 + code_unit`` hash over UTF-16 code units."""
    h = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = int.from_bytes(encoded[i:i + 2], "little")
        h = _to_int32((h << 5) - h + code_unit)
    return h


def _fract(value: float) -> float:
    return value - math.floor(value)


def pin_coordinates(venue_id: str, neighborhood: str) -> Coordinates:
    """
    Deterministic (lat, lng) for a venue pin.

    Args:
        venue_id: Venue identifier, the scatter seed
        neighborhood: Neighborhood name; unknown names use DEFAULT_CENTER

    Returns:
        (lat, lng) within SCATTER_SPAN / 2 degrees of the base point
    """
    base_lat, base_lng = NEIGHBORHOOD_COORDS.get(neighborhood, DEFAULT_CENTER)

    seed = math.sin(string_hash(venue_id)) * HASH_FACTOR
    rand1 = _fract(seed)
    rand2 = _fract(seed * HASH_FACTOR)

    return (
        base_lat + (rand1 - 0.5) * SCATTER_SPAN,
        base_lng + (rand2 - 0.5) * SCATTER_SPAN,
    )
