"""Read-side queries over the generated venue catalog."""

from .filters import (
    QUEENS_NEIGHBORHOODS,
    UserPreferences,
    recommended_venues,
    valid_venues,
)
from .map_pins import DEFAULT_CENTER, NEIGHBORHOOD_COORDS, pin_coordinates

__all__ = [
    "QUEENS_NEIGHBORHOODS",
    "UserPreferences",
    "recommended_venues",
    "valid_venues",
    "DEFAULT_CENTER",
    "NEIGHBORHOOD_COORDS",
    "pin_coordinates",
]
