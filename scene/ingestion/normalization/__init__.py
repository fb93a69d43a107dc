"""
Normalization of raw Places results into Venue records.

- facets: label sets, price mapping, season/time heuristic, facet policies
- venue_mapper: publishability rules and candidate -> Venue mapping
"""

from .facets import (
    FacetPolicy,
    RandomFacetPolicy,
    SeasonalWindow,
    VenueFacets,
    map_price_level,
    seasonal_window,
)
from .venue_mapper import VenueMapper, rejection_reason

__all__ = [
    "FacetPolicy",
    "RandomFacetPolicy",
    "SeasonalWindow",
    "VenueFacets",
    "map_price_level",
    "seasonal_window",
    "VenueMapper",
    "rejection_reason",
]
