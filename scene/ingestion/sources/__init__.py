from .google_places import (
    DETAILS_FIELD_MASK,
    SEARCH_FIELD_MASK,
    TEXT_SEARCH_URL,
    PlacesSearchClient,
    build_photo_url,
)

__all__ = [
    "DETAILS_FIELD_MASK",
    "SEARCH_FIELD_MASK",
    "TEXT_SEARCH_URL",
    "PlacesSearchClient",
    "build_photo_url",
]
