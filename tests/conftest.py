"""
Shared pytest fixtures for The Scene test suite.

Provides factories for raw Places API candidates and Venue records.
"""

from typing import Any, Dict, Optional

import pytest

from scene.schemas.venue import Venue


@pytest.fixture
def make_candidate():
    """
    Return a function that builds raw Places API place dicts.

    Defaults describe a publishable bar. Pass ``None`` for a field to drop
    it from the payload entirely.

    Example:
        raw = make_candidate(id="X", nationalPhoneNumber=None)
    """

    def _make_candidate(place_id: str = "ChIJtest123", **overrides) -> Dict[str, Any]:
        defaults: Dict[str, Any] = {
            "id": place_id,
            "displayName": {"text": "Test Bar", "languageCode": "en"},
            "formattedAddress": "1 Test St, New York, NY 10001",
            "websiteUri": "https://testbar.example.com",
            "nationalPhoneNumber": "(212) 555-0100",
            "photos": [{"name": f"places/{place_id}/photos/ref1", "widthPx": 800}],
            "types": ["bar", "point_of_interest"],
            "editorialSummary": {"text": "A neighborhood favorite."},
            "priceLevel": "PRICE_LEVEL_MODERATE",
            "rating": 4.5,
            "userRatingCount": 321,
        }
        defaults.update(overrides)
        return {k: v for k, v in defaults.items() if v is not None}

    return _make_candidate


@pytest.fixture
def make_venue():
    """
    Return a function that creates Venue objects with sensible defaults.

    All defaults can be overridden via keyword arguments.
    """

    def _make_venue(venue_id: str = "ChIJvenue1", age: Optional[Any] = "20s", **kwargs) -> Venue:
        defaults: Dict[str, Any] = {
            "id": venue_id,
            "name": "Test Venue",
            "city": "nyc",
            "category": "Restaurant/Bar",
            "neighborhood": "SoHo",
            "price": "$$",
            "crowd": ["Creative", "Edgy"],
            "vibe": ["Cozy", "Classy"],
            "age": age,
            "season": ["All Year"],
            "time_of_day": ["Evening", "Late Night"],
            "intent": ["Group Fun"],
            "editorial": "A popular local spot.",
            "image": "https://places.googleapis.com/v1/places/x/photos/y/media",
            "address": "1 Test St, New York, NY 10001",
            "phone": "(212) 555-0100",
            "website": "https://venue.example.com",
            "rating": 4.2,
        }
        defaults.update(kwargs)
        return Venue(**defaults)

    return _make_venue


@pytest.fixture
def sample_venue(make_venue):
    """Return a single default venue."""
    return make_venue()
