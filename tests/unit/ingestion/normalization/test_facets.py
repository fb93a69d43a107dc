"""
Unit tests for facet assignment.

Tests for price mapping, the season/time-of-day heuristic and the random
placeholder policy.
"""

import random

import pytest

from scene.ingestion.normalization.facets import (
    AGES,
    CROWDS,
    INTENTS,
    VIBES,
    RandomFacetPolicy,
    map_price_level,
    seasonal_window,
)
from scene.schemas.venue import PlaceCandidate

# =============================================================================
# TEST CLASSES
# =============================================================================


class TestMapPriceLevel:
    """Tests for map_price_level."""

    @pytest.mark.parametrize(
        "price_level,expected",
        [
            ("PRICE_LEVEL_INEXPENSIVE", "$"),
            ("PRICE_LEVEL_MODERATE", "$$"),
            ("PRICE_LEVEL_EXPENSIVE", "$$$"),
            ("PRICE_LEVEL_VERY_EXPENSIVE", "$$$$"),
        ],
    )
    def test_known_levels(self, price_level, expected):
        """Should map every known level."""
        assert map_price_level(price_level) == expected

    @pytest.mark.parametrize(
        "price_level", [None, "", "PRICE_LEVEL_FREE", "PRICE_LEVEL_UNSPECIFIED"]
    )
    def test_default(self, price_level):
        """Should default to $$."""
        assert map_price_level(price_level) == "$$"


class TestSeasonalWindow:
    """Tests for seasonal_window."""

    def test_default_nightlife(self):
        """Should default to evenings all year."""
        window = seasonal_window(["bar", "night_club"])
        assert window.time_of_day == ("Evening", "Late Night")
        assert window.season == ("All Year",)

    def test_empty_types(self):
        """Should use the defaults with no types."""
        assert seasonal_window([]).time_of_day == ("Evening", "Late Night")

    @pytest.mark.parametrize(
        "place_type", ["cafe", "coffee_shop", "bakery", "breakfast_restaurant"]
    )
    def test_daytime_types(self, place_type):
        """Should move cafes and bakeries to daytime."""
        window = seasonal_window([place_type, "store"])
        assert window.time_of_day == ("Morning", "Afternoon")
        assert window.season == ("All Year",)

    def test_case_insensitive(self):
        """Should match regardless of case."""
        assert seasonal_window(["Coffee_Shop"]).time_of_day == ("Morning", "Afternoon")

    def test_park(self):
        """Should move parks to daytime, spring to fall."""
        window = seasonal_window(["park"])
        assert window.time_of_day == ("Morning", "Afternoon")
        assert window.season == ("Spring", "Summer", "Fall")

    def test_beer_garden(self):
        """Should treat gardens like parks."""
        assert seasonal_window(["beer_garden", "bar"]).season == ("Spring", "Summer", "Fall")

    def test_rooftop_keeps_time(self):
        """Should restrict rooftops to spring/summer without touching time."""
        window = seasonal_window(["rooftop_bar"])
        assert window.season == ("Spring", "Summer")
        assert window.time_of_day == ("Evening", "Late Night")

    def test_rooftop_cafe(self):
        """Should combine cafe hours with rooftop season."""
        window = seasonal_window(["cafe", "rooftop"])
        assert window.time_of_day == ("Morning", "Afternoon")
        assert window.season == ("Spring", "Summer")

    def test_substring_across_joined_types(self):
        """Should match on the joined type string."""
        assert seasonal_window(["roof", "top"]).season == ("All Year",)
        assert seasonal_window(["bakery_and_bar"]).time_of_day == ("Morning", "Afternoon")


class TestRandomFacetPolicy:
    """Tests for RandomFacetPolicy."""

    @pytest.fixture
    def candidate(self, make_candidate):
        """Return a validated cafe candidate."""
        return PlaceCandidate.model_validate(make_candidate(types=["cafe"]))

    def test_labels_from_sets(self, candidate):
        """Should draw every label from its set."""
        facets = RandomFacetPolicy(random.Random(1)).assign(candidate)
        assert len(facets.crowd) == 2
        assert len(facets.vibe) == 2
        assert len(facets.intent) == 1
        assert set(facets.crowd) <= set(CROWDS)
        assert set(facets.vibe) <= set(VIBES)
        assert facets.intent[0] in INTENTS
        assert facets.age in AGES

    def test_window_is_deterministic(self, candidate):
        """Should take season/time from the heuristic."""
        facets = RandomFacetPolicy().assign(candidate)
        assert facets.time_of_day == ["Morning", "Afternoon"]
        assert facets.season == ["All Year"]

    def test_seeded_runs_repeat(self, candidate):
        """Should reproduce with the same seed."""
        first = RandomFacetPolicy(random.Random(42)).assign(candidate)
        second = RandomFacetPolicy(random.Random(42)).assign(candidate)
        assert first == second
