"""
Facet assignment for ingested venues.

Facets are the filter labels the app shows on every venue: crowd, vibe,
age, intent, season and time of day. The places API carries no signal for
most of them, so ``RandomFacetPolicy`` fills them with uniform placeholder
draws. Swap in another ``FacetPolicy`` to tag from real data without
touching the ingestion loop.

Season and time of day are the exception: they come from a keyword
heuristic on the place types (``seasonal_window``).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import random

from scene.schemas.venue import PlaceCandidate


# ============================================================================
# LABEL SETS
# ============================================================================

VIBES: Tuple[str, ...] = ("Low-key", "High-Energy", "Classy", "Cozy", "Loud", "Divey-Cool")
CROWDS: Tuple[str, ...] = (
    "Young Professional",
    "Intellectual",
    "Creative",
    "Edgy",
    "International",
)
INTENTS: Tuple[str, ...] = ("Group Fun", "Meet New People", "Dancing")
AGES: Tuple[str, ...] = ("20s", "30s", "40s")

MORNING = "Morning"
AFTERNOON = "Afternoon"
EVENING = "Evening"
LATE_NIGHT = "Late Night"

SPRING = "Spring"
SUMMER = "Summer"
FALL = "Fall"
ALL_YEAR = "All Year"

DEFAULT_TIME_OF_DAY: Tuple[str, ...] = (EVENING, LATE_NIGHT)
DAYTIME: Tuple[str, ...] = (MORNING, AFTERNOON)
DEFAULT_SEASON: Tuple[str, ...] = (ALL_YEAR,)
OPEN_AIR_SEASONS: Tuple[str, ...] = (SPRING, SUMMER, FALL)
ROOFTOP_SEASONS: Tuple[str, ...] = (SPRING, SUMMER)

DAYTIME_KEYWORDS: Tuple[str, ...] = ("cafe", "coffee", "bakery", "breakfast")
OPEN_AIR_KEYWORDS: Tuple[str, ...] = ("park", "garden")
ROOFTOP_KEYWORDS: Tuple[str, ...] = ("rooftop",)


# ============================================================================
# PRICE
# ============================================================================

PRICE_LEVEL_SYMBOLS = {
    "PRICE_LEVEL_INEXPENSIVE": "$",
    "PRICE_LEVEL_MODERATE": "$$",
    "PRICE_LEVEL_EXPENSIVE": "$$$",
    "PRICE_LEVEL_VERY_EXPENSIVE": "$$$$",
}
DEFAULT_PRICE = "$$"


def map_price_level(price_level: Optional[str]) -> str:
    """Map a Places ``priceLevel`` to a ``$`` symbol, defaulting to ``$$``."""
    return PRICE_LEVEL_SYMBOLS.get(price_level or "", DEFAULT_PRICE)


# ============================================================================
# SEASON / TIME OF DAY
# ============================================================================


@dataclass(frozen=True)
class SeasonalWindow:
    """When a venue is worth visiting."""

    season: Tuple[str, ...] = DEFAULT_SEASON
    time_of_day: Tuple[str, ...] = DEFAULT_TIME_OF_DAY


def seasonal_window(types: Iterable[str]) -> SeasonalWindow:
    """
    Derive season and time of day from place types.

    Rules run in order over the joined, lower-cased type string; each rule
    overwrites only the fields it sets:

    1. cafe/coffee/bakery/breakfast -> daytime, all year
    2. park/garden -> daytime, spring to fall
    3. rooftop -> spring and summer (time of day untouched)

    So a rooftop cafe keeps the cafe hours with the rooftop season.
    """
    joined = " ".join(types).lower()
    season = DEFAULT_SEASON
    time_of_day = DEFAULT_TIME_OF_DAY

    if _contains_any(joined, DAYTIME_KEYWORDS):
        time_of_day = DAYTIME
        season = DEFAULT_SEASON
    if _contains_any(joined, OPEN_AIR_KEYWORDS):
        time_of_day = DAYTIME
        season = OPEN_AIR_SEASONS
    if _contains_any(joined, ROOFTOP_KEYWORDS):
        season = ROOFTOP_SEASONS

    return SeasonalWindow(season=season, time_of_day=time_of_day)


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


# ============================================================================
# POLICIES
# ============================================================================


@dataclass(frozen=True)
class VenueFacets:
    """Filter labels attached to a venue."""

    crowd: List[str]
    vibe: List[str]
    age: str
    intent: List[str]
    season: List[str]
    time_of_day: List[str]


class FacetPolicy(ABC):
    """Maps a place candidate to its venue facets."""

    @abstractmethod
    def assign(self, candidate: PlaceCandidate) -> VenueFacets:
        """
        Compute facets for one candidate.

        Args:
            candidate: Validated place candidate

        Returns:
            VenueFacets for the venue record
        """
        pass


class RandomFacetPolicy(FacetPolicy):
    """
    Placeholder tagging by uniform random draws.

    Crowd and vibe get two independent draws each (duplicates possible),
    age and intent one draw each. Output differs between runs unless a
    seeded ``random.Random`` is supplied.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def assign(self, candidate: PlaceCandidate) -> VenueFacets:
        window = seasonal_window(candidate.types)
        return VenueFacets(
            crowd=[self.rng.choice(CROWDS), self.rng.choice(CROWDS)],
            vibe=[self.rng.choice(VIBES), self.rng.choice(VIBES)],
            age=self.rng.choice(AGES),
            intent=[self.rng.choice(INTENTS)],
            season=list(window.season),
            time_of_day=list(window.time_of_day),
        )
