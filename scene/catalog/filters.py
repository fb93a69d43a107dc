"""
Catalog filters.

``valid_venues`` is the gate every screen of the app goes through;
``recommended_venues`` narrows it down for a user's age bracket and
dislikes and orders the result by rating.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from scene.schemas.venue import Venue


QUEENS_NEIGHBORHOODS: FrozenSet[str] = frozenset(
    {"Astoria", "Long Island City", "Sunnyside", "Ridgewood"}
)

PLACEHOLDER_IMAGE_MARKER = "/placeholder/"

TWENTIES_BRACKETS = frozenset({"21-24", "25-29"})
THIRTIES_BRACKETS = frozenset({"30-34", "35-39"})
TWENTIES_LISTS = frozenset({"bars-20s", "mixed-bars", "rooftops-20s"})
THIRTIES_LISTS = frozenset({"bars-30s", "mixed-bars", "rooftops-30s"})

CLUBS_DISLIKE = "Clubs"
DANCING_INTENT = "Dancing"


@dataclass
class UserPreferences:
    """What a user told onboarding about themselves."""

    age_bracket: Optional[str] = None
    dislikes: List[str] = field(default_factory=list)


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def valid_venues(
    venues: Iterable[Venue],
    city: str,
    excluded_neighborhoods: Iterable[str] = QUEENS_NEIGHBORHOODS,
) -> List[Venue]:
    """
    Venues fit to show in ``city``.

    A venue is kept when it belongs to the city, has non-blank phone,
    website and image, does not use a placeholder image and is not in an
    excluded neighborhood.
    """
    excluded = set(excluded_neighborhoods)
    result = []
    for venue in venues:
        if venue.city != city:
            continue
        if _is_blank(venue.phone) or _is_blank(venue.website) or _is_blank(venue.image):
            continue
        if PLACEHOLDER_IMAGE_MARKER in venue.image:
            continue
        if venue.neighborhood in excluded:
            continue
        result.append(venue)
    return result


def matches_age(venue: Venue, age_bracket: Optional[str]) -> bool:
    """
    Whether a venue's age tags are compatible with a user's bracket.

    Venues without age tags match every bracket, as does a user without a
    bracket.
    """
    tags = venue.age_tags
    if not age_bracket or not tags:
        return True

    compatible = {age_bracket}
    if age_bracket in TWENTIES_BRACKETS:
        compatible |= TWENTIES_LISTS
    if age_bracket in THIRTIES_BRACKETS:
        compatible |= THIRTIES_LISTS
    return any(tag in compatible for tag in tags)


def is_disliked(venue: Venue, dislikes: Iterable[str]) -> bool:
    dislikes = list(dislikes)
    if not dislikes:
        return False

    if any(dislike in venue.category for dislike in dislikes):
        return True
    if CLUBS_DISLIKE in dislikes and (
        "club" in venue.category.lower() or DANCING_INTENT in venue.intent
    ):
        return True
    return any(vibe in dislikes for vibe in venue.vibe)


def recommended_venues(
    venues: Iterable[Venue], city: str, preferences: UserPreferences
) -> List[Venue]:
    """
    Recommended venues for a newcomer to ``city``.

    Args:
        venues: Full catalog
        city: City key, e.g. ``nyc``
        preferences: Age bracket and dislikes of the user

    Returns:
        Valid, compatible venues sorted by rating, highest first
    """
    candidates = [
        venue
        for venue in valid_venues(venues, city)
        if matches_age(venue, preferences.age_bracket)
        and not is_disliked(venue, preferences.dislikes)
    ]
    return sorted(candidates, key=lambda venue: venue.rating or 0, reverse=True)
