"""
Venue Mapper.

Validates raw Places candidates and maps accepted ones to the Venue record
shape. A venue is publishable only with a phone number, a website and at
least one photo; anything else is dropped silently and counted by the
caller.
"""

from typing import Any, Dict, Optional
import logging

from pydantic import ValidationError

from scene.ingestion.normalization.facets import (
    FacetPolicy,
    RandomFacetPolicy,
    map_price_level,
)
from scene.ingestion.sources.google_places import build_photo_url
from scene.schemas.venue import PlaceCandidate, Venue

logger = logging.getLogger(__name__)


DEFAULT_NAME = "Unknown"
DEFAULT_EDITORIAL = "A popular local spot."
DEFAULT_RATING = 4.0


def rejection_reason(candidate: Optional[PlaceCandidate]) -> Optional[str]:
    """
    Check the publishability rules in order.

    Returns:
        The first failed rule, or None if the candidate is acceptable
    """
    if candidate is None:
        return "missing candidate"
    if not candidate.national_phone_number:
        return "missing phone"
    if not candidate.website_uri:
        return "missing website"
    if not candidate.photos:
        return "missing photo"
    return None


class VenueMapper:
    """
    Turns raw search results into Venue records for one ingestion batch.

    City and category are fixed for the batch; the neighborhood comes from
    the query that surfaced the place, not from its address.
    """

    def __init__(
        self,
        api_key: str,
        city: str = "nyc",
        category: str = "Restaurant/Bar",
        photo_max_px: int = 1200,
        facet_policy: Optional[FacetPolicy] = None,
    ):
        self.api_key = api_key
        self.city = city
        self.category = category
        self.photo_max_px = photo_max_px
        self.facet_policy = facet_policy or RandomFacetPolicy()

    def parse_candidate(self, raw: Optional[Dict[str, Any]]) -> Optional[PlaceCandidate]:
        """Validate a raw place dict; malformed places count as absent."""
        if not raw:
            return None
        try:
            return PlaceCandidate.model_validate(raw)
        except ValidationError as e:
            logger.debug(f"Malformed place skipped: {e.error_count()} errors")
            return None

    def transform(
        self, raw: Optional[Dict[str, Any]], neighborhood: str
    ) -> Optional[Venue]:
        """
        Map a raw place to a Venue.

        Args:
            raw: Place dict from the search response
            neighborhood: Neighborhood of the query that returned it

        Returns:
            Venue, or None if the place is rejected
        """
        candidate = self.parse_candidate(raw)
        reason = rejection_reason(candidate)
        if reason:
            place_id = raw.get("id") if isinstance(raw, dict) else None
            logger.debug(f"Rejected place {place_id}: {reason}")
            return None
        return self.to_venue(candidate, neighborhood)

    def to_venue(self, candidate: PlaceCandidate, neighborhood: str) -> Venue:
        """Build the Venue for an already validated candidate."""
        facets = self.facet_policy.assign(candidate)
        image = build_photo_url(
            candidate.first_photo.name, self.api_key, self.photo_max_px
        )

        return Venue(
            id=candidate.id,
            name=candidate.name or DEFAULT_NAME,
            city=self.city,
            category=self.category,
            neighborhood=neighborhood,
            price=map_price_level(candidate.price_level),
            crowd=facets.crowd,
            vibe=facets.vibe,
            age=facets.age,
            season=facets.season,
            time_of_day=facets.time_of_day,
            intent=facets.intent,
            editorial=candidate.editorial or DEFAULT_EDITORIAL,
            image=image,
            address=candidate.formatted_address,
            phone=candidate.national_phone_number,
            website=candidate.website_uri,
            rating=candidate.rating or DEFAULT_RATING,
            reviews=[],
        )
