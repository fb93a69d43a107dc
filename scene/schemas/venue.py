# scene/schemas/venue.py
"""
Venue schemas for The Scene catalog.

Two shapes live here:

- PlaceCandidate: a raw place as returned by the Google Places (New) API.
  Field aliases match the wire names so API payloads validate directly.
- Venue: the normalized record written into the generated data module and
  read back by the catalog. Aliases match the keys of the application's
  ``Place`` type (``timeOfDay``), everything else is already camel-free.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# RAW CANDIDATE (Places API)
# ============================================================================


class LocalizedText(BaseModel):
    """Text value with its language, e.g. ``displayName``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    text: Optional[str] = None
    language_code: Optional[str] = Field(default=None, alias="languageCode")


class PhotoReference(BaseModel):
    """Photo resource reference (``places/<id>/photos/<ref>``)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    width_px: Optional[int] = Field(default=None, alias="widthPx")
    height_px: Optional[int] = Field(default=None, alias="heightPx")


class PlaceCandidate(BaseModel):
    """A raw place returned by the text-search endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., min_length=1)
    display_name: Optional[LocalizedText] = Field(default=None, alias="displayName")
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress")
    national_phone_number: Optional[str] = Field(
        default=None, alias="nationalPhoneNumber"
    )
    website_uri: Optional[str] = Field(default=None, alias="websiteUri")
    photos: List[PhotoReference] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)
    editorial_summary: Optional[LocalizedText] = Field(
        default=None, alias="editorialSummary"
    )
    price_level: Optional[str] = Field(default=None, alias="priceLevel")
    rating: Optional[float] = None
    user_rating_count: Optional[int] = Field(default=None, alias="userRatingCount")

    @field_validator("photos", "types", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def name(self) -> Optional[str]:
        """Display name text, if any."""
        return self.display_name.text if self.display_name else None

    @property
    def editorial(self) -> Optional[str]:
        """Editorial summary text, if any."""
        return self.editorial_summary.text if self.editorial_summary else None

    @property
    def first_photo(self) -> Optional[PhotoReference]:
        return self.photos[0] if self.photos else None


# ============================================================================
# NORMALIZED VENUE
# ============================================================================


class Venue(BaseModel):
    """
    Normalized venue record.

    ``phone``, ``website`` and ``image`` can never be empty: a venue without
    them is not publishable in the app and must be rejected upstream.
    ``age`` is a single bracket for generated venues and a tag list for
    hand-curated ones, so both forms are accepted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    city: str
    category: str
    neighborhood: str
    price: str
    crowd: List[str] = Field(default_factory=list)
    vibe: List[str] = Field(default_factory=list)
    age: Optional[Union[str, List[str]]] = None
    season: List[str] = Field(default_factory=list)
    time_of_day: List[str] = Field(default_factory=list, alias="timeOfDay")
    intent: List[str] = Field(default_factory=list)
    editorial: str = ""
    image: str = Field(..., min_length=1)
    address: Optional[str] = None
    phone: str = Field(..., min_length=1)
    website: str = Field(..., min_length=1)
    rating: float
    reviews: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def age_tags(self) -> List[str]:
        """Age information as a list regardless of the stored form."""
        if self.age is None:
            return []
        if isinstance(self.age, str):
            return [self.age]
        return list(self.age)

    def to_artifact_dict(self) -> Dict[str, Any]:
        """Serialize with the application's key names, dropping unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
