"""
Venue photo enrichment.

Hot-linked photo URLs embed the API key and expire, so this step looks up
each venue again, downloads its first photo into the web app's static
directory and records ``{venue_id: public_path}``.

Generated venues carry a Places identifier and are looked up directly.
Everything else (hand-curated venues) is found by a one-result text search
on name and address.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
import json
import logging
import re
import time

from scene.ingestion.sources.google_places import (
    DETAILS_FIELD_MASK,
    PHOTO_SEARCH_FIELD_MASK,
    PlacesSearchClient,
    build_photo_url,
)
from scene.schemas.venue import Venue

logger = logging.getLogger(__name__)


NO_PHOTO_ERROR = "No photo found"
LOOKUP_FAILED_ERROR = "Place lookup failed"
_UNSAFE_FILE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_file_id(venue_id: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    return _UNSAFE_FILE_CHARS.sub("_", venue_id)


def extension_for(content_type: str) -> str:
    content_type = (content_type or "").lower()
    if "png" in content_type:
        return ".png"
    if "webp" in content_type:
        return ".webp"
    return ".jpg"


@dataclass
class CuratedVenue:
    """A hand-curated venue known only by name and address."""

    id: str
    name: str
    address: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CuratedVenue":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            address=str(data.get("address") or ""),
        )


PhotoTarget = Union[Venue, CuratedVenue]


@dataclass
class PhotoLookup:
    """Outcome of one photo lookup: a media URL or an error text."""

    venue_id: str
    name: str
    photo_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.photo_url is not None


@dataclass
class PhotoRunResult:
    """Outcome of a photo enrichment run."""

    total: int = 0
    mapping: Dict[str, str] = field(default_factory=dict)
    failures: List[PhotoLookup] = field(default_factory=list)

    @property
    def downloaded(self) -> int:
        return len(self.mapping)


class PhotoEnricher:
    """
    Downloads one photo per venue through the Places API.

    Lookups and downloads are sequential with their own fixed delays.
    """

    def __init__(
        self,
        client: PlacesSearchClient,
        output_dir: Path,
        api_key: str,
        max_px: int = 800,
        request_delay_seconds: float = 0.08,
        search_delay_seconds: float = 0.1,
        download_delay_seconds: float = 0.05,
        public_prefix: str = "/images/venues",
        city: str = "nyc",
        place_id_prefix: str = "ChIJ",
    ):
        self.client = client
        self.output_dir = Path(output_dir)
        self.api_key = api_key
        self.max_px = max_px
        self.request_delay_seconds = request_delay_seconds
        self.search_delay_seconds = search_delay_seconds
        self.download_delay_seconds = download_delay_seconds
        self.public_prefix = public_prefix.rstrip("/")
        self.city = city
        self.place_id_prefix = place_id_prefix

    def eligible(self, venues: Iterable[Venue]) -> List[Venue]:
        """Venues of the configured city that carry a Places identifier."""
        return [
            venue
            for venue in venues
            if venue.city == self.city and venue.id.startswith(self.place_id_prefix)
        ]

    def search_targets(
        self,
        venues: Iterable[Venue],
        curated: Sequence[CuratedVenue] = (),
    ) -> List[PhotoTarget]:
        """
        Venues to find by text search.

        City venues without a Places identifier come first, then curated
        entries. Anything whose name (case-insensitive) matches a place-id
        venue is skipped, as that venue already gets a photo.
        """
        venues = list(venues)
        by_id = self.eligible(venues)
        taken = {venue.name.lower() for venue in by_id}

        candidates: List[PhotoTarget] = [
            venue
            for venue in venues
            if venue.city == self.city and not venue.id.startswith(self.place_id_prefix)
        ]
        candidates.extend(curated)

        targets = []
        for target in candidates:
            if target.name.lower() in taken:
                continue
            taken.add(target.name.lower())
            targets.append(target)
        return targets

    def _photo_from_place(self, lookup: PhotoLookup, place: Dict[str, Any]) -> PhotoLookup:
        photos = place.get("photos") or []
        if not photos or not isinstance(photos[0], dict) or not photos[0].get("name"):
            lookup.error = NO_PHOTO_ERROR
            return lookup

        lookup.photo_url = build_photo_url(photos[0]["name"], self.api_key, self.max_px)
        return lookup

    def lookup_photo(self, venue: Venue) -> PhotoLookup:
        """
        Resolve the first photo of a venue to a media URL by place id.

        Returns:
            PhotoLookup with ``photo_url`` set, or ``error`` holding the API
            error message, the transport error or ``"No photo found"``
        """
        lookup = PhotoLookup(venue_id=venue.id, name=venue.name)
        place, error = self.client.get_place(venue.id, DETAILS_FIELD_MASK)
        if place is None:
            lookup.error = error or LOOKUP_FAILED_ERROR
            return lookup
        return self._photo_from_place(lookup, place)

    def lookup_photo_by_search(self, target: PhotoTarget) -> PhotoLookup:
        """Resolve a photo by searching ``"<name> <address>"`` for one place."""
        lookup = PhotoLookup(venue_id=target.id, name=target.name)
        text_query = f"{target.name} {target.address or ''}".strip()
        result = self.client.search(
            text_query, page_size=1, field_mask=PHOTO_SEARCH_FIELD_MASK
        )
        if not result.success:
            lookup.error = result.errors[0] if result.errors else LOOKUP_FAILED_ERROR
            return lookup
        if not result.raw_data:
            lookup.error = NO_PHOTO_ERROR
            return lookup
        return self._photo_from_place(lookup, result.raw_data[0])

    def download(self, lookup: PhotoLookup, file_id: str) -> Optional[str]:
        """
        Download a looked-up photo into ``output_dir``.

        Args:
            lookup: Successful PhotoLookup
            file_id: Sanitized file name stem

        Returns:
            Public path of the stored file, or None on failure
        """
        if not lookup.photo_url:
            return None

        media = self.client.download_media(lookup.photo_url)
        if media is None:
            return None

        content, content_type = media
        filename = f"{file_id}{extension_for(content_type)}"
        self.output_dir.mkdir(parents=True, exist_ok=True)
        (self.output_dir / filename).write_bytes(content)
        return f"{self.public_prefix}/{filename}"

    def run(
        self,
        venues: Iterable[Venue],
        curated: Sequence[CuratedVenue] = (),
    ) -> PhotoRunResult:
        """
        Look up and download photos for every eligible venue.

        Place-id venues are looked up first, then the search targets.
        """
        venues = list(venues)
        by_id = self.eligible(venues)
        by_search = self.search_targets(venues, curated)
        result = PhotoRunResult(total=len(by_id) + len(by_search))

        lookups = []

        def collect(lookup: PhotoLookup) -> None:
            if lookup.found:
                lookups.append(lookup)
            else:
                result.failures.append(lookup)

        logger.info(f"Fetching photos for {len(by_id)} venues (by place id)")
        for index, venue in enumerate(by_id, start=1):
            logger.debug(f"[{index}/{len(by_id)}] {venue.name}")
            collect(self.lookup_photo(venue))
            time.sleep(self.request_delay_seconds)

        logger.info(f"Fetching photos for {len(by_search)} venues (by text search)")
        for index, target in enumerate(by_search, start=1):
            logger.debug(f"[{index}/{len(by_search)}] {target.name}")
            collect(self.lookup_photo_by_search(target))
            time.sleep(self.search_delay_seconds)

        logger.info(f"Downloading {len(lookups)} photos")
        for lookup in lookups:
            local_path = self.download(lookup, sanitize_file_id(lookup.venue_id))
            if local_path:
                result.mapping[lookup.venue_id] = local_path
            else:
                lookup.error = "Download failed"
                result.failures.append(lookup)
            time.sleep(self.download_delay_seconds)

        logger.info(
            f"Successfully downloaded {result.downloaded}/{result.total} venue photos"
        )
        for failure in result.failures[:10]:
            logger.warning(f"  - {failure.name}: {failure.error}")
        if len(result.failures) > 10:
            logger.warning(f"  ... and {len(result.failures) - 10} more")
        return result


def write_mapping(mapping: Dict[str, str], path: Path) -> Path:
    """Store the ``{venue_id: local_path}`` mapping as indented JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(mapping, indent=2), encoding="utf-8")
    logger.info(f"Mapping saved to: {path}")
    return path
