"""
Google Places (New) API client.

Wraps the two endpoints the toolkit needs:
- ``places:searchText`` for the neighborhood sweep (POST, field-masked)
- ``places/{id}`` for per-venue photo lookups (GET, field-masked)

Photo media URLs are built locally from the photo resource name; no extra
metadata call is made.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode
import logging

import requests

from scene.ingestion.adapters import APIAdapter, APIAdapterConfig, FetchResult

logger = logging.getLogger(__name__)


PLACES_API_ROOT = "https://places.googleapis.com/v1"
TEXT_SEARCH_URL = f"{PLACES_API_ROOT}/places:searchText"

SEARCH_FIELDS = [
    "id",
    "displayName",
    "formattedAddress",
    "websiteUri",
    "nationalPhoneNumber",
    "photos",
    "types",
    "editorialSummary",
    "priceLevel",
    "rating",
    "userRatingCount",
]
SEARCH_FIELD_MASK = ",".join(f"places.{name}" for name in SEARCH_FIELDS)
DETAILS_FIELD_MASK = "id,displayName,photos"
PHOTO_SEARCH_FIELD_MASK = "places.id,places.displayName,places.photos"

DEFAULT_PAGE_SIZE = 20


def build_photo_url(photo_name: str, api_key: str, max_px: int = 1200) -> str:
    """
    Build a directly fetchable media URL for a photo resource.

    Args:
        photo_name: Resource name, e.g. ``places/ChIJ.../photos/AUc...``
        api_key: Places API key embedded in the URL
        max_px: Bound used for both height and width

    Returns:
        Media URL string
    """
    query = urlencode(
        {"maxHeightPx": max_px, "maxWidthPx": max_px, "key": api_key}
    )
    return f"{PLACES_API_ROOT}/{photo_name}/media?{query}"


class PlacesSearchClient(APIAdapter):
    """
    Text-search client for the Places API.

    Every call returns normally: failures are logged and surface as an
    empty result (``search``/``search_text``) or as an error text
    (``get_place``).
    """

    def __init__(
        self,
        api_key: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        request_timeout: int = 30,
        max_retries: int = 0,
        backoff_base_seconds: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.page_size = page_size
        config = APIAdapterConfig(
            source_id="google_places",
            base_url=TEXT_SEARCH_URL,
            method="POST",
            api_key=api_key,
            api_key_header="X-Goog-Api-Key",
            api_key_prefix="",
            headers={"X-Goog-FieldMask": SEARCH_FIELD_MASK},
            request_timeout=request_timeout,
            max_retries=max_retries,
            backoff_base_seconds=backoff_base_seconds,
        )
        super().__init__(
            config,
            query_builder=self._build_query,
            response_parser=self._parse_response,
            session=session,
        )

    def _validate_config(self) -> None:
        super()._validate_config()
        if not self.api_config.api_key:
            raise ValueError("Places client requires an API key")

    def _build_query(self, text_query: str, page_size: Optional[int] = None) -> Dict[str, Any]:
        return {"textQuery": text_query, "pageSize": page_size or self.page_size}

    def _parse_response(self, response: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Return the ``places`` list; a missing field means no results."""
        if "error" in response:
            error = response["error"] or {}
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ValueError(f"Places API error: {message}")

        places = response.get("places") or []
        if not isinstance(places, list):
            raise ValueError("Places API returned a non-list 'places' field")
        return places

    # ========================================================================
    # TEXT SEARCH
    # ========================================================================

    def search(
        self,
        text_query: str,
        page_size: Optional[int] = None,
        field_mask: Optional[str] = None,
    ) -> FetchResult:
        """
        Run one text search and return the full fetch result.

        Args:
            text_query: Free-text query
            page_size: Override of the client page size
            field_mask: Override of the sweep field mask
        """
        logger.info(f"Fetching: {text_query}...")
        headers = {"X-Goog-FieldMask": field_mask} if field_mask else None
        return self.fetch(headers=headers, text_query=text_query, page_size=page_size)

    def search_text(self, text_query: str) -> List[Dict[str, Any]]:
        """Run one text search and return the raw place list."""
        return self.search(text_query).raw_data

    # ========================================================================
    # PLACE DETAILS / MEDIA
    # ========================================================================

    def get_place(
        self, place_id: str, field_mask: str = DETAILS_FIELD_MASK
    ) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        """
        Fetch place details by identifier.

        Returns:
            (place, None) on success, or (None, error) where ``error`` is the
            API error message or the transport error text
        """
        url = f"{PLACES_API_ROOT}/places/{place_id}"
        try:
            place = self.request_json(
                "GET", url, headers={"X-Goog-FieldMask": field_mask}
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Place lookup failed for {place_id}: {e}")
            return None, str(e)

        if "error" in place:
            error = place["error"]
            message = error.get("message") if isinstance(error, dict) else None
            logger.error(f"Place lookup failed for {place_id}: {error}")
            return None, message or str(error)
        return place, None

    def download_media(self, url: str) -> Optional[Tuple[bytes, str]]:
        """
        Download a media URL, following redirects.

        Returns:
            (content, content_type) or None on failure
        """
        try:
            response = self._get_session().get(
                url,
                allow_redirects=True,
                timeout=self.api_config.request_timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Media download failed: {e}")
            return None
        return response.content, response.headers.get("Content-Type", "")
