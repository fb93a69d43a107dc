"""
Unit tests for the Google Places client.

All HTTP traffic goes through a mocked requests session.
"""

from unittest.mock import MagicMock

import pytest
import requests

from scene.ingestion.sources.google_places import (
    DETAILS_FIELD_MASK,
    PHOTO_SEARCH_FIELD_MASK,
    SEARCH_FIELD_MASK,
    TEXT_SEARCH_URL,
    PlacesSearchClient,
    build_photo_url,
)

# =============================================================================
# FIXTURES
# =============================================================================


def _response(body, status_error=None, content=b"", content_type=""):
    response = MagicMock()
    response.json.return_value = body
    response.content = content
    response.headers = {"Content-Type": content_type}
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


def _error_response(status, body):
    """Response whose raise_for_status fails while carrying a JSON error body."""
    response = _response(body)
    response.raise_for_status.side_effect = requests.HTTPError(
        f"{status} Client Error", response=response
    )
    return response


@pytest.fixture
def session():
    """Create a mocked requests session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    """Create a Places client over the mocked session."""
    return PlacesSearchClient(api_key="test-key", session=session)


# =============================================================================
# TEST CLASSES
# =============================================================================


class TestBuildPhotoUrl:
    """Tests for build_photo_url."""

    def test_default_size(self):
        """Should bound both dimensions at 1200 and embed the key."""
        url = build_photo_url("places/abc/photos/ref", "KEY")
        assert url == (
            "https://places.googleapis.com/v1/places/abc/photos/ref/media"
            "?maxHeightPx=1200&maxWidthPx=1200&key=KEY"
        )

    def test_custom_size(self):
        """Should use the given bound."""
        url = build_photo_url("places/abc/photos/ref", "KEY", max_px=800)
        assert "maxHeightPx=800&maxWidthPx=800" in url


class TestFieldMask:
    """Tests for the requested fields."""

    def test_search_mask_fields(self):
        """Should request the eleven candidate fields."""
        fields = SEARCH_FIELD_MASK.split(",")
        assert len(fields) == 11
        assert all(f.startswith("places.") for f in fields)
        assert "places.nationalPhoneNumber" in fields
        assert "places.websiteUri" in fields
        assert "places.photos" in fields

    def test_details_mask(self):
        """Should request only what the photo step needs."""
        assert DETAILS_FIELD_MASK == "id,displayName,photos"


class TestPlacesSearchClientInit:
    """Tests for client construction."""

    def test_requires_api_key(self):
        """Should refuse to build without a key."""
        with pytest.raises(ValueError, match="API key"):
            PlacesSearchClient(api_key="")

    def test_session_headers(self):
        """Should send the key and field mask headers."""
        client = PlacesSearchClient(api_key="test-key")
        headers = client._get_session().headers
        assert headers["X-Goog-Api-Key"] == "test-key"
        assert headers["X-Goog-FieldMask"] == SEARCH_FIELD_MASK
        assert "Authorization" not in headers
        client.close()


class TestSearchText:
    """Tests for text search."""

    def test_posts_query(self, client, session):
        """Should POST textQuery and pageSize."""
        session.post.return_value = _response({"places": [{"id": "A"}]})

        places = client.search_text("cocktail bars in SoHo, New York City")

        assert places == [{"id": "A"}]
        args, kwargs = session.post.call_args
        assert args[0] == TEXT_SEARCH_URL
        assert kwargs["json"] == {
            "textQuery": "cocktail bars in SoHo, New York City",
            "pageSize": 20,
        }

    def test_custom_page_size(self, session):
        """Should send the configured page size."""
        client = PlacesSearchClient(api_key="k", page_size=5, session=session)
        session.post.return_value = _response({})
        client.search_text("bars")
        assert session.post.call_args.kwargs["json"]["pageSize"] == 5

    def test_absent_places_is_empty(self, client, session):
        """Should return [] when the response has no places field."""
        session.post.return_value = _response({})
        result = client.search("bars")
        assert result.success is True
        assert result.raw_data == []

    def test_error_payload(self, client, session):
        """Should log and return [] on an error payload."""
        session.post.return_value = _response(
            {"error": {"code": 403, "message": "API key not valid"}}
        )
        result = client.search("bars")
        assert result.success is False
        assert result.raw_data == []
        assert "API key not valid" in result.errors[0]

    def test_transport_failure(self, client, session):
        """Should return [] on transport failure."""
        session.post.side_effect = requests.ConnectionError("offline")
        assert client.search_text("bars") == []

    def test_http_status_failure(self, client, session):
        """Should return [] on HTTP error status."""
        session.post.return_value = _response(
            {}, status_error=requests.HTTPError("500 Server Error")
        )
        assert client.search_text("bars") == []

    def test_malformed_json(self, client, session):
        """Should return [] when the body is not JSON."""
        response = _response(None)
        response.json.side_effect = ValueError("Expecting value")
        session.post.return_value = response
        assert client.search_text("bars") == []

    def test_non_list_places(self, client, session):
        """Should reject a non-list places field."""
        session.post.return_value = _response({"places": {"id": "A"}})
        assert client.search_text("bars") == []

    def test_error_status_body_message(self, client, session):
        """Should report the API message of a non-2xx search response."""
        session.post.return_value = _error_response(
            403, {"error": {"code": 403, "message": "API key not valid"}}
        )
        result = client.search("bars")
        assert result.success is False
        assert result.errors == ["API key not valid"]

    def test_search_overrides(self, client, session):
        """Should send a per-call page size and field mask."""
        session.post.return_value = _response({"places": [{"id": "A"}]})

        client.search("Bar One 1 Main St", page_size=1, field_mask=PHOTO_SEARCH_FIELD_MASK)

        kwargs = session.post.call_args.kwargs
        assert kwargs["json"] == {"textQuery": "Bar One 1 Main St", "pageSize": 1}
        assert kwargs["headers"] == {
            "X-Goog-FieldMask": "places.id,places.displayName,places.photos"
        }

    def test_search_default_mask_from_session(self, client, session):
        """Should leave the sweep field mask to the session headers."""
        session.post.return_value = _response({})
        client.search("bars")
        assert session.post.call_args.kwargs["headers"] is None


class TestGetPlace:
    """Tests for place details lookups."""

    def test_get_place(self, client, session):
        """Should GET the place with the details field mask."""
        session.get.return_value = _response({"id": "ChIJ1", "photos": []})

        place, error = client.get_place("ChIJ1")

        assert place == {"id": "ChIJ1", "photos": []}
        assert error is None
        args, kwargs = session.get.call_args
        assert args[0] == "https://places.googleapis.com/v1/places/ChIJ1"
        assert kwargs["headers"] == {"X-Goog-FieldMask": DETAILS_FIELD_MASK}

    def test_get_place_error_payload(self, client, session):
        """Should return the error message of an error payload."""
        session.get.return_value = _response({"error": {"message": "NOT_FOUND"}})
        assert client.get_place("ChIJ1") == (None, "NOT_FOUND")

    def test_get_place_error_status_body(self, client, session):
        """Should surface the API message carried by a non-2xx response."""
        session.get.return_value = _error_response(
            404, {"error": {"code": 404, "message": "Place ID is no longer valid."}}
        )
        assert client.get_place("ChIJ1") == (None, "Place ID is no longer valid.")

    def test_get_place_error_status_without_body(self, client, session):
        """Should fall back to the HTTP error text without a JSON error body."""
        response = _error_response(500, None)
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        place, error = client.get_place("ChIJ1")
        assert place is None
        assert error == "500 Client Error"

    def test_get_place_transport_failure(self, client, session):
        """Should return the transport error text."""
        session.get.side_effect = requests.Timeout("slow")
        assert client.get_place("ChIJ1") == (None, "slow")


class TestDownloadMedia:
    """Tests for media download."""

    def test_download(self, client, session):
        """Should return bytes and content type."""
        session.get.return_value = _response(
            None, content=b"\x89PNG", content_type="image/png"
        )
        assert client.download_media("https://media.example.com/x") == (
            b"\x89PNG",
            "image/png",
        )
        assert session.get.call_args.kwargs["allow_redirects"] is True

    def test_download_failure(self, client, session):
        """Should return None on failure."""
        session.get.side_effect = requests.ConnectionError("offline")
        assert client.download_media("https://media.example.com/x") is None
