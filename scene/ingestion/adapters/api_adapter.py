"""
API Source Adapter.

Adapter for fetching JSON records from REST endpoints over a shared
requests session.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
import logging
import time

import requests

from .base_adapter import BaseSourceAdapter, AdapterConfig, FetchResult


logger = logging.getLogger(__name__)


def api_error_message(response: Optional[requests.Response]) -> Optional[str]:
    """Return ``error.message`` from a JSON error body, if the response has one."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


@dataclass
class APIAdapterConfig(AdapterConfig):
    """
    Configuration for API-based adapters.

    The API key is sent in ``api_key_header`` prefixed by ``api_key_prefix``
    (``Authorization: Bearer <key>`` unless the API says otherwise).
    """

    base_url: str = ""
    method: str = "POST"
    api_key: Optional[str] = None
    api_key_header: str = "Authorization"
    api_key_prefix: str = "Bearer "
    headers: Dict[str, str] = field(default_factory=dict)


class APIAdapter(BaseSourceAdapter):
    """
    Adapter for JSON API data sources.

    Supports:
    - Source-specific query builders and response parsers
    - Optional retry with exponential backoff
    - Custom headers and API-key authentication

    Rate limiting is the caller's responsibility.
    """

    def __init__(
        self,
        config: APIAdapterConfig,
        query_builder: Callable[..., Dict],
        response_parser: Callable[[Dict], List[Dict]],
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API adapter.

        Args:
            config: APIAdapterConfig with API settings
            query_builder: Function to build the request body/params from kwargs
            response_parser: Function to extract the record list from a response
            session: Pre-built session (mostly for tests)
        """
        self.query_builder = query_builder
        self.response_parser = response_parser
        self._session: Optional[requests.Session] = session
        super().__init__(config)

    @property
    def api_config(self) -> APIAdapterConfig:
        """Get typed config."""
        return self.config

    def _validate_config(self) -> None:
        """Validate API configuration."""
        if not self.api_config.base_url:
            raise ValueError("API adapter requires base_url")
        if self.api_config.method.upper() not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {self.api_config.method}")

    def _get_session(self) -> requests.Session:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                "Accept": "application/json",
                "Content-Type": "application/json",
                **self.api_config.headers,
            })
            if self.api_config.api_key:
                self._session.headers[self.api_config.api_key_header] = (
                    f"{self.api_config.api_key_prefix}{self.api_config.api_key}"
                )
        return self._session

    def fetch(self, headers: Optional[Dict[str, str]] = None, **kwargs) -> FetchResult:
        """
        Fetch one page of records from the API.

        Transport and parse failures never propagate: they are logged and
        reported through ``FetchResult.errors`` with an empty record list.

        Args:
            headers: Per-request header overrides
            **kwargs: Parameters passed to query_builder

        Returns:
            FetchResult with raw data
        """
        fetch_started = datetime.now(timezone.utc)
        data: List[Dict[str, Any]] = []
        errors: List[str] = []
        metadata: Dict[str, Any] = {"api_calls": 0}

        try:
            session = self._get_session()

            query_data = self.query_builder(**kwargs)

            response = self.request_json(
                self.api_config.method,
                self.api_config.base_url,
                payload=query_data,
                headers=headers,
                session=session,
            )
            metadata["api_calls"] += 1

            data = self.response_parser(response)

        except (requests.RequestException, ValueError) as e:
            logger.error(f"API fetch failed for {self.source_id}: {e}")
            errors.append(str(e))
            data = []

        return FetchResult(
            success=not errors,
            raw_data=data,
            total_fetched=len(data),
            errors=errors,
            metadata=metadata,
            fetch_started_at=fetch_started,
            fetch_ended_at=datetime.now(timezone.utc),
        )

    def request_json(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> Dict[str, Any]:
        """
        Issue one request and decode the JSON body.

        POST sends ``payload`` as the JSON body, GET sends it as query params.

        Raises:
            requests.RequestException: transport or HTTP status failure
            ValueError: body is not a JSON object
        """
        return self._make_request(
            session or self._get_session(), method.upper(), url, payload, headers
        )

    def _make_request(
        self,
        session: requests.Session,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        retry_count: int = 0,
    ) -> Dict[str, Any]:
        """
        Make HTTP request with retry logic.

        Args:
            session: HTTP session
            method: GET or POST
            url: Target URL
            payload: Request body/params
            headers: Per-request header overrides
            retry_count: Current retry attempt

        Returns:
            Decoded JSON object
        """
        try:
            if method == "POST":
                response = session.post(
                    url,
                    json=payload,
                    headers=headers,
                    timeout=self.api_config.request_timeout,
                )
            else:
                response = session.get(
                    url,
                    params=payload,
                    headers=headers,
                    timeout=self.api_config.request_timeout,
                )

            response.raise_for_status()
            body = response.json()

        except requests.RequestException as e:
            if retry_count < self.api_config.max_retries:
                wait_time = self.api_config.backoff_base_seconds * 2 ** retry_count
                logger.warning(f"Request failed, retrying in {wait_time}s: {e}")
                time.sleep(wait_time)
                return self._make_request(
                    session, method, url, payload, headers, retry_count + 1
                )
            message = api_error_message(getattr(e, "response", None))
            if isinstance(e, requests.HTTPError) and message:
                raise requests.HTTPError(message, response=e.response) from e
            raise

        if not isinstance(body, dict):
            raise ValueError(f"Expected a JSON object from {url}")
        return body

    def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            self._session.close()
            self._session = None
