"""
Base Source Adapter.

Abstract base class defining the interface for all source adapters.
Adapters encapsulate how raw records are fetched from a remote source so
the ingestion pipeline never talks to the network directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class FetchResult:
    """
    Result of a single fetch operation.

    ``success`` is False only when the fetch itself failed; a successful
    fetch may legitimately return zero records.
    """

    success: bool
    raw_data: List[Dict[str, Any]] = field(default_factory=list)
    total_fetched: int = 0
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    fetch_started_at: Optional[datetime] = None
    fetch_ended_at: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        """Calculate fetch duration."""
        if self.fetch_started_at and self.fetch_ended_at:
            return (self.fetch_ended_at - self.fetch_started_at).total_seconds()
        return 0.0


@dataclass
class AdapterConfig:
    """
    Base configuration for source adapters.

    Retries are disabled by default; when enabled the wait before attempt
    ``n`` is ``backoff_base_seconds * 2 ** n``.
    """

    source_id: str
    request_timeout: int = 30
    max_retries: int = 0
    backoff_base_seconds: float = 1.0


class BaseSourceAdapter(ABC):
    """
    Abstract base class for source adapters.

    Subclasses must implement:
        - fetch(): Fetch raw data from the source
        - _validate_config(): Validate adapter-specific configuration
    """

    def __init__(self, config: AdapterConfig):
        """
        Initialize the adapter.

        Args:
            config: AdapterConfig with source-specific settings
        """
        self.config = config
        self._validate_config()

    @property
    def source_id(self) -> str:
        """Get the source identifier."""
        return self.config.source_id

    @abstractmethod
    def fetch(self, **kwargs) -> FetchResult:
        """
        Fetch raw data from the source.

        Args:
            **kwargs: Source-specific fetch parameters

        Returns:
            FetchResult with raw data and metadata
        """
        pass

    @abstractmethod
    def _validate_config(self) -> None:
        """
        Validate adapter-specific configuration.

        Raises:
            ValueError: If configuration is invalid
        """
        pass

    def close(self) -> None:
        """Release any resources held by the adapter."""
        pass

    def __enter__(self) -> "BaseSourceAdapter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
