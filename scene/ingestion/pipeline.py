"""
Venue Ingestion Pipeline.

Runs the neighborhood x search-term sweep against the Places API and
accumulates publishable, unique venues:

    QueryPlan -> PlacesSearchClient -> VenueMapper -> Deduplicator -> persist

Execution is strictly sequential with a fixed delay before every request.
All run state lives in an ``IngestionRunContext`` created per execution,
so a pipeline instance can be executed repeatedly.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from itertools import groupby
from operator import attrgetter
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import logging
import random
import time
import uuid

from scene.configs.config import IngestionConfig
from scene.configs.settings import Settings, get_settings
from scene.ingestion.deduplication import PlaceIdDeduplicator, VenueDeduplicator
from scene.ingestion.normalization.facets import FacetPolicy, RandomFacetPolicy
from scene.ingestion.normalization.venue_mapper import VenueMapper
from scene.ingestion.persist import write_venue_module
from scene.ingestion.queries import QueryPlan, SearchQuery
from scene.ingestion.sources.google_places import PlacesSearchClient
from scene.monitoring.logging import with_context
from scene.schemas.venue import Venue

logger = logging.getLogger(__name__)


class IngestionStatus(str, Enum):
    """Status of an ingestion run."""

    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"
    EMPTY = "empty"


@dataclass
class IngestionRunContext:
    """Mutable state owned by one execution of the sweep."""

    run_id: str
    started_at: datetime
    deduplicator: VenueDeduplicator
    venues: List[Venue] = field(default_factory=list)
    queries_executed: int = 0
    failed_queries: int = 0
    raw_candidates: int = 0
    duplicates_skipped: int = 0
    rejected: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class IngestionResult:
    """Result of an ingestion run."""

    status: IngestionStatus
    run_id: str
    started_at: datetime
    ended_at: datetime
    queries_executed: int = 0
    failed_queries: int = 0
    raw_candidates: int = 0
    duplicates_skipped: int = 0
    rejected: int = 0
    venues: List[Venue] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def accepted(self) -> int:
        return len(self.venues)

    @property
    def duration_seconds(self) -> float:
        """Calculate execution duration."""
        return (self.ended_at - self.started_at).total_seconds()

    def summary(self) -> Dict[str, Any]:
        """Counters for logging and CLI output."""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "queries": self.queries_executed,
            "failed_queries": self.failed_queries,
            "raw_candidates": self.raw_candidates,
            "duplicates_skipped": self.duplicates_skipped,
            "rejected": self.rejected,
            "accepted": self.accepted,
            "duration_s": round(self.duration_seconds, 2),
        }


class VenueIngestionPipeline:
    """
    Sequential venue sweep.

    The pipeline owns no network or random state of its own: the client,
    the mapper (with its facet policy) and the deduplicator factory are
    injected so each can be replaced in tests.
    """

    def __init__(
        self,
        config: IngestionConfig,
        client: PlacesSearchClient,
        mapper: VenueMapper,
        deduplicator_factory: Callable[[], VenueDeduplicator] = PlaceIdDeduplicator,
    ):
        self.config = config
        self.client = client
        self.mapper = mapper
        self.deduplicator_factory = deduplicator_factory
        self.logger = logging.getLogger(f"pipeline.{client.source_id}")

    def execute(self, plan: Optional[QueryPlan] = None) -> IngestionResult:
        """
        Run every query of the plan and collect unique, valid venues.

        Args:
            plan: Query plan, defaults to the configured sweep

        Returns:
            IngestionResult with venues and counters
        """
        plan = plan if plan is not None else QueryPlan.from_config(self.config)
        context = self._new_context()
        log = with_context(
            self.logger,
            run_id=context.run_id,
            source_id=self.client.source_id,
            stage="ingest",
        )

        log.info(
            f"Starting ingestion run {context.run_id}: {len(plan)} queries"
        )

        for neighborhood, queries in groupby(plan, key=attrgetter("neighborhood")):
            for query in queries:
                time.sleep(self.config.request_delay_seconds)
                self._run_query(query, context)
            log.info(
                f"  > {neighborhood} complete. "
                f"Total valid unique places: {len(context.venues)}"
            )

        result = self._build_result(context)
        log.info(f"Total places fetched: {result.accepted}")
        log.info(f"Ingestion summary: {result.summary()}")
        return result

    def _run_query(self, query: SearchQuery, context: IngestionRunContext) -> None:
        """Fetch one query and fold its results into the run context."""
        fetch_result = self.client.search(query.text)
        context.queries_executed += 1

        if not fetch_result.success:
            context.failed_queries += 1
            context.errors.extend(
                {"query": query.text, "error": error, "stage": "fetch"}
                for error in fetch_result.errors
            )

        for raw_place in fetch_result.raw_data:
            context.raw_candidates += 1
            place_id = raw_place.get("id") if isinstance(raw_place, dict) else None

            if isinstance(place_id, str) and context.deduplicator.is_duplicate(place_id):
                context.duplicates_skipped += 1
                continue

            venue = self.mapper.transform(raw_place, query.neighborhood)
            if venue is None:
                context.rejected += 1
                continue

            context.deduplicator.mark_seen(venue.id)
            context.venues.append(venue)

    def _new_context(self) -> IngestionRunContext:
        started_at = datetime.now(timezone.utc)
        run_id = f"{started_at.strftime('%Y%m%d_%H%M%S')}_{str(uuid.uuid4())[:8]}"
        return IngestionRunContext(
            run_id=run_id,
            started_at=started_at,
            deduplicator=self.deduplicator_factory(),
        )

    def _build_result(self, context: IngestionRunContext) -> IngestionResult:
        if not context.venues:
            status = IngestionStatus.EMPTY
        elif context.failed_queries:
            status = IngestionStatus.PARTIAL_SUCCESS
        else:
            status = IngestionStatus.SUCCESS

        return IngestionResult(
            status=status,
            run_id=context.run_id,
            started_at=context.started_at,
            ended_at=datetime.now(timezone.utc),
            queries_executed=context.queries_executed,
            failed_queries=context.failed_queries,
            raw_candidates=context.raw_candidates,
            duplicates_skipped=context.duplicates_skipped,
            rejected=context.rejected,
            venues=list(context.venues),
            errors=list(context.errors),
        )


def run_ingestion(
    config: IngestionConfig,
    settings: Optional[Settings] = None,
    client: Optional[PlacesSearchClient] = None,
    facet_policy: Optional[FacetPolicy] = None,
    plan: Optional[QueryPlan] = None,
    output_path: Optional[Path] = None,
    seed: Optional[int] = None,
) -> IngestionResult:
    """
    Run a full ingestion and write the generated module.

    The API key is checked before anything touches the network.

    Args:
        config: IngestionConfig for the sweep
        settings: Settings holding GOOGLE_API_KEY (defaults to environment)
        client: Pre-built Places client
        facet_policy: Facet policy, defaults to random placeholders
        plan: Query plan override (e.g. a subset of neighborhoods)
        output_path: Artifact path override
        seed: Seed for the default random facet policy

    Returns:
        IngestionResult with ``output_path`` set

    Raises:
        MissingCredentialError: If GOOGLE_API_KEY is not configured
    """
    settings = settings or get_settings()
    api_key = settings.require_google_api_key()

    if facet_policy is None:
        facet_policy = RandomFacetPolicy(random.Random(seed))

    mapper = VenueMapper(
        api_key=api_key,
        city=config.city,
        category=config.category,
        photo_max_px=config.photo_max_px,
        facet_policy=facet_policy,
    )
    client = client or PlacesSearchClient(
        api_key=api_key,
        page_size=config.page_size,
        request_timeout=config.request_timeout,
        max_retries=config.max_retries,
        backoff_base_seconds=config.backoff_base_seconds,
    )

    with client:
        result = VenueIngestionPipeline(config, client, mapper).execute(plan)

    if result.failed_queries:
        logger.warning(
            f"{result.failed_queries}/{result.queries_executed} queries failed "
            f"and were counted as empty"
        )

    result.output_path = write_venue_module(
        result.venues,
        output_path or config.output_path,
        export_name=config.export_name,
        type_name=config.type_name,
        import_from=config.type_import_from,
    )
    return result
