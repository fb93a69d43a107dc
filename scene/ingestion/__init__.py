"""
Venue ingestion.

QueryPlan -> PlacesSearchClient -> VenueMapper -> PlaceIdDeduplicator ->
generated TypeScript module, plus the photo enrichment step that runs
against an existing module.
"""

from .pipeline import (
    IngestionResult,
    IngestionRunContext,
    IngestionStatus,
    VenueIngestionPipeline,
    run_ingestion,
)
from .queries import QueryPlan, SearchQuery

__all__ = [
    "IngestionResult",
    "IngestionRunContext",
    "IngestionStatus",
    "VenueIngestionPipeline",
    "run_ingestion",
    "QueryPlan",
    "SearchQuery",
]
