"""
Unit tests for the queries module.

Tests for query text formatting and QueryPlan iteration.
"""

from scene.configs.config import IngestionConfig
from scene.ingestion.queries import QueryPlan, SearchQuery, format_query


class TestFormatQuery:
    """Tests for format_query."""

    def test_default_locality(self):
        """Should append New York City."""
        assert (
            format_query("best cocktail bars", "SoHo")
            == "best cocktail bars in SoHo, New York City"
        )

    def test_custom_locality(self):
        """Should use the given locality."""
        assert format_query("bars", "Shoreditch", "London") == "bars in Shoreditch, London"


class TestQueryPlan:
    """Tests for QueryPlan."""

    def test_order_neighborhood_outer(self):
        """Should iterate neighborhoods outer, terms inner."""
        plan = QueryPlan(["A", "B"], ["x", "y"])
        pairs = [(q.neighborhood, q.term) for q in plan]
        assert pairs == [("A", "x"), ("A", "y"), ("B", "x"), ("B", "y")]

    def test_len_is_product(self):
        """Should have |neighborhoods| x |terms| queries."""
        plan = QueryPlan(["A", "B", "C"], ["x", "y"])
        assert len(plan) == 6
        assert len(list(plan)) == 6

    def test_restartable(self):
        """Should start a fresh pass on every iteration."""
        plan = QueryPlan(["A"], ["x", "y"])
        assert list(plan) == list(plan)

    def test_query_text(self):
        """Should carry the formatted text."""
        query = next(iter(QueryPlan(["DUMBO"], ["rooftop bars"])))
        assert query == SearchQuery(
            neighborhood="DUMBO",
            term="rooftop bars",
            text="rooftop bars in DUMBO, New York City",
        )

    def test_empty_plan(self):
        """Should yield nothing without neighborhoods."""
        plan = QueryPlan([], ["x"])
        assert len(plan) == 0
        assert list(plan) == []

    def test_from_config(self):
        """Should take lists and locality from the config."""
        config = IngestionConfig(["SoHo"], ["bars", "clubs"], locality="NYC")
        plan = QueryPlan.from_config(config)
        assert [q.text for q in plan] == ["bars in SoHo, NYC", "clubs in SoHo, NYC"]
