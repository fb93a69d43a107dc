"""Search query generation for the neighborhood sweep."""

from typing import Iterator, NamedTuple, Sequence

from scene.configs.config import IngestionConfig


class SearchQuery(NamedTuple):
    """One text search and the neighborhood it targets."""

    neighborhood: str
    term: str
    text: str


def format_query(term: str, neighborhood: str, locality: str = "New York City") -> str:
    """``"<term> in <neighborhood>, <locality>"``"""
    return f"{term} in {neighborhood}, {locality}"


class QueryPlan:
    """
    Cross product of neighborhoods and search terms.

    Iteration order is neighborhoods outer, terms inner. The plan is
    re-iterable: every ``iter()`` starts a fresh pass.
    """

    def __init__(
        self,
        neighborhoods: Sequence[str],
        terms: Sequence[str],
        locality: str = "New York City",
    ):
        self.neighborhoods = list(neighborhoods)
        self.terms = list(terms)
        self.locality = locality

    @classmethod
    def from_config(cls, config: IngestionConfig) -> "QueryPlan":
        return cls(config.neighborhoods, config.search_terms, config.locality)

    def __iter__(self) -> Iterator[SearchQuery]:
        for neighborhood in self.neighborhoods:
            for term in self.terms:
                yield SearchQuery(
                    neighborhood=neighborhood,
                    term=term,
                    text=format_query(term, neighborhood, self.locality),
                )

    def __len__(self) -> int:
        return len(self.neighborhoods) * len(self.terms)

    def __repr__(self) -> str:
        return (
            f"QueryPlan({len(self.neighborhoods)} neighborhoods x "
            f"{len(self.terms)} terms, locality={self.locality!r})"
        )
