# Base abstract class
"""
Module for venue deduplication strategies.
"""

from abc import ABC, abstractmethod
from typing import Set


class VenueDeduplicator(ABC):
    """
    Abstract base for deduplication strategies.

    Deduplicators are stateful for the duration of one run: ``mark_seen``
    records an accepted venue and ``is_duplicate`` answers for later ones.
    """

    @abstractmethod
    def is_duplicate(self, key: str) -> bool:
        """Whether ``key`` has already been accepted in this run."""
        pass

    @abstractmethod
    def mark_seen(self, key: str) -> None:
        """Record ``key`` as accepted."""
        pass


class PlaceIdDeduplicator(VenueDeduplicator):
    """
    Match by Places identifier.

    This is the only identity the sweep relies on: the same place surfaced
    by several queries keeps its first accepted copy.
    """

    def __init__(self):
        self.seen: Set[str] = set()

    def is_duplicate(self, key: str) -> bool:
        return key in self.seen

    def mark_seen(self, key: str) -> None:
        self.seen.add(key)

    def __len__(self) -> int:
        return len(self.seen)
