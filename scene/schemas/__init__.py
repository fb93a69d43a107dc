from .venue import LocalizedText, PhotoReference, PlaceCandidate, Venue

__all__ = ["LocalizedText", "PhotoReference", "PlaceCandidate", "Venue"]
