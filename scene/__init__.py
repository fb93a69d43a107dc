"""
The Scene data toolkit.

Builds the static venue catalog consumed by The Scene web application:
    * sweeping the Google Places text-search API over NYC neighborhoods,
    * validating, tagging and deduplicating the returned places,
    * writing the generated TypeScript data module,
    * fetching real venue photos and answering catalog queries offline.
"""

__version__ = "0.1.0"
