from .base_adapter import AdapterConfig, BaseSourceAdapter, FetchResult
from .api_adapter import APIAdapter, APIAdapterConfig

__all__ = [
    "AdapterConfig",
    "BaseSourceAdapter",
    "FetchResult",
    "APIAdapter",
    "APIAdapterConfig",
]
