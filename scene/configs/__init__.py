from .config import Config, IngestionConfig, PhotoConfig
from .settings import Settings, get_settings

__all__ = ["Config", "IngestionConfig", "PhotoConfig", "Settings", "get_settings"]
