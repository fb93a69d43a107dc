# scene/configs/config.py
import copy
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

from scene.errors import ConfigError


@dataclass
class IngestionConfig:
    """
    Configuration for one venue ingestion run.

    The sweep covers every (neighborhood, search term) pair; city and
    category are stamped on every venue of the batch.
    """

    neighborhoods: List[str]
    search_terms: List[str]
    locality: str = "New York City"
    city: str = "nyc"
    category: str = "Restaurant/Bar"

    # Places API
    page_size: int = 20
    request_delay_seconds: float = 0.1
    request_timeout: int = 30
    max_retries: int = 0
    backoff_base_seconds: float = 1.0
    photo_max_px: int = 1200

    # Generated artifact
    output_path: Path = Path("src/lib/generated-data.ts")
    export_name: str = "GENERATED_PLACES"
    type_name: str = "Place"
    type_import_from: str = "./data"

    def __post_init__(self):
        self.output_path = Path(self.output_path)
        if self.page_size < 1:
            raise ConfigError(f"page_size must be positive, got {self.page_size}")
        if self.request_delay_seconds < 0:
            raise ConfigError("request_delay_seconds cannot be negative")
        if self.max_retries < 0:
            raise ConfigError("max_retries cannot be negative")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IngestionConfig":
        """Build from the ``ingestion`` section of ingestion.yaml."""
        for required in ("neighborhoods", "search_terms"):
            if not data.get(required):
                raise ConfigError(f"Ingestion config requires '{required}'")
        return cls(**_known_fields(cls, data))


@dataclass
class PhotoConfig:
    """Configuration for the venue photo enrichment run."""

    city: str = "nyc"
    output_dir: Path = Path("public/images/venues")
    public_prefix: str = "/images/venues"
    mapping_path: Path = Path("scripts/venue-photo-mapping.json")
    max_px: int = 800
    request_delay_seconds: float = 0.08
    search_delay_seconds: float = 0.1
    download_delay_seconds: float = 0.05
    request_timeout: int = 30
    place_id_prefix: str = "ChIJ"

    # Hand-curated venues without a Places id: {id, name, address}
    curated: List[Dict[str, str]] = field(default_factory=list)

    def __post_init__(self):
        self.output_dir = Path(self.output_dir)
        self.mapping_path = Path(self.mapping_path)
        for entry in self.curated:
            if not isinstance(entry, dict) or not entry.get("id") or not entry.get("name"):
                raise ConfigError(f"Curated venue needs an id and a name: {entry!r}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoConfig":
        """Build from the ``photos`` section of ingestion.yaml."""
        return cls(**_known_fields(cls, data))


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    unknown = set(data) - names
    if unknown:
        raise ConfigError(f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return copy.deepcopy(dict(data))


class Config:
    """
    Configuration for The Scene toolkit.
    """

    # 1. Setup Base Paths
    # This points to scene/configs/
    CONFIG_DIR = Path(__file__).parent.resolve()

    # 2. Define File Paths
    INGESTION_CONFIG_PATH = CONFIG_DIR / "ingestion.yaml"

    @classmethod
    @lru_cache
    def load_ingestion_config(cls) -> dict:
        """Loads the bundled YAML configuration for ingestion runs."""
        return cls.load_yaml(cls.INGESTION_CONFIG_PATH)

    @staticmethod
    def load_yaml(path: Path) -> dict:
        """Load any ingestion YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Missing config at {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config at {path} must be a mapping")
        return data

    @classmethod
    def ingestion(cls, path: Path | None = None) -> IngestionConfig:
        """IngestionConfig from the bundled config or from ``path``."""
        data = cls.load_yaml(path) if path else cls.load_ingestion_config()
        return IngestionConfig.from_dict(data.get("ingestion") or {})

    @classmethod
    def photos(cls, path: Path | None = None) -> PhotoConfig:
        """PhotoConfig from the bundled config or from ``path``."""
        data = cls.load_yaml(path) if path else cls.load_ingestion_config()
        return PhotoConfig.from_dict(data.get("photos") or {})
