"""
Persistence of the venue catalog as a generated TypeScript module.

The web application imports the catalog statically at build time, so the
whole run is rendered to one source file holding a single exported
constant. Writes are all-or-nothing: the file is replaced in one shot.
"""

from pathlib import Path
from typing import Iterable, List
import json
import logging
import re

from pydantic import ValidationError

from scene.errors import ArtifactFormatError
from scene.schemas.venue import Venue

logger = logging.getLogger(__name__)


DEFAULT_EXPORT_NAME = "GENERATED_PLACES"
DEFAULT_TYPE_NAME = "Place"
DEFAULT_IMPORT_FROM = "./data"


def render_venue_module(
    venues: Iterable[Venue],
    export_name: str = DEFAULT_EXPORT_NAME,
    type_name: str = DEFAULT_TYPE_NAME,
    import_from: str = DEFAULT_IMPORT_FROM,
) -> str:
    """
    Render venues as a TypeScript module.

    Output shape::

        import { Place } from "./data";

        export const GENERATED_PLACES: Place[] = [ ... ];
    """
    payload = [venue.to_artifact_dict() for venue in venues]
    body = json.dumps(payload, indent=2, ensure_ascii=False)
    return (
        f'import {{ {type_name} }} from "{import_from}";\n'
        f"\n"
        f"export const {export_name}: {type_name}[] = {body};\n"
    )


def write_venue_module(
    venues: List[Venue],
    path: Path,
    export_name: str = DEFAULT_EXPORT_NAME,
    type_name: str = DEFAULT_TYPE_NAME,
    import_from: str = DEFAULT_IMPORT_FROM,
) -> Path:
    """
    Write the generated module, overwriting any previous artifact.

    Returns:
        The written path
    """
    path = Path(path)
    content = render_venue_module(venues, export_name, type_name, import_from)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info(f"Done! Written {len(venues)} venues to {path}")
    return path


def load_venue_module(path: Path, export_name: str = DEFAULT_EXPORT_NAME) -> List[Venue]:
    """
    Parse a generated module back into Venue objects.

    Raises:
        ArtifactFormatError: If the export is missing or its literal is not
            a valid venue list
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    pattern = re.compile(
        rf"export\s+const\s+{re.escape(export_name)}\s*(?::[^=]+)?=\s*(\[.*\])\s*;?\s*$",
        re.DOTALL,
    )
    match = pattern.search(content)
    if not match:
        raise ArtifactFormatError(f"No '{export_name}' export found in {path}")

    try:
        records = json.loads(match.group(1))
        return [Venue.model_validate(record) for record in records]
    except (json.JSONDecodeError, ValidationError) as e:
        raise ArtifactFormatError(f"Invalid venue data in {path}: {e}") from e
