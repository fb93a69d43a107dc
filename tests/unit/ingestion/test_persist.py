"""
Unit tests for the generated module writer and reader.
"""

import json

import pytest

from scene.errors import ArtifactFormatError
from scene.ingestion.persist import (
    load_venue_module,
    render_venue_module,
    write_venue_module,
)

HEADER = 'import { Place } from "./data";\n\nexport const GENERATED_PLACES: Place[] = '


class TestRenderVenueModule:
    """Tests for render_venue_module."""

    def test_shape(self, sample_venue):
        """Should render the import line, a blank line and the export."""
        content = render_venue_module([sample_venue])
        assert content.startswith(HEADER)
        assert content.endswith("];\n")

    def test_literal_is_indented_json(self, sample_venue):
        """Should embed 2-space indented JSON with the app's keys."""
        content = render_venue_module([sample_venue])
        literal = content[len(HEADER):].rstrip().rstrip(";")
        assert literal == json.dumps(
            [sample_venue.to_artifact_dict()], indent=2, ensure_ascii=False
        )
        assert '\n  {\n    "id": "ChIJvenue1"' in content

    def test_empty(self):
        """Should render an empty array."""
        assert render_venue_module([]) == HEADER + "[];\n"

    def test_custom_names(self, sample_venue):
        """Should use the given export, type and import path."""
        content = render_venue_module(
            [sample_venue], export_name="VENUES", type_name="Venue", import_from="@/lib/types"
        )
        assert content.startswith(
            'import { Venue } from "@/lib/types";\n\nexport const VENUES: Venue[] = ['
        )

    def test_unicode_kept(self, make_venue):
        """Should keep non-ASCII names readable."""
        content = render_venue_module([make_venue(name="Café Mogador")])
        assert "Café Mogador" in content


class TestWriteAndLoad:
    """Tests for write_venue_module and load_venue_module."""

    def test_write_creates_parents(self, tmp_path, sample_venue):
        """Should create missing directories and return the path."""
        path = tmp_path / "src" / "lib" / "generated-data.ts"
        assert write_venue_module([sample_venue], path) == path
        assert path.read_text(encoding="utf-8").startswith(HEADER)

    def test_overwrites(self, tmp_path, make_venue):
        """Should replace the previous artifact."""
        path = tmp_path / "generated-data.ts"
        write_venue_module([make_venue("A"), make_venue("B")], path)
        write_venue_module([make_venue("C")], path)
        assert [v.id for v in load_venue_module(path)] == ["C"]

    def test_load_written(self, tmp_path, make_venue):
        """Should read back what was written."""
        path = tmp_path / "generated-data.ts"
        venues = [make_venue("A"), make_venue("B", address=None)]
        write_venue_module(venues, path)
        assert load_venue_module(path) == venues

    def test_load_missing_export(self, tmp_path):
        """Should raise when the export is absent."""
        path = tmp_path / "other.ts"
        path.write_text("export const OTHER = [];\n", encoding="utf-8")
        with pytest.raises(ArtifactFormatError):
            load_venue_module(path)

    def test_load_invalid_record(self, tmp_path):
        """Should raise when a record is not a valid venue."""
        path = tmp_path / "bad.ts"
        path.write_text(
            HEADER + '[{"id": "A", "phone": ""}];\n', encoding="utf-8"
        )
        with pytest.raises(ArtifactFormatError):
            load_venue_module(path)
