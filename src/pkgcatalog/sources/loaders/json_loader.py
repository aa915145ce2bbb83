"""JSON source loader for base-bundle and hand-authored record files."""

from __future__ import annotations

from pathlib import Path

from pkgcatalog.sources.models import LoadWarning, ModuleDocument, RecordKind
from pkgcatalog.sources.reading import read_json


class JsonArrayLoader:
    """Read a top-level array, or an object wrapping one array under the kind's name."""

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() == ".json"

    def load(self, path: Path, kind: RecordKind) -> ModuleDocument | LoadWarning:
        payload = read_json(path)

        if isinstance(payload, list):
            return ModuleDocument(path=path, export_name=None, records=payload)

        if isinstance(payload, dict):
            wrapped = payload.get(kind.value)
            if isinstance(wrapped, list):
                return ModuleDocument(path=path, export_name=kind.value, records=wrapped)

        return LoadWarning(path, f"Expected a JSON array of {kind.value}")
