"""Routing entrypoint for source loaders."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable

from pkgcatalog.errors import SourceReadError
from pkgcatalog.sources.loaders import build_default_loaders
from pkgcatalog.sources.loaders.base import RecordLoader
from pkgcatalog.sources.models import LoadWarning, RecordKind, SourceDocument

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoadResult:
    """Documents loaded for one domain plus the files that were skipped."""

    kind: RecordKind
    documents: list[SourceDocument] = field(default_factory=list)
    warnings: list[LoadWarning] = field(default_factory=list)


class SourceRegistry:
    """Resolve the right loader for a path by extension and load its records."""

    def __init__(self) -> None:
        self._loaders: dict[str, RecordLoader] = {}

    @property
    def loaders(self) -> dict[str, RecordLoader]:
        """Registered loaders keyed by loader name."""

        return dict(self._loaders)

    def register_loader(self, name: str, loader: RecordLoader) -> None:
        """Register a loader implementation by key."""

        if not name:
            raise ValueError("Loader name cannot be empty")
        self._loaders[name] = loader

    def load(self, path: str | Path, kind: RecordKind) -> SourceDocument | LoadWarning:
        """Load one file with the first loader that supports it."""

        source = Path(path)
        for loader in self._loaders.values():
            if loader.supports(source):
                return loader.load(source, kind)
        raise SourceReadError(source, "No loader registered for file type")

    def load_all(self, paths: Iterable[Path], kind: RecordKind) -> LoadResult:
        """Load every path for ``kind``; skipped files become warnings."""

        result = LoadResult(kind=kind)
        for path in paths:
            loaded = self.load(path, kind)
            if isinstance(loaded, LoadWarning):
                logger.warning("Skipped %s source: %s", kind.value, loaded)
                result.warnings.append(loaded)
                continue
            result.documents.append(loaded)
        return result


def build_default_registry(*, markdown_root: Path | None = None) -> SourceRegistry:
    registry = SourceRegistry()
    for name, loader in build_default_loaders(markdown_root=markdown_root).items():
        registry.register_loader(name, loader)
    return registry
