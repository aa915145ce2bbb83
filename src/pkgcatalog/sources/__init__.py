"""Source discovery and loading."""

from .locator import locate_sources, split_globs
from .models import LoadWarning, MarkdownDocument, ModuleDocument, RecordKind, SourceDocument
from .registry import LoadResult, SourceRegistry, build_default_registry

__all__ = [
    "LoadResult",
    "LoadWarning",
    "MarkdownDocument",
    "ModuleDocument",
    "RecordKind",
    "SourceDocument",
    "SourceRegistry",
    "build_default_registry",
    "locate_sources",
    "split_globs",
]
