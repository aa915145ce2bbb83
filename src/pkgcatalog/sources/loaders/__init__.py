"""Source loader implementations and contracts."""

from __future__ import annotations

from pathlib import Path

from .base import RecordLoader
from .json_loader import JsonArrayLoader
from .markdown_loader import MarkdownLoader, parse_labeled_header
from .typescript_loader import TypeScriptModuleLoader

MARKDOWN_REQUIRED_KEYS = ("name", "service", "slug")


def build_default_loaders(*, markdown_root: Path | None = None) -> dict[str, RecordLoader]:
    """Return the default loader map, keyed by loader name."""

    return {
        "typescript": TypeScriptModuleLoader(),
        "json": JsonArrayLoader(),
        "markdown": MarkdownLoader(root=markdown_root, required_keys=MARKDOWN_REQUIRED_KEYS),
    }


__all__ = [
    "MARKDOWN_REQUIRED_KEYS",
    "JsonArrayLoader",
    "MarkdownLoader",
    "RecordLoader",
    "TypeScriptModuleLoader",
    "build_default_loaders",
    "parse_labeled_header",
]
