"""Markdown/MDX loader: structured frontmatter plus labeled header fields."""

from __future__ import annotations

from pathlib import Path
import re
from typing import Iterable

import frontmatter
import yaml

from pkgcatalog.errors import SourceReadError
from pkgcatalog.sources.models import MarkdownDocument, RecordKind
from pkgcatalog.sources.reading import read_source_text

_LABEL_RE = re.compile(r"^[ \t]*(?:[-*+>][ \t]+)?\*\*(?P<label>[^*\n]+?):\*\*[ \t]*(?P<value>.*)$", re.MULTILINE)
_WORD_RE = re.compile(r"[A-Za-z0-9]+")

# Scalar record fields a labeled header may set.
LABEL_FIELDS = frozenset(
    {"id", "service", "subservice", "slug", "name", "title", "tier", "summary", "description"}
)


def parse_labeled_header(text: str) -> dict[str, str]:
    """Collect ``**Label:** value`` fields; the first occurrence of a label wins."""

    labels: dict[str, str] = {}
    for match in _LABEL_RE.finditer(text):
        label = match.group("label").strip()
        if label and label not in labels:
            labels[label] = match.group("value").strip()
    return labels


def label_key(label: str) -> str:
    """``Official Title`` -> ``officialTitle``."""

    words = _WORD_RE.findall(label)
    if not words:
        return ""
    return words[0].lower() + "".join(word[:1].upper() + word[1:].lower() for word in words[1:])


def label_fields(labels: dict[str, str]) -> dict[str, str]:
    """Map header labels onto record fields; ``Official Title`` also stands in for ``name``."""

    fields: dict[str, str] = {}
    for label, value in labels.items():
        if not value:
            continue
        key = label_key(label)
        if key == "officialTitle":
            fields.setdefault("title", value)
            continue
        if key in LABEL_FIELDS:
            fields[key] = value
    if "name" not in fields and "title" in fields:
        fields["name"] = fields["title"]
    return fields


def _path_defaults(path: Path, root: Path | None) -> dict[str, str]:
    """Derive service/subservice/slug from ``<service>[/<sub>]/<slug>/<file>`` layouts."""

    if root is None:
        return {}
    try:
        parts = path.resolve().relative_to(root.resolve()).parts
    except ValueError:
        return {}

    if len(parts) == 3:
        return {"service": parts[0], "slug": parts[1]}
    if len(parts) == 4:
        return {"service": parts[0], "subservice": parts[1], "slug": parts[2]}
    return {}


class MarkdownLoader:
    """Split a markdown document into metadata and verbatim body text.

    Metadata is layered: path defaults, then labeled header fields, then
    frontmatter, each overriding the one before.
    """

    def __init__(self, *, root: Path | None = None, required_keys: Iterable[str] = ()) -> None:
        self._root = root
        self._required_keys = tuple(required_keys)

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in {".md", ".mdx"}

    def load(self, path: Path, kind: RecordKind = RecordKind.PACKAGES) -> MarkdownDocument:
        text = read_source_text(path)
        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as exc:
            raise SourceReadError(path, f"Invalid frontmatter: {exc}") from exc

        labels = parse_labeled_header(post.content)
        metadata: dict[str, object] = dict(_path_defaults(path, self._root))
        metadata.update(label_fields(labels))
        metadata.update(post.metadata)

        missing = [key for key in self._required_keys if key not in metadata and key not in labels]
        return MarkdownDocument(
            path=path,
            frontmatter=metadata,
            labels=labels,
            body=post.content,
            missing_keys=missing,
        )
