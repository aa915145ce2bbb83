"""Attach compiled narrative content onto bundles by slug."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Mapping, Sequence

from pkgcatalog.errors import SourceReadError
from pkgcatalog.sources.reading import read_json

logger = logging.getLogger(__name__)

_ATTACHED_FIELDS = ("html", "excerpt", "wordCount", "updatedAt")
_MISSING_SAMPLE = 10


@dataclass(slots=True)
class AttachResult:
    bundles: list[object] = field(default_factory=list)
    attached: int = 0
    missing: list[str] = field(default_factory=list)
    invalid_indices: list[int] = field(default_factory=list)

    def summary(self) -> dict[str, object]:
        return {
            "total": len(self.bundles),
            "attached": self.attached,
            "missing": len(self.missing),
            "missing_sample": self.missing[:_MISSING_SAMPLE],
            "invalid_bundles": len(self.invalid_indices),
        }


def pick_content_shape(slug: str, entry: object) -> dict[str, object] | None:
    """Return the attachable fields, or ``None`` when the entry is partial or mistyped."""

    if not isinstance(entry, Mapping):
        return None
    if entry.get("slug", slug) != slug:
        return None

    html = entry.get("html")
    excerpt = entry.get("excerpt")
    word_count = entry.get("wordCount")
    updated_at = entry.get("updatedAt")

    if not isinstance(html, str) or not isinstance(excerpt, str) or not isinstance(updated_at, str):
        return None
    if isinstance(word_count, bool) or not isinstance(word_count, (int, float)):
        return None
    return {"html": html, "excerpt": excerpt, "wordCount": word_count, "updatedAt": updated_at}


def attach_content(bundles: Sequence[object], content_map: Mapping[str, object]) -> AttachResult:
    """Copy bundles, adding ``content`` where a shape-valid entry matches the slug.

    Bundles without a match are returned unchanged and their slug is recorded in
    ``missing``. Entries without a string slug are passed through and their
    positions recorded in ``invalid_indices``.
    """

    by_slug: dict[str, dict[str, object]] = {}
    for slug, entry in content_map.items():
        picked = pick_content_shape(slug, entry)
        if picked is not None:
            by_slug[slug] = picked

    result = AttachResult()
    for index, bundle in enumerate(bundles):
        if not isinstance(bundle, Mapping) or not isinstance(bundle.get("slug"), str):
            result.invalid_indices.append(index)
            result.bundles.append(bundle)
            continue

        slug = bundle["slug"]
        content = by_slug.get(slug)
        if content is None:
            result.missing.append(slug)
            result.bundles.append(dict(bundle))
            continue

        enriched = dict(bundle)
        enriched["content"] = {name: content[name] for name in _ATTACHED_FIELDS}
        result.bundles.append(enriched)
        result.attached += 1

    if result.missing:
        logger.warning(
            "No content match for %d bundle(s): %s%s",
            len(result.missing),
            ", ".join(result.missing[:_MISSING_SAMPLE]),
            " …" if len(result.missing) > _MISSING_SAMPLE else "",
        )
    if result.invalid_indices:
        logger.warning("Invalid bundle entries (no slug) at positions: %s", result.invalid_indices)
    logger.info("Attached content to %d of %d bundle(s)", result.attached, len(result.bundles))
    return result


async def read_attach_inputs(bundles_path: Path, content_path: Path) -> tuple[list[object], dict[str, object]]:
    """Read the bundle list and the content map concurrently."""

    bundles, content_map = await asyncio.gather(
        asyncio.to_thread(read_json, bundles_path),
        asyncio.to_thread(read_json, content_path),
    )
    if not isinstance(bundles, list):
        raise SourceReadError(bundles_path, "Expected an array of bundles")
    if not isinstance(content_map, dict):
        raise SourceReadError(content_path, "Expected an object keyed by slug")
    return bundles, content_map
