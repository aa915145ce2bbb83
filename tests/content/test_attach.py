from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import pytest

from pkgcatalog.content.attach import attach_content, pick_content_shape, read_attach_inputs
from pkgcatalog.errors import SourceReadError


def _entry(slug: str, **overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "slug": slug,
        "title": slug.title(),
        "html": f"<p>{slug}</p>",
        "excerpt": slug,
        "wordCount": 120,
        "updatedAt": "2024-01-01",
        "headings": [],
    }
    entry.update(overrides)
    return entry


def test_matching_entry_is_attached_with_only_content_fields() -> None:
    bundles = [{"slug": "local-growth", "title": "Local Growth"}]

    result = attach_content(bundles, {"local-growth": _entry("local-growth")})

    assert result.attached == 1
    assert result.missing == []
    assert result.bundles[0]["content"] == {
        "html": "<p>local-growth</p>",
        "excerpt": "local-growth",
        "wordCount": 120,
        "updatedAt": "2024-01-01",
    }
    assert "content" not in bundles[0]


def test_mistyped_word_count_is_rejected_and_reported_missing(caplog: pytest.LogCaptureFixture) -> None:
    bundles = [{"slug": "local-growth"}]

    with caplog.at_level(logging.WARNING):
        result = attach_content(bundles, {"local-growth": _entry("local-growth", wordCount="120")})

    assert result.attached == 0
    assert result.missing == ["local-growth"]
    assert "content" not in result.bundles[0]
    assert "local-growth" in caplog.text


@pytest.mark.parametrize(
    "entry",
    [
        _entry("a", wordCount=True),
        _entry("a", html=None),
        _entry("a", updatedAt=20240101),
        _entry("other-slug"),
        "not-an-object",
    ],
)
def test_pick_content_shape_rejects_partial_entries(entry: object) -> None:
    assert pick_content_shape("a", entry) is None


def test_float_word_count_is_accepted() -> None:
    assert pick_content_shape("a", _entry("a", wordCount=12.0)) is not None


def test_invalid_bundles_pass_through_with_their_positions() -> None:
    bundles = [{"slug": "a"}, {"title": "no slug"}, "junk", {"slug": 5}]

    result = attach_content(bundles, {"a": _entry("a")})

    assert result.invalid_indices == [1, 2, 3]
    assert result.bundles[1:] == bundles[1:]
    assert result.summary()["invalid_bundles"] == 3


def test_read_attach_inputs_loads_both_files(tmp_path: Path) -> None:
    bundles_path = tmp_path / "bundles.json"
    content_path = tmp_path / "content.map.json"
    bundles_path.write_text(json.dumps([{"slug": "a"}]), encoding="utf-8")
    content_path.write_text(json.dumps({"a": _entry("a")}), encoding="utf-8")

    bundles, content_map = asyncio.run(read_attach_inputs(bundles_path, content_path))

    assert bundles == [{"slug": "a"}]
    assert list(content_map) == ["a"]


def test_read_attach_inputs_requires_an_array_of_bundles(tmp_path: Path) -> None:
    bundles_path = tmp_path / "bundles.json"
    content_path = tmp_path / "content.map.json"
    bundles_path.write_text("{}", encoding="utf-8")
    content_path.write_text("{}", encoding="utf-8")

    with pytest.raises(SourceReadError, match="Expected an array of bundles"):
        asyncio.run(read_attach_inputs(bundles_path, content_path))
