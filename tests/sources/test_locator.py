from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pkgcatalog.errors import SourceConfigurationError
from pkgcatalog.sources.locator import expand_braces, locate_sources, split_globs


def _touch(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_split_globs_drops_blank_entries() -> None:
    assert split_globs(" a/*.ts, ,b/**/*.md ,") == ("a/*.ts", "b/**/*.md")
    assert split_globs(None) == ()


def test_expand_braces_handles_nested_alternatives() -> None:
    assert expand_braces("docs/**/*.{md,mdx}") == ["docs/**/*.md", "docs/**/*.mdx"]
    assert expand_braces("{a,b}/{x,y}.ts") == ["a/x.ts", "a/y.ts", "b/x.ts", "b/y.ts"]
    assert expand_braces("plain.ts") == ["plain.ts"]


def test_locate_sources_returns_sorted_unique_absolute_files(tmp_path: Path) -> None:
    _touch(tmp_path / "src" / "seo" / "seo-packages.ts")
    _touch(tmp_path / "src" / "content" / "content-packages.ts")
    _touch(tmp_path / "src" / ".hidden" / "x-packages.ts")
    (tmp_path / "src" / "dir-packages.ts").mkdir(parents=True)

    found = locate_sources(["src/*/*-packages.ts", "src/seo/*.ts"], root=tmp_path)

    assert found == [
        (tmp_path / "src" / "content" / "content-packages.ts").resolve(),
        (tmp_path / "src" / "seo" / "seo-packages.ts").resolve(),
    ]
    assert all(path.is_absolute() for path in found)


def test_locate_sources_expands_recursive_brace_patterns(tmp_path: Path) -> None:
    _touch(tmp_path / "content" / "bundles" / "a.md")
    _touch(tmp_path / "content" / "bundles" / "deep" / "b.mdx")
    _touch(tmp_path / "content" / "bundles" / "c.txt")

    found = locate_sources(["content/**/*.{md,mdx}"], root=tmp_path)

    assert [path.name for path in found] == ["a.md", "b.mdx"]


def test_required_group_without_matches_names_every_failed_pattern(tmp_path: Path) -> None:
    with pytest.raises(SourceConfigurationError) as excinfo:
        locate_sources(["src/*/*-packages.ts", "other/*.ts"], root=tmp_path)

    assert excinfo.value.patterns == ["src/*/*-packages.ts", "other/*.ts"]
    assert "src/*/*-packages.ts" in str(excinfo.value)


def test_optional_group_without_matches_warns_and_returns_empty(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        found = locate_sources(["missing/*.ts"], root=tmp_path, required=False)

    assert found == []
    assert "missing/*.ts" in caplog.text


def test_partially_matching_group_warns_about_dead_pattern(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    _touch(tmp_path / "a" / "one.ts")

    with caplog.at_level(logging.WARNING):
        found = locate_sources(["a/*.ts", "b/*.ts"], root=tmp_path)

    assert len(found) == 1
    assert "Pattern matched no files: b/*.ts" in caplog.text


def test_missing_root_is_a_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(SourceConfigurationError, match="Source root does not exist"):
        locate_sources(["*.ts"], root=tmp_path / "nope")


def test_locate_sources_treats_root_with_wildcard_characters_literally(tmp_path: Path) -> None:
    root = tmp_path / "site[v2]"
    source = _touch(root / "src" / "data" / "packages" / "seo" / "seo-packages.ts")

    found = locate_sources(["src/data/packages/*/*-packages.ts"], root=root)

    assert found == [source.resolve()]
