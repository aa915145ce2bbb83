from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from pkgcatalog.cli.build_catalog import main as build_catalog_main

_SEO_PACKAGES = """export const seoPackages = [
  { id: "seo-essential", service: "seo", name: "SEO Essential", tier: "Essential", price: { monthly: 500 } },
  {
    id: "seo-pro",
    service: "seo",
    name: "SEO Pro",
    tier: "Professional",
    pricing: { tiers: [{ price: { monthly: "$1,200" } }, { price: { setup: 5000 } }] },
  },
];
"""

_WEB_PACKAGES = """const webPackages = [{ id: "web-starter", service: "web", name: "Web Starter", tier: "Essential" }];
export default webPackages;
"""

_SEO_ADDONS = 'export const seoAddons = [{ id: "seo-audit", service: "seo", name: "SEO Audit" }];\n'

_BUNDLES_TS = """export const bundles = [
  { slug: "local-growth", title: "Local Growth", service: "seo", components: ["seo-essential", "seo-pro"] },
];
"""

_BASE_BUNDLES = [
    {"slug": "full-presence", "title": "Full Presence", "components": ["seo-pro", "web-starter"], "price": {"monthly": 2000}}
]

_PACKAGE_DOC = """---
name: Local SEO
tier: Professional
---

# Local SEO

Own the map pack.
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _catalog_tree(root: Path) -> Path:
    data = root / "src" / "data" / "packages"
    _write(data / "seo" / "seo-packages.ts", _SEO_PACKAGES)
    _write(data / "web" / "web-packages.ts", _WEB_PACKAGES)
    _write(data / "seo" / "seo-addons.ts", _SEO_ADDONS)
    _write(data / "bundles" / "local.ts", _BUNDLES_TS)
    _write(data / "bundles.json", json.dumps(_BASE_BUNDLES))

    content = root / "src" / "content" / "packages"
    _write(content / "bundles" / "local-growth.md", "# Local Growth\n\nGrow in your area.\n")
    _write(content / "bundles" / "full-presence.mdx", "---\nslug: full-presence\n---\n# Full Presence\n\nEverywhere at once.\n")
    _write(content / "services" / "seo-overview.md", "---\nlastUpdated: 2024-04-01\n---\n# SEO overview\n\nAll about SEO.\n")

    _write(root / "docs" / "packages" / "catalog" / "seo" / "seo-local" / "public.mdx", _PACKAGE_DOC)
    return data / "__generated__"


def _read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


def test_full_build_writes_every_artifact(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = _catalog_tree(tmp_path)

    exit_code = build_catalog_main(["--root", str(tmp_path)])
    summary = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert summary["exit_code"] == 0
    assert summary["missing_content"] == []
    assert summary["attached"] == 2

    packages = _read_json(out_dir / "packages.json")
    assert [record["id"] for record in packages] == ["seo-essential", "seo-seo-local", "seo-pro", "web-starter"]
    assert "<h1" in packages[1]["narrativeHtml"]
    assert [record["id"] for record in _read_json(out_dir / "addons.json")] == ["seo-audit"]
    assert [record["slug"] for record in _read_json(out_dir / "bundles.json")] == ["full-presence", "local-growth"]

    enriched = _read_json(out_dir / "bundles.enriched.json")
    assert all("content" in bundle for bundle in enriched)
    assert sorted(_read_json(out_dir / "content.map.json")) == ["full-presence", "local-growth", "seo-overview"]

    seo = _read_json(out_dir / "services" / "seo.json")
    assert [bundle["slug"] for bundle in seo["bundles"]] == ["local-growth"]
    assert [bundle["slug"] for bundle in _read_json(out_dir / "bundles.cross-service.json")] == ["full-presence"]

    jsonld = _read_json(out_dir / "jsonld.json")
    assert jsonld["services"]["full-presence"]["offers"][0]["price"] == "2000"
    assert "offers" not in jsonld["services"]["local-growth"]

    search = _read_json(out_dir / "packages.search.json")
    assert [doc["id"] for doc in search] == ["bundle:full-presence", "bundle:local-growth", "doc:seo-overview"]

    manifest = (out_dir / "manifest.txt").read_text(encoding="utf-8")
    assert manifest.startswith("# Package catalog build manifest")
    assert "services/web.json" in manifest


def test_second_run_over_unchanged_sources_writes_nothing(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out_dir = _catalog_tree(tmp_path)
    assert build_catalog_main(["--root", str(tmp_path)]) == 0
    first = json.loads(capsys.readouterr().out)
    before = {path: path.read_bytes() for path in out_dir.rglob("*") if path.is_file()}

    assert build_catalog_main(["--root", str(tmp_path)]) == 0
    second = json.loads(capsys.readouterr().out)
    after = {path: path.read_bytes() for path in out_dir.rglob("*") if path.is_file()}

    assert first["written"]
    assert second["written"] == []
    assert second["unchanged"] == len(first["written"])
    assert after == before


def test_missing_content_is_loud_unless_allowed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = _catalog_tree(tmp_path)
    (tmp_path / "src" / "content" / "packages" / "bundles" / "full-presence.mdx").unlink()

    strict = build_catalog_main(["--root", str(tmp_path)])
    summary = json.loads(capsys.readouterr().out)
    relaxed = build_catalog_main(["--root", str(tmp_path), "--allow-missing-content"])

    assert strict == 3
    assert summary["missing_content"] == ["full-presence"]
    assert relaxed == 0
    enriched = _read_json(out_dir / "bundles.enriched.json")
    assert "content" not in enriched[0]


def test_duplicate_package_id_across_files_fails_listing_it_once(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    out_dir = _catalog_tree(tmp_path)
    _write(
        tmp_path / "src" / "data" / "packages" / "extra" / "extra-packages.ts",
        'export const extra = [{ id: "seo-essential", service: "seo", name: "Copy", tier: "Essential" }];\n',
    )

    with caplog.at_level(logging.ERROR):
        exit_code = build_catalog_main(["--root", str(tmp_path)])

    errors = [record.getMessage() for record in caplog.records if record.levelno >= logging.ERROR]
    assert exit_code == 1
    assert len(errors) == 1
    assert errors[0].count("seo-essential") == 1
    assert not out_dir.exists()


def test_unmatched_package_glob_fails_naming_the_pattern(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR):
        exit_code = build_catalog_main(["--root", str(tmp_path)])

    assert exit_code == 1
    assert "src/data/packages/*/*-packages.ts" in caplog.text


def test_validation_errors_from_all_files_are_reported_together(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    out_dir = _catalog_tree(tmp_path)
    _write(
        tmp_path / "src" / "data" / "packages" / "bad" / "bad-packages.ts",
        'export const bad = [{ id: "bad-1", service: "Bad Service", name: "Bad", tier: "Gold" }];\n',
    )
    _write(tmp_path / "src" / "data" / "packages" / "bundles.json", json.dumps([{"title": "No slug"}]))

    with caplog.at_level(logging.ERROR):
        exit_code = build_catalog_main(["--root", str(tmp_path)])

    assert exit_code == 1
    assert "4 validation error(s)" in caplog.text
    assert not out_dir.exists()


def test_labeled_header_package_doc_joins_the_catalog(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out_dir = _catalog_tree(tmp_path)
    _write(
        tmp_path / "docs" / "packages" / "catalog" / "web" / "web-care" / "public.mdx",
        "**Name:** Web Care\n**Tier:** Essential\n**Summary:** Monthly upkeep.\n\n# Web Care\n\nWe keep it running.\n",
    )

    exit_code = build_catalog_main(["--root", str(tmp_path)])
    capsys.readouterr()

    assert exit_code == 0
    packages = {record["id"]: record for record in _read_json(out_dir / "packages.json")}
    assert packages["web-web-care"]["name"] == "Web Care"
    assert packages["web-web-care"]["tier"] == "Essential"
    assert packages["web-web-care"]["summary"] == "Monthly upkeep."


def test_package_doc_without_a_name_is_reported_by_missing_key(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    out_dir = _catalog_tree(tmp_path)
    _write(
        tmp_path / "docs" / "packages" / "catalog" / "web" / "web-care" / "public.mdx",
        "**Tier:** Essential\n\n# Web Care\n",
    )

    with caplog.at_level(logging.ERROR):
        exit_code = build_catalog_main(["--root", str(tmp_path)])

    assert exit_code == 1
    assert "missing required keys: name" in caplog.text
    assert not out_dir.exists()
