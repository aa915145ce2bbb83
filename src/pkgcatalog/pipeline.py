"""Full catalog build: discover, validate, compile, aggregate, derive, write."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re
from typing import Sequence

from pkgcatalog.catalog.aggregate import CatalogAggregator
from pkgcatalog.catalog.index import build_catalog_index, split_by_service
from pkgcatalog.catalog.jsonld import build_catalog_jsonld
from pkgcatalog.catalog.search import build_search_index
from pkgcatalog.catalog.sorting import sort_records
from pkgcatalog.config import BuildSettings
from pkgcatalog.content.attach import attach_content
from pkgcatalog.content.compiler import NarrativeCompiler, compile_content_map
from pkgcatalog.errors import DuplicateIdentityError, SchemaValidationError
from pkgcatalog.output.writer import ManifestEntry, render_manifest, write_json, write_text
from pkgcatalog.schema.validator import ValidationReport, validate_records
from pkgcatalog.sources.locator import locate_sources
from pkgcatalog.sources.models import RecordKind
from pkgcatalog.sources.registry import SourceRegistry, build_default_registry

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_EMPTY = 2
EXIT_MISSING_CONTENT = 3

SERVICES_DIR = "services"
MANIFEST_NAME = "manifest.txt"

_WILDCARD_RE = re.compile(r"[*?\[{]")


@dataclass(slots=True)
class BuildReport:
    """What one build produced, for the CLI summary and the exit code."""

    out_dir: Path
    artifacts: list[ManifestEntry] = field(default_factory=list)
    written: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    attached: int = 0
    missing_content: list[str] = field(default_factory=list)
    allow_missing_content: bool = False
    warnings: int = 0

    @property
    def record_count(self) -> int:
        counted = {"packages.json", "addons.json", "bundles.json"}
        return sum(entry.count for entry in self.artifacts if entry.artifact in counted)

    @property
    def exit_code(self) -> int:
        if self.record_count == 0:
            return EXIT_EMPTY
        if self.missing_content and not self.allow_missing_content:
            return EXIT_MISSING_CONTENT
        return EXIT_OK

    def to_dict(self) -> dict[str, object]:
        return {
            "out_dir": str(self.out_dir),
            "artifacts": {entry.artifact: entry.count for entry in self.artifacts},
            "written": self.written,
            "unchanged": len(self.unchanged),
            "removed": self.removed,
            "attached": self.attached,
            "missing_content": self.missing_content,
            "warnings": self.warnings,
            "exit_code": self.exit_code,
        }


def static_prefix(pattern: str) -> str:
    """Leading path segments of a glob that contain no wildcard."""

    parts: list[str] = []
    for part in Path(pattern).parts:
        if _WILDCARD_RE.search(part):
            break
        parts.append(part)
    return str(Path(*parts)) if parts else "."


def load_and_validate(
    registry: SourceRegistry,
    kind: RecordKind,
    paths: Sequence[Path],
) -> ValidationReport:
    return validate_records(registry.load_all(paths, kind))


def _attach_narratives(report: ValidationReport, compiler: NarrativeCompiler) -> None:
    """Compile markdown package bodies onto their records as ``narrativeHtml``."""

    for record, origin in zip(report.records, report.origins):
        if origin.suffix.lower() in {".md", ".mdx"}:
            record["narrativeHtml"] = compiler.compile(origin).html


def _remove_stale_service_files(services_dir: Path, keep: set[str]) -> list[str]:
    removed: list[str] = []
    if not services_dir.is_dir():
        return removed
    for path in sorted(services_dir.glob("*.json")):
        if path.name not in keep:
            path.unlink()
            removed.append(f"{SERVICES_DIR}/{path.name}")
            logger.info("Removed stale artifact: %s", path)
    return removed


def run_catalog_build(settings: BuildSettings) -> BuildReport:
    """Run every stage; nothing is written unless all validation passes."""

    root = settings.root
    package_paths = locate_sources(settings.package_globs, root=root)
    doc_paths = locate_sources(settings.doc_globs, root=root, required=False)
    addon_paths = locate_sources(settings.addon_globs, root=root, required=False)
    bundle_paths = locate_sources(settings.bundle_globs, root=root, required=False)
    content_paths = locate_sources(settings.content_globs, root=root, required=False)

    if settings.base_bundles is not None:
        base_bundles = settings.resolve(settings.base_bundles)
        if base_bundles.is_file():
            bundle_paths = [*bundle_paths, base_bundles]
        else:
            logger.info("No base bundles file at %s", base_bundles)

    markdown_root = None
    if settings.doc_globs:
        markdown_root = settings.resolve(Path(static_prefix(settings.doc_globs[0])))
    registry = build_default_registry(markdown_root=markdown_root)

    reports = {
        RecordKind.PACKAGES: load_and_validate(registry, RecordKind.PACKAGES, [*package_paths, *doc_paths]),
        RecordKind.ADDONS: load_and_validate(registry, RecordKind.ADDONS, addon_paths),
        RecordKind.BUNDLES: load_and_validate(registry, RecordKind.BUNDLES, bundle_paths),
    }
    errors = [issue for report in reports.values() for issue in report.errors]
    if errors:
        raise SchemaValidationError(errors)

    compiler = NarrativeCompiler()
    _attach_narratives(reports[RecordKind.PACKAGES], compiler)

    aggregator = CatalogAggregator()
    for kind, report in reports.items():
        aggregator.add_all(kind, report.records)

    content_duplicates: dict[str, list[str]] = {}
    content_map: dict[str, dict[str, object]] = {}
    try:
        content_map = compile_content_map(content_paths, compiler)
    except DuplicateIdentityError as exc:
        content_duplicates = exc.duplicates

    duplicates = {**aggregator.duplicates(), **content_duplicates}
    if duplicates:
        raise DuplicateIdentityError(duplicates)

    packages = sort_records(aggregator.records(RecordKind.PACKAGES))
    addons = sort_records(aggregator.records(RecordKind.ADDONS))
    bundles = sort_records(aggregator.records(RecordKind.BUNDLES))

    attached = attach_content(bundles, content_map)
    split = split_by_service(packages, addons, bundles)

    artifacts: dict[str, tuple[object, int]] = {
        "packages.json": (packages, len(packages)),
        "addons.json": (addons, len(addons)),
        "bundles.json": (bundles, len(bundles)),
        "bundles.cross-service.json": (split.cross_service, len(split.cross_service)),
        "content.map.json": (content_map, len(content_map)),
        "bundles.enriched.json": (attached.bundles, len(attached.bundles)),
    }
    for service, grouped in split.services.items():
        count = sum(len(records) for records in grouped.values())
        artifacts[f"{SERVICES_DIR}/{service}.json"] = (grouped, count)

    catalog_index = build_catalog_index(packages, bundles)
    artifacts["index.json"] = (catalog_index, len(catalog_index["items"]))
    jsonld = build_catalog_jsonld(bundles)
    artifacts["jsonld.json"] = (jsonld, len(jsonld["services"]))
    search_docs = build_search_index(attached.bundles, content_map)
    artifacts["packages.search.json"] = (search_docs, len(search_docs))

    out_dir = settings.resolved_out_dir
    report = BuildReport(
        out_dir=out_dir,
        attached=attached.attached,
        missing_content=attached.missing,
        allow_missing_content=settings.allow_missing_content,
        warnings=sum(len(validated.warnings) for validated in reports.values()),
    )

    for name, (data, count) in artifacts.items():
        report.artifacts.append(ManifestEntry(name, count))
        if write_json(out_dir / name, data, settings.write_mode):
            report.written.append(name)
        else:
            report.unchanged.append(name)

    if write_text(out_dir / MANIFEST_NAME, render_manifest(report.artifacts), settings.write_mode):
        report.written.append(MANIFEST_NAME)
    else:
        report.unchanged.append(MANIFEST_NAME)

    keep = {f"{service}.json" for service in split.services}
    report.removed = _remove_stale_service_files(out_dir / SERVICES_DIR, keep)

    logger.info(
        "Catalog build finished: %d artifact(s), %d written, %d unchanged",
        len(report.artifacts) + 1,
        len(report.written),
        len(report.unchanged),
    )
    if report.missing_content:
        logger.warning("%d bundle(s) have no attached content", len(report.missing_content))
    return report
