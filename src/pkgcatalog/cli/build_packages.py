"""CLI command that aggregates one record domain into a sorted JSON catalog."""

from __future__ import annotations

import argparse
from collections import Counter
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.catalog.aggregate import aggregate_records
from pkgcatalog.catalog.sorting import sort_records
from pkgcatalog.cli._common import configure_logging, load_settings, print_summary
from pkgcatalog.config import DEFAULT_ADDON_GLOBS, DEFAULT_BUNDLE_GLOBS, DEFAULT_PACKAGE_GLOBS
from pkgcatalog.errors import CatalogError
from pkgcatalog.output.writer import write_json
from pkgcatalog.pipeline import EXIT_EMPTY, EXIT_FATAL, EXIT_OK, load_and_validate
from pkgcatalog.sources.locator import locate_sources, split_globs
from pkgcatalog.sources.models import RecordKind
from pkgcatalog.sources.registry import build_default_registry

load_dotenv()

logger = logging.getLogger(__name__)

_DEFAULT_GLOBS = {
    RecordKind.PACKAGES: DEFAULT_PACKAGE_GLOBS,
    RecordKind.ADDONS: DEFAULT_ADDON_GLOBS,
    RecordKind.BUNDLES: DEFAULT_BUNDLE_GLOBS,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Aggregate package, add-on or bundle modules into one JSON catalog")
    parser.add_argument("--kind", choices=[kind.value for kind in RecordKind], default=RecordKind.PACKAGES.value)
    parser.add_argument("--globs", help="Comma-separated source globs (defaults depend on --kind)")
    parser.add_argument("--out", help="Output JSON path (default: <out-dir>/<kind>.json)")
    parser.add_argument(
        "--root",
        help="Source tree root; relative paths resolve against it (default: CATALOG_ROOT or the working directory)",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    if settings is None:
        return EXIT_FATAL
    settings = settings.with_overrides(root=Path(args.root) if args.root else None)
    configure_logging(settings.log_level)

    kind = RecordKind(args.kind)
    patterns = split_globs(args.globs) or _DEFAULT_GLOBS[kind]
    out_path = settings.resolve(Path(args.out)) if args.out else settings.resolved_out_dir / f"{kind.value}.json"

    try:
        files = locate_sources(patterns, root=settings.root)
        report = load_and_validate(build_default_registry(), kind, files)
        report.raise_for_errors()
        records = sort_records(aggregate_records(kind, report.records))
        written = write_json(out_path, records, settings.write_mode)
    except CatalogError as exc:
        logger.error("Build %s failed: %s", kind.value, exc)
        return EXIT_FATAL

    by_service = Counter(str(record.get("service") or "") for record in records)
    print_summary(
        {
            "kind": kind.value,
            "source_files": len(files),
            "found": len(report.records),
            "written": len(records),
            "by_service": dict(sorted(by_service.items())),
            "output": str(out_path),
            "changed": written,
        }
    )
    return EXIT_OK if records else EXIT_EMPTY


if __name__ == "__main__":
    raise SystemExit(main())
