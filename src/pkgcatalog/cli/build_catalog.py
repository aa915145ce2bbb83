"""CLI command that runs the full catalog build and writes every artifact."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.cli._common import configure_logging, load_settings, print_summary
from pkgcatalog.errors import CatalogError
from pkgcatalog.output.writer import WriteMode
from pkgcatalog.pipeline import EXIT_FATAL, run_catalog_build
from pkgcatalog.sources.locator import split_globs

load_dotenv()

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the package catalog artifacts from source content")
    parser.add_argument(
        "--root",
        help="Source tree root; relative paths resolve against it (default: CATALOG_ROOT or the working directory)",
    )
    parser.add_argument("--globs", help="Comma-separated package module globs")
    parser.add_argument("--addon-globs", help="Comma-separated add-on module globs")
    parser.add_argument("--bundle-globs", help="Comma-separated bundle module globs")
    parser.add_argument("--doc-globs", help="Comma-separated package document globs")
    parser.add_argument("--content-globs", help="Comma-separated narrative content globs")
    parser.add_argument("--bundles", help="Base bundles JSON file")
    parser.add_argument("--out", help="Output directory for generated artifacts")
    parser.add_argument("--write-mode", choices=[mode.value for mode in WriteMode], help="How artifacts are written")
    parser.add_argument(
        "--allow-missing-content",
        action="store_true",
        default=None,
        help="Exit 0 even when some bundles have no content entry",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = load_settings()
    if settings is None:
        return EXIT_FATAL
    settings = settings.with_overrides(
        root=Path(args.root) if args.root else None,
        package_globs=split_globs(args.globs) or None,
        addon_globs=split_globs(args.addon_globs) or None,
        bundle_globs=split_globs(args.bundle_globs) or None,
        doc_globs=split_globs(args.doc_globs) or None,
        content_globs=split_globs(args.content_globs) or None,
        base_bundles=Path(args.bundles) if args.bundles else None,
        out_dir=Path(args.out) if args.out else None,
        write_mode=WriteMode(args.write_mode) if args.write_mode else None,
        allow_missing_content=args.allow_missing_content,
    )
    configure_logging(settings.log_level, verbose=args.verbose)

    try:
        report = run_catalog_build(settings)
    except CatalogError as exc:
        logger.error("Catalog build failed: %s", exc)
        return EXIT_FATAL

    print_summary(report.to_dict())
    return report.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
