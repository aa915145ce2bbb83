"""CLI command that attaches compiled content onto base bundles by slug."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.cli._common import configure_logging, load_settings, print_summary
from pkgcatalog.content.attach import attach_content, read_attach_inputs
from pkgcatalog.errors import CatalogError
from pkgcatalog.output.writer import write_json
from pkgcatalog.pipeline import EXIT_FATAL, EXIT_MISSING_CONTENT, EXIT_OK

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Attach compiled page content onto bundles and write bundles.enriched.json")
    parser.add_argument("--bundles", help="Base bundles JSON (default: the configured base bundles file)")
    parser.add_argument("--content", help="Content map JSON (default: <out-dir>/content.map.json)")
    parser.add_argument("--out", help="Output path (default: <out-dir>/bundles.enriched.json)")
    parser.add_argument("--root", help="Base for relative paths (default: CATALOG_ROOT or the working directory)")
    parser.add_argument(
        "--allow-missing-content",
        action="store_true",
        help="Exit 0 even when some bundles have no content entry",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    if settings is None:
        return EXIT_FATAL
    settings = settings.with_overrides(root=Path(args.root) if args.root else None)
    configure_logging(settings.log_level)

    out_dir = settings.resolved_out_dir
    bundles_path = settings.resolve(Path(args.bundles) if args.bundles else settings.base_bundles or Path("bundles.json"))
    content_path = settings.resolve(Path(args.content)) if args.content else out_dir / "content.map.json"
    out_path = settings.resolve(Path(args.out)) if args.out else out_dir / "bundles.enriched.json"
    allow_missing = args.allow_missing_content or settings.allow_missing_content

    try:
        bundles, content_map = asyncio.run(read_attach_inputs(bundles_path, content_path))
        result = attach_content(bundles, content_map)
        written = write_json(out_path, result.bundles, settings.write_mode)
    except CatalogError as exc:
        logger.error("Attach content failed: %s", exc)
        return EXIT_FATAL

    print_summary(
        {
            "bundles_input": str(bundles_path),
            "content_map": str(content_path),
            "output": str(out_path),
            "changed": written,
            **result.summary(),
        }
    )
    if result.missing and not allow_missing:
        return EXIT_MISSING_CONTENT
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
