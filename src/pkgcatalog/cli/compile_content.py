"""CLI command that compiles narrative markdown/MDX into content.map.json."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.cli._common import configure_logging, load_settings, print_summary
from pkgcatalog.content.compiler import compile_content_map
from pkgcatalog.errors import CatalogError
from pkgcatalog.output.writer import write_json
from pkgcatalog.pipeline import EXIT_EMPTY, EXIT_FATAL, EXIT_OK
from pkgcatalog.sources.locator import locate_sources, split_globs

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compile markdown/MDX content into a slug-keyed content map")
    parser.add_argument("--globs", help="Comma-separated content globs")
    parser.add_argument("--out", help="Output path (default: <out-dir>/content.map.json)")
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

    patterns = split_globs(args.globs) or settings.content_globs
    out_path = settings.resolve(Path(args.out)) if args.out else settings.resolved_out_dir / "content.map.json"

    try:
        files = locate_sources(patterns, root=settings.root, required=False)
        content_map = compile_content_map(files)
        written = write_json(out_path, content_map, settings.write_mode)
    except CatalogError as exc:
        logger.error("Compile content failed: %s", exc)
        return EXIT_FATAL

    print_summary(
        {
            "files_scanned": len(files),
            "compiled": len(content_map),
            "output": str(out_path),
            "changed": written,
        }
    )
    return EXIT_OK if content_map else EXIT_EMPTY


if __name__ == "__main__":
    raise SystemExit(main())
