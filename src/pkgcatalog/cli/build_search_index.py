"""CLI command that builds packages.search.json from enriched bundles and the content map."""

from __future__ import annotations

import argparse
import asyncio
from collections import Counter
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.catalog.search import build_search_index
from pkgcatalog.cli._common import configure_logging, load_settings, print_summary
from pkgcatalog.content.attach import read_attach_inputs
from pkgcatalog.errors import CatalogError
from pkgcatalog.output.writer import write_json
from pkgcatalog.pipeline import EXIT_EMPTY, EXIT_FATAL, EXIT_OK

load_dotenv()

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build a consolidated search index for package content")
    parser.add_argument("--bundles", help="Enriched bundles JSON (default: <out-dir>/bundles.enriched.json)")
    parser.add_argument("--content", help="Content map JSON (default: <out-dir>/content.map.json)")
    parser.add_argument("--out", help="Output path (default: <out-dir>/packages.search.json)")
    parser.add_argument("--root", help="Base for relative paths (default: CATALOG_ROOT or the working directory)")
    parser.add_argument("--no-docs", action="store_true", help="Index bundles only")
    args = parser.parse_args(argv)

    settings = load_settings()
    if settings is None:
        return EXIT_FATAL
    settings = settings.with_overrides(root=Path(args.root) if args.root else None)
    configure_logging(settings.log_level)

    out_dir = settings.resolved_out_dir
    bundles_path = settings.resolve(Path(args.bundles)) if args.bundles else out_dir / "bundles.enriched.json"
    content_path = settings.resolve(Path(args.content)) if args.content else out_dir / "content.map.json"
    out_path = settings.resolve(Path(args.out)) if args.out else out_dir / "packages.search.json"

    try:
        bundles, content_map = asyncio.run(read_attach_inputs(bundles_path, content_path))
        docs = build_search_index(bundles, content_map, include_docs=not args.no_docs)
        written = write_json(out_path, docs, settings.write_mode)
    except CatalogError as exc:
        logger.error("Build search index failed: %s", exc)
        return EXIT_FATAL

    by_type = Counter(str(doc["docType"]) for doc in docs)
    print_summary(
        {
            "output": str(out_path),
            "documents": len(docs),
            "bundles": by_type.get("bundle", 0),
            "docs": by_type.get("doc", 0),
            "changed": written,
        }
    )
    return EXIT_OK if docs else EXIT_EMPTY


if __name__ == "__main__":
    raise SystemExit(main())
