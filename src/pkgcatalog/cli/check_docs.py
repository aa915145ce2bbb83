"""CLI command that lints labeled headers of governance documents."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from pkgcatalog.cli._common import configure_logging, print_summary
from pkgcatalog.errors import CatalogError
from pkgcatalog.pipeline import EXIT_FATAL, EXIT_OK
from pkgcatalog.schema.doc_headers import check_document_headers, collect_documents

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DOCS_ROOT = "documents/domains/packages"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check labeled headers and file names of package documents")
    parser.add_argument("--root", default=DEFAULT_DOCS_ROOT, help="Documents directory to scan")
    args = parser.parse_args(argv)
    configure_logging()

    root = Path(args.root)
    if not root.is_dir():
        logger.error("Documents root does not exist: %s", root)
        return EXIT_FATAL

    files = collect_documents(root)
    try:
        problems = check_document_headers(files, root)
    except CatalogError as exc:
        logger.error("Doc check failed: %s", exc)
        return EXIT_FATAL

    errors = [problem for problem in problems if problem.severity == "error"]
    warnings = [problem for problem in problems if problem.severity == "warn"]
    for problem in warnings:
        logger.warning("%s", problem)
    for problem in errors:
        logger.error("%s", problem)

    print_summary(
        {
            "root": str(root),
            "checked": len(files),
            "errors": [str(problem) for problem in errors],
            "warnings": [str(problem) for problem in warnings],
        }
    )
    return EXIT_FATAL if errors else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
