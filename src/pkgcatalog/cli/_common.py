"""Shared entrypoint plumbing for the catalog CLIs."""

from __future__ import annotations

import json
import logging

from pkgcatalog.config import BuildSettings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO", *, verbose: bool = False) -> None:
    logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO))


def load_settings() -> BuildSettings | None:
    """Settings from the environment; ``None`` after logging an invalid value."""

    try:
        return BuildSettings.from_env()
    except ValueError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return None


def print_summary(payload: dict[str, object]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))
