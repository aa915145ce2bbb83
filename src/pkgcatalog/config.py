"""Runtime configuration for catalog builds."""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Mapping

from pkgcatalog.output.writer import WriteMode


DEFAULT_PACKAGE_GLOBS = ("src/data/packages/*/*-packages.ts",)
DEFAULT_ADDON_GLOBS = ("src/data/packages/*/*-addons.ts",)
DEFAULT_BUNDLE_GLOBS = ("src/data/packages/bundles/*.ts",)
DEFAULT_DOC_GLOBS = ("docs/packages/catalog/**/public.mdx",)
DEFAULT_CONTENT_GLOBS = (
    "src/content/packages/bundles/**/*.{md,mdx}",
    "src/content/packages/overviews/**/*.{md,mdx}",
    "src/content/packages/services/**/*.{md,mdx}",
)
DEFAULT_BASE_BUNDLES = "src/data/packages/bundles.json"
DEFAULT_OUT_DIR = "src/data/packages/__generated__"
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


def _parse_flag(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().casefold()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUTHY | _FALSY))}")


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Validated inputs and outputs for one catalog build."""

    root: Path = Path(".")
    out_dir: Path = Path(DEFAULT_OUT_DIR)
    package_globs: tuple[str, ...] = DEFAULT_PACKAGE_GLOBS
    addon_globs: tuple[str, ...] = DEFAULT_ADDON_GLOBS
    bundle_globs: tuple[str, ...] = DEFAULT_BUNDLE_GLOBS
    doc_globs: tuple[str, ...] = DEFAULT_DOC_GLOBS
    content_globs: tuple[str, ...] = DEFAULT_CONTENT_GLOBS
    base_bundles: Path | None = Path(DEFAULT_BASE_BUNDLES)
    write_mode: WriteMode = WriteMode.IF_CHANGED
    allow_missing_content: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def resolved_out_dir(self) -> Path:
        if self.out_dir.is_absolute():
            return self.out_dir
        return (self.root / self.out_dir).resolve()

    def resolve(self, path: Path) -> Path:
        """Resolve a settings path against the source root."""

        if path.is_absolute():
            return path
        return (self.root / path).resolve()

    def with_overrides(self, **changes: object) -> "BuildSettings":
        """Return a copy with CLI overrides applied; ``None`` values are ignored."""

        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BuildSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        root_raw = source.get("CATALOG_ROOT", ".").strip()
        if not root_raw:
            raise ValueError("CATALOG_ROOT cannot be empty")
        root = Path(root_raw)
        if not root.is_dir():
            raise ValueError(f"CATALOG_ROOT does not exist or is not a directory: {root_raw}")

        out_raw = source.get("CATALOG_OUT_DIR", DEFAULT_OUT_DIR).strip()
        if not out_raw:
            raise ValueError("CATALOG_OUT_DIR cannot be empty")

        mode_raw = source.get("CATALOG_WRITE_MODE", WriteMode.IF_CHANGED.value).strip()
        try:
            write_mode = WriteMode(mode_raw)
        except ValueError as exc:
            choices = ", ".join(mode.value for mode in WriteMode)
            raise ValueError(f"CATALOG_WRITE_MODE must be one of: {choices}") from exc

        allow_missing = _parse_flag(
            name="CATALOG_ALLOW_MISSING_CONTENT",
            raw_value=source.get("CATALOG_ALLOW_MISSING_CONTENT", "0"),
        )

        log_level = source.get("CATALOG_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"CATALOG_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")

        return cls(
            root=root,
            out_dir=Path(out_raw),
            write_mode=write_mode,
            allow_missing_content=allow_missing,
            log_level=log_level,
        )
