"""Batched record validation: every violation in every file, reported together."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from pkgcatalog.errors import SchemaValidationError
from pkgcatalog.schema.models import AddOn, Bundle, CatalogRecord, Package
from pkgcatalog.sources.models import MarkdownDocument, ModuleDocument, RecordKind
from pkgcatalog.sources.registry import LoadResult

logger = logging.getLogger(__name__)

_MODELS: dict[RecordKind, type[CatalogRecord]] = {
    RecordKind.PACKAGES: Package,
    RecordKind.ADDONS: AddOn,
    RecordKind.BUNDLES: Bundle,
}


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    source: str
    index: int | None
    location: str
    message: str
    severity: str = "error"

    def __str__(self) -> str:
        where = self.source if self.index is None else f"{self.source}[{self.index}]"
        return f"{where} {self.location}: {self.message}"


@dataclass(slots=True)
class ValidationReport:
    """Normalized records that passed, plus every issue found."""

    records: list[dict[str, object]] = field(default_factory=list)
    origins: list[Path] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]

    def raise_for_errors(self) -> None:
        if self.errors:
            raise SchemaValidationError(self.errors)


def normalize_record(kind: RecordKind, raw: dict[str, object]) -> dict[str, object]:
    """Fill derived fields before validation; the input is not modified."""

    record = dict(raw)
    if kind is not RecordKind.BUNDLES and not record.get("id"):
        service, slug = record.get("service"), record.get("slug")
        if isinstance(service, str) and service and isinstance(slug, str) and slug:
            record["id"] = f"{service}-{slug}"
    return record


def _issues_from_error(source: str, index: int | None, exc: ValidationError) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "(root)"
        issues.append(ValidationIssue(source, index, location, error.get("msg", "invalid value")))
    return issues


def _validate_one(
    kind: RecordKind,
    raw: object,
    source: str,
    index: int | None,
    report: ValidationReport,
) -> dict[str, object] | None:
    if not isinstance(raw, dict):
        report.issues.append(ValidationIssue(source, index, "(root)", "record is not an object"))
        return None

    model = _MODELS[kind]
    try:
        validated = model.model_validate(normalize_record(kind, raw))
    except ValidationError as exc:
        report.issues.extend(_issues_from_error(source, index, exc))
        return None

    if validated.price is not None and validated.price.is_empty:
        report.issues.append(
            ValidationIssue(source, index, "price", "neither monthly nor oneTime is set", severity="warning")
        )
    return validated.model_dump(mode="json", exclude_none=True)


def _document_records(document: ModuleDocument | MarkdownDocument) -> Iterable[tuple[int | None, object]]:
    if isinstance(document, MarkdownDocument):
        yield None, document.as_record()
        return
    yield from enumerate(document.records)


def validate_records(result: LoadResult) -> ValidationReport:
    """Validate every record of every loaded document for one domain."""

    kind = result.kind
    report = ValidationReport()

    if kind is RecordKind.PACKAGES:
        for warning in result.warnings:
            report.issues.append(ValidationIssue(str(warning.path), None, "(module)", warning.message))

    for document in result.documents:
        source = str(document.path)
        if isinstance(document, MarkdownDocument) and document.missing_keys:
            report.issues.append(
                ValidationIssue(
                    source,
                    None,
                    "(frontmatter)",
                    f"missing required keys: {', '.join(document.missing_keys)}",
                )
            )
            continue

        for index, raw in _document_records(document):
            validated = _validate_one(kind, raw, source, index, report)
            if validated is not None:
                report.records.append(validated)
                report.origins.append(document.path)

    for issue in report.warnings:
        logger.warning("%s", issue)
    logger.info(
        "Validated %s: %d record(s), %d error(s), %d warning(s)",
        kind.value,
        len(report.records),
        len(report.errors),
        len(report.warnings),
    )
    return report
