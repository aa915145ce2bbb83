from __future__ import annotations

from pathlib import Path

from pkgcatalog.schema.doc_headers import check_document_headers, collect_documents

_GOOD_HEADER = """**Official Title:** Packages Pricing Plan
**Domain:** packages
**File Name:** pricing_Plan_2024-05-01.md
**Main Part:** pricing
**Qualifier:** Plan
**Date:** 2024-05-01

**Spotlight Comments:** keep tiers aligned
**Summary:** How packages are priced.
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_well_formed_document_has_no_problems(tmp_path: Path) -> None:
    path = _write(tmp_path / "pricing_Plan_2024-05-01.md", _GOOD_HEADER)

    assert check_document_headers([path], tmp_path) == []


def test_all_problems_of_a_document_are_batched(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "notes.md",
        "**Domain:** marketing\n**File Name:** other.md\n**Qualifier:** Memo\n",
    )

    problems = check_document_headers([path], tmp_path)
    messages = [(problem.severity, problem.message) for problem in problems]

    assert ("error", 'Missing header field: "Official Title"') in messages
    assert ("error", 'Missing header field: "Date"') in messages
    assert ("error", 'Domain must be "packages" (got "marketing")') in messages
    assert ("error", 'Header "File Name" (other.md) does not match actual (notes.md)') in messages
    assert ("error", 'Qualifier "Memo" not allowed') in messages
    assert any("File name should match" in message for _, message in messages)
    assert ("warn", 'Missing "Spotlight Comments" section') in messages
    assert ("warn", 'Missing "Summary" section') in messages
    assert all(problem.file == "notes.md" for problem in problems)


def test_readme_is_exempt_from_name_pattern(tmp_path: Path) -> None:
    header = _GOOD_HEADER.replace("pricing_Plan_2024-05-01.md", "README.md").replace("Plan\n", "Readme\n")
    path = _write(tmp_path / "README.md", header)

    assert check_document_headers([path], tmp_path) == []


def test_date_in_name_must_match_header_date(tmp_path: Path) -> None:
    header = _GOOD_HEADER.replace("**Date:** 2024-05-01", "**Date:** 2024-06-01")
    path = _write(tmp_path / "pricing_Plan_2024-05-01.md", header)

    problems = check_document_headers([path], tmp_path)

    assert [problem.severity for problem in problems] == ["error"]
    assert "File name should match" in problems[0].message


def test_collect_documents_skips_generated_directories(tmp_path: Path) -> None:
    _write(tmp_path / "a_Plan_Evergreen.md", "")
    _write(tmp_path / "sub" / "b_Guide_Evergreen.md", "")
    _write(tmp_path / "_generated" / "c.md", "")
    _write(tmp_path / "notes.txt", "")

    found = collect_documents(tmp_path)

    assert [path.name for path in found] == ["a_Plan_Evergreen.md", "b_Guide_Evergreen.md"]
