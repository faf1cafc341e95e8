"""
tests/core/reporting/test_issues_md.py

Cobertura:
- summarize_issues: contagens por severidade, arquivo e coluna
- generate_issues_md: seções mínimas, determinismo, ordem estável
- relatório vazio
"""

from __future__ import annotations

import pytest

try:
    from rf2_dataflow.report.issues_md import REQUIRED_SECTIONS, generate_issues_md, summarize_issues
    from rf2_dataflow.validation.issues import IssueCollector, Severity
except Exception as e:  # noqa: BLE001
    generate_issues_md = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing issues report module. Import error: {_IMPORT_ERR}")


def _collector():
    c = IssueCollector()
    c.report(Severity.ERROR, "active '9' must be either '0' or '1'", file="b.txt", column="active", column_index=2, row=2)
    c.report(Severity.WARN, "No validator is registered for column header 'term'.", file="a.txt", column="term", column_index=7)
    c.report(Severity.ERROR, "active '7' must be either '0' or '1'", file="b.txt", column="active", column_index=2, row=1)
    c.report(Severity.ERROR, "header does not conform to specification: x", file="c.txt")
    return c


def test_summary_counts():
    _require_imports()
    summary = summarize_issues(_collector().issues)

    assert summary["total"] == 4
    assert summary["errors"] == 3
    assert summary["warnings"] == 1
    assert summary["by_file"] == {
        "a.txt": {"error": 0, "warn": 1},
        "b.txt": {"error": 2, "warn": 0},
        "c.txt": {"error": 1, "warn": 0},
    }
    assert {"column": "active", "severity": "error", "count": 2} in summary["by_column"]
    assert {"column": "term", "severity": "warn", "count": 1} in summary["by_column"]


def test_summary_accepts_dicts():
    _require_imports()
    issues = [i.to_dict() for i in _collector().issues]
    assert summarize_issues(issues)["total"] == 4


def test_report_has_required_sections():
    _require_imports()
    issues = _collector().issues
    md = generate_issues_md(summarize_issues(issues), issues)

    for section in REQUIRED_SECTIONS:
        assert section in md
    assert "| b.txt | 2 | 0 |" in md


def test_report_is_deterministic_and_ordered():
    _require_imports()
    c = _collector()
    issues = c.issues
    md1 = generate_issues_md(summarize_issues(issues), issues)
    md2 = generate_issues_md(summarize_issues(list(reversed(issues))), list(reversed(issues)))

    assert md1 == md2
    row1 = md1.index("b.txt, row 1, active")
    row2 = md1.index("b.txt, row 2, active")
    assert md1.index("a.txt, term") < row1 < row2 < md1.index("- `error` c.txt: header")


def test_empty_report():
    _require_imports()
    md = generate_issues_md(summarize_issues([]), [])

    assert "No column-level issues." in md
    assert "No issues reported." in md
    assert "- **Total issues**: `0`" in md
