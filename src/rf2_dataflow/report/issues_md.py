"""
Relatório de validação (`issues.md`).

Regras:
- Derivado exclusivamente das issues coletadas (nada é recalculado)
- Mesmas issues => mesmo relatório (ordenação estável)
- O resumo é calculado com pandas (groupby por arquivo, severidade e coluna)

Estrutura:
# Validation Report

## Summary
## Issues by Column
## Issues
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Union

from rf2_dataflow.validation.issues import Issue


REQUIRED_SECTIONS: List[str] = [
    "# Validation Report",
    "## Summary",
    "## Issues by Column",
    "## Issues",
]

COLUMNS = ["file", "severity", "column", "column_index", "row", "message"]

IssueLike = Union[Issue, Mapping[str, Any]]


def _as_dict(issue: IssueLike) -> Dict[str, Any]:
    raw = issue.to_dict() if isinstance(issue, Issue) else dict(issue)
    return {key: raw.get(key) for key in COLUMNS}


def _sort_key(issue: Dict[str, Any]):
    return (
        issue.get("file") or "",
        -1 if issue.get("row") is None else int(issue["row"]),
        -1 if issue.get("column_index") is None else int(issue["column_index"]),
    )


def issues_frame(issues: Iterable[IssueLike]):
    """DataFrame com uma linha por issue (colunas em `COLUMNS`)."""
    try:
        import pandas as pd  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("pandas is required for the validation report") from e

    records = [_as_dict(i) for i in issues]
    df = pd.DataFrame.from_records(records, columns=COLUMNS)
    df["file"] = df["file"].fillna("")
    df["column"] = df["column"].fillna("")
    return df


def summarize_issues(issues: Iterable[IssueLike]) -> Dict[str, Any]:
    """
    Resumo serializável das issues.

    Retorna:
        {
          "total": int, "errors": int, "warnings": int,
          "by_file": {file: {"error": int, "warn": int}},
          "by_column": [{"column", "severity", "count"}]
        }
    """
    df = issues_frame(issues)

    summary: Dict[str, Any] = {
        "total": int(len(df)),
        "errors": int((df["severity"] == "error").sum()),
        "warnings": int((df["severity"] == "warn").sum()),
        "by_file": {},
        "by_column": [],
    }
    if df.empty:
        return summary

    for (file, severity), count in df.groupby(["file", "severity"]).size().items():
        counts = summary["by_file"].setdefault(str(file), {"error": 0, "warn": 0})
        counts[str(severity)] = int(count)

    with_column = df[df["column"] != ""]
    if not with_column.empty:
        grouped = with_column.groupby(["column", "severity"]).size()
        summary["by_column"] = [
            {"column": str(column), "severity": str(severity), "count": int(count)}
            for (column, severity), count in grouped.items()
        ]

    return summary


def _location(issue: Dict[str, Any]) -> str:
    parts = [issue.get("file") or "<unknown>"]
    if issue.get("row") is not None:
        parts.append(f"row {issue['row']}")
    if issue.get("column"):
        parts.append(str(issue["column"]))
    return ", ".join(parts)


def generate_issues_md(summary: Dict[str, Any], issues: Iterable[IssueLike]) -> str:
    """Gera o conteúdo completo do relatório de validação."""
    ordered = sorted((_as_dict(i) for i in issues), key=_sort_key)

    lines: List[str] = ["# Validation Report", ""]

    lines.append("## Summary")
    lines.append(f"- **Total issues**: `{summary.get('total', 0)}`")
    lines.append(f"- **Errors**: `{summary.get('errors', 0)}`")
    lines.append(f"- **Warnings**: `{summary.get('warnings', 0)}`")
    by_file = summary.get("by_file") or {}
    if by_file:
        lines.append("")
        lines.append("| File | Errors | Warnings |")
        lines.append("|---|---:|---:|")
        for file in sorted(by_file):
            counts = by_file[file]
            lines.append(f"| {file or '<unknown>'} | {counts.get('error', 0)} | {counts.get('warn', 0)} |")
    lines.append("")

    lines.append("## Issues by Column")
    by_column = summary.get("by_column") or []
    if by_column:
        lines.append("| Column | Severity | Count |")
        lines.append("|---|---|---:|")
        for entry in by_column:
            lines.append(f"| {entry['column']} | {entry['severity']} | {entry['count']} |")
    else:
        lines.append("No column-level issues.")
    lines.append("")

    lines.append("## Issues")
    if ordered:
        for issue in ordered:
            lines.append(f"- `{issue.get('severity')}` {_location(issue)}: {issue.get('message')}")
    else:
        lines.append("No issues reported.")
    lines.append("")

    return "\n".join(lines)
