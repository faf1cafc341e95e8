"""Step canônico: release.check (v1).

Responsabilidades:
- Validar cada arquivo alvo: `release.check.files` quando declarado, senão
  os arquivos publicados por `release.create` (artifact `release.created_files`)
- Coletar issues (header, validadores de coluna) sem interromper a varredura
- Resumir as issues (pandas) e, opcionalmente, gravar `issues.md`

Payload:
payload:
  files:
    <path>: {content_type, conforms, errors, warnings}
  summary: {total, errors, warnings, by_file, by_column}
  report_md_path: str | None

Status:
- SUCCESS mesmo com issues (issues são reportadas, não levantadas)
- FAILED apenas em falhas de I/O ou configuração
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from rf2_dataflow.core.config.release import CheckTarget, load_release_settings
from rf2_dataflow.core.errors import payload_from_exception
from rf2_dataflow.core.exceptions import SourceReadError
from rf2_dataflow.core.pipeline.context import RunContext
from rf2_dataflow.core.pipeline.step import Step
from rf2_dataflow.core.pipeline.types import StepKind, StepResult, StepStatus
from rf2_dataflow.model.content_file import content_file_for
from rf2_dataflow.model.release import ReleaseType
from rf2_dataflow.report.issues_md import generate_issues_md, summarize_issues
from rf2_dataflow.validation.issues import IssueCollector, Severity

from rf2_dataflow.steps.release.create import CREATED_FILES_ARTIFACT


ISSUES_ARTIFACT = "release.check.issues"


def _targets_from_artifact(ctx: RunContext) -> List[CheckTarget]:
    if not ctx.has_artifact(CREATED_FILES_ARTIFACT):
        return []
    targets: List[CheckTarget] = []
    for item in ctx.get_artifact(CREATED_FILES_ARTIFACT) or []:
        release_type = item.get("release_type")
        targets.append(
            CheckTarget(
                path=Path(item["path"]),
                content_type=item["content_type"],
                release_type=None if release_type is None else ReleaseType.parse(release_type),
            )
        )
    return targets


@dataclass
class ReleaseCheckStep(Step):
    """Valida arquivos de release e resume as issues encontradas."""

    id: str = "release.check"
    kind: StepKind = StepKind.DIAGNOSTIC
    depends_on: List[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.depends_on is None:
            self.depends_on = ["release.create"]

    def run(self, ctx: RunContext) -> StepResult:
        try:
            settings = load_release_settings(ctx.config)
            targets = list(settings.check_targets) or _targets_from_artifact(ctx)

            if not targets:
                return StepResult(
                    step_id=self.id,
                    kind=self.kind,
                    status=StepStatus.SKIPPED,
                    summary="no release files to check",
                    payload={"files": {}},
                )

            collector = IssueCollector()
            files: Dict[str, Dict[str, Any]] = {}

            for target in targets:
                content_file = content_file_for(
                    target.content_type,
                    target.path,
                    target.release_type,
                    allow_empty_effective_time=settings.allow_empty_effective_time,
                )
                path = str(content_file.path)
                if not content_file.path.is_file():
                    raise SourceReadError(
                        message=f"release file not found: {path}",
                        details={"path": path},
                        hint="Confirme `release.check.files` ou execute release.create antes.",
                    )

                conforms = content_file.check(
                    collector,
                    workers=settings.workers,
                    chunk_size=settings.chunk_size,
                )

                file_issues = [i for i in collector.issues if i.file == path]
                errors = sum(1 for i in file_issues if i.severity == Severity.ERROR)
                warnings = len(file_issues) - errors
                files[path] = {
                    "content_type": content_file.content_type,
                    "conforms": conforms,
                    "errors": errors,
                    "warnings": warnings,
                }

                if errors:
                    ctx.add_warning(step_id=self.id, message=f"{path}: {errors} error(s) found")

                ctx.log(
                    step_id=self.id,
                    level="info" if not errors else "warning",
                    message="release file checked",
                    path=path,
                    conforms=conforms,
                    errors=errors,
                    warnings=warnings,
                )

            issues = collector.sorted_issues()
            summary = summarize_issues(issues)
            ctx.set_artifact(ISSUES_ARTIFACT, [i.to_dict() for i in issues])

            report_path: Optional[str] = None
            artifacts: Dict[str, Any] = {}
            if settings.report_path is not None:
                settings.report_path.parent.mkdir(parents=True, exist_ok=True)
                settings.report_path.write_text(generate_issues_md(summary, issues), encoding="utf-8")
                report_path = str(settings.report_path)
                artifacts["issues_md"] = report_path

            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary=f"checked {len(files)} file(s): {summary['errors']} error(s), {summary['warnings']} warning(s)",
                metrics={
                    "files_checked": len(files),
                    "files_conforming": sum(1 for f in files.values() if f["conforms"]),
                    "errors": summary["errors"],
                    "warnings": summary["warnings"],
                },
                warnings=list(ctx.warnings.get(self.id, [])),
                artifacts=artifacts,
                payload={"files": files, "summary": summary, "report_md_path": report_path},
            )

        except Exception as e:
            error = payload_from_exception(e, step=self.id)
            ctx.log(
                step_id=self.id,
                level="error",
                message="release.check failed",
                error_type=error.type,
                error_message=error.message,
            )
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.FAILED,
                summary=error.message or "release.check failed",
                metrics={},
                warnings=[],
                artifacts={},
                payload={"error": error.to_dict()},
            )


__all__ = ["ReleaseCheckStep", "ISSUES_ARTIFACT"]
