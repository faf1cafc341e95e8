"""Step canônico: release.create (v1).

Responsabilidades:
- Ler `release.*` da configuração resolvida (ReleaseSettings)
- Montar cada arquivo declarado em `release.files` dentro de `output_dir`,
  a partir das fontes de `release.sources`, segundo o release type do arquivo
- Espelhar conflitos de conteúdo (e linhas malformadas) como warnings do Step
- Publicar o artifact `release.created_files`

Config esperada (exemplo):
release:
  date: "20240131"
  output_dir: out
  sources:
    Concept: [a/sct2_Concept_Full.txt]
  files:
    - name: sct2_Concept_Delta_INT_20240131.txt
      content_type: Concept
      release_type: Delta

Payload:
payload:
  impact:
    files:
      <name>: {rows_read, rows_filtered, rows_malformed, rows_outside_delta,
               duplicates_skipped, conflicts, rows_written}
  conflicts: [content_conflict payload] (id, effective_time, path)
  config_hash: sha256 da configuração efetiva

Limites explícitos (v1):
- NÃO sobrescreve arquivos existentes (falha com OUTPUT_EXISTS)
- NÃO descobre fontes em disco por padrão de nome
- A primeira falha de I/O ou configuração interrompe o Step
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from rf2_dataflow.assembly.source import FileRowSource
from rf2_dataflow.core.config.hashing import compute_config_hash
from rf2_dataflow.core.config.release import load_release_settings
from rf2_dataflow.core.errors import content_conflict, payload_from_exception
from rf2_dataflow.core.pipeline.context import RunContext
from rf2_dataflow.core.pipeline.step import Step
from rf2_dataflow.core.pipeline.types import StepKind, StepResult, StepStatus
from rf2_dataflow.model.content_file import content_file_for
from rf2_dataflow.validation.issues import IssueCollector


CREATED_FILES_ARTIFACT = "release.created_files"


@dataclass
class ReleaseCreateStep(Step):
    """Monta os arquivos de release declarados na configuração."""

    id: str = "release.create"
    kind: StepKind = StepKind.TRANSFORM
    depends_on: List[str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.depends_on is None:
            self.depends_on = []

    def run(self, ctx: RunContext) -> StepResult:
        created: List[Dict[str, Any]] = []
        per_file: Dict[str, Dict[str, Any]] = {}
        conflicts: List[Dict[str, Any]] = []

        try:
            settings = load_release_settings(ctx.config)
            source = FileRowSource(settings.sources, workers=settings.workers)

            if settings.files:
                settings.output_dir.mkdir(parents=True, exist_ok=True)

            for spec in settings.files:
                content_file = content_file_for(
                    spec.content_type,
                    settings.output_path(spec),
                    spec.release_type,
                    allow_empty_effective_time=settings.allow_empty_effective_time,
                )
                collector = IssueCollector(file=str(content_file.path))

                stats = content_file.create(
                    source,
                    collector,
                    release_date=ctx.release_date,
                    parallel=settings.workers > 1,
                )

                for issue in collector.issues:
                    ctx.add_warning(step_id=self.id, message=f"{spec.name}: {issue.message}")

                created.append(
                    {
                        "path": str(content_file.path),
                        "content_type": spec.content_type,
                        "release_type": spec.release_type.value,
                    }
                )
                per_file[spec.name] = stats.to_dict()
                conflicts.extend(
                    content_conflict(
                        component_id=component_id,
                        effective_time=effective_time,
                        path=str(content_file.path),
                    ).to_dict()
                    for component_id, effective_time in stats.conflict_keys
                )

                ctx.log(
                    step_id=self.id,
                    level="info",
                    message="release file created",
                    path=str(content_file.path),
                    content_type=spec.content_type,
                    release_type=spec.release_type.value,
                    **stats.to_dict(),
                )

            ctx.set_artifact(CREATED_FILES_ARTIFACT, created)
            impact = {"files": per_file}
            ctx.set_impact(self.id, impact)

            metrics = {
                "files_created": len(created),
                "rows_written": sum(s["rows_written"] for s in per_file.values()),
                "duplicates_skipped": sum(s["duplicates_skipped"] for s in per_file.values()),
                "conflicts": sum(s["conflicts"] for s in per_file.values()),
            }

            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary=f"created {len(created)} release file(s)",
                metrics=metrics,
                warnings=list(ctx.warnings.get(self.id, [])),
                artifacts={item["path"]: item["path"] for item in created},
                payload={
                    "impact": impact,
                    "conflicts": conflicts,
                    "config_hash": compute_config_hash(dict(ctx.config or {})),
                },
            )

        except Exception as e:
            error = payload_from_exception(e, step=self.id)
            ctx.log(
                step_id=self.id,
                level="error",
                message="release.create failed",
                error_type=error.type,
                error_message=error.message,
            )
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.FAILED,
                summary=error.message or "release.create failed",
                metrics={"files_created": len(created)},
                warnings=[],
                artifacts={},
                payload={"error": error.to_dict(), "created_files": created},
            )


__all__ = ["ReleaseCreateStep", "CREATED_FILES_ARTIFACT"]
