"""
Engine de execução do pipeline do RF2 DataFlow.

Políticas:
- Steps desabilitados em `steps.<id>.enabled: false` são SKIPPED
- Steps cuja dependência falhou são SKIPPED
- `engine.fail_fast` (default True) interrompe a run no primeiro FAILED
- Exceções levantadas por Steps viram Rf2ErrorPayload em
  `StepResult.payload["error"]` (sem stack trace cru para o operador)

StepResult é frozen: qualquer enriquecimento (warnings do RunContext,
impacto, metadados do payload) gera uma nova instância via `replace`.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from rf2_dataflow.core.errors import engine_configuration_error, payload_from_exception
from rf2_dataflow.core.pipeline.context import RunContext
from rf2_dataflow.core.pipeline.step import Step
from rf2_dataflow.core.pipeline.types import StepKind, StepResult, StepStatus

from .planner import plan_execution


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma execução de pipeline."""

    steps: Dict[str, StepResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.status != StepStatus.FAILED for r in self.steps.values())


class Engine:
    """Engine canônico do RF2 DataFlow (planner + executor)."""

    def __init__(self, *, steps: Sequence[Step], ctx: RunContext):
        self.steps: List[Step] = list(steps)
        self.ctx: RunContext = ctx

    def _is_enabled(self, step_id: str) -> bool:
        steps_cfg = (self.ctx.config or {}).get("steps", {}) or {}
        step_cfg = steps_cfg.get(step_id, {}) or {}
        return bool(step_cfg.get("enabled", True))

    def _fail_fast(self) -> bool:
        engine_cfg = (self.ctx.config or {}).get("engine", {}) or {}
        return bool(engine_cfg.get("fail_fast", True))

    # ------------------------------------------------------------------
    # Enriquecimento do StepResult
    # ------------------------------------------------------------------
    def _payload_meta(self, payload: Any) -> Dict[str, Any]:
        raw = json.dumps(payload, ensure_ascii=False, sort_keys=True, default=str).encode("utf-8")
        return {
            "payload_bytes": len(raw),
            "payload_sha256": hashlib.sha256(raw).hexdigest(),
        }

    def _enrich(self, *, step: Step, result: StepResult) -> StepResult:
        sid = step.id

        merged: List[str] = []
        for msg in list(result.warnings or []) + list(self.ctx.warnings.get(sid, [])):
            if msg not in merged:
                merged.append(msg)

        payload = dict(result.payload or {})
        impact = self.ctx.impacts.get(sid)
        if impact is not None and "impact" not in payload:
            payload["impact"] = impact

        artifacts = dict(result.artifacts or {})
        artifacts.setdefault("payload_meta", self._payload_meta(payload))

        return replace(
            result,
            step_id=sid,
            kind=result.kind or getattr(step, "kind", StepKind.DIAGNOSTIC),
            warnings=merged,
            payload=payload,
            artifacts=artifacts,
        )

    def _mk_result(
        self,
        *,
        step: Step,
        status: StepStatus,
        summary: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> StepResult:
        r = StepResult(
            step_id=step.id,
            kind=getattr(step, "kind", StepKind.DIAGNOSTIC) or StepKind.DIAGNOSTIC,
            status=status,
            summary=summary,
            payload=dict(payload or {}),
        )
        return self._enrich(step=step, result=r)

    # ------------------------------------------------------------------
    # Execução
    # ------------------------------------------------------------------
    def run(self) -> RunResult:
        ordered = plan_execution(self.steps)

        results: Dict[str, StepResult] = {}
        for step in ordered:
            sid = step.id

            if not self._is_enabled(sid):
                results[sid] = self._mk_result(
                    step=step, status=StepStatus.SKIPPED, summary="skipped by config"
                )
                self.ctx.log(step_id=sid, level="info", message="step skipped by config")
                continue

            deps = list(getattr(step, "depends_on", []) or [])
            if any(results.get(d) is not None and results[d].status == StepStatus.FAILED for d in deps):
                results[sid] = self._mk_result(
                    step=step, status=StepStatus.SKIPPED, summary="skipped due to failed dependency"
                )
                self.ctx.log(step_id=sid, level="warning", message="step skipped due to failed dependency")
                continue

            self.ctx.log(step_id=sid, level="info", message="step started")
            try:
                step_result = step.run(self.ctx)
            except Exception as e:
                error = payload_from_exception(e, step=sid)
                results[sid] = self._mk_result(
                    step=step,
                    status=StepStatus.FAILED,
                    summary=error.message,
                    payload={"error": error.to_dict()},
                )
                self.ctx.log(step_id=sid, level="error", message=error.message, error_type=error.type)
                if self._fail_fast():
                    break
                continue

            if not isinstance(step_result, StepResult):
                error = engine_configuration_error(
                    message="Step retornou tipo inválido",
                    details={
                        "step_id": sid,
                        "expected": "StepResult",
                        "received": type(step_result).__name__,
                    },
                    hint="Ajuste o Step para retornar StepResult",
                )
                results[sid] = self._mk_result(
                    step=step,
                    status=StepStatus.FAILED,
                    summary=error.message,
                    payload={"error": error.to_dict()},
                )
                self.ctx.log(step_id=sid, level="error", message=error.message, error_type=error.type)
                if self._fail_fast():
                    break
                continue

            results[sid] = self._enrich(step=step, result=step_result)
            self.ctx.log(
                step_id=sid,
                level="info",
                message="step finished",
                status=step_result.status.value,
            )
            if step_result.status == StepStatus.FAILED and self._fail_fast():
                break

        return RunResult(steps=results)
