"""
Contexto de execução compartilhado do pipeline.

O `RunContext` é o único meio de troca de estado entre Steps de uma run:
    - configuração resolvida (incluindo `release.date`)
    - artifact store explícito (ex.: `release.created_files`)
    - eventos de log estruturados (sempre com `run_id` e `step_id`)
    - warnings não fatais agrupados por Step
    - impacto (contadores) registrado por Step

Limites explícitos:
    - Não executa Steps
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class RunContext:
    """
    Contexto canônico de uma run.

    Também é o "create context" do motor de montagem: `release_date`
    expõe a data da release declarada em `release.date`.
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    meta: Dict[str, Any] = field(default_factory=dict)

    _artifacts: Dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)
    impacts: Dict[str, Any] = field(default_factory=dict, init=False)

    @property
    def release_date(self) -> Optional[str]:
        release_cfg = (self.config or {}).get("release", {}) or {}
        value = release_cfg.get("date")
        return None if value is None else str(value)

    # -----------------------------
    # Artifact store
    # -----------------------------
    def set_artifact(self, key: str, value: Any) -> None:
        self._artifacts[key] = value

    def has_artifact(self, key: str) -> bool:
        return key in self._artifacts

    def get_artifact(self, key: str) -> Any:
        if key not in self._artifacts:
            raise KeyError(key)
        return self._artifacts[key]

    # -----------------------------
    # Logging, warnings & impacto
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "step_id": step_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, step_id: str, message: str) -> None:
        self.warnings.setdefault(step_id, []).append(message)

    def set_impact(self, step_id: str, impact: Any) -> None:
        self.impacts[step_id] = impact
