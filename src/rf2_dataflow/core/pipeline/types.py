"""
Tipos canônicos do pipeline do RF2 DataFlow.

Componentes:
    - StepStatus → estados finais de execução (SUCCESS, SKIPPED, FAILED)
    - StepKind   → classificação semântica do Step
    - StepResult → resultado imutável de um Step

Invariantes:
    - Enums possuem valores textuais estáveis (serializáveis em JSON)
    - StepResult nunca é alterado após criado; enriquecimentos geram
      uma nova instância (dataclasses.replace)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class StepKind(str, Enum):
    """
    Classificação semântica de um Step.

    - DIAGNOSTIC: conferência de arquivos de release (não altera dados)
    - TRANSFORM: montagem de arquivos de release a partir das fontes

    O Engine não usa o `kind` para decidir execução; é informativo.
    """
    DIAGNOSTIC = "diagnostic"
    TRANSFORM = "transform"


class StepStatus(str, Enum):
    """Estado final da execução de um Step."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """
    Resultado imutável da execução de um Step.

    Campos:
        - step_id / kind / status: identidade e estado final
        - summary: resumo textual curto
        - metrics: contadores numéricos (ex.: linhas escritas, issues)
        - warnings: avisos não fatais
        - artifacts: referências a artefatos produzidos (caminhos)
        - payload: dados estruturados livres (impacto, erro, resumo)
    """
    step_id: str
    kind: StepKind
    status: StepStatus
    summary: str
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    artifacts: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)
