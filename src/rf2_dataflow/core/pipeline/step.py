"""
Contrato canônico de Step do RF2 DataFlow.

Um Step é a menor unidade executável do pipeline. Ele não conhece o Engine
nem o planner, interage apenas via RunContext e devolve um StepResult.
A conformidade é verificada por duck typing (`@runtime_checkable`).
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .context import RunContext
from .types import StepKind, StepResult


@runtime_checkable
class Step(Protocol):
    """
    Interface mínima de um Step executável pelo Engine.

    Atributos obrigatórios:
        - id: identificador único e estável (ex.: "release.create")
        - kind: classificação semântica (`StepKind`)
        - depends_on: `id`s dos Steps que precisam executar antes
    """
    id: str
    kind: StepKind
    depends_on: List[str]

    def run(self, ctx: RunContext) -> StepResult:
        """Executa a etapa uma única vez usando exclusivamente o RunContext."""
        ...
