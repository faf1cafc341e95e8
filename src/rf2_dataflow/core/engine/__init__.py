"""
Engine do RF2 DataFlow.

Componentes:
    - planner → ordenação topológica determinística e validações estruturais
    - engine  → execução coordenada de Steps com políticas explícitas
      (skip por config, skip por dependência falha, fail-fast)

Planejamento e execução são responsabilidades separadas; a mesma
definição de pipeline produz sempre a mesma ordem.
"""

from .engine import Engine, RunResult
from .planner import CycleDetectedError, UnknownDependencyError, plan_execution

__all__ = [
    "CycleDetectedError",
    "Engine",
    "RunResult",
    "UnknownDependencyError",
    "plan_execution",
]
