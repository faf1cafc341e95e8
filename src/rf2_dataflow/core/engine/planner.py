"""
Planejador de execução do pipeline (DAG).

Valida a estrutura declarada (ids, dependências, ciclos) e produz uma ordem
topológica determinística: empates entre Steps prontos são resolvidos pela
ordem lexicográfica de `step.id` (Kahn).
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from rf2_dataflow.core.pipeline.step import Step


class UnknownDependencyError(ValueError):
    """Um Step declara em `depends_on` um id que não existe no pipeline."""


class CycleDetectedError(ValueError):
    """O grafo de dependências contém ao menos um ciclo."""


def plan_execution(steps: Iterable[Step]) -> List[Step]:
    """
    Retorna os Steps em ordem topológica determinística.

    Raises:
        ValueError: `id` inválido ou duplicado.
        UnknownDependencyError: dependência inexistente.
        CycleDetectedError: ciclo no grafo.
    """
    by_id: Dict[str, Step] = {}
    for s in steps:
        sid = getattr(s, "id", None)
        if not isinstance(sid, str) or not sid.strip():
            raise ValueError("step.id must be a non-empty string")
        if sid in by_id:
            raise ValueError(f"Duplicate step id: {sid}")
        by_id[sid] = s

    incoming: Dict[str, int] = {}
    children: Dict[str, Set[str]] = {sid: set() for sid in by_id}
    for sid, s in by_id.items():
        deps = list(getattr(s, "depends_on", []) or [])
        for dep in deps:
            if dep not in by_id:
                raise UnknownDependencyError(f"Step '{sid}' depends on unknown step '{dep}'")
            children[dep].add(sid)
        incoming[sid] = len(set(deps))

    ready: List[str] = sorted(sid for sid, count in incoming.items() if count == 0)
    order: List[str] = []

    while ready:
        sid = ready.pop(0)
        order.append(sid)
        for child in children[sid]:
            incoming[child] -= 1
            if incoming[child] == 0:
                ready.append(child)
        ready.sort()

    if len(order) != len(by_id):
        pending = sorted(sid for sid in by_id if sid not in order)
        raise CycleDetectedError(f"Cycle detected in step dependency graph: {pending}")

    return [by_id[sid] for sid in order]
