"""
# Pipeline Core — RF2 DataFlow

Contratos e estruturas fundamentais de um pipeline de release:

- **types**: `StepStatus`, `StepKind`, `StepResult`
- **step**: `Step` (Protocol)
- **context**: `RunContext` (config, artefatos, logs, warnings, impacto)
- **registry**: `StepRegistry` (unicidade e ordem de `step.id`)

Steps não conhecem o Engine, não controlam ordem de execução e comunicam-se
apenas via `RunContext`.
"""

from .context import RunContext
from .registry import DuplicateStepIdError, StepRegistry
from .step import Step
from .types import StepKind, StepResult, StepStatus

__all__ = [
    "DuplicateStepIdError",
    "RunContext",
    "Step",
    "StepKind",
    "StepRegistry",
    "StepResult",
    "StepStatus",
]
