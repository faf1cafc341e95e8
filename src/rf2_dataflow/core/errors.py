"""
RF2 DataFlow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do RF2 DataFlow.
Erros são artefatos de domínio e fazem parte do contrato operacional:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Conflitos de conteúdo (mesmo id + effectiveTime com conteúdo diferente) não
interrompem a montagem: chegam como warnings do IssueAcceptor e, no payload
do Step, como `content_conflict(...)` (fatal=False).
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from . import exceptions as exc


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Rf2ErrorPayload:
    """
    Payload canônico de erro do RF2 DataFlow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - fatal: indica se a operação do arquivo corrente foi abortada
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    fatal: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Schema / conteúdo
HEADER_MISMATCH = "HEADER_MISMATCH"
CONTENT_CONFLICT = "CONTENT_CONFLICT"

# Configuração
VALIDATOR_COLLISION = "VALIDATOR_COLLISION"
UNKNOWN_CONTENT_TYPE = "UNKNOWN_CONTENT_TYPE"
INVALID_RELEASE_CONFIG = "INVALID_RELEASE_CONFIG"

# I/O
SOURCE_READ_ERROR = "SOURCE_READ_ERROR"
OUTPUT_EXISTS = "OUTPUT_EXISTS"
OUTPUT_WRITE_ERROR = "OUTPUT_WRITE_ERROR"

# Engine / Execução
ENGINE_EXECUTION_ERROR = "ENGINE_EXECUTION_ERROR"
ENGINE_CONFIGURATION_ERROR = "ENGINE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def content_conflict(
    *,
    component_id: str,
    effective_time: str,
    path: Optional[str] = None,
    hint: str = "Revise as fontes: a primeira ocorrência foi mantida e as demais descartadas.",
) -> Rf2ErrorPayload:
    return Rf2ErrorPayload(
        type=CONTENT_CONFLICT,
        message="Duplicate identifier+effective-time with differing content",
        details={
            "id": component_id,
            "effective_time": effective_time,
            "path": path,
        },
        hint=hint,
        fatal=False,
    )


def engine_execution_error(
    *,
    step: Optional[str] = None,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique os eventos do RunContext para diagnosticar a falha. Nenhum fallback é aplicado.",
) -> Rf2ErrorPayload:
    return Rf2ErrorPayload(
        type=ENGINE_EXECUTION_ERROR,
        message="Falha inesperada durante a execução do pipeline",
        details={
            "step": step,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def engine_configuration_error(
    *,
    message: str = "Configuração inválida para execução do pipeline",
    details: Optional[Dict[str, Any]] = None,
    hint: str = "Revise a configuração do run/steps antes de reexecutar.",
) -> Rf2ErrorPayload:
    return Rf2ErrorPayload(
        type=ENGINE_CONFIGURATION_ERROR,
        message=message,
        details=details or {},
        hint=hint,
    )


# ---------------------------------------------------------------------------
# Exceção -> payload
# ---------------------------------------------------------------------------

_EXCEPTION_TYPES: Dict[type, str] = {
    exc.HeaderMismatchError: HEADER_MISMATCH,
    exc.ValidatorCollisionError: VALIDATOR_COLLISION,
    exc.UnknownContentTypeError: UNKNOWN_CONTENT_TYPE,
    exc.InvalidReleaseConfigError: INVALID_RELEASE_CONFIG,
    exc.SourceReadError: SOURCE_READ_ERROR,
    exc.OutputExistsError: OUTPUT_EXISTS,
    exc.OutputWriteError: OUTPUT_WRITE_ERROR,
    exc.ConfigurationError: ENGINE_CONFIGURATION_ERROR,
}


def payload_from_exception(e: BaseException, *, step: Optional[str] = None) -> Rf2ErrorPayload:
    """Converte exceções em Rf2ErrorPayload (serializável, acionável).

    Regras:
    - Rf2Exception: código estável pelo catálogo; message/details/hint preservados.
    - Outras exceções: ENGINE_EXECUTION_ERROR sem expor stack trace.
    """
    if isinstance(e, exc.Rf2Exception):
        code = None
        for cls in type(e).__mro__:
            code = _EXCEPTION_TYPES.get(cls)
            if code is not None:
                break
        return Rf2ErrorPayload(
            type=code or ENGINE_EXECUTION_ERROR,
            message=e.message or "Erro de execução",
            details=dict(e.details or {}),
            hint=e.hint,
            fatal=True,
        )

    return engine_execution_error(
        step=step,
        exc_type=e.__class__.__name__,
        exc_message=str(e) or None,
    )
