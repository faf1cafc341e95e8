"""
RF2 DataFlow — Canonical Exceptions (v1)

Exceções tipadas internas do RF2 DataFlow.

Objetivo:
- Permitir que o motor de merge, o pipeline de validação e os Steps levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para Rf2ErrorPayload
- Evitar ValueError/RuntimeError genéricos em falhas de I/O e configuração

Taxonomia:
- SchemaError        → header não conforme
- ConfigurationError → catálogo/configuração inconsistente (fail fast)
- ReleaseIOError     → leitura de fonte, criação ou escrita de saída

Conflitos de conteúdo NÃO são exceções: são reportados como warnings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(eq=False)
class Rf2Exception(Exception):
    """Base class para exceções internas do RF2 DataFlow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class SchemaError(Rf2Exception):
    """Violação do contrato de schema de um arquivo."""


@dataclass(eq=False)
class HeaderMismatchError(SchemaError):
    """Header real difere do header especificado para o content type."""


# ---------------------------------------------------------------------------
# Configuração
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ConfigurationError(Rf2Exception):
    """Configuração inválida ou inconsistente; falha antes de processar arquivos."""


@dataclass(eq=False)
class ValidatorCollisionError(ConfigurationError):
    """Dois validadores declaram a mesma coluna no catálogo."""


@dataclass(eq=False)
class UnknownContentTypeError(ConfigurationError):
    """Content type não pertence ao catálogo de arquivos suportados."""


@dataclass(eq=False)
class InvalidReleaseConfigError(ConfigurationError):
    """Seção `release` da configuração é estruturalmente inválida."""


# ---------------------------------------------------------------------------
# I/O
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class ReleaseIOError(Rf2Exception):
    """Falha de I/O fatal para a operação do arquivo corrente."""


@dataclass(eq=False)
class SourceReadError(ReleaseIOError):
    """Arquivo fonte ausente, ilegível ou com header incompatível."""


@dataclass(eq=False)
class OutputExistsError(ReleaseIOError):
    """Arquivo de saída já existe; nunca é sobrescrito."""


@dataclass(eq=False)
class OutputWriteError(ReleaseIOError):
    """Falha ao escrever o arquivo de saída."""
