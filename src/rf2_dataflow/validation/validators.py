"""
Validadores de coluna e catálogo embutido.

Um validador declara o conjunto de colunas que sabe conferir e, para cada
célula, reporta zero ou mais issues pelo acceptor. Conteúdo malformado nunca
levanta exceção.

Validadores embutidos:
    - SctIdValidator        → colunas de identificador (formato, partição,
                              dígito verificador Verhoeff, componente esperado)
    - EffectiveTimeValidator → `effectiveTime` (vazio permitido ou YYYYMMDD válido)
    - StatusValidator        → `active` (0 ou 1)

O catálogo (`VALIDATORS`) é construído uma única vez na importação; duas
entradas reivindicando a mesma coluna são um erro de configuração.
"""

from __future__ import annotations

import re
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Protocol, runtime_checkable

from rf2_dataflow.core.exceptions import ValidatorCollisionError
from rf2_dataflow.model.release import Partition

from .issues import IssueAcceptor


@runtime_checkable
class ColumnValidator(Protocol):
    columns: FrozenSet[str]

    def check(self, file: Any, column: str, value: str, acceptor: IssueAcceptor) -> None:
        ...


# ---------------------------------------------------------------------------
# Verhoeff
# ---------------------------------------------------------------------------

_VERHOEFF_D = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 2, 3, 4, 0, 6, 7, 8, 9, 5),
    (2, 3, 4, 0, 1, 7, 8, 9, 5, 6),
    (3, 4, 0, 1, 2, 8, 9, 5, 6, 7),
    (4, 0, 1, 2, 3, 9, 5, 6, 7, 8),
    (5, 9, 8, 7, 6, 0, 4, 3, 2, 1),
    (6, 5, 9, 8, 7, 1, 0, 4, 3, 2),
    (7, 6, 5, 9, 8, 2, 1, 0, 4, 3),
    (8, 7, 6, 5, 9, 3, 2, 1, 0, 4),
    (9, 8, 7, 6, 5, 4, 3, 2, 1, 0),
)

_VERHOEFF_P = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9),
    (1, 5, 7, 6, 2, 8, 3, 0, 9, 4),
    (5, 8, 0, 3, 7, 9, 6, 1, 4, 2),
    (8, 9, 1, 6, 0, 4, 3, 5, 2, 7),
    (9, 4, 5, 3, 1, 2, 6, 8, 7, 0),
    (4, 2, 8, 6, 5, 7, 3, 9, 0, 1),
    (2, 7, 9, 3, 8, 0, 6, 4, 1, 5),
    (7, 0, 4, 6, 9, 1, 3, 2, 5, 8),
)


def verhoeff_is_valid(digits: str) -> bool:
    """True se `digits` (incluindo o dígito verificador final) passa no Verhoeff."""
    check = 0
    for position, char in enumerate(reversed(digits)):
        check = _VERHOEFF_D[check][_VERHOEFF_P[position % 8][int(char)]]
    return check == 0


# ---------------------------------------------------------------------------
# Validadores embutidos
# ---------------------------------------------------------------------------

_DIGITS = re.compile(r"[0-9]+")

SCTID_MIN_LENGTH = 6
SCTID_MAX_LENGTH = 18
VALID_PARTITIONS = frozenset({"00", "01", "02", "10", "11", "12"})


class SctIdValidator:
    """
    Identificadores (SCTID).

    Regras, na ordem (apenas a primeira violação é reportada por célula):
        1. não vazio, apenas dígitos ASCII
        2. entre 6 e 18 dígitos
        3. sem zero à esquerda
        4. dígitos de partição (2º e 3º a partir da direita) conhecidos
        5. dígito verificador Verhoeff válido
        6. componente esperado: a partição do próprio arquivo para `id`,
           conceito para as demais colunas
    """

    columns = frozenset({
        "id",
        "moduleId",
        "definitionStatusId",
        "conceptId",
        "typeId",
        "caseSignificanceId",
        "sourceId",
        "destinationId",
        "characteristicTypeId",
        "modifierId",
    })

    def expected_partition(self, file: Any, column: str) -> Optional[Partition]:
        if column == "id":
            return getattr(file, "partition", None)
        return Partition.CONCEPT

    def check(self, file: Any, column: str, value: str, acceptor: IssueAcceptor) -> None:
        if not value:
            acceptor.error("%s must not be empty", column)
            return

        if not _DIGITS.fullmatch(value):
            acceptor.error("%s '%s' must contain only digits", column, value)
            return

        if not SCTID_MIN_LENGTH <= len(value) <= SCTID_MAX_LENGTH:
            acceptor.error(
                "%s '%s' must be between %d and %d digits long",
                column, value, SCTID_MIN_LENGTH, SCTID_MAX_LENGTH,
            )
            return

        if value[0] == "0":
            acceptor.error("%s '%s' must not start with a leading zero", column, value)
            return

        partition = value[-3:-1]
        if partition not in VALID_PARTITIONS:
            acceptor.error("%s '%s' has an unknown partition identifier '%s'", column, value, partition)
            return

        if not verhoeff_is_valid(value):
            acceptor.error("%s '%s' has an invalid check digit", column, value)
            return

        expected = self.expected_partition(file, column)
        actual = Partition(partition[1])
        if expected is not None and actual != expected:
            acceptor.error(
                "%s '%s' identifies a %s component, expected a %s component",
                column, value, actual.label, Partition(expected).label,
            )


class EffectiveTimeValidator:
    """`effectiveTime`: vazio (quando o arquivo permite) ou data YYYYMMDD real."""

    columns = frozenset({"effectiveTime"})

    def check(self, file: Any, column: str, value: str, acceptor: IssueAcceptor) -> None:
        if value == "":
            if not getattr(file, "allow_empty_effective_time", True):
                acceptor.error("%s must not be empty", column)
            return

        if len(value) != 8 or not _DIGITS.fullmatch(value):
            acceptor.error("%s '%s' must be in YYYYMMDD format", column, value)
            return

        try:
            datetime.strptime(value, "%Y%m%d")
        except ValueError:
            acceptor.error("%s '%s' is not a valid calendar date", column, value)


class StatusValidator:
    """`active`: 0 ou 1."""

    columns = frozenset({"active"})
    allowed = ("0", "1")

    def check(self, file: Any, column: str, value: str, acceptor: IssueAcceptor) -> None:
        if value not in self.allowed:
            acceptor.error("%s '%s' must be either '0' or '1'", column, value)


class NoopValidator:
    columns: FrozenSet[str] = frozenset()

    def check(self, file: Any, column: str, value: str, acceptor: IssueAcceptor) -> None:
        return None


NOOP = NoopValidator()


# ---------------------------------------------------------------------------
# Catálogo
# ---------------------------------------------------------------------------

def build_validator_table(validators: Iterable[ColumnValidator]) -> Dict[str, ColumnValidator]:
    """
    Achata uma lista de validadores em coluna → validador.

    Raises:
        ValidatorCollisionError: dois validadores reivindicam a mesma coluna.
    """
    table: Dict[str, ColumnValidator] = {}
    for validator in validators:
        for column in sorted(validator.columns):
            current = table.get(column)
            if current is not None and current is not validator:
                raise ValidatorCollisionError(
                    message=f"column '{column}' is claimed by more than one validator",
                    details={
                        "column": column,
                        "validators": [type(current).__name__, type(validator).__name__],
                    },
                    hint="Cada coluna deve pertencer a um único validador.",
                )
            table[column] = validator
    return table


BUILTIN_VALIDATORS = (
    SctIdValidator(),
    EffectiveTimeValidator(),
    StatusValidator(),
)

VALIDATORS: Mapping[str, ColumnValidator] = MappingProxyType(build_validator_table(BUILTIN_VALIDATORS))
