"""
Tipos canônicos de release RF2.

Este módulo define o vocabulário compartilhado entre o motor de merge e o
pipeline de validação:

    - ReleaseType → política de montagem (Full / Snapshot / Delta)
    - Row         → linha já separada em campos (lista de str)
    - TAB / CRLF  → separador de campos e terminador de linha do formato
    - serialize_row / parse_line → conversão texto <-> Row
    - Partition   → componente denotado por um identificador

Invariantes:
    - O campo 0 de uma Row é o identificador; o campo 1 é o effectiveTime
    - Toda linha escrita termina com CRLF
    - `serialize_row` é a única forma de produzir o texto de uma linha,
      para que fingerprints de linhas idênticas coincidam
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence

from rf2_dataflow.core.exceptions import InvalidReleaseConfigError


TAB = "\t"
CRLF = "\r\n"
ENCODING = "utf-8"

ID_INDEX = 0
EFFECTIVE_TIME_INDEX = 1

Row = List[str]


class ReleaseType(str, Enum):
    """
    Política de montagem de um arquivo de release.

    - FULL: todas as versões históricas, um registro por (id, effectiveTime)
    - SNAPSHOT: estado corrente, um registro por id (effectiveTime vencedor)
    - DELTA: apenas as mudanças com effectiveTime igual à data da release
    """

    FULL = "Full"
    SNAPSHOT = "Snapshot"
    DELTA = "Delta"

    @property
    def is_full(self) -> bool:
        return self is ReleaseType.FULL

    @property
    def is_snapshot(self) -> bool:
        return self is ReleaseType.SNAPSHOT

    @property
    def is_delta(self) -> bool:
        return self is ReleaseType.DELTA

    @classmethod
    def parse(cls, value: object) -> "ReleaseType":
        """Converte texto (case-insensitive) em ReleaseType."""
        if isinstance(value, ReleaseType):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidReleaseConfigError(
            message=f"unknown release type: {value!r}",
            details={"value": str(value), "allowed": [m.value for m in cls]},
            hint="Use Full, Snapshot ou Delta.",
        )


def serialize_row(values: Sequence[str]) -> str:
    """Texto exato de uma linha RF2: campos unidos por TAB + CRLF."""
    return f"{TAB.join(values)}{CRLF}"


def parse_line(line: str) -> Row:
    """Separa uma linha lida do disco em campos (aceita LF ou CRLF)."""
    return line.rstrip("\r\n").split(TAB)


class Partition(str, Enum):
    """
    Componente denotado pelo identificador (dígito de partição do SCTID).

    O dígito é o penúltimo do SCTID; o antepenúltimo distingue o namespace
    (0 = curto, 1 = longo com namespace).
    """

    CONCEPT = "0"
    DESCRIPTION = "1"
    RELATIONSHIP = "2"

    @property
    def label(self) -> str:
        return self.name.lower()
