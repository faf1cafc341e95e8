"""
Conferência do header de um arquivo de release contra o header especificado.

A igualdade é exata, ordenada e elemento a elemento. Em caso de divergência
uma única issue de erro é reportada e o chamador deve pular a validação por
linha do arquivo inteiro (os índices de coluna deixam de ser confiáveis).
"""

from __future__ import annotations

from typing import Optional, Sequence

from .issues import IssueAcceptor


HEADER_MISMATCH_MESSAGE = "header does not conform to specification: %s"


def describe_header_difference(actual: Sequence[str], spec: Sequence[str]) -> Optional[str]:
    """Descreve a primeira diferença entre os headers, ou None se forem iguais."""
    for index, (found, expected) in enumerate(zip(actual, spec)):
        if found != expected:
            return f"column {index} expected '{expected}' but found '{found}'"

    if len(actual) != len(spec):
        return f"expected {len(spec)} columns but found {len(actual)}"

    return None


def check_header(actual: Sequence[str], spec: Sequence[str], acceptor: IssueAcceptor) -> bool:
    difference = describe_header_difference(list(actual), list(spec))
    if difference is None:
        return True

    acceptor.error(HEADER_MISMATCH_MESSAGE, difference)
    return False
