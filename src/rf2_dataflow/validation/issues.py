"""
Issues de validação e montagem.

Este módulo define:
    - Severity       → `warn` | `error`
    - Issue          → registro imutável de um problema reportado
    - IssueAcceptor  → protocolo mínimo de sink (warn / error)
    - IssueCollector → implementação thread-safe que acumula issues
    - BoundIssueAcceptor → acceptor que carimba contexto (arquivo, coluna, linha)

Princípios:
    - Reportar nunca levanta exceção; conteúdo malformado é sempre uma
      condição reportada, não controle de fluxo
    - Mensagens usam formatação `%` (fmt, *args), formatadas no momento do report
    - A ordem de chegada pode variar sob execução paralela; `sorted_issues`
      restaura a ordem por arquivo, linha e coluna
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


class Severity(str, Enum):
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    """Problema reportado para um arquivo (e, opcionalmente, coluna/linha)."""

    severity: Severity
    message: str
    file: Optional[str] = None
    column: Optional[str] = None
    column_index: Optional[int] = None
    row: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "file": self.file,
            "column": self.column,
            "column_index": self.column_index,
            "row": self.row,
        }


@runtime_checkable
class IssueAcceptor(Protocol):
    """Sink de issues usado pelo motor de merge e pelos validadores."""

    def warn(self, message: str, *args: Any) -> None:
        ...

    def error(self, message: str, *args: Any) -> None:
        ...


def _format(message: str, args: tuple) -> str:
    if not args:
        return message
    try:
        return message % args
    except (TypeError, ValueError):
        # placeholders incompatíveis: preserva a mensagem e os argumentos
        return f"{message} {args!r}"


class IssueCollector:
    """Acumula issues de forma thread-safe.

    `file` é o contexto padrão aplicado a issues reportadas diretamente
    (sem `bind`).
    """

    def __init__(self, file: Optional[str] = None) -> None:
        self.file = file
        self._issues: List[Issue] = []
        self._lock = threading.Lock()

    # -----------------------------
    # IssueAcceptor
    # -----------------------------
    def warn(self, message: str, *args: Any) -> None:
        self.report(Severity.WARN, _format(message, args))

    def error(self, message: str, *args: Any) -> None:
        self.report(Severity.ERROR, _format(message, args))

    # -----------------------------
    # API estendida
    # -----------------------------
    def report(
        self,
        severity: Severity,
        message: str,
        *,
        file: Optional[str] = None,
        column: Optional[str] = None,
        column_index: Optional[int] = None,
        row: Optional[int] = None,
    ) -> None:
        issue = Issue(
            severity=Severity(severity),
            message=message,
            file=file if file is not None else self.file,
            column=column,
            column_index=column_index,
            row=row,
        )
        with self._lock:
            self._issues.append(issue)

    def bind(
        self,
        *,
        file: Optional[str] = None,
        column: Optional[str] = None,
        column_index: Optional[int] = None,
        row: Optional[int] = None,
    ) -> "BoundIssueAcceptor":
        return BoundIssueAcceptor(
            self,
            file=file,
            column=column,
            column_index=column_index,
            row=row,
        )

    @property
    def issues(self) -> List[Issue]:
        with self._lock:
            return list(self._issues)

    def count(self, severity: Optional[Severity] = None) -> int:
        with self._lock:
            if severity is None:
                return len(self._issues)
            return sum(1 for i in self._issues if i.severity == severity)

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARN]

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    def sorted_issues(self) -> List[Issue]:
        """Issues em ordem estável: arquivo, linha, coluna (issues sem linha primeiro)."""
        def _key(i: Issue):
            return (
                i.file or "",
                -1 if i.row is None else i.row,
                -1 if i.column_index is None else i.column_index,
            )

        return sorted(self.issues, key=_key)


class BoundIssueAcceptor:
    """IssueAcceptor que aplica contexto fixo a cada issue reportada."""

    def __init__(
        self,
        collector: IssueCollector,
        *,
        file: Optional[str] = None,
        column: Optional[str] = None,
        column_index: Optional[int] = None,
        row: Optional[int] = None,
    ) -> None:
        self._collector = collector
        self.file = file
        self.column = column
        self.column_index = column_index
        self.row = row

    def warn(self, message: str, *args: Any) -> None:
        self._report(Severity.WARN, _format(message, args))

    def error(self, message: str, *args: Any) -> None:
        self._report(Severity.ERROR, _format(message, args))

    def bind(
        self,
        *,
        file: Optional[str] = None,
        column: Optional[str] = None,
        column_index: Optional[int] = None,
        row: Optional[int] = None,
    ) -> "BoundIssueAcceptor":
        return BoundIssueAcceptor(
            self._collector,
            file=file if file is not None else self.file,
            column=column if column is not None else self.column,
            column_index=column_index if column_index is not None else self.column_index,
            row=row if row is not None else self.row,
        )

    def _report(self, severity: Severity, message: str) -> None:
        self._collector.report(
            severity,
            message,
            file=self.file,
            column=self.column,
            column_index=self.column_index,
            row=self.row,
        )
