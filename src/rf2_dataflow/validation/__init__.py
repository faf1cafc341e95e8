"""
Validação de arquivos de release.

- issues: Issue, Severity, IssueAcceptor, IssueCollector
- header: conferência do header
- validators: validadores de coluna e catálogo embutido
- pipeline: resolução de validadores e varredura do arquivo
"""

from .header import check_header
from .issues import BoundIssueAcceptor, Issue, IssueAcceptor, IssueCollector, Severity
from .validators import BUILTIN_VALIDATORS, NOOP, VALIDATORS, ColumnValidator, build_validator_table

__all__ = [
    "BUILTIN_VALIDATORS",
    "BoundIssueAcceptor",
    "ColumnValidator",
    "Issue",
    "IssueAcceptor",
    "IssueCollector",
    "NOOP",
    "Severity",
    "VALIDATORS",
    "build_validator_table",
    "check_header",
]
