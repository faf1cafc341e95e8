# src/rf2_dataflow/__init__.py
"""
RF2 DataFlow — montagem e validação de arquivos de release RF2.

Este pacote raiz define o namespace público do RF2 DataFlow, um conjunto
de componentes para consolidar arquivos de release tabulares (TAB + CRLF)
a partir de múltiplas fontes e para validar arquivos existentes célula a
célula.

Arquitetura em alto nível:
    - model       → tipos de release, linhas e catálogo de content files
    - assembly    → motor de merge Full / Snapshot / Delta
    - validation  → checagem de header e validadores por coluna
    - report      → resumo determinístico de issues em markdown
    - core        → config, pipeline (Steps, RunContext) e Engine
    - steps       → Steps canônicos `release.create` e `release.check`

Limites explícitos:
    - Não faz parsing de linha de comando
    - Não resolve padrões de nome de arquivo nem extrai arquivos zip
    - Não persiste estado entre execuções
"""
# src/rf2_dataflow/__init__.py
from .model.release import ReleaseType

__version__ = "0.1.0"

__all__ = ["ReleaseType", "__version__"]
