# src/rf2_dataflow/core/config/__init__.py

"""
Camada de configuração do RF2 DataFlow.

A configuração é:
    - declarativa (YAML ou JSON)
    - determinística (defaults + override local via deep-merge)
    - identificável (hash SHA-256 canônico)

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Materialização tipada da seção `release` (ReleaseSettings)

Limites explícitos:
    - Não descobre arquivos em disco nem resolve padrões de nome
    - Não executa pipeline
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import compute_config_hash  # noqa: F401
from .loader import load_config  # noqa: F401
from .merge import deep_merge  # noqa: F401
from .release import CheckTarget, OutputFileSpec, ReleaseSettings, load_release_settings  # noqa: F401
