# src/rf2_dataflow/core/config/errors.py
"""
Exceções canônicas da camada de configuração do RF2 DataFlow.

As exceções aqui definidas representam violações estruturais da
configuração (arquivo ausente, formato desconhecido, tipos conflitantes
no merge) e são sempre fatais.

Validação semântica da seção `release` vive em `release.py` e usa
`InvalidReleaseConfigError` de `rf2_dataflow.core.exceptions`.
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do RF2 DataFlow.

    Todas as exceções levantadas durante carregamento e resolução
    estrutural da configuração herdam desta classe.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de configuração base (defaults) não encontrado.

    O arquivo de defaults é obrigatório; sem ele não existe configuração
    efetiva válida. Nenhum default é inferido automaticamente.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato do arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"engine": {"workers": 4}}
        - override: {"engine": "fast"}

    Nenhum merge parcial é produzido em caso de conflito.
    """
