# src/rf2_dataflow/core/config/merge.py
"""
Deep-merge canônico de configuração.

Política de merge (v1):
    - dict   → merge recursivo por chave
    - list   → sobrescrita total (ex.: `release.files` do override substitui a lista inteira)
    - escalar → sobrescrita direta
    - conflito de tipos → ConfigTypeConflictError

Invariantes:
    - Nenhum input é mutado
    - A mesma entrada sempre produz a mesma saída
    - `None` no override é tratado como escalar (sobrescreve)
"""

from copy import deepcopy
from typing import Any, Dict, List

from .errors import ConfigTypeConflictError


def _merge_into(result: Dict[str, Any], override: Dict[str, Any], path: List[str]) -> None:
    for key, value in override.items():
        if key not in result:
            result[key] = deepcopy(value)
            continue

        current = result[key]
        where = ".".join(path + [str(key)])

        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value, path + [str(key)])
        elif isinstance(value, list) or value is None or current is None:
            result[key] = deepcopy(value)
        elif isinstance(current, dict) or isinstance(value, dict):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{where}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        elif type(current) is not type(value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{where}': "
                f"{type(current).__name__} vs {type(value).__name__}"
            )
        else:
            result[key] = deepcopy(value)


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Combina `base` (defaults) com `override` (config local) sem mutar inputs.

    Args:
        base: configuração base.
        override: overrides explícitos.

    Returns:
        Novo dicionário resultante.

    Raises:
        ConfigTypeConflictError: tipos incompatíveis para a mesma chave,
            com o caminho pontuado da chave na mensagem.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)
    _merge_into(result, override, [])
    return result
