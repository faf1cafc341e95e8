# src/rf2_dataflow/core/config/hashing.py
"""
Hash canônico da configuração efetiva.

O hash identifica estruturalmente a configuração usada por uma execução e é
publicado no payload do Step `release.create`, permitindo comparar duas
montagens de release.

Política (v1): JSON canônico (sort_keys, separadores compactos, UTF-8) + SHA-256.
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 (64 caracteres hex) da configuração efetiva.

    Configurações estruturalmente equivalentes produzem o mesmo hash,
    independente da ordem original das chaves. Valores não serializáveis
    em JSON (ex.: Path) são convertidos via `str`.

    Raises:
        TypeError: se `config` não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
