"""Fingerprint canônico de linhas RF2.

O fingerprint distingue duplicatas idênticas (descartadas em silêncio) de
duplicatas conflitantes (mesmo id + effectiveTime, conteúdo diferente).

Decisão: SHA-256 sobre o texto serializado exato da linha (TAB + CRLF, UTF-8),
o mesmo texto que é escrito no arquivo de saída.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from rf2_dataflow.model.release import ENCODING, serialize_row


def fingerprint_text(raw_line: str) -> str:
    """SHA-256 hex de uma linha já serializada."""
    return hashlib.sha256(raw_line.encode(ENCODING)).hexdigest()


def fingerprint_row(row: Sequence[str]) -> str:
    """SHA-256 hex da linha serializada (`serialize_row`)."""
    return fingerprint_text(serialize_row(row))
