"""
Montagem de arquivos de release.

- source: RowSource / FileRowSource (leitura das fontes)
- fingerprint: SHA-256 da linha serializada
- merge: motor de merge Full / Snapshot / Delta e escrita do arquivo
"""

from .fingerprint import fingerprint_row, fingerprint_text
from .merge import IdentityRegistry, MergeStats, ReleaseMerge, assemble_file, merge_rows
from .source import FileRowSource, RowSource

__all__ = [
    "FileRowSource",
    "IdentityRegistry",
    "MergeStats",
    "ReleaseMerge",
    "RowSource",
    "assemble_file",
    "fingerprint_row",
    "fingerprint_text",
    "merge_rows",
]
