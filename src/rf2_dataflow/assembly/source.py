"""
Row Source: entrega de linhas brutas a partir dos arquivos fonte.

Responsabilidades:
- Ler cada arquivo fonte configurado para um content type (UTF-8, TAB, LF/CRLF)
- Conferir o header de cada fonte contra o header esperado
- Entregar cada linha (já separada em campos) a um consumer
- Opcionalmente, ler arquivos em paralelo (`ThreadPoolExecutor`)

Decisões:
- O paralelismo é por arquivo: um worker lê um arquivo inteiro, em ordem.
  Com `parallel=False` a ordem de entrega é a ordem dos arquivos configurados
  seguida da ordem das linhas em cada arquivo.
- `parallel` é um pedido, não uma garantia: com um único arquivo (ou
  `workers <= 1`) a leitura é sequencial.
- Falhas de leitura são fatais (SourceReadError); header de fonte divergente
  também (HeaderMismatchError). Exceções do consumer propagam inalteradas.

Limites explícitos:
- NÃO descobre arquivos em disco por padrão de nome
- NÃO extrai arquivos zip
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Protocol, Sequence, Union

from rf2_dataflow.core.exceptions import HeaderMismatchError, SourceReadError
from rf2_dataflow.model.release import ENCODING, Row, parse_line


RowConsumer = Callable[[Row], None]


class RowSource(Protocol):
    """Fornecedor de linhas brutas por content type."""

    def visit_rows(
        self,
        content_type: str,
        header: Sequence[str],
        parallel: bool,
        consumer: RowConsumer,
    ) -> None:
        ...


class FileRowSource:
    """RowSource baseado em arquivos TAB-delimitados já conhecidos por content type."""

    def __init__(
        self,
        paths_by_type: Mapping[str, Iterable[Union[str, Path]]],
        *,
        workers: int = 4,
    ) -> None:
        self.paths_by_type: Dict[str, List[Path]] = {
            str(ct): [Path(p) for p in paths] for ct, paths in paths_by_type.items()
        }
        self.workers = max(1, int(workers))

    def paths_for(self, content_type: str) -> List[Path]:
        return list(self.paths_by_type.get(content_type, []))

    def visit_rows(
        self,
        content_type: str,
        header: Sequence[str],
        parallel: bool,
        consumer: RowConsumer,
    ) -> None:
        paths = self.paths_for(content_type)
        expected = list(header)

        if not parallel or self.workers <= 1 or len(paths) <= 1:
            for path in paths:
                _visit_file(path, expected, consumer)
            return

        with ThreadPoolExecutor(max_workers=min(self.workers, len(paths))) as pool:
            futures = [pool.submit(_visit_file, path, expected, consumer) for path in paths]
            # result() repropaga a primeira falha na ordem dos arquivos
            for future in futures:
                future.result()


def _visit_file(path: Path, expected_header: List[str], consumer: RowConsumer) -> None:
    try:
        f = path.open("r", encoding=ENCODING, newline="\n")
    except OSError as e:
        raise SourceReadError(
            message=f"cannot open source file: {path}",
            details={"path": str(path), "reason": str(e)},
        ) from e

    with f:
        try:
            first = f.readline()
            if not first:
                raise SourceReadError(
                    message=f"source file is empty: {path}",
                    details={"path": str(path), "reason": "missing header line"},
                )

            actual_header = parse_line(first)
            if actual_header != expected_header:
                raise HeaderMismatchError(
                    message=f"source header does not conform to specification: {path}",
                    details={
                        "path": str(path),
                        "expected": expected_header,
                        "actual": actual_header,
                    },
                    hint="Confirme o content type configurado para este arquivo fonte.",
                )

            for line in f:
                if not line.strip("\r\n"):
                    continue
                consumer(parse_line(line))
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(
                message=f"failed reading source file: {path}",
                details={"path": str(path), "reason": str(e)},
            ) from e
