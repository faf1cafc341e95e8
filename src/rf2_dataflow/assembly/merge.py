"""
Motor de merge de release (Full / Snapshot / Delta).

Consolida as linhas de um ou mais arquivos fonte de um mesmo content type em
uma única sequência deduplicada, segundo a política de release do arquivo de
saída.

Mecanismo compartilhado (por linha, após o filtro do content type):
    1. id = row[0], effectiveTime = row[1], fp = SHA-256 da linha serializada
    2. (id, effectiveTime) já registrado → descarta; se o fingerprint difere,
       reporta warning de conflito (a primeira ocorrência sempre vence)
    3. política:
        - Full:     registra e emite imediatamente, na ordem da fonte
        - Snapshot: mantém um vencedor por id (vazio domina; senão o maior
                    effectiveTime lexicográfico); nada é emitido nesta passada
        - Delta:    apenas effectiveTime == data da release; registra e emite
    4. Snapshot: segunda passada sequencial sobre a fonte emitindo, na ordem
       da fonte, a linha de cada vencedor (no máximo uma por id)

Concorrência:
    - Fingerprint e filtro são calculados fora da seção crítica
    - Lookup + decisão + mutação do registry + emissão formam uma unidade
      atômica protegida por um único lock
    - Apenas a primeira passada do Snapshot pede leitura paralela; a segunda
      passada começa somente após a primeira terminar

O registry guarda todo (id, effectiveTime) visto em qualquer política, de modo
que o Snapshot também detecta conflitos em effectiveTimes já superados.
"""

from __future__ import annotations

import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from rf2_dataflow.core.exceptions import (
    InvalidReleaseConfigError,
    OutputExistsError,
    OutputWriteError,
)
from rf2_dataflow.model.release import (
    EFFECTIVE_TIME_INDEX,
    ENCODING,
    ID_INDEX,
    ReleaseType,
    Row,
    serialize_row,
)
from rf2_dataflow.validation.issues import IssueAcceptor

from .fingerprint import fingerprint_text
from .source import RowSource


RowFilter = Callable[[Row], bool]
RowEmitter = Callable[[Row], None]

CONFLICT_MESSAGE = (
    "duplicate identifier+effective-time with differing content; "
    "keeping the first occurrence (id '%s', effectiveTime '%s')"
)
MALFORMED_ROW_MESSAGE = "skipping source row with %d fields, expected %d (id '%s')"
UNCLAIMED_WINNERS_MESSAGE = (
    "snapshot second pass did not re-encounter %d winning row(s); "
    "source changed between passes"
)


def _accept_all(row: Row) -> bool:
    return True


@dataclass
class MergeStats:
    """
    Contadores de uma montagem (payload de impacto do Step).

    `conflict_keys` guarda cada (id, effectiveTime) conflitante, na ordem de
    detecção; fica fora de `to_dict`.
    """

    rows_read: int = 0
    rows_filtered: int = 0
    rows_malformed: int = 0
    rows_outside_delta: int = 0
    duplicates_skipped: int = 0
    conflicts: int = 0
    rows_written: int = 0
    conflict_keys: List[Tuple[str, str]] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, int]:
        counters = asdict(self)
        counters.pop("conflict_keys")
        return counters


class IdentityRegistry:
    """
    Registro transitório id → (effectiveTime → fingerprint).

    `_seen` acumula todo par visto (detecção de duplicatas e conflitos);
    `_winners` guarda o vencedor corrente de cada id na política Snapshot.
    Não é thread-safe: o chamador serializa o acesso.
    """

    def __init__(self) -> None:
        self._seen: Dict[str, Dict[str, str]] = {}
        self._winners: Dict[str, Tuple[str, str]] = {}

    def lookup(self, component_id: str, effective_time: str) -> Optional[str]:
        times = self._seen.get(component_id)
        if times is None:
            return None
        return times.get(effective_time)

    def register(self, component_id: str, effective_time: str, fp: str) -> None:
        self._seen.setdefault(component_id, {})[effective_time] = fp

    def offer(self, component_id: str, effective_time: str, fp: str) -> bool:
        """Aplica a regra de substituição do Snapshot; retorna True se venceu."""
        current = self._winners.get(component_id)
        if (
            current is None
            or effective_time == ""
            or (current[0] != "" and effective_time > current[0])
        ):
            self._winners[component_id] = (effective_time, fp)
            return True
        return False

    def claim(self, component_id: str, effective_time: str) -> bool:
        """Remove o vencedor de `component_id` se ele for `effective_time`."""
        current = self._winners.get(component_id)
        if current is not None and current[0] == effective_time:
            del self._winners[component_id]
            return True
        return False

    @property
    def pending(self) -> int:
        return len(self._winners)

    def __len__(self) -> int:
        return sum(len(times) for times in self._seen.values())


class ReleaseMerge:
    """Uma operação de merge para um único arquivo de saída."""

    def __init__(
        self,
        *,
        content_type: str,
        header: Sequence[str],
        release_type: ReleaseType,
        source: RowSource,
        acceptor: IssueAcceptor,
        release_date: Optional[str] = None,
        row_filter: Optional[RowFilter] = None,
        parallel_snapshot: bool = True,
    ) -> None:
        self.content_type = content_type
        self.header = list(header)
        self.release_type = ReleaseType.parse(release_type)
        self.release_date = release_date or ""
        self.source = source
        self.acceptor = acceptor
        self.row_filter = row_filter or _accept_all
        self.parallel_snapshot = parallel_snapshot

        if self.release_type.is_delta and not self.release_date:
            raise InvalidReleaseConfigError(
                message="Delta release requires a release date",
                details={"content_type": content_type},
                hint="Declare release.date (YYYYMMDD) na configuração.",
            )

        self.registry = IdentityRegistry()
        self.stats = MergeStats()
        self._lock = threading.Lock()

    def run(self, emit: RowEmitter) -> MergeStats:
        snapshot = self.release_type.is_snapshot

        self.source.visit_rows(
            self.content_type,
            self.header,
            snapshot and self.parallel_snapshot,
            lambda row: self._ingest(row, emit),
        )

        if snapshot:
            # segunda passada: somente após a primeira estar totalmente resolvida
            self.source.visit_rows(
                self.content_type,
                self.header,
                False,
                lambda row: self._emit_winner(row, emit),
            )
            if self.registry.pending:
                self.acceptor.error(UNCLAIMED_WINNERS_MESSAGE, self.registry.pending)

        return self.stats

    # ------------------------------------------------------------------
    # Primeira passada
    # ------------------------------------------------------------------
    def _ingest(self, row: Row, emit: RowEmitter) -> None:
        if len(row) != len(self.header):
            with self._lock:
                self.stats.rows_read += 1
                self.stats.rows_malformed += 1
            self.acceptor.error(MALFORMED_ROW_MESSAGE, len(row), len(self.header), row[ID_INDEX])
            return

        accepted = self.row_filter(row)
        component_id = row[ID_INDEX]
        effective_time = row[EFFECTIVE_TIME_INDEX]
        raw_line = serialize_row(row)
        fp = fingerprint_text(raw_line)

        conflict = False
        with self._lock:
            self.stats.rows_read += 1
            if not accepted:
                self.stats.rows_filtered += 1
                return

            if self.release_type.is_delta and effective_time != self.release_date:
                self.stats.rows_outside_delta += 1
                return

            known = self.registry.lookup(component_id, effective_time)
            if known is not None:
                self.stats.duplicates_skipped += 1
                if known != fp:
                    self.stats.conflicts += 1
                    self.stats.conflict_keys.append((component_id, effective_time))
                    conflict = True
            else:
                self.registry.register(component_id, effective_time, fp)
                if self.release_type.is_snapshot:
                    self.registry.offer(component_id, effective_time, fp)
                else:
                    emit(row)
                    self.stats.rows_written += 1

        if conflict:
            self.acceptor.warn(CONFLICT_MESSAGE, component_id, effective_time)

    # ------------------------------------------------------------------
    # Segunda passada (Snapshot)
    # ------------------------------------------------------------------
    def _emit_winner(self, row: Row, emit: RowEmitter) -> None:
        if len(row) != len(self.header) or not self.row_filter(row):
            return

        with self._lock:
            if self.registry.claim(row[ID_INDEX], row[EFFECTIVE_TIME_INDEX]):
                emit(row)
                self.stats.rows_written += 1


def merge_rows(
    *,
    content_type: str,
    header: Sequence[str],
    release_type: ReleaseType,
    source: RowSource,
    acceptor: IssueAcceptor,
    release_date: Optional[str] = None,
    row_filter: Optional[RowFilter] = None,
    parallel_snapshot: bool = True,
) -> List[Row]:
    """Executa o merge em memória e retorna as linhas na ordem de saída."""
    rows: List[Row] = []
    ReleaseMerge(
        content_type=content_type,
        header=header,
        release_type=release_type,
        source=source,
        acceptor=acceptor,
        release_date=release_date,
        row_filter=row_filter,
        parallel_snapshot=parallel_snapshot,
    ).run(lambda row: rows.append(list(row)))
    return rows


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def assemble_file(
    destination: Union[str, Path],
    *,
    content_type: str,
    header: Sequence[str],
    release_type: ReleaseType,
    source: RowSource,
    acceptor: IssueAcceptor,
    release_date: Optional[str] = None,
    row_filter: Optional[RowFilter] = None,
    parallel_snapshot: bool = True,
) -> MergeStats:
    """
    Cria `destination` (nunca sobrescreve), escreve o header e as linhas do merge.

    O handle de saída é fechado em qualquer caminho de saída; se a montagem
    falhar, o arquivo parcial é removido.

    Raises:
        InvalidReleaseConfigError: release type inválido ou Delta sem data;
            nenhum arquivo é criado.
        OutputExistsError: `destination` já existe.
        OutputWriteError: falha ao criar ou escrever o arquivo.
        SourceReadError / HeaderMismatchError: falha ao ler as fontes.
    """
    path = Path(destination)

    # configuração inválida falha antes de qualquer I/O
    merge = ReleaseMerge(
        content_type=content_type,
        header=header,
        release_type=release_type,
        source=source,
        acceptor=acceptor,
        release_date=release_date,
        row_filter=row_filter,
        parallel_snapshot=parallel_snapshot,
    )

    try:
        f = path.open("x", encoding=ENCODING, newline="")
    except FileExistsError as e:
        raise OutputExistsError(
            message=f"output file already exists: {path}",
            details={"path": str(path)},
            hint="Arquivos de saída nunca são sobrescritos; remova-o ou use outro output_dir.",
        ) from e
    except OSError as e:
        raise OutputWriteError(
            message=f"cannot create output file: {path}",
            details={"path": str(path), "reason": str(e)},
        ) from e

    def _write_row(row: Row) -> None:
        try:
            f.write(serialize_row(row))
        except OSError as e:
            raise OutputWriteError(
                message=f"failed writing output file: {path}",
                details={"path": str(path), "reason": str(e)},
            ) from e

    try:
        with f:
            _write_row(list(header))
            stats = merge.run(_write_row)
    except OSError as e:
        _discard(path)
        raise OutputWriteError(
            message=f"failed closing output file: {path}",
            details={"path": str(path), "reason": str(e)},
        ) from e
    except BaseException:
        _discard(path)
        raise

    return stats
