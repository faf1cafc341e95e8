"""
Pipeline de validação por coluna.

Fluxo para um arquivo:
    1. conferência do header (divergência → um erro, nenhuma checagem por linha)
    2. resolução coluna → validador (coluna sem validador → um warning + NOOP)
    3. varredura completa: cada célula passa pelo validador da sua coluna

As linhas são independentes entre si; a varredura é feita em blocos
(`chunk_size`) num `ThreadPoolExecutor`, com no máximo `2 * workers` blocos
em voo. A ordem de chegada das issues pode variar; o contexto de linha e
coluna carimbado em cada issue permite reordená-las depois
(`IssueCollector.sorted_issues`).
"""

from __future__ import annotations

from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from itertools import islice
from typing import Any, Deque, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from rf2_dataflow.model.release import Row

from .header import check_header
from .issues import IssueAcceptor
from .validators import NOOP, VALIDATORS, ColumnValidator


UNMAPPED_COLUMN_MESSAGE = "No validator is registered for column header '%s'."
ROW_ARITY_MESSAGE = "row has %d fields, expected %d"

DEFAULT_CHUNK_SIZE = 1000

NumberedRow = Tuple[int, Row]


def _bind(acceptor: IssueAcceptor, **context: Any) -> IssueAcceptor:
    bind = getattr(acceptor, "bind", None)
    if bind is None:
        return acceptor
    return bind(**context)


def resolve_validators(
    header: Sequence[str],
    acceptor: IssueAcceptor,
    table: Optional[Mapping[str, ColumnValidator]] = None,
) -> Dict[int, ColumnValidator]:
    """Mapeia cada índice de coluna ao seu validador (NOOP quando não há)."""
    table = VALIDATORS if table is None else table

    resolved: Dict[int, ColumnValidator] = {}
    for index, column in enumerate(header):
        validator = table.get(column)
        if validator is None:
            _bind(acceptor, column=column, column_index=index).warn(UNMAPPED_COLUMN_MESSAGE, column)
            validator = NOOP
        resolved[index] = validator
    return resolved


def validate_row(
    file: Any,
    header: Sequence[str],
    row: Sequence[str],
    validators: Mapping[int, ColumnValidator],
    acceptor: IssueAcceptor,
    row_number: Optional[int] = None,
) -> None:
    if len(row) != len(header):
        _bind(acceptor, row=row_number).error(ROW_ARITY_MESSAGE, len(row), len(header))
        return

    for index, value in enumerate(row):
        column = header[index]
        validator = validators.get(index, NOOP)
        if validator is NOOP:
            continue
        validator.check(
            file,
            column,
            value,
            _bind(acceptor, column=column, column_index=index, row=row_number),
        )


def _chunks(rows: Iterable[NumberedRow], size: int) -> Iterator[List[NumberedRow]]:
    it = iter(rows)
    while True:
        chunk = list(islice(it, size))
        if not chunk:
            return
        yield chunk


def _validate_chunk(
    file: Any,
    header: Sequence[str],
    chunk: List[NumberedRow],
    validators: Mapping[int, ColumnValidator],
    acceptor: IssueAcceptor,
) -> int:
    for row_number, row in chunk:
        validate_row(file, header, row, validators, acceptor, row_number)
    return len(chunk)


def check_content_file(
    file: Any,
    acceptor: IssueAcceptor,
    *,
    table: Optional[Mapping[str, ColumnValidator]] = None,
    workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> bool:
    """
    Valida um content file inteiro.

    `file` precisa expor `path`, `header_spec`, `header()` e `rows()`
    (ver `rf2_dataflow.model.content_file.ContentFile`).
    O `row` das issues é o ordinal da linha de dados em `rows()`.

    Returns:
        True se o header conferiu e a varredura foi feita; False caso contrário.
    """
    file_acceptor = _bind(acceptor, file=str(file.path))

    header = list(file.header())
    if not check_header(header, file.header_spec, file_acceptor):
        return False

    validators = resolve_validators(header, file_acceptor, table)
    numbered = enumerate(file.rows(), start=1)

    if workers <= 1:
        for row_number, row in numbered:
            validate_row(file, header, row, validators, file_acceptor, row_number)
        return True

    size = max(1, int(chunk_size))
    in_flight: Deque[Future] = deque()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for chunk in _chunks(numbered, size):
            in_flight.append(pool.submit(_validate_chunk, file, header, chunk, validators, file_acceptor))
            if len(in_flight) >= 2 * workers:
                in_flight.popleft().result()
        while in_flight:
            in_flight.popleft().result()

    return True
