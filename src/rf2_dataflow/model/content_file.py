"""
Catálogo de content files RF2.

Cada content type declara:
    - header_spec: header canônico (ordem e nomes das colunas)
    - partition: componente esperado no identificador da coluna `id`
    - filter(row): linhas de fonte aceitas na montagem

Um ContentFile também é o ponto de entrada das duas operações de domínio:
    - create(...) → monta o arquivo a partir das fontes (motor de merge)
    - check(...)  → valida o arquivo existente (pipeline de validação)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Type, Union

from rf2_dataflow.assembly.merge import MergeStats, assemble_file
from rf2_dataflow.assembly.source import RowSource
from rf2_dataflow.core.exceptions import (
    InvalidReleaseConfigError,
    SourceReadError,
    UnknownContentTypeError,
)
from rf2_dataflow.validation.issues import IssueAcceptor
from rf2_dataflow.validation.pipeline import DEFAULT_CHUNK_SIZE, check_content_file
from rf2_dataflow.validation.validators import ColumnValidator

from .release import ENCODING, Partition, ReleaseType, Row, parse_line


STATED_RELATIONSHIP = "900000000000010007"

CONCEPT_HEADER = ("id", "effectiveTime", "active", "moduleId", "definitionStatusId")
DESCRIPTION_HEADER = (
    "id",
    "effectiveTime",
    "active",
    "moduleId",
    "conceptId",
    "languageCode",
    "typeId",
    "term",
    "caseSignificanceId",
)
RELATIONSHIP_HEADER = (
    "id",
    "effectiveTime",
    "active",
    "moduleId",
    "sourceId",
    "destinationId",
    "relationshipGroup",
    "typeId",
    "characteristicTypeId",
    "modifierId",
)
CHARACTERISTIC_TYPE_INDEX = RELATIONSHIP_HEADER.index("characteristicTypeId")


class ContentFile:
    """Arquivo de release de um content type, existente ou a ser criado."""

    content_type: str = ""
    header_spec: Sequence[str] = ()
    partition: Optional[Partition] = None

    def __init__(
        self,
        path: Union[str, Path],
        release_type: Optional[ReleaseType] = None,
        *,
        allow_empty_effective_time: bool = True,
    ) -> None:
        self.path = Path(path)
        self.release_type = None if release_type is None else ReleaseType.parse(release_type)
        self.allow_empty_effective_time = allow_empty_effective_time
        self._header: Optional[List[str]] = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self.path)!r}, release_type={self.release_type!r})"

    def filter(self, row: Row) -> bool:
        return True

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------
    def header(self) -> List[str]:
        """Primeira linha do arquivo, ou o header especificado se ele ainda não existe."""
        if self._header is None:
            if not self.path.exists():
                self._header = list(self.header_spec)
            else:
                try:
                    with self.path.open("r", encoding=ENCODING, newline="\n") as f:
                        first = f.readline()
                except (OSError, UnicodeDecodeError) as e:
                    raise SourceReadError(
                        message=f"cannot read header of {self.path}",
                        details={"path": str(self.path), "reason": str(e)},
                    ) from e
                self._header = parse_line(first) if first else []
        return list(self._header)

    def rows(self) -> Iterator[Row]:
        """
        Linhas de dados (header excluído, linhas em branco ignoradas).

        A posição de uma linha nesta sequência (1-based) é o `row` reportado
        pela validação; linhas em branco não contam, portanto não é o número
        da linha física no arquivo.
        """
        try:
            with self.path.open("r", encoding=ENCODING, newline="\n") as f:
                f.readline()
                for line in f:
                    if line.strip("\r\n"):
                        yield parse_line(line)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(
                message=f"failed reading {self.path}",
                details={"path": str(self.path), "reason": str(e)},
            ) from e

    # ------------------------------------------------------------------
    # Operações
    # ------------------------------------------------------------------
    def create(
        self,
        source: RowSource,
        acceptor: IssueAcceptor,
        *,
        release_date: Optional[str] = None,
        parallel: bool = True,
    ) -> MergeStats:
        if self.release_type is None:
            raise InvalidReleaseConfigError(
                message=f"release type is required to create {self.path.name}",
                details={"path": str(self.path), "content_type": self.content_type},
                hint="Informe release_type (Full, Snapshot ou Delta) para o arquivo.",
            )

        return assemble_file(
            self.path,
            content_type=self.content_type,
            header=self.header_spec,
            release_type=self.release_type,
            source=source,
            acceptor=acceptor,
            release_date=release_date,
            row_filter=self.filter,
            parallel_snapshot=parallel,
        )

    def check(
        self,
        acceptor: IssueAcceptor,
        *,
        table: Optional[Mapping[str, ColumnValidator]] = None,
        workers: int = 1,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> bool:
        return check_content_file(
            self,
            acceptor,
            table=table,
            workers=workers,
            chunk_size=chunk_size,
        )


class ConceptFile(ContentFile):
    content_type = "Concept"
    header_spec = CONCEPT_HEADER
    partition = Partition.CONCEPT


class DescriptionFile(ContentFile):
    content_type = "Description"
    header_spec = DESCRIPTION_HEADER
    partition = Partition.DESCRIPTION


class TextDefinitionFile(DescriptionFile):
    content_type = "TextDefinition"


class RelationshipFile(ContentFile):
    """Relacionamentos inferidos: linhas stated ficam no StatedRelationship."""

    content_type = "Relationship"
    header_spec = RELATIONSHIP_HEADER
    partition = Partition.RELATIONSHIP

    def filter(self, row: Row) -> bool:
        return len(row) <= CHARACTERISTIC_TYPE_INDEX or row[CHARACTERISTIC_TYPE_INDEX] != STATED_RELATIONSHIP


class StatedRelationshipFile(RelationshipFile):
    content_type = "StatedRelationship"

    def filter(self, row: Row) -> bool:
        return len(row) > CHARACTERISTIC_TYPE_INDEX and row[CHARACTERISTIC_TYPE_INDEX] == STATED_RELATIONSHIP


CONTENT_FILE_TYPES: Dict[str, Type[ContentFile]] = {
    cls.content_type: cls
    for cls in (ConceptFile, DescriptionFile, TextDefinitionFile, RelationshipFile, StatedRelationshipFile)
}


def content_file_for(
    content_type: str,
    path: Union[str, Path],
    release_type: Optional[ReleaseType] = None,
    **kwargs: Any,
) -> ContentFile:
    """Instancia o ContentFile do content type informado."""
    cls = CONTENT_FILE_TYPES.get(str(content_type))
    if cls is None:
        raise UnknownContentTypeError(
            message=f"unknown content type: {content_type!r}",
            details={"content_type": str(content_type), "known": sorted(CONTENT_FILE_TYPES)},
            hint="Use um dos content types conhecidos.",
        )
    return cls(path, release_type, **kwargs)
