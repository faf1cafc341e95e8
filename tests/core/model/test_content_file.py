# tests/core/model/test_content_file.py
"""
Testes do catálogo de content files.

Cobre:
- header() lê a primeira linha do arquivo, ou o header especificado se ele não existe
- filtros de Relationship / StatedRelationship por characteristicTypeId
- content_file_for com content type desconhecido
- create() exige release type e monta o arquivo pelo motor de merge
- check() valida o arquivo criado
"""

import pytest

from tests.fixtures.rf2_files import (
    CONCEPT_ID,
    CORE_MODULE,
    INFERRED,
    IS_A,
    RELATIONSHIP_ID,
    STATED,
    ListRowSource,
    read_release_lines,
    write_release_file,
)

try:
    from rf2_dataflow.core.exceptions import InvalidReleaseConfigError, UnknownContentTypeError
    from rf2_dataflow.model.content_file import (
        CONCEPT_HEADER,
        CONTENT_FILE_TYPES,
        RELATIONSHIP_HEADER,
        ConceptFile,
        RelationshipFile,
        StatedRelationshipFile,
        TextDefinitionFile,
        content_file_for,
    )
    from rf2_dataflow.model.release import Partition, ReleaseType
    from rf2_dataflow.validation.issues import IssueCollector
except Exception as e:
    content_file_for = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing content file catalogue. Import error: {_IMPORT_ERR}")


def _relationship(characteristic_type):
    return [RELATIONSHIP_ID, "20240131", "1", CORE_MODULE, CONCEPT_ID, IS_A, "0", IS_A, characteristic_type, IS_A]


def test_catalogue_lists_known_types():
    _require_imports()
    assert set(CONTENT_FILE_TYPES) == {
        "Concept",
        "Description",
        "TextDefinition",
        "Relationship",
        "StatedRelationship",
    }
    assert TextDefinitionFile.partition == Partition.DESCRIPTION


def test_header_falls_back_to_spec_when_missing(tmp_path):
    _require_imports()
    f = ConceptFile(tmp_path / "missing.txt")
    assert f.header() == list(CONCEPT_HEADER)


def test_header_is_first_line_of_existing_file(tmp_path):
    _require_imports()
    path = write_release_file(tmp_path / "c.txt", ["id", "other"], [["1", "2"]])
    f = ConceptFile(path)

    assert f.header() == ["id", "other"]
    assert list(f.rows()) == [["1", "2"]]


def test_relationship_filters_split_by_characteristic_type():
    _require_imports()
    stated = _relationship(STATED)
    inferred = _relationship(INFERRED)

    assert RelationshipFile("r.txt").filter(inferred) is True
    assert RelationshipFile("r.txt").filter(stated) is False
    assert StatedRelationshipFile("s.txt").filter(stated) is True
    assert StatedRelationshipFile("s.txt").filter(inferred) is False


def test_content_file_for_unknown_type(tmp_path):
    _require_imports()
    with pytest.raises(UnknownContentTypeError) as err:
        content_file_for("Refset", tmp_path / "x.txt")
    assert err.value.details["content_type"] == "Refset"


def test_content_file_for_parses_release_type(tmp_path):
    _require_imports()
    f = content_file_for("Concept", tmp_path / "x.txt", "snapshot")
    assert isinstance(f, ConceptFile)
    assert f.release_type is ReleaseType.SNAPSHOT


def test_create_requires_release_type(tmp_path):
    _require_imports()
    f = ConceptFile(tmp_path / "x.txt")
    with pytest.raises(InvalidReleaseConfigError):
        f.create(ListRowSource({}), IssueCollector())
    assert not (tmp_path / "x.txt").exists()


def test_create_stated_relationship_keeps_only_stated_rows(tmp_path):
    _require_imports()
    stated = _relationship(STATED)
    inferred = _relationship(INFERRED)
    inferred[0] = "200029"
    source = ListRowSource({"StatedRelationship": [stated, inferred]})
    f = StatedRelationshipFile(tmp_path / "stated.txt", ReleaseType.FULL)

    stats = f.create(source, IssueCollector())

    assert stats.rows_read == 2
    assert stats.rows_filtered == 1
    assert read_release_lines(f.path) == ["\t".join(RELATIONSHIP_HEADER), "\t".join(stated)]


def test_created_file_passes_check(tmp_path):
    _require_imports()
    row = [CONCEPT_ID, "20240131", "1", CORE_MODULE, IS_A]
    source = ListRowSource({"Concept": [row, list(row)]})
    f = ConceptFile(tmp_path / "concept.txt", ReleaseType.SNAPSHOT)

    f.create(source, IssueCollector())
    collector = IssueCollector()

    assert f.check(collector) is True
    assert collector.count() == 0
    assert read_release_lines(f.path)[1:] == ["\t".join(row)]
