"""
tests/core/release/test_release_create_step.py

Cobertura:
- monta os arquivos declarados (Full / Snapshot / Delta) a partir das fontes
- publica o artifact `release.created_files` e o impacto por arquivo
- conflitos viram warnings do Step
- arquivo de saída existente → FAILED (OUTPUT_EXISTS), sem sobrescrever
- header de fonte divergente → FAILED (HEADER_MISMATCH)
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tests.fixtures.rf2_files import CONCEPT_ID, CORE_MODULE, IS_A, read_release_lines, write_release_file

try:
    from rf2_dataflow.core.pipeline.context import RunContext
    from rf2_dataflow.core.pipeline.types import StepStatus
    from rf2_dataflow.model.content_file import CONCEPT_HEADER
    from rf2_dataflow.steps.release.create import CREATED_FILES_ARTIFACT, ReleaseCreateStep
except Exception as e:  # noqa: BLE001
    ReleaseCreateStep = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing release.create step. Import error: {_IMPORT_ERR}")


def _row(component_id, effective_time, active="1"):
    return [component_id, effective_time, active, CORE_MODULE, IS_A]


def _ctx(tmp_path, files, sources):
    return RunContext(
        run_id="run-create",
        created_at=datetime(2026, 1, 16, tzinfo=timezone.utc),
        config={
            "engine": {"workers": 2},
            "release": {
                "date": "20240131",
                "output_dir": str(tmp_path / "out"),
                "sources": sources,
                "files": files,
            },
        },
    )


def _files():
    return [
        {"name": "full.txt", "content_type": "Concept", "release_type": "Full"},
        {"name": "snapshot.txt", "content_type": "Concept", "release_type": "Snapshot"},
        {"name": "delta.txt", "content_type": "Concept", "release_type": "Delta"},
    ]


def test_creates_all_release_types(tmp_path):
    _require_imports()
    a = write_release_file(tmp_path / "a.txt", CONCEPT_HEADER, [_row(CONCEPT_ID, "20230731"), _row(IS_A, "20240131")])
    b = write_release_file(tmp_path / "b.txt", CONCEPT_HEADER, [_row(CONCEPT_ID, "20240131", "0")])
    ctx = _ctx(tmp_path, _files(), {"Concept": [str(a), str(b)]})

    result = ReleaseCreateStep().run(ctx)

    assert result.status == StepStatus.SUCCESS
    assert result.metrics["files_created"] == 3
    out = tmp_path / "out"

    full = read_release_lines(out / "full.txt")
    assert full[0] == "\t".join(CONCEPT_HEADER)
    assert len(full) == 4

    snapshot = read_release_lines(out / "snapshot.txt")[1:]
    assert sorted(snapshot) == sorted(["\t".join(_row(IS_A, "20240131")), "\t".join(_row(CONCEPT_ID, "20240131", "0"))])

    delta = read_release_lines(out / "delta.txt")[1:]
    assert delta == ["\t".join(_row(IS_A, "20240131")), "\t".join(_row(CONCEPT_ID, "20240131", "0"))]

    created = ctx.get_artifact(CREATED_FILES_ARTIFACT)
    assert [c["release_type"] for c in created] == ["Full", "Snapshot", "Delta"]
    assert result.payload["impact"]["files"]["delta.txt"]["rows_outside_delta"] == 1
    assert len(result.payload["config_hash"]) == 64


def test_conflicts_become_step_warnings(tmp_path):
    _require_imports()
    a = write_release_file(tmp_path / "a.txt", CONCEPT_HEADER, [_row(CONCEPT_ID, "20240131", "1")])
    b = write_release_file(tmp_path / "b.txt", CONCEPT_HEADER, [_row(CONCEPT_ID, "20240131", "0")])
    files = [{"name": "full.txt", "content_type": "Concept", "release_type": "Full"}]
    ctx = _ctx(tmp_path, files, {"Concept": [str(a), str(b)]})
    ctx.config["engine"]["workers"] = 1

    result = ReleaseCreateStep().run(ctx)

    assert result.status == StepStatus.SUCCESS
    assert result.metrics["conflicts"] == 1
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("full.txt: duplicate identifier+effective-time")
    conflict = result.payload["conflicts"][0]
    assert conflict["type"] == "CONTENT_CONFLICT"
    assert conflict["fatal"] is False
    assert conflict["details"]["id"] == CONCEPT_ID
    assert conflict["details"]["effective_time"] == "20240131"
    assert read_release_lines(tmp_path / "out" / "full.txt")[1] == "\t".join(_row(CONCEPT_ID, "20240131", "1"))


def test_existing_output_is_not_overwritten(tmp_path):
    _require_imports()
    a = write_release_file(tmp_path / "a.txt", CONCEPT_HEADER, [_row(CONCEPT_ID, "20240131")])
    existing = tmp_path / "out" / "full.txt"
    existing.parent.mkdir(parents=True)
    existing.write_text("keep me", encoding="utf-8")
    files = [{"name": "full.txt", "content_type": "Concept", "release_type": "Full"}]

    result = ReleaseCreateStep().run(_ctx(tmp_path, files, {"Concept": [str(a)]}))

    assert result.status == StepStatus.FAILED
    assert result.payload["error"]["type"] == "OUTPUT_EXISTS"
    assert existing.read_text(encoding="utf-8") == "keep me"


def test_source_header_mismatch_fails(tmp_path):
    _require_imports()
    a = write_release_file(tmp_path / "a.txt", ["id", "effectiveTime"], [[CONCEPT_ID, "20240131"]])
    files = [{"name": "full.txt", "content_type": "Concept", "release_type": "Full"}]

    result = ReleaseCreateStep().run(_ctx(tmp_path, files, {"Concept": [str(a)]}))

    assert result.status == StepStatus.FAILED
    assert result.payload["error"]["type"] == "HEADER_MISMATCH"
    assert not (tmp_path / "out" / "full.txt").exists()


def test_invalid_settings_fail(tmp_path):
    _require_imports()
    files = [{"name": "x.txt", "content_type": "Refset", "release_type": "Full"}]

    result = ReleaseCreateStep().run(_ctx(tmp_path, files, {}))

    assert result.status == StepStatus.FAILED
    assert result.payload["error"]["type"] == "UNKNOWN_CONTENT_TYPE"
