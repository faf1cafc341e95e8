# tests/core/pipeline/test_step_protocol.py
"""
Testes do contrato mínimo de Step (duck typing) e do StepResult.
"""

import pytest

try:
    from rf2_dataflow.core.pipeline.step import Step  # noqa: F401
    from rf2_dataflow.core.pipeline.types import StepKind, StepResult, StepStatus
except Exception as e:  # noqa: BLE001
    StepResult = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing Step contract. Implement:\n"
            "- src/rf2_dataflow/core/pipeline/types.py (StepKind, StepStatus, StepResult)\n"
            "- src/rf2_dataflow/core/pipeline/step.py (Step Protocol)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_dummy_step_satisfies_protocol(DummyStep, dummy_ctx):
    _require_imports()
    step = DummyStep("release.check", kind=StepKind.DIAGNOSTIC, depends_on=["release.create"])

    result = step.run(dummy_ctx)

    assert isinstance(result, StepResult)
    assert result.step_id == "release.check"
    assert result.kind == StepKind.DIAGNOSTIC
    assert result.status == StepStatus.SUCCESS
    assert dummy_ctx.get_artifact("release.check.ok") is True


def test_step_result_is_immutable():
    _require_imports()
    result = StepResult(step_id="x", kind=StepKind.TRANSFORM, status=StepStatus.SUCCESS, summary="ok")
    with pytest.raises(Exception):
        result.status = StepStatus.FAILED


def test_enums_serialize_as_text():
    _require_imports()
    assert StepStatus.SKIPPED.value == "skipped"
    assert StepKind.TRANSFORM == "transform"
    assert {k.value for k in StepKind} == {"diagnostic", "transform"}
