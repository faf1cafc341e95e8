# tests/core/engine/test_executor_happy_path.py
"""
Testes do caminho feliz do Engine: ordem, enriquecimento e eventos.
"""

import pytest

try:
    from rf2_dataflow.core.engine.engine import Engine
    from rf2_dataflow.core.pipeline.types import StepStatus
except Exception as e:  # noqa: BLE001
    Engine = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing Engine. Implement:\n"
            "- src/rf2_dataflow/core/engine/engine.py (Engine)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_happy_path(DummyStep, dummy_ctx):
    _require_imports()
    steps = [DummyStep("b", depends_on=["a"]), DummyStep("a")]
    result = Engine(steps=steps, ctx=dummy_ctx).run()

    assert list(result.steps) == ["a", "b"]
    assert result.steps["a"].status == StepStatus.SUCCESS
    assert result.steps["b"].status == StepStatus.SUCCESS
    assert result.ok is True


def test_result_is_enriched_with_context_warnings_and_impact(DummyStep, dummy_ctx):
    _require_imports()
    dummy_ctx.add_warning(step_id="a", message="c.txt: conflict")
    dummy_ctx.set_impact("a", {"rows_written": 3})

    result = Engine(steps=[DummyStep("a")], ctx=dummy_ctx).run()
    r = result.steps["a"]

    assert r.warnings == ["c.txt: conflict"]
    assert r.payload["impact"] == {"rows_written": 3}
    assert r.payload["note"] == "dummy"
    assert len(r.artifacts["payload_meta"]["payload_sha256"]) == 64


def test_events_are_logged(DummyStep, dummy_ctx):
    _require_imports()
    Engine(steps=[DummyStep("a")], ctx=dummy_ctx).run()

    messages = [(e["step_id"], e["message"]) for e in dummy_ctx.events]
    assert messages == [("a", "step started"), ("a", "step finished")]
    assert dummy_ctx.events[-1]["status"] == "success"
