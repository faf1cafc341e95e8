# tests/conftest.py
"""
Fixtures compartilhados para testes do RF2 DataFlow.

Este módulo fornece:
- configurações mínimas e determinísticas (YAML como string e dict resolvido)
- um RunContext controlado
- um Step dummy (duck typing) para testes de planner/engine
- um coletor de issues novo por teste

Decisões:
    - Imports do core são lazy para que uma falha de import apareça como
      erro do teste que depende dela, não como erro de coleta
    - Arquivos RF2 de exemplo são escritos com `tmp_path` pelos próprios
      testes (helpers em `tests/fixtures/rf2_files.py`)
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def project_like_config_defaults_yaml() -> str:
    """YAML típico de `config.defaults.yaml` (base completa para o merge)."""
    return """\
engine:
  fail_fast: true
  workers: 4
validation:
  allow_empty_effective_time: true
  chunk_size: 1000
release:
  date: "20240131"
  output_dir: out
  files:
    - name: sct2_Concept_Full_INT_20240131.txt
      content_type: Concept
      release_type: Full
steps:
  release.create:
    enabled: true
  release.check:
    enabled: true
"""


@pytest.fixture
def project_like_config_local_yaml() -> str:
    """YAML típico de `config.local.yaml` (apenas overrides)."""
    return """\
engine:
  workers: 1
release:
  files:
    - name: sct2_Concept_Snapshot_INT_20240131.txt
      content_type: Concept
      release_type: Snapshot
steps:
  release.check:
    enabled: false
"""


# =====================================================
# Pipeline fixtures (Step + RunContext)
# =====================================================

@pytest.fixture
def dummy_config() -> dict:
    """
    Configuração mínima já resolvida.

    `release.date` presente para que o RunContext exponha a data da release;
    nenhum arquivo declarado (Steps reais não produzem efeitos).
    """
    return {
        "engine": {"fail_fast": True, "workers": 1},
        "release": {"date": "20240131"},
        "steps": {"release.create": {"enabled": True}},
    }


@pytest.fixture
def dummy_ctx(dummy_config):
    """RunContext determinístico (run_id e created_at fixos, UTC)."""
    from rf2_dataflow.core.pipeline.context import RunContext

    return RunContext(
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config=dummy_config,
        meta={"source": "pytest"},
    )


@pytest.fixture
def DummyStep():
    """
    Factory de Step mínimo (classe, não instância).

    Sempre retorna SUCCESS e registra o artefato `<id>.ok` no RunContext.
    """
    from rf2_dataflow.core.pipeline.types import StepKind, StepStatus, StepResult

    class _DummyStep:
        def __init__(
            self,
            step_id: str = "release.create",
            kind: StepKind = StepKind.DIAGNOSTIC,
            depends_on=None,
        ):
            self.id = step_id
            self.kind = kind
            self.depends_on = depends_on or []
            self.calls = 0

        def run(self, ctx):
            self.calls += 1
            ctx.set_artifact(f"{self.id}.ok", True)
            return StepResult(
                step_id=self.id,
                kind=self.kind,
                status=StepStatus.SUCCESS,
                summary="dummy ok",
                artifacts={"ok": f"{self.id}.ok"},
                payload={"note": "dummy"},
            )

    return _DummyStep


# =====================================================
# Issues
# =====================================================

@pytest.fixture
def collector():
    """IssueCollector novo, sem contexto de arquivo."""
    from rf2_dataflow.validation.issues import IssueCollector

    return IssueCollector()
