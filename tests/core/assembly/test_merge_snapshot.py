# tests/core/assembly/test_merge_snapshot.py
"""
Testes da política Snapshot.

- um vencedor por id: maior effectiveTime lexicográfico
- effectiveTime vazio domina qualquer valor não vazio
- saída na ordem da segunda passada (ordem da fonte)
- linha vencedora repetida na fonte é emitida uma única vez
- conflitos (mesmo id + time, conteúdo diferente) também são reportados
"""

import pytest

from tests.fixtures.rf2_files import ListRowSource

try:
    from rf2_dataflow.assembly.merge import IdentityRegistry, merge_rows
    from rf2_dataflow.model.release import ReleaseType
    from rf2_dataflow.validation.issues import IssueCollector
except Exception as e:
    merge_rows = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


HEADER = ["id", "effectiveTime", "active"]


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Missing merge engine. Import error: {_IMPORT_ERR}")


def _snapshot(rows, collector=None, **kwargs):
    source = ListRowSource({"Test": rows})
    out = merge_rows(
        content_type="Test",
        header=HEADER,
        release_type=ReleaseType.SNAPSHOT,
        source=source,
        acceptor=collector or IssueCollector(),
        **kwargs,
    )
    return out, source


def test_snapshot_worked_example_empty_time_dominates():
    _require_imports()
    rows = [
        ["c1", "20200101", "1"],
        ["c1", "20200201", "0"],
        ["c1", "", "1"],
    ]
    out, _ = _snapshot(rows)
    assert out == [["c1", "", "1"]]


def test_snapshot_keeps_latest_time_regardless_of_source_order():
    _require_imports()
    rows = [
        ["c1", "20200301", "0"],
        ["c2", "20200101", "1"],
        ["c1", "20200101", "1"],
        ["c2", "20200201", "0"],
    ]
    out, _ = _snapshot(rows)
    # ordem da fonte na segunda passada: c1/20200301 aparece antes de c2/20200201
    assert out == [["c1", "20200301", "0"], ["c2", "20200201", "0"]]


def test_snapshot_empty_time_is_not_replaced_by_later_dates():
    _require_imports()
    rows = [
        ["c1", "", "1"],
        ["c1", "20991231", "0"],
    ]
    out, _ = _snapshot(rows)
    assert out == [["c1", "", "1"]]


def test_snapshot_single_winner_per_identifier():
    _require_imports()
    rows = []
    for i in range(40):
        rows.append([f"c{i % 7}", f"2020{(i * 37) % 12 + 1:02d}01", str(i % 2)])
    rows.append(["c3", "", "1"])

    out, _ = _snapshot(rows)

    ids = [r[0] for r in out]
    assert len(ids) == len(set(ids)) == 7
    for row in out:
        times = [r[1] for r in rows if r[0] == row[0]]
        expected = "" if "" in times else max(times)
        assert row[1] == expected


def test_snapshot_repeated_winner_line_is_emitted_once():
    _require_imports()
    rows = [
        ["c1", "20200201", "1"],
        ["c1", "20200201", "1"],
        ["c1", "20200101", "1"],
    ]
    out, _ = _snapshot(rows)
    assert out == [["c1", "20200201", "1"]]


def test_snapshot_flags_conflicts_even_on_superseded_times():
    _require_imports()
    collector = IssueCollector()
    rows = [
        ["c1", "20200101", "1"],
        ["c1", "20200201", "1"],
        ["c1", "20200101", "0"],  # mesma chave, conteúdo diferente, time já superado
    ]
    out, _ = _snapshot(rows, collector)

    assert out == [["c1", "20200201", "1"]]
    assert len(collector.warnings) == 1


def test_snapshot_requests_parallel_first_pass_only():
    _require_imports()
    _, source = _snapshot([["c1", "20200101", "1"]])
    assert source.parallel_requests == [True, False]

    _, source = _snapshot([["c1", "20200101", "1"]], parallel_snapshot=False)
    assert source.parallel_requests == [False, False]


def test_identity_registry_offer_rules():
    _require_imports()
    registry = IdentityRegistry()

    assert registry.offer("c1", "20200101", "a") is True
    assert registry.offer("c1", "20190101", "b") is False
    assert registry.offer("c1", "20200201", "c") is True
    assert registry.offer("c1", "", "d") is True
    assert registry.offer("c1", "20990101", "e") is False
    assert registry.pending == 1

    assert registry.claim("c1", "20200201") is False
    assert registry.claim("c1", "") is True
    assert registry.claim("c1", "") is False
    assert registry.pending == 0


def test_snapshot_reports_winners_missing_from_second_pass():
    _require_imports()

    class ShrinkingSource(ListRowSource):
        # a segunda passada não vê mais a linha vencedora
        def visit_rows(self, content_type, header, parallel, consumer):
            if self.parallel_requests:
                self.rows_by_type = {content_type: self.rows_by_type[content_type][:1]}
            super().visit_rows(content_type, header, parallel, consumer)

    collector = IssueCollector()
    source = ShrinkingSource({"Test": [["c1", "20200101", "1"], ["c2", "20200101", "1"]]})
    out = merge_rows(
        content_type="Test",
        header=HEADER,
        release_type=ReleaseType.SNAPSHOT,
        source=source,
        acceptor=collector,
    )

    assert out == [["c1", "20200101", "1"]]
    assert len(collector.errors) == 1
    assert "did not re-encounter 1 winning row" in collector.errors[0].message
