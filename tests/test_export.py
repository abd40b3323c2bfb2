"""
tests/test_export.py - Snapshot Export Tests

Bounded view, ordering, aggregates and the dashboard document.
"""

import json

import pytest

from qcore import (
    AlgorithmProfile,
    ExperimentRecorder,
    SnapshotExporter,
    aggregate,
    compute_metrics,
    export_document,
    named_profile,
    qubit_samples,
    write_snapshot,
)


def _fill(store, profile, count):
    recorder = ExperimentRecorder(store)
    for _ in range(count):
        recorder.record(
            profile,
            compute_metrics(profile.qubit_count, profile.gate_count),
            qubit_samples(profile.qubit_count),
        )


class TestSnapshotBounds:

    def test_limits_50_runs_100_samples(self, store):
        _fill(store, named_profile("bell_state"), 60)
        snapshot = SnapshotExporter(store).export()
        assert len(snapshot.runs) == 50
        assert len(snapshot.samples) == 100
        assert [r.run_id for r in snapshot.runs] == list(range(60, 10, -1))

    def test_sample_order(self, store):
        _fill(store, named_profile("bell_state"), 60)
        snapshot = SnapshotExporter(store).export()
        keys = [(s.sample.run_id, s.sample.qubit_index) for s in snapshot.samples]
        assert keys[:4] == [(60, 0), (60, 1), (59, 0), (59, 1)]
        assert keys[-1] == (11, 1)

    def test_limits_cannot_exceed_defaults(self, store):
        exporter = SnapshotExporter(store, run_limit=500, sample_limit=5000)
        assert exporter.run_limit == 50
        assert exporter.sample_limit == 100

    def test_export_never_writes(self, store):
        _fill(store, named_profile("grover"), 3)
        SnapshotExporter(store).export()
        SnapshotExporter(store).export()
        assert store.count_runs() == 3


class TestAggregates:

    def test_empty_store_all_zero(self, store):
        metrics = SnapshotExporter(store).export().metrics
        assert metrics.average_fidelity == 0.0
        assert metrics.max_qubit_count == 0
        assert metrics.total_gate_count == 0
        assert metrics.quantum_advantage == 0

    def test_aggregates_over_snapshot_runs(self, store):
        _fill(store, named_profile("bell_state"), 60)
        metrics = SnapshotExporter(store).export().metrics
        assert metrics.average_fidelity == pytest.approx(0.926)
        assert metrics.max_qubit_count == 2
        assert metrics.total_gate_count == 200, "only the 50 runs in view count"
        assert metrics.quantum_advantage == 4

    def test_mixed_runs(self, store):
        _fill(store, named_profile("bell_state"), 1)
        _fill(store, named_profile("shor"), 1)
        metrics = SnapshotExporter(store).export().metrics
        assert metrics.average_fidelity == pytest.approx((0.926 + 0.806) / 2)
        assert metrics.max_qubit_count == 8
        assert metrics.total_gate_count == 68
        assert metrics.quantum_advantage == 256

    def test_advantage_capped(self, store):
        _fill(store, AlgorithmProfile("wide", 30, 10), 1)
        assert SnapshotExporter(store).export().metrics.quantum_advantage == 1_000_000

    def test_aggregate_empty_sequence(self):
        assert aggregate(()).quantum_advantage == 0


class TestDocument:

    def test_keys(self, store):
        _fill(store, named_profile("grover"), 1)
        doc = export_document(SnapshotExporter(store).export())
        assert set(doc) == {"quantum_results", "quantum_states", "metrics"}
        assert set(doc["quantum_results"][0]) == {
            "timestamp", "qubits", "gates", "fidelity", "decoherence_time",
            "frequency_mhz", "luts_used", "algorithm",
        }
        assert set(doc["quantum_states"][0]) == {
            "experiment_id", "qubit_id", "amplitude_real", "amplitude_imag",
            "probability", "algorithm",
        }
        assert set(doc["metrics"]) == {
            "average_fidelity", "max_qubits", "total_gates_simulated",
            "estimated_quantum_advantage",
        }

    def test_values(self, store):
        _fill(store, named_profile("grover"), 1)
        doc = export_document(SnapshotExporter(store).export())
        run = doc["quantum_results"][0]
        assert run["algorithm"] == "grover"
        assert run["qubits"] == 4
        assert run["luts_used"] == 108
        assert doc["metrics"]["average_fidelity"] == 0.894

    def test_write_snapshot(self, store, tmp_path):
        _fill(store, named_profile("qft"), 2)
        snapshot = SnapshotExporter(store).export()
        output = tmp_path / "results" / "quantum_data.json"
        ledger = tmp_path / "receipts.jsonl"

        receipt = write_snapshot(snapshot, output, ledger_path=ledger)

        written = json.loads(output.read_text())
        assert written == json.loads(json.dumps(export_document(snapshot)))
        assert receipt["receipt_type"] == "snapshot_receipt"
        assert receipt["runs"] == 2
        assert receipt["samples"] == 10
        lines = ledger.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["document_hash"] == receipt["document_hash"]

    def test_write_empty_snapshot(self, store, tmp_path):
        output = tmp_path / "quantum_data.json"
        write_snapshot(SnapshotExporter(store).export(), output)
        doc = json.loads(output.read_text())
        assert doc["quantum_results"] == []
        assert doc["metrics"]["estimated_quantum_advantage"] == 0
