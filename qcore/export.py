"""
qcore/export.py - Snapshot Exporter

Bounded, read-only aggregate view of the store, and the JSON document the
dashboard consumes. Field names of the document are fixed: the dashboard
reads quantum_results / quantum_states / metrics exactly as written here.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from receipts import append_receipt, dual_hash, emit_receipt

from .constants import (
    ADVANTAGE_CAP,
    FIDELITY_DISPLAY_PLACES,
    SNAPSHOT_RUN_LIMIT,
    SNAPSHOT_SAMPLE_LIMIT,
)
from .store import Store
from .types_result import AggregateMetrics, RunRecord, Snapshot

logger = logging.getLogger(__name__)


def aggregate(runs: Sequence[RunRecord], advantage_cap: int = ADVANTAGE_CAP) -> AggregateMetrics:
    """
    Aggregate metrics over runs.

    Empty input gives all-zero aggregates. Advantage is 2^max_qubits,
    capped at advantage_cap.
    """
    if not runs:
        return AggregateMetrics()
    max_qubits = max(r.qubit_count for r in runs)
    return AggregateMetrics(
        average_fidelity=sum(r.fidelity for r in runs) / len(runs),
        max_qubit_count=max_qubits,
        total_gate_count=sum(r.gate_count for r in runs),
        quantum_advantage=min(2 ** max_qubits, advantage_cap),
    )


class SnapshotExporter:
    """Reads recent history from a store; never writes to it."""

    def __init__(
        self,
        store: Store,
        run_limit: int = SNAPSHOT_RUN_LIMIT,
        sample_limit: int = SNAPSHOT_SAMPLE_LIMIT,
        advantage_cap: int = ADVANTAGE_CAP,
    ):
        self.store = store
        self.run_limit = min(run_limit, SNAPSHOT_RUN_LIMIT)
        self.sample_limit = min(sample_limit, SNAPSHOT_SAMPLE_LIMIT)
        self.advantage_cap = advantage_cap

    def export(self) -> Snapshot:
        """
        Build a snapshot of at most run_limit runs and sample_limit samples.

        Returns:
            Snapshot: Runs newest first; samples by descending run id, then
            ascending qubit index

        Raises:
            StorageError: When the store cannot be read
        """
        runs = tuple(self.store.recent_runs(self.run_limit))
        samples = tuple(self.store.recent_samples(self.sample_limit))
        snapshot = Snapshot(
            runs=runs,
            samples=samples,
            metrics=aggregate(runs, self.advantage_cap),
        )
        logger.debug("snapshot: %d runs, %d samples", len(runs), len(samples))
        return snapshot


# =============================================================================
# EXPORT DOCUMENT
# =============================================================================

def export_document(snapshot: Snapshot) -> Dict[str, Any]:
    """
    Dashboard document for a snapshot.

    Args:
        snapshot: Snapshot from SnapshotExporter.export()

    Returns:
        dict: {"quantum_results": [...], "quantum_states": [...], "metrics": {...}}
    """
    return {
        "quantum_results": [
            {
                "timestamp": r.timestamp,
                "qubits": r.qubit_count,
                "gates": r.gate_count,
                "fidelity": r.fidelity,
                "decoherence_time": r.decoherence_time,
                "frequency_mhz": r.frequency_mhz,
                "luts_used": r.resource_units,
                "algorithm": r.algorithm_name,
            }
            for r in snapshot.runs
        ],
        "quantum_states": [
            {
                "experiment_id": s.sample.run_id,
                "qubit_id": s.sample.qubit_index,
                "amplitude_real": s.sample.amplitude_real,
                "amplitude_imag": s.sample.amplitude_imag,
                "probability": s.sample.probability,
                "algorithm": s.algorithm_name,
            }
            for s in snapshot.samples
        ],
        "metrics": {
            "average_fidelity": round(snapshot.metrics.average_fidelity, FIDELITY_DISPLAY_PLACES),
            "max_qubits": snapshot.metrics.max_qubit_count,
            "total_gates_simulated": snapshot.metrics.total_gate_count,
            "estimated_quantum_advantage": snapshot.metrics.quantum_advantage,
        },
    }


def write_snapshot(
    snapshot: Snapshot,
    output_path: Union[str, Path],
    ledger_path: Optional[Union[str, Path]] = None,
) -> Dict[str, Any]:
    """
    Write the dashboard document to output_path and emit a snapshot receipt.

    Args:
        snapshot: Snapshot to write
        output_path: JSON file (parent directories are created)
        ledger_path: Optional receipts JSONL ledger

    Returns:
        dict: The snapshot_receipt
    """
    document = export_document(snapshot)
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(document, indent=4)
    path.write_text(content)

    receipt = emit_receipt("snapshot_receipt", {
        "output_path": str(path),
        "runs": len(document["quantum_results"]),
        "samples": len(document["quantum_states"]),
        "metrics": document["metrics"],
        "document_hash": dual_hash(content),
    })
    append_receipt(receipt, ledger_path)
    logger.info(
        "exported %d runs / %d samples to %s",
        receipt["runs"], receipt["samples"], path,
    )
    return receipt
