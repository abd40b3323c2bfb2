"""
qcore/recorder.py - Experiment Recorder

Packages one completed run into a RunRecord plus qubit_count QubitSamples
and appends them to the store. Never mutates prior records.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Sequence, Tuple

from .store import Store
from .types_profile import AlgorithmProfile
from .types_result import QubitSample, RunMetrics, RunRecord

logger = logging.getLogger(__name__)


def build_record(
    profile: AlgorithmProfile,
    metrics: RunMetrics,
    timestamp: Optional[str] = None,
) -> RunRecord:
    """Unsaved RunRecord (run_id None) for profile and metrics."""
    return RunRecord(
        run_id=None,
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
        qubit_count=profile.qubit_count,
        gate_count=profile.gate_count,
        fidelity=metrics.fidelity,
        decoherence_time=metrics.decoherence_time,
        frequency_mhz=metrics.frequency_mhz,
        resource_units=metrics.resource_units,
        algorithm_name=profile.name,
    )


class ExperimentRecorder:
    """Append-only writer of run history."""

    def __init__(self, store: Store):
        self.store = store

    def record(
        self,
        profile: AlgorithmProfile,
        metrics: RunMetrics,
        samples: Sequence[QubitSample],
        timestamp: Optional[str] = None,
    ) -> int:
        """
        Persist one run.

        Args:
            profile: The run's profile
            metrics: Scalar metrics of the run
            samples: qubit_count samples, index order
            timestamp: ISO8601 override (defaults to now, UTC)

        Returns:
            int: The assigned run id, strictly greater than any previous one

        Raises:
            StorageError: When the store is unavailable
        """
        if len(samples) != profile.qubit_count:
            raise ValueError(
                f"expected {profile.qubit_count} samples for {profile.name}, got {len(samples)}"
            )
        record = build_record(profile, metrics, timestamp)
        run_id, _ = self.record_result(record, samples)
        return run_id

    def record_result(self, record: RunRecord, samples: Sequence[QubitSample]) -> Tuple[int, RunRecord]:
        """Persist a prebuilt record; returns (run_id, record stamped with it)."""
        run_id = self.store.append_run(record, samples)
        logger.info(
            "recorded run %d: %s (%d qubits, %d gates, fidelity %.4f)",
            run_id, record.algorithm_name, record.qubit_count, record.gate_count,
            record.fidelity,
        )
        return run_id, replace(record, run_id=run_id)
