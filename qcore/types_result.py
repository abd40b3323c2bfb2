"""
qcore/types_result.py - Run, Sample and Snapshot Dataclasses

Immutable result containers passed between runner, recorder and exporter.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import Stage
from .types_profile import AlgorithmProfile


@dataclass(frozen=True)
class RunMetrics:
    """Scalar metrics derived from (qubit_count, gate_count)."""
    fidelity: float
    decoherence_time: float
    resource_units: int
    frequency_mhz: float

    def to_dict(self) -> dict:
        return {
            "fidelity": self.fidelity,
            "decoherence_time": self.decoherence_time,
            "resource_units": self.resource_units,
            "frequency_mhz": self.frequency_mhz,
        }


@dataclass(frozen=True)
class QubitSample:
    """Illustrative amplitude triple for one qubit of one run."""
    run_id: Optional[int]
    qubit_index: int
    amplitude_real: float
    amplitude_imag: float
    probability: float

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "qubit_index": self.qubit_index,
            "amplitude_real": self.amplitude_real,
            "amplitude_imag": self.amplitude_imag,
            "probability": self.probability,
        }


@dataclass(frozen=True)
class RunRecord:
    """Persisted row of the run history."""
    run_id: Optional[int]
    timestamp: str
    qubit_count: int
    gate_count: int
    fidelity: float
    decoherence_time: float
    frequency_mhz: float
    resource_units: int
    algorithm_name: str

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "qubit_count": self.qubit_count,
            "gate_count": self.gate_count,
            "fidelity": self.fidelity,
            "decoherence_time": self.decoherence_time,
            "frequency_mhz": self.frequency_mhz,
            "resource_units": self.resource_units,
            "algorithm_name": self.algorithm_name,
        }


@dataclass(frozen=True)
class StoredSample:
    """QubitSample joined with its run's algorithm name, as read for export."""
    sample: QubitSample
    algorithm_name: str


@dataclass(frozen=True)
class AggregateMetrics:
    """Aggregates over the snapshot's run records."""
    average_fidelity: float = 0.0
    max_qubit_count: int = 0
    total_gate_count: int = 0
    quantum_advantage: int = 0


@dataclass(frozen=True)
class Snapshot:
    """Bounded read-only view for the dashboard."""
    runs: Tuple[RunRecord, ...] = ()
    samples: Tuple[StoredSample, ...] = ()
    metrics: AggregateMetrics = field(default_factory=AggregateMetrics)


@dataclass(frozen=True)
class StageTrace:
    """Register and PRSG state when a working stage finishes."""
    stage: Stage
    iterations: int
    prsg_state: int
    words: Tuple[int, ...]


@dataclass(frozen=True)
class RunResult:
    """Everything one run produced, persisted or not."""
    profile: AlgorithmProfile
    record: RunRecord
    samples: Tuple[QubitSample, ...]
    metrics: RunMetrics
    measurement: Tuple[int, ...]
    trajectory: Tuple[StageTrace, ...]
    run_id: Optional[int] = None
    toolchain_status: str = "skipped"
    toolchain_error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.run_id is not None

    @property
    def bitstring(self) -> str:
        """Measurement bits, qubit 0 first."""
        return "".join(str(bit) for bit in self.measurement)
