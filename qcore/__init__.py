"""
qcore - Quantum FPGA Simulation Engine

Public API: deterministic gate-stage engine, metric formulas, run recording,
snapshot export and the synthesis boundary.
Flat, focused files. One file = one responsibility.
"""

# =============================================================================
# TYPES
# =============================================================================
from .types_profile import (
    AlgorithmProfile,
    validate_profile,
    named_profile,
    qec_profiles,
    benchmark_profiles,
    custom_profile,
)
from .types_result import (
    RunMetrics,
    RunRecord,
    QubitSample,
    StoredSample,
    AggregateMetrics,
    Snapshot,
    StageTrace,
    RunResult,
)

# =============================================================================
# CONSTANTS / ERRORS
# =============================================================================
from .constants import (
    Stage,
    GROUND_STATE,
    PRSG_SEED,
    MAX_QUBITS,
    NAMED_ALGORITHMS,
    PIN_POOL,
    CONTROL_PINS,
)
from .errors import (
    QuantumSimError,
    InvalidProfile,
    StorageError,
    ToolchainFailure,
)

# =============================================================================
# ENGINE
# =============================================================================
from .prsg import Prsg
from .register import QubitRegister
from .stages import GateStageMachine, next_stage, stage_budget
from .metrics import (
    fidelity,
    decoherence_time,
    resource_units,
    clock_estimate,
    amplitude,
    compute_metrics,
    qubit_samples,
)

# =============================================================================
# PERSISTENCE / EXPORT
# =============================================================================
from .store import Store, SqliteStore, MemoryStore
from .recorder import ExperimentRecorder, build_record
from .export import SnapshotExporter, aggregate, export_document, write_snapshot

# =============================================================================
# SYNTHESIS BOUNDARY / RUNNER
# =============================================================================
from .synthesis import CircuitDesign, build_design, render_circuit, render_pin_constraints
from .toolchain import Toolchain, NullToolchain, YosysToolchain, ToolchainReport, make_toolchain
from .runner import run_profile, run_batch

__all__ = [
    # Types
    "AlgorithmProfile",
    "validate_profile",
    "named_profile",
    "qec_profiles",
    "benchmark_profiles",
    "custom_profile",
    "RunMetrics",
    "RunRecord",
    "QubitSample",
    "StoredSample",
    "AggregateMetrics",
    "Snapshot",
    "StageTrace",
    "RunResult",
    # Constants
    "Stage",
    "GROUND_STATE",
    "PRSG_SEED",
    "MAX_QUBITS",
    "NAMED_ALGORITHMS",
    "PIN_POOL",
    "CONTROL_PINS",
    # Errors
    "QuantumSimError",
    "InvalidProfile",
    "StorageError",
    "ToolchainFailure",
    # Engine
    "Prsg",
    "QubitRegister",
    "GateStageMachine",
    "next_stage",
    "stage_budget",
    "fidelity",
    "decoherence_time",
    "resource_units",
    "clock_estimate",
    "amplitude",
    "compute_metrics",
    "qubit_samples",
    # Persistence / export
    "Store",
    "SqliteStore",
    "MemoryStore",
    "ExperimentRecorder",
    "build_record",
    "SnapshotExporter",
    "aggregate",
    "export_document",
    "write_snapshot",
    # Synthesis / runner
    "CircuitDesign",
    "build_design",
    "render_circuit",
    "render_pin_constraints",
    "Toolchain",
    "NullToolchain",
    "YosysToolchain",
    "ToolchainReport",
    "make_toolchain",
    "run_profile",
    "run_batch",
]
