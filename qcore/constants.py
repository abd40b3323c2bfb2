"""
qcore/constants.py - Engine Design Constants

Fixed constants of the gate-stage engine, metric formulas and snapshot view.
Pure data, no behavior.
"""

from enum import Enum

# =============================================================================
# REGISTER / PRSG
# =============================================================================

WORD_BITS = 32
WORD_MASK = 0xFFFFFFFF
PHASE_MASK = 0x0000FFFF          # low 16 bits accumulate phase
UPPER_MASK = 0xFFFF0000
GROUND_STATE = 0x80000000        # |0> = (1, 0)

PRSG_SEED = 0x0000ACE1           # reseeded at the start of every run
PRSG_TAPS = (31, 21, 1, 0)

# =============================================================================
# PROFILE BOUNDS
# =============================================================================

MAX_QUBITS = 100                 # hard cap, configuration may only lower it
MAX_GATES = 100_000              # keeps stage loops bounded
MIN_QUBITS = 1
MIN_GATES = 1

# =============================================================================
# METRIC FORMULA CONSTANTS
# =============================================================================

FIDELITY_BASE = 0.95
FIDELITY_PER_QUBIT = 0.01
FIDELITY_PER_GATE = 0.001

DECOHERENCE_BASE_US = 100.0
DECOHERENCE_PER_QUBIT_US = 2.0

LUTS_PER_QUBIT = 15
LUTS_PER_GATE = 3

CLOCK_BASE_MHZ = 50.0
CLOCK_PER_QUBIT_MHZ = 2.5
CLOCK_PER_GATE_MHZ = 0.1

# =============================================================================
# SNAPSHOT VIEW
# =============================================================================

SNAPSHOT_RUN_LIMIT = 50
SNAPSHOT_SAMPLE_LIMIT = 100
ADVANTAGE_CAP = 1_000_000
FIDELITY_DISPLAY_PLACES = 4

# =============================================================================
# PIN CONSTRAINTS (iCE40-HX1K-TQ144 available I/O)
# =============================================================================

CONTROL_PINS = {
    "clk": 21,
    "reset": 22,
    "algorithm_complete": 23,
}

# Pool indices 15-17 land on 21-23, the control pins. Profiles of 16 or more
# qubits therefore share those pads; the PCF notes each shared bit.
PIN_POOL = (
    1, 2, 3, 4, 7, 8, 9, 10, 11, 12, 13, 14, 18, 19, 20, 21, 22, 23, 24, 25,
    26, 27, 28, 31, 32, 34, 35, 36, 37, 38, 39, 40, 41, 42, 43, 44, 45, 46,
    47, 48, 49, 52, 56, 60, 61, 62, 63, 64, 65, 66, 67, 68, 69, 70, 71, 72,
    73, 74, 75, 76, 77, 78, 79, 80, 81, 82, 83, 84, 85, 86, 87, 88, 89, 90,
    91, 92, 93, 94, 95, 96, 97, 98, 99, 100, 101, 102, 103, 104, 105, 106,
    107, 108, 109, 110, 111, 112, 113, 114, 115, 116, 117, 118, 119, 120,
    121, 122, 123, 124, 125, 126, 127, 128, 129, 130, 131, 132, 133, 134,
    135, 136, 137, 138, 139, 140, 141, 142, 143, 144,
)

# =============================================================================
# STAGES
# =============================================================================


class Stage(Enum):
    """Gate-stage machine states, in execution order."""
    IDLE = "idle"
    SUPERPOSITION = "superposition"
    ENTANGLEMENT = "entanglement"
    PHASE = "phase"
    MEASURE = "measure"
    DONE = "done"


# =============================================================================
# PROFILE CATALOGS
# =============================================================================

NAMED_ALGORITHMS = {
    "grover": (4, 16),
    "shor": (8, 64),
    "deutsch_jozsa": (3, 8),
    "qft": (5, 25),
    "bell_state": (2, 4),
}

QEC_PROFILES = (
    ("surface_code", 9, 36),
    ("steane_code", 7, 21),
    ("shor_code", 9, 27),
)

BENCHMARK_ALGORITHMS = ("grover", "deutsch_jozsa", "bell_state", "qft", "shor")
BENCHMARK_QUBIT_BASE = 2
BENCHMARK_QUBIT_SPREAD = 6
BENCHMARK_GATES_PER_QUBIT = 4
BENCHMARK_GATE_SPREAD = 20
