"""
qcore/types_profile.py - AlgorithmProfile Dataclass and Catalogs

Immutable run parameters plus the preset profiles of the simulator menu.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .constants import (
    MAX_QUBITS,
    MAX_GATES,
    MIN_QUBITS,
    MIN_GATES,
    NAMED_ALGORITHMS,
    QEC_PROFILES,
    BENCHMARK_ALGORITHMS,
    BENCHMARK_QUBIT_BASE,
    BENCHMARK_QUBIT_SPREAD,
    BENCHMARK_GATES_PER_QUBIT,
    BENCHMARK_GATE_SPREAD,
)
from .errors import InvalidProfile


@dataclass(frozen=True)
class AlgorithmProfile:
    """Named (qubit_count, gate_count) pair identifying one run."""
    name: str
    qubit_count: int
    gate_count: int

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "qubit_count": self.qubit_count,
            "gate_count": self.gate_count,
        }


def validate_profile(
    profile: AlgorithmProfile,
    max_qubits: int = MAX_QUBITS,
    max_gates: int = MAX_GATES,
) -> AlgorithmProfile:
    """
    Check profile bounds before any simulation state is created.

    Args:
        profile: Profile to check
        max_qubits: Configured qubit cap (never above MAX_QUBITS)
        max_gates: Configured gate cap

    Returns:
        The same profile, for chaining

    Raises:
        InvalidProfile: On empty name, non-integer counts or out-of-range counts
    """
    qubit_cap = min(max_qubits, MAX_QUBITS)

    if not isinstance(profile.name, str) or not profile.name.strip():
        raise InvalidProfile("name", profile.name, "must be a non-empty string")
    for field_name in ("qubit_count", "gate_count"):
        value = getattr(profile, field_name)
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidProfile(field_name, value, "must be an integer")

    if profile.qubit_count < MIN_QUBITS:
        raise InvalidProfile("qubit_count", profile.qubit_count, f"must be >= {MIN_QUBITS}")
    if profile.qubit_count > qubit_cap:
        raise InvalidProfile("qubit_count", profile.qubit_count, f"exceeds cap {qubit_cap}")
    if profile.gate_count < MIN_GATES:
        raise InvalidProfile("gate_count", profile.gate_count, f"must be >= {MIN_GATES}")
    if profile.gate_count > max_gates:
        raise InvalidProfile("gate_count", profile.gate_count, f"exceeds cap {max_gates}")
    return profile


# =============================================================================
# CATALOGS
# =============================================================================

def named_profile(name: str) -> AlgorithmProfile:
    """Preset profile for a named algorithm (grover, shor, ...)."""
    try:
        qubits, gates = NAMED_ALGORITHMS[name]
    except KeyError:
        raise InvalidProfile(
            "name", name, f"is not one of {sorted(NAMED_ALGORITHMS)}"
        ) from None
    return AlgorithmProfile(name, qubits, gates)


def qec_profiles() -> List[AlgorithmProfile]:
    """Fixed error-correction batch."""
    return [AlgorithmProfile(name, q, g) for name, q, g in QEC_PROFILES]


def benchmark_profiles(seed: Optional[int] = None) -> List[AlgorithmProfile]:
    """
    Randomized benchmark batch, one profile per benchmark algorithm.

    qubits = 2 + r % 6, gates = qubits * 4 + r' % 20.

    Args:
        seed: numpy Generator seed; None draws fresh entropy

    Returns:
        List of profiles in BENCHMARK_ALGORITHMS order
    """
    rng = np.random.default_rng(seed)
    profiles = []
    for name in BENCHMARK_ALGORITHMS:
        qubits = BENCHMARK_QUBIT_BASE + int(rng.integers(0, BENCHMARK_QUBIT_SPREAD))
        gates = qubits * BENCHMARK_GATES_PER_QUBIT + int(rng.integers(0, BENCHMARK_GATE_SPREAD))
        profiles.append(AlgorithmProfile(name, qubits, gates))
    return profiles


def custom_profile(
    name: str,
    qubit_count: int,
    gate_count: int,
    min_qubits: int = 2,
    max_qubits: int = 10,
    min_gates: int = 4,
) -> AlgorithmProfile:
    """
    User-entered profile, checked against the interactive custom bounds.

    The engine bounds still apply afterwards in validate_profile().
    """
    if not min_qubits <= qubit_count <= max_qubits:
        raise InvalidProfile(
            "qubit_count", qubit_count, f"must be within [{min_qubits}, {max_qubits}]"
        )
    if gate_count < min_gates:
        raise InvalidProfile("gate_count", gate_count, f"must be >= {min_gates}")
    return AlgorithmProfile(name, qubit_count, gate_count)
