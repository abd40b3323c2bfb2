"""
qcore/metrics.py - Metrics Calculator

Closed-form metrics of (qubit_count q, gate_count g). No state, no clamping:
fidelity and decoherence time go negative for large profiles and that is
valid output.
"""

import math
from typing import List, Tuple

from .constants import (
    FIDELITY_BASE,
    FIDELITY_PER_QUBIT,
    FIDELITY_PER_GATE,
    DECOHERENCE_BASE_US,
    DECOHERENCE_PER_QUBIT_US,
    LUTS_PER_QUBIT,
    LUTS_PER_GATE,
    CLOCK_BASE_MHZ,
    CLOCK_PER_QUBIT_MHZ,
    CLOCK_PER_GATE_MHZ,
)
from .types_result import QubitSample, RunMetrics


def fidelity(q: int, g: int) -> float:
    """0.95 - 0.01*q - 0.001*g"""
    return FIDELITY_BASE - FIDELITY_PER_QUBIT * q - FIDELITY_PER_GATE * g


def decoherence_time(q: int) -> float:
    """100 - 2*q, in microseconds."""
    return DECOHERENCE_BASE_US - DECOHERENCE_PER_QUBIT_US * q


def resource_units(q: int, g: int) -> int:
    """15*q + 3*g abstract logic cells."""
    return LUTS_PER_QUBIT * q + LUTS_PER_GATE * g


def clock_estimate(q: int, g: int) -> float:
    """50 + 2.5*q + 0.1*g, in MHz."""
    return CLOCK_BASE_MHZ + CLOCK_PER_QUBIT_MHZ * q + CLOCK_PER_GATE_MHZ * g


def amplitude(i: int, q: int) -> Tuple[float, float, float]:
    """
    Decorative amplitude triple for qubit i of q.

    real = sin(i*pi/q), imag = cos(i*pi/q), probability = real^2 + imag^2.
    Independent of register contents; probability is ~1 for every i.

    Returns:
        tuple: (real, imag, probability)
    """
    angle = i * math.pi / q
    real = math.sin(angle)
    imag = math.cos(angle)
    return real, imag, real * real + imag * imag


def compute_metrics(q: int, g: int) -> RunMetrics:
    """All four scalar metrics for one profile."""
    return RunMetrics(
        fidelity=fidelity(q, g),
        decoherence_time=decoherence_time(q),
        resource_units=resource_units(q, g),
        frequency_mhz=clock_estimate(q, g),
    )


def qubit_samples(q: int, run_id=None) -> List[QubitSample]:
    """One QubitSample per qubit index, in index order."""
    samples = []
    for i in range(q):
        real, imag, probability = amplitude(i, q)
        samples.append(QubitSample(
            run_id=run_id,
            qubit_index=i,
            amplitude_real=real,
            amplitude_imag=imag,
            probability=probability,
        ))
    return samples
