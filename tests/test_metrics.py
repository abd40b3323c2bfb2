"""
tests/test_metrics.py - Metrics Calculator Tests

Closed-form values for the preset profiles; no clamping.
"""

import math

import pytest

from qcore import (
    amplitude,
    clock_estimate,
    compute_metrics,
    decoherence_time,
    fidelity,
    qubit_samples,
    resource_units,
)


class TestFormulas:

    def test_bell_state(self):
        m = compute_metrics(2, 4)
        assert m.resource_units == 42
        assert m.frequency_mhz == pytest.approx(55.4, abs=1e-9)
        assert m.fidelity == pytest.approx(0.926, abs=1e-9)
        assert m.decoherence_time == pytest.approx(96.0, abs=1e-9)

    def test_shor(self):
        m = compute_metrics(8, 64)
        assert m.resource_units == 312
        assert m.fidelity == pytest.approx(0.806, abs=1e-9)
        assert m.frequency_mhz == pytest.approx(76.4, abs=1e-9)
        assert m.decoherence_time == pytest.approx(84.0, abs=1e-9)

    def test_resource_units_is_int(self):
        assert isinstance(resource_units(5, 25), int)
        assert resource_units(5, 25) == 150

    def test_negative_values_are_valid(self):
        """Large profiles push fidelity and decoherence below zero."""
        assert fidelity(100, 1000) == pytest.approx(-1.05, abs=1e-9)
        assert decoherence_time(100) == pytest.approx(-100.0, abs=1e-9)

    def test_clock_grows_with_size(self):
        assert clock_estimate(10, 100) > clock_estimate(2, 4)


class TestAmplitude:

    def test_index_zero(self):
        real, imag, probability = amplitude(0, 4)
        assert real == pytest.approx(0.0, abs=1e-9)
        assert imag == pytest.approx(1.0, abs=1e-9)
        assert probability == pytest.approx(1.0, abs=1e-9)

    def test_uses_pi_over_q(self):
        real, imag, _ = amplitude(1, 4)
        assert real == pytest.approx(math.sin(math.pi / 4), abs=1e-9)
        assert imag == pytest.approx(math.cos(math.pi / 4), abs=1e-9)

    @pytest.mark.parametrize("qubits", range(1, 101))
    def test_probability_is_one(self, qubits):
        for i in range(qubits):
            assert amplitude(i, qubits)[2] == pytest.approx(1.0, abs=1e-9), f"q={qubits} i={i}"


class TestQubitSamples:

    def test_one_sample_per_qubit_in_order(self):
        samples = qubit_samples(5)
        assert [s.qubit_index for s in samples] == [0, 1, 2, 3, 4]
        assert all(s.run_id is None for s in samples)

    def test_run_id_stamped(self):
        samples = qubit_samples(2, run_id=7)
        assert {s.run_id for s in samples} == {7}
