"""
tests/test_register.py - Qubit Register Tests

Word-level gate operations on the 32-bit register.
"""

import pytest

from qcore import GROUND_STATE, QubitRegister


class TestGroundState:

    def test_every_word_is_ground(self):
        reg = QubitRegister(5)
        assert reg.words() == (GROUND_STATE,) * 5
        assert len(reg) == 5

    def test_reset_restores_ground(self):
        reg = QubitRegister(3)
        reg.apply_xor_mask(0b111)
        reg.apply_phase_increment(0x1234)
        reg.reset()
        assert reg.words() == (0x80000000,) * 3

    def test_zero_qubits_rejected(self):
        with pytest.raises(ValueError):
            QubitRegister(0)


class TestXorMask:
    """Superposition: bit i of the mask flips word i's low bit."""

    def test_per_qubit_bits(self):
        reg = QubitRegister(3)
        reg.apply_xor_mask(0b101)
        assert reg.words() == (0x80000001, 0x80000000, 0x80000001)

    def test_applying_twice_cancels(self):
        reg = QubitRegister(4)
        reg.apply_xor_mask(0b1011)
        reg.apply_xor_mask(0b1011)
        assert reg.words() == (GROUND_STATE,) * 4

    def test_qubits_beyond_32_untouched(self):
        """Qubits at index >= 32 get mask bit 0."""
        reg = QubitRegister(40)
        reg.apply_xor_mask(0xFFFFFFFF)
        words = reg.words()
        assert words[:32] == (0x80000001,) * 32
        assert words[32:] == (GROUND_STATE,) * 8


class TestControlledUpdate:
    """Entanglement: target ^= control."""

    def test_target_xored_with_control(self):
        reg = QubitRegister(2)
        reg.apply_xor_mask(0b01)
        reg.apply_controlled_update(0, 1)
        assert reg.words() == (0x80000001, 0x80000000 ^ 0x80000001)

    def test_single_qubit_is_noop(self):
        """No second qubit to target; nothing happens, nothing raised."""
        reg = QubitRegister(1)
        reg.apply_controlled_update(0, 1)
        assert reg.words() == (GROUND_STATE,)

    def test_out_of_range_index(self):
        reg = QubitRegister(2)
        with pytest.raises(IndexError):
            reg.apply_controlled_update(0, 5)


class TestPhaseIncrement:
    """Low 16 bits accumulate modulo 2^16; upper bits untouched."""

    def test_adds_low_16_bits(self):
        reg = QubitRegister(2)
        reg.apply_phase_increment(0x0010)
        assert reg.words() == (0x80000010, 0x80000010)

    def test_wraps_without_carry(self):
        reg = QubitRegister(1)
        reg.apply_phase_increment(0xFFFF)
        assert reg.words() == (0x8000FFFF,)
        reg.apply_phase_increment(1)
        assert reg.words() == (0x80000000,), "carry must not reach bit 16"

    def test_mask_upper_bits_ignored(self):
        reg = QubitRegister(1)
        reg.apply_phase_increment(0x12340001)
        assert reg.words() == (0x80000001,)


class TestCollapse:
    """Outcome bit = mask bit i XOR word low bit."""

    def test_ground_state_reads_mask(self):
        reg = QubitRegister(2)
        assert reg.collapse(0b10) == (0, 1)

    def test_low_bit_flips_outcome(self):
        reg = QubitRegister(2)
        reg.apply_xor_mask(0b11)
        assert reg.collapse(0b10) == (1, 0)

    def test_one_bit_per_qubit(self):
        reg = QubitRegister(40)
        outcome = reg.collapse(0xFFFFFFFF)
        assert len(outcome) == 40
        assert outcome[:32] == (1,) * 32
        assert outcome[32:] == (0,) * 8
        assert all(isinstance(bit, int) for bit in outcome)

    def test_collapse_does_not_mutate(self):
        reg = QubitRegister(3)
        before = reg.words()
        reg.collapse(0xFFFF)
        assert reg.words() == before
