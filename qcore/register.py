"""
qcore/register.py - Qubit Register

Fixed-size array of 32-bit state words, one per qubit. The high bit is the
computational-basis indicator, the low bits accumulate phase/noise.
Owned by exactly one GateStageMachine; never shared across runs.
"""

from typing import Tuple

import numpy as np

from .constants import GROUND_STATE, PHASE_MASK, UPPER_MASK, WORD_BITS


def _mask_bits(mask: int, qubit_count: int) -> np.ndarray:
    """Per-qubit slice of mask: bit i for qubit i, 0 for i >= 32."""
    index = np.arange(qubit_count, dtype=np.uint64)
    shifts = np.minimum(index, WORD_BITS - 1)
    bits = (np.uint64(mask) >> shifts) & np.uint64(1)
    bits[index >= WORD_BITS] = 0
    return bits.astype(np.uint32)


class QubitRegister:
    """qubit_count words initialized to the ground-state pattern."""

    def __init__(self, qubit_count: int):
        if qubit_count < 1:
            raise ValueError(f"qubit_count must be >= 1, got {qubit_count}")
        self.qubit_count = qubit_count
        self._words = np.full(qubit_count, GROUND_STATE, dtype=np.uint32)

    def reset(self) -> None:
        """Set every word to GROUND_STATE."""
        self._words.fill(GROUND_STATE)

    def apply_xor_mask(self, mask: int) -> None:
        """Superposition: XOR each word's low bit with its slice of mask."""
        self._words ^= _mask_bits(mask, self.qubit_count)

    def apply_controlled_update(self, control_idx: int, target_idx: int) -> None:
        """Entanglement: target ^= control. No-op below two qubits."""
        if self.qubit_count < 2:
            return
        for idx in (control_idx, target_idx):
            if not 0 <= idx < self.qubit_count:
                raise IndexError(f"qubit index {idx} out of range 0..{self.qubit_count - 1}")
        self._words[target_idx] ^= self._words[control_idx]

    def apply_phase_increment(self, mask: int) -> None:
        """Phase: add mask's low 16 bits into each word's low 16 bits, mod 2^16."""
        increment = np.uint32(mask & PHASE_MASK)
        low = (self._words & np.uint32(PHASE_MASK)) + increment
        self._words = (self._words & np.uint32(UPPER_MASK)) | (low & np.uint32(PHASE_MASK))

    def collapse(self, mask: int) -> Tuple[int, ...]:
        """
        Measurement bit per qubit.

        Args:
            mask: PRSG state; bit i is the random bit for qubit i

        Returns:
            tuple: (mask bit i) XOR (low bit of word i), qubit 0 first
        """
        outcome = _mask_bits(mask, self.qubit_count) ^ (self._words & np.uint32(1))
        return tuple(int(bit) for bit in outcome)

    def words(self) -> Tuple[int, ...]:
        """Current words as plain ints."""
        return tuple(int(word) for word in self._words)

    def __len__(self) -> int:
        return self.qubit_count
