"""
qcore/prsg.py - Pseudorandom Sequence Generator

32-bit Fibonacci LFSR standing in for quantum randomness. Same seed, same
stream: every run is bit-for-bit reproducible.
"""

from .constants import PRSG_SEED, PRSG_TAPS, WORD_BITS, WORD_MASK


class Prsg:
    """Linear-feedback shift register with taps at bits 31, 21, 1, 0."""

    def __init__(self, seed: int = PRSG_SEED):
        if not seed & WORD_MASK:
            raise ValueError("PRSG seed must be non-zero")
        self._seed = seed & WORD_MASK
        self.state = self._seed
        self.ticks = 0

    def reseed(self) -> None:
        """Return to the fixed seed. Only called at run start."""
        self.state = self._seed
        self.ticks = 0

    def next(self) -> int:
        """
        Advance one tick.

        Shifts left, feeding the XOR of the tap bits into bit 0.

        Returns:
            int: The bit shifted out of position 31
        """
        feedback = 0
        for tap in PRSG_TAPS:
            feedback ^= (self.state >> tap) & 1
        out = (self.state >> (WORD_BITS - 1)) & 1
        self.state = ((self.state << 1) | feedback) & WORD_MASK
        self.ticks += 1
        return out

    def peek(self, n: int) -> int:
        """Low n bits of the current state (n clamped to [0, 32])."""
        n = max(0, min(n, WORD_BITS))
        return self.state & ((1 << n) - 1)

    def __repr__(self) -> str:
        return f"Prsg(state=0x{self.state:08X}, ticks={self.ticks})"
