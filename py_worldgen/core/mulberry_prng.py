"""
Python implementation of the Mulberry32 PRNG used to seed noise fields.

Mulberry32 is a tiny 32-bit generator with good avalanche behaviour, which
is enough to shuffle a 256-entry permutation table without low seeds
producing visibly correlated noise.
"""

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & _MASK32


def _imul(a, b):
    """32-bit integer multiplication, wrapping like C unsigned arithmetic."""
    return (a * b) & _MASK32


def fold_seed(seed: int) -> int:
    """
    Reduce an arbitrary signed integer seed to a 32-bit generator state.

    Negative seeds are taken modulo 2**64 and the high word is folded into
    the low word, so 53-bit seeds still influence every output bit.
    """
    seed = int(seed) & _MASK64
    return _uint32(seed ^ (seed >> 32))


class MulberryPRNG:
    """
    Mulberry32 PRNG.

    Deterministic for a given seed and call sequence: two instances built
    from the same seed produce identical streams.
    """

    def __init__(self, seed: int):
        """Initialize with an integer seed."""
        self.seed = int(seed)
        self.state = fold_seed(seed)

    def next(self) -> float:
        """Generate next random number in [0, 1)."""
        self.state = _uint32(self.state + 0x6D2B79F5)
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= _uint32(t + _imul(t ^ (t >> 7), t | 61))
        return _uint32(t ^ (t >> 14)) / 4294967296.0
