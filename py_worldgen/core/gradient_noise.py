"""
2D gradient (Perlin-style) noise built on a seeded permutation table.

The permutation of [0..255] is shuffled with the Mulberry32 PRNG
(Fisher-Yates) and duplicated to 512 entries so corner hashing never needs
a modulo.
"""

import math

import numpy as np

from .mulberry_prng import MulberryPRNG

PERMUTATION_SIZE = 256


def fade(t: float) -> float:
    """Smootherstep curve 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation."""
    return a + t * (b - a)


def grad(hash_value: int, x: float, y: float) -> float:
    """Dot product of (x, y) with one of the hashed corner gradients."""
    h = hash_value & 15
    u = x if h < 8 else y
    if h < 4:
        v = y
    elif h == 12 or h == 14:
        v = x
    else:
        v = 0.0
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def build_permutation(seed: int) -> np.ndarray:
    """
    Build the doubled permutation table for a seed.

    Returns:
        int32 array of length 512 where perm[i] == perm[i + 256]
    """
    prng = MulberryPRNG(seed)
    p = list(range(PERMUTATION_SIZE))

    for i in range(PERMUTATION_SIZE - 1, 0, -1):
        j = int(prng.next() * (i + 1))
        p[i], p[j] = p[j], p[i]

    return np.array(p + p, dtype=np.int32)


class GradientNoise:
    """
    Single-octave 2D gradient noise field.

    Instances are immutable after construction, so one field can be shared
    by several fractal combinators.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self.perm = build_permutation(self.seed)
        self.perm.setflags(write=False)
        # Plain list lookups are much faster than numpy scalar indexing
        self._perm = self.perm.tolist()

    def sample(self, x: float, y: float) -> float:
        """
        Sample the field at (x, y).

        Returns:
            Noise value in [-1, 1]; exactly 0 on lattice points
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Noise coordinates must be finite, got ({x}, {y})")
        perm = self._perm
        fx = math.floor(x)
        fy = math.floor(y)
        xi = int(fx) & 255
        yi = int(fy) & 255

        # Relative position inside the cell, in [0, 1)
        x -= fx
        y -= fy

        u = fade(x)
        v = fade(y)

        a = perm[xi] + yi
        b = perm[xi + 1] + yi

        value = lerp(
            lerp(grad(perm[a], x, y), grad(perm[b], x - 1.0, y), u),
            lerp(grad(perm[a + 1], x, y - 1.0), grad(perm[b + 1], x - 1.0, y - 1.0), u),
            v,
        )
        return max(-1.0, min(1.0, value))

    def __repr__(self):
        return f"GradientNoise(seed={self.seed})"
