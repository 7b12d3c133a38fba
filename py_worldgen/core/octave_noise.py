"""
Multi-octave (fractal) noise combinator.

Each octave is an independently seeded GradientNoise field; octave seeds are
spaced by a configurable stride so octaves stay decorrelated. Octave
amplitudes and frequencies are derived from persistence and lacunarity.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .gradient_noise import GradientNoise

MAX_OCTAVES = 16


class OctaveParams(BaseModel):
    """Parameters of one fractal noise field."""

    model_config = ConfigDict(frozen=True)

    octave_count: int = Field(default=4, ge=1, le=MAX_OCTAVES, description="Number of octaves")
    base_frequency: float = Field(default=1.0, gt=0, description="Frequency of the first octave")
    persistence: float = Field(default=0.5, gt=0, le=1, description="Amplitude decay per octave")
    lacunarity: float = Field(default=2.0, ge=1, description="Frequency growth per octave")
    scale: float = Field(default=100.0, gt=0, description="World units per noise unit")
    seed_offset: int = Field(default=0, description="Offset added to the world seed for this field")
    octave_seed_stride: int = Field(default=1000, ge=1, description="Seed spacing between octaves")


@dataclass(frozen=True)
class Octave:
    """One frequency/amplitude layer."""

    frequency: float
    amplitude: float


def calculate_octaves(params: OctaveParams) -> Tuple[Octave, ...]:
    """
    Derive per-octave frequency and amplitude.

    Amplitude strictly decreases when persistence < 1 and frequency strictly
    increases when lacunarity > 1.
    """
    octaves = []
    frequency = params.base_frequency
    amplitude = 1.0
    for _ in range(params.octave_count):
        octaves.append(Octave(frequency=frequency, amplitude=amplitude))
        frequency *= params.lacunarity
        amplitude *= params.persistence
    return tuple(octaves)


def _needs_new_fields(old: OctaveParams, new: OctaveParams) -> bool:
    return (
        old.octave_count != new.octave_count
        or old.seed_offset != new.seed_offset
        or old.octave_seed_stride != new.octave_seed_stride
    )


class OctaveNoise:
    """
    Fractal noise field sampled in [0, 1].

    The field list is only rebuilt when the seed, octave count or seed
    stride change; other parameter changes reuse the existing permutation
    tables.
    """

    def __init__(
        self,
        seed: int,
        params: Optional[OctaveParams] = None,
        fields: Optional[List[GradientNoise]] = None,
    ):
        """
        Initialize the combinator.

        Args:
            seed: World seed; the field seed is seed + params.seed_offset
            params: Octave parameters
            fields: Pre-built octave fields to share (must match the params)
        """
        self.seed = int(seed)
        self.params = params or OctaveParams()
        self.octaves = calculate_octaves(self.params)
        self._amplitude_sum = sum(octave.amplitude for octave in self.octaves)

        if fields is None:
            fields = self._build_fields()
        elif len(fields) != self.params.octave_count:
            raise ValueError(
                f"Expected {self.params.octave_count} octave fields, got {len(fields)}"
            )
        self.fields = tuple(fields)

    @property
    def base_seed(self) -> int:
        return self.seed + self.params.seed_offset

    def octave_seed(self, index: int) -> int:
        """Seed of the octave at index."""
        return self.base_seed + index * self.params.octave_seed_stride

    def _build_fields(self) -> List[GradientNoise]:
        return [GradientNoise(self.octave_seed(i)) for i in range(self.params.octave_count)]

    def sample(self, x: float, y: float) -> float:
        """
        Get the fractal noise value at (x, y).

        Returns:
            Value in [0, 1]
        """
        scaled_x = x / self.params.scale
        scaled_y = y / self.params.scale

        value = 0.0
        for octave, field in zip(self.octaves, self.fields):
            value += octave.amplitude * field.sample(
                scaled_x * octave.frequency, scaled_y * octave.frequency
            )

        # Weighted mean is in [-1, 1]; remap to [0, 1]
        normalized = (value / self._amplitude_sum + 1.0) * 0.5
        return min(1.0, max(0.0, normalized))

    def reconfigured(self, seed: int, params: OctaveParams) -> "OctaveNoise":
        """
        Return a combinator for new parameters.

        The octave fields are shared with this instance unless the seed,
        octave count or stride changed, so scale/persistence tweaks never
        reallocate permutation tables. This instance is left untouched.
        """
        if int(seed) == self.seed and not _needs_new_fields(self.params, params):
            return OctaveNoise(seed, params, fields=list(self.fields))
        return OctaveNoise(seed, params)

    def shares_fields_with(self, other: "OctaveNoise") -> bool:
        """True if both combinators use the very same octave field objects."""
        return len(self.fields) == len(other.fields) and all(
            a is b for a, b in zip(self.fields, other.fields)
        )

    def __repr__(self):
        return (
            f"OctaveNoise(seed={self.base_seed}, octaves={self.params.octave_count}, "
            f"scale={self.params.scale}, persistence={self.params.persistence})"
        )
