"""
Shape modifiers that sculpt raw elevation noise into landmasses.

Two transforms are applied in a fixed order, radial gradient first and
continental falloff second; they do not commute.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .octave_noise import OctaveNoise, OctaveParams


class RadialGradientParams(BaseModel):
    """Radial falloff towards the world edge (single central continent)."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="Apply the radial gradient")
    center_x: float = Field(default=0.5, ge=0, le=1, description="Center X as a fraction of world width")
    center_y: float = Field(default=0.5, ge=0, le=1, description="Center Y as a fraction of world height")
    inner_radius: float = Field(default=0.5, ge=0, lt=1, description="Unaffected radius (normalized distance)")
    falloff_exponent: float = Field(default=2.0, gt=0, description="Falloff curve exponent")
    strength: float = Field(default=0.5, ge=0, le=1, description="Elevation removed at the edge")


def _continental_noise_defaults() -> OctaveParams:
    return OctaveParams(
        octave_count=2,
        base_frequency=1.0,
        persistence=0.5,
        lacunarity=2.0,
        scale=300.0,
        seed_offset=300_000,
    )


class ContinentalParams(BaseModel):
    """Threshold falloff around noise-defined continent cores."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Apply the continental falloff")
    threshold: float = Field(default=0.45, ge=0, le=1, description="Noise value above which land is a continent core")
    sharpness: float = Field(default=3.0, gt=0, description="How quickly elevation drops outside cores")
    strength: float = Field(default=0.6, ge=0, le=1, description="Overall falloff strength")
    ocean_depth: float = Field(default=0.5, ge=0, le=1, description="Depth factor of separating oceans")
    noise: OctaveParams = Field(default_factory=_continental_noise_defaults)


def normalized_distance(
    x: float, y: float, params: RadialGradientParams, world_width: float, world_height: float
) -> float:
    """
    Distance from the gradient center normalized to [0, 1].

    1.0 is the distance from the center to the farthest world corner.
    """
    center_x = params.center_x * world_width
    center_y = params.center_y * world_height

    max_distance = math.hypot(
        max(center_x, world_width - center_x), max(center_y, world_height - center_y)
    )
    if max_distance == 0.0:
        return 0.0

    distance = math.hypot(x - center_x, y - center_y)
    return min(distance / max_distance, 1.0)


def apply_radial_gradient(
    x: float,
    y: float,
    elevation: float,
    params: RadialGradientParams,
    world_width: float,
    world_height: float,
) -> float:
    """Fade elevation towards the world edge beyond the inner radius."""
    if not params.enabled:
        return elevation

    distance = normalized_distance(x, y, params, world_width, world_height)
    if distance <= params.inner_radius:
        return elevation

    falloff = (distance - params.inner_radius) / (1.0 - params.inner_radius)
    falloff = min(1.0, max(0.0, falloff))
    modified = elevation * (1.0 - falloff ** params.falloff_exponent * params.strength)
    return min(1.0, max(0.0, modified))


class ContinentalFalloff:
    """
    Continental falloff bound to its own seeded low-octave noise field.

    Where the continent field is at or above the threshold, elevation is
    untouched; elsewhere it is reduced proportionally to the distance below
    the threshold.
    """

    def __init__(self, seed: int, params: ContinentalParams, noise: Optional[OctaveNoise] = None):
        self.params = params
        self.noise = noise if noise is not None else OctaveNoise(seed, params.noise)

    def reconfigured(self, seed: int, params: ContinentalParams) -> "ContinentalFalloff":
        return ContinentalFalloff(seed, params, self.noise.reconfigured(seed, params.noise))

    def continent_value(self, x: float, y: float) -> float:
        return self.noise.sample(x, y)

    def apply(self, x: float, y: float, elevation: float) -> float:
        """Apply the falloff; identity when disabled."""
        params = self.params
        if not params.enabled:
            return elevation

        value = self.noise.sample(x, y)
        if value >= params.threshold:
            return elevation

        falloff = min(1.0, max(0.0, (params.threshold - value) * params.sharpness))
        reduction = falloff * params.strength * params.ocean_depth
        return min(1.0, max(0.0, elevation * (1.0 - reduction)))
