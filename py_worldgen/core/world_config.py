"""
Aggregate world configuration.

A WorldConfig is immutable; derive a new one with ``model_copy(update=...)``
or ``WorldConfig.model_validate(data)`` and hand it to
``WorldGenerator.configure``.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .biomes import BiomeThresholds
from .climate import ClimateParams
from .octave_noise import OctaveParams
from .resources import ResourceParams
from .shape_modifiers import ContinentalParams, RadialGradientParams
from .terrain import DEFAULT_TERRAIN_WEIGHTS, validate_weights


def _elevation_defaults() -> OctaveParams:
    return OctaveParams(
        octave_count=7,
        base_frequency=1.0,
        persistence=0.5,
        lacunarity=2.0,
        scale=180.0,
        seed_offset=0,
        octave_seed_stride=1000,
    )


def _moisture_defaults() -> OctaveParams:
    return OctaveParams(
        octave_count=7,
        base_frequency=0.8,
        persistence=0.6,
        lacunarity=2.0,
        scale=220.0,
        seed_offset=100_000,
        octave_seed_stride=2000,
    )


class WorldConfig(BaseModel):
    """Generator configuration for one deterministic world."""

    model_config = ConfigDict(frozen=True)

    seed: int = Field(default=42, ge=-(2 ** 53), le=2 ** 53, description="World seed")
    world_width: float = Field(default=1000.0, gt=0, description="World extent along x")
    world_height: float = Field(default=1000.0, gt=0, description="World extent along y")

    elevation: OctaveParams = Field(default_factory=_elevation_defaults)
    moisture: OctaveParams = Field(default_factory=_moisture_defaults)
    climate: ClimateParams = Field(default_factory=ClimateParams)
    radial_gradient: RadialGradientParams = Field(default_factory=RadialGradientParams)
    continental: ContinentalParams = Field(default_factory=ContinentalParams)
    thresholds: BiomeThresholds = Field(default_factory=BiomeThresholds)
    resources: ResourceParams = Field(default_factory=ResourceParams)
    terrain_weights: Tuple[float, ...] = Field(
        default=DEFAULT_TERRAIN_WEIGHTS,
        description="Relative weights of the seven terrain bands",
    )

    @field_validator("terrain_weights")
    @classmethod
    def _check_weights(cls, value):
        return validate_weights(value)

    def with_elevation(self, **changes) -> "WorldConfig":
        """Copy with elevation noise parameters changed."""
        return self._with_section("elevation", changes)

    def with_moisture(self, **changes) -> "WorldConfig":
        """Copy with moisture noise parameters changed."""
        return self._with_section("moisture", changes)

    def with_climate(self, **changes) -> "WorldConfig":
        """Copy with climate parameters changed."""
        return self._with_section("climate", changes)

    def with_continental(self, **changes) -> "WorldConfig":
        """Copy with continental falloff parameters changed."""
        return self._with_section("continental", changes)

    def with_radial_gradient(self, **changes) -> "WorldConfig":
        """Copy with radial gradient parameters changed."""
        return self._with_section("radial_gradient", changes)

    def with_resources(self, **changes) -> "WorldConfig":
        """Copy with resource parameters changed."""
        return self._with_section("resources", changes)

    def _with_section(self, name: str, changes) -> "WorldConfig":
        # Round-trip through validation so invalid values are rejected
        data = self.model_dump()
        data[name] = {**data[name], **changes}
        return WorldConfig.model_validate(data)
