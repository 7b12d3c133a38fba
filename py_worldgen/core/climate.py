"""
Climate model for per-coordinate temperature.

This module implements:
- A precomputed latitude temperature table (cosine ease from equator to pole)
- Regional temperature perturbation from a seeded fractal noise field
- Elevation cooling
"""

import math
from typing import Optional

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .octave_noise import OctaveNoise, OctaveParams

logger = structlog.get_logger()


def _temperature_noise_defaults() -> OctaveParams:
    return OctaveParams(
        octave_count=2,
        base_frequency=1.0,
        persistence=0.4,
        lacunarity=2.0,
        scale=200.0,
        seed_offset=200_000,
    )


class ClimateParams(BaseModel):
    """Temperature model options."""

    model_config = ConfigDict(frozen=True)

    equator_position: float = Field(default=0.5, ge=0, le=1, description="Equator as a fraction of world height")
    temperature_variance: float = Field(default=0.2, ge=0, le=1, description="Regional noise amplitude")
    polar_temperature: float = Field(default=0.1, ge=0, le=1, description="Sea-level temperature at the poles")
    equator_temperature: float = Field(default=0.9, ge=0, le=1, description="Sea-level temperature at the equator")
    elevation_cooling: float = Field(default=0.3, ge=0, le=1, description="Temperature drop per unit elevation")
    band_scale: float = Field(default=1.0, gt=0, description=">1 narrows climate bands, <1 widens them")
    noise: OctaveParams = Field(default_factory=_temperature_noise_defaults)

    @model_validator(mode="after")
    def _check_temperature_order(self):
        if self.polar_temperature > self.equator_temperature:
            raise ValueError("polar_temperature must not exceed equator_temperature")
        return self


def latitude_distance(latitude, equator_position: float, band_scale: float = 1.0):
    """
    Normalized distance from the equator.

    Args:
        latitude: Normalized latitude, y / world_height; scalar or array
        equator_position: Equator location (0-1)
        band_scale: Band scaling; the distance is raised to 1/band_scale

    Returns:
        0 at the equator, 1 at the farther pole
    """
    span = max(equator_position, 1.0 - equator_position)
    distance = np.clip(np.abs(np.asarray(latitude, dtype=np.float64) - equator_position) / span, 0.0, 1.0)
    if band_scale != 1.0:
        distance = distance ** (1.0 / band_scale)
    return distance


def base_temperature(latitude, params: ClimateParams):
    """Sea-level temperature at a normalized latitude (scalar or array), before noise."""
    distance = latitude_distance(latitude, params.equator_position, params.band_scale)
    factor = np.cos(distance * np.pi / 2.0)
    return params.polar_temperature + factor * (
        params.equator_temperature - params.polar_temperature
    )


class LatitudeTable:
    """
    Sea-level temperature per world row.

    One entry per integer row 0..world_height; fractional rows are linearly
    interpolated and rows outside the world are clamped to the edge.
    """

    def __init__(self, params: ClimateParams, world_height: float):
        self.world_height = float(world_height)
        rows = int(math.ceil(self.world_height)) + 1

        latitudes = np.arange(rows, dtype=np.float64) / self.world_height
        self.values = base_temperature(latitudes, params)
        self.values.setflags(write=False)
        self._values = self.values.tolist()

        logger.debug("Latitude temperature table computed", rows=rows)

    def __len__(self):
        return len(self._values)

    def lookup(self, y: float) -> float:
        values = self._values
        last = len(values) - 1
        if y <= 0.0:
            return values[0]
        if y >= last:
            return values[last]

        row = int(y)
        t = y - row
        if t == 0.0:
            return values[row]
        return values[row] + t * (values[row + 1] - values[row])


def _table_inputs_changed(old: ClimateParams, new: ClimateParams) -> bool:
    return (
        old.equator_position != new.equator_position
        or old.polar_temperature != new.polar_temperature
        or old.equator_temperature != new.equator_temperature
        or old.band_scale != new.band_scale
    )


class Climate:
    """Handles per-coordinate temperature calculation."""

    def __init__(
        self,
        seed: int,
        params: Optional[ClimateParams] = None,
        world_height: float = 1000.0,
        latitude_table: Optional[LatitudeTable] = None,
        noise: Optional[OctaveNoise] = None,
    ):
        """
        Initialize climate model.

        Args:
            seed: World seed
            params: Climate options
            world_height: Height of the world in world units
            latitude_table: Precomputed table to reuse
            noise: Regional noise field to reuse
        """
        self.seed = int(seed)
        self.params = params or ClimateParams()
        self.world_height = float(world_height)
        if latitude_table is None:
            latitude_table = LatitudeTable(self.params, self.world_height)
        self.latitude_table = latitude_table
        self.noise = noise if noise is not None else OctaveNoise(self.seed, self.params.noise)

    def reconfigured(self, seed: int, params: ClimateParams, world_height: float) -> "Climate":
        """
        Climate for new parameters, reusing the latitude table and noise
        fields where their inputs did not change.
        """
        table = self.latitude_table
        if float(world_height) != self.world_height or _table_inputs_changed(self.params, params):
            table = None
        return Climate(
            seed,
            params,
            world_height,
            latitude_table=table,
            noise=self.noise.reconfigured(seed, params.noise),
        )

    def latitude_temperature(self, y: float) -> float:
        return self.latitude_table.lookup(y)

    def regional_variation(self, x: float, y: float) -> float:
        """Noise perturbation in [-variance, variance]."""
        variance = self.params.temperature_variance
        if variance == 0.0:
            return 0.0
        return (self.noise.sample(x, y) - 0.5) * variance * 2.0

    def calculate_temperature(self, x: float, y: float, elevation: float) -> float:
        """
        Temperature at a coordinate.

        Args:
            x, y: World coordinates
            elevation: Elevation at the coordinate (0-1)

        Returns:
            Temperature in [0, 1]
        """
        temperature = self.latitude_temperature(y)
        temperature += self.regional_variation(x, y)
        temperature -= elevation * self.params.elevation_cooling
        return min(1.0, max(0.0, temperature))
