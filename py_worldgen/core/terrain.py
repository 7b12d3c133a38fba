"""
Weight-derived terrain bands.

Each terrain type receives a slice of [0, 1] proportional to its weight;
the first slice starts at exactly 0.0 and the last ends at exactly 1.0.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence, Tuple


class TerrainType(IntEnum):
    """Terrain types in order of height."""

    OCEAN_DEEP = 0
    OCEAN_MEDIUM = 1
    OCEAN_SHALLOW = 2
    BEACH = 3
    GRASS = 4
    MOUNTAIN = 5
    SNOW = 6


TERRAIN_NAMES = {
    TerrainType.OCEAN_DEEP: "Deep Ocean",
    TerrainType.OCEAN_MEDIUM: "Medium Ocean",
    TerrainType.OCEAN_SHALLOW: "Shallow Ocean",
    TerrainType.BEACH: "Beach",
    TerrainType.GRASS: "Grassland",
    TerrainType.MOUNTAIN: "Mountains",
    TerrainType.SNOW: "Snow",
}

# Relative distribution presets
TERRAIN_PRESETS = {
    "islands": (70, 20, 20, 12, 35, 30, 0),
    "continents": (35, 20, 20, 15, 30, 30, 25),
    "lakes": (20, 15, 15, 15, 50, 35, 45),
}

DEFAULT_TERRAIN_WEIGHTS = TERRAIN_PRESETS["continents"]


@dataclass(frozen=True)
class ElevationBand:
    """Elevation interval [min, max) assigned to one terrain type."""

    terrain: TerrainType
    min: float
    max: float


def validate_weights(weights: Sequence[float]) -> Tuple[float, ...]:
    weights = tuple(float(w) for w in weights)
    if len(weights) != len(TerrainType):
        raise ValueError(f"Expected {len(TerrainType)} terrain weights, got {len(weights)}")
    if any(w < 0 for w in weights):
        raise ValueError("Terrain weights must be non-negative")
    if sum(weights) <= 0:
        raise ValueError("Terrain weights must have a positive sum")
    return weights


def calculate_terrain_bands(weights: Sequence[float]) -> Tuple[ElevationBand, ...]:
    """
    Calculate elevation bands from terrain weights.

    Args:
        weights: One non-negative weight per TerrainType, in height order

    Returns:
        Bands in height order; non-decreasing, ending at exactly 1.0
    """
    weights = validate_weights(weights)
    total = sum(weights)

    # Everything above the last weighted band belongs to it
    last_filled = max(i for i, w in enumerate(weights) if w > 0)

    bands = []
    previous = 0.0
    for index, (terrain, weight) in enumerate(zip(TerrainType, weights)):
        upper = 1.0 if index >= last_filled else min(1.0, previous + weight / total)
        bands.append(ElevationBand(terrain=terrain, min=previous, max=upper))
        previous = upper

    return tuple(bands)


def terrain_type_for_elevation(elevation: float, bands: Sequence[ElevationBand]) -> TerrainType:
    """Terrain type whose band contains the elevation; 1.0 maps to the highest non-empty band."""
    for band in bands:
        if band.min <= elevation < band.max:
            return band.terrain
    if elevation < bands[0].min:
        return bands[0].terrain
    return next(band.terrain for band in reversed(bands) if band.max > band.min)
