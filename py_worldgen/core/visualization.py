"""
Visualization modes.

The core never deals in colors; a mode only selects which plain value of a
tile the viewer should map to a color.
"""

from enum import Enum
from typing import Sequence, Union

from .terrain import ElevationBand, terrain_type_for_elevation


class VisualizationMode(str, Enum):
    """What a map view displays."""

    ELEVATION = "elevation"
    MOISTURE = "moisture"
    TEMPERATURE = "temperature"
    BIOME = "biome"
    RESOURCE = "resource"
    NOISE = "noise"
    TERRAIN = "terrain"


def display_value(mode: VisualizationMode, tile, terrain_bands: Sequence[ElevationBand]) -> Union[float, int]:
    """
    Plain value of a tile for a visualization mode.

    Args:
        mode: Visualization mode
        tile: Tile from WorldGenerator.tile_at
        terrain_bands: Weight-derived bands used by the TERRAIN mode

    Returns:
        A float in [0, 1] for scalar fields, an int tag for categorical ones
        (0 means "no resource" in RESOURCE mode)
    """
    mode = VisualizationMode(mode)
    if mode is VisualizationMode.ELEVATION:
        return tile.elevation
    if mode is VisualizationMode.MOISTURE:
        return tile.moisture
    if mode is VisualizationMode.TEMPERATURE:
        return tile.temperature
    if mode is VisualizationMode.BIOME:
        return int(tile.biome)
    if mode is VisualizationMode.RESOURCE:
        return int(tile.resource.kind) if tile.resource is not None else 0
    if mode is VisualizationMode.NOISE:
        return tile.raw_elevation
    if mode is VisualizationMode.TERRAIN:
        return int(terrain_type_for_elevation(tile.elevation, terrain_bands))
    raise ValueError(f"Unhandled visualization mode: {mode}")
