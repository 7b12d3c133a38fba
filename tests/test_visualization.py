"""Tests for visualization modes."""

import pytest

from py_worldgen.core.biomes import BiomeType
from py_worldgen.core.resources import ResourceDeposit, ResourceKind
from py_worldgen.core.terrain import TerrainType, calculate_terrain_bands
from py_worldgen.core.visualization import VisualizationMode, display_value
from py_worldgen.core.world_generator import Tile


class TestDisplayValue:
    """Test the mode dispatch."""

    @pytest.fixture
    def tile(self):
        return Tile(
            x=1.0,
            y=2.0,
            elevation=0.6,
            raw_elevation=0.65,
            moisture=0.3,
            temperature=0.7,
            biome=BiomeType.GRASSLAND,
            resource=ResourceDeposit(kind=ResourceKind.GOLD, density=0.9, deposit_size=4),
        )

    @pytest.fixture
    def bands(self):
        return calculate_terrain_bands([1, 1, 1, 1, 1, 1, 1])

    def test_scalar_modes(self, tile, bands):
        assert display_value(VisualizationMode.ELEVATION, tile, bands) == 0.6
        assert display_value(VisualizationMode.MOISTURE, tile, bands) == 0.3
        assert display_value(VisualizationMode.TEMPERATURE, tile, bands) == 0.7
        assert display_value(VisualizationMode.NOISE, tile, bands) == 0.65

    def test_categorical_modes(self, tile, bands):
        assert display_value(VisualizationMode.BIOME, tile, bands) == int(BiomeType.GRASSLAND)
        assert display_value(VisualizationMode.RESOURCE, tile, bands) == int(ResourceKind.GOLD)
        assert display_value(VisualizationMode.TERRAIN, tile, bands) == int(TerrainType.GRASS)

    def test_no_resource_is_zero(self, tile, bands):
        empty = Tile(**{**tile.__dict__, "resource": None})
        assert display_value(VisualizationMode.RESOURCE, empty, bands) == 0

    def test_mode_from_string(self, tile, bands):
        assert display_value("biome", tile, bands) == int(BiomeType.GRASSLAND)

    def test_unknown_mode(self, tile, bands):
        with pytest.raises(ValueError):
            display_value("colors", tile, bands)

    def test_tile_biome_name(self, tile):
        assert tile.biome_name == "Grassland"
