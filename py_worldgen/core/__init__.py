"""
Core world generation functionality.
"""

from .mulberry_prng import MulberryPRNG, fold_seed
from .gradient_noise import GradientNoise
from .octave_noise import OctaveNoise, OctaveParams
from .shape_modifiers import ContinentalFalloff, ContinentalParams, RadialGradientParams, apply_radial_gradient
from .climate import Climate, ClimateParams, LatitudeTable
from .biomes import BiomeThresholds, BiomeType, classify
from .terrain import ElevationBand, TerrainType, calculate_terrain_bands
from .resources import ResourceDeposit, ResourceGenerator, ResourceKind, ResourceParams
from .visualization import VisualizationMode
from .world_config import WorldConfig
from .world_generator import (
    BiomeStatistic,
    InvalidConfigurationError,
    RegionSample,
    Tile,
    WorldGenerator,
    biome_distribution,
    region_shape,
)

__all__ = ['MulberryPRNG', 'fold_seed', 'GradientNoise', 'OctaveNoise', 'OctaveParams',
           'ContinentalFalloff', 'ContinentalParams', 'RadialGradientParams', 'apply_radial_gradient',
           'Climate', 'ClimateParams', 'LatitudeTable', 'BiomeThresholds', 'BiomeType', 'classify',
           'ElevationBand', 'TerrainType', 'calculate_terrain_bands',
           'ResourceDeposit', 'ResourceGenerator', 'ResourceKind', 'ResourceParams',
           'VisualizationMode', 'WorldConfig', 'BiomeStatistic', 'InvalidConfigurationError',
           'RegionSample', 'Tile', 'WorldGenerator', 'biome_distribution', 'region_shape']
