"""
World generator facade.

Composes noise, shape modifiers, climate, biome classification and resource
placement into one per-coordinate query surface. Every query is a pure
function of the coordinate and the active configuration.

Reconfiguration builds a complete new generator state and publishes it with
a single reference assignment, so concurrent readers always see either the
old or the new world, never a mix.
"""

import math
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import numpy as np
import structlog
from pydantic import ValidationError

from .biomes import BiomeType, biome_name, classify, moisture_band, temperature_band
from .climate import Climate
from .octave_noise import OctaveNoise
from .resources import ResourceDeposit, ResourceGenerator
from .shape_modifiers import ContinentalFalloff, apply_radial_gradient
from .terrain import TERRAIN_NAMES, ElevationBand, calculate_terrain_bands, terrain_type_for_elevation
from .visualization import VisualizationMode, display_value
from .world_config import WorldConfig

logger = structlog.get_logger()


class InvalidConfigurationError(ValueError):
    """Raised when a world configuration fails validation."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass(frozen=True)
class Tile:
    """All generated values at one coordinate."""

    x: float
    y: float
    elevation: float
    raw_elevation: float
    moisture: float
    temperature: float
    biome: BiomeType
    resource: Optional[ResourceDeposit]

    @property
    def biome_name(self) -> str:
        return biome_name(self.biome)


@dataclass(frozen=True)
class RegionSample:
    """Grid of generated values; arrays are indexed [row, column]."""

    xs: np.ndarray
    ys: np.ndarray
    elevation: np.ndarray
    moisture: np.ndarray
    temperature: np.ndarray
    biomes: np.ndarray
    resources: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return self.elevation.shape


@dataclass(frozen=True)
class BiomeStatistic:
    """Share of one biome inside a region."""

    biome: BiomeType
    cell_count: int
    percentage: float
    avg_temperature: float
    avg_moisture: float


@dataclass(frozen=True)
class _GeneratorState:
    config: WorldConfig
    elevation_noise: OctaveNoise
    moisture_noise: OctaveNoise
    climate: Climate
    continental: ContinentalFalloff
    resources: ResourceGenerator
    terrain_bands: Tuple[ElevationBand, ...]


def _coerce_config(config: Union[WorldConfig, Mapping[str, Any], None]) -> WorldConfig:
    if config is None:
        return WorldConfig()
    if isinstance(config, WorldConfig):
        return config
    try:
        return WorldConfig.model_validate(config)
    except ValidationError as e:
        logger.warning("Rejected world configuration", error_count=e.error_count())
        raise InvalidConfigurationError(
            f"Invalid world configuration: {e}",
            errors=e.errors(include_url=False, include_context=False),
        ) from e


def _build_state(config: WorldConfig) -> _GeneratorState:
    seed = config.seed
    return _GeneratorState(
        config=config,
        elevation_noise=OctaveNoise(seed, config.elevation),
        moisture_noise=OctaveNoise(seed, config.moisture),
        climate=Climate(seed, config.climate, config.world_height),
        continental=ContinentalFalloff(seed, config.continental),
        resources=ResourceGenerator(seed, config.resources),
        terrain_bands=calculate_terrain_bands(config.terrain_weights),
    )


def _rebuild_state(previous: _GeneratorState, config: WorldConfig) -> Tuple[_GeneratorState, List[str]]:
    """
    Derive a new state from the previous one.

    Returns:
        The new state and the names of components whose noise fields were
        reallocated
    """
    if previous.config.seed != config.seed:
        return _build_state(config), ["elevation", "moisture", "climate", "continental", "resources"]

    seed = config.seed
    state = _GeneratorState(
        config=config,
        elevation_noise=previous.elevation_noise.reconfigured(seed, config.elevation),
        moisture_noise=previous.moisture_noise.reconfigured(seed, config.moisture),
        climate=previous.climate.reconfigured(seed, config.climate, config.world_height),
        continental=previous.continental.reconfigured(seed, config.continental),
        resources=previous.resources.reconfigured(seed, config.resources),
        terrain_bands=calculate_terrain_bands(config.terrain_weights),
    )

    rebuilt = []
    if not state.elevation_noise.shares_fields_with(previous.elevation_noise):
        rebuilt.append("elevation")
    if not state.moisture_noise.shares_fields_with(previous.moisture_noise):
        rebuilt.append("moisture")
    if not state.climate.noise.shares_fields_with(previous.climate.noise):
        rebuilt.append("climate")
    if not state.continental.noise.shares_fields_with(previous.continental.noise):
        rebuilt.append("continental")
    for kind, noise in state.resources.noises.items():
        old = previous.resources.noises.get(kind)
        if old is None or not noise.shares_fields_with(old):
            rebuilt.append("resources")
            break
    return state, rebuilt


class WorldGenerator:
    """
    Deterministic terrain and climate synthesizer.

    Example:
        >>> world = WorldGenerator(WorldConfig(seed=7))
        >>> tile = world.tile_at(500, 500)
        >>> world.configure(world.config.with_elevation(scale=250))
    """

    def __init__(self, config: Union[WorldConfig, Mapping[str, Any], None] = None):
        """
        Initialize world generator.

        Args:
            config: WorldConfig or a mapping validated into one

        Raises:
            InvalidConfigurationError: If the configuration is invalid
        """
        config = _coerce_config(config)
        self._lock = threading.Lock()
        self._state = _build_state(config)
        logger.info("World generator initialized", seed=config.seed)

    @property
    def config(self) -> WorldConfig:
        """Active configuration."""
        return self._state.config

    @property
    def terrain_bands(self) -> Tuple[ElevationBand, ...]:
        return self._state.terrain_bands

    def configure(self, config: Union[WorldConfig, Mapping[str, Any]]) -> None:
        """
        Replace the active configuration.

        Only sub-generators whose parameters changed are rebuilt; a seed
        change rebuilds everything. Readers keep using the old state until
        the new one is published.

        Raises:
            InvalidConfigurationError: If the configuration is invalid
        """
        config = _coerce_config(config)

        with self._lock:
            previous = self._state
            if config == previous.config:
                logger.debug("Configuration unchanged")
                return
            state, rebuilt = _rebuild_state(previous, config)
            self._state = state

        logger.info(
            "World configuration replaced",
            seed=config.seed,
            rebuilt=rebuilt,
            reused=[
                name
                for name in ("elevation", "moisture", "climate", "continental", "resources")
                if name not in rebuilt
            ],
        )

    # Per-coordinate queries

    @staticmethod
    def _elevation(state: _GeneratorState, x: float, y: float) -> Tuple[float, float]:
        config = state.config
        raw = state.elevation_noise.sample(x, y)
        elevation = apply_radial_gradient(
            x, y, raw, config.radial_gradient, config.world_width, config.world_height
        )
        elevation = state.continental.apply(x, y, elevation)
        assert math.isfinite(elevation), f"non-finite elevation at ({x}, {y})"
        return raw, elevation

    @staticmethod
    def _tile(state: _GeneratorState, x: float, y: float) -> Tile:
        raw, elevation = WorldGenerator._elevation(state, x, y)
        moisture = state.moisture_noise.sample(x, y)
        temperature = state.climate.calculate_temperature(x, y, elevation)
        biome = classify(elevation, moisture, temperature, state.config.thresholds)
        resource = state.resources.resource_at(x, y, biome, elevation, moisture, temperature)
        return Tile(
            x=x,
            y=y,
            elevation=elevation,
            raw_elevation=raw,
            moisture=moisture,
            temperature=temperature,
            biome=biome,
            resource=resource,
        )

    def raw_elevation_at(self, x: float, y: float) -> float:
        """Elevation noise before shape modifiers, in [0, 1]."""
        return self._state.elevation_noise.sample(x, y)

    def elevation_at(self, x: float, y: float) -> float:
        """Shaped elevation in [0, 1]."""
        return self._elevation(self._state, x, y)[1]

    def moisture_at(self, x: float, y: float) -> float:
        """Moisture in [0, 1]."""
        return self._state.moisture_noise.sample(x, y)

    def temperature_at(self, x: float, y: float, elevation: Optional[float] = None) -> float:
        """
        Temperature in [0, 1].

        Args:
            x, y: World coordinates
            elevation: Elevation to cool by; computed from the world when omitted
        """
        state = self._state
        if elevation is None:
            elevation = self._elevation(state, x, y)[1]
        return state.climate.calculate_temperature(x, y, elevation)

    def biome_at(self, x: float, y: float) -> BiomeType:
        state = self._state
        elevation = self._elevation(state, x, y)[1]
        moisture = state.moisture_noise.sample(x, y)
        temperature = state.climate.calculate_temperature(x, y, elevation)
        return classify(elevation, moisture, temperature, state.config.thresholds)

    def resource_at(self, x: float, y: float) -> Optional[ResourceDeposit]:
        """Resource at a coordinate, or None."""
        return self._tile(self._state, x, y).resource

    def tile_at(self, x: float, y: float) -> Tile:
        """All generated values at a coordinate."""
        return self._tile(self._state, x, y)

    def display_value(self, x: float, y: float, mode: VisualizationMode) -> Union[float, int]:
        state = self._state
        return display_value(mode, self._tile(state, x, y), state.terrain_bands)

    def debug_summary(self, x: float, y: float) -> str:
        """Human-readable description of a tile, for diagnostics only."""
        state = self._state
        tile = self._tile(state, x, y)
        thresholds = state.config.thresholds

        summary = (
            f"Tile({x},{y}) - "
            f"Elevation: {tile.elevation:.3f} (raw {tile.raw_elevation:.3f}) - "
            f"Moisture: {tile.moisture:.3f} ({moisture_band(tile.moisture, thresholds.moisture)}) - "
            f"Temperature: {tile.temperature:.3f} "
            f"({temperature_band(tile.temperature, thresholds.temperature)}) - "
            f"Biome: {tile.biome.name} - "
            f"Terrain: {TERRAIN_NAMES[terrain_type_for_elevation(tile.elevation, state.terrain_bands)]}"
        )
        if tile.resource is not None:
            summary += (
                f" - Resource: {tile.resource.name} "
                f"(density {tile.resource.density:.3f}, size {tile.resource.deposit_size})"
            )
        return summary

    # Bulk queries

    def sample_region(
        self, x: float, y: float, width: float, height: float, step: float = 1.0
    ) -> RegionSample:
        """
        Sample a rectangular window.

        Args:
            x, y: Top-left corner in world units
            width, height: Window size in world units
            step: Distance between samples

        Returns:
            RegionSample whose cells equal the single-coordinate queries
        """
        rows, cols = region_shape(width, height, step)
        state = self._state
        xs = x + np.arange(cols, dtype=np.float64) * step
        ys = y + np.arange(rows, dtype=np.float64) * step

        elevation = np.zeros((rows, cols), dtype=np.float64)
        moisture = np.zeros((rows, cols), dtype=np.float64)
        temperature = np.zeros((rows, cols), dtype=np.float64)
        biomes = np.zeros((rows, cols), dtype=np.int16)
        resources = np.zeros((rows, cols), dtype=np.int16)

        for row, sy in enumerate(ys.tolist()):
            for col, sx in enumerate(xs.tolist()):
                tile = self._tile(state, sx, sy)
                elevation[row, col] = tile.elevation
                moisture[row, col] = tile.moisture
                temperature[row, col] = tile.temperature
                biomes[row, col] = int(tile.biome)
                if tile.resource is not None:
                    resources[row, col] = int(tile.resource.kind)

        return RegionSample(
            xs=xs,
            ys=ys,
            elevation=elevation,
            moisture=moisture,
            temperature=temperature,
            biomes=biomes,
            resources=resources,
        )

    def display_region(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        mode: VisualizationMode,
        step: float = 1.0,
    ) -> np.ndarray:
        """Grid of display values for a visualization mode, indexed [row, column]."""
        rows, cols = region_shape(width, height, step)
        state = self._state
        values = np.zeros((rows, cols), dtype=np.float64)
        for row in range(rows):
            sy = y + row * step
            for col in range(cols):
                tile = self._tile(state, x + col * step, sy)
                values[row, col] = display_value(mode, tile, state.terrain_bands)
        return values


def region_shape(width: float, height: float, step: float = 1.0) -> Tuple[int, int]:
    """Number of (rows, cols) sampled over a window."""
    if not all(math.isfinite(v) for v in (width, height, step)):
        raise ValueError("Region width, height and step must be finite")
    if width <= 0 or height <= 0:
        raise ValueError("Region width and height must be positive")
    if step <= 0:
        raise ValueError("Region step must be positive")
    return int(math.ceil(height / step)), int(math.ceil(width / step))


def biome_distribution(sample: RegionSample) -> List[BiomeStatistic]:
    """
    Biome distribution statistics of a sampled region.

    Returns:
        One entry per biome present, most common first
    """
    total = sample.biomes.size
    stats = []
    for value in np.unique(sample.biomes):
        mask = sample.biomes == value
        count = int(np.count_nonzero(mask))
        stats.append(
            BiomeStatistic(
                biome=BiomeType(int(value)),
                cell_count=count,
                percentage=100.0 * count / total,
                avg_temperature=float(np.mean(sample.temperature[mask])),
                avg_moisture=float(np.mean(sample.moisture[mask])),
            )
        )
    stats.sort(key=lambda stat: (-stat.cell_count, int(stat.biome)))
    return stats
