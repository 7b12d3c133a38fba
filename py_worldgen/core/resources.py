"""
Resource placement model.

Each resource kind owns an independently seeded fractal noise field. A
location receives the first resource, in configured priority order, whose
eligibility filter passes and whose biased noise value beats its rarity
threshold. Placement is first-eligible-wins, not highest-density-wins.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, FrozenSet, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .biomes import BiomeType
from .octave_noise import OctaveNoise, OctaveParams

logger = structlog.get_logger()

MAX_DEPOSIT_SIZE = 10

# Never hold resources unless a definition is explicitly offshore;
# OCEAN_DEEP holds nothing at all.
NON_PLACEABLE_BIOMES = frozenset({BiomeType.OCEAN_DEEP, BiomeType.OCEAN_MEDIUM})


class ResourceKind(IntEnum):
    """Resource kinds. 0 is reserved for "no resource" in array outputs."""

    COAL = 1
    IRON = 2
    COPPER = 3
    OIL = 4
    GOLD = 5
    SILVER = 6
    GAS = 7


class ValueRange(BaseModel):
    """Inclusive range on a [0, 1] field."""

    model_config = ConfigDict(frozen=True)

    low: float = Field(default=0.0, ge=0, le=1)
    high: float = Field(default=1.0, ge=0, le=1)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.low > self.high:
            raise ValueError(f"range low ({self.low}) must not exceed high ({self.high})")
        return self

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high


class ResourceDefinition(BaseModel):
    """Eligibility and rarity of one resource kind."""

    model_config = ConfigDict(frozen=True)

    kind: ResourceKind
    rarity: float = Field(gt=0, le=1, description="Threshold multiplier; closer to 1 is rarer")
    biomes: FrozenSet[BiomeType] = Field(description="Biomes the resource may occur in")
    elevation: ValueRange = Field(default_factory=ValueRange)
    moisture: ValueRange = Field(default_factory=ValueRange)
    temperature: ValueRange = Field(default_factory=ValueRange)
    offshore: bool = Field(default=False, description="May occur in medium-depth ocean")

    @model_validator(mode="after")
    def _check_biomes(self):
        if BiomeType.OCEAN_DEEP in self.biomes:
            raise ValueError(f"{self.kind.name}: deep ocean cannot hold resources")
        if BiomeType.OCEAN_MEDIUM in self.biomes and not self.offshore:
            raise ValueError(f"{self.kind.name}: medium ocean requires offshore=True")
        return self

    def is_eligible(self, biome: BiomeType, elevation: float, moisture: float, temperature: float) -> bool:
        if biome in NON_PLACEABLE_BIOMES and not self.offshore:
            return False
        return (
            biome in self.biomes
            and self.elevation.contains(elevation)
            and self.moisture.contains(moisture)
            and self.temperature.contains(temperature)
        )


_B = BiomeType

DEFAULT_RESOURCE_DEFINITIONS: Tuple[ResourceDefinition, ...] = (
    ResourceDefinition(
        kind=ResourceKind.COAL,
        rarity=0.65,
        biomes=frozenset({
            _B.BARE, _B.SCORCHED, _B.TUNDRA, _B.TEMPERATE_DECIDUOUS_FOREST, _B.TAIGA,
            _B.TROPICAL_RAINFOREST, _B.SHRUBLAND, _B.GRASSLAND, _B.TEMPERATE_GRASSLAND,
            _B.SNOW,
        }),
    ),
    ResourceDefinition(
        kind=ResourceKind.IRON,
        rarity=0.75,
        biomes=frozenset({
            _B.BARE, _B.SCORCHED, _B.SNOW, _B.TAIGA, _B.TUNDRA, _B.SHRUBLAND,
            _B.TEMPERATE_GRASSLAND, _B.GRASSLAND, _B.TEMPERATE_DECIDUOUS_FOREST,
        }),
    ),
    ResourceDefinition(
        kind=ResourceKind.COPPER,
        rarity=0.82,
        biomes=frozenset({
            _B.BARE, _B.SCORCHED, _B.SUBTROPICAL_DESERT, _B.TEMPERATE_DESERT, _B.SHRUBLAND,
            _B.TEMPERATE_GRASSLAND, _B.GRASSLAND, _B.TROPICAL_SEASONAL_FOREST,
            _B.TROPICAL_RAINFOREST,
        }),
    ),
    ResourceDefinition(
        kind=ResourceKind.OIL,
        rarity=0.87,
        biomes=frozenset({
            _B.SUBTROPICAL_DESERT, _B.TEMPERATE_DESERT, _B.BEACH, _B.ROCKY_SHORE,
            _B.OCEAN_SHALLOW, _B.OCEAN_MEDIUM, _B.GRASSLAND, _B.SHRUBLAND,
        }),
        elevation=ValueRange(low=0.0, high=0.7),
        offshore=True,
    ),
    ResourceDefinition(
        kind=ResourceKind.GOLD,
        rarity=0.95,
        biomes=frozenset({
            _B.BARE, _B.SCORCHED, _B.SNOW, _B.TROPICAL_RAINFOREST,
            _B.TEMPERATE_DECIDUOUS_FOREST, _B.BEACH, _B.SUBTROPICAL_DESERT,
        }),
    ),
    ResourceDefinition(
        kind=ResourceKind.SILVER,
        rarity=0.93,
        biomes=frozenset({
            _B.BARE, _B.SCORCHED, _B.SNOW, _B.TAIGA, _B.TUNDRA,
            _B.TEMPERATE_DECIDUOUS_FOREST, _B.TEMPERATE_GRASSLAND, _B.GRASSLAND,
        }),
    ),
    ResourceDefinition(
        kind=ResourceKind.GAS,
        rarity=0.90,
        biomes=frozenset({
            _B.SUBTROPICAL_DESERT, _B.TEMPERATE_DESERT, _B.TROPICAL_RAINFOREST,
            _B.TROPICAL_SEASONAL_FOREST, _B.OCEAN_SHALLOW, _B.OCEAN_MEDIUM, _B.SHRUBLAND,
        }),
        elevation=ValueRange(low=0.0, high=0.75),
        offshore=True,
    ),
)


def _resource_noise_defaults() -> OctaveParams:
    return OctaveParams(
        octave_count=3,
        base_frequency=1.0,
        persistence=0.6,
        lacunarity=2.0,
        scale=180.0,
        seed_offset=400_000,
    )


class ResourceParams(BaseModel):
    """Resource generation options."""

    model_config = ConfigDict(frozen=True)

    density: float = Field(default=0.35, ge=0, le=1, description="Global resource density")
    noise: OctaveParams = Field(default_factory=_resource_noise_defaults)
    kind_seed_stride: int = Field(default=10_000, ge=1, description="Seed spacing between resource fields")
    density_exponent: float = Field(default=1.3, gt=0, description="Bias towards sparse, clustered deposits")
    deposit_scale: float = Field(default=0.1, gt=0, description="Coordinate scale of the deposit-size query")
    definitions: Tuple[ResourceDefinition, ...] = Field(
        default=DEFAULT_RESOURCE_DEFINITIONS,
        description="Resource definitions in placement priority order",
    )

    @model_validator(mode="after")
    def _check_unique_kinds(self):
        kinds = [definition.kind for definition in self.definitions]
        if len(kinds) != len(set(kinds)):
            raise ValueError("Each resource kind may only be defined once")
        return self


def kind_noise_params(params: ResourceParams, kind: ResourceKind) -> OctaveParams:
    """Noise parameters of one kind; each kind gets its own seed channel."""
    base = params.noise
    return base.model_copy(
        update={"seed_offset": base.seed_offset + int(kind) * params.kind_seed_stride}
    )


@dataclass(frozen=True)
class ResourceDeposit:
    """A resource placed at a location."""

    kind: ResourceKind
    density: float
    deposit_size: int

    @property
    def name(self) -> str:
        return self.kind.name


class ResourceGenerator:
    """Handles resource placement across the world."""

    def __init__(
        self,
        seed: int,
        params: Optional[ResourceParams] = None,
        noises: Optional[Dict[ResourceKind, OctaveNoise]] = None,
    ):
        """
        Initialize resource generator.

        Args:
            seed: World seed
            params: Resource options
            noises: Per-kind noise fields to reuse
        """
        self.seed = int(seed)
        self.params = params or ResourceParams()

        if noises is None:
            noises = {
                definition.kind: OctaveNoise(self.seed, self.noise_params(definition.kind))
                for definition in self.params.definitions
            }
        self.noises = dict(noises)

        logger.debug(
            "Resource generator ready",
            priority=[definition.kind.name for definition in self.params.definitions],
        )

    def noise_params(self, kind: ResourceKind) -> OctaveParams:
        return kind_noise_params(self.params, kind)

    def reconfigured(self, seed: int, params: ResourceParams) -> "ResourceGenerator":
        """Generator for new parameters, sharing noise fields where possible."""
        noises = {}
        for definition in params.definitions:
            kind_params = kind_noise_params(params, definition.kind)
            existing = self.noises.get(definition.kind)
            if existing is not None:
                noises[definition.kind] = existing.reconfigured(seed, kind_params)
            else:
                noises[definition.kind] = OctaveNoise(seed, kind_params)
        return ResourceGenerator(seed, params, noises=noises)

    def threshold(self, definition: ResourceDefinition) -> float:
        """Noise value a resource must exceed; higher means rarer."""
        return (1.0 - self.params.density) * definition.rarity

    def deposit_size(self, kind: ResourceKind, x: float, y: float) -> int:
        """Deposit size in [1, 10] from a second, coarser query of the kind's field."""
        scale = self.params.deposit_scale
        value = self.noises[kind].sample(x * scale, y * scale)
        return min(MAX_DEPOSIT_SIZE, 1 + int(value * MAX_DEPOSIT_SIZE))

    def resource_at(
        self,
        x: float,
        y: float,
        biome: BiomeType,
        elevation: float,
        moisture: float,
        temperature: float,
    ) -> Optional[ResourceDeposit]:
        """
        Get the resource at a location.

        Returns:
            The first qualifying ResourceDeposit in priority order, or None
        """
        if biome == BiomeType.OCEAN_DEEP:
            return None

        for definition in self.params.definitions:
            if not definition.is_eligible(biome, elevation, moisture, temperature):
                continue

            density = self.noises[definition.kind].sample(x, y) ** self.params.density_exponent
            if density > self.threshold(definition):
                return ResourceDeposit(
                    kind=definition.kind,
                    density=density,
                    deposit_size=self.deposit_size(definition.kind, x, y),
                )

        return None
