"""
Biome classification based on elevation, moisture and temperature.

This module implements:
- The closed set of biome tags
- Ordered threshold tables (elevation bands, moisture and temperature cut points)
- A Whittaker-style decision table mapping (elevation, moisture, temperature)
  to exactly one biome

Every comparison is a strict ``<`` against an upper bound, so a value sitting
exactly on a threshold always falls into the next (higher) category.
"""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BiomeType(IntEnum):
    """Biome tags."""

    OCEAN_DEEP = 0
    OCEAN_MEDIUM = 1
    OCEAN_SHALLOW = 2
    BEACH = 3
    ROCKY_SHORE = 4
    TUNDRA = 5
    TAIGA = 6
    TEMPERATE_DESERT = 7
    SHRUBLAND = 8
    GRASSLAND = 9
    TEMPERATE_DECIDUOUS_FOREST = 10
    TEMPERATE_GRASSLAND = 11
    SUBTROPICAL_DESERT = 12
    TROPICAL_SEASONAL_FOREST = 13
    TROPICAL_RAINFOREST = 14
    SNOW = 15
    BARE = 16
    SCORCHED = 17


# Biome names for display
BIOME_NAMES = {
    BiomeType.OCEAN_DEEP: "Deep Ocean",
    BiomeType.OCEAN_MEDIUM: "Medium Ocean",
    BiomeType.OCEAN_SHALLOW: "Shallow Ocean",
    BiomeType.BEACH: "Beach",
    BiomeType.ROCKY_SHORE: "Rocky Shore",
    BiomeType.TUNDRA: "Tundra",
    BiomeType.TAIGA: "Taiga",
    BiomeType.TEMPERATE_DESERT: "Temperate Desert",
    BiomeType.SHRUBLAND: "Shrubland",
    BiomeType.GRASSLAND: "Grassland",
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: "Temperate Deciduous Forest",
    BiomeType.TEMPERATE_GRASSLAND: "Temperate Grassland",
    BiomeType.SUBTROPICAL_DESERT: "Subtropical Desert",
    BiomeType.TROPICAL_SEASONAL_FOREST: "Tropical Seasonal Forest",
    BiomeType.TROPICAL_RAINFOREST: "Tropical Rainforest",
    BiomeType.SNOW: "Snow",
    BiomeType.BARE: "Bare",
    BiomeType.SCORCHED: "Scorched",
}


def _check_ascending(model: BaseModel, names) -> None:
    values = [getattr(model, name) for name in names]
    for (low_name, low), (high_name, high) in zip(
        zip(names, values), zip(names[1:], values[1:])
    ):
        if low > high:
            raise ValueError(
                f"{type(model).__name__}: {low_name} ({low}) must not exceed {high_name} ({high})"
            )


class ElevationBands(BaseModel):
    """Upper bounds of the elevation tiers."""

    model_config = ConfigDict(frozen=True)

    water_deep: float = Field(default=0.45, ge=0, le=1)
    water_medium: float = Field(default=0.48, ge=0, le=1)
    water_shallow: float = Field(default=0.50, ge=0, le=1)
    shore: float = Field(default=0.51, ge=0, le=1)
    low: float = Field(default=0.55, ge=0, le=1)
    high: float = Field(default=0.82, ge=0, le=1)
    very_high: float = Field(default=0.90, ge=0, le=1)

    @model_validator(mode="after")
    def _check_order(self):
        _check_ascending(self, list(type(self).model_fields))
        return self


class MoistureThresholds(BaseModel):
    """Moisture cut points."""

    model_config = ConfigDict(frozen=True)

    very_dry: float = Field(default=0.15, ge=0, le=1)
    dry: float = Field(default=0.30, ge=0, le=1)
    medium: float = Field(default=0.50, ge=0, le=1)
    wet: float = Field(default=0.70, ge=0, le=1)

    @model_validator(mode="after")
    def _check_order(self):
        _check_ascending(self, list(type(self).model_fields))
        return self


class TemperatureThresholds(BaseModel):
    """Temperature cut points."""

    model_config = ConfigDict(frozen=True)

    freezing: float = Field(default=0.15, ge=0, le=1)
    cold: float = Field(default=0.30, ge=0, le=1)
    cool: float = Field(default=0.45, ge=0, le=1)
    mild: float = Field(default=0.55, ge=0, le=1)
    warm: float = Field(default=0.65, ge=0, le=1)
    hot: float = Field(default=0.80, ge=0, le=1)

    @model_validator(mode="after")
    def _check_order(self):
        _check_ascending(self, list(type(self).model_fields))
        return self


class BiomeThresholds(BaseModel):
    """All threshold tables used by the classifier."""

    model_config = ConfigDict(frozen=True)

    elevation: ElevationBands = Field(default_factory=ElevationBands)
    moisture: MoistureThresholds = Field(default_factory=MoistureThresholds)
    temperature: TemperatureThresholds = Field(default_factory=TemperatureThresholds)


DEFAULT_THRESHOLDS = BiomeThresholds()


def _classify_shore(m: float, t: float, mt: MoistureThresholds, tt: TemperatureThresholds) -> BiomeType:
    # Rocky shores in colder or wetter places, sandy beaches elsewhere
    if t < tt.mild or m >= mt.wet:
        return BiomeType.ROCKY_SHORE
    return BiomeType.BEACH


def _classify_low(m: float, t: float, mt: MoistureThresholds, tt: TemperatureThresholds) -> BiomeType:
    if t < tt.freezing:
        return BiomeType.TUNDRA
    if t < tt.cold:
        return BiomeType.TUNDRA if m < mt.medium else BiomeType.TAIGA
    if t < tt.cool:
        if m < mt.dry:
            return BiomeType.TEMPERATE_DESERT
        if m < mt.wet:
            return BiomeType.SHRUBLAND
        return BiomeType.TAIGA
    if t < tt.warm:
        if m < mt.dry:
            return BiomeType.TEMPERATE_DESERT
        if m < mt.medium:
            return BiomeType.GRASSLAND
        if m < mt.wet:
            return BiomeType.TEMPERATE_DECIDUOUS_FOREST
        return BiomeType.TEMPERATE_GRASSLAND
    # Hot: desert -> seasonal forest -> rainforest
    if m < mt.dry:
        return BiomeType.SUBTROPICAL_DESERT
    if m < mt.wet:
        return BiomeType.TROPICAL_SEASONAL_FOREST
    return BiomeType.TROPICAL_RAINFOREST


def _classify_medium(m: float, t: float, mt: MoistureThresholds, tt: TemperatureThresholds) -> BiomeType:
    if t < tt.freezing:
        return BiomeType.TUNDRA
    if t < tt.cold:
        return BiomeType.TUNDRA if m < mt.medium else BiomeType.TAIGA
    if t < tt.mild:
        return BiomeType.SHRUBLAND if m < mt.medium else BiomeType.TEMPERATE_DECIDUOUS_FOREST
    if m < mt.medium:
        return BiomeType.SUBTROPICAL_DESERT
    if m < mt.wet:
        return BiomeType.TROPICAL_SEASONAL_FOREST
    return BiomeType.TROPICAL_RAINFOREST


def _classify_high(m: float, t: float, mt: MoistureThresholds, tt: TemperatureThresholds) -> BiomeType:
    if t < tt.freezing:
        return BiomeType.SNOW
    if t < tt.cold:
        return BiomeType.TUNDRA
    if t < tt.mild:
        return BiomeType.BARE if m < mt.medium else BiomeType.TAIGA
    return BiomeType.BARE


def _classify_peak(m: float, t: float, mt: MoistureThresholds, tt: TemperatureThresholds) -> BiomeType:
    if t < tt.cool:
        return BiomeType.SNOW
    if t < tt.mild:
        return BiomeType.BARE
    return BiomeType.SCORCHED


def classify(
    elevation: float,
    moisture: float,
    temperature: float,
    thresholds: Optional[BiomeThresholds] = None,
) -> BiomeType:
    """
    Determine the biome for a location.

    Water depth is chosen by elevation alone; above the water the elevation
    tier picks a sub-table where temperature selects the climate zone and
    moisture the specific biome. First match wins.

    Args:
        elevation: Elevation (0-1)
        moisture: Moisture (0-1)
        temperature: Temperature (0-1)
        thresholds: Threshold tables; defaults when omitted

    Returns:
        Exactly one BiomeType
    """
    assert 0.0 <= elevation <= 1.0, f"elevation out of range: {elevation}"
    assert 0.0 <= moisture <= 1.0, f"moisture out of range: {moisture}"
    assert 0.0 <= temperature <= 1.0, f"temperature out of range: {temperature}"

    thresholds = thresholds or DEFAULT_THRESHOLDS
    bands = thresholds.elevation
    mt = thresholds.moisture
    tt = thresholds.temperature

    if elevation < bands.water_deep:
        return BiomeType.OCEAN_DEEP
    if elevation < bands.water_medium:
        return BiomeType.OCEAN_MEDIUM
    if elevation < bands.water_shallow:
        return BiomeType.OCEAN_SHALLOW
    if elevation < bands.shore:
        return _classify_shore(moisture, temperature, mt, tt)
    if elevation < bands.low:
        return _classify_low(moisture, temperature, mt, tt)
    if elevation < bands.high:
        return _classify_medium(moisture, temperature, mt, tt)
    if elevation < bands.very_high:
        return _classify_high(moisture, temperature, mt, tt)
    return _classify_peak(moisture, temperature, mt, tt)


def biome_name(biome: BiomeType) -> str:
    return BIOME_NAMES[BiomeType(biome)]


def temperature_band(temperature: float, thresholds: Optional[TemperatureThresholds] = None) -> str:
    """Name of the climate zone a temperature falls into."""
    tt = thresholds or DEFAULT_THRESHOLDS.temperature
    for name, upper in (
        ("FREEZING", tt.freezing),
        ("COLD", tt.cold),
        ("COOL", tt.cool),
        ("MILD", tt.mild),
        ("WARM", tt.warm),
        ("HOT", tt.hot),
    ):
        if temperature < upper:
            return name
    return "SCORCHING"


def moisture_band(moisture: float, thresholds: Optional[MoistureThresholds] = None) -> str:
    """Name of the moisture level a value falls into."""
    mt = thresholds or DEFAULT_THRESHOLDS.moisture
    for name, upper in (
        ("VERY_DRY", mt.very_dry),
        ("DRY", mt.dry),
        ("MEDIUM", mt.medium),
        ("WET", mt.wet),
    ):
        if moisture < upper:
            return name
    return "VERY_WET"
