"""
Example printing an ASCII preview of a generated world.
"""

import sys

from py_worldgen.core import (
    TerrainType, VisualizationMode, WorldConfig, WorldGenerator, biome_distribution
)
from py_worldgen.core.terrain import TERRAIN_NAMES

TERRAIN_CHARS = {
    TerrainType.OCEAN_DEEP: "~",
    TerrainType.OCEAN_MEDIUM: "-",
    TerrainType.OCEAN_SHALLOW: ".",
    TerrainType.BEACH: ":",
    TerrainType.GRASS: "\"",
    TerrainType.MOUNTAIN: "^",
    TerrainType.SNOW: "*",
}


def main():
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 42

    config = WorldConfig(seed=seed)
    world = WorldGenerator(config)

    # 80 x 40 characters covering the whole world
    step_x = config.world_width / 80
    step_y = config.world_height / 40

    print(f"World seed {seed}")
    for row in range(40):
        line = ""
        for col in range(80):
            terrain = world.display_value(col * step_x, row * step_y, VisualizationMode.TERRAIN)
            line += TERRAIN_CHARS[TerrainType(terrain)]
        print(line)
    print("  ".join(f"{char} {TERRAIN_NAMES[terrain]}" for terrain, char in TERRAIN_CHARS.items()))

    # Biome statistics on a coarser grid
    print("\nBiome distribution:")
    sample = world.sample_region(0, 0, config.world_width, config.world_height, step=20)
    for stat in biome_distribution(sample):
        print(f"  {stat.biome.name:<28} {stat.percentage:5.1f}%  "
              f"temp {stat.avg_temperature:.2f}  moisture {stat.avg_moisture:.2f}")

    center = (config.world_width / 2, config.world_height / 2)
    print("\n" + world.debug_summary(*center))


if __name__ == "__main__":
    main()
