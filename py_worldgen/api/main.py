"""FastAPI main application."""

import logging
import math
from typing import Any, Dict, List, Optional

import structlog
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.visualization import VisualizationMode
from ..core.world_config import WorldConfig
from ..core.world_generator import (
    InvalidConfigurationError,
    WorldGenerator,
    biome_distribution,
    region_shape,
)

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "plain"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="World Generator API",
    description="Deterministic procedural terrain, climate, biome and resource queries",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

world = WorldGenerator(WorldConfig(seed=settings.default_seed))


# Response models
class ResourceResponse(BaseModel):
    """Resource deposit at a tile."""

    kind: int
    name: str
    density: float
    deposit_size: int = Field(..., ge=1, le=10)


class TileResponse(BaseModel):
    """Generated values at one coordinate."""

    x: float
    y: float
    elevation: float
    raw_elevation: float
    moisture: float
    temperature: float
    biome: int
    biome_name: str
    resource: Optional[ResourceResponse] = None


class RegionResponse(BaseModel):
    """Display values over a window, row-major."""

    mode: VisualizationMode
    x: float
    y: float
    step: float
    rows: int
    cols: int
    values: List[List[float]]


class BiomeStatisticResponse(BaseModel):
    """Share of one biome inside a window."""

    biome: int
    biome_name: str
    cell_count: int
    percentage: float
    avg_temperature: float
    avg_moisture: float


def _check_finite(**values: float):
    bad = sorted(name for name, value in values.items() if not math.isfinite(value))
    if bad:
        raise HTTPException(status_code=400, detail=f"Non-finite value for {', '.join(bad)}")


def _check_region(width: float, height: float, step: float):
    try:
        rows, cols = region_shape(width, height, step)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if rows * cols > settings.max_region_tiles:
        logger.warning(
            "Region request too large", rows=rows, cols=cols, limit=settings.max_region_tiles
        )
        raise HTTPException(
            status_code=400,
            detail=f"Region of {rows * cols} tiles exceeds the limit of {settings.max_region_tiles}",
        )
    return rows, cols


@app.on_event("startup")
async def startup_event():
    """Application startup."""
    logger.info("Starting World Generator API", seed=world.config.seed)


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown."""
    logger.info("Shutting down World Generator API")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "World Generator API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "seed": world.config.seed}


@app.get("/config")
def get_config():
    """Active world configuration."""
    return world.config.model_dump(mode="json")


@app.put("/config")
def put_config(config: Dict[str, Any] = Body(...)):
    """Replace the world configuration."""
    try:
        world.configure(config)
    except InvalidConfigurationError as e:
        logger.warning("Configuration update rejected", errors=len(e.errors))
        raise HTTPException(status_code=422, detail=e.errors)

    logger.info("Configuration replaced via API", seed=world.config.seed)
    return world.config.model_dump(mode="json")


@app.get("/tiles/{x}/{y}", response_model=TileResponse)
def get_tile(x: float, y: float):
    """Generated values at one coordinate."""
    _check_finite(x=x, y=y)
    tile = world.tile_at(x, y)
    resource = None
    if tile.resource is not None:
        resource = ResourceResponse(
            kind=int(tile.resource.kind),
            name=tile.resource.name,
            density=tile.resource.density,
            deposit_size=tile.resource.deposit_size,
        )

    return TileResponse(
        x=tile.x,
        y=tile.y,
        elevation=tile.elevation,
        raw_elevation=tile.raw_elevation,
        moisture=tile.moisture,
        temperature=tile.temperature,
        biome=int(tile.biome),
        biome_name=tile.biome_name,
        resource=resource,
    )


@app.get("/tiles/{x}/{y}/debug")
def get_tile_debug(x: float, y: float):
    """Human-readable tile summary."""
    _check_finite(x=x, y=y)
    return {"summary": world.debug_summary(x, y)}


@app.get("/regions", response_model=RegionResponse)
def get_region(
    x: float = 0.0,
    y: float = 0.0,
    width: float = Query(64.0, gt=0),
    height: float = Query(64.0, gt=0),
    step: float = Query(1.0, gt=0),
    mode: VisualizationMode = VisualizationMode.ELEVATION,
):
    """Display values over a window for one visualization mode."""
    _check_finite(x=x, y=y, width=width, height=height, step=step)
    rows, cols = _check_region(width, height, step)
    values = world.display_region(x, y, width, height, mode, step=step)

    return RegionResponse(
        mode=mode,
        x=x,
        y=y,
        step=step,
        rows=rows,
        cols=cols,
        values=values.tolist(),
    )


@app.get("/regions/biomes", response_model=List[BiomeStatisticResponse])
def get_region_biomes(
    x: float = 0.0,
    y: float = 0.0,
    width: float = Query(64.0, gt=0),
    height: float = Query(64.0, gt=0),
    step: float = Query(1.0, gt=0),
):
    """Biome distribution statistics over a window."""
    _check_finite(x=x, y=y, width=width, height=height, step=step)
    _check_region(width, height, step)
    sample = world.sample_region(x, y, width, height, step=step)

    return [
        BiomeStatisticResponse(
            biome=int(stat.biome),
            biome_name=stat.biome.name,
            cell_count=stat.cell_count,
            percentage=stat.percentage,
            avg_temperature=stat.avg_temperature,
            avg_moisture=stat.avg_moisture,
        )
        for stat in biome_distribution(sample)
    ]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
