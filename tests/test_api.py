"""
Tests for the HTTP query surface.
"""

import inspect

from fastapi.testclient import TestClient

from py_worldgen.api.main import (
    app,
    get_config,
    get_region,
    get_region_biomes,
    get_tile,
    get_tile_debug,
    put_config,
    world,
)
from py_worldgen.config import settings
from py_worldgen.core.world_config import WorldConfig


class TestAPIEndpoints:
    """Test the world query endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def teardown_method(self):
        """Restore the served world."""
        world.configure(WorldConfig(seed=settings.default_seed))

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "seed": settings.default_seed}

    def test_tile(self):
        response = self.client.get("/tiles/500/500")
        assert response.status_code == 200
        data = response.json()

        tile = world.tile_at(500.0, 500.0)
        assert data["elevation"] == tile.elevation
        assert data["biome"] == int(tile.biome)
        assert data["biome_name"] == tile.biome_name
        for field in ["moisture", "temperature", "raw_elevation", "resource"]:
            assert field in data

    def test_tile_debug(self):
        response = self.client.get("/tiles/12.5/-3/debug")
        assert response.status_code == 200
        assert response.json()["summary"].startswith("Tile(12.5,-3.0)")

    def test_get_config(self):
        response = self.client.get("/config")
        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == settings.default_seed
        assert data["elevation"]["octave_count"] == 7

    def test_put_config(self):
        response = self.client.put("/config", json={"seed": 7, "elevation": {"scale": 250.0}})
        assert response.status_code == 200
        assert response.json()["seed"] == 7
        assert world.config.elevation.scale == 250.0
        assert self.client.get("/health").json()["seed"] == 7

    def test_put_config_round_trip(self):
        current = self.client.get("/config").json()
        response = self.client.put("/config", json=current)
        assert response.status_code == 200
        assert response.json() == current

    def test_put_invalid_config(self):
        response = self.client.put("/config", json={"elevation": {"octave_count": 0}})
        assert response.status_code == 422
        assert world.config.elevation.octave_count == 7

    def test_region(self):
        response = self.client.get(
            "/regions", params={"x": 0, "y": 0, "width": 20, "height": 10, "step": 5, "mode": "biome"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rows"] == 2
        assert data["cols"] == 4
        assert len(data["values"]) == 2
        assert data["values"][1][3] == int(world.biome_at(15.0, 5.0))

    def test_region_too_large(self):
        response = self.client.get("/regions", params={"width": 1000, "height": 1000, "step": 1})
        assert response.status_code == 400

    def test_region_unknown_mode(self):
        response = self.client.get("/regions", params={"mode": "colors"})
        assert response.status_code == 422

    def test_region_biomes(self):
        response = self.client.get(
            "/regions/biomes", params={"x": 0, "y": 0, "width": 1000, "height": 1000, "step": 100}
        )
        assert response.status_code == 200
        data = response.json()
        assert sum(entry["cell_count"] for entry in data) == 100
        for entry in data:
            assert {"biome", "biome_name", "percentage", "avg_temperature", "avg_moisture"} <= set(entry)

    def test_non_finite_tile_rejected(self):
        for path in ["/tiles/inf/0", "/tiles/nan/0", "/tiles/1e400/3", "/tiles/0/-inf/debug"]:
            response = self.client.get(path)
            assert response.status_code == 400, path

    def test_non_finite_region_rejected(self):
        for params in [
            {"width": "inf", "step": 1},
            {"height": "1e400"},
            {"x": "nan"},
            {"step": "inf"},
        ]:
            assert self.client.get("/regions", params=params).status_code == 400, params
            assert self.client.get("/regions/biomes", params=params).status_code == 400, params

    def test_generation_endpoints_run_in_threadpool(self):
        """Generation handlers are plain functions so they never block the event loop."""
        for handler in [get_config, put_config, get_tile, get_tile_debug, get_region, get_region_biomes]:
            assert not inspect.iscoroutinefunction(handler), handler.__name__
