"""Shared pytest fixtures."""

import json
from pathlib import Path

import pytest

from py_worldgen.core import WorldConfig, WorldGenerator

GOLDEN_PATH = Path(__file__).parent / "data" / "golden_values.json"


@pytest.fixture
def golden_values():
    """
    Compare a value against the committed golden file.

    Values are captured once from a reference run and committed; a name
    missing from the file is a test failure, never a recording.
    """
    stored = json.loads(GOLDEN_PATH.read_text())

    def check(name, value):
        assert name in stored, f"no golden value recorded for {name!r} in {GOLDEN_PATH.name}"
        assert stored[name] == value, f"{name}: expected {stored[name]!r}, got {value!r}"

    return check


@pytest.fixture
def world():
    """World with the default configuration."""
    return WorldGenerator(WorldConfig(seed=42))
