"""Shared fixtures and the slow-test switch for the Tessera suite."""

import random
import tempfile
from pathlib import Path

import pytest

from tessera.generation.tileset import create_default_rules
from tessera.generation.wfc import AdjacencyRules


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked slow (large grids, full TUI runs)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: large-grid tests, only run with --run-slow")


def pytest_collection_modifyitems(config, items):
    """Mark slow tests as skipped when --run-slow is absent."""
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="needs --run-slow")
    for item in items:
        if item.get_closest_marker("slow") is not None:
            item.add_marker(skip)


@pytest.fixture
def temp_data_dir() -> Path:
    """Throwaway directory for logs."""
    with tempfile.TemporaryDirectory(prefix="tessera_test_") as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rules() -> AdjacencyRules:
    """The default sand/water/grass rule set."""
    return create_default_rules()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for deterministic solver runs."""
    return random.Random(1234)
