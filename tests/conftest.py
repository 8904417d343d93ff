"""Shared fixtures for bigsort tests."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def rng():
    """Deterministic random source for reproducible samples."""
    return random.Random(1234)


@pytest.fixture
def sweep_yaml(tmp_path):
    """Write a small sweep config and return its path."""

    def _write(**overrides) -> Path:
        data = {
            "seed": 7,
            "grid": {"size": [5, 10], "max_value": [20, 50]},
            "limits": {"warmups": 0, "repeats": 2, "shuffle": True},
        }
        data.update(overrides)
        path = tmp_path / "sweep.yaml"
        path.write_text(yaml.safe_dump(data))
        return path

    return _write
