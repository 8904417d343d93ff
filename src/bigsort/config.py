from __future__ import annotations

from dataclasses import dataclass, field
from itertools import product
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class SortSettings:
    size: int
    max_value: int
    min_value: int = 1
    seed: Optional[int] = None
    duplicates: str = "collapse"


@dataclass
class Limits:
    warmups: int = 1
    repeats: int = 3
    shuffle: bool = True


@dataclass
class SweepConfig:
    grid: Dict[str, List[Any]]
    limits: Limits = field(default_factory=Limits)
    seed: int = 42
    min_value: int = 1


def _read_yaml(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(Path(path).read_text())
    return data or {}


def load_sort_settings(path: Path) -> SortSettings:
    data = _read_yaml(path)
    # a sweep file may carry a "sort" section next to its grid
    return SortSettings(**data.get("sort", data))


def load_config(path: Path) -> SweepConfig:
    data = _read_yaml(path)
    grid = data.get("grid", {})
    for key in ("size", "max_value"):
        if key not in grid:
            raise ValueError(f"sweep grid is missing '{key}'")
    limits = Limits(**data.get("limits", {}))
    return SweepConfig(
        grid=grid,
        limits=limits,
        seed=data.get("seed", 42),
        min_value=data.get("min_value", 1),
    )


def expand_grid(grid: Dict[str, List]) -> List[Dict[str, object]]:
    keys = list(grid.keys())
    values = [grid[k] for k in keys]
    points = []
    for combo in product(*values) if values else [()]:
        points.append(dict(zip(keys, combo)))
    return points
