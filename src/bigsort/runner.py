from __future__ import annotations

import json
import random
import shlex
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import psutil

from .config import Limits, SweepConfig, expand_grid
from .errors import BigSortError, InvalidRangeError
from .generator import generate_unique_sample
from .reporting import get_system_info
from .sorter import BigSorter, DuplicatePolicy


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_strictly_ascending(values) -> bool:
    return all(values[i] < values[i + 1] for i in range(len(values) - 1))


def sort_once(values: List[int], duplicates: DuplicatePolicy) -> Dict:
    start = time.perf_counter()
    sorter = BigSorter(values, duplicates=duplicates)
    out = sorter.sort()
    wall_ms = (time.perf_counter() - start) * 1000.0
    rss = psutil.Process().memory_info().rss
    return {
        "ts": _now(),
        "status": "ok",
        "presence_size": sorter.presence_size,
        "sorted_size": sorter.sorted_size,
        "sort_ns": sorter.duration_ns,
        "sort_ms": sorter.duration_ms,
        "wall_ms": round(wall_ms, 3),
        "rss_mb": round(rss / (1024**2), 3),
        "sorted_ok": len(out) == len(values) and _is_strictly_ascending(out),
    }


def run_point(params: Dict[str, object], rng: random.Random, limits: Limits, min_value: int = 1) -> List[Dict]:
    size = int(params["size"])
    max_value = int(params["max_value"])
    policy = params.get("duplicates", DuplicatePolicy.COLLAPSE)
    rec_base = {"size": size, "max_value": max_value, "duplicates": str(getattr(policy, "value", policy))}
    try:
        duplicates = DuplicatePolicy(policy)
    except ValueError as e:
        return [{**rec_base, "ts": _now(), "status": "error", "error": str(e)}]
    try:
        values = generate_unique_sample(size, min_value, max_value, rng=rng)
    except InvalidRangeError as e:
        return [{**rec_base, "ts": _now(), "status": "invalid_range", "error": str(e)}]

    try:
        for _ in range(max(0, limits.warmups)):
            BigSorter(values, duplicates=duplicates).sort()
    except BigSortError as e:
        return [{**rec_base, "ts": _now(), "status": "error", "error": str(e)}]

    records = []
    for _ in range(max(1, limits.repeats)):
        try:
            rec = sort_once(values, duplicates)
        except BigSortError as e:
            rec = {"ts": _now(), "status": "error", "error": str(e)}
        rec.update(rec_base)
        records.append(rec)
    return records


def run_sweep(cfg: SweepConfig, out_path: Path, seed: Optional[int] = None) -> int:
    """Run every grid point and append one JSON line per repetition.

    Returns the number of records written.
    """
    seed = cfg.seed if seed is None else seed
    points = expand_grid(cfg.grid)
    if cfg.limits.shuffle:
        random.Random(seed).shuffle(points)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    prov = {
        "ts": _now(),
        "seed": seed,
        "cwd": str(Path.cwd()),
        "python": sys.version,
        "cmdline": " ".join(shlex.quote(a) for a in sys.argv),
        "system": get_system_info(),
    }
    (out_path.parent / "provenance.json").write_text(json.dumps(prov, indent=2))

    # one generator for the whole sweep so a seed reproduces every sample
    rng = random.Random(seed)
    written = 0
    with out_path.open("a") as f:
        for params in points:
            for rec in run_point(params, rng, cfg.limits, min_value=cfg.min_value):
                f.write(json.dumps(rec) + "\n")
                f.flush()
                written += 1
    return written
