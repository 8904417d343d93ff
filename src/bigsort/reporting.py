from __future__ import annotations

import platform
from datetime import datetime, timezone
from typing import Iterable, Sequence

import psutil
from rich.console import Console

from .sorter import BigSorter


def get_system_info() -> dict:
    """Gather system information for reproducibility."""
    info = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "processor": platform.processor(),
        "architecture": platform.machine(),
        "cpu_count_logical": psutil.cpu_count(logical=True),
        "cpu_count_physical": psutil.cpu_count(logical=False),
        "memory_total_gb": round(psutil.virtual_memory().total / (1024**3), 2),
        "hostname": platform.node(),
    }
    try:
        cpu_freq = psutil.cpu_freq()
        if cpu_freq:
            info["cpu_freq_mhz"] = round(cpu_freq.current, 1)
    except (NotImplementedError, OSError):
        # not exposed on every platform or container
        pass
    return info


def format_values(values: Iterable[int]) -> str:
    return " ".join(str(v) for v in values)


def print_sort_report(console: Console, original: Sequence[int], sorter: BigSorter) -> None:
    """Print the unsorted and sorted arrays followed by the run's cost figures."""
    # soft_wrap keeps long arrays on one line instead of folding at terminal width
    console.print(f"Original Array: {format_values(original)}", soft_wrap=True, markup=False, highlight=False)
    console.print(
        f"Compact Sorted Array: {format_values(sorter.sorted_values)}",
        soft_wrap=True,
        markup=False,
        highlight=False,
    )
    console.print(f"Original array size: {sorter.original_size}", highlight=False)
    console.print(f"Exists array size: {sorter.presence_size}", highlight=False)
    console.print(f"Sorted array size: {sorter.sorted_size}", highlight=False)
    console.print(f"Time taken to sort: {sorter.duration_ms} milliseconds", highlight=False)
