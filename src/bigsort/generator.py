from __future__ import annotations

import random
from typing import List, Optional

from .errors import InvalidRangeError


def make_rng(seed: Optional[int] = None) -> random.Random:
    # None draws the seed from OS entropy
    return random.Random(seed)


def generate_unique_sample(
    size: int,
    min_value: int,
    max_value: int,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """Draw ``size`` distinct integers uniformly from ``[min_value, max_value]``.

    The whole interval is materialized and shuffled before the first ``size``
    values are taken, so time and memory are O(max_value - min_value) no
    matter how small ``size`` is.
    """
    available = max_value - min_value + 1
    if size < 0 or available <= 0 or size > available:
        raise InvalidRangeError(size, min_value, max_value)
    rng = rng if rng is not None else make_rng()
    all_numbers = list(range(min_value, max_value + 1))
    rng.shuffle(all_numbers)
    return all_numbers[:size]
