from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Iterable, List, Tuple

from .errors import DuplicateValueError, EmptyInputError, ValueOutOfRangeError

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """What the mark phase does when a value is seen twice.

    ``collapse`` folds repeats into one presence flag, so the sorted output is
    shorter than the input. ``reject`` raises :class:`DuplicateValueError`.
    ``count`` keeps a counter per slot and emits each value as often as it
    occurred.
    """

    COLLAPSE = "collapse"
    REJECT = "reject"
    COUNT = "count"


class BigSorter:
    """Pigeonhole sort over a presence indicator sized to the largest value.

    Timing covers all three phases (scan for the maximum, mark, collect).
    The indicator is allocated fresh on every :meth:`sort` call and its length
    is kept in :attr:`presence_size`, which is the memory cost of the run.
    """

    def __init__(self, values: Iterable[int], duplicates: DuplicatePolicy | str = DuplicatePolicy.COLLAPSE):
        self._original: Tuple[int, ...] = tuple(values)
        self.duplicates = DuplicatePolicy(duplicates)
        self._sorted: Tuple[int, ...] = ()
        self._duration_ns = 0
        self._presence_size = 0

    def sort(self) -> Tuple[int, ...]:
        self._sorted = ()
        self._presence_size = 0
        self._duration_ns = 0
        start = time.perf_counter_ns()

        max_element = self._scan()
        if self.duplicates is DuplicatePolicy.COUNT:
            counts = self._mark_counts(max_element)
            sorted_values = self._collect_counts(counts)
        else:
            exists = self._mark(max_element)
            sorted_values = [i + 1 for i, flag in enumerate(exists) if flag]

        self._duration_ns = time.perf_counter_ns() - start
        self._presence_size = max_element
        self._sorted = tuple(sorted_values)
        logger.debug(
            "sorted %d values into %d (presence size %d, %d ns, policy %s)",
            len(self._original),
            len(self._sorted),
            self._presence_size,
            self._duration_ns,
            self.duplicates.value,
        )
        return self._sorted

    def _scan(self) -> int:
        if not self._original:
            raise EmptyInputError()
        smallest = min(self._original)
        if smallest < 1:
            raise ValueOutOfRangeError(smallest)
        return max(self._original)

    def _mark(self, max_element: int) -> bytearray:
        exists = bytearray(max_element)
        if self.duplicates is DuplicatePolicy.REJECT:
            for value in self._original:
                if exists[value - 1]:
                    raise DuplicateValueError(value)
                exists[value - 1] = 1
        else:
            for value in self._original:
                exists[value - 1] = 1
        return exists

    def _mark_counts(self, max_element: int) -> List[int]:
        counts = [0] * max_element
        for value in self._original:
            counts[value - 1] += 1
        return counts

    @staticmethod
    def _collect_counts(counts: List[int]) -> List[int]:
        out: List[int] = []
        for i, c in enumerate(counts):
            if c:
                out.extend([i + 1] * c)
        return out

    @property
    def original_values(self) -> Tuple[int, ...]:
        return self._original

    @property
    def sorted_values(self) -> Tuple[int, ...]:
        return self._sorted

    @property
    def duration_ns(self) -> int:
        return self._duration_ns

    @property
    def duration_ms(self) -> int:
        # floor, never rounds up
        return self._duration_ns // 1_000_000

    @property
    def original_size(self) -> int:
        return len(self._original)

    @property
    def presence_size(self) -> int:
        return self._presence_size

    @property
    def sorted_size(self) -> int:
        return len(self._sorted)


def big_sort(values: Iterable[int], duplicates: DuplicatePolicy | str = DuplicatePolicy.COLLAPSE) -> List[int]:
    return list(BigSorter(values, duplicates=duplicates).sort())
