"""Tests for the unique sample generator."""

from __future__ import annotations

import random

import pytest
from hypothesis import given
from hypothesis import strategies as st

from bigsort.errors import InvalidRangeError
from bigsort.generator import generate_unique_sample, make_rng
from bigsort.sorter import big_sort


@st.composite
def sample_requests(draw):
    min_value = draw(st.integers(min_value=-50, max_value=50))
    span = draw(st.integers(min_value=1, max_value=300))
    size = draw(st.integers(min_value=0, max_value=span))
    return size, min_value, min_value + span - 1


class TestGenerateUniqueSample:
    @given(sample_requests(), st.integers(min_value=0, max_value=2**32))
    def test_size_distinct_and_bounded(self, request_, seed):
        size, lo, hi = request_
        sample = generate_unique_sample(size, lo, hi, rng=random.Random(seed))
        assert len(sample) == size
        assert len(set(sample)) == size
        assert all(lo <= v <= hi for v in sample)

    def test_range_too_small(self):
        with pytest.raises(InvalidRangeError) as exc:
            generate_unique_sample(5, 1, 3)
        assert exc.value.size == 5
        assert exc.value.min_value == 1
        assert exc.value.max_value == 3
        assert "Array size (5)" in str(exc.value)

    def test_inverted_range(self):
        with pytest.raises(InvalidRangeError):
            generate_unique_sample(0, 10, 1)

    def test_negative_size(self):
        with pytest.raises(InvalidRangeError):
            generate_unique_sample(-1, 1, 10)

    def test_invalid_range_is_a_value_error(self):
        with pytest.raises(ValueError):
            generate_unique_sample(11, 1, 10)

    def test_full_range_is_a_permutation(self, rng):
        sample = generate_unique_sample(50, 1, 50, rng=rng)
        assert sorted(sample) == list(range(1, 51))

    def test_zero_size(self, rng):
        assert generate_unique_sample(0, 1, 10, rng=rng) == []

    def test_same_seed_reproduces(self):
        a = generate_unique_sample(20, 1, 1000, rng=make_rng(99))
        b = generate_unique_sample(20, 1, 1000, rng=make_rng(99))
        assert a == b

    def test_different_seeds_differ(self):
        a = generate_unique_sample(100, 1, 1000, rng=make_rng(1))
        b = generate_unique_sample(100, 1, 1000, rng=make_rng(2))
        assert a != b

    def test_default_rng(self):
        sample = generate_unique_sample(10, 1, 100)
        assert len(set(sample)) == 10


class TestRoundTrip:
    @given(st.integers(min_value=0, max_value=2**32))
    def test_sort_generated_sample(self, seed):
        out = big_sort(generate_unique_sample(100, 1, 1000, rng=random.Random(seed)))
        assert len(out) == 100
        assert all(out[i] < out[i + 1] for i in range(len(out) - 1))
        assert all(1 <= v <= 1000 for v in out)
