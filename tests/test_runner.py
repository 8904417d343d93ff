"""Tests for grid sweeps."""

from __future__ import annotations

import json

from bigsort.config import Limits, load_config
from bigsort.runner import run_point, run_sweep, sort_once
from bigsort.sorter import DuplicatePolicy
from bigsort.summarize import read_jsonl


class TestRunPoint:
    def test_one_record_per_repeat(self, rng):
        records = run_point({"size": 10, "max_value": 40}, rng, Limits(warmups=1, repeats=3))
        assert len(records) == 3
        for rec in records:
            assert rec["status"] == "ok"
            assert rec["size"] == 10
            assert rec["max_value"] == 40
            assert rec["duplicates"] == "collapse"
            assert rec["sorted_size"] == 10
            assert 10 <= rec["presence_size"] <= 40
            assert rec["sort_ms"] == rec["sort_ns"] // 1_000_000
            assert rec["sorted_ok"] is True
            assert rec["rss_mb"] > 0

    def test_invalid_range_is_recorded(self, rng):
        records = run_point({"size": 5, "max_value": 3}, rng, Limits(repeats=4))
        assert len(records) == 1
        assert records[0]["status"] == "invalid_range"
        assert "Array size (5)" in records[0]["error"]

    def test_at_least_one_repeat(self, rng):
        assert len(run_point({"size": 1, "max_value": 1}, rng, Limits(warmups=0, repeats=0))) == 1

    def test_empty_point_is_recorded_as_error(self, rng):
        records = run_point({"size": 0, "max_value": 10}, rng, Limits(warmups=1, repeats=3))
        assert len(records) == 1
        assert records[0]["status"] == "error"
        assert "empty" in records[0]["error"]

    def test_non_positive_sample_is_recorded_as_error(self, rng):
        records = run_point({"size": 1, "max_value": 0}, rng, Limits(warmups=1, repeats=2), min_value=0)
        assert len(records) == 1
        assert records[0]["status"] == "error"
        assert "not a positive integer" in records[0]["error"]

    def test_unknown_policy_is_recorded_as_error(self, rng):
        records = run_point({"size": 3, "max_value": 9, "duplicates": "merge"}, rng, Limits(warmups=1, repeats=2))
        assert len(records) == 1
        assert records[0]["status"] == "error"
        assert records[0]["duplicates"] == "merge"

    def test_policy_from_params(self, rng):
        records = run_point({"size": 3, "max_value": 9, "duplicates": "count"}, rng, Limits(warmups=0, repeats=1))
        assert records[0]["duplicates"] == "count"


class TestSortOnce:
    def test_fields(self):
        rec = sort_once([5, 2, 9], DuplicatePolicy.COLLAPSE)
        assert rec["presence_size"] == 9
        assert rec["sorted_size"] == 3
        assert rec["wall_ms"] >= 0


class TestRunSweep:
    def test_writes_runs_and_provenance(self, sweep_yaml, tmp_path):
        cfg = load_config(sweep_yaml())
        out = tmp_path / "out" / "runs.jsonl"
        written = run_sweep(cfg, out)
        # 2 sizes x 2 bounds x 2 repeats
        assert written == 8
        rows = read_jsonl(out)
        assert len(rows) == 8
        prov = json.loads((out.parent / "provenance.json").read_text())
        assert prov["seed"] == 7
        assert "platform" in prov["system"]

    def test_seed_reproduces_presence_sizes(self, sweep_yaml, tmp_path):
        cfg = load_config(sweep_yaml())
        first = tmp_path / "a" / "runs.jsonl"
        second = tmp_path / "b" / "runs.jsonl"
        run_sweep(cfg, first, seed=11)
        run_sweep(cfg, second, seed=11)
        key = lambda r: (r["size"], r["max_value"], r["presence_size"])
        assert [key(r) for r in read_jsonl(first)] == [key(r) for r in read_jsonl(second)]

    def test_bad_points_do_not_abort(self, sweep_yaml, tmp_path):
        grid = {"size": [0, 2], "max_value": [10], "duplicates": ["collapse", "merge"]}
        cfg = load_config(sweep_yaml(grid=grid, limits={"warmups": 1, "repeats": 1}))
        out = tmp_path / "runs.jsonl"
        assert run_sweep(cfg, out) == 4
        statuses = sorted(r["status"] for r in read_jsonl(out))
        assert statuses == ["error", "error", "error", "ok"]

    def test_invalid_points_do_not_abort(self, sweep_yaml, tmp_path):
        cfg = load_config(sweep_yaml(grid={"size": [10], "max_value": [5, 20]}))
        out = tmp_path / "runs.jsonl"
        run_sweep(cfg, out)
        statuses = sorted(r["status"] for r in read_jsonl(out))
        assert statuses == ["invalid_range", "ok", "ok"]
