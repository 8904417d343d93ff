from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pandas as pd

GROUP_COLS = ["duplicates", "size", "max_value"]


def read_jsonl(path: Path) -> List[dict]:
    rows = []
    with Path(path).open() as f:
        for line in f:
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError:
                continue
    return rows


def summarize_runs(path: Path, include_outliers: bool = False) -> pd.DataFrame:
    rows = read_jsonl(path)
    if not rows:
        return pd.DataFrame()
    df = pd.DataFrame(rows)
    group_cols = [c for c in GROUP_COLS if c in df.columns]
    ok = df[df["status"] == "ok"] if "status" in df.columns else df
    if ok.empty or "sort_ms" not in ok.columns:
        return pd.DataFrame(columns=group_cols)
    if not include_outliers:
        # Tukey fences per grid point
        gb = ok.groupby(group_cols, dropna=False)
        q1 = gb["sort_ns"].transform(lambda s: s.quantile(0.25))
        q3 = gb["sort_ns"].transform(lambda s: s.quantile(0.75))
        iqr = q3 - q1
        mask = (ok["sort_ns"] >= q1 - 1.5 * iqr) & (ok["sort_ns"] <= q3 + 1.5 * iqr)
        ok = ok[mask]

    def q(x, p):
        return x.quantile(p)

    agg = {
        "sort_ms": ["median", "mean", "count", (lambda s: q(s, 0.1)), (lambda s: q(s, 0.9))],
        "sort_ns": ["median"],
        "presence_size": ["max"],
        "rss_mb": ["median"],
    }
    g = ok.groupby(group_cols, dropna=False).agg(agg)
    g.columns = ["_".join([a for a in col if a]) for col in g.columns.to_flat_index()]
    g = g.rename(columns={
        "sort_ms_<lambda_0>": "sort_ms_p10",
        "sort_ms_<lambda_1>": "sort_ms_p90",
        "presence_size_max": "presence_size",
    })
    g = g.reset_index()
    if "status" in df.columns:
        counts = df.groupby(group_cols + ["status"]).size().unstack(fill_value=0).reset_index()
        g = g.merge(counts, on=group_cols, how="left")
    return g
