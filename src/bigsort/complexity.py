from __future__ import annotations

import math
from math import log
from typing import Callable, Dict, List, Tuple

import pandas as pd


def _basis_functions() -> Dict[str, Callable[[float], float]]:
    # positive n only
    return {
        "O(1)": lambda n: 1.0,
        "O(log n)": lambda n: log(max(n, 2)),
        "O(n)": lambda n: float(n),
        "O(n log n)": lambda n: float(n) * log(max(n, 2)),
        "O(n^2)": lambda n: float(n) ** 2,
        "O(n^3)": lambda n: float(n) ** 3,
    }


def _fit_single(x: List[float], y: List[float], basis: Callable[[float], float]) -> Tuple[float, float, float]:
    """Least squares fit of ``y = exp(a) * basis(n) ** b``.

    O(1) has a constant basis, so it is fitted as a flat line ``log y = a``
    rather than through the degenerate regression.
    """
    pairs = [(basis(n), val) for n, val in zip(x, y) if val > 0 and basis(n) > 0]
    if len(pairs) < 2:
        return float("inf"), 0.0, 0.0
    X = [math.log(fv) for fv, _ in pairs]
    Y = [math.log(val) for _, val in pairs]
    n = len(X)
    mean_x = sum(X) / n
    mean_y = sum(Y) / n
    sxx = sum((xi - mean_x) ** 2 for xi in X)
    if sxx == 0:
        a, b, k = mean_y, 0.0, 1
    else:
        sxy = sum((xi - mean_x) * (yi - mean_y) for xi, yi in zip(X, Y))
        b = sxy / sxx
        a = mean_y - b * mean_x
        k = 2
    rss = sum((yi - (a + b * xi)) ** 2 for xi, yi in zip(X, Y))
    # Gaussian AIC up to an additive constant
    aic = n * math.log(rss / n) + 2 * k if rss > 0 else -float("inf")
    return aic, a, b


def fit_models(df: pd.DataFrame, x_col: str, y_col: str, by: List[str]) -> pd.DataFrame:
    """Fit candidate complexity models per group.

    Returns a DataFrame with columns: by..., model, a, b, aic, nobs
    """
    results = []
    bases = _basis_functions()
    groups = df.groupby(by, dropna=False) if by else [((), df)]
    for keys, group in groups:
        x = group[x_col].tolist()
        y = group[y_col].tolist()
        best = (float("inf"), None, None, None)
        for name, fn in bases.items():
            aic, a, b = _fit_single(x, y, fn)
            if aic < best[0]:
                best = (aic, name, a, b)
        aic, name, a, b = best
        if name is None:
            continue
        rec = {}
        if not isinstance(keys, tuple):
            keys = (keys,)
        for k, v in zip(by, keys):
            rec[k] = v
        rec.update({"model": name, "a": a, "b": b, "aic": aic, "nobs": len(group)})
        results.append(rec)
    return pd.DataFrame(results)


def predict_series(df: pd.DataFrame, fits: pd.DataFrame, x_col: str, by: List[str]) -> pd.DataFrame:
    """Generate predictions per group across observed x using fitted model."""
    bases = _basis_functions()
    preds = []
    for _, row in fits.iterrows():
        key = {k: row[k] for k in by}
        fn = bases[row["model"]]
        sub = df
        for k, v in key.items():
            sub = sub[sub[k] == v]
        for xv in sorted(pd.unique(sub[x_col].values)):
            fv = fn(xv)
            if fv <= 0:
                continue
            yhat = math.exp(row["a"] + row["b"] * math.log(fv))
            preds.append({**key, x_col: xv, "yhat": yhat, "model": row["model"]})
    return pd.DataFrame(preds)
