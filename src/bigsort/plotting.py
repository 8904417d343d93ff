from __future__ import annotations

from pathlib import Path

import altair as alt
import pandas as pd

from .complexity import fit_models, predict_series


def _scale(log_scale: bool):
    return alt.Scale(type="log") if log_scale else alt.Undefined


def plot_runtime(
    summary_csv: Path,
    x: str = "max_value",
    y: str = "sort_ns_median",
    color: str = "size",
    show_fit: bool = True,
    log_x: bool = False,
    log_y: bool = False,
) -> alt.Chart:
    df = pd.read_csv(summary_csv)
    y_col = y
    if y_col not in df.columns:
        for cand in ["sort_ns_median", "sort_ms_median", "sort_ms_mean"]:
            if cand in df.columns:
                y_col = cand
                break
    x_enc = alt.X(x, title=x, scale=_scale(log_x))
    y_enc = alt.Y(y_col, title=y_col, scale=_scale(log_y))
    color_enc = alt.Color(f"{color}:N") if color in df.columns else alt.value("steelblue")
    base = (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(x=x_enc, y=y_enc, color=color_enc, tooltip=list(df.columns))
        .properties(width=600, height=400)
    )
    if not show_fit or df.empty or x not in df.columns or y_col not in df.columns:
        return base
    by_cols = [c for c in [color] if c in df.columns]
    fits = fit_models(df, x_col=x, y_col=y_col, by=by_cols)
    if fits.empty:
        return base
    preds = predict_series(df, fits, x_col=x, by=by_cols)
    if preds.empty:
        return base
    fit_layer = (
        alt.Chart(preds)
        .mark_line(strokeDash=[4, 4])
        .encode(
            x=x_enc,
            y=alt.Y("yhat", title=y_col, scale=_scale(log_y)),
            color=color_enc,
            detail=by_cols,
            tooltip=by_cols + ["model", x, "yhat"],
        )
    )
    if by_cols:
        label_points = (
            preds.sort_values(x)
            .groupby(by_cols, dropna=False, group_keys=False)
            .tail(1)
            .reset_index(drop=True)
        )
    else:
        label_points = preds.sort_values(x).tail(1)
    label_layer = (
        alt.Chart(label_points)
        .mark_text(align="left", dx=5)
        .encode(x=x, y="yhat", color=color_enc, text="model", detail=by_cols)
    )
    return base + fit_layer + label_layer


def plot_presence(
    summary_csv: Path,
    x: str = "max_value",
    color: str = "size",
    log_x: bool = False,
    log_y: bool = False,
) -> alt.Chart:
    """Chart presence-indicator length and process RSS against the value bound."""
    df = pd.read_csv(summary_csv)
    if "presence_size" not in df.columns:
        return alt.Chart(pd.DataFrame()).mark_text().encode(
            text=alt.value("No presence data available")
        )
    x_enc = alt.X(x, title=x, scale=_scale(log_x))
    color_enc = alt.Color(f"{color}:N") if color in df.columns else alt.value("steelblue")
    presence = (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=x_enc,
            y=alt.Y("presence_size", title="Presence indicator length", scale=_scale(log_y)),
            color=color_enc,
            tooltip=list(df.columns),
        )
        .properties(width=600, height=300, title="Presence indicator size")
    )
    rss_col = next((c for c in ["rss_mb_median", "rss_mb"] if c in df.columns), None)
    if rss_col is None:
        return presence
    rss = (
        alt.Chart(df)
        .mark_line(point=True)
        .encode(
            x=x_enc,
            y=alt.Y(rss_col, title="Process RSS (MB)", scale=_scale(log_y)),
            color=color_enc,
            tooltip=list(df.columns),
        )
        .properties(width=600, height=300, title="Memory")
    )
    return alt.vconcat(presence, rss)
