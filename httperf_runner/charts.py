from __future__ import annotations

import logging
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from .report import Report

LOGGER = logging.getLogger("httperf_runner.charts")

sns.set_style("whitegrid")
plt.rcParams["figure.dpi"] = 100
plt.rcParams["savefig.dpi"] = 300
plt.rcParams["font.size"] = 10
plt.rcParams["axes.labelsize"] = 11
plt.rcParams["axes.titlesize"] = 13
plt.rcParams["legend.fontsize"] = 9

NUMERIC_COLUMNS = ("rate", "req_rate", "reply_rate_min", "reply_rate_avg", "reply_rate_max")


def render_rate_chart(report: Report, chart_path: Path, title: str | None = None) -> Path | None:
    """Plot achieved reply rate against offered rate, one line per URI.

    The shaded band spans the min/max reply rate httperf sampled during each
    run, and the dashed line is the request rate it actually managed to issue.
    Returns ``None`` without writing anything when there is nothing to plot.
    """
    df = report.to_dataframe()
    if df.empty:
        LOGGER.warning("No runs recorded; skipping chart %s", chart_path)
        return None

    for column in NUMERIC_COLUMNS:
        df[column] = pd.to_numeric(df[column], errors="coerce")

    chart_path = Path(chart_path)
    chart_path.parent.mkdir(parents=True, exist_ok=True)
    palette = sns.color_palette("deep", n_colors=max(df["uri"].nunique(), 1))

    fig, ax = plt.subplots(figsize=(10, 6))
    for color, (uri, group) in zip(palette, df.groupby("uri", sort=False)):
        group = group.sort_values("rate")
        ax.plot(
            group["rate"],
            group["reply_rate_avg"],
            marker="o",
            linewidth=2.5,
            markersize=7,
            color=color,
            label=f"{uri} reply rate",
        )
        ax.fill_between(
            group["rate"],
            group["reply_rate_min"],
            group["reply_rate_max"],
            color=color,
            alpha=0.15,
        )
        ax.plot(
            group["rate"],
            group["req_rate"],
            linestyle="--",
            linewidth=1.5,
            color=color,
            label=f"{uri} request rate",
        )

    lower = df["rate"].min()
    upper = df["rate"].max()
    ax.plot([lower, upper], [lower, upper], color="grey", linewidth=1, alpha=0.6, label="offered")

    ax.set_xlabel("Offered rate (req/s)", fontweight="semibold")
    ax.set_ylabel("Achieved rate (per second)", fontweight="semibold")
    ax.set_title(title or "httperf Rate Sweep", fontweight="bold", pad=15)
    ax.grid(True, alpha=0.3, linestyle="--")
    ax.legend(loc="upper left", frameon=True)

    plt.tight_layout()
    fig.savefig(chart_path, bbox_inches="tight", facecolor="white")
    plt.close(fig)
    LOGGER.info("Rendered chart %s", chart_path)
    return chart_path


__all__ = ["render_rate_chart"]
