"""Chart rendering for habit statistics."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from .range_stats import CompletionBucket


def build_weekday_chart(stats: Mapping[str, CompletionBucket], *, title: str = "Completion by weekday") -> Figure:
    """Bar chart of completion rate per weekday, annotated with completed/total."""

    labels = list(stats.keys())
    rates = [bucket.rate for bucket in stats.values()]

    fig, ax = plt.subplots(figsize=(8, 4.5))

    if any(bucket.total for bucket in stats.values()):
        bars = ax.bar([label[:3] for label in labels], rates, color="#4CAF50", edgecolor="white")
        for bar, bucket in zip(bars, stats.values()):
            ax.text(
                bar.get_x() + bar.get_width() / 2,
                bar.get_height() + 1.5,
                f"{bucket.completed}/{bucket.total}",
                ha="center",
                va="bottom",
                fontsize=9,
                color="#374151",
            )
        ax.set_ylim(0, 110)
        ax.set_ylabel("Completion rate (%)")
        ax.set_title(title, fontsize=14, fontweight="bold", pad=12)
        ax.spines[["top", "right"]].set_visible(False)
    else:
        ax.text(0.5, 0.5, "No tracked days", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def export_weekday_png(stats: Mapping[str, CompletionBucket], *, output_path: Path) -> Path:
    """Render the weekday chart to PNG and return the path."""

    fig = build_weekday_chart(stats)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return output_path
