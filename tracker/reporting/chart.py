"""
Hourly chart rendering.
Draws the 24-hour average player dataset as a PNG bar chart.
"""

from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402


def render_hourly_chart(dataset: List[Optional[float]], day_key: str, path: Path) -> Path:
    """Bar chart of the hourly average player count, written as PNG."""
    hours = list(range(len(dataset)))
    values = [v if v is not None else 0.0 for v in dataset]
    colors = ["#9b59b6" if v is not None else "#dddddd" for v in dataset]

    fig, ax = plt.subplots(figsize=(10, 4))
    try:
        ax.bar(hours, values, color=colors)
        ax.set_xticks(hours)
        ax.set_xticklabels([f"{h:02d}" for h in hours], fontsize=8)
        ax.set_xlabel("Hour")
        ax.set_ylabel("Average players")
        ax.set_title(f"Players per hour, {day_key}")
        ax.set_ylim(bottom=0)
        fig.tight_layout()
        fig.savefig(path, format="png")
    finally:
        plt.close(fig)
    return path
