from __future__ import annotations

from typing import Iterable, Optional, Sequence

from models import HandicapSnapshot, Round

from .stats import handicap_history, over_par_trend


def _load_plt():
    try:
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _apply_sparse_xticks(ax, labels: Sequence[str], max_labels: int = 12) -> None:
    """
    Keep x-axis readable when there are many points.

    Shows at most `max_labels` ticks while preserving order.
    """
    count = len(labels)
    if count <= max_labels:
        ax.set_xticks(range(count))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        return

    step = max(1, count // max_labels)
    tick_positions = list(range(0, count, step))
    if tick_positions[-1] != count - 1:
        tick_positions.append(count - 1)

    ax.set_xticks(tick_positions)
    ax.set_xticklabels([labels[i] for i in tick_positions], rotation=45, ha="right")


def plot_handicap_history(
    snapshots: Iterable[HandicapSnapshot],
    title: Optional[str] = None,
):
    """Step chart: handicap after each monthly recalculation."""
    plt = _load_plt()
    rows = handicap_history(snapshots)
    labels = [row["month"] for row in rows]
    values = [row["new_handicap"] for row in rows]
    x = list(range(len(labels)))

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.step(x, values, where="mid", marker="o", linewidth=1.5)
    ax.set_title(title or "Handicap History")
    ax.set_xlabel("Month")
    ax.set_ylabel("Handicap")
    ax.set_ylim(bottom=0)
    _apply_sparse_xticks(ax, labels)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_over_par_trend(rounds: Sequence[Round]):
    """Line chart: over-par per round, with the par line for reference."""
    plt = _load_plt()
    rows = over_par_trend(rounds)
    labels = [row["played_on"].strftime("%Y-%m-%d") for row in rows]
    values = [row["over_par"] for row in rows]
    x = list(range(len(labels)))

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(x, values, marker="o", linewidth=1.5, label="Over Par")
    ax.axhline(0, color="black", linewidth=1, alpha=0.6)
    ax.set_title("Over Par Trend")
    ax.set_xlabel("Round")
    ax.set_ylabel("Strokes Over Par")
    _apply_sparse_xticks(ax, labels)
    ax.grid(axis="y", alpha=0.2)
    ax.legend(loc="upper right")
    fig.tight_layout()
    return fig, ax
