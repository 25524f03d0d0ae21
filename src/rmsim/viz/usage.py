"""
Plots of buffer usage and event counts.

- Per-partition usage of one node's buffer against its capacity
- Total usage of every node over time
- Sent / received counters per event kind
"""

from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from rmsim.core.events import AppEvent

if TYPE_CHECKING:
    from rmsim.analysis.report import EventCounter


COLOR_USAGE = "#31688e"
COLOR_CAPACITY = "#b5367a"


def plot_buffer_usage(
    snapshot: Mapping[int, int],
    capacity: int,
    title: str = "Buffer usage per partition",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (8, 4),
) -> tuple[Figure, Axes]:
    """
    Bar chart of one buffer's partitions.

    Args:
        snapshot: {partition_key: bytes} as returned by PartitionedBuffer.snapshot()
        capacity: Buffer capacity in bytes, drawn as a horizontal line
        ax: Existing axes (creates new figure if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    keys = list(snapshot)
    positions = np.arange(len(keys))
    ax.bar(positions, [snapshot[k] for k in keys], color=COLOR_USAGE)
    ax.axhline(capacity, color=COLOR_CAPACITY, linestyle="--", label="capacity")

    ax.set_xticks(positions)
    ax.set_xticklabels([str(k) for k in keys])
    ax.set_xlabel("partition (counterpart address)")
    ax.set_ylabel("bytes")
    ax.set_title(title)
    ax.legend(loc="upper right")

    return fig, ax


def plot_usage_history(
    times: Sequence[float],
    history: Mapping[int, Sequence[int]],
    capacities: Mapping[int, int] | None = None,
    title: str = "Buffer usage over time",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (10, 5),
) -> tuple[Figure, Axes]:
    """
    Total buffer usage of each node over time.

    Args:
        times: Sample times
        history: {address: usage samples}, one sample per time
        capacities: Optional {address: capacity}; each distinct capacity is
                    drawn once as a dashed line
        ax: Existing axes (creates new figure if None)

    Returns:
        (fig, ax) tuple
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    for address, samples in history.items():
        ax.plot(times, samples, linewidth=1.0, label=f"node {address}")

    if capacities:
        for capacity in sorted(set(capacities.values())):
            ax.axhline(capacity, color=COLOR_CAPACITY, linestyle="--", linewidth=0.8)

    ax.set_xlabel("time")
    ax.set_ylabel("bytes buffered")
    ax.set_title(title)
    if len(history) <= 12:
        ax.legend(loc="upper left", fontsize="small", ncol=2)

    return fig, ax


def plot_event_counts(
    counter: "EventCounter",
    title: str = "Application events",
    ax: Axes | None = None,
    figsize: tuple[float, float] = (10, 4),
) -> tuple[Figure, Axes]:
    """Horizontal bar chart of every event counter."""
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    names = [event.value for event in AppEvent]
    values = [counter[event] for event in AppEvent]
    positions = np.arange(len(names))

    ax.barh(positions, values, color=COLOR_USAGE)
    ax.set_yticks(positions)
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_xlabel("count")
    ax.set_title(title)

    return fig, ax


def save_figure(fig: Figure, path: str | Path, dpi: int = 150, **kwargs) -> None:
    """Save figure to file."""
    fig.savefig(path, dpi=dpi, bbox_inches="tight", **kwargs)
