"""
Visualization utilities.

- Buffer usage per partition
- Buffer usage over time
- Event counters
"""

from rmsim.viz.usage import (
    plot_buffer_usage,
    plot_usage_history,
    plot_event_counts,
    save_figure,
)

__all__ = [
    "plot_buffer_usage",
    "plot_usage_history",
    "plot_event_counts",
    "save_figure",
]
