"""Smoke tests for the plotting helpers."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from rmsim.analysis.report import EventCounter
from rmsim.core.events import AppEvent
from rmsim.viz.usage import (
    plot_buffer_usage,
    plot_event_counts,
    plot_usage_history,
    save_figure,
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


def test_plot_buffer_usage():
    fig, ax = plot_buffer_usage({1: 40, 3: 60}, capacity=100)
    assert len(ax.patches) == 2
    assert list(ax.get_xticks()) == [0, 1]


def test_plot_usage_history_on_existing_axes():
    fig, ax = plt.subplots()
    out_fig, out_ax = plot_usage_history(
        [1.0, 2.0, 3.0], {0: [10, 20, 30], 1: [5, 5, 5]}, capacities={0: 100, 1: 100}, ax=ax
    )
    assert out_ax is ax
    assert out_fig is fig
    assert len(ax.get_lines()) == 3  # two nodes + one capacity line


def test_plot_event_counts():
    counter = EventCounter()
    counter.on_event(AppEvent.SENT_REQUEST, None, 0)
    fig, ax = plot_event_counts(counter)
    assert len(ax.patches) == len(AppEvent)


def test_save_figure(tmp_path):
    fig, _ = plot_buffer_usage({0: 10}, capacity=20)
    path = tmp_path / "usage.png"
    save_figure(fig, path)
    assert path.exists()
