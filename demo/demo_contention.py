#!/usr/bin/env python3
"""
Demo: Resource Hogs vs. Partitioned Buffers

Runs a small scenario on the in-memory loopback world:
1. 40 nodes, 10% servers, 10% resource hogs sending five times as often
2. Traffic is relayed through two random intermediate nodes
3. Partitioned buffers evict from the fullest partition first
4. Compare request/response success of normal nodes and hogs

Run once with proxy signatures off and once with them on to see how the
accounting of responses changes who gets evicted.
"""

import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from rmsim.core import ResourceManagementConfig
from rmsim.app import build_applications
from rmsim.sim import LoopbackWorld
from rmsim.analysis import EventCounter
from rmsim.viz import plot_buffer_usage, plot_usage_history, plot_event_counts, save_figure


def make_relay_path(dest_min: int, dest_max: int, n_relays: int, seed: int):
    """Random relay path per (source, destination), fixed for the run."""
    rng = np.random.default_rng(seed)
    paths: dict[tuple[int, int], list[int]] = {}

    def hops(source: int, destination: int) -> list[int]:
        key = (source, destination)
        if key not in paths:
            candidates = [
                a for a in range(dest_min, dest_max) if a not in (source, destination)
            ]
            chosen = rng.choice(candidates, size=n_relays, replace=False)
            paths[key] = [int(a) for a in chosen]
        return paths[key]

    return hops


def run_scenario(config: ResourceManagementConfig, duration: float, n_relays: int = 2):
    world = LoopbackWorld(
        config.dest_min,
        config.dest_max,
        hops=make_relay_path(config.dest_min, config.dest_max, n_relays, config.seed),
    )
    counter = EventCounter()
    world.add_listener(counter)

    apps = build_applications(config, world, world, world)
    world.attach(apps)

    times: list[float] = []
    history: dict[int, list[int]] = {a: [] for a in apps}
    n_steps = int(duration)
    for _ in range(n_steps):
        world.step(1.0)
        times.append(world.now())
        for address, usage in world.buffer_usage().items():
            history[address].append(usage)

    return world, apps, counter, times, history


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("  RESOURCE HOGS VS. PARTITIONED BUFFERS")
    print("=" * 60)

    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    duration = 2000.0

    for proxy in (False, True):
        config = ResourceManagementConfig(
            interval=50.0,
            interval_res_hogs=10.0,
            dest_min=0,
            dest_max=40,
            seed=7,
            request_min_size=100,
            request_max_size=500,
            response_min_size=1000,
            response_max_size=5000,
            unidirectional_min_size=100,
            unidirectional_max_size=1000,
            client_buffer_size=20_000,
            server_buffer_size=50_000,
            percentage_of_servers=10,
            percentage_of_res_hogs=10,
            probability_to_send_request=80,
            simulate_proxy_signatures=proxy,
        )

        print(f"\n{'Proxy signatures ON' if proxy else 'Proxy signatures OFF'}")
        world, apps, counter, times, history = run_scenario(config, duration)

        roles = next(iter(apps.values())).roles
        print(f"   Servers:        {list(roles.servers)}")
        print(f"   Resource hogs:  {list(roles.res_hogs)}")
        print()
        for line in counter.format_summary(sim_time=world.now()).splitlines():
            print(f"   {line}")

        tag = "proxy" if proxy else "plain"
        capacities = {a: app.buffer.max_size for a, app in apps.items()}

        fig, axes = plt.subplots(1, 2, figsize=(16, 5))
        server = roles.servers[0]
        plot_buffer_usage(
            apps[server].buffer.snapshot(),
            apps[server].buffer.max_size,
            title=f"Server {server} partitions at t={world.now():.0f}",
            ax=axes[0],
        )
        plot_usage_history(times, history, capacities, ax=axes[1])
        plt.tight_layout()
        save_figure(fig, output_dir / f"contention_usage_{tag}.png")
        plt.close(fig)

        fig, _ = plot_event_counts(counter, title=f"Events ({tag})")
        save_figure(fig, output_dir / f"contention_events_{tag}.png")
        plt.close(fig)

    print(f"\nFigures saved to {output_dir}")


if __name__ == "__main__":
    main()
