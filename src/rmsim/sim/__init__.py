"""
In-memory host environment for running scenarios without a DTN simulator.
"""

from rmsim.sim.world import FiredEvent, LoopbackWorld, direct

__all__ = [
    "FiredEvent",
    "LoopbackWorld",
    "direct",
]
