"""
The resource management protocol running on each node.

- TrafficGenerator: periodic request / unidirectional sends
- ReceptionHandler: transit buffering, request answering, delivery events
- NodeApplication: one node's buffer, generator and handler together
"""

from rmsim.app.traffic import TrafficGenerator, draw_size
from rmsim.app.reception import ReceptionHandler
from rmsim.app.application import NodeApplication, build_applications

__all__ = [
    "TrafficGenerator",
    "draw_size",
    "ReceptionHandler",
    "NodeApplication",
    "build_applications",
]
