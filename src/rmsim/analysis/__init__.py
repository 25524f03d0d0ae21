"""
Analysis of a finished run.

The application itself only fires events; everything here is derived
from them after the fact.
"""

from rmsim.analysis.report import EventCounter

__all__ = [
    "EventCounter",
]
