"""
Resilience Module

COMPONENTS:
===========
- BackgroundTaskTracker: owns fire-and-forget cache writes, drained on shutdown
- SingleFlight: collapses concurrent misses for one key into one upstream call
"""

from .background_tasks import BackgroundTaskTracker
from .single_flight import SingleFlight

__all__ = [
    "BackgroundTaskTracker",
    "SingleFlight",
]
