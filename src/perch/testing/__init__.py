"""Test utilities for perch clients.

Provides a virtual clock for notification timers and in-memory fakes for
the renderer, data source, and auth gate::

    from perch.testing import ManualClock, RecordingRenderer, StaticDataSource
"""

from perch.testing.clock import ManualClock, ManualTimer
from perch.testing.fakes import RecordingRenderer, StaticAuth, StaticDataSource

__all__ = [
    "ManualClock",
    "ManualTimer",
    "RecordingRenderer",
    "StaticAuth",
    "StaticDataSource",
]
