"""Runtime services: telemetry and deferred scheduling."""

from . import telemetry
from .scheduling import DeferredQueue, Scheduler, call_soon

__all__ = ["telemetry", "DeferredQueue", "Scheduler", "call_soon"]
