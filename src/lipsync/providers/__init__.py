"""Processing backends reporting job progress to the queue controller."""

from .providers_base import ProgressListener, ProgressReporter
from .providers_factory import create_reporter
from .providers_http import HttpWorkerReporter
from .providers_simulated import SimulatedProgressReporter

__all__ = [
    "HttpWorkerReporter",
    "ProgressListener",
    "ProgressReporter",
    "SimulatedProgressReporter",
    "create_reporter",
]
