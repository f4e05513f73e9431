"""Factory for progress reporters."""

from ..config import AppConfig
from .providers_base import ProgressReporter
from .providers_http import HttpWorkerReporter
from .providers_simulated import SimulatedProgressReporter


def create_reporter(config: AppConfig) -> ProgressReporter:
    """Instantiate the reporter selected by ``config.reporter``."""
    name = config.reporter.lower()
    if name == "simulated":
        return SimulatedProgressReporter(
            start_delay_seconds=config.simulator_start_delay_seconds,
            tick_interval_seconds=config.simulator_tick_seconds,
            min_increment=config.simulator_min_increment,
            max_increment=config.simulator_max_increment,
            failure_probability=config.simulator_failure_probability,
        )
    if name == "http":
        if not config.worker_base_url:
            raise ValueError("worker_base_url is required to instantiate HttpWorkerReporter")
        return HttpWorkerReporter(
            base_url=config.worker_base_url,
            callback_base_url=config.callback_base_url,
            timeout_seconds=config.worker_request_timeout_seconds,
        )
    raise ValueError(f"Unsupported reporter '{config.reporter}'")
