"""
RelayTune - Relay Feedback PID Autotuner

A Python implementation of relay-feedback (Astrom-Hagglund) autotuning with
Ziegler-Nichols gain rules, driven by caller-owned signal slots.

Licensed under the MIT License.
"""

from .config import create_tuner, default_config, load_config, save_config, validate_config
from .exceptions import ConfigurationError, RelayTuneError
from .extremum_window import ExtremumWindow
from .real_time_timer import RealTimeTimer
from .relay_tuner import (
    CONVERGENCE_RATIO,
    PEAK_CAPACITY,
    WINDOW_SIZE,
    PeakType,
    RelayFeedbackTuner,
    TunerState,
    compute_pid_gains,
)
from .signal_slot import SignalSlot
from .simulated_timer import SimulatedTimer
from .timing_base import TIME_WRAP_MS, TimerBase, elapsed_ms

__version__ = "1.0.0"
__author__ = "RelayTune Contributors"
__license__ = "MIT"

__all__ = [
    "RelayFeedbackTuner",
    "TunerState",
    "PeakType",
    "compute_pid_gains",
    "WINDOW_SIZE",
    "PEAK_CAPACITY",
    "CONVERGENCE_RATIO",
    "ExtremumWindow",
    "SignalSlot",
    "RelayTuneError",
    "ConfigurationError",
    "create_tuner",
    "default_config",
    "load_config",
    "save_config",
    "validate_config",
    "TimerBase",
    "TIME_WRAP_MS",
    "elapsed_ms",
    "RealTimeTimer",
    "SimulatedTimer",
]
