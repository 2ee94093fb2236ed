"""
Manual step timer implementation for simulation
"""

from .timing_base import TIME_WRAP_MS, TimerBase


class SimulatedTimer(TimerBase):
    def __init__(self, start_ms: int = 0):
        self._start_ms = start_ms % TIME_WRAP_MS
        self._current_time_ms = self._start_ms

    def step(self, delta_ms: int):
        """Manually advance time by delta in milliseconds, wrapping like millis()"""
        self._current_time_ms = (self._current_time_ms + int(delta_ms)) % TIME_WRAP_MS

    def reset(self):
        """Reset timer to its start value"""
        self._current_time_ms = self._start_ms

    def get_time_ms(self) -> int:
        return self._current_time_ms

    def get_time_s(self) -> float:
        return self._current_time_ms / 1000.0

    def __str__(self):
        return f"SimulatedTimer({self._current_time_ms}ms)"
