"""
RelayFeedbackTuner - Relay Feedback (Astrom-Hagglund) Autotuner

This module implements a poll-driven relay autotuner. The tuner drives a
two-level output with hysteresis around the setpoint, tracks the resulting
process-variable oscillation, and estimates the ultimate gain and period from
which Ziegler-Nichols PID gains are derived.
"""

import math
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from loguru import logger

from .extremum_window import ExtremumWindow
from .real_time_timer import RealTimeTimer
from .timing_base import TIME_WRAP_MS, TimerBase, elapsed_ms

WINDOW_SIZE = 100  # Samples a peak must beat to count as an extremum
PEAK_CAPACITY = 10  # Completed cycles before the failsafe stops the run
CONVERGENCE_RATIO = 0.05  # Peak spread allowed, as a fraction of amplitude

DEFAULT_SETPOINT = 214.5
DEFAULT_NOISE_BAND = 1.0
DEFAULT_SAMPLE_TIME_MS = 1000
DEFAULT_OUTPUT_HIGH = 500.0
DEFAULT_OUTPUT_LOW = 0.0


class TunerState(IntEnum):
    """Relay tuner state machine status."""

    ACCUMULATING = 0  # Filling the sample window
    OSCILLATING = 1  # Window valid, tracking peaks
    CONVERGED = 2  # Terminal, gains available


class PeakType(IntEnum):
    """Kind of the most recently confirmed extremum."""

    MINIMUM = -1
    NONE = 0
    MAXIMUM = 1


def compute_pid_gains(ku: float, pu: float) -> Tuple[float, float, float]:
    """
    Ziegler-Nichols closed-loop gains from ultimate gain and period.

    Args:
        ku: Ultimate gain
        pu: Ultimate period in seconds

    Returns:
        Tuple of (Kp, Ki, Kd)
    """
    return 0.6 * ku, 1.2 * ku / pu, 0.075 * ku * pu


class RelayFeedbackTuner:
    """
    Relay feedback autotuner bound to two caller-owned signal slots.

    The tuner reads ``input_signal.value`` once per processed sample and
    writes one of the two relay levels to ``output_signal.value``. It never
    allocates after construction: the sample window and peak record are
    fixed-size.

    Usage pattern:
        pv = SignalSlot(read_sensor())
        out = SignalSlot(0.0)
        tuner = RelayFeedbackTuner(pv, out, setpoint=214.5, noise_band=1.0)

        # In control loop:
        pv.value = read_sensor()
        if tuner.step():
            kp, ki, kd = tuner.get_auto_tunings()
        apply_output_to_actuator(out.value)
    """

    def __init__(
        self,
        input_signal: Any,
        output_signal: Any,
        setpoint: float = DEFAULT_SETPOINT,
        noise_band: float = DEFAULT_NOISE_BAND,
        sample_time_ms: int = DEFAULT_SAMPLE_TIME_MS,
        output_high: float = DEFAULT_OUTPUT_HIGH,
        output_low: float = DEFAULT_OUTPUT_LOW,
        timer: Optional[TimerBase] = None,
        now_ms: Optional[int] = None,
    ):
        """
        Initialize the relay tuner.

        Args:
            input_signal: Slot holding the process variable (read only)
            output_signal: Slot receiving the relay output
            setpoint: Target process value the relay oscillates around
            noise_band: Hysteresis half-width around the setpoint
            sample_time_ms: Minimum interval between processed samples
            output_high: Relay level applied below the band
            output_low: Relay level applied above the band
            timer: Timer implementation used when step() gets no timestamp
            now_ms: Start time of the run, on the same clock later passed to
                step(); read from the timer if None
        """
        self.timer = timer or RealTimeTimer()

        self._input = input_signal
        self._output = output_signal

        # Configuration, fixed for the duration of a run
        self._setpoint = setpoint
        self._noise_band = noise_band
        self._sample_time_ms = sample_time_ms
        self._output_high = output_high
        self._output_low = output_low

        # Fixed-size storage
        self._window = ExtremumWindow(WINDOW_SIZE)
        self._peaks: List[float] = [0.0] * PEAK_CAPACITY

        # Run state
        self._finished: bool = False
        self._last_ms: int = 0
        self._input_max: float = 0.0
        self._input_min: float = 0.0
        self._peak_type = PeakType.NONE
        self._peak_count: int = 0
        self._ts_ultimate: int = 0
        self._ts_penultimate: int = 0

        # Measured loop characteristics
        self._ku: float = 1.0  # Ultimate gain
        self._pu: float = 1.0  # Ultimate period, seconds

        self.reset(now_ms)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.reset()

    def configure(
        self,
        setpoint: Optional[float] = None,
        noise_band: Optional[float] = None,
        sample_time_ms: Optional[int] = None,
        output_high: Optional[float] = None,
        output_low: Optional[float] = None,
        now_ms: Optional[int] = None,
    ) -> None:
        """
        Replace configuration values and restart the run.

        Values left as None keep their current setting. Nothing is validated;
        a negative band or non-positive sample time is the caller's problem.
        When step() is fed explicit timestamps, pass now_ms from the same clock.
        """
        if setpoint is not None:
            self._setpoint = setpoint
        if noise_band is not None:
            self._noise_band = noise_band
        if sample_time_ms is not None:
            self._sample_time_ms = sample_time_ms
        if output_high is not None:
            self._output_high = output_high
        if output_low is not None:
            self._output_low = output_low

        self.reset(now_ms)

    def reset(self, now_ms: Optional[int] = None) -> None:
        """
        Discard all run state and start accumulating samples again.

        The process variable is sampled once to seed the running min/max.
        The output slot is left untouched.

        Args:
            now_ms: Current wrapping millisecond time; read from the timer if None
        """
        self._last_ms = self._now(now_ms)
        self._finished = False
        self._peak_type = PeakType.NONE
        self._peak_count = 0
        self._ts_ultimate = 0
        self._ts_penultimate = 0
        for i in range(PEAK_CAPACITY):
            self._peaks[i] = 0.0
        self._window.clear()

        self._input_max = self._input.value
        self._input_min = self._input_max

        # Safe fallbacks until a measurement exists
        self._ku = 1.0
        self._pu = 1.0

        logger.info(
            f"Relay tuner reset: setpoint={self._setpoint}, band={self._noise_band}, "
            f"sample={self._sample_time_ms}ms, output={self._output_low}/{self._output_high}"
        )

    def step(self, now_ms: Optional[int] = None) -> bool:
        """
        Process one sample if the sample period has elapsed.

        Call this on every control tick; it is a no-op until sample_time_ms
        has passed since the last processed sample.

        Args:
            now_ms: Current wrapping millisecond time; read from the timer if None

        Returns:
            True once tuning has converged (and on every call after that)
        """
        if self._finished:
            return True

        now = self._now(now_ms)
        if elapsed_ms(now, self._last_ms) < self._sample_time_ms:
            return False
        self._last_ms = now

        current_input = self._input.value
        if current_input > self._input_max:
            self._input_max = current_input
        if current_input < self._input_min:
            self._input_min = current_input

        self._drive_relay(current_input)

        is_max, is_min = self._window.observe(current_input)
        if not self._window.is_valid():
            return False

        if is_max:
            self._record_maximum(current_input, now)
        elif is_min:
            self._record_minimum(current_input)

        if is_max or is_min:
            self._update_estimates()

        if not self._finished and self._peak_count >= PEAK_CAPACITY:
            self._finished = True
            logger.warning(
                f"Relay tuner stopped after {self._peak_count} cycles without "
                f"stable peaks: Ku={self._ku:.4f}, Pu={self._pu:.3f}s"
            )

        return self._finished

    def run(self, now_ms: Optional[int] = None) -> bool:
        """Alias of step()."""
        return self.step(now_ms)

    def _now(self, now_ms: Optional[int]) -> int:
        if now_ms is None:
            return self.timer.get_time_ms()
        return now_ms % TIME_WRAP_MS

    def _drive_relay(self, current_input: float) -> None:
        """Bang-bang output with hysteresis; inside the band the output holds."""
        if current_input > self._setpoint + self._noise_band:
            self._output.value = self._output_low
        elif current_input < self._setpoint - self._noise_band:
            self._output.value = self._output_high

    def _record_maximum(self, current_input: float, now: int) -> None:
        if self._peak_type == PeakType.MINIMUM:
            # New cycle: the previous maximum becomes the penultimate one
            self._ts_penultimate = self._ts_ultimate
        self._peak_type = PeakType.MAXIMUM
        self._ts_ultimate = now
        if self._peak_count < PEAK_CAPACITY:
            self._peaks[self._peak_count] = current_input
        logger.debug(f"Maximum {current_input:.3f} at {now}ms (cycle {self._peak_count})")

    def _record_minimum(self, current_input: float) -> None:
        if self._peak_type == PeakType.MAXIMUM:
            self._peak_count += 1
        self._peak_type = PeakType.MINIMUM
        if self._peak_count < PEAK_CAPACITY:
            self._peaks[self._peak_count] = current_input
        logger.debug(f"Minimum {current_input:.3f} (cycle {self._peak_count})")

    def _update_estimates(self) -> None:
        """Recompute Ku/Pu and test whether the last three peaks agree."""
        amplitude = self._input_max - self._input_min
        if amplitude <= 0:
            logger.debug(f"Zero oscillation amplitude, keeping Ku={self._ku:.4f}")
            return

        self._ku = 4.0 * (self._output_high - self._output_low) / (math.pi * amplitude)

        if self._peak_count <= 2:
            return

        self._pu = elapsed_ms(self._ts_ultimate, self._ts_penultimate) / 1000.0

        n = self._peak_count
        separation = (
            abs(self._peaks[n - 1] - self._peaks[n - 2])
            + abs(self._peaks[n - 2] - self._peaks[n - 3])
        ) / 2.0
        logger.debug(
            f"Ku={self._ku:.4f}, Pu={self._pu:.3f}s, peak separation={separation:.4f}, "
            f"amplitude={amplitude:.4f}"
        )

        if separation < CONVERGENCE_RATIO * amplitude:
            self._finished = True
            logger.info(
                f"Relay tuner converged after {n} cycles: Ku={self._ku:.4f}, Pu={self._pu:.3f}s"
            )

    # Getter methods
    def get_p(self) -> float:
        """Proportional gain, 0.6 * Ku."""
        return compute_pid_gains(self._ku, self._pu)[0]

    def get_i(self) -> float:
        """Integral gain, 1.2 * Ku / Pu."""
        return compute_pid_gains(self._ku, self._pu)[1]

    def get_d(self) -> float:
        """Derivative gain, 0.075 * Ku * Pu."""
        return compute_pid_gains(self._ku, self._pu)[2]

    def get_auto_tunings(self) -> Tuple[float, float, float]:
        """Get all PID tunings as tuple (Kp, Ki, Kd)."""
        return compute_pid_gains(self._ku, self._pu)

    def get_ultimate_gain(self) -> float:
        """Get the latest ultimate gain estimate."""
        return self._ku

    def get_ultimate_period(self) -> float:
        """Get the latest ultimate period estimate in seconds."""
        return self._pu

    def get_peaks(self) -> Tuple[float, ...]:
        """Recorded peak slots, including the one currently being filled."""
        if self._peak_type == PeakType.NONE:
            return ()
        return tuple(self._peaks[:min(self._peak_count + 1, PEAK_CAPACITY)])

    def get_peak_count(self) -> int:
        """Number of completed max-to-min transitions."""
        return self._peak_count

    def get_peak_type(self) -> PeakType:
        return self._peak_type

    def get_input_range(self) -> Tuple[float, float]:
        """Running (min, max) of the process variable since reset."""
        return (self._input_min, self._input_max)

    def get_window(self) -> Tuple[float, ...]:
        """Snapshot of the sample window, oldest first."""
        return self._window.values()

    def get_setpoint(self) -> float:
        return self._setpoint

    def get_noise_band(self) -> float:
        return self._noise_band

    def get_sample_time_ms(self) -> int:
        return self._sample_time_ms

    def get_output_levels(self) -> Tuple[float, float]:
        """Relay levels as (low, high) tuple."""
        return (self._output_low, self._output_high)

    def get_state(self) -> TunerState:
        """Current state machine status."""
        if self._finished:
            return TunerState.CONVERGED
        if self._window.is_valid():
            return TunerState.OSCILLATING
        return TunerState.ACCUMULATING

    def is_converged(self) -> bool:
        """Check if autotuning has finished."""
        return self._finished

    # Debug methods
    def print_tunings(self) -> None:
        """Print measured loop characteristics and derived gains."""
        kp, ki, kd = self.get_auto_tunings()
        print(f" Tuner State:       {self.get_state().name}")
        print(f" Cycles:            {self._peak_count}")
        print(f" Pv Min:            {self._input_min:.3f}")
        print(f" Pv Max:            {self._input_max:.3f}")
        print(f" Ultimate Gain:     {self._ku:.4f}")
        print(f" Ultimate Period:   {self._pu:.3f} s")
        print()
        print(f"  Kp: {kp:.4f}")
        print(f"  Ki: {ki:.4f}")
        print(f"  Kd: {kd:.4f}")
        print()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"RelayFeedbackTuner(Ku={self._ku:.3f}, Pu={self._pu:.3f}, "
            f"cycles={self._peak_count}, state={self.get_state().name})"
        )
