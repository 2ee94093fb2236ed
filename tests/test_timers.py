"""
Timer implementation tests.
"""

from relaytune import TIME_WRAP_MS, RealTimeTimer, SignalSlot, SimulatedTimer, TimerBase


def test_simulated_timer_steps_and_resets():
    timer = SimulatedTimer()
    timer.step(1500)
    assert timer.get_time_ms() == 1500
    assert timer.get_time_s() == 1.5

    timer.reset()
    assert timer.get_time_ms() == 0


def test_simulated_timer_wraps_at_32_bits():
    timer = SimulatedTimer(start_ms=TIME_WRAP_MS - 10)
    timer.step(25)
    assert timer.get_time_ms() == 15

    timer.reset()
    assert timer.get_time_ms() == TIME_WRAP_MS - 10


def test_real_time_timer_is_monotonic_counter():
    timer = RealTimeTimer()
    assert isinstance(timer, TimerBase)

    first = timer.get_time_ms()
    assert 0 <= first < TIME_WRAP_MS
    assert timer.get_time_s() > 0
    assert timer.timer_name in ("monotonic_ns", "perf_counter_ns", "time_ns", "time")


def test_signal_slot():
    slot = SignalSlot()
    assert slot.get() == 0.0

    slot.set(3.5)
    assert slot.value == 3.5
    assert float(slot) == 3.5
    assert repr(slot) == "SignalSlot(3.5)"
