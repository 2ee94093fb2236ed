from typing import Protocol, runtime_checkable

# Millisecond counters roll over at 32 bits, like an Arduino millis()
TIME_WRAP_MS = 2 ** 32


def elapsed_ms(now_ms: int, then_ms: int) -> int:
    """Unsigned difference between two wrapping millisecond stamps."""
    return (now_ms - then_ms) % TIME_WRAP_MS


@runtime_checkable
class TimerBase(Protocol):
    def get_time_ms(self) -> int:
        """Get current time as a wrapping 32-bit millisecond counter"""
        ...

    def get_time_s(self) -> float:
        """Get current time in seconds"""
        ...
