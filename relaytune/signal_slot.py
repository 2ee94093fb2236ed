"""
SignalSlot - Caller-owned scalar cell shared with the tuner.

The host application keeps one slot for the process variable (written by the
acquisition code, read by the tuner) and one for the actuation output
(written by the tuner, applied to hardware by the host). Any object exposing a
read/write ``value`` attribute can stand in for a slot.
"""


class SignalSlot:
    """Single mutable float value."""

    __slots__ = ("value",)

    def __init__(self, value: float = 0.0):
        self.value = value

    def get(self) -> float:
        """Return the current value."""
        return self.value

    def set(self, value: float) -> None:
        """Replace the current value."""
        self.value = value

    def __float__(self) -> float:
        return float(self.value)

    def __repr__(self) -> str:
        return f"SignalSlot({self.value!r})"
