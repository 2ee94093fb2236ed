"""
ExtremumWindow - Circular buffer for sliding-window peak detection.

This module implements a fixed-size circular buffer holding the most recent
process-variable samples. It is used by the relay tuner to decide whether
the newest sample is a local maximum or minimum of the observed trajectory.
"""

from typing import List, Tuple


class ExtremumWindow:
    """
    Fixed-capacity ring buffer with strict extremum tests.

    Storage is allocated once in the constructor; pushing a sample overwrites
    the oldest slot in place. The window becomes valid the first time the
    write index wraps, and from then on every comparison sees a full window.
    """

    def __init__(self, size: int = 100):
        """
        Initialize the window.

        Args:
            size: Number of samples the window holds

        Raises:
            ValueError: If size is not positive
        """
        if size <= 0:
            raise ValueError("Window size must be positive")

        self._size: int = size
        self._samples: List[float] = [0.0] * size
        self._index: int = 0
        self._valid: bool = False

    def classify(self, reading: float) -> Tuple[bool, bool]:
        """
        Compare a reading against every stored sample.

        Args:
            reading: Candidate sample (not yet stored)

        Returns:
            (is_max, is_min): strictly above / strictly below all stored
            samples. Both are False until the window is valid.
        """
        if not self._valid:
            return False, False

        is_max = True
        is_min = True
        for sample in self._samples:
            if is_max:
                is_max = reading > sample
            if is_min:
                is_min = reading < sample
            if not is_max and not is_min:
                break
        return is_max, is_min

    def push(self, reading: float) -> None:
        """Store a reading in the next slot, wrapping the index."""
        self._samples[self._index] = reading
        self._index += 1
        if self._index >= self._size:
            self._index = 0
            self._valid = True

    def observe(self, reading: float) -> Tuple[bool, bool]:
        """Classify a reading against the window, then store it."""
        result = self.classify(reading)
        self.push(reading)
        return result

    def clear(self) -> None:
        """Forget all samples; the window must refill before it is valid again."""
        self._index = 0
        self._valid = False
        for i in range(self._size):
            self._samples[i] = 0.0

    def is_valid(self) -> bool:
        """Check whether the window has been filled at least once."""
        return self._valid

    def length(self) -> int:
        """Get the window capacity."""
        return self._size

    def values(self) -> Tuple[float, ...]:
        """Snapshot of the stored samples, oldest first."""
        if not self._valid:
            return tuple(self._samples[:self._index])
        return tuple(self._samples[self._index:] + self._samples[:self._index])

    def __repr__(self) -> str:
        return (f"ExtremumWindow(size={self._size}, index={self._index}, "
                f"valid={self._valid})")
