"""
Sliding-window extremum detection tests.

A sample only counts as a window maximum (minimum) when it is strictly above
(below) every one of the stored samples, and never before the window has
been filled once.
"""

import numpy as np
import pytest

from relaytune import ExtremumWindow, WINDOW_SIZE


def test_rejects_non_positive_size():
    with pytest.raises(ValueError):
        ExtremumWindow(0)
    with pytest.raises(ValueError):
        ExtremumWindow(-5)


def test_not_valid_until_first_wrap():
    window = ExtremumWindow(WINDOW_SIZE)

    for i in range(WINDOW_SIZE - 1):
        assert window.observe(float(i)) == (False, False)
        assert not window.is_valid()

    # The filling sample itself is still compared against a partial window
    assert window.observe(1000.0) == (False, False)
    assert window.is_valid()
    assert len(window.values()) == WINDOW_SIZE


def test_single_maximum_at_peak_of_rise_then_fall():
    """Ramp up to index WINDOW_SIZE, then back down."""
    rise = np.arange(0, WINDOW_SIZE + 1, dtype=float)
    fall = np.arange(WINDOW_SIZE - 1, WINDOW_SIZE - 4, -1, dtype=float)
    sequence = np.concatenate([rise, fall])
    assert len(sequence) >= WINDOW_SIZE + 3

    window = ExtremumWindow(WINDOW_SIZE)
    maxima = []
    minima = []
    for index, value in enumerate(sequence):
        is_max, is_min = window.observe(float(value))
        if is_max:
            maxima.append(index)
        if is_min:
            minima.append(index)

    peak_index = int(np.argmax(sequence))
    assert maxima == [peak_index]
    assert all(index > peak_index for index in minima)


def test_comparison_is_strict():
    window = ExtremumWindow(5)
    for _ in range(5):
        window.push(5.0)

    assert window.classify(5.0) == (False, False)
    assert window.classify(5.1) == (True, False)
    assert window.classify(4.9) == (False, True)


def test_classify_does_not_store():
    window = ExtremumWindow(3)
    for value in (1.0, 2.0, 3.0):
        window.push(value)

    window.classify(10.0)
    assert window.values() == (1.0, 2.0, 3.0)


def test_values_are_oldest_first_after_wrap():
    window = ExtremumWindow(3)
    for value in (1.0, 2.0, 3.0, 4.0):
        window.push(value)

    assert window.values() == (2.0, 3.0, 4.0)
    assert window.length() == 3


def test_clear_requires_refill():
    window = ExtremumWindow(3)
    for value in (1.0, 2.0, 3.0):
        window.push(value)
    assert window.is_valid()

    window.clear()
    assert not window.is_valid()
    assert window.values() == ()
    assert window.classify(100.0) == (False, False)
