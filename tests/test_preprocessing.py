import numpy as np
import pytest

from signal_processing.preprocessing import Normalizer
from signal_processing.ring_buffer import RingHistory


def history_with(values, length=20):
    history = RingHistory(length, 33.0)
    for value in values[:-1]:
        history.push(value, 33.0)
        history.advance()
    history.push(values[-1], 33.0)
    return history


def test_z_score_over_interval():
    values = [3.0, 9.0, 1.0, 4.0, 7.0, 2.0]
    history = history_with(values)
    window = np.array(values[-4:])

    expected = (window[-1] - window.mean()) / np.std(window, ddof=1)
    assert Normalizer(4).normalize(history) == pytest.approx(expected)


def test_interval_wraps_around_ring():
    values = [float(v) for v in range(1, 13)]
    history = history_with(values, length=8)
    window = np.array(values[-5:])

    expected = (window[-1] - window.mean()) / np.std(window, ddof=1)
    assert Normalizer(5).normalize(history) == pytest.approx(expected)


def test_flat_window_uses_std_floor():
    history = history_with([5.0, 5.0, 5.0, 5.0, 5.004])
    # Deviation below the threshold is replaced by 1.0
    assert Normalizer(4).normalize(history) == pytest.approx(0.004 * 0.75)


def test_single_sample_interval():
    history = history_with([2.0, 8.0])
    assert Normalizer(1).normalize(history) == 0.0


def test_interval_change_takes_effect():
    values = [0.0, 0.0, 10.0, 0.0, 0.0, 10.0]
    history = history_with(values)
    normalizer = Normalizer(3)
    narrow = normalizer.normalize(history)
    normalizer.interval = 6
    assert normalizer.normalize(history) != narrow
