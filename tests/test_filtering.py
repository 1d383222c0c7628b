import pytest

from signal_processing.filtering import RecursiveSmoother


def test_output_includes_previous_value():
    smoother = RecursiveSmoother(3)
    assert smoother.smooth(1.0, 0, 0.0) == pytest.approx(0.25)
    assert smoother.smooth(1.0, 1, 0.25) == pytest.approx(0.5625)
    assert smoother.smooth(1.0, 2, 0.5625) == pytest.approx(0.890625)


def test_steady_input_converges():
    smoother = RecursiveSmoother(4)
    output = 0.0
    for position in range(100):
        output = smoother.smooth(2.0, position, output)
    # Fixed point of y = (4 * 2 + y) / 5
    assert output == pytest.approx(2.0)


def test_slot_follows_history_position():
    smoother = RecursiveSmoother(3)
    for position, value in enumerate([1.0, 2.0, 3.0]):
        smoother.smooth(value, position, 0.0)
    smoother.smooth(10.0, 7, 0.0)
    assert list(smoother.values) == [1.0, 10.0, 3.0]
