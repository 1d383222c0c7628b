import numpy as np
import pytest

from signal_processing.hr_estimation import NO_ESTIMATE, SNR_GATE, SpectralEstimator


def cosine(length, bin_index):
    n = np.arange(length)
    return np.cos(2 * np.pi * bin_index * n / length)


@pytest.mark.parametrize('length', [200, 201])
def test_power_spectrum_matches_fft(length):
    estimator = SpectralEstimator(length, 0.8, 3.0)
    buffer = np.random.default_rng(0).normal(size=length)
    power = estimator.power_spectrum(buffer)
    assert len(power) == length // 2 + 1
    assert np.allclose(power, np.abs(np.fft.rfft(buffer)) ** 2)


def test_band_edges():
    estimator = SpectralEstimator(200, 0.8, 3.0)
    assert estimator.band_edges(10000.0) == (8, 30)
    # Top edge is limited to the last spectral bin
    assert estimator.band_edges(60000.0) == (48, 100)


def test_peak_ties_keep_lowest_index():
    estimator = SpectralEstimator(100, 0.8, 3.0)
    estimator.power[:] = 0.0
    estimator.power[12] = 5.0
    estimator.power[15] = 5.0
    assert estimator.find_peak(8, 30) == 12


def test_peak_search_skips_band_margin():
    estimator = SpectralEstimator(100, 0.8, 3.0)
    estimator.power[:] = 0.0
    estimator.power[9] = 100.0
    estimator.power[14] = 1.0
    assert estimator.find_peak(8, 30) == 14


def test_peak_without_power_or_range():
    estimator = SpectralEstimator(100, 0.8, 3.0)
    assert estimator.find_peak(8, 30) == 0
    estimator.power[:] = 1.0
    assert estimator.find_peak(8, 11) == 0


def test_pure_tone_is_published():
    estimator = SpectralEstimator(200, 0.8, 3.0)
    frequency = estimator.estimate(cosine(200, 15), 10000.0)
    # Bin 15 of a 10 s window is 1.5 Hz
    assert frequency == pytest.approx(90.0)
    assert estimator.snr > SNR_GATE


def test_flat_spectrum_fails_gate():
    estimator = SpectralEstimator(200, 0.8, 3.0)
    impulse = np.zeros(200)
    impulse[0] = 1.0
    frequency = estimator.estimate(impulse, 10000.0)
    assert frequency == NO_ESTIMATE
    assert estimator.snr < SNR_GATE


def test_silence_keeps_previous_estimate():
    estimator = SpectralEstimator(200, 0.8, 3.0)
    estimator.estimate(cosine(200, 15), 10000.0)
    frequency = estimator.estimate(np.zeros(200), 10000.0)
    assert frequency == pytest.approx(90.0)
    assert estimator.snr == 0.0


def test_off_peak_centroid_reduces_snr():
    estimator = SpectralEstimator(200, 0.8, 3.0)
    background = 0.1 * cosine(200, 25)
    centred = estimator.estimate(cosine(200, 15) + background, 10000.0)
    centred_snr = estimator.snr

    # Two equal tones make the centroid sit half a bin off the peak
    estimator.estimate(cosine(200, 15) + cosine(200, 16) + background, 10000.0)
    assert estimator.snr < centred_snr
    assert estimator.frequency == pytest.approx(centred + 3.0)
