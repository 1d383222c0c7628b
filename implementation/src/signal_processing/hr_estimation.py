import logging

import numpy as np
from scipy.fft import rfft

# Bins excluded at each band edge when searching for the peak
PEAK_SEARCH_MARGIN = 2
# Bins on each side of the peak counted as signal
SIGNAL_NEIGHBORHOOD_RADIUS = 2
# Minimal SNR for a new estimate to be published
SNR_GATE = 2.0
# Signal power at or below this is treated as no signal
MIN_SIGNAL_POWER = 0.01

NO_ESTIMATE = -1.0


class SpectralEstimator:
    def __init__(self, length, band_low_hz, band_high_hz, initial_frequency=NO_ESTIMATE):
        """Initialize the estimator for a history of ``length`` samples."""
        self.logger = logging.getLogger('VitalPulse.SpectralEstimator')
        self.length = length
        self.band_low_hz = band_low_hz
        self.band_high_hz = band_high_hz

        self.power = np.zeros(length // 2 + 1)
        self.frequency = initial_frequency
        self.snr = 0.0

    def power_spectrum(self, buffer):
        """One-sided power spectrum of a real signal, ``N // 2 + 1`` bins."""
        coeffs = rfft(buffer)
        self.power[:] = coeffs.real ** 2 + coeffs.imag ** 2
        return self.power

    def band_edges(self, total_time_ms):
        """Spectral indices of the band limits for a window lasting ``total_time_ms``."""
        half = self.length // 2
        top = min(half, int(self.band_high_hz * total_time_ms / 1000.0))
        bottom = min(int(self.band_low_hz * total_time_ms / 1000.0), top)
        return max(bottom, 0), max(top, 0)

    def find_peak(self, bottom, top):
        """Index of the strongest bin inside the band, away from its edges.

        The first maximum wins on ties; 0 is returned when nothing in the
        search range carries power.
        """
        start = bottom + PEAK_SEARCH_MARGIN
        stop = top - PEAK_SEARCH_MARGIN + 1
        if stop <= start:
            return 0
        segment = self.power[start:stop]
        i_max = int(np.argmax(segment))
        if segment[i_max] <= 0.0:
            return 0
        return start + i_max

    def estimate(self, buffer, total_time_ms):
        """Update the published frequency from a newest-first signal buffer.

        Returns the published frequency in events per minute, which stays
        unchanged when the SNR of the new spectrum does not clear the gate.
        """
        self.power_spectrum(buffer)
        bottom, top = self.band_edges(total_time_ms)
        i_max = self.find_peak(bottom, top)

        indices = np.arange(bottom, top + 1)
        band = self.power[bottom:top + 1]
        in_signal = np.abs(indices - i_max) <= SIGNAL_NEIGHBORHOOD_RADIUS
        signal_power = float(np.sum(band[in_signal]))
        signal_moment = float(np.sum(indices[in_signal] * band[in_signal]))
        noise_power = float(np.sum(band[~in_signal]))

        self.snr = 0.0
        if signal_power > MIN_SIGNAL_POWER:
            with np.errstate(divide='ignore'):
                self.snr = float(10.0 * np.log10(np.float64(signal_power) / noise_power))
            bias = i_max - signal_moment / signal_power
            self.snr *= 1.0 / (1.0 + bias * bias)

        if self.snr > SNR_GATE:
            self.frequency = (signal_moment / signal_power) * 60000.0 / total_time_ms
            self.logger.debug("Estimate accepted: %.2f per minute, SNR %.2f", self.frequency, self.snr)

        return self.frequency
