import logging
import math
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .filtering import RecursiveSmoother
from .hr_estimation import NO_ESTIMATE, SpectralEstimator
from .preprocessing import Normalizer
from .profiles import Profile, RateController, get_profile_settings
from .ring_buffer import RingHistory


@dataclass(frozen=True)
class FrequencyEstimate:
    frequency: float
    snr: float
    interval: int


class PulseProcessor:
    """Streaming rate estimator for one tracked subject.

    Samples are pushed with ``update`` once per frame, the rate is pulled with
    ``compute_frequency`` at whatever cadence the caller needs. Not thread safe:
    serialize access to one instance.
    """

    def __init__(self, profile=Profile.HEART_RATE, sample_interval_ms=33.0, window_ms=None,
                 interval_ms=None, smoother_ms=None, smoother_width=None, sanitize_time=True):
        """Initialize the processor.

        Args:
            profile: ``Profile`` member or its value, selects the default settings
            sample_interval_ms: nominal time between two samples
            window_ms: analysis window duration, overrides the profile
            interval_ms: initial normalization interval, overrides the profile
            smoother_ms: smoother length as a duration, overrides the profile
            smoother_width: smoother length in samples, wins over ``smoother_ms``
            sanitize_time: replace implausible elapsed times with the nominal interval

        Raises:
            ConfigurationError: if the resulting sample counts are not usable
        """
        self.logger = logging.getLogger('VitalPulse.PulseProcessor')
        self.profile, settings = get_profile_settings(profile)

        try:
            self.sample_interval_ms = float(sample_interval_ms)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Sample interval must be a number of ms, got {sample_interval_ms!r}") from None
        if not (math.isfinite(self.sample_interval_ms) and self.sample_interval_ms > 0):
            raise ConfigurationError(f"Sample interval must be positive, got {sample_interval_ms!r}")

        if window_ms is None:
            window_ms = settings.window_ms
        if interval_ms is None:
            interval_ms = settings.interval_ms
        if smoother_width is None:
            if smoother_ms is not None:
                smoother_width = self._to_samples(smoother_ms)
            elif settings.smoother_width is not None:
                smoother_width = settings.smoother_width
            else:
                smoother_width = self._to_samples(settings.smoother_ms)

        length = self._to_samples(window_ms)
        interval = self._to_samples(interval_ms)
        self._validate(length, interval, smoother_width, settings)

        self.history = RingHistory(length, self.sample_interval_ms, sanitize_time)
        self.normalizer = Normalizer(interval)
        self.smoother = RecursiveSmoother(int(smoother_width))
        self.estimator = SpectralEstimator(length, settings.band_low_hz, settings.band_high_hz, NO_ESTIMATE)
        self.rate_controller = RateController(length) if settings.adaptive_interval else None

        self.logger.info("%s processor: %d samples window, interval %d, smoother width %d, dT %.2f ms",
                         self.profile.value, length, interval, smoother_width, self.sample_interval_ms)

    def _to_samples(self, duration_ms):
        return int(duration_ms / self.sample_interval_ms)

    @staticmethod
    def _validate(length, interval, smoother_width, settings):
        if length < 1:
            raise ConfigurationError(f"Window must hold at least one sample, got {length}")
        if not 0 < interval <= length:
            raise ConfigurationError(f"Normalization interval must be within 1..{length} samples, got {interval}")
        if smoother_width < 1:
            raise ConfigurationError(f"Smoother width must be at least one sample, got {smoother_width}")
        if not 0.0 <= settings.band_low_hz < settings.band_high_hz:
            raise ConfigurationError(
                f"Invalid frequency band {settings.band_low_hz}..{settings.band_high_hz} Hz")

    def update(self, value, elapsed_ms):
        """Push one sample and the time elapsed since the previous one."""
        history = self.history
        history.push(value, elapsed_ms)
        normalized = self.normalizer.normalize(history)
        history.filtered[history.cursor] = self.smoother.smooth(
            normalized, history.cursor, history.previous_filtered())
        history.advance()

    def compute_frequency(self):
        """Re-estimate the rate from the filtered history.

        Returns the published rate per minute, ``-1.0`` until a first estimate
        passes the SNR gate.
        """
        history = self.history
        frequency = self.estimator.estimate(history.newest_first(), history.total_time())
        if self.rate_controller is not None:
            self.normalizer.interval = self.rate_controller.interval_for(frequency)
        return frequency

    @property
    def frequency(self):
        return self.estimator.frequency

    @property
    def snr(self):
        return self.estimator.snr

    @property
    def interval(self):
        return self.normalizer.interval

    def get_estimate(self):
        return FrequencyEstimate(self.frequency, self.snr, self.interval)

    def get_signal(self):
        """Filtered history, oldest sample first (read-only)."""
        signal = self.history.chronological()
        signal.flags.writeable = False
        return signal

    def get_snr(self):
        return self.estimator.snr

    def get_length(self):
        return self.history.length

    def get_cursor_position(self):
        return self.history.cursor

    def get_last_position(self):
        return self.history.last_position()

    def get_signal_sample_value(self):
        return float(self.history.filtered[self.history.last_position()])
