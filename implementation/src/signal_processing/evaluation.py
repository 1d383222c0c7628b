import numpy as np


class SyntheticSignalGenerator:
    def __init__(self, rate=72.0, sample_interval_ms=33.3, amplitude=1.0, baseline=100.0, noise_level=0.0,
                 seed=None):
        """Sample streams with a known periodic component.

        ``rate`` is in events per minute; every sample is spaced by exactly
        ``sample_interval_ms``.
        """
        self.rate = rate
        self.sample_interval_ms = sample_interval_ms
        self.amplitude = amplitude
        self.baseline = baseline
        self.noise = noise_level
        self.rng = np.random.default_rng(seed)

    def times(self, n_samples):
        """Sample instants in seconds."""
        return np.arange(n_samples) * self.sample_interval_ms / 1000.0

    def generate(self, n_samples):
        t = self.times(n_samples)
        signal = self.baseline + self.amplitude * np.sin(2 * np.pi * (self.rate / 60.0) * t)
        if self.noise > 0:
            signal = signal + self.rng.normal(0, self.noise, size=signal.shape)
        return signal

    def generate_noise(self, n_samples, low=0.0, high=255.0):
        """Uniform noise without any periodic component."""
        return self.rng.uniform(low, high, size=n_samples)

    def stream(self, values):
        """(value, elapsed_ms) pairs as a region-intensity source yields them."""
        for value in values:
            yield float(value), self.sample_interval_ms
