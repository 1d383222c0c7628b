import numpy as np


class Normalizer:
    """Local z-score of the newest raw sample over a short trailing interval."""

    def __init__(self, interval, std_threshold=0.01, std_floor=1.0):
        self.interval = interval
        self.std_threshold = std_threshold
        self.std_floor = std_floor

    def normalize(self, history):
        """Standardize the sample at the history cursor.

        Mean and standard deviation are taken over the last ``interval`` raw
        samples, cursor included, in two plain passes. A nearly flat window
        gets the floor value instead of its deviation.
        """
        window = history.trailing_raw(self.interval)
        mean = np.sum(window) / self.interval

        if self.interval > 1:
            std = np.sqrt(np.sum((window - mean) ** 2) / (self.interval - 1))
        else:
            std = 0.0
        if std < self.std_threshold:
            std = self.std_floor

        return float((window[0] - mean) / std)
