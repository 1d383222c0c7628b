import numpy as np


class RingHistory:
    """Fixed-capacity circular history of raw samples, timings and filter output.

    All rings share one cursor which points at the slot the next sample is
    written to.
    """

    def __init__(self, length, sample_interval_ms, sanitize_time=True):
        self.length = length
        self.sample_interval_ms = sample_interval_ms
        self.sanitize_time = sanitize_time

        self.raw = np.zeros(length)
        self.filtered = np.zeros(length)
        # Timings start at the nominal interval so the window duration is sane
        # before the history has filled up
        self.time = np.full(length, float(sample_interval_ms))
        self.cursor = 0

    def index(self, offset):
        """Ring index ``offset`` samples away from the cursor."""
        return (self.cursor + offset) % self.length

    def push(self, value, elapsed_ms):
        """Store a sample at the cursor without advancing it."""
        self.raw[self.cursor] = value
        if self.sanitize_time and not abs(elapsed_ms - self.sample_interval_ms) < self.sample_interval_ms:
            elapsed_ms = self.sample_interval_ms
        self.time[self.cursor] = elapsed_ms

    def advance(self):
        self.cursor = (self.cursor + 1) % self.length

    def trailing_raw(self, count):
        """The last ``count`` raw samples ending at the cursor, newest first."""
        return self.raw[(self.cursor - np.arange(count)) % self.length]

    def previous_filtered(self):
        return self.filtered[self.index(-1)]

    def newest_first(self, values=None):
        """Copy of a length-N ring ordered so that index 0 is the newest sample."""
        if values is None:
            values = self.filtered
        return values[(self.cursor - 1 - np.arange(self.length)) % self.length]

    def chronological(self, values=None):
        """Copy of a length-N ring ordered oldest to newest."""
        if values is None:
            values = self.filtered
        return np.roll(values, -self.cursor)

    def total_time(self):
        """Duration in milliseconds spanned by the whole window."""
        return float(np.sum(self.time))

    def last_position(self):
        return self.index(-1)
