import numpy as np


class RecursiveSmoother:
    """Moving average of normalized samples with feedback of its own output.

    ``y[t] = (sum of the K stored normalized samples + y[t-1]) / (K + 1)``
    """

    def __init__(self, width):
        self.width = width
        self.values = np.zeros(width)

    def smooth(self, normalized, position, previous):
        """Store ``normalized`` and return the new filter output.

        The sample goes to slot ``position mod K`` where ``position`` is the
        index in the main history, and the whole store is summed. When the
        history length is not a multiple of K the slot sequence jumps on
        wrap-around, so a few outputs mix in slightly older samples.
        """
        self.values[position % self.width] = normalized
        return (np.sum(self.values) + previous) / (self.width + 1.0)
