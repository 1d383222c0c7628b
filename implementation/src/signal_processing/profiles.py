from dataclasses import dataclass
from enum import Enum

from .exceptions import ConfigurationError


class Profile(Enum):
    HEART_RATE = 'heart_rate'
    BREATH_RATE = 'breath_rate'


@dataclass(frozen=True)
class ProfileSettings:
    """Analysis parameters for one kind of vital sign.

    Durations are in milliseconds. The smoother is given either as a duration
    (``smoother_ms``) or as a fixed number of samples (``smoother_width``).
    """
    window_ms: float
    interval_ms: float
    band_low_hz: float
    band_high_hz: float
    smoother_ms: float = None
    smoother_width: int = None
    adaptive_interval: bool = False


PROFILES = {
    Profile.HEART_RATE: ProfileSettings(
        window_ms=7000.0,
        interval_ms=400.0,
        smoother_ms=300.0,
        band_low_hz=0.8,   # 48 bpm
        band_high_hz=3.0,  # 180 bpm
        adaptive_interval=True,
    ),
    Profile.BREATH_RATE: ProfileSettings(
        window_ms=20000.0,
        interval_ms=5000.0,
        smoother_width=3,
        band_low_hz=0.1,   # 6 breaths per minute
        band_high_hz=0.7,  # 42 breaths per minute
    ),
}


def get_profile_settings(profile):
    """Look up the settings for a profile given as enum member or its value."""
    try:
        profile = Profile(profile)
    except ValueError:
        raise ConfigurationError(f"Unknown profile: {profile!r}") from None
    return profile, PROFILES[profile]


class RateController:
    """Maps the published rate onto a normalization interval (in samples).

    Faster rhythms get a shorter interval so the local z-score follows the
    signal more closely.
    """

    # (rate above which the step applies in per-minute units, interval in samples)
    STAIRCASE = ((150.0, 11), (110.0, 13), (70.0, 15))
    DEFAULT_INTERVAL = 17

    def __init__(self, max_interval):
        self.max_interval = max_interval

    def interval_for(self, frequency):
        for threshold, interval in self.STAIRCASE:
            if frequency > threshold:
                break
        else:
            interval = self.DEFAULT_INTERVAL
        # Never exceed the history length
        return min(interval, self.max_interval)
