"""Enumerations used by item type records.

Integer enums carry their wire value, except DayOfWeek which is 0-based in
memory and 1-based on the wire (see codec.format_day_of_week).
"""

from enum import Enum, IntEnum


class DayOfWeek(IntEnum):
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


class Gender(str, Enum):
    """Gender as recorded in basic demographics (wire values m/f)."""
    UNKNOWN = "unknown"
    MALE = "m"
    FEMALE = "f"


class WakeState(IntEnum):
    """How the person felt on waking."""
    UNKNOWN = 0
    WIDE_AWAKE = 1
    TIRED = 2
    SLEEPY = 3


class Mood(IntEnum):
    NONE = 0
    DEPRESSED = 1
    SAD = 2
    NEUTRAL = 3
    HAPPY = 4
    ELATED = 5


class RelativeRating(IntEnum):
    NONE = 0
    VERY_LOW = 1
    LOW = 2
    MODERATE = 3
    HIGH = 4
    VERY_HIGH = 5


class Wellbeing(IntEnum):
    NONE = 0
    SICK = 1
    IMPAIRED = 2
    ABLE = 3
    HEALTHY = 4
    VIGOROUS = 5


class Normalcy(IntEnum):
    """Where a measurement sits relative to the normal range."""
    UNKNOWN = 0
    WELL_BELOW_NORMAL = 1
    BELOW_NORMAL = 2
    NORMAL = 3
    ABOVE_NORMAL = 4
    WELL_ABOVE_NORMAL = 5
