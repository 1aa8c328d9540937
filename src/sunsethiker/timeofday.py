"""Clock-hour time-of-day periods and their background gradients."""

from datetime import datetime

from sunsethiker.i18n import t
from sunsethiker.models import TimePeriod

TIME_PERIOD_GRADIENTS: dict[TimePeriod, tuple[str, ...]] = {
    # Deep purple to warm orange
    TimePeriod.DAWN: ("#331a4d", "#663366", "#cc664d", "#ff9966"),
    TimePeriod.MORNING: ("#66b3e6", "#80ccf2", "#99d9ff"),
    TimePeriod.DAY: ("#4d99f2", "#80bfff", "#b3d9ff"),
    # Orange to pink to purple
    TimePeriod.SUNSET: ("#ff8033", "#ff6666", "#e64d99", "#993380"),
    TimePeriod.DUSK: ("#4d3380", "#333366", "#1a264d"),
    TimePeriod.NIGHT: ("#0d1a33", "#050d26", "#00000d"),
}

# (start hour inclusive, end hour exclusive, period); anything else is night
_PERIOD_HOURS: tuple[tuple[int, int, TimePeriod], ...] = (
    (4, 6, TimePeriod.DAWN),
    (6, 10, TimePeriod.MORNING),
    (10, 16, TimePeriod.DAY),
    (16, 18, TimePeriod.SUNSET),
    (18, 20, TimePeriod.DUSK),
)


def classify_time_period(now: datetime) -> TimePeriod:
    """Map the local wall-clock hour of `now` to a TimePeriod."""
    for start, end, period in _PERIOD_HOURS:
        if start <= now.hour < end:
            return period
    return TimePeriod.NIGHT


def time_period_label(period: TimePeriod, lang: str = "en") -> str:
    return t(f"period_{period.value}", lang)
