"""Per-tick driver: recompute SolarTimes on date change, derive a snapshot every tick."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from pytz import FixedOffset

from sunsethiker.magic_hour import compute_snapshot
from sunsethiker.models import GeoCoordinate, MagicHourSnapshot, PlaceName, SolarTimes
from sunsethiker.solar import DEFAULT_UTC_OFFSET_HOURS, compute_solar_times

logger = logging.getLogger(__name__)


@dataclass
class MagicHourSession:
    """Holds one coordinate fix and the SolarTimes for the observer's current date.

    A new location fix means a new session; the coordinate is never mutated.
    """

    coordinate: GeoCoordinate
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS
    lang: str = "en"
    place: PlaceName | None = None
    _cached: tuple[date, SolarTimes] | None = field(
        default=None, init=False, repr=False
    )

    def local_date(self, now: datetime) -> date:
        if now.tzinfo is None:
            return now.date()
        tz = FixedOffset(round(self.utc_offset_hours * 60))
        return now.astimezone(tz).date()

    def solar_times_for(self, now: datetime) -> SolarTimes:
        """SolarTimes for the local date of `now`; recomputed only when that date changes."""
        today = self.local_date(now)
        if self._cached is None or self._cached[0] != today:
            logger.debug(
                "computing solar times for %s on %s", self.coordinate.label, today
            )
            solar_times = compute_solar_times(
                self.coordinate, today, self.utc_offset_hours
            )
            self._cached = (today, solar_times)
        return self._cached[1]

    def snapshot(self, now: datetime) -> MagicHourSnapshot:
        return compute_snapshot(self.solar_times_for(now), now, self.lang)
