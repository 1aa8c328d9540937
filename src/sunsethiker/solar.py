"""Solar event calculator — sunset and civil twilight end from the NOAA sunrise equation.

Low-precision almanac algorithm (Julian day → mean anomaly → true longitude →
right ascension/declination → hour angle). Accurate to a few minutes outside
the polar regions, which is all a countdown display needs. See reference.py
for a skyfield-based cross-check.
"""

import logging
import math
from datetime import date, datetime, timedelta

from pytz import FixedOffset

from sunsethiker.models import GeoCoordinate, SolarTimes

logger = logging.getLogger(__name__)

SUNSET_ZENITH = 90.833  # Refraction + solar radius
CIVIL_TWILIGHT_ZENITH = 96.0  # Sun 6° below horizon
DEFAULT_UTC_OFFSET_HOURS = 9.0  # JST

_J2000 = 2451545
_MINUTES_PER_DAY = 1440.0


def julian_day_number(on_date: date) -> int:
    """Gregorian calendar date → Julian Day Number (integer arithmetic)."""
    a = (14 - on_date.month) // 12
    y = on_date.year + 4800 - a
    m = on_date.month + 12 * a - 3
    return (
        on_date.day
        + (153 * m + 2) // 5
        + 365 * y
        + y // 4
        - y // 100
        + y // 400
        - 32045
    )


def sun_event_minutes(
    julian_day: int,
    latitude: float,
    longitude: float,
    zenith: float,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> float:
    """Local minutes past midnight at which the sun sinks to `zenith` degrees.

    Angles are reduced with floor modulo into [0, 360) and the event is
    folded into the local day, so unclamped results lie in [0, 1440).

    Args:
        julian_day: Julian Day Number of the local date.
        latitude: Observer latitude (degrees).
        longitude: Observer longitude (degrees, east positive).
        zenith: Zenith angle of the event (90.833 sunset, 96.0 civil twilight).
        utc_offset_hours: Offset of the local civil time from UTC.

    Returns:
        Minutes of the local day. 0.0 if the sun never gets that high
        (polar night), 1440.0 if it never gets that low (midnight sun).
    """
    lat_rad = math.radians(latitude)

    n = julian_day - _J2000
    mean_solar_time = n - longitude / 360.0

    mean_anomaly = (0.9856 * mean_solar_time - 3.289) % 360.0
    m_rad = math.radians(mean_anomaly)

    true_longitude = (
        mean_anomaly + 1.916 * math.sin(m_rad) + 0.020 * math.sin(2 * m_rad) + 282.634
    ) % 360.0
    l_rad = math.radians(true_longitude)

    right_ascension = math.degrees(math.atan(0.91764 * math.tan(l_rad))) % 360.0
    # Same 90° quadrant as the true longitude
    right_ascension += (
        math.floor(true_longitude / 90.0) * 90.0
        - math.floor(right_ascension / 90.0) * 90.0
    )
    right_ascension /= 15.0

    sin_dec = 0.39782 * math.sin(l_rad)
    cos_dec = math.cos(math.asin(sin_dec))

    cos_h = (math.cos(math.radians(zenith)) - sin_dec * math.sin(lat_rad)) / (
        cos_dec * math.cos(lat_rad)
    )
    if cos_h > 1:
        logger.debug(
            "sun never reaches zenith %.3f at lat=%.4f (jd=%d)",
            zenith,
            latitude,
            julian_day,
        )
        return 0.0
    if cos_h < -1:
        logger.debug(
            "sun never passes zenith %.3f at lat=%.4f (jd=%d)",
            zenith,
            latitude,
            julian_day,
        )
        return _MINUTES_PER_DAY

    hour_angle = math.degrees(math.acos(cos_h)) / 15.0
    local_mean_time = hour_angle + right_ascension - 0.06571 * mean_solar_time - 6.622
    universal_time = (local_mean_time - longitude / 15.0) % 24.0
    return ((universal_time + utc_offset_hours) % 24.0) * 60.0


def _local_datetime(on_date: date, minutes: float, utc_offset_hours: float) -> datetime:
    tz = FixedOffset(round(utc_offset_hours * 60))
    midnight = tz.localize(datetime(on_date.year, on_date.month, on_date.day))
    # Whole minutes; 1440 rolls into the next day
    return midnight + timedelta(minutes=int(minutes))


def calculate(
    latitude: float,
    longitude: float,
    on_date: date,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> SolarTimes:
    """Compute sunset and civil twilight end for a location and local date.

    Pure and total: polar days/nights produce the clamped midnight values
    described in sun_event_minutes instead of raising.

    Args:
        latitude: Observer latitude (degrees, [-90, 90]).
        longitude: Observer longitude (degrees, [-180, 180]).
        on_date: Local calendar date. A datetime is reduced to its date.
        utc_offset_hours: Fixed offset of the observer's civil time.

    Returns:
        SolarTimes with tz-aware datetimes in the given fixed offset.
    """
    if isinstance(on_date, datetime):
        on_date = on_date.date()

    jd = julian_day_number(on_date)
    sunset_minutes = sun_event_minutes(
        jd, latitude, longitude, SUNSET_ZENITH, utc_offset_hours
    )
    twilight_minutes = sun_event_minutes(
        jd, latitude, longitude, CIVIL_TWILIGHT_ZENITH, utc_offset_hours
    )

    clamped = (0.0, _MINUTES_PER_DAY)
    if (
        sunset_minutes not in clamped
        and twilight_minutes not in clamped
        and twilight_minutes < sunset_minutes
    ):
        # Twilight ends after local midnight
        twilight_minutes += _MINUTES_PER_DAY

    try:
        return SolarTimes(
            sunset=_local_datetime(on_date, sunset_minutes, utc_offset_hours),
            twilight_end=_local_datetime(on_date, twilight_minutes, utc_offset_hours),
        )
    except OverflowError:
        logger.debug("solar times out of datetime range for %s", on_date)
        midnight = _local_datetime(on_date, 0.0, utc_offset_hours)
        return SolarTimes(sunset=midnight, twilight_end=midnight)


def compute_solar_times(
    coordinate: GeoCoordinate,
    on_date: date,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
) -> SolarTimes:
    """Coordinate-based entry point. See calculate()."""
    return calculate(coordinate.lat, coordinate.lng, on_date, utc_offset_hours)
