"""High-precision cross-check of the solar calculator using skyfield + JPL DE421.

The ephemeris is loaded lazily from resources/ (skyfield downloads it on
first use if the directory is writable and the network is available).
"""

from datetime import date, datetime, timedelta
from pathlib import Path

from pytz import FixedOffset
from skyfield import almanac
from skyfield.api import Loader, wgs84

from sunsethiker.models import GeoCoordinate, SolarTimes
from sunsethiker.solar import DEFAULT_UTC_OFFSET_HOURS

_ROOT = Path(__file__).parent.parent.parent
EPHEMERIS_NAME = "de421.bsp"
SUNSET_HORIZON_DEGREES = -0.8333
CIVIL_TWILIGHT_HORIZON_DEGREES = -6.0

_eph = None


def default_loader() -> Loader:
    return Loader(str(_ROOT / "resources"))


def _ephemeris(loader: Loader | None):
    global _eph
    if loader is not None:
        return loader(EPHEMERIS_NAME)
    if _eph is None:
        _eph = default_loader()(EPHEMERIS_NAME)
    return _eph


def precise_solar_times(
    coordinate: GeoCoordinate,
    on_date: date,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
    loader: Loader | None = None,
) -> SolarTimes | None:
    """Sunset and civil twilight end found by skyfield's almanac search.

    Args:
        coordinate: Observer position.
        on_date: Local calendar date.
        utc_offset_hours: Fixed offset defining the local day window.
        loader: skyfield Loader; the project's resources/ directory when None.

    Returns:
        SolarTimes in the fixed offset, or None if the sun does not set or
        does not reach 6° below the horizon within the local day.
    """
    eph = _ephemeris(loader)
    ts = (loader or default_loader()).timescale()
    tz = FixedOffset(round(utc_offset_hours * 60))
    start = tz.localize(datetime(on_date.year, on_date.month, on_date.day))
    t0 = ts.from_datetime(start)
    t1 = ts.from_datetime(start + timedelta(days=1))

    observer = eph["earth"] + wgs84.latlon(
        latitude_degrees=coordinate.lat, longitude_degrees=coordinate.lng
    )

    events: list[datetime] = []
    for horizon in (SUNSET_HORIZON_DEGREES, CIVIL_TWILIGHT_HORIZON_DEGREES):
        times, did_set = almanac.find_settings(
            observer, eph["sun"], t0, t1, horizon_degrees=horizon
        )
        if len(times) == 0 or not did_set[0]:
            return None
        events.append(times[0].astimezone(tz))

    return SolarTimes(sunset=events[0], twilight_end=events[1])
