"""CLI entry point for the magic hour countdown.

    uv run sunsethiker --lat 35.6762 --lon 139.6503 --lang ja
    uv run sunsethiker --address "Shibuya, Tokyo" --place --watch
"""

import argparse
import asyncio
import logging
import os
import sys
import time
from datetime import date, datetime

from dotenv import load_dotenv
from pytz import FixedOffset

load_dotenv()

from sunsethiker.i18n import t  # noqa: E402
from sunsethiker.location import (  # noqa: E402
    GeocodingError,
    InvalidCoordinateError,
    geocode_address,
    reverse_geocode,
    timezone_name_at,
    utc_offset_hours,
    validate_coordinate,
)
from sunsethiker.models import GeoCoordinate, MagicHourSnapshot, PlaceName  # noqa: E402
from sunsethiker.session import MagicHourSession  # noqa: E402
from sunsethiker.solar import DEFAULT_UTC_OFFSET_HOURS  # noqa: E402
from sunsethiker.timeofday import classify_time_period, time_period_label  # noqa: E402

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sunsethiker",
        description="Time left until sunset and until dark (civil twilight end).",
    )
    parser.add_argument("--lat", type=float, help="Latitude (decimal degrees)")
    parser.add_argument("--lon", type=float, help="Longitude (decimal degrees)")
    parser.add_argument("--address", help="Geocode this address instead of --lat/--lon")
    parser.add_argument(
        "--date", type=date.fromisoformat, help="Local date YYYY-MM-DD (noon is used as now)"
    )
    parser.add_argument("--now", type=datetime.fromisoformat, help="ISO 8601 instant")
    parser.add_argument("--utc-offset", type=float, help="Local UTC offset in hours")
    parser.add_argument("--lang", help="Language code (ja or en)")
    parser.add_argument("--place", action="store_true", help="Reverse-geocode a place name")
    parser.add_argument(
        "--check", action="store_true", help="Compare with the skyfield reference"
    )
    parser.add_argument("--watch", action="store_true", help="Refresh every --interval")
    parser.add_argument("--interval", type=float, default=60.0, help="Seconds per tick")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def resolve_offset(
    args: argparse.Namespace, coordinate: GeoCoordinate, on_date: date
) -> float:
    """--utc-offset, then SUNSETHIKER_UTC_OFFSET, then the coordinate's timezone, then JST.

    Raises:
        ValueError: SUNSETHIKER_UTC_OFFSET is set but not a number of hours.
    """
    if args.utc_offset is not None:
        return args.utc_offset
    env_offset = os.environ.get("SUNSETHIKER_UTC_OFFSET")
    if env_offset:
        try:
            return float(env_offset)
        except ValueError as e:
            raise ValueError(f"SUNSETHIKER_UTC_OFFSET={env_offset!r}") from e
    try:
        return utc_offset_hours(timezone_name_at(coordinate), on_date)
    except GeocodingError as e:
        logger.warning("%s; falling back to UTC%+g", e, DEFAULT_UTC_OFFSET_HOURS)
        return DEFAULT_UTC_OFFSET_HOURS


def _resolve_coordinate(args: argparse.Namespace) -> GeoCoordinate:
    if args.address:
        return geocode_address(args.address).coordinate
    if args.lat is None or args.lon is None:
        raise InvalidCoordinateError(
            "either --address or both --lat and --lon are required"
        )
    return validate_coordinate(args.lat, args.lon)


def format_snapshot(
    snapshot: MagicHourSnapshot,
    coordinate: GeoCoordinate,
    lang: str,
    place: PlaceName | None = None,
) -> str:
    solar = snapshot.solar_times
    period = classify_time_period(snapshot.now)
    lines = [
        f"{coordinate.label}" + (f"  {place.label}" if place and place.label else ""),
        f"{t('label_sunset', lang)}: {solar.sunset:%H:%M}",
        f"{t('label_twilight_end', lang)}: {solar.twilight_end:%H:%M}",
        f"[{snapshot.icon_key}] {snapshot.countdown_text}",
        f"phase={snapshot.phase_token} "
        f"sunset_in={snapshot.minutes_until_sunset}m "
        f"dark_in={snapshot.minutes_until_dark}m "
        f"progress_to_sunset={snapshot.progress_to_sunset:.3f} "
        f"progress_to_dark={snapshot.progress_to_dark:.3f}",
        f"{time_period_label(period, lang)} ({snapshot.now:%H:%M:%S})",
    ]
    return "\n".join(lines)


def _check_against_reference(session: MagicHourSession, on_date: date) -> str:
    from sunsethiker.reference import precise_solar_times
    from sunsethiker.solar import compute_solar_times

    approx = compute_solar_times(session.coordinate, on_date, session.utc_offset_hours)
    precise = precise_solar_times(session.coordinate, on_date, session.utc_offset_hours)
    if precise is None:
        return "reference: no sunset/twilight end within the local day"
    d_sunset = (approx.sunset - precise.sunset).total_seconds() / 60
    d_dark = (approx.twilight_end - precise.twilight_end).total_seconds() / 60
    return (
        f"reference: sunset {precise.sunset:%H:%M:%S} ({d_sunset:+.1f} min), "
        f"twilight end {precise.twilight_end:%H:%M:%S} ({d_dark:+.1f} min)"
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = (
        "DEBUG" if args.verbose else os.environ.get("SUNSETHIKER_LOG_LEVEL", "WARNING")
    )
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    lang = args.lang or os.environ.get("SUNSETHIKER_LANG", "en")

    try:
        coordinate = _resolve_coordinate(args)
    except InvalidCoordinateError as e:
        print(t("error_coordinate", lang, error=e), file=sys.stderr)
        return 2
    except GeocodingError as e:
        print(t("error_address", lang, error=e), file=sys.stderr)
        return 1

    # Provisional date for the offset lookup; the local date is fixed below
    on_date = args.date or (args.now.date() if args.now else date.today())
    try:
        offset = resolve_offset(args, coordinate, on_date)
    except ValueError as e:
        print(t("error_offset", lang, error=e), file=sys.stderr)
        return 2
    tz = FixedOffset(round(offset * 60))

    place = asyncio.run(reverse_geocode(coordinate, lang=lang)) if args.place else None
    session = MagicHourSession(
        coordinate, utc_offset_hours=offset, lang=lang, place=place
    )

    def current() -> datetime:
        if args.now is not None:
            return args.now if args.now.tzinfo else tz.localize(args.now)
        if args.date is not None:
            noon = datetime(args.date.year, args.date.month, args.date.day, 12)
            return tz.localize(noon)
        return datetime.now(tz)

    now = current()
    on_date = session.local_date(now)
    print(format_snapshot(session.snapshot(now), coordinate, lang, place))
    if args.check:
        print(_check_against_reference(session, on_date))

    if not args.watch:
        return 0
    try:
        while True:
            time.sleep(args.interval)
            print()
            snapshot = session.snapshot(datetime.now(tz))
            print(format_snapshot(snapshot, coordinate, lang, place))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
