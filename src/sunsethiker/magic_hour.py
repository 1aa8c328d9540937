"""Magic hour model — phase, countdowns, and progress derived from SolarTimes and "now"."""

import math
from datetime import datetime

from sunsethiker.i18n import t
from sunsethiker.models import MagicHourPhase, MagicHourSnapshot, SolarTimes

SUNSET_LOOKAHEAD_MINUTES = 120.0  # progress_to_sunset starts filling 2 h out

PHASE_ICONS: dict[MagicHourPhase, str] = {
    MagicHourPhase.BEFORE_SUNSET: "sun.max.fill",
    MagicHourPhase.MAGIC_HOUR: "sunset.fill",
    MagicHourPhase.AFTER_DARK: "moon.stars.fill",
}

PHASE_GRADIENTS: dict[MagicHourPhase, tuple[str, ...]] = {
    # Golden hour approaching sunset
    MagicHourPhase.BEFORE_SUNSET: ("#ffcc4d", "#ff9933", "#ff664d"),
    # Sunset to end of civil twilight
    MagicHourPhase.MAGIC_HOUR: ("#ff8033", "#e64d80", "#803399"),
    MagicHourPhase.AFTER_DARK: ("#331a4d", "#1a0d33"),
}


def _aligned(now: datetime, solar_times: SolarTimes) -> datetime:
    """Naive datetimes are read as observer-local wall time."""
    if now.tzinfo is None:
        return now.replace(tzinfo=solar_times.sunset.tzinfo)
    return now


def classify_phase(solar_times: SolarTimes, now: datetime) -> MagicHourPhase:
    now = _aligned(now, solar_times)
    if now < solar_times.sunset:
        return MagicHourPhase.BEFORE_SUNSET
    if now < solar_times.twilight_end:
        return MagicHourPhase.MAGIC_HOUR
    return MagicHourPhase.AFTER_DARK


def minutes_until(target: datetime, now: datetime) -> int:
    """Whole minutes from now to target, floored, never negative."""
    seconds = (target - now).total_seconds()
    return max(0, math.floor(seconds / 60))


def progress_to_sunset(minutes_until_sunset: int) -> float:
    remaining = minutes_until_sunset / SUNSET_LOOKAHEAD_MINUTES
    return max(0.0, min(1.0, 1.0 - remaining))


def progress_to_dark(solar_times: SolarTimes, now: datetime) -> float:
    """Elapsed fraction of [sunset, twilight_end]; 0.0 outside that window.

    The window is closed so the value reaches 1.0 at the twilight-end instant.
    classify_phase already reports AFTER_DARK there; that single instant is
    the only point where the phase and this value disagree.
    """
    now = _aligned(now, solar_times)
    if not solar_times.sunset <= now <= solar_times.twilight_end:
        return 0.0
    duration = (solar_times.twilight_end - solar_times.sunset).total_seconds()
    if duration <= 0:
        return 1.0
    elapsed = (now - solar_times.sunset).total_seconds()
    return max(0.0, min(1.0, elapsed / duration))


def _hours_minutes(minutes: int, short_key: str, long_key: str, lang: str) -> str:
    if minutes < 60:
        return t(short_key, lang, minutes=minutes)
    hours, mins = divmod(minutes, 60)
    return t(long_key, lang, hours=hours, minutes=mins)


def format_countdown(
    phase: MagicHourPhase,
    minutes_until_sunset: int,
    minutes_until_dark: int,
    lang: str = "en",
) -> str:
    """Human-readable countdown for the phase: minutes only under an hour."""
    if phase is MagicHourPhase.BEFORE_SUNSET:
        return _hours_minutes(
            minutes_until_sunset,
            "countdown_sunset_minutes",
            "countdown_sunset_hours",
            lang,
        )
    if phase is MagicHourPhase.MAGIC_HOUR:
        return _hours_minutes(
            minutes_until_dark, "countdown_dark_minutes", "countdown_dark_hours", lang
        )
    return t("countdown_night", lang)


def compute_snapshot(
    solar_times: SolarTimes, now: datetime, lang: str = "en"
) -> MagicHourSnapshot:
    """Derive the display snapshot for one tick.

    Args:
        solar_times: Calculator output for the observer's current date.
        now: Current instant. Naive values are taken as observer-local time.
        lang: Language code ('ja' or 'en') for countdown_text.

    Returns:
        MagicHourSnapshot. Pure function of its inputs.
    """
    now = _aligned(now, solar_times)
    phase = classify_phase(solar_times, now)
    until_sunset = minutes_until(solar_times.sunset, now)
    until_dark = minutes_until(solar_times.twilight_end, now)

    return MagicHourSnapshot(
        solar_times=solar_times,
        now=now,
        phase=phase,
        minutes_until_sunset=until_sunset,
        minutes_until_dark=until_dark,
        progress_to_sunset=progress_to_sunset(until_sunset),
        progress_to_dark=progress_to_dark(solar_times, now),
        countdown_text=format_countdown(phase, until_sunset, until_dark, lang),
        icon_key=PHASE_ICONS[phase],
        gradient_stops=PHASE_GRADIENTS[phase],
    )
