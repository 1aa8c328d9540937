from datetime import datetime, timedelta

import pytest
from pytz import FixedOffset

from sunsethiker.magic_hour import (
    PHASE_GRADIENTS,
    PHASE_ICONS,
    classify_phase,
    compute_snapshot,
    format_countdown,
    minutes_until,
    progress_to_dark,
    progress_to_sunset,
)
from sunsethiker.models import MagicHourPhase, SolarTimes

JST = FixedOffset(9 * 60)
SUNSET = JST.localize(datetime(2025, 6, 21, 18, 58))
TWILIGHT_END = JST.localize(datetime(2025, 6, 21, 19, 28))
TIMES = SolarTimes(sunset=SUNSET, twilight_end=TWILIGHT_END)


def _minute_ticks(start: datetime, end: datetime, step_seconds: int = 30):
    t = start
    while t <= end:
        yield t
        t += timedelta(seconds=step_seconds)


@pytest.mark.parametrize(
    "now, expected",
    [
        (SUNSET - timedelta(hours=3), MagicHourPhase.BEFORE_SUNSET),
        (SUNSET - timedelta(seconds=1), MagicHourPhase.BEFORE_SUNSET),
        (SUNSET, MagicHourPhase.MAGIC_HOUR),
        (TWILIGHT_END - timedelta(seconds=1), MagicHourPhase.MAGIC_HOUR),
        (TWILIGHT_END, MagicHourPhase.AFTER_DARK),
        (TWILIGHT_END + timedelta(hours=4), MagicHourPhase.AFTER_DARK),
    ],
)
def test_classify_phase_boundaries(now, expected):
    assert classify_phase(TIMES, now) is expected


def test_phase_sequence_is_ordered_and_changes_twice():
    phases = [
        classify_phase(TIMES, t)
        for t in _minute_ticks(
            SUNSET - timedelta(hours=2), TWILIGHT_END + timedelta(hours=1)
        )
    ]
    changes = [b for a, b in zip(phases, phases[1:]) if a is not b]
    assert changes == [MagicHourPhase.MAGIC_HOUR, MagicHourPhase.AFTER_DARK]


def test_minutes_until_floors_and_never_goes_negative():
    assert minutes_until(SUNSET, SUNSET - timedelta(minutes=5, seconds=59)) == 5
    assert minutes_until(SUNSET, SUNSET) == 0
    assert minutes_until(SUNSET, SUNSET + timedelta(minutes=10)) == 0


def test_countdowns_are_monotonic_until_zero():
    previous = None
    start = SUNSET - timedelta(hours=3)
    for t in _minute_ticks(start, TWILIGHT_END + timedelta(minutes=30)):
        snap = compute_snapshot(TIMES, t)
        current = (snap.minutes_until_sunset, snap.minutes_until_dark)
        assert min(current) >= 0
        if previous is not None:
            assert current[0] <= previous[0]
            assert current[1] <= previous[1]
        previous = current
    assert previous == (0, 0)


def test_progress_to_sunset_window():
    assert progress_to_sunset(200) == 0.0
    assert progress_to_sunset(120) == 0.0
    assert progress_to_sunset(60) == pytest.approx(0.5)
    assert progress_to_sunset(0) == 1.0


def test_progress_to_sunset_is_non_decreasing_and_full_at_sunset():
    values = [
        compute_snapshot(TIMES, t).progress_to_sunset
        for t in _minute_ticks(SUNSET - timedelta(hours=3), SUNSET)
    ]
    assert values[0] == 0.0
    assert all(a <= b for a, b in zip(values, values[1:]))
    assert values[-1] == 1.0


def test_progress_to_dark_spans_magic_hour():
    assert progress_to_dark(TIMES, SUNSET) == 0.0
    assert progress_to_dark(TIMES, SUNSET + timedelta(minutes=15)) == pytest.approx(0.5)
    assert progress_to_dark(TIMES, TWILIGHT_END) == 1.0
    values = [progress_to_dark(TIMES, t) for t in _minute_ticks(SUNSET, TWILIGHT_END)]
    assert all(a < b for a, b in zip(values, values[1:]))


def test_progress_to_dark_is_zero_outside_window():
    assert progress_to_dark(TIMES, SUNSET - timedelta(minutes=1)) == 0.0
    assert progress_to_dark(TIMES, TWILIGHT_END + timedelta(minutes=1)) == 0.0


def test_progress_to_dark_with_collapsed_window():
    midnight = JST.localize(datetime(2025, 6, 22))
    polar = SolarTimes(sunset=midnight, twilight_end=midnight)
    assert progress_to_dark(polar, midnight) == 1.0
    assert progress_to_dark(polar, midnight - timedelta(hours=1)) == 0.0


@pytest.mark.parametrize(
    "phase, sunset_min, dark_min, lang, expected",
    [
        (MagicHourPhase.BEFORE_SUNSET, 45, 75, "en", "45 min until sunset"),
        (MagicHourPhase.BEFORE_SUNSET, 60, 90, "en", "1 h 0 min until sunset"),
        (MagicHourPhase.BEFORE_SUNSET, 135, 165, "ja", "日没まで 2時間15分"),
        (MagicHourPhase.BEFORE_SUNSET, 59, 89, "ja", "日没まで 59分"),
        (MagicHourPhase.MAGIC_HOUR, 0, 12, "ja", "マジックアワー 12分"),
        (MagicHourPhase.MAGIC_HOUR, 0, 61, "en", "Magic hour: 1 h 1 min left"),
        (MagicHourPhase.AFTER_DARK, 0, 0, "ja", "夜"),
        (MagicHourPhase.AFTER_DARK, 0, 0, "en", "Night"),
    ],
)
def test_format_countdown(phase, sunset_min, dark_min, lang, expected):
    assert format_countdown(phase, sunset_min, dark_min, lang) == expected


def test_unknown_language_falls_back_to_english():
    assert format_countdown(MagicHourPhase.AFTER_DARK, 0, 0, "xx") == "Night"


def test_snapshot_before_sunset():
    snap = compute_snapshot(TIMES, SUNSET - timedelta(minutes=90), lang="ja")
    assert snap.phase is MagicHourPhase.BEFORE_SUNSET
    assert snap.minutes_until_sunset == 90
    assert snap.minutes_until_dark == 120
    assert snap.progress_to_sunset == pytest.approx(0.25)
    assert snap.progress_to_dark == 0.0
    assert snap.countdown_text == "日没まで 1時間30分"
    assert snap.icon_key == "sun.max.fill"
    assert snap.gradient_stops == PHASE_GRADIENTS[MagicHourPhase.BEFORE_SUNSET]
    assert snap.arc_progress == snap.progress_to_sunset
    assert snap.phase_token == "before_sunset"


def test_snapshot_during_magic_hour():
    snap = compute_snapshot(TIMES, SUNSET + timedelta(minutes=10))
    assert snap.phase is MagicHourPhase.MAGIC_HOUR
    assert snap.minutes_until_sunset == 0
    assert snap.minutes_until_dark == 20
    assert snap.progress_to_dark == pytest.approx(1 / 3)
    assert snap.arc_progress == snap.progress_to_dark
    assert snap.icon_key == "sunset.fill"


def test_snapshot_after_dark():
    snap = compute_snapshot(TIMES, TWILIGHT_END + timedelta(hours=2))
    assert snap.phase is MagicHourPhase.AFTER_DARK
    assert (snap.minutes_until_sunset, snap.minutes_until_dark) == (0, 0)
    assert snap.progress_to_dark == 0.0
    assert snap.arc_progress == 1.0
    assert snap.countdown_text == "Night"
    assert len(snap.gradient_stops) == 2


def test_naive_now_is_observer_local():
    naive = datetime(2025, 6, 21, 18, 28)
    snap = compute_snapshot(TIMES, naive)
    assert snap.minutes_until_sunset == 30
    assert snap.now.tzinfo is SUNSET.tzinfo


def test_now_in_other_timezone_is_same_instant():
    utc_now = (SUNSET - timedelta(minutes=30)).astimezone(FixedOffset(0))
    assert compute_snapshot(TIMES, utc_now).minutes_until_sunset == 30


def test_lookup_tables_cover_every_phase():
    assert set(PHASE_ICONS) == set(MagicHourPhase)
    assert set(PHASE_GRADIENTS) == set(MagicHourPhase)
    for stops in PHASE_GRADIENTS.values():
        assert all(s.startswith("#") and len(s) == 7 for s in stops)


def test_twilight_end_instant_is_dark_with_full_progress():
    snap = compute_snapshot(TIMES, TWILIGHT_END)
    assert snap.phase is MagicHourPhase.AFTER_DARK
    assert snap.progress_to_dark == 1.0
    assert snap.arc_progress == 1.0
    one_second_later = TWILIGHT_END + timedelta(seconds=1)
    assert progress_to_dark(TIMES, one_second_later) == 0.0
