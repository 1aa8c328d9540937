"""Data model definitions — explicit boundaries between location, solar compute, and display layers."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position. Validated at the boundary (see location.validate_coordinate)."""

    lat: float  # Latitude (decimal degrees, north positive)
    lng: float  # Longitude (decimal degrees, east positive)

    @property
    def latitude_label(self) -> str:
        """e.g. "35.68°N"."""
        direction = "N" if self.lat >= 0 else "S"
        return f"{abs(self.lat):.2f}°{direction}"

    @property
    def longitude_label(self) -> str:
        """e.g. "139.65°E"."""
        direction = "E" if self.lng >= 0 else "W"
        return f"{abs(self.lng):.2f}°{direction}"

    @property
    def label(self) -> str:
        return f"{self.latitude_label}, {self.longitude_label}"


@dataclass(frozen=True)
class PlaceName:
    """Reverse-geocoded place name. Display only, never fed into the solar computation."""

    country: str | None
    region: str | None  # Locality, falling back to state/administrative area

    @property
    def label(self) -> str | None:
        if self.country and self.region:
            return f"{self.country} · {self.region}"
        return self.country or self.region


@dataclass(frozen=True)
class LocationFix:
    """A single coordinate snapshot handed to the core by the location provider."""

    coordinate: GeoCoordinate
    address_display: str  # Normalized address returned by geocoder (for display)


@dataclass(frozen=True)
class SolarTimes:
    """Output of the solar event calculator. Both datetimes are tz-aware, same offset."""

    sunset: datetime
    twilight_end: datetime  # Civil twilight end (sun 6° below horizon)


class MagicHourPhase(str, Enum):
    """Where "now" sits relative to sunset and civil twilight end."""

    BEFORE_SUNSET = "before_sunset"
    MAGIC_HOUR = "magic_hour"
    AFTER_DARK = "after_dark"


class TimePeriod(str, Enum):
    """Clock-hour based period of the day, drives the background gradient."""

    DAWN = "dawn"  # 04:00-06:00
    MORNING = "morning"  # 06:00-10:00
    DAY = "day"  # 10:00-16:00
    SUNSET = "sunset"  # 16:00-18:00
    DUSK = "dusk"  # 18:00-20:00
    NIGHT = "night"  # 20:00-04:00


@dataclass(frozen=True)
class MagicHourSnapshot:
    """Everything the display layer needs for one tick. Recomputed, never stored."""

    solar_times: SolarTimes
    now: datetime
    phase: MagicHourPhase
    minutes_until_sunset: int  # >= 0
    minutes_until_dark: int  # >= 0
    progress_to_sunset: float  # [0, 1], 120-minute lookahead window
    progress_to_dark: float  # [0, 1], 0 outside the magic hour
    countdown_text: str
    icon_key: str
    gradient_stops: tuple[str, ...]  # "#rrggbb", top to bottom

    @property
    def phase_token(self) -> str:
        return self.phase.value

    @property
    def arc_progress(self) -> float:
        """Fraction of the dial to fill for the current phase."""
        if self.phase is MagicHourPhase.BEFORE_SUNSET:
            return self.progress_to_sunset
        if self.phase is MagicHourPhase.MAGIC_HOUR:
            return self.progress_to_dark
        return 1.0
