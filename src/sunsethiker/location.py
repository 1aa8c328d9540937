"""Location collaborators — coordinate validation, geocoding, and timezone lookup.

Nothing here is needed by the solar calculator itself; these functions turn
user or device input into the immutable GeoCoordinate / offset values the
core consumes, plus an optional place name for display.
"""

import logging
import math
import os
from datetime import date, datetime

import httpx
from pytz import timezone
from timezonefinder import TimezoneFinder

from sunsethiker.models import GeoCoordinate, LocationFix, PlaceName

logger = logging.getLogger(__name__)

_NOMINATIM_URL = "https://nominatim.openstreetmap.org"
_tf = TimezoneFinder()


class GeocodingError(Exception):
    """Geocoder call failure."""


class InvalidCoordinateError(ValueError):
    """Latitude/longitude outside the range the solar calculator is defined for."""


def _headers() -> dict[str, str]:
    user_agent = os.environ.get(
        "NOMINATIM_USER_AGENT", "SunsetHiker/1.0 (magic hour countdown)"
    )
    return {"User-Agent": user_agent}


def validate_coordinate(latitude: float, longitude: float) -> GeoCoordinate:
    """Reject coordinates the calculator is not defined for.

    Raises:
        InvalidCoordinateError: Non-finite values, |latitude| > 90 or |longitude| > 180.
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError(
            f"non-finite coordinate: lat={latitude}, lng={longitude}"
        )
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinateError(f"latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinateError(f"longitude out of range: {longitude}")
    return GeoCoordinate(lat=latitude, lng=longitude)


def geocode_address(address: str, client: httpx.Client | None = None) -> LocationFix:
    """Resolve an address string with Nominatim (OpenStreetMap).

    Args:
        address: Address string in any language.
        client: Optional httpx client (module-level httpx.get when None).

    Returns:
        LocationFix with the validated coordinate and normalized address.

    Raises:
        GeocodingError: On API error or when address cannot be found.
    """
    params = {"q": address, "format": "json", "limit": 1}
    url = f"{_NOMINATIM_URL}/search"
    try:
        if client is None:
            resp = httpx.get(url, params=params, headers=_headers(), timeout=10)
        else:
            resp = client.get(url, params=params, headers=_headers(), timeout=10)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise GeocodingError(f"nominatim error: {e}") from e

    results = resp.json()
    if not results:
        raise GeocodingError(f"Address not found: {address}")
    r = results[0]
    coordinate = validate_coordinate(float(r["lat"]), float(r["lon"]))
    return LocationFix(coordinate=coordinate, address_display=r["display_name"])


def _place_from_address(address: dict) -> PlaceName | None:
    country = address.get("country")
    region = (
        address.get("city")
        or address.get("town")
        or address.get("village")
        or address.get("state")
    )
    if not country and not region:
        return None
    return PlaceName(country=country, region=region)


async def reverse_geocode(
    coordinate: GeoCoordinate,
    lang: str = "en",
    client: httpx.AsyncClient | None = None,
) -> PlaceName | None:
    """Look up a display place name for a coordinate.

    Failures are logged and return None: the place name is decoration and
    must never block the countdown.

    Args:
        coordinate: Observer position.
        lang: Preferred language for names (Accept-Language).
        client: Optional shared AsyncClient.

    Returns:
        PlaceName, or None when nothing is found or the request fails.
    """
    params = {
        "lat": coordinate.lat,
        "lon": coordinate.lng,
        "format": "json",
        "zoom": 10,
        "accept-language": lang,
    }
    url = f"{_NOMINATIM_URL}/reverse"
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=10) as owned:
                resp = await owned.get(url, params=params, headers=_headers())
        else:
            resp = await client.get(url, params=params, headers=_headers())
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning("reverse geocoding failed for %s: %s", coordinate.label, e)
        return None

    try:
        payload = resp.json()
    except ValueError as e:
        logger.warning("reverse geocoding failed for %s: %s", coordinate.label, e)
        return None
    if not isinstance(payload, dict):
        logger.warning(
            "reverse geocoding failed for %s: unexpected %s body",
            coordinate.label,
            type(payload).__name__,
        )
        return None

    address = payload.get("address")
    if not isinstance(address, dict) or not address:
        return None
    return _place_from_address(address)


def timezone_name_at(coordinate: GeoCoordinate) -> str:
    """IANA timezone name for a coordinate.

    Raises:
        GeocodingError: When timezonefinder has no zone for the point.
    """
    tz_str = _tf.timezone_at(lat=coordinate.lat, lng=coordinate.lng)
    if tz_str is None:
        raise GeocodingError(
            f"Timezone not found: lat={coordinate.lat}, lng={coordinate.lng}"
        )
    return tz_str


def utc_offset_hours(tz_name: str, on_date: date) -> float:
    """UTC offset (hours) of tz_name in effect at local noon on on_date."""
    local_noon = timezone(tz_name).localize(
        datetime(on_date.year, on_date.month, on_date.day, 12)
    )
    offset = local_noon.utcoffset()
    assert offset is not None
    return offset.total_seconds() / 3600
