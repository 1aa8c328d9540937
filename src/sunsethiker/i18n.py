"""Simple two-language (ja/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "countdown_sunset_minutes": {
        "ja": "日没まで {minutes}分",
        "en": "{minutes} min until sunset",
    },
    "countdown_sunset_hours": {
        "ja": "日没まで {hours}時間{minutes}分",
        "en": "{hours} h {minutes} min until sunset",
    },
    "countdown_dark_minutes": {
        "ja": "マジックアワー {minutes}分",
        "en": "Magic hour: {minutes} min left",
    },
    "countdown_dark_hours": {
        "ja": "マジックアワー {hours}時間{minutes}分",
        "en": "Magic hour: {hours} h {minutes} min left",
    },
    "countdown_night": {
        "ja": "夜",
        "en": "Night",
    },
    "label_sunset": {
        "ja": "日没",
        "en": "Sunset",
    },
    "label_twilight_end": {
        "ja": "薄明終了",
        "en": "Twilight ends",
    },
    "period_dawn": {
        "ja": "夜明け",
        "en": "Dawn",
    },
    "period_morning": {
        "ja": "朝",
        "en": "Morning",
    },
    "period_day": {
        "ja": "昼",
        "en": "Day",
    },
    "period_sunset": {
        "ja": "夕焼け",
        "en": "Sunset glow",
    },
    "period_dusk": {
        "ja": "夕暮れ",
        "en": "Dusk",
    },
    "period_night": {
        "ja": "夜空",
        "en": "Night sky",
    },
    "error_coordinate": {
        "ja": "座標が範囲外です ({error})",
        "en": "Coordinate out of range ({error})",
    },
    "error_address": {
        "ja": "住所が見つかりません ({error})",
        "en": "Address not found. Try a more specific address. ({error})",
    },
    "error_offset": {
        "ja": "UTCオフセットが不正です ({error})",
        "en": "Invalid UTC offset ({error})",
    },
}


def t(key: str, lang: str, **kwargs: object) -> str:
    """Return the translated string for key in lang, formatted with kwargs.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    text = entry.get(lang) or entry.get("en") or key
    return text.format(**kwargs) if kwargs else text
