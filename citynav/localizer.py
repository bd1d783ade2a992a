"""Maneuver categorization and localized instruction text.

Providers are asked for English instruction text. The ordered RULES table
reduces that text to a ManeuverCategory, and phrase() renders a category in
the traveler's language with an optional distance clause.
"""

import re
from enum import Enum
from typing import Optional

from .config import CONFIG


class ManeuverCategory(Enum):
    DEPART = "depart"
    STRAIGHT = "straight"
    SLIGHT_LEFT = "slight_left"
    SLIGHT_RIGHT = "slight_right"
    LEFT = "left"
    RIGHT = "right"
    SHARP_LEFT = "sharp_left"
    SHARP_RIGHT = "sharp_right"
    KEEP_LEFT = "keep_left"
    KEEP_RIGHT = "keep_right"
    U_TURN = "u_turn"
    ROUNDABOUT = "roundabout"
    ARRIVAL = "arrival"


# First match wins, so specific patterns come before general ones
RULES: tuple[tuple[re.Pattern, ManeuverCategory], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), category) for pattern, category in (
        (r"\barriv|\byou have reached\b|\breached your destination\b", ManeuverCategory.ARRIVAL),
        (r"^\s*(depart|head)\b", ManeuverCategory.DEPART),
        (r"\bu-?turn\b|\bturn around\b", ManeuverCategory.U_TURN),
        (r"\broundabout\b|\brotary\b", ManeuverCategory.ROUNDABOUT),
        (r"\bsharp left\b", ManeuverCategory.SHARP_LEFT),
        (r"\bsharp right\b", ManeuverCategory.SHARP_RIGHT),
        (r"\b(slight|slightly|bear) left\b", ManeuverCategory.SLIGHT_LEFT),
        (r"\b(slight|slightly|bear) right\b", ManeuverCategory.SLIGHT_RIGHT),
        (r"\bkeep left\b", ManeuverCategory.KEEP_LEFT),
        (r"\bkeep right\b", ManeuverCategory.KEEP_RIGHT),
        (r"\bleft\b", ManeuverCategory.LEFT),
        (r"\bright\b", ManeuverCategory.RIGHT),
        (r"\b(continue|straight|go)\b", ManeuverCategory.STRAIGHT),
    )
)

# Road names follow these words ("Turn right onto Left Bank Road") and must
# not take part in matching
_ROAD_NAME_SPLIT = re.compile(r"\s+(?:onto|on|toward|towards|at|into)\s+", re.IGNORECASE)


def categorize(raw_instruction: Optional[str]) -> ManeuverCategory:
    """Map provider instruction text to a maneuver category.

    Unmatched text ("New name", "Merge", empty) is treated as going straight.
    """
    if not raw_instruction:
        return ManeuverCategory.STRAIGHT
    maneuver = _ROAD_NAME_SPLIT.split(raw_instruction.strip(), maxsplit=1)[0]
    for pattern, category in RULES:
        if pattern.search(maneuver):
            return category
    return ManeuverCategory.STRAIGHT


SUPPORTED_LANGUAGES = ("en", "ru")

PHRASES = {
    "en": {
        ManeuverCategory.DEPART: "start moving",
        ManeuverCategory.STRAIGHT: "continue straight",
        ManeuverCategory.SLIGHT_LEFT: "bear left",
        ManeuverCategory.SLIGHT_RIGHT: "bear right",
        ManeuverCategory.LEFT: "turn left",
        ManeuverCategory.RIGHT: "turn right",
        ManeuverCategory.SHARP_LEFT: "turn sharp left",
        ManeuverCategory.SHARP_RIGHT: "turn sharp right",
        ManeuverCategory.KEEP_LEFT: "keep left",
        ManeuverCategory.KEEP_RIGHT: "keep right",
        ManeuverCategory.U_TURN: "make a U-turn",
        ManeuverCategory.ROUNDABOUT: "enter the roundabout",
        ManeuverCategory.ARRIVAL: "you have arrived at your destination",
    },
    "ru": {
        ManeuverCategory.DEPART: "начните движение",
        ManeuverCategory.STRAIGHT: "продолжайте прямо",
        ManeuverCategory.SLIGHT_LEFT: "слегка поверните налево",
        ManeuverCategory.SLIGHT_RIGHT: "слегка поверните направо",
        ManeuverCategory.LEFT: "поверните налево",
        ManeuverCategory.RIGHT: "поверните направо",
        ManeuverCategory.SHARP_LEFT: "резко поверните налево",
        ManeuverCategory.SHARP_RIGHT: "резко поверните направо",
        ManeuverCategory.KEEP_LEFT: "держитесь левее",
        ManeuverCategory.KEEP_RIGHT: "держитесь правее",
        ManeuverCategory.U_TURN: "развернитесь",
        ManeuverCategory.ROUNDABOUT: "въезжайте на круговое движение",
        ManeuverCategory.ARRIVAL: "вы прибыли в пункт назначения",
    },
}

DISTANCE_TEMPLATES = {
    "en": "In {distance}, {instruction}",
    "ru": "Через {distance} {instruction}",
}

STATUS_TEXTS = {
    "en": {
        "no_position": "No position",
        "head": "Head {compass}, {distance}",
    },
    "ru": {
        "no_position": "Нет местоположения",
        "head": "Двигайтесь на {compass}, {distance}",
    },
}

COMPASS_NAMES = {
    "ru": {
        "north": "север",
        "northeast": "северо-восток",
        "east": "восток",
        "southeast": "юго-восток",
        "south": "юг",
        "southwest": "юго-запад",
        "west": "запад",
        "northwest": "северо-запад",
    },
}

SYMBOLS = {
    ManeuverCategory.SLIGHT_LEFT: "←",
    ManeuverCategory.LEFT: "←",
    ManeuverCategory.SHARP_LEFT: "←",
    ManeuverCategory.KEEP_LEFT: "←",
    ManeuverCategory.SLIGHT_RIGHT: "→",
    ManeuverCategory.RIGHT: "→",
    ManeuverCategory.SHARP_RIGHT: "→",
    ManeuverCategory.KEEP_RIGHT: "→",
    ManeuverCategory.U_TURN: "↺",
    ManeuverCategory.ROUNDABOUT: "⟲",
    ManeuverCategory.ARRIVAL: "📍",
}


def normalize_language(language: Optional[str]) -> str:
    """Two-letter code of a supported language, English otherwise"""
    code = (language or "").lower()[:2]
    return code if code in SUPPORTED_LANGUAGES else "en"


def format_distance(meters: float, language: str = "en") -> str:
    """Distance rounded the way it is spoken: 50 m steps, then tenths of a km"""
    language = normalize_language(language)
    rounded = max(50, int(round(meters / 50.0)) * 50)
    if rounded < 1000:
        return f"{rounded} meters" if language == "en" else f"{rounded} метров"

    km = round(meters / 1000.0, 1)
    km_text = f"{km:g}"
    if language == "ru":
        return f"{km_text.replace('.', ',')} км"
    return "1 kilometer" if km == 1 else f"{km_text} kilometers"


def phrase(category: ManeuverCategory, distance_m: Optional[float] = None,
           language: str = "en",
           close_range: float = CONFIG["close_range_distance"]) -> str:
    """Render a maneuver in the target language.

    Arrival and close-range maneuvers are immediate commands; everything else
    gets an "in N meters" clause.
    """
    language = normalize_language(language)
    instruction = PHRASES[language][category]

    if category == ManeuverCategory.ARRIVAL or distance_m is None or distance_m < close_range:
        return instruction[0].upper() + instruction[1:]

    return DISTANCE_TEMPLATES[language].format(
        distance=format_distance(distance_m, language),
        instruction=instruction,
    )


def direction_symbol(category: ManeuverCategory) -> str:
    return SYMBOLS.get(category, "↑")


def compass_name(compass: str, language: str = "en") -> str:
    return COMPASS_NAMES.get(normalize_language(language), {}).get(compass, compass)


def status_text(key: str, language: str = "en", **values) -> str:
    return STATUS_TEXTS[normalize_language(language)][key].format(**values)
