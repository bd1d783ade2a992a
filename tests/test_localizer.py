"""
Instruction categorization and phrasing tests
"""

import re

import pytest

from citynav.localizer import (
    RULES,
    ManeuverCategory,
    categorize,
    compass_name,
    direction_symbol,
    format_distance,
    phrase,
    status_text,
)


class TestCategorize:
    """categorize() tests"""

    @pytest.mark.parametrize("raw,expected", [
        ("Turn sharp right", ManeuverCategory.SHARP_RIGHT),
        ("turn right", ManeuverCategory.RIGHT),
        ("", ManeuverCategory.STRAIGHT),
        (None, ManeuverCategory.STRAIGHT),
        ("New name", ManeuverCategory.STRAIGHT),
        ("merge", ManeuverCategory.STRAIGHT),
        ("Continue straight", ManeuverCategory.STRAIGHT),
        ("Head north on Navoi Street", ManeuverCategory.DEPART),
        ("depart onto Navoi Street", ManeuverCategory.DEPART),
        ("Turn slight left onto Shota Rustaveli", ManeuverCategory.SLIGHT_LEFT),
        ("Bear right", ManeuverCategory.SLIGHT_RIGHT),
        ("Turn sharp left", ManeuverCategory.SHARP_LEFT),
        ("Keep left", ManeuverCategory.KEEP_LEFT),
        ("keep right at the fork", ManeuverCategory.KEEP_RIGHT),
        ("make a u-turn", ManeuverCategory.U_TURN),
        ("Make a U-turn", ManeuverCategory.U_TURN),
        ("Enter the roundabout and take the 2nd exit onto Amir Temur Avenue", ManeuverCategory.ROUNDABOUT),
        ("Arrive at Amir Temur Avenue, on the left", ManeuverCategory.ARRIVAL),
        ("You have arrived at your destination", ManeuverCategory.ARRIVAL),
        ("arrive at destination", ManeuverCategory.ARRIVAL),
    ])
    def test_cases(self, raw, expected):
        assert categorize(raw) == expected

    def test_road_name_does_not_match(self):
        """A road called "Left Bank" must not turn a straight into a left"""
        assert categorize("Continue onto Left Bank Road") == ManeuverCategory.STRAIGHT
        assert categorize("Turn right onto Left Bank Road") == ManeuverCategory.RIGHT

    def test_specific_rules_first(self):
        order = [category for _, category in RULES]

        assert order.index(ManeuverCategory.SHARP_RIGHT) < order.index(ManeuverCategory.RIGHT)
        assert order.index(ManeuverCategory.SLIGHT_LEFT) < order.index(ManeuverCategory.LEFT)
        assert order.index(ManeuverCategory.KEEP_LEFT) < order.index(ManeuverCategory.LEFT)
        assert order[0] == ManeuverCategory.ARRIVAL


class TestPhrase:
    """phrase() tests"""

    def test_arrival_has_no_distance(self):
        text = phrase(ManeuverCategory.ARRIVAL, 500, "en")

        assert not re.search(r"\d", text)
        assert text == "You have arrived at your destination"

    def test_close_range_has_no_distance(self):
        text = phrase(ManeuverCategory.RIGHT, 20, "en")

        assert not re.search(r"\d", text)
        assert text == "Turn right"

    def test_distance_rounded_for_speech(self):
        text = phrase(ManeuverCategory.RIGHT, 280, "en")

        assert "300" in text
        assert text == "In 300 meters, turn right"

    def test_russian(self):
        assert phrase(ManeuverCategory.LEFT, 280, "ru") == "Через 300 метров поверните налево"
        assert phrase(ManeuverCategory.LEFT, 10, "ru") == "Поверните налево"
        assert phrase(ManeuverCategory.ARRIVAL, 500, "ru") == "Вы прибыли в пункт назначения"

    def test_unknown_language_falls_back_to_english(self):
        assert phrase(ManeuverCategory.RIGHT, 20, "de") == "Turn right"

    def test_every_category_has_both_languages(self):
        for category in ManeuverCategory:
            assert phrase(category, 100, "en")
            assert phrase(category, 100, "ru")


class TestFormatDistance:
    """Spoken distance rounding"""

    @pytest.mark.parametrize("meters,language,expected", [
        (10, "en", "50 meters"),
        (280, "en", "300 meters"),
        (974, "en", "950 meters"),
        (990, "en", "1 kilometer"),
        (1540, "en", "1.5 kilometers"),
        (280, "ru", "300 метров"),
        (1540, "ru", "1,5 км"),
    ])
    def test_rounding(self, meters, language, expected):
        assert format_distance(meters, language) == expected


class TestPresentationHelpers:
    """Symbols and status texts"""

    @pytest.mark.parametrize("category,symbol", [
        (ManeuverCategory.SHARP_LEFT, "←"),
        (ManeuverCategory.KEEP_RIGHT, "→"),
        (ManeuverCategory.U_TURN, "↺"),
        (ManeuverCategory.ROUNDABOUT, "⟲"),
        (ManeuverCategory.ARRIVAL, "📍"),
        (ManeuverCategory.STRAIGHT, "↑"),
    ])
    def test_direction_symbol(self, category, symbol):
        assert direction_symbol(category) == symbol

    def test_status_texts(self):
        assert status_text("no_position", "en") == "No position"
        assert status_text("no_position", "ru") == "Нет местоположения"
        assert status_text("head", "en", compass="east", distance="450 meters") == "Head east, 450 meters"

    def test_compass_name(self):
        assert compass_name("northeast", "ru") == "северо-восток"
        assert compass_name("northeast", "en") == "northeast"
