"""
Navigation session announcement tests

The trip fixture runs north from (69.2400, 41.3000) to a right turn at
41.3030 (~334 m), then east to the destination at 69.2440 (~334 m).
"""

from unittest.mock import MagicMock

import pytest

from citynav.localizer import ManeuverCategory
from citynav.models import Coordinate, ManeuverStep
from citynav.session import AnnouncementState, NavigationSession, SelectionStrategy


def north(lat):
    return Coordinate(69.2400, lat)


def east(lon):
    return Coordinate(lon, 41.3030)


# Northbound leg: 334 m, 278 m, 222 m, 111 m, 22 m from the turn, then past it
NORTHBOUND = [north(41.3000), north(41.3005), north(41.3010), north(41.3020), north(41.3028)]
PAST_TURN = [north(41.3029), north(41.3030), east(69.2401)]


class TestAnnouncements:
    """Pre-announce and close-range behavior"""

    @pytest.fixture
    def speak(self):
        return MagicMock()

    @pytest.fixture
    def session(self, trip_steps, speak):
        return NavigationSession(trip_steps, language="en", speak=speak)

    def test_turn_spoken_exactly_twice(self, session, speak):
        turn_announcements = []
        for position in NORTHBOUND + PAST_TURN:
            guidance = session.update(position)
            if guidance.announcement and guidance.index == 1:
                turn_announcements.append(guidance.announcement)

        assert turn_announcements == ["In 300 meters, turn right", "Turn right"]
        assert speak.call_count == 2

    def test_states_progress(self, session):
        session.update(north(41.3000))
        assert session.states[1] == AnnouncementState.UNSEEN
        assert session.last_acknowledged_index == -1

        session.update(north(41.3005))
        assert session.states[1] == AnnouncementState.PRE_ANNOUNCED
        assert session.last_acknowledged_index == 0.5

        session.update(north(41.3028))
        assert session.states[1] == AnnouncementState.ACKNOWLEDGED
        assert session.last_acknowledged_index == 1

    def test_display_updates_without_speaking(self, session, speak):
        for position in NORTHBOUND[:4]:
            guidance = session.update(position)

        # Pre-announced at 278 m; 111 m is only displayed
        assert speak.call_count == 1
        assert guidance.announcement is None
        assert guidance.text == "In 100 meters, turn right"
        assert guidance.symbol == "→"
        assert guidance.distance == pytest.approx(111.2, abs=1)

    def test_depart_never_selected(self, session):
        guidance = session.update(north(41.3000))

        assert guidance.index == 1
        assert guidance.category == ManeuverCategory.RIGHT

    def test_arrival_and_finish(self, session, speak):
        for position in NORTHBOUND + PAST_TURN:
            session.update(position)
        assert not session.finished

        guidance = session.update(east(69.2438))

        assert guidance.category == ManeuverCategory.ARRIVAL
        assert guidance.announcement == "You have arrived at your destination"
        assert session.finished

        speak.reset_mock()
        session.update(east(69.2440))
        speak.assert_not_called()

    def test_arrival_not_pre_announced(self, session, speak):
        for position in NORTHBOUND + PAST_TURN:
            session.update(position)
        speak.reset_mock()

        guidance = session.update(east(69.2405))  # ~292 m from the destination

        assert guidance.category == ManeuverCategory.ARRIVAL
        speak.assert_not_called()

    def test_russian(self, trip_steps, speak):
        session = NavigationSession(trip_steps, language="ru", speak=speak)

        session.update(north(41.3005))

        speak.assert_called_once_with("Через 300 метров поверните направо")

    def test_language_switch_rerenders_display(self, session):
        session.update(north(41.3010))
        session.set_language("ru")

        assert session.display.text == "Через 200 метров поверните направо"


class TestAudioDisabled:
    """Muted sessions"""

    def test_nothing_spoken(self, trip_steps):
        speak = MagicMock()
        session = NavigationSession(trip_steps, audio_enabled=False, speak=speak)

        for position in NORTHBOUND + PAST_TURN:
            guidance = session.update(position)

        speak.assert_not_called()
        assert guidance.announcement is None

    def test_unmuting_does_not_replay_passed_turns(self, trip_steps):
        speak = MagicMock()
        session = NavigationSession(trip_steps, audio_enabled=False, speak=speak)
        for position in NORTHBOUND:
            session.update(position)

        session.set_audio_enabled(True)
        session.update(north(41.3029))

        speak.assert_not_called()


class TestResetAndPositionLoss:
    """Mode-change reset and missing positions"""

    def test_reset_clears_state_and_display(self, trip_steps):
        session = NavigationSession(trip_steps, speak=MagicMock())
        for position in NORTHBOUND + PAST_TURN + [east(69.2438)]:
            session.update(position)
        assert session.display.category == ManeuverCategory.ARRIVAL

        session.reset()

        assert session.display is None
        assert session.last_acknowledged_index == -1
        assert all(state == AnnouncementState.UNSEEN for state in session.states)

    def test_none_position_keeps_display(self, trip_steps):
        speak = MagicMock()
        session = NavigationSession(trip_steps, speak=speak)
        before = session.update(north(41.3005))
        states = list(session.states)

        after = session.update(None)

        assert after is before
        assert session.states == states
        assert speak.call_count == 1

    def test_none_position_before_any_fix(self, trip_steps):
        session = NavigationSession(trip_steps)

        assert session.update(None) is None


class TestDegenerateSteps:
    """Steps without a usable anchor"""

    def test_excluded_from_selection(self):
        steps = [
            ManeuverStep("Turn left", None, 10.0, 7.0),
            ManeuverStep("Turn sharp left", Coordinate(0, 0), 10.0, 7.0),
            ManeuverStep("Turn right", Coordinate(69.2400, 41.3010), 10.0, 7.0),
        ]
        session = NavigationSession(steps, speak=MagicMock())

        guidance = session.update(north(41.3000))

        assert guidance.index == 2
        assert session.navigable == [2]

    def test_no_navigable_steps(self):
        session = NavigationSession([ManeuverStep("", None, 0.0, 0.0)])

        assert session.update(north(41.3000)) is None
        assert not session.finished


class TestSelectionStrategy:
    """Nearest versus sequential selection on a route that loops back"""

    @pytest.fixture
    def loop_steps(self):
        # Step 2 lies right next to the start; step 1 is 222 m away
        return [
            ManeuverStep("Turn left", Coordinate(69.2400, 41.3020), 100.0, 72.0),
            ManeuverStep("Turn right", Coordinate(69.2400, 41.3020), 100.0, 72.0),
            ManeuverStep("Turn left", Coordinate(69.2400, 41.3001), 100.0, 72.0),
        ]

    def test_nearest_picks_closest_upcoming(self, loop_steps):
        session = NavigationSession(loop_steps, strategy=SelectionStrategy.NEAREST)

        assert session.update(north(41.3000)).index == 2

    def test_sequential_picks_lowest_index(self, loop_steps):
        session = NavigationSession(loop_steps, strategy=SelectionStrategy.SEQUENTIAL)

        assert session.update(north(41.3000)).index == 0
