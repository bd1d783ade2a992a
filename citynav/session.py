"""Per-trip announcement state machine.

Every live position update picks the upcoming maneuver, refreshes the
displayed guidance, and decides whether anything should be spoken. Each step
is spoken at most twice: once as a lookahead warning inside the pre-announce
band and once as an immediate command at close range.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Optional, Sequence

from .config import CONFIG
from .geo import haversine_distance
from .localizer import ManeuverCategory, categorize, direction_symbol, phrase, normalize_language
from .models import Coordinate, ManeuverStep


class AnnouncementState(Enum):
    UNSEEN = "unseen"
    PRE_ANNOUNCED = "pre_announced"
    ACKNOWLEDGED = "acknowledged"


class SelectionStrategy(str, Enum):
    NEAREST = "nearest"        # geometrically closest upcoming step
    SEQUENTIAL = "sequential"  # lowest-index upcoming step


@dataclass
class Guidance:
    """What the presentation layer shows for the active maneuver"""
    text: str
    distance: float
    category: ManeuverCategory
    index: int
    symbol: str
    announcement: Optional[str] = None  # text spoken on this update, if any

    def to_dict(self) -> dict:
        d = asdict(self)
        d["category"] = self.category.value
        d["distance"] = round(self.distance, 1)
        return d


class NavigationSession:
    """Tracks which maneuvers of one route have been surfaced to the traveler.

    All mutation happens in update() and reset(); callers must drive both
    from a single thread.
    """

    def __init__(self, steps: Sequence[ManeuverStep], language: str = CONFIG["default_language"],
                 audio_enabled: bool = True, speak: Optional[Callable[[str], None]] = None,
                 config: dict = CONFIG, strategy: SelectionStrategy = SelectionStrategy.NEAREST):
        self.steps = tuple(steps)
        self.categories = [categorize(step.instruction) for step in self.steps]
        self.language = normalize_language(language)
        self.audio_enabled = audio_enabled
        self.speak = speak
        self.config = config
        self.strategy = SelectionStrategy(strategy)

        self.states = [AnnouncementState.UNSEEN] * len(self.steps)
        self.display: Optional[Guidance] = None

        # Steps that can ever be selected. Depart is never shown once under way,
        # and a step without an anchor cannot be measured against.
        self.navigable = [
            i for i, step in enumerate(self.steps)
            if step.location is not None and step.location.is_usable
            and self.categories[i] != ManeuverCategory.DEPART
        ]

    def reset(self):
        """Forget all announcements and clear the display"""
        self.states = [AnnouncementState.UNSEEN] * len(self.steps)
        self.display = None

    def set_language(self, language: str):
        self.language = normalize_language(language)
        if self.display:
            self.display.text = phrase(self.display.category, self.display.distance,
                                       self.language, self.config["close_range_distance"])

    def set_audio_enabled(self, enabled: bool):
        self.audio_enabled = enabled

    @property
    def acknowledged_floor(self) -> int:
        """Highest acknowledged step index, -1 before the first acknowledgement"""
        for i in range(len(self.states) - 1, -1, -1):
            if self.states[i] == AnnouncementState.ACKNOWLEDGED:
                return i
        return -1

    @property
    def last_acknowledged_index(self) -> float:
        """Announcement progress as a single number.

        An integer i means step i was acknowledged; i - 0.5 means step i was
        pre-announced but not yet acknowledged.
        """
        floor = self.acknowledged_floor
        for i in range(floor + 1, len(self.states)):
            if self.states[i] == AnnouncementState.PRE_ANNOUNCED:
                return i - 0.5
        return float(floor)

    @property
    def finished(self) -> bool:
        if not self.navigable:
            return False
        return self.states[self.navigable[-1]] == AnnouncementState.ACKNOWLEDGED

    def _candidates(self) -> list[int]:
        floor = self.acknowledged_floor
        return [i for i in self.navigable if i > floor]

    def _select(self, position: Coordinate) -> Optional[tuple[int, float]]:
        candidates = self._candidates()
        if not candidates:
            return None
        measured = [(i, haversine_distance(position, self.steps[i].location)) for i in candidates]
        if self.strategy == SelectionStrategy.SEQUENTIAL:
            return measured[0]
        return min(measured, key=lambda item: item[1])

    def _mark(self, index: int, state: AnnouncementState):
        # Reaching a step implies every earlier step is behind the traveler
        for i in range(index):
            self.states[i] = AnnouncementState.ACKNOWLEDGED
        self.states[index] = state

    def _announce(self, text: str) -> Optional[str]:
        if not self.audio_enabled:
            return None
        if self.speak:
            self.speak(text)
        return text

    def update(self, position: Optional[Coordinate]) -> Optional[Guidance]:
        """Process one position update and return the current guidance.

        A missing position leaves everything untouched, including the last
        displayed guidance.
        """
        if position is None or not position.is_usable:
            return self.display

        selected = self._select(position)
        if selected is None:
            return self.display
        index, distance = selected

        category = self.categories[index]
        close_range = self.config["close_range_distance"]
        state = self.states[index]
        announcement = None

        if distance < close_range and state != AnnouncementState.ACKNOWLEDGED:
            announcement = self._announce(phrase(category, distance, self.language, close_range))
            self._mark(index, AnnouncementState.ACKNOWLEDGED)
        elif (distance <= self.config["pre_announce_distance"] and state == AnnouncementState.UNSEEN
              and category != ManeuverCategory.ARRIVAL):
            # Arrival is only ever stated as a fact, never as a warning
            announcement = self._announce(phrase(category, distance, self.language, close_range))
            self._mark(index, AnnouncementState.PRE_ANNOUNCED)

        self.display = Guidance(
            text=phrase(category, distance, self.language, close_range),
            distance=distance,
            category=category,
            index=index,
            symbol=direction_symbol(category),
            announcement=announcement,
        )
        return self.display
