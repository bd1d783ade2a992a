"""Data classes for citynav."""

import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional


class TravelMode(str, Enum):
    WALKING = "walking"
    DRIVING = "driving"


@dataclass(frozen=True)
class Coordinate:
    """A (lon, lat) pair in degrees"""
    lon: float
    lat: float

    @property
    def is_usable(self) -> bool:
        """False for the [0, 0] sentinel some providers emit and for non-finite values"""
        if not (math.isfinite(self.lon) and math.isfinite(self.lat)):
            return False
        return not (self.lon == 0 and self.lat == 0)

    def to_list(self) -> list[float]:
        return [self.lon, self.lat]

    @classmethod
    def from_list(cls, pair) -> "Coordinate":
        return cls(lon=float(pair[0]), lat=float(pair[1]))


@dataclass(frozen=True)
class RouteRequest:
    origin: Coordinate
    destination: Coordinate
    mode: TravelMode = TravelMode.WALKING


@dataclass(frozen=True)
class ManeuverStep:
    """A single turn-or-continue instruction, anchored at the point where it happens"""
    instruction: str
    location: Optional[Coordinate]
    distance: float  # meters to the next step
    duration: float  # seconds to the next step
    name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "instruction": self.instruction,
            "location": self.location.to_list() if self.location else None,
            "distance": self.distance,
            "duration": self.duration,
            "name": self.name,
        }


@dataclass(frozen=True)
class Route:
    """Provider-independent result of resolving a RouteRequest"""
    geometry: tuple[Coordinate, ...]
    distance: float  # meters
    duration: float  # seconds
    steps: tuple[ManeuverStep, ...] = ()
    provider: str = "straight_line"
    mode: TravelMode = TravelMode.WALKING

    def __post_init__(self):
        # Accept lists from callers but store tuples so the route stays immutable
        object.__setattr__(self, "geometry", tuple(self.geometry))
        object.__setattr__(self, "steps", tuple(self.steps))
        if len(self.geometry) < 2:
            raise ValueError("Route geometry needs at least 2 coordinates")
        if self.distance < 0 or self.duration < 0:
            raise ValueError("Route distance and duration must be non-negative")

    @property
    def is_fallback(self) -> bool:
        return not self.steps

    def to_dict(self) -> dict:
        return {
            "geometry": {
                "type": "LineString",
                "coordinates": [c.to_list() for c in self.geometry],
            },
            "distance": self.distance,
            "duration": self.duration,
            "steps": [s.to_dict() for s in self.steps],
            "provider": self.provider,
            "mode": self.mode.value,
        }


@dataclass
class Location:
    lat: float
    lon: float
    accuracy: Optional[float] = None
    timestamp: Optional[float] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lon=self.lon, lat=self.lat)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Location":
        return cls(**d)
