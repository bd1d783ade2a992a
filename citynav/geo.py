"""Geographic utility functions."""

import math

from .config import CONFIG
from .models import Coordinate, Route, TravelMode


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Calculate distance between two coordinates in meters using Haversine formula"""
    R = 6371000  # Earth's radius in meters

    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    delta_phi = math.radians(b.lat - a.lat)
    delta_lambda = math.radians(b.lon - a.lon)

    h = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return R * c


def bearing_between(a: Coordinate, b: Coordinate) -> float:
    """Calculate bearing from a to b in degrees (0-360, 0=North)"""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    delta_lambda = math.radians(b.lon - a.lon)

    x = math.sin(delta_lambda) * math.cos(phi2)
    y = (math.cos(phi1) * math.sin(phi2) -
         math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda))

    bearing = math.degrees(math.atan2(x, y))
    return (bearing + 360) % 360


def bearing_to_compass(bearing: float) -> str:
    """Convert bearing to compass direction"""
    directions = ["north", "northeast", "east", "southeast",
                  "south", "southwest", "west", "northwest"]
    index = round(bearing / 45) % 8
    return directions[index]


def straight_line_route(a: Coordinate, b: Coordinate,
                        mode: TravelMode = TravelMode.WALKING,
                        config: dict = CONFIG) -> Route:
    """Two-point route used when no routing provider produced anything.

    Duration assumes a constant speed per travel mode. The route has no
    maneuvers, which is how callers tell it apart from a real route.
    """
    distance = haversine_distance(a, b)
    speed = config["assumed_speed_mps"][TravelMode(mode).value]
    return Route(
        geometry=(a, b),
        distance=distance,
        duration=distance / speed,
        steps=(),
        provider="straight_line",
        mode=TravelMode(mode),
    )
