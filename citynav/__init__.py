"""citynav - Route resolution and turn-by-turn guidance for city travelers."""

from .config import CONFIG
from .models import Coordinate, TravelMode, RouteRequest, ManeuverStep, Route, Location
from .logger import Logger
from .geo import (
    haversine_distance,
    bearing_between,
    bearing_to_compass,
    straight_line_route,
)
from .providers import (
    ProviderFailure,
    RouteProvider,
    OpenRouteServiceProvider,
    GraphHopperProvider,
    OSRMProvider,
    build_provider,
)
from .resolver import RouteResolver, RequestGenerations, build_resolver
from .localizer import ManeuverCategory, RULES, categorize, phrase, format_distance
from .session import AnnouncementState, SelectionStrategy, Guidance, NavigationSession
from .gps import GPS, GPSRecorder, GPSPlayback, PositionError
from .audio import Audio
from .app import Navigator
from .__main__ import main

__all__ = [
    "CONFIG",
    "Coordinate",
    "TravelMode",
    "RouteRequest",
    "ManeuverStep",
    "Route",
    "Location",
    "Logger",
    "haversine_distance",
    "bearing_between",
    "bearing_to_compass",
    "straight_line_route",
    "ProviderFailure",
    "RouteProvider",
    "OpenRouteServiceProvider",
    "GraphHopperProvider",
    "OSRMProvider",
    "build_provider",
    "RouteResolver",
    "RequestGenerations",
    "build_resolver",
    "ManeuverCategory",
    "RULES",
    "categorize",
    "phrase",
    "format_distance",
    "AnnouncementState",
    "SelectionStrategy",
    "Guidance",
    "NavigationSession",
    "GPS",
    "GPSRecorder",
    "GPSPlayback",
    "PositionError",
    "Audio",
    "Navigator",
    "main",
]
