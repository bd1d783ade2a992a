"""Routing service adapters.

Each adapter makes exactly one HTTP request per attempt and normalizes the
service's response into a Route. Anything that goes wrong comes back as a
ProviderFailure value so the resolver can move on to the next adapter.
"""

from dataclasses import dataclass
from typing import Optional, Union

import requests

from .config import CONFIG
from .models import Coordinate, ManeuverStep, Route, RouteRequest, TravelMode


@dataclass(frozen=True)
class ProviderFailure:
    provider: str
    reason: str


class MalformedResponse(ValueError):
    """Response body parsed as JSON but does not describe a usable route"""


def _coordinate_at(geometry: list[Coordinate], index) -> Optional[Coordinate]:
    """Resolve a provider's geometry index into an absolute coordinate"""
    if index is None:
        return None
    i = int(index)
    if 0 <= i < len(geometry):
        return geometry[i]
    return None


def _road_name(name: Optional[str]) -> Optional[str]:
    # ORS uses "-" for unnamed ways
    if not name or name.strip() in ("", "-"):
        return None
    return name.strip()


class RouteProvider:
    """Base class for routing service adapters"""

    name = "provider"
    profiles: dict[TravelMode, str] = {}
    needs_api_key = False

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: float = CONFIG["provider_timeout"],
                 language: str = CONFIG["provider_language"]):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.language = language

    def supports(self, mode: TravelMode) -> bool:
        return TravelMode(mode) in self.profiles

    def attempt_route(self, request: RouteRequest) -> Union[Route, ProviderFailure]:
        """Ask the service for a route. Never raises."""
        if not self.supports(request.mode):
            return ProviderFailure(self.name, f"mode {TravelMode(request.mode).value} not supported")
        if self.needs_api_key and not self.api_key:
            return ProviderFailure(self.name, "no API key configured")

        try:
            response = self._send(request)
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise MalformedResponse(f"expected a JSON object, got {type(data).__name__}")
            return self._parse(data, request)
        except requests.RequestException as e:
            return ProviderFailure(self.name, f"request failed: {e}")
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            return ProviderFailure(self.name, f"malformed response: {e}")

    def _send(self, request: RouteRequest) -> requests.Response:
        raise NotImplementedError

    def _parse(self, data: dict, request: RouteRequest) -> Route:
        raise NotImplementedError


class OpenRouteServiceProvider(RouteProvider):
    """OpenRouteService directions API (GeoJSON response)

    Steps reference their location as `way_points: [start, end]` indices into
    the feature's coordinate list.
    """

    name = "openrouteservice"
    profiles = {
        TravelMode.WALKING: "foot-walking",
        TravelMode.DRIVING: "driving-car",
    }
    needs_api_key = True

    def _send(self, request: RouteRequest) -> requests.Response:
        profile = self.profiles[TravelMode(request.mode)]
        return requests.post(
            f"{self.base_url}/v2/directions/{profile}/geojson",
            json={
                "coordinates": [request.origin.to_list(), request.destination.to_list()],
                "instructions": True,
                "language": self.language,
            },
            headers={
                "Authorization": self.api_key,
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
        )

    def _parse(self, data: dict, request: RouteRequest) -> Route:
        features = data.get("features") or []
        if not features:
            raise MalformedResponse("no routes in response")
        feature = features[0]

        geometry = [Coordinate.from_list(p) for p in feature["geometry"]["coordinates"]]
        properties = feature.get("properties") or {}
        segments = properties.get("segments") or []
        summary = properties.get("summary") or (segments[0] if segments else {})

        steps = []
        raw_steps = (segments[0].get("steps") or []) if segments else []
        for s in raw_steps:
            way_points = s.get("way_points") or []
            steps.append(ManeuverStep(
                instruction=s.get("instruction") or "",
                location=_coordinate_at(geometry, way_points[0]) if way_points else None,
                distance=float(s.get("distance") or 0),
                duration=float(s.get("duration") or 0),
                name=_road_name(s.get("name")),
            ))

        return Route(
            geometry=geometry,
            distance=float(summary.get("distance") or 0),
            duration=float(summary.get("duration") or 0),
            steps=steps,
            provider=self.name,
            mode=TravelMode(request.mode),
        )


# GraphHopper instruction sign codes
GRAPHHOPPER_SIGNS = {
    -98: "make a u-turn",
    -8: "make a u-turn",
    -7: "keep left",
    -6: "exit the roundabout",
    -3: "turn sharp left",
    -2: "turn left",
    -1: "turn slight left",
    0: "continue",
    1: "turn slight right",
    2: "turn right",
    3: "turn sharp right",
    4: "arrive at destination",
    5: "continue",  # via point reached
    6: "enter the roundabout",
    7: "keep right",
    8: "make a u-turn",
}


class GraphHopperProvider(RouteProvider):
    """GraphHopper routing API, pedestrian profile only

    Times are reported in milliseconds; instructions reference their location
    as `interval: [start, end]` indices into the path's coordinates.
    """

    name = "graphhopper"
    profiles = {TravelMode.WALKING: "foot"}
    needs_api_key = True

    def _send(self, request: RouteRequest) -> requests.Response:
        origin, destination = request.origin, request.destination
        params = [
            ("point", f"{origin.lat},{origin.lon}"),
            ("point", f"{destination.lat},{destination.lon}"),
            ("profile", self.profiles[TravelMode(request.mode)]),
            ("points_encoded", "false"),
            ("instructions", "true"),
            ("locale", self.language),
            ("key", self.api_key),
        ]
        return requests.get(f"{self.base_url}/route", params=params, timeout=self.timeout)

    def _parse(self, data: dict, request: RouteRequest) -> Route:
        paths = data.get("paths") or []
        if not paths:
            raise MalformedResponse("no paths in response")
        path = paths[0]

        geometry = [Coordinate.from_list(p) for p in path["points"]["coordinates"]]

        steps = []
        for ins in path.get("instructions") or []:
            interval = ins.get("interval") or []
            text = ins.get("text") or GRAPHHOPPER_SIGNS.get(ins.get("sign"), "")
            steps.append(ManeuverStep(
                instruction=text,
                location=_coordinate_at(geometry, interval[0]) if interval else None,
                distance=float(ins.get("distance") or 0),
                duration=float(ins.get("time") or 0) / 1000,
                name=_road_name(ins.get("street_name")),
            ))

        return Route(
            geometry=geometry,
            distance=float(path.get("distance") or 0),
            duration=float(path.get("time") or 0) / 1000,
            steps=steps,
            provider=self.name,
            mode=TravelMode(request.mode),
        )


def osrm_instruction(maneuver: dict, name: Optional[str] = None) -> str:
    """Compose English instruction text from an OSRM maneuver object"""
    mtype = maneuver.get("type") or "continue"
    modifier = maneuver.get("modifier")
    road = _road_name(name)

    if mtype == "depart":
        text = "depart"
    elif mtype == "arrive":
        return "arrive at destination"
    elif mtype in ("roundabout", "rotary", "roundabout turn"):
        text = "enter the roundabout"
        if maneuver.get("exit"):
            text += f" and take exit {maneuver['exit']}"
    elif modifier == "uturn":
        text = "make a u-turn"
    elif mtype == "fork" and modifier and ("left" in modifier or "right" in modifier):
        text = "keep left" if "left" in modifier else "keep right"
    elif mtype in ("new name", "merge", "notification") or not modifier or modifier == "straight":
        text = "continue"
    else:
        text = f"turn {modifier}"

    if road:
        text += f" onto {road}"
    return text


class OSRMProvider(RouteProvider):
    """OSRM route service

    Steps carry an absolute `maneuver.location`, so no index resolution is
    needed.
    """

    name = "osrm"
    profiles = {
        TravelMode.WALKING: "foot",
        TravelMode.DRIVING: "driving",
    }

    def _send(self, request: RouteRequest) -> requests.Response:
        profile = self.profiles[TravelMode(request.mode)]
        origin, destination = request.origin, request.destination
        coords = f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        return requests.get(
            f"{self.base_url}/route/v1/{profile}/{coords}",
            params={"overview": "full", "geometries": "geojson", "steps": "true"},
            timeout=self.timeout,
        )

    def _parse(self, data: dict, request: RouteRequest) -> Route:
        if data.get("code") != "Ok":
            raise MalformedResponse(f"OSRM returned {data.get('code')}")
        routes = data.get("routes") or []
        if not routes:
            raise MalformedResponse("no routes in response")
        route = routes[0]

        geometry = [Coordinate.from_list(p) for p in route["geometry"]["coordinates"]]

        legs = route.get("legs") or []
        steps = []
        raw_steps = (legs[0].get("steps") or []) if legs else []
        for s in raw_steps:
            maneuver = s.get("maneuver") or {}
            location = maneuver.get("location")
            steps.append(ManeuverStep(
                instruction=osrm_instruction(maneuver, s.get("name")),
                location=Coordinate.from_list(location) if location else None,
                distance=float(s.get("distance") or 0),
                duration=float(s.get("duration") or 0),
                name=_road_name(s.get("name")),
            ))

        return Route(
            geometry=geometry,
            distance=float(route.get("distance") or 0),
            duration=float(route.get("duration") or 0),
            steps=steps,
            provider=self.name,
            mode=TravelMode(request.mode),
        )


PROVIDER_CLASSES = {
    OpenRouteServiceProvider.name: OpenRouteServiceProvider,
    GraphHopperProvider.name: GraphHopperProvider,
    OSRMProvider.name: OSRMProvider,
}


def build_provider(name: str, config: dict = CONFIG) -> RouteProvider:
    """Construct a provider from its CONFIG entries"""
    cls = PROVIDER_CLASSES[name]
    return cls(
        base_url=config[f"{name}_url"],
        api_key=config.get(f"{name}_api_key"),
        timeout=config["provider_timeout"],
        language=config["provider_language"],
    )
