"""
Shared fixtures for citynav tests
"""

from unittest.mock import MagicMock

import pytest
import requests

from citynav.config import CONFIG
from citynav.models import Coordinate, ManeuverStep, Route, RouteRequest, TravelMode


@pytest.fixture
def origin():
    """Tashkent, Amir Temur square area"""
    return Coordinate(69.2401, 41.2995)


@pytest.fixture
def destination():
    return Coordinate(69.2451, 41.3005)


@pytest.fixture
def walking_request(origin, destination):
    return RouteRequest(origin, destination, TravelMode.WALKING)


@pytest.fixture
def driving_request(origin, destination):
    return RouteRequest(origin, destination, TravelMode.DRIVING)


@pytest.fixture
def config():
    """CONFIG copy with API keys set so keyed providers make requests"""
    cfg = dict(CONFIG)
    cfg["openrouteservice_api_key"] = "ors-test-key"
    cfg["graphhopper_api_key"] = "gh-test-key"
    return cfg


@pytest.fixture
def trip_steps():
    """Depart, turn right ~334m north of the start, arrive ~334m east of the turn"""
    return [
        ManeuverStep("Head north on Navoi Street", Coordinate(69.2400, 41.3000), 333.6, 240.0, "Navoi Street"),
        ManeuverStep("Turn right onto Amir Temur Avenue", Coordinate(69.2400, 41.3030), 334.0, 240.0,
                     "Amir Temur Avenue"),
        ManeuverStep("Arrive at destination", Coordinate(69.2440, 41.3030), 0.0, 0.0),
    ]


@pytest.fixture
def trip_route(trip_steps):
    return Route(
        geometry=[Coordinate(69.2400, 41.3000), Coordinate(69.2400, 41.3030), Coordinate(69.2440, 41.3030)],
        distance=667.6,
        duration=480.0,
        steps=trip_steps,
        provider="openrouteservice",
    )


def _make_response(data, status_code=200):
    """Fake requests.Response returning data from json()"""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Server Error")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def make_response():
    return _make_response
