"""Route resolution across routing providers with straight-line fallback."""

import itertools
import threading
from typing import Optional

from .config import CONFIG
from .geo import straight_line_route
from .logger import Logger
from .models import Route, RouteRequest, TravelMode
from .providers import ProviderFailure, RouteProvider, build_provider


class RouteResolver:
    """Tries providers in per-mode preference order, one at a time.

    resolve() always returns a Route: when every provider fails the result is
    the straight-line fallback, recognizable by its empty step list.
    """

    def __init__(self, providers_by_mode: dict[TravelMode, list[RouteProvider]],
                 logger: Optional[Logger] = None, config: dict = CONFIG):
        self.providers_by_mode = {
            TravelMode(mode): list(providers) for mode, providers in providers_by_mode.items()
        }
        self.logger = logger
        self.config = config

    def _log(self, message: str, data: Optional[dict] = None):
        if self.logger:
            self.logger.log(message, data)

    def providers_for(self, mode: TravelMode) -> list[RouteProvider]:
        return self.providers_by_mode.get(TravelMode(mode), [])

    def resolve(self, request: RouteRequest) -> Route:
        """Return the first usable provider route, or a straight line"""
        mode = TravelMode(request.mode)

        for provider in self.providers_for(mode):
            self._log("Requesting route", {"provider": provider.name, "mode": mode.value})
            result = provider.attempt_route(request)

            if isinstance(result, ProviderFailure):
                self._log("Provider failed", {"provider": result.provider, "reason": result.reason})
                continue

            self._log("Route resolved", {
                "provider": result.provider,
                "distance": round(result.distance, 1),
                "duration": round(result.duration, 1),
                "steps": len(result.steps),
            })
            return result

        route = straight_line_route(request.origin, request.destination, mode, config=self.config)
        self._log("All providers failed, using straight line", {
            "distance": round(route.distance, 1),
            "duration": round(route.duration, 1),
        })
        return route


def build_resolver(config: dict = CONFIG, logger: Optional[Logger] = None) -> RouteResolver:
    """Build a resolver with the provider order from CONFIG"""
    providers_by_mode = {}
    built: dict[str, RouteProvider] = {}
    for mode, names in config["provider_order"].items():
        providers = []
        for name in names:
            if name not in built:
                built[name] = build_provider(name, config)
            providers.append(built[name])
        providers_by_mode[TravelMode(mode)] = providers
    return RouteResolver(providers_by_mode, logger=logger, config=config)


class RequestGenerations:
    """Monotonic tags for route requests.

    A result is applied only when its tag is the latest one issued; anything
    older was superseded while in flight.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    def issue(self) -> int:
        with self._lock:
            self._latest = next(self._counter)
            return self._latest

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._latest

    @property
    def latest(self) -> int:
        return self._latest
