"""Navigator application: routing, live guidance and spoken output."""

import queue
import threading
import time
from typing import Optional

from .audio import Audio
from .config import CONFIG
from .geo import bearing_between, bearing_to_compass, haversine_distance
from .gps import GPSPlayback, GPSRecorder
from .localizer import (ManeuverCategory, compass_name, direction_symbol, format_distance,
                        normalize_language, phrase, status_text)
from .logger import Logger
from .models import Coordinate, Location, Route, RouteRequest, TravelMode
from .resolver import RequestGenerations, RouteResolver
from .session import Guidance, NavigationSession, SelectionStrategy


class Navigator:
    """Main application

    Route results may be produced on a worker thread, but they are applied
    and every session mutation happens on the thread that calls
    drain_results() and on_position().
    """

    def __init__(self, resolver: RouteResolver, audio: Optional[Audio] = None,
                 logger: Optional[Logger] = None,
                 language: str = CONFIG["default_language"],
                 audio_enabled: bool = True,
                 strategy: SelectionStrategy = SelectionStrategy.NEAREST,
                 config: dict = CONFIG):
        self.resolver = resolver
        self.audio = audio
        self.logger = logger
        self.language = normalize_language(language)
        self.audio_enabled = audio_enabled
        self.strategy = SelectionStrategy(strategy)
        self.config = config

        self.generations = RequestGenerations()
        self.results: queue.Queue = queue.Queue()

        self.mode = TravelMode.WALKING
        self.request: Optional[RouteRequest] = None
        # Most recently issued request, applied or still in flight
        self.pending_request: Optional[RouteRequest] = None
        self.route: Optional[Route] = None
        self.session: Optional[NavigationSession] = None

        self.current_location: Optional[Location] = None
        self.position_lost = False

        # Guidance toward the destination when the route is a straight line
        self._fallback_display: Optional[Guidance] = None
        self._fallback_arrived = False

    def _log(self, message: str, data: Optional[dict] = None):
        if self.logger:
            self.logger.log(message, data)

    def _speak(self, text: str):
        self._log("Speaking", {"text": text})
        if self.audio:
            self.audio.speak(text)

    # Routing

    def request_route(self, origin: Coordinate, destination: Coordinate,
                      mode: TravelMode = TravelMode.WALKING,
                      background: bool = False) -> Optional[Route]:
        """Resolve a route and make it the active one.

        With background=True the resolution runs on a worker thread and the
        result is applied by a later drain_results() call. Returns the route
        when it was resolved inline and is still current.
        """
        request = RouteRequest(origin, destination, TravelMode(mode))
        self.mode = request.mode
        self.pending_request = request
        generation = self.generations.issue()
        if self.logger:
            self.logger.start_trip(request)
        self._log("Route requested", {
            "generation": generation,
            "origin": origin.to_list(),
            "destination": destination.to_list(),
            "mode": request.mode.value,
            "background": background,
        })

        if background:
            worker = threading.Thread(
                target=self._resolve_worker, args=(generation, request), daemon=True
            )
            worker.start()
            return None

        route = self.resolver.resolve(request)
        if self._apply(generation, request, route):
            return route
        return None

    def _resolve_worker(self, generation: int, request: RouteRequest):
        self.results.put((generation, request, self.resolver.resolve(request)))

    def drain_results(self) -> int:
        """Apply finished background resolutions; returns how many were applied"""
        applied = 0
        while True:
            try:
                generation, request, route = self.results.get_nowait()
            except queue.Empty:
                return applied
            if self._apply(generation, request, route):
                applied += 1

    def _apply(self, generation: int, request: RouteRequest, route: Route) -> bool:
        if not self.generations.is_current(generation):
            self._log("Discarded stale route", {
                "generation": generation,
                "latest": self.generations.latest,
                "provider": route.provider,
            })
            return False

        self.request = request
        self.route = route
        self.session = NavigationSession(
            route.steps,
            language=self.language,
            audio_enabled=self.audio_enabled,
            speak=self._speak,
            config=self.config,
            strategy=self.strategy,
        )
        self._fallback_display = None
        self._fallback_arrived = False
        self._log("Route applied", {
            "generation": generation,
            "provider": route.provider,
            "fallback": route.is_fallback,
            "distance": round(route.distance, 1),
            "steps": len(route.steps),
        })
        return True

    def change_mode(self, mode: TravelMode, background: bool = False) -> Optional[Route]:
        """Switch travel mode and re-route from the last known position.

        Announcements and the displayed instruction from the old route are
        dropped before the new route arrives.
        """
        mode = TravelMode(mode)
        if mode == self.mode:
            return self.route
        self.mode = mode
        self._log("Travel mode changed", {"mode": mode.value})

        if self.session:
            self.session.reset()
        self.session = None
        self.route = None
        self._fallback_display = None
        self._fallback_arrived = False

        latest = self.pending_request
        if latest is None:
            # Nothing to re-route, but results still in flight belong to the old mode
            self.generations.issue()
            return None
        origin = self.current_location.coordinate if self.current_location else latest.origin
        return self.request_route(origin, latest.destination, mode, background=background)

    # Live guidance

    @property
    def display(self) -> Optional[Guidance]:
        if self.route is not None and self.route.is_fallback:
            return self._fallback_display
        if self.session:
            return self.session.display
        return None

    @property
    def finished(self) -> bool:
        if self.route is None or self.session is None:
            return False
        if self.route.is_fallback:
            return self._fallback_arrived
        return self.session.finished

    def on_position(self, location: Optional[Location]) -> Optional[Guidance]:
        """Feed one position update; None means no fix could be obtained"""
        if location is None:
            if not self.position_lost:
                self._log("Position unavailable")
            self.position_lost = True
            return self.display

        if self.position_lost:
            self._log("Position restored", location.to_dict())
        self.position_lost = False
        self.current_location = location

        if self.route is None or self.session is None:
            return None
        if self.route.is_fallback:
            return self._update_fallback(location.coordinate)

        guidance = self.session.update(location.coordinate)
        if guidance and guidance.announcement:
            self._log("Maneuver announced", {
                "index": guidance.index,
                "category": guidance.category.value,
                "distance": round(guidance.distance, 1),
            })
        return guidance

    def _update_fallback(self, position: Coordinate) -> Guidance:
        """Compass guidance straight toward the destination"""
        destination = self.request.destination
        distance = haversine_distance(position, destination)
        close_range = self.config["close_range_distance"]
        announcement = None

        if distance < close_range:
            category = ManeuverCategory.ARRIVAL
            text = phrase(category, distance, self.language, close_range)
            if not self._fallback_arrived:
                self._fallback_arrived = True
                if self.audio_enabled:
                    announcement = text
                    self._speak(text)
        else:
            category = ManeuverCategory.STRAIGHT
            compass = bearing_to_compass(bearing_between(position, destination))
            text = status_text(
                "head", self.language,
                compass=compass_name(compass, self.language),
                distance=format_distance(distance, self.language),
            )

        self._fallback_display = Guidance(
            text=text,
            distance=distance,
            category=category,
            index=-1,
            symbol=direction_symbol(category),
            announcement=announcement,
        )
        return self._fallback_display

    def set_language(self, language: str):
        self.language = normalize_language(language)
        if self.session:
            self.session.set_language(self.language)
        if self.audio:
            self.audio.set_language(self.language)
        self._log("Language changed", {"language": self.language})

    def set_audio_enabled(self, enabled: bool):
        self.audio_enabled = enabled
        if self.session:
            self.session.set_audio_enabled(enabled)
        self._log("Audio " + ("enabled" if enabled else "muted"))

    def get_state(self) -> dict:
        """Current state as a dict for logging and presentation"""
        state = {
            "mode": self.mode.value,
            "language": self.language,
            "audio_enabled": self.audio_enabled,
            "generation": self.generations.latest,
            "route": None,
            "guidance": None,
            "message": None,
            "finished": self.finished,
        }
        if self.route:
            state["route"] = {
                "provider": self.route.provider,
                "fallback": self.route.is_fallback,
                "distance": round(self.route.distance, 1),
                "duration": round(self.route.duration, 1),
                "geometry": [c.to_list() for c in self.route.geometry],
                "steps": len(self.route.steps),
            }
        if self.display:
            state["guidance"] = self.display.to_dict()
        if self.current_location is None:
            state["message"] = status_text("no_position", self.language)
        else:
            state["location"] = self.current_location.to_dict()
        return state

    def get_poll_interval(self, source) -> float:
        if isinstance(source, GPSPlayback):
            return source.get_poll_interval()
        return self.config["gps_poll_interval"]

    def run(self, source):
        """Follow the active route with positions from source until arrival"""
        print("\n=== citynav ===")
        if self.route:
            print(f"Route: {self.route.distance:.0f}m via {self.route.provider}, "
                  f"about {self.route.duration/60:.1f} minutes")
        if isinstance(source, GPSPlayback):
            print(f"Playback mode: {source.speed}x speed")
        print("Press Ctrl+C to stop\n")

        start_time = time.time()
        last_status = 0.0
        last_text = None
        try:
            while True:
                self.drain_results()
                guidance = self.on_position(source.get_location())

                if guidance and guidance.text != last_text:
                    print(f"{guidance.symbol} {guidance.text}")
                    last_text = guidance.text

                if time.time() - last_status >= self.config["log_interval"]:
                    last_status = time.time()
                    self._log("Status", {
                        "gps_status": source.get_status(),
                        "guidance": guidance.to_dict() if guidance else None,
                    })

                if self.finished:
                    self._log("Trip complete")
                    print("Arrived!")
                    break
                if isinstance(source, GPSPlayback) and source.is_finished():
                    self._log("Playback finished")
                    print("\nPlayback finished")
                    break
                time.sleep(self.get_poll_interval(source))
        except KeyboardInterrupt:
            print("\nTrip interrupted")
            self._log("Trip interrupted by user")
        finally:
            if isinstance(source, GPSRecorder):
                source.save()
            duration = time.time() - start_time
            self._log("Trip summary", {"duration": round(duration, 1), "finished": self.finished})
            print(f"\nTrip duration: {duration/60:.1f} minutes")
