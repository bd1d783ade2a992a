"""Logging module for citynav."""

import json
import time
from datetime import datetime
from typing import Optional, Callable


class Logger:
    """Logs trip events to stdout, an optional file and an optional callback

    Once start_trip() has been called every line also carries the seconds
    elapsed since the trip began.
    """

    def __init__(self, log_path: Optional[str] = None, callback: Optional[Callable] = None,
                 echo: bool = True):
        self.log_path = log_path
        self.callback = callback
        self.echo = echo
        self.file = None
        self.trips = 0
        self.trip_started: Optional[float] = None
        if log_path:
            self.file = open(log_path, "a", encoding="utf-8")
            self._write_header()

    def _write_header(self):
        if self.file:
            self.file.write(f"\n{'='*60}\n")
            self.file.write(f"citynav trip log - {datetime.now().isoformat()}\n")
            self.file.write(f"{'='*60}\n\n")
            self.file.flush()

    def _emit(self, line: str):
        if self.echo:
            print(line)
        if self.file:
            self.file.write(line + "\n")
            self.file.flush()

    def start_trip(self, request):
        """Write a banner for a new route request and restart the elapsed clock"""
        self.trips += 1
        self.trip_started = time.monotonic()
        origin = ",".join(f"{v:.5f}" for v in request.origin.to_list())
        destination = ",".join(f"{v:.5f}" for v in request.destination.to_list())
        self._emit(f"--- trip {self.trips}: {request.mode.value} {origin} -> {destination} ---")

    def elapsed(self) -> Optional[float]:
        if self.trip_started is None:
            return None
        return time.monotonic() - self.trip_started

    def log(self, message: str, data: Optional[dict] = None):
        """Log a message with optional structured data"""
        timestamp = datetime.now().isoformat()
        elapsed = self.elapsed()
        if elapsed is None:
            line = f"[{timestamp}] {message}"
        else:
            line = f"[{timestamp} +{elapsed:.1f}s] {message}"
        if data:
            # Instructions may be Cyrillic; keep them readable in the file
            line += f" | {json.dumps(data, ensure_ascii=False, default=str)}"
        self._emit(line)
        if self.callback:
            self.callback(message, data)

    def close(self):
        if self.file:
            self.file.close()
            self.file = None
