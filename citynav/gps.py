"""Position sources: live Termux GPS, trace recording and trace playback."""

import json
import subprocess
import time
from datetime import datetime
from enum import Enum
from typing import Optional

from .config import CONFIG
from .models import Location


class PositionError(Enum):
    """Why the last fix could not be obtained"""
    DENIED = "permission_denied"
    UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"


class GPS:
    """GPS access via Termux API"""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self.last_location: Optional[Location] = None
        self.last_error: Optional[PositionError] = None
        self.consecutive_failures = 0

    def _fail(self, error: PositionError) -> None:
        self.consecutive_failures += 1
        self.last_error = error
        return None

    def get_location(self) -> Optional[Location]:
        """Get current location using termux-location"""
        try:
            result = subprocess.run(
                ["termux-location", "-p", "gps", "-r", "once"],
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            return self._fail(PositionError.TIMEOUT)
        except FileNotFoundError:
            return self._fail(PositionError.UNAVAILABLE)

        if result.returncode != 0:
            stderr = (result.stderr or "").lower()
            if "permission" in stderr or "denied" in stderr:
                return self._fail(PositionError.DENIED)
            return self._fail(PositionError.UNAVAILABLE)

        if not result.stdout or not result.stdout.strip():
            return self._fail(PositionError.UNAVAILABLE)

        try:
            data = json.loads(result.stdout)
            location = Location(
                lat=data["latitude"],
                lon=data["longitude"],
                accuracy=data.get("accuracy"),
                timestamp=time.time()
            )
        except (json.JSONDecodeError, KeyError):
            return self._fail(PositionError.UNAVAILABLE)

        self.last_location = location
        self.last_error = None
        self.consecutive_failures = 0
        return location

    def get_status(self) -> str:
        """Get GPS status string"""
        if self.consecutive_failures == 0:
            acc = ""
            if self.last_location and self.last_location.accuracy:
                acc = f", accuracy {self.last_location.accuracy:.0f}m"
            return f"GPS OK{acc}"
        return f"GPS: {self.last_error.value}, {self.consecutive_failures} consecutive failures"


class GPSRecorder:
    """Wraps a position source and records every poll to a trace file"""

    def __init__(self, source, record_path: str):
        self.source = source
        self.record_path = record_path
        self.trace: list[dict] = []
        self.start_time = time.time()

    def get_location(self) -> Optional[Location]:
        location = self.source.get_location()

        # Failed polls are recorded too so playback reproduces outages
        self.trace.append({
            "elapsed": time.time() - self.start_time,
            "timestamp": time.time(),
            "location": location.to_dict() if location else None,
            "status": self.source.get_status()
        })
        return location

    def get_status(self) -> str:
        return self.source.get_status()

    def save(self):
        with open(self.record_path, "w") as f:
            json.dump({
                "recorded_at": datetime.now().isoformat(),
                "trace": self.trace
            }, f, indent=2)
        print(f"GPS trace saved to {self.record_path} ({len(self.trace)} entries)")


class GPSPlayback:
    """Plays back a recorded GPS trace"""

    def __init__(self, playback_path: str, speed: float = 1.0):
        self.playback_path = playback_path
        self.speed = speed
        self.index = 0
        self.last_location: Optional[Location] = None
        self.consecutive_failures = 0

        with open(playback_path) as f:
            self.trace: list[dict] = json.load(f)["trace"]

    def get_location(self) -> Optional[Location]:
        """Next entry of the trace, None for recorded outages and past the end"""
        if self.index >= len(self.trace):
            return None

        entry = self.trace[self.index]
        self.index += 1

        if entry["location"]:
            self.last_location = Location.from_dict(entry["location"])
            self.consecutive_failures = 0
            return self.last_location
        self.consecutive_failures += 1
        return None

    def get_poll_interval(self) -> float:
        """Wait before the next poll, from the recorded timing scaled by speed"""
        if self.index <= 0 or self.index >= len(self.trace):
            return CONFIG["gps_poll_interval"] / self.speed

        delta = self.trace[self.index].get("elapsed", 0) - self.trace[self.index - 1].get("elapsed", 0)
        return max(0.1, min(delta / self.speed, 5.0))

    def is_finished(self) -> bool:
        return self.index >= len(self.trace)

    def get_status(self) -> str:
        progress = f"{self.index}/{len(self.trace)}"
        if self.consecutive_failures == 0:
            return f"Playback OK ({progress})"
        return f"Playback: {self.consecutive_failures} failures ({progress})"
