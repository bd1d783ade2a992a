"""Spoken guidance output."""

import subprocess
from typing import Optional, Callable

from .localizer import normalize_language

# espeak voice names per interface language
VOICES = {
    "en": "en",
    "ru": "ru",
}


class Audio:
    """Text-to-speech for maneuver announcements"""

    def __init__(self, language: str = "en", rate: int = 150,
                 callback: Optional[Callable[[str], None]] = None):
        self.language = normalize_language(language)
        self.rate = rate
        self.callback = callback
        self._engine = None

    def set_language(self, language: str):
        self.language = normalize_language(language)

    def speak(self, text: str):
        """Speak text using espeak (available in Termux)"""
        if self.callback:
            self.callback(text)

        try:
            subprocess.run(
                ["espeak", "-v", VOICES[self.language], "-s", str(self.rate), text],
                capture_output=True,
                timeout=10
            )
        except FileNotFoundError:
            self._speak_pyttsx3(text)
        except subprocess.SubprocessError as e:
            print(f"Audio error: {e}")
            print(f"[AUDIO] {text}")

    def _speak_pyttsx3(self, text: str):
        # pyttsx3 is an optional extra; without it the text is printed
        try:
            import pyttsx3
        except ImportError:
            print(f"[AUDIO] {text}")
            return
        try:
            if self._engine is None:
                self._engine = pyttsx3.init()
            self._engine.say(text)
            self._engine.runAndWait()
        except (RuntimeError, OSError) as e:
            print(f"Audio error: {e}")
            print(f"[AUDIO] {text}")
