# errors.py
# Failure kinds raised by the collaborators and the widget components.

from typing import Optional


class WeatherlyError(Exception):
    pass


class SuggestionLookupFailed(WeatherlyError):
    """Geocoding failed. Always recovered by the suggestion engine, never shown."""


class WeatherSearchFailed(WeatherlyError):
    """Weather lookup failed. The message is what the user gets to see."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingApiKey(WeatherSearchFailed):
    def __init__(self):
        super().__init__("Missing API key")
