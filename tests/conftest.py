import asyncio
from typing import Any, Dict, List, Optional

import pytest

PARIS = {
    "name": "Paris",
    "weather": [{"main": "Clouds", "description": "broken clouds", "icon": "04d"}],
    "main": {"temp": 14.6, "temp_min": 12.2, "temp_max": 16.4, "feels_like": 13.9,
             "humidity": 71, "pressure": 1016},
    "wind": {"speed": 4.6},
    "visibility": 10000,
}


class FakeOpenWeather:
    """Stands in for OpenWeatherClient; records every call."""

    def __init__(self, api_key: Optional[str] = "test-key",
                 places: Optional[Dict[str, List[Dict[str, Any]]]] = None,
                 weather: Optional[Dict[str, Any]] = None):
        self.api_key = api_key
        self.places = places or {}
        self.weather = weather or PARIS
        self.geocode_calls: List[tuple] = []
        self.weather_calls: List[str] = []
        self.geocode_error: Optional[Exception] = None
        self.weather_error: Optional[Exception] = None
        self.geocode_delays: Dict[str, float] = {}

    async def geocode(self, query: str, limit: int) -> List[Dict[str, Any]]:
        self.geocode_calls.append((query, limit))
        if query in self.geocode_delays:
            await asyncio.sleep(self.geocode_delays[query])
        if self.geocode_error is not None:
            raise self.geocode_error
        return self.places.get(query, [])[:limit]

    async def current_weather(self, place: str) -> Dict[str, Any]:
        self.weather_calls.append(place)
        await asyncio.sleep(0)
        if self.weather_error is not None:
            raise self.weather_error
        return dict(self.weather, name=place.split(",")[0])


@pytest.fixture
def fake():
    return FakeOpenWeather(places={
        "Pa": [{"name": "Paris", "country": "FR"}, {"name": "Paris", "state": "Texas", "country": "US"}],
        "Par": [{"name": "Paris", "country": "FR"}],
        "Alg": [{"name": "Algiers", "country": "DZ"}],
    })
