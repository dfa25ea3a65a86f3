# provider_openweather.py
# OpenWeather collaborators: direct geocoding for suggestions, current weather for the card.

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from weatherly import config
from weatherly.errors import MissingApiKey, SuggestionLookupFailed, WeatherSearchFailed
from weatherly.stats import STAT_GEOCODE_CALLS, STAT_GEOCODE_FAILURES, STAT_WEATHER_CALLS, STAT_WEATHER_FAILURES

logger = logging.getLogger(__name__)

GEOCODE_PATH = "/geo/1.0/direct"
WEATHER_PATH = "/data/2.5/weather"
UNITS = "metric"

Counter = Callable[[str], Awaitable[None]]


def _reason(resp: httpx.Response) -> str:
    # HTTP/2 responses carry no reason phrase
    return resp.reason_phrase or httpx.codes.get_reason_phrase(resp.status_code)


class OpenWeatherClient:
    """Thin async client over the two OpenWeather endpoints the widget needs.

    When no `client` is given, every call opens its own short-lived
    `httpx.AsyncClient`, so the object is safe to build per request.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        counter: Optional[Counter] = None,
    ):
        self.api_key = config.OPENWEATHER_API_KEY if api_key is None else api_key
        self.base_url = (base_url or config.OPENWEATHER_BASE_URL).rstrip("/")
        self.timeout = config.HTTP_TIMEOUT if timeout is None else timeout
        self._client = client
        self._counter = counter

    async def _count(self, key: str) -> None:
        if self._counter is not None:
            await self._counter(key)

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        url = self.base_url + path
        params = {**params, "appid": self.api_key}
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(http2=True) as client:
            return await client.get(url, params=params, timeout=self.timeout)

    async def geocode(self, query: str, limit: int) -> List[Dict[str, Any]]:
        """Return raw `{name, state?, country?}` entries, best match first."""
        await self._count(STAT_GEOCODE_CALLS)
        try:
            resp = await self._get(GEOCODE_PATH, {"q": query, "limit": limit})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            await self._count(STAT_GEOCODE_FAILURES)
            raise SuggestionLookupFailed(f"geocode {query!r}: {e}") from e
        if not isinstance(data, list):
            await self._count(STAT_GEOCODE_FAILURES)
            raise SuggestionLookupFailed(f"geocode {query!r}: unexpected payload {type(data).__name__}")
        return data

    async def current_weather(self, place: str) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingApiKey()
        await self._count(STAT_WEATHER_CALLS)
        try:
            resp = await self._get(WEATHER_PATH, {"q": place, "units": UNITS})
        except httpx.HTTPError as e:
            await self._count(STAT_WEATHER_FAILURES)
            raise WeatherSearchFailed(str(e) or "Request failed") from e
        if not resp.is_success:
            await self._count(STAT_WEATHER_FAILURES)
            raise WeatherSearchFailed(f"Error {resp.status_code}: {_reason(resp)}", resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            await self._count(STAT_WEATHER_FAILURES)
            raise WeatherSearchFailed("Request failed", resp.status_code) from e
