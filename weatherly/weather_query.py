# weather_query.py
# Confirmed place -> RequestStatus (idle / loading / ready / failed).

import logging
from typing import Any, Callable, Dict, Optional, Protocol

from pydantic import ValidationError

from weatherly import config
from weatherly.errors import MissingApiKey, WeatherSearchFailed
from weatherly.models import RequestStatus, WeatherResult

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Request failed"


class WeatherSource(Protocol):
    api_key: Optional[str]

    async def current_weather(self, place: str) -> Dict[str, Any]: ...


class WeatherQuery:
    def __init__(
        self,
        source: WeatherSource,
        *,
        default_place: Optional[str] = None,
        on_change: Optional[Callable[[RequestStatus], None]] = None,
    ):
        self.source = source
        self.default_place = default_place or config.DEFAULT_CITY
        self.on_change = on_change
        self.status = RequestStatus.idle()

    def _set(self, status: RequestStatus) -> RequestStatus:
        self.status = status
        if self.on_change is not None:
            self.on_change(status)
        return status

    def resolve(self, query_text: Optional[str]) -> str:
        return (query_text or "").strip() or self.default_place

    async def search(self, query_text: Optional[str]) -> RequestStatus:
        """Fetch current weather for `query_text`; blank text means the default place.

        Overlapping calls are not coalesced: whichever finishes last owns the status.
        """
        if not self.source.api_key:
            return self._set(RequestStatus.failed(MissingApiKey().message))
        place = self.resolve(query_text)
        self._set(RequestStatus.loading())
        try:
            payload = await self.source.current_weather(place)
            result = WeatherResult.model_validate(payload)
        except WeatherSearchFailed as e:
            logger.warning("weather search for %r failed: %s", place, e.message)
            return self._set(RequestStatus.failed(e.message or GENERIC_FAILURE))
        except ValidationError as e:
            logger.warning("weather payload for %r malformed: %s", place, e.error_count())
            return self._set(RequestStatus.failed(GENERIC_FAILURE))
        except Exception:
            logger.exception("weather search for %r crashed", place)
            return self._set(RequestStatus.failed(GENERIC_FAILURE))
        return self._set(RequestStatus.ready(result))
