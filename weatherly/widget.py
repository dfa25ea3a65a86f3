# widget.py
# One search box: SuggestionEngine + WeatherQuery behind a single dispatch().

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Set

from weatherly.models import (
    HoverEvent,
    InputEvent,
    KeyEvent,
    PickEvent,
    PointerEvent,
    SearchEvent,
    widget_event,
)
from weatherly.suggest import Geocoder, SuggestionEngine
from weatherly.weather_query import WeatherQuery, WeatherSource

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any]], None]


class Widget:
    def __init__(
        self,
        geocoder: Geocoder,
        source: WeatherSource,
        *,
        listener: Optional[Listener] = None,
        delay: Optional[float] = None,
        default_place: Optional[str] = None,
    ):
        self.listener = listener
        self.suggest = SuggestionEngine(geocoder, self._confirm, delay=delay, on_change=self._changed)
        self.weather = WeatherQuery(source, default_place=default_place,
                                    on_change=lambda _status: self._changed())
        self._searches: Set[asyncio.Task] = set()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "suggest": self.suggest.state.model_dump(),
            "status": self.weather.status.model_dump(mode="json"),
            "theme": self.weather.status.theme,
        }

    def _changed(self) -> None:
        if self.listener is not None:
            self.listener(self.snapshot())

    def _confirm(self, query: str) -> None:
        task = asyncio.create_task(self.weather.search(query))
        self._searches.add(task)
        task.add_done_callback(self._searches.discard)

    def dispatch(self, raw: Dict[str, Any]) -> bool:
        """Apply one UI event. Returns True when the client should suppress its default action.

        Raises pydantic.ValidationError for events it does not understand.
        """
        event = widget_event.validate_python(raw)
        if isinstance(event, InputEvent):
            self.suggest.on_input_change(event.text)
        elif isinstance(event, KeyEvent):
            return self.suggest.on_key_down(event.key)
        elif isinstance(event, PickEvent):
            self.suggest.pick_index(event.index)
        elif isinstance(event, HoverEvent):
            self.suggest.hover(event.index)
        elif isinstance(event, PointerEvent):
            self.suggest.on_focus_loss(event.inside)
        elif isinstance(event, SearchEvent):
            if event.text is not None:
                self.suggest.state.query = event.text
            self.suggest.submit()
        return False

    async def idle(self) -> None:
        """Wait for outstanding weather searches (tests, shutdown)."""
        if self._searches:
            await asyncio.gather(*list(self._searches), return_exceptions=True)

    async def aclose(self) -> None:
        await self.suggest.aclose()
        for task in list(self._searches):
            task.cancel()
        await self.idle()
        logger.debug("widget closed")
