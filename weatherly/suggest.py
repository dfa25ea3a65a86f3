# suggest.py
# City autosuggest: debounced geocoding lookups plus keyboard/mouse selection state.

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Set

from weatherly import config
from weatherly.debounce import Debouncer
from weatherly.models import Suggestion, SuggestionState

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    api_key: Optional[str]

    async def geocode(self, query: str, limit: int) -> List[Dict[str, Any]]: ...


def to_suggestion(entry: Dict[str, Any]) -> Suggestion:
    """{"name": "Paris", "country": "FR"} -> Suggestion("Paris, FR", "Paris,FR")"""
    name = entry["name"]
    state = entry.get("state")
    country = entry.get("country")
    label = ", ".join(p for p in (name, state, country) if p)
    value = f"{name},{country}" if country else name
    return Suggestion(label=label, value=value)


class SuggestionEngine:
    """Owns one SuggestionState and mutates it in response to UI events.

    `confirm` is called with the final query text whenever the user commits
    (Enter, pick). `on_change` is called after every state mutation, including
    the ones that happen later when a debounced lookup completes.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        confirm: Callable[[str], None],
        *,
        delay: Optional[float] = None,
        limit: Optional[int] = None,
        min_chars: Optional[int] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.geocoder = geocoder
        self.confirm = confirm
        self.limit = config.SUGGEST_LIMIT if limit is None else limit
        self.min_chars = config.SUGGEST_MIN_CHARS if min_chars is None else min_chars
        self.on_change = on_change
        self.state = SuggestionState()
        self._debounce = Debouncer(config.SUGGEST_DEBOUNCE_MS / 1000 if delay is None else delay)
        self._seq = 0
        self._tasks: Set[asyncio.Task] = set()

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _invalidate(self) -> None:
        # any lookup issued before this point is stale
        self._debounce.cancel()
        self._seq += 1

    # ----------------- Input -----------------

    def on_input_change(self, text: str) -> None:
        self.state.query = text
        if len(text.strip()) < self.min_chars or not self.geocoder.api_key:
            self._invalidate()
            self.state.clear()
        else:
            self._debounce.schedule(self._start_lookup)
        self._changed()

    def _start_lookup(self) -> None:
        self._seq += 1
        task = asyncio.create_task(self._lookup(self._seq, self.state.query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _lookup(self, seq: int, query: str) -> None:
        try:
            raw = await self.geocoder.geocode(query, self.limit)
            items = [to_suggestion(e) for e in raw or []]
        except Exception as e:  # never surfaced; manual search still works
            if seq != self._seq:
                return
            logger.debug("suggestions for %r dropped: %s", query, e)
            self.state.clear()
        else:
            if seq != self._seq:
                logger.debug("stale suggestions for %r discarded", query)
                return
            self.state.items = items
            self.state.open = bool(items)
            self.state.highlight_index = -1
        self._changed()

    # ----------------- Selection -----------------

    def on_key_down(self, key: str) -> bool:
        """Handle a key press; returns True when the default action should be suppressed."""
        st = self.state
        if st.open and key in ("ArrowDown", "ArrowUp"):
            last = len(st.items) - 1
            if key == "ArrowDown":
                st.highlight_index = 0 if st.highlight_index >= last else st.highlight_index + 1
            else:
                st.highlight_index = last if st.highlight_index <= 0 else st.highlight_index - 1
            self._changed()
            return True
        if key == "Enter":
            picked = st.highlighted if st.open else None
            if picked is not None:
                self.pick(picked)
            else:
                self.submit()
            return False
        if key == "Escape":
            st.close()
            self._changed()
        return False

    def pick(self, suggestion: Suggestion) -> None:
        self._invalidate()
        self.state.query = suggestion.value
        self.state.close()
        self._changed()
        self.confirm(suggestion.value)

    def pick_index(self, index: int) -> None:
        if not self.state.open:
            return
        if 0 <= index < len(self.state.items):
            self.pick(self.state.items[index])

    def submit(self) -> None:
        """Confirm the raw query text as typed."""
        self._invalidate()
        if self.state.open:
            self.state.close()
            self._changed()
        self.confirm(self.state.query)

    def hover(self, index: Optional[int]) -> None:
        st = self.state
        if not st.open:
            return
        if index is not None and 0 <= index < len(st.items):
            st.highlight_index = index
        else:
            st.highlight_index = -1
        self._changed()

    def on_focus_loss(self, inside: bool) -> None:
        """Pointer went down somewhere; `inside` says whether it hit the widget."""
        if inside or not self.state.open:
            return
        self.state.open = False
        self._changed()

    async def aclose(self) -> None:
        self._invalidate()
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
