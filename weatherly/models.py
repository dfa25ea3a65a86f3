from typing import Optional, List, Literal, Dict, Any, Union, Annotated
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

ICON_URL = "https://openweathermap.org/img/wn/{icon}@4x.png"
DEFAULT_ICON = "01d"


class Suggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str   # "Algiers, DZ"
    value: str   # "Algiers,DZ"


class SuggestionState(BaseModel):
    query: str = ""
    items: List[Suggestion] = Field(default_factory=list)
    open: bool = False
    highlight_index: int = -1

    @property
    def highlighted(self) -> Optional[Suggestion]:
        if 0 <= self.highlight_index < len(self.items):
            return self.items[self.highlight_index]
        return None

    def clear(self) -> None:
        self.items = []
        self.open = False
        self.highlight_index = -1

    def close(self) -> None:
        self.open = False
        self.highlight_index = -1


# ----------------- OpenWeather payload -----------------

class Condition(BaseModel):
    main: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None


class Readings(BaseModel):
    temp: float
    temp_min: float
    temp_max: float
    feels_like: float
    humidity: int
    pressure: int


class Wind(BaseModel):
    speed: float = 0.0


class WeatherResult(BaseModel):
    # extra="ignore" is the pydantic default; OpenWeather sends plenty we don't show
    name: str
    weather: List[Condition] = Field(default_factory=list)
    main: Readings
    wind: Wind = Field(default_factory=Wind)
    visibility: Optional[float] = None

    @property
    def condition(self) -> Condition:
        return self.weather[0] if self.weather else Condition()

    @property
    def theme(self) -> str:
        return (self.condition.main or "default").lower()

    @property
    def icon_url(self) -> str:
        return ICON_URL.format(icon=self.condition.icon or DEFAULT_ICON)

    def card(self) -> Dict[str, Any]:
        """Display values for the result card: rounded readings, visibility in km."""
        m = self.main
        return {
            "city": self.name,
            "description": self.condition.description or "",
            "temp": round(m.temp),
            "feels_like": round(m.feels_like),
            "temp_min": round(m.temp_min),
            "temp_max": round(m.temp_max),
            "humidity": m.humidity,
            "pressure": m.pressure,
            "wind_ms": round(self.wind.speed),
            "visibility_km": f"{(self.visibility or 0) / 1000:.1f}",
            "theme": self.theme,
            "icon_url": self.icon_url,
        }


class RequestStatus(BaseModel):
    kind: Literal["idle", "loading", "ready", "failed"] = "idle"
    result: Optional[WeatherResult] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> "RequestStatus":
        return cls(kind="idle")

    @classmethod
    def loading(cls) -> "RequestStatus":
        return cls(kind="loading")

    @classmethod
    def ready(cls, result: WeatherResult) -> "RequestStatus":
        return cls(kind="ready", result=result)

    @classmethod
    def failed(cls, message: str) -> "RequestStatus":
        return cls(kind="failed", message=message)

    @property
    def theme(self) -> str:
        return self.result.theme if self.result else "default"


# ----------------- Widget events (WebSocket) -----------------

class InputEvent(BaseModel):
    type: Literal["input"]
    text: str = ""


class KeyEvent(BaseModel):
    type: Literal["key"]
    key: str


class PickEvent(BaseModel):
    type: Literal["pick"]
    index: int


class HoverEvent(BaseModel):
    type: Literal["hover"]
    index: Optional[int] = None


class PointerEvent(BaseModel):
    type: Literal["pointer"]
    inside: bool


class SearchEvent(BaseModel):
    type: Literal["search"]
    text: Optional[str] = None


WidgetEvent = Annotated[
    Union[InputEvent, KeyEvent, PickEvent, HoverEvent, PointerEvent, SearchEvent],
    Field(discriminator="type"),
]
widget_event = TypeAdapter(WidgetEvent)
