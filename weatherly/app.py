# app.py
# FastAPI surface for the weather widget
# - /ws: one widget session per socket; client forwards UI events, server pushes snapshots
# - /suggest and /weather: stateless single lookups
# - /stats and /healthz

import asyncio
import json
import logging
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from weatherly import config
from weatherly.models import Suggestion
from weatherly.provider_openweather import OpenWeatherClient
from weatherly.stats import incr, redis_ok, stats
from weatherly.suggest import to_suggestion
from weatherly.weather_query import WeatherQuery
from weatherly.widget import Widget

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Weatherly", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_client() -> OpenWeatherClient:
    return OpenWeatherClient(counter=incr)


# ---- Endpoints ----
@app.get("/suggest", response_model=List[Suggestion])
async def suggest(
    q: str = Query("", description="Partial city name, e.g. 'Alg'"),
    client: OpenWeatherClient = Depends(get_client),
):
    if len(q.strip()) < config.SUGGEST_MIN_CHARS or not client.api_key:
        return []
    try:
        raw = await client.geocode(q, config.SUGGEST_LIMIT)
        return [to_suggestion(e) for e in raw]
    except Exception as e:
        logger.debug("/suggest %r failed: %s", q, e)
        return []


@app.get("/weather")
async def weather(
    city: str = Query("", description="City name, e.g. 'Algiers' or 'Algiers,DZ'"),
    client: OpenWeatherClient = Depends(get_client),
):
    """
    Current weather for a city; a blank city falls back to the default place.
    Example: ?city=Paris,FR
    """
    status = await WeatherQuery(client).search(city)
    if status.kind == "failed":
        code = 503 if not client.api_key else 502
        raise HTTPException(status_code=code, detail=status.message)
    result = status.result
    return {
        **result.model_dump(),
        "theme": result.theme,
        "icon_url": result.icon_url,
        "card": result.card(),
    }


@app.websocket("/ws")
async def widget_session(ws: WebSocket, client: OpenWeatherClient = Depends(get_client)):
    await ws.accept()
    outbox: asyncio.Queue = asyncio.Queue()
    widget = Widget(client, client, listener=outbox.put_nowait)

    async def pump():
        while True:
            await ws.send_json(await outbox.get())

    sender = asyncio.create_task(pump())
    outbox.put_nowait(widget.snapshot())
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            try:
                event = json.loads(message.get("text") or message.get("bytes") or "")
            except ValueError as e:
                outbox.put_nowait({"error": "bad_event", "detail": f"invalid JSON: {e}"})
                continue
            try:
                suppress = widget.dispatch(event)
            except ValidationError as e:
                outbox.put_nowait({"error": "bad_event", "detail": e.errors(include_url=False, include_context=False)})
                continue
            if suppress:
                outbox.put_nowait({"suppress_default": True})
    except WebSocketDisconnect:
        logger.debug("widget session closed by client")
    finally:
        await widget.aclose()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)


@app.get("/stats")
async def get_stats():
    return await stats()


@app.get("/healthz")
async def healthz():
    return {"redis_ok": await redis_ok(), "api_key_configured": bool(config.OPENWEATHER_API_KEY)}
