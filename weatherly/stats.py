# stats.py
# Fail-open Redis counters for upstream calls. Weather data itself is never stored.

from typing import Dict, Optional

import redis.asyncio as redis

from weatherly import config

_pool = redis.ConnectionPool.from_url(
    config.REDIS_URL,
    max_connections=config.REDIS_POOL_MAX,
    socket_connect_timeout=1.0,
    socket_timeout=1.5,
    health_check_interval=30,
    retry_on_timeout=True,
    decode_responses=True,
)
r = redis.Redis(connection_pool=_pool)

STAT_GEOCODE_CALLS    = "stats:weatherly:geocode_calls"
STAT_GEOCODE_FAILURES = "stats:weatherly:geocode_failures"
STAT_WEATHER_CALLS    = "stats:weatherly:weather_calls"
STAT_WEATHER_FAILURES = "stats:weatherly:weather_failures"

ALL_STATS = (STAT_GEOCODE_CALLS, STAT_GEOCODE_FAILURES, STAT_WEATHER_CALLS, STAT_WEATHER_FAILURES)


async def incr(key: str, by: int = 1) -> None:
    try:
        await r.incrby(key, by)
    except Exception:
        pass  # fail-open


async def redis_ok() -> bool:
    try:
        await r.ping()
        return True
    except Exception:
        return False


def _ratio(part: int, total: int) -> Optional[float]:
    return (part / total) if total else None


async def stats() -> Dict:
    pipe = r.pipeline()
    for key in ALL_STATS:
        pipe.get(key)
    gc, gf, wc, wf = [int(v or 0) for v in await pipe.execute()]
    return {
        "geocode_calls": gc,
        "geocode_failures": gf,
        "geocode_failure_ratio": _ratio(gf, gc),
        "weather_calls": wc,
        "weather_failures": wf,
        "weather_failure_ratio": _ratio(wf, wc),
    }
