# config.py
# Process-wide settings, read once from the environment.

import os

# ---- OpenWeather ----
OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
OPENWEATHER_BASE_URL = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "5.0"))

# ---- Widget ----
DEFAULT_CITY = os.getenv("DEFAULT_CITY", "Algiers")
SUGGEST_DEBOUNCE_MS = int(os.getenv("SUGGEST_DEBOUNCE_MS", "250"))
SUGGEST_LIMIT = int(os.getenv("SUGGEST_LIMIT", "6"))
SUGGEST_MIN_CHARS = int(os.getenv("SUGGEST_MIN_CHARS", "2"))

# ---- Redis (stats counters only) ----
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_POOL_MAX = int(os.getenv("REDIS_POOL_MAX", "50"))

# ---- HTTP surface ----
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://127.0.0.1:5500,http://localhost:5500").split(",")
    if o.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
