"""
Runtime settings, read once from the environment.

    ROCKETCART_API_URL       base URL of the product/stock service
    ROCKETCART_API_TIMEOUT   request timeout in seconds
    ROCKETCART_CART_KEY      key of the durable cart slot
    ROCKETCART_LANGUAGE      language of user-facing messages (pt, en)
    UPSTASH_REDIS_REST_URL   key-value backend
    UPSTASH_REDIS_REST_TOKEN
"""

import os


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


API_URL = os.environ.get("ROCKETCART_API_URL", "http://localhost:3333").rstrip("/")
API_TIMEOUT = _float_env("ROCKETCART_API_TIMEOUT", 5.0)

CART_KEY = os.environ.get("ROCKETCART_CART_KEY", "@RocketShoes:cart")

LANGUAGE = os.environ.get("ROCKETCART_LANGUAGE", "pt")

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")
