"""Loggers for rocketcart.

The package never installs handlers; the embedding application does. Only
the level of the `rocketcart` logger is taken from LOG_LEVEL.
"""

import logging
import os
from functools import cache

_ROOT_NAME = "rocketcart"

logging.getLogger(_ROOT_NAME).setLevel(
    getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
)


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_for_logging(value: object, max_length: int = 50) -> str:
    """Make caller-supplied ids/messages safe to put in a log line (CWE-117).

    Control characters are escaped and the result is cut to `max_length`.
    """
    if value is None or value == "":
        return "N/A"
    text = str(value).replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t").replace("\x00", "")
    return text if len(text) <= max_length else text[:max_length] + "..."
