"""Process-wide logging setup.

Loggers are namespaced under ``um.``:
  um.request — one line per HTTP request (RequestLogMiddleware)
  um.user    — user service failures
  um.cache   — swallowed cache failures
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the ``um`` logger tree."""
    root = logging.getLogger("um")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)


def redact(data: dict, *keys: str) -> dict:
    """Return a copy of ``data`` without the given keys (default: password)."""
    hidden = set(keys or ("password",))
    return {k: v for k, v in data.items() if k not in hidden}
