# Project: weather-now
# Owner: GreenUnicorn
# Built with: Claude (Anthropic)
"""
utils.py — Shared utilities: HTTP JSON fetching, provider errors, logging
setup and local-clock formatting.

There is deliberately no retry here: a failed provider call is final, and
callers decide whether that means "no candidates" or a surfaced error.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

DEFAULT_LOG_PATH = Path("logs/weather_now.log")
DEFAULT_TIMEOUT_SECONDS = 10
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """A third-party HTTP call failed or returned a non-success status.

    Attributes:
        status_code: HTTP status of the response, or None when the request
            never produced one (DNS failure, timeout, refused connection).
        url: The endpoint that was called.
    """

    def __init__(self, message: str, status_code: int | None = None, url: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def get_json(
    url: str,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    label: str = "API call",
) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        url: Endpoint URL.
        params: Query-string parameters.
        headers: Extra request headers (e.g. a User-Agent for Nominatim).
        timeout: Request timeout in seconds.
        label: Human-readable name for the call, used in error messages.

    Returns:
        The decoded JSON document.

    Raises:
        ProviderError: On network failure, non-success status, or a body
            that is not valid JSON.
    """
    try:
        r = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise ProviderError(f"{label} failed: {e}", url=url) from e

    if not r.ok:
        raise ProviderError(
            f"{label} failed ({r.status_code})", status_code=r.status_code, url=url
        )

    try:
        return r.json()
    except ValueError as e:
        raise ProviderError(
            f"{label} returned invalid JSON", status_code=r.status_code, url=url
        ) from e


def setup_logging(
    log_path: Path = DEFAULT_LOG_PATH,
    level: str = "INFO",
) -> logging.Logger:
    """Attach a file handler for the weather_now package logger.

    Safe to call repeatedly (Streamlit reruns the app script on every
    interaction): an existing handler for the same file is reused.

    Args:
        log_path: Destination log file path.
        level: Logging level name, e.g. 'INFO' or 'DEBUG'.

    Returns:
        The configured 'weather_now' logger.
    """
    pkg_logger = logging.getLogger("weather_now")
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    target = str(log_path.resolve())
    for handler in pkg_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == target:
            return pkg_logger

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        # Never crash on logging failure
        pkg_logger.warning("Could not open log file %s: %s", log_path, e)
        return pkg_logger

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    pkg_logger.addHandler(handler)
    return pkg_logger


def format_local_time(timezone: str | None, now: datetime | None = None) -> str:
    """Format the current wall-clock time in an IANA time zone.

    Args:
        timezone: IANA zone id such as 'Asia/Kolkata'. The 'auto' sentinel,
            empty values and unknown zones yield an empty string.
        now: Reference instant (timezone-aware); defaults to the current time.

    Returns:
        24-hour 'HH:MM' string, or '' when the zone cannot be determined.
    """
    if not timezone or timezone == "auto":
        return ""
    try:
        zone = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("Unknown time zone %r", timezone)
        return ""
    moment = now.astimezone(zone) if now is not None else datetime.now(zone)
    return moment.strftime("%H:%M")
