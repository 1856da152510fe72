"""Logging of outgoing iRail requests when NMBS_LOG_REQUESTS is enabled."""

import logging
import os
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def should_log_requests() -> bool:
    """Check if request logging is enabled via the NMBS_LOG_REQUESTS environment variable."""
    return os.getenv("NMBS_LOG_REQUESTS", "").lower() == "true"


def build_url(url: str, params: Mapping[str, Any] | None) -> str:
    """Full URL with sorted query parameters, for logs only."""
    if not params:
        return url
    query = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


def log_api_request(method: str, url: str, params: Mapping[str, Any] | None = None) -> None:
    """Log an outgoing request if NMBS_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters.
    """
    if not should_log_requests():
        return
    logger.info(f"API Request: {method} {build_url(url, params)}")
