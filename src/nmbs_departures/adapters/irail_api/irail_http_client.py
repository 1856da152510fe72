"""HTTP client for iRail requests."""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from nmbs_departures.adapters.irail_api.constants import DEFAULT_HEADERS, DEFAULT_USER_AGENT
from nmbs_departures.adapters.irail_api.request_logger import log_api_request
from nmbs_departures.domain.constants import DEFAULT_LANGUAGE
from nmbs_departures.domain.models.protocol_error import ErrorKind
from nmbs_departures.domain.models.result import Err, Ok, Result

if TYPE_CHECKING:
    from aiohttp import ClientSession

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def status_reason(status_code: int | None) -> str:
    """Human readable reason for a failed HTTP status."""
    if status_code == 429:
        return "Rate limit exceeded"
    if status_code == 502:
        return "Bad gateway (server error)"
    if status_code == 503:
        return "Service unavailable"
    if status_code == 504:
        return "Gateway timeout"
    if status_code is not None:
        return f"HTTP {status_code}"
    return "Unknown error"


class IRailHttpClient:
    """Performs GET requests against iRail and validates the JSON body.

    Every failure is returned as a FETCH_FAILED error; nothing is retried.
    """

    def __init__(
        self,
        session: "ClientSession",
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: int = 10,
        language: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            user_agent: User-Agent header sent with every request.
            timeout_seconds: Total timeout per request.
            language: Returns the language to request station names in.
        """
        self._session = session
        self._headers = {**DEFAULT_HEADERS, "User-Agent": user_agent}
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._language = language or (lambda: DEFAULT_LANGUAGE)

    async def get(self, url: str, params: Mapping[str, str], model: type[M]) -> Result[M]:
        """GET ``url`` and parse the response body into ``model``."""
        query = {**params, "format": "json", "lang": self._language()}
        log_api_request("GET", url, query)

        try:
            async with self._session.get(
                url, params=query, headers=self._headers, timeout=self._timeout
            ) as response:
                if response.status != 200:
                    return await self._error_response(response, url)
                data: Any = await response.json(content_type=None)
            return Ok(model.model_validate(data))
        except asyncio.TimeoutError:
            logger.warning(f"iRail request to {url} timed out")
            return Err.of(ErrorKind.FETCH_FAILED, "Request timed out")
        except aiohttp.ClientError as e:
            logger.warning(f"iRail request to {url} failed: {e}")
            return Err.of(ErrorKind.FETCH_FAILED, f"Network error: {e}")
        except ValidationError as e:
            logger.warning(f"Unexpected iRail response from {url}: {e.error_count()} error(s)")
            return Err.of(ErrorKind.FETCH_FAILED, "Unexpected response format")
        except ValueError as e:
            logger.warning(f"Invalid JSON from {url}: {e}")
            return Err.of(ErrorKind.FETCH_FAILED, "Invalid JSON response")

    async def _error_response(self, response: aiohttp.ClientResponse, url: str) -> Err:
        body = await response.text()
        reason = status_reason(response.status)
        logger.error(
            f"iRail returned status {response.status} for {url}: "
            f"{body[:200] if body else '(empty response body)'}"
        )
        if response.status == 429:
            retry_after = response.headers.get("Retry-After")
            logger.warning(f"Rate limit (429) detected, Retry-After: {retry_after}")
        return Err.of(ErrorKind.FETCH_FAILED, reason, response.status)
