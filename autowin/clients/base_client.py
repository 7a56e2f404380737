from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)

from autowin.config.settings import settings

# HTTP status codes that warrant a retry when retries are enabled
RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}


class ClientError(Exception):
    """Base exception for statistics service client errors."""

    pass


class RequestError(ClientError):
    """Raised for unsuccessful responses and transport failures.

    ``status_code`` is the HTTP status, or None when no response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(ClientError):
    """Raised when a response body is not the JSON shape we expect."""

    pass


class ConfigurationError(ClientError):
    """Raised when a client is missing required configuration."""

    pass


def _is_retryable(exc: BaseException) -> bool:
    if not isinstance(exc, RequestError):
        return False
    return exc.status_code is None or exc.status_code in RETRYABLE_STATUS_CODES


class BaseClient:
    """Thin JSON-over-HTTP client shared by the statistics services."""

    service: str = "unknown"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        attempts: Optional[int] = None,
    ):
        timeout = timeout if timeout is not None else settings.request_timeout
        self._owns_client = client is None
        if client is None:
            client_kwargs: Dict[str, Any] = {"follow_redirects": True}
            if timeout is not None:
                client_kwargs["timeout"] = httpx.Timeout(timeout)
            client = httpx.AsyncClient(**client_kwargs)
        self.client = client
        self.attempts = attempts or settings.request_attempts

    async def fetch_json(
        self, url: str, headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises:
            RequestError: non-2xx status or transport failure.
            ResponseFormatError: body is not valid JSON.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        ):
            with attempt:
                response = await self._get(url, headers)

        try:
            return response.json()
        except ValueError as e:
            logger.debug(
                f"Raw {self.service} response content: {response.text[:200]}"
            )
            raise ResponseFormatError(
                f"{self.service} returned a non-JSON body for {url}"
            ) from e

    async def _get(
        self, url: str, headers: Optional[Dict[str, str]]
    ) -> httpx.Response:
        logger.debug(f"GET {url}", service=self.service)
        try:
            response = await self.client.get(url, headers=headers)
        except httpx.TransportError as e:
            logger.warning(f"Transport error for {self.service} at {url}: {e}")
            raise RequestError(f"Transport error: {e}") from e

        if not response.is_success:
            logger.debug(
                f"{self.service} returned HTTP {response.status_code} for {url}"
            )
            raise RequestError(
                f"HTTP {response.status_code}", status_code=response.status_code
            )
        return response

    async def close(self) -> None:
        """Closes the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()
            logger.debug(f"Closed HTTP client for {self.service}")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
