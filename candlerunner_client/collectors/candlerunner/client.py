"""HTTP client for the candlerunner service using aiohttp."""
import json
import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base class for candlerunner service failures."""

    pass


class ApiError(ServiceError):
    """Raised when the service answers with a non-2xx status."""

    def __init__(self, status: int, message: str, url: str | None = None):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.url = url


class ResponseDecodeError(ServiceError):
    """Raised when a response body is not valid JSON."""

    pass


class ServiceClient:
    """Read-only JSON client for the candlerunner service.

    Attributes:
        base_url: Service root, e.g. ``http://127.0.0.1:27001``
        timeout_seconds: Total request timeout; None keeps aiohttp's default
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Service root URL
            timeout_seconds: Optional total timeout per request
            session: Shared session to use. If omitted, a session is
                opened for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session

        logger.debug(
            "INIT: ServiceClient initialized",
            extra={
                "extra_data": {
                    "action": "client_init",
                    "base_url": self.base_url,
                    "timeout_seconds": timeout_seconds,
                    "shared_session": session is not None,
                }
            },
        )

    def url_for(self, path: str) -> str:
        """Build the absolute URL for an endpoint path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str) -> Any:
        """GET an endpoint and decode its JSON body.

        Args:
            path: Endpoint path, e.g. ``/list-accounts``

        Returns:
            Decoded JSON value

        Raises:
            ApiError: If the service answers with a non-2xx status
            ResponseDecodeError: If the body is not valid JSON
            aiohttp.ClientError: If the request itself fails
        """
        url = self.url_for(path)

        logger.debug(
            "STEP 1/2: Requesting endpoint",
            extra={"extra_data": {"action": "get_start", "url": url}},
        )

        if self._session is not None:
            status, body = await self._fetch(self._session, url)
        else:
            async with aiohttp.ClientSession() as session:
                status, body = await self._fetch(session, url)

        if not 200 <= status < 300:
            raise ApiError(status, self._error_message(body), url=url)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise ResponseDecodeError(f"Invalid JSON from {url}: {e}") from e

        logger.debug(
            "STEP 2/2: Endpoint responded",
            extra={
                "extra_data": {
                    "action": "get_success",
                    "url": url,
                    "status": status,
                    "bytes": len(body),
                }
            },
        )

        return data

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> tuple[int, str]:
        kwargs = {}
        if self.timeout_seconds is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout_seconds)

        async with session.get(url, **kwargs) as response:
            return response.status, await response.text()

    @staticmethod
    def _error_message(body: str) -> str:
        """Extract the service's ``{"message": ...}`` error text if present."""
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return body or "no response body"

        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return payload["message"]
        return body

    async def close(self) -> None:
        """Close the shared session, if any."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("Closed service client session")
