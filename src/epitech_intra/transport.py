"""Retrying HTTP transport for the intranet.

Each request resolves its path to a JSON-mode URL and issues up to
``retry_count`` sequential GETs. The first attempt that yields a readable
body wins, whatever its status code: the intranet answers errors with JSON
bodies, so status interpretation is left to the decoder.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config import IntraConfig, get_config
from .endpoint import RequestDescriptor
from .errors import RequestError, RetryLimitError

__all__ = ["RetryingTransport"]

logger = logging.getLogger("epitech_intra.transport")

MAX_RETRY_DELAY = 10.0  # seconds


class RetryingTransport:
    """GET-only intranet transport with a fixed attempt budget.

    Uses one long-lived httpx.AsyncClient with connection pooling. Headers are
    fixed at construction (the authenticated transport carries the session
    cookie); nothing is mutated afterwards, so a transport can be shared by
    any number of client copies and tasks.

    Attributes:
        endpoint: Origin every path is resolved against
        retry_count: Attempts per request
        retry_delay: Base delay between attempts in seconds (0 = immediate)

    Example:
        >>> async with RetryingTransport() as transport:
        ...     body = await transport.request("/user/filter/location", {"active": True})
    """

    def __init__(
        self,
        config: IntraConfig | None = None,
        *,
        retry_count: int | None = None,
        headers: Mapping[str, str] | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            config: Optional IntraConfig. Uses get_config() if not provided.
            retry_count: Overrides config.intra_retry_count when given.
            headers: Default headers sent with every request (e.g. Cookie).
            http_transport: Optional httpx transport (proxies, test stubs).

        Raises:
            ValueError: If retry_count is not a positive integer.
        """
        config = config or get_config()
        self.endpoint = config.intra_endpoint
        self.retry_count = config.intra_retry_count if retry_count is None else retry_count
        if self.retry_count < 1:
            raise ValueError(f"retry_count must be >= 1, got {self.retry_count}")
        self.retry_delay = config.intra_retry_delay_ms / 1000.0

        timeout_config = httpx.Timeout(
            connect=config.intra_connect_timeout,
            read=config.intra_read_timeout,
            write=5.0,
            pool=config.intra_connect_timeout,
        )
        limits = httpx.Limits(
            max_keepalive_connections=10,
            max_connections=20,
            keepalive_expiry=10.0,
        )
        self._client = httpx.AsyncClient(
            timeout=timeout_config,
            limits=limits,
            headers={"Accept": "application/json", **(headers or {})},
            follow_redirects=True,
            transport=http_transport,
        )

    @property
    def headers(self) -> httpx.Headers:
        """Default headers sent with every request (read-only copy)."""
        return self._client.headers.copy()

    async def request(
        self,
        target: RequestDescriptor | str,
        params: Mapping[str, Any] | None = None,
    ) -> str:
        """Fetch a resource and return its body as text.

        Args:
            target: A RequestDescriptor, or a resource path
            params: Query parameters when ``target`` is a path

        Returns:
            Response body of the first attempt that completed.

        Raises:
            RetryLimitError: If every attempt failed (connect, timeout, read).
            RequestError: If the transport has been closed.
        """
        if isinstance(target, str):
            target = RequestDescriptor(target, params or {})
        url = target.resolve(self.endpoint)

        for attempt in range(self.retry_count):
            try:
                response = await self._client.get(url)
                body = response.text
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning(
                    "intra_request_attempt_failed",
                    extra={
                        "path": target.path,
                        "attempt": attempt + 1,
                        "max_attempts": self.retry_count,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                if attempt + 1 < self.retry_count and self.retry_delay > 0:
                    await asyncio.sleep(min(MAX_RETRY_DELAY, self.retry_delay * 2**attempt))
                continue
            except RuntimeError as e:
                # httpx raises RuntimeError once the client has been closed
                raise RequestError(str(e)) from e

            logger.debug(
                "intra_request_completed",
                extra={
                    "path": target.path,
                    "attempt": attempt + 1,
                    "status_code": response.status_code,
                    "bytes": len(body),
                },
            )
            return body

        logger.error(
            "intra_request_retry_limit",
            extra={"path": target.path, "attempts": self.retry_count},
        )
        raise RetryLimitError(self.retry_count, url)

    async def aclose(self) -> None:
        """Close the underlying httpx client and release connections."""
        await self._client.aclose()

    async def __aenter__(self) -> "RetryingTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
