"""Autologin handshake.

An autologin link (``https://intra.epitech.eu/auth-<token>``) answers with a
redirect that sets the ``user`` session cookie. The handshake requests it
without following the redirect, keeps that cookie, and asks the intranet
who the cookie belongs to.
"""

import logging

import httpx

from .client import IntraClient
from .config import IntraConfig, get_config
from .errors import (
    CookieNotFoundError,
    InternalError,
    InvalidStatusCodeError,
    UnreachableRemoteError,
)
from .timing import timed_operation
from .transport import RetryingTransport

__all__ = ["ClientBuilder", "extract_session_cookie"]

logger = logging.getLogger("epitech_intra.auth")

SESSION_COOKIE_PREFIX = "user="


def extract_session_cookie(response: httpx.Response) -> str | None:
    """Return the ``user=<token>`` pair from the Set-Cookie headers, if any."""
    for value in response.headers.get_list("set-cookie"):
        if value.startswith(SESSION_COOKIE_PREFIX):
            return value.split(";", 1)[0]
    return None


class ClientBuilder:
    """Configuration for an unauthenticated client.

    Consumed by authenticate(); the setters return the builder so calls can
    be chained.

    Example:
        >>> client = await (
        ...     ClientBuilder()
        ...     .autologin("https://intra.epitech.eu/auth-0123abcd")
        ...     .retry_count(3)
        ...     .authenticate()
        ... )
        >>> client.login
        'jane.doe@epitech.eu'
    """

    def __init__(
        self,
        autologin: str | None = None,
        retry_count: int | None = None,
        *,
        config: IntraConfig | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._autologin = autologin
        self._retry_count = retry_count
        self._config = config
        self._http_transport = http_transport

    @classmethod
    def from_config(cls, config: IntraConfig | None = None) -> "ClientBuilder":
        """Builder preloaded with INTRA_AUTOLOGIN and INTRA_RETRY_COUNT."""
        config = config or get_config()
        autologin = (
            config.intra_autologin.get_secret_value() if config.intra_autologin else None
        )
        return cls(autologin, config.intra_retry_count, config=config)

    def autologin(self, url: str) -> "ClientBuilder":
        self._autologin = url
        return self

    def retry_count(self, count: int) -> "ClientBuilder":
        if count < 1:
            raise ValueError(f"retry_count must be >= 1, got {count}")
        self._retry_count = count
        return self

    async def authenticate(self) -> IntraClient:
        """Perform the autologin handshake.

        Returns:
            An IntraClient carrying the session cookie and the user's login.

        Raises:
            InvalidStatusCodeError: The autologin link answered with an error status.
            UnreachableRemoteError: The autologin link could not be requested.
            CookieNotFoundError: The answer set no ``user`` cookie.
            InternalError: No autologin link, or the HTTP client could not be built.
            RetryLimitError, ParserError: From the own-profile lookup.
        """
        config = self._config or get_config()
        with timed_operation(
            "intra_authenticate", logger, failure_level=logging.WARNING
        ):
            cookie = await self._fetch_session_cookie(config)

            try:
                transport = RetryingTransport(
                    config,
                    retry_count=self._retry_count,
                    headers={"Cookie": cookie},
                    http_transport=self._http_transport,
                )
            except (TypeError, ValueError) as e:
                raise InternalError(f"cannot build session transport: {e}") from e

            try:
                anonymous = IntraClient(
                    self._autologin, transport, default_course=config.intra_default_course
                )
                profile = await anonymous.fetch_student_data()
            except Exception:
                await transport.aclose()
                raise

            logger.info("intra_authenticated", extra={"login": profile.login})
            return IntraClient(
                self._autologin,
                transport,
                login=profile.login,
                default_course=config.intra_default_course,
            )

    async def _fetch_session_cookie(self, config: IntraConfig) -> str:
        if not self._autologin:
            raise InternalError("no autologin link configured")

        try:
            client = httpx.AsyncClient(
                follow_redirects=False,
                timeout=httpx.Timeout(
                    connect=config.intra_connect_timeout,
                    read=config.intra_read_timeout,
                    write=5.0,
                    pool=config.intra_connect_timeout,
                ),
                transport=self._http_transport,
            )
        except (TypeError, ValueError) as e:
            raise InternalError(f"cannot build handshake client: {e}") from e

        # An injected transport is shared with the session transport built
        # next, so only a client-owned transport is closed here.
        try:
            response = await client.get(self._autologin)
        except httpx.HTTPStatusError as e:
            raise InvalidStatusCodeError(e.response.status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UnreachableRemoteError(type(e).__name__) from e
        finally:
            if self._http_transport is None:
                await client.aclose()

        if response.status_code >= 400:
            raise InvalidStatusCodeError(response.status_code)

        cookie = extract_session_cookie(response)
        if cookie is None:
            raise CookieNotFoundError()
        return cookie
