"""Failure kinds raised by the intranet client.

Every public operation either returns a complete result or raises one of
these. Callers that do not care about the kind catch IntraClientError.
"""

__all__ = [
    "CookieNotFoundError",
    "IntraClientError",
    "InternalError",
    "InvalidStatusCodeError",
    "ParserError",
    "RequestError",
    "RetryLimitError",
    "UnreachableRemoteError",
]


class IntraClientError(Exception):
    """Base class for all intranet client failures.

    ``description`` is the stable text for the kind; ``str(exc)`` appends the
    detail when there is one.
    """

    description = "An error happened"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        if detail:
            super().__init__(f"{self.description} ({detail})")
        else:
            super().__init__(self.description)


class RetryLimitError(IntraClientError):
    """Raised when no attempt of a request produced a readable response."""

    description = "No valid response received out of all the allowed retries"

    def __init__(self, attempts: int, url: str | None = None) -> None:
        self.attempts = attempts
        self.url = url
        super().__init__(f"{attempts} attempts")


class InvalidStatusCodeError(IntraClientError):
    """Raised when the autologin request came back with an error status."""

    description = "Invalid status code"

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(str(status_code))


class CookieNotFoundError(IntraClientError):
    """Raised when the autologin response carries no ``user=`` cookie."""

    description = "The session cookie couldn't be extracted"


class UnreachableRemoteError(IntraClientError):
    """Raised when the autologin request failed before any response."""

    description = "The EPITECH intranet couldn't be reached"


class InternalError(IntraClientError):
    """Raised on local invariant violations (inconsistent pagination, setup)."""

    description = "An internal error happened"


class ParserError(IntraClientError):
    """Raised when a response body cannot be decoded into the expected shape."""

    description = "A parsing error happened"


class RequestError(IntraClientError):
    """Raised for transport failures not covered by another kind."""

    description = "A request error happened"
