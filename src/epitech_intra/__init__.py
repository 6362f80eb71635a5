"""Epitech intranet client.

Typed asyncio client for the intranet student-records API:
- Autologin handshake and session cookie extraction
- Retrying JSON transport with a fixed attempt budget
- Offset pagination over student listings
- Typed records (profiles, grades, binomes, connection time, catalogs)

Python Version: 3.10+ required
"""

# Configure before other imports so module loggers inherit the handler
from .logging_config import StructuredFormatter, configure_logging

configure_logging()

from .__version__ import __version__
from .auth import ClientBuilder, extract_session_cookie
from .client import IntraClient
from .config import IntraConfig, get_config, reset_config
from .endpoint import RequestDescriptor, resolve_url
from .errors import (
    CookieNotFoundError,
    IntraClientError,
    InternalError,
    InvalidStatusCodeError,
    ParserError,
    RequestError,
    RetryLimitError,
    UnreachableRemoteError,
)
from .models import (
    Course,
    Location,
    NetsoulEntry,
    Promo,
    PromoEntry,
    Region,
    SearchEntry,
    StudentPage,
    UserBinome,
    UserData,
    UserEntry,
    UserNotes,
    decode,
)
from .pagination import StudentListQuery, fetch_all
from .timing import timed_operation
from .transport import RetryingTransport

__all__ = [
    "__version__",
    # Client
    "ClientBuilder",
    "IntraClient",
    "RetryingTransport",
    "StudentListQuery",
    "fetch_all",
    "extract_session_cookie",
    # Configuration
    "IntraConfig",
    "get_config",
    "reset_config",
    # Endpoint
    "RequestDescriptor",
    "resolve_url",
    # Errors
    "IntraClientError",
    "RetryLimitError",
    "InvalidStatusCodeError",
    "CookieNotFoundError",
    "UnreachableRemoteError",
    "InternalError",
    "ParserError",
    "RequestError",
    # Records
    "Course",
    "Location",
    "NetsoulEntry",
    "Promo",
    "PromoEntry",
    "Region",
    "SearchEntry",
    "StudentPage",
    "UserBinome",
    "UserData",
    "UserEntry",
    "UserNotes",
    "decode",
    # Logging
    "configure_logging",
    "StructuredFormatter",
    "timed_operation",
]
