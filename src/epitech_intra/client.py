"""Authenticated client for the Epitech intranet.

Every fetcher follows the same convention: build a resource path and its
query parameters, request it through the RetryingTransport, decode the body
into a typed record. Failures propagate as IntraClientError subclasses.

Reference: https://intra.epitech.eu (append ``?format=json`` to any page)
"""

import copy
import logging
from datetime import date
from typing import Any

from .config import DEFAULT_COURSE
from .endpoint import RequestDescriptor
from .models import (
    Course,
    Location,
    NetsoulEntry,
    PromoEntry,
    Region,
    SearchEntry,
    SearchResults,
    UserBinome,
    UserData,
    UserEntry,
    UserNotes,
    decode,
)
from .pagination import STUDENT_LIST_PATH, StudentListQuery, fetch_all
from .timing import timed_operation
from .transport import RetryingTransport

__all__ = ["IntraClient"]

logger = logging.getLogger("epitech_intra.client")


class IntraClient:
    """Intranet client bound to one session cookie and one user.

    Created by ClientBuilder.authenticate(). Nothing is mutated after
    construction; with_login() returns a copy that shares the transport
    (and its connection pool) with the original.

    Attributes:
        autologin: Link the session was opened with (kept for diagnostics)
        login: Login of the authenticated user ("" before the handshake ends)
        transport: Shared RetryingTransport carrying the session cookie

    Example:
        >>> async with await IntraClient.builder().autologin(link).authenticate() as client:
        ...     notes = await client.fetch_own_student_notes()
        ...     students = await client.fetch_student_list(
        ...         location=Location.STRASBOURG, promo=Promo.TEK2, year=2018
        ...     )
    """

    def __init__(
        self,
        autologin: str | None,
        transport: RetryingTransport,
        login: str = "",
        *,
        default_course: str = DEFAULT_COURSE,
    ) -> None:
        self._autologin = autologin or ""
        self._transport = transport
        self._login = login
        self._default_course = default_course

    @staticmethod
    def builder():
        """Start a ClientBuilder (see epitech_intra.auth)."""
        from .auth import ClientBuilder

        return ClientBuilder()

    @property
    def autologin(self) -> str:
        return self._autologin

    @property
    def login(self) -> str:
        return self._login

    @property
    def transport(self) -> RetryingTransport:
        return self._transport

    @property
    def retry_count(self) -> int:
        return self._transport.retry_count

    def __repr__(self) -> str:
        return f"IntraClient(login={self._login!r}, retry_count={self.retry_count})"

    def with_login(self, login: str) -> "IntraClient":
        """Copy of this client acting on behalf of ``login``; shares the transport."""
        clone = copy.copy(self)
        clone._login = login
        return clone

    async def request(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Raw request: fetch any intranet resource and return the body text."""
        return await self._transport.request(RequestDescriptor(path, params or {}))

    async def _fetch(self, path: str, shape: Any, params: dict[str, Any] | None = None) -> Any:
        return decode(await self.request(path, params), shape)

    # --- Student listing ---

    async def fetch_student_list(
        self, query: StudentListQuery | None = None, **filters: Any
    ) -> list[UserEntry]:
        """List every student matching the filters, across all pages.

        Args:
            query: Prepared filters; keyword filters build one when omitted
            **filters: location, promo, year, course, active, offset

        Returns:
            Students in server order, from ``offset`` to the declared total.

        Raises:
            InternalError: If the server's declared total is inconsistent.
            RetryLimitError, ParserError: From any page.
        """
        if query is None:
            query = StudentListQuery(**filters)
        elif filters:
            raise TypeError("pass either a StudentListQuery or keyword filters, not both")

        extra = {
            "location": str(query.location) if query.location else None,
            "promo": str(query.promo) if query.promo else None,
            "offset": query.offset,
        }
        with timed_operation("intra_fetch_student_list", logger, extra=extra):
            return await fetch_all(
                self._transport,
                STUDENT_LIST_PATH,
                lambda offset: query.params(offset, self._default_course),
                start_offset=query.offset,
            )

    # --- Profile ---

    async def fetch_student_data(self, login: str | None = None) -> UserData:
        """Profile of ``login``, or of the session owner when None."""
        path = f"/user/{login}" if login else "/user"
        return await self._fetch(path, UserData)

    # --- Connection time ---

    async def fetch_student_netsoul(self, login: str) -> list[NetsoulEntry]:
        return await self._fetch(f"/user/{login}/netsoul", list[NetsoulEntry])

    async def fetch_own_student_netsoul(self) -> list[NetsoulEntry]:
        return await self.fetch_student_netsoul(self._login)

    # --- Grades ---

    async def fetch_student_notes(self, login: str) -> UserNotes:
        return await self._fetch(f"/user/{login}/notes", UserNotes)

    async def fetch_own_student_notes(self) -> UserNotes:
        return await self.fetch_student_notes(self._login)

    # --- Pairing ---

    async def fetch_student_binomes(self, login: str) -> UserBinome:
        return await self._fetch(f"/user/{login}/binome", UserBinome)

    async def fetch_own_student_binomes(self) -> UserBinome:
        return await self.fetch_student_binomes(self._login)

    # --- Search and catalogs ---

    async def search_student(self, query: str) -> list[SearchEntry]:
        """Free-text search over logins and names (intranet autocomplete)."""
        results = await self._fetch(
            "/complete/user", SearchResults, {"contains": "", "search": query}
        )
        return results.items

    async def fetch_available_courses(
        self, location: Location, year: int | None = None, active: bool = True
    ) -> list[Course]:
        """Courses taught on a campus during a scholar year."""
        params = {
            "location": location,
            "year": year if year is not None else date.today().year,
            "active": active,
        }
        return await self._fetch("/user/filter/course", list[Course], params)

    async def fetch_available_promos(
        self,
        location: Location,
        year: int | None = None,
        course: str | None = None,
        active: bool = True,
    ) -> list[PromoEntry]:
        """Cohorts of a course on a campus during a scholar year."""
        params = {
            "location": location,
            "year": year if year is not None else date.today().year,
            "course": course or self._default_course,
            "active": active,
        }
        return await self._fetch("/user/filter/promo", list[PromoEntry], params)

    async def fetch_locations(self, active: bool = True) -> list[Region]:
        """Every campus with its student count."""
        return await self._fetch("/user/filter/location", list[Region], {"active": active})

    # --- Lifecycle ---

    async def aclose(self) -> None:
        """Close the shared transport. Copies made with with_login() stop working too."""
        await self._transport.aclose()

    async def __aenter__(self) -> "IntraClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
