"""Offset pagination over the student listing.

/user/filter/user returns ``{"total": N, "items": [...]}`` pages. Pages are
requested strictly one after the other, because the next offset is the
previous offset plus the number of items the server actually returned.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from .config import DEFAULT_COURSE
from .endpoint import RequestDescriptor
from .errors import InternalError
from .models import Location, Promo, StudentPage, UserEntry, decode
from .transport import RetryingTransport

__all__ = ["STUDENT_LIST_PATH", "StudentListQuery", "fetch_all"]

logger = logging.getLogger("epitech_intra.pagination")

STUDENT_LIST_PATH = "/user/filter/user"


@dataclass(frozen=True)
class StudentListQuery:
    """Filters for the student listing.

    Attributes:
        location: Campus to list (all campuses when None)
        promo: Cohort to list (all cohorts when None)
        year: Scholar year, current calendar year when None
        course: Course code, the configured default when None
        active: Only students with an active account
        offset: Index of the first student to fetch
    """

    location: Location | None = None
    promo: Promo | None = None
    year: int | None = None
    course: str | None = None
    active: bool = True
    offset: int = 0

    def __post_init__(self) -> None:
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")

    def params(self, offset: int, default_course: str = DEFAULT_COURSE) -> dict[str, Any]:
        """Query parameters for the page starting at ``offset``."""
        return {
            "offset": offset,
            "location": self.location,
            "promo": self.promo,
            "year": self.year if self.year is not None else date.today().year,
            "course": self.course or default_course,
            "active": self.active,
        }


async def fetch_all(
    transport: RetryingTransport,
    path: str,
    params_for: Callable[[int], Mapping[str, Any]],
    start_offset: int = 0,
) -> list[UserEntry]:
    """Fetch every page of a listing and return the items in server order.

    Args:
        transport: Transport used for each page request
        path: Listing resource path
        params_for: Builds the query parameters for a given offset
        start_offset: Offset of the first page

    Returns:
        All items from ``start_offset`` up to the declared total.

    Raises:
        InternalError: If a page overshoots the declared total, or comes back
            empty while items are still missing.
        RetryLimitError, ParserError: From the page request or its decoding.
    """
    items: list[UserEntry] = []
    offset = start_offset
    pages = 0

    while True:
        body = await transport.request(RequestDescriptor(path, params_for(offset)))
        page = decode(body, StudentPage)
        pages += 1
        reached = offset + len(page.items)

        logger.debug(
            "intra_page_fetched",
            extra={
                "path": path,
                "offset": offset,
                "page_items": len(page.items),
                "total": page.total,
            },
        )

        if reached > page.total:
            raise InternalError(
                f"inconsistent total: reached {reached} items but server declares {page.total}"
            )
        if reached < page.total and not page.items:
            raise InternalError(
                f"empty page at offset {offset} while server declares {page.total}"
            )

        items.extend(page.items)
        if reached == page.total:
            break
        offset = reached

    logger.info(
        "intra_pagination_complete",
        extra={"path": path, "pages": pages, "total_items": len(items)},
    )
    return items
