"""Basic intranet client usage example.

Demonstrates:
- Autologin handshake through ClientBuilder
- Context manager pattern for automatic cleanup
- Paginated student listing with typed filters
- Per-student grade lookups sharing one session

Requirements:
- Python 3.10+
- INTRA_AUTOLOGIN environment variable set (https://intra.epitech.eu/auth-...)

Run:
    python3 examples/fetch_students.py
"""

import asyncio
import logging
import os

from epitech_intra import ClientBuilder, IntraClientError, Location, Promo

logger = logging.getLogger("epitech_intra.examples")


async def list_promo():
    """List a cohort, then print the first few students' credits."""

    if not os.getenv("INTRA_AUTOLOGIN"):
        logger.error("INTRA_AUTOLOGIN not set in environment")
        return

    try:
        async with await ClientBuilder.from_config().authenticate() as client:
            logger.info("logged_in", extra={"login": client.login})

            students = await client.fetch_student_list(
                location=Location.STRASBOURG, promo=Promo.TEK2
            )
            print(f"{len(students)} students in {Location.STRASBOURG} {Promo.TEK2}")

            for student in students[:5]:
                notes = await client.fetch_student_notes(student.login)
                credits = sum(m.credits for m in notes.modules if m.grade not in ("-", "Echec"))
                print(f"  {student.login:<40} {credits:>4} credits")
    except IntraClientError as e:
        logger.error("example_failed", extra={"error": str(e), "error_type": type(e).__name__})


if __name__ == "__main__":
    asyncio.run(list_promo())
