"""Typed records returned by the intranet and the JSON decoder.

Only the fields the client relies on are declared; every model ignores
unknown keys so new intranet fields do not break decoding.
"""

from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from .errors import ParserError

__all__ = [
    "Binome",
    "Course",
    "Gpa",
    "Location",
    "ModuleGrade",
    "NetsoulEntry",
    "Note",
    "Promo",
    "PromoEntry",
    "Region",
    "SearchEntry",
    "SearchResults",
    "StudentPage",
    "UserBinome",
    "UserData",
    "UserEntry",
    "UserNotes",
    "decode",
]

T = TypeVar("T")


class Location(str, Enum):
    """Campus codes as the intranet writes them (``<country>/<city>``)."""

    BARCELONE = "ES/BAR"
    BERLIN = "DE/BER"
    BORDEAUX = "FR/BDX"
    LA_REUNION = "FR/RUN"
    LILLE = "FR/LIL"
    LYON = "FR/LYN"
    MARSEILLE = "FR/MAR"
    MONTPELLIER = "FR/MPL"
    NANCY = "FR/NCY"
    NANTES = "FR/NAN"
    NICE = "FR/NCE"
    PARIS = "FR/PAR"
    RENNES = "FR/REN"
    STRASBOURG = "FR/STG"
    TOULOUSE = "FR/TLS"

    @classmethod
    def parse(cls, code: str) -> "Location":
        """Look up a campus by its intranet code, e.g. ``"FR/STG"``."""
        try:
            return cls(code)
        except ValueError:
            raise ValueError(
                f"Unknown location {code!r}, expected '<Country>/<City>' (eg. 'FR/STG')"
            ) from None

    def __str__(self) -> str:
        return self.value


class Promo(str, Enum):
    """Cohort codes used by the student listing filter."""

    TEK1 = "tek1"
    TEK2 = "tek2"
    TEK3 = "tek3"
    WAC1 = "wac1"

    @classmethod
    def parse(cls, code: str) -> "Promo":
        try:
            return cls(code)
        except ValueError:
            raise ValueError(f"Unknown promo {code!r}") from None

    def __str__(self) -> str:
        return self.value


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# --- Student listing ---


class UserEntry(_Record):
    """One student in a /user/filter/user page."""

    login: str = Field(..., min_length=1, description="Student email login.")
    title: str = Field(default="", description="Display name.")
    nom: str = Field(default="", description="Last name.")
    prenom: str = Field(default="", description="First name.")
    picture: str | None = Field(default=None, description="Relative URL of the photo.")
    location: Location | None = Field(default=None, description="Campus code.")


class StudentPage(_Record):
    """One page of a paginated listing: declared total plus this page's items."""

    total: int = Field(..., ge=0)
    items: list[UserEntry] = Field(default_factory=list)


# --- Profile ---


class Gpa(_Record):
    gpa: str
    cycle: str = ""


class UserData(_Record):
    """Student profile from /user or /user/{login}."""

    login: str = Field(..., min_length=1)
    title: str = ""
    firstname: str = ""
    lastname: str = ""
    picture: str | None = None
    promo: int | None = None
    location: str | None = None
    course_code: str | None = None
    studentyear: int | None = None
    credits: int | None = None
    gpa: list[Gpa] | None = None


# --- Connection time ---


class NetsoulEntry(_Record):
    """One day of connection statistics.

    The intranet sends each day as a positional array:
    ``[timestamp, active, idle, out_active, out_idle, average]``.
    """

    timestamp: int
    active: float = 0.0
    idle: float = 0.0
    out_active: float = 0.0
    out_idle: float = 0.0
    average: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def from_positional(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            keys = ("timestamp", "active", "idle", "out_active", "out_idle", "average")
            if not data or len(data) > len(keys):
                raise ValueError(f"expected 1 to {len(keys)} values, got {len(data)}")
            return dict(zip(keys, data))
        return data


# --- Grades ---


class ModuleGrade(_Record):
    title: str
    codemodule: str
    scolaryear: int
    codeinstance: str = ""
    credits: int = 0
    grade: str = "-"


class Note(_Record):
    title: str
    codemodule: str
    scolaryear: int
    final_note: float
    correcteur: str | None = None


class UserNotes(_Record):
    """Module grades and project marks from /user/{login}/notes."""

    modules: list[ModuleGrade] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)


# --- Pairing ---


class Binome(_Record):
    login: str
    picture: str | None = None
    activities: str = ""
    nb_activities: int = 0
    weight: float = 0.0


class UserBinome(_Record):
    """Students the user worked with, from /user/{login}/binome."""

    user: dict[str, Any] = Field(default_factory=dict)
    binomes: list[Binome] = Field(default_factory=list)


# --- Search and catalogs ---


class SearchEntry(_Record):
    login: str
    title: str = ""
    picture: str | None = None
    location: str | None = None
    promo: str | int | None = None


class SearchResults(_Record):
    items: list[SearchEntry] = Field(default_factory=list)


class Course(_Record):
    """One course available on a campus for a given year."""

    code: str
    title: str = ""
    students: int | str | None = None


class PromoEntry(_Record):
    promo: str
    students: int | str | None = None


class Region(_Record):
    """One campus in /user/filter/location."""

    code: Location
    title: str
    students: int | str | None = None


def decode(text: str, shape: type[T] | Any) -> T:
    """Decode a JSON response body into ``shape``.

    Args:
        text: Raw response body
        shape: A pydantic model or any type TypeAdapter accepts (e.g. list[Course])

    Returns:
        The validated value.

    Raises:
        ParserError: If the body is not JSON or does not match the shape.
    """
    try:
        return TypeAdapter(shape).validate_json(text)
    except ValidationError as e:
        raise ParserError(
            f"{getattr(shape, '__name__', shape)}: {e.error_count()} validation error(s), "
            f"first: {e.errors()[0]['msg']}"
        ) from e
