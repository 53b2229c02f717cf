"""Import filters for areas, measures and years.

An area or measure filter is either ``UNFILTERED`` (import everything) or a
``RestrictedTo`` set of accepted values. A year filter is an inclusive
``YearRange`` where ``YearRange(0, 0)`` accepts every year.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from .errors import MalformedInputError

# First year that is rejected as lying in the future of the published data
YEAR_CUTOFF = 2021


class Unfiltered:
    """Filter that accepts every value."""

    _instance: "Unfiltered | None" = None

    def __new__(cls) -> "Unfiltered":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def allows(self, value: str) -> bool:
        return True

    def __repr__(self) -> str:
        return "UNFILTERED"


UNFILTERED = Unfiltered()


@dataclass(frozen=True)
class RestrictedTo:
    """Filter that accepts only the listed values.

    With ``fold_case`` the comparison ignores case, otherwise it is exact.
    """

    values: frozenset[str]
    fold_case: bool = False

    def __post_init__(self) -> None:
        if self.fold_case:
            object.__setattr__(self, "values", frozenset(v.lower() for v in self.values))

    def allows(self, value: str) -> bool:
        if self.fold_case:
            value = value.lower()
        return value in self.values


StringFilter = Unfiltered | RestrictedTo


def as_filter(
    values: "StringFilter | Iterable[str] | None", fold_case: bool = False
) -> StringFilter:
    """Coerce ``None``, an empty collection or a set of strings into a filter."""
    if isinstance(values, (Unfiltered, RestrictedTo)):
        return values
    if values is None:
        return UNFILTERED
    if isinstance(values, str):
        values = [values]
    accepted = frozenset(values)
    if not accepted:
        return UNFILTERED
    return RestrictedTo(accepted, fold_case=fold_case)


def areas_filter(values: "StringFilter | Iterable[str] | None") -> StringFilter:
    """Area filter; authority codes are matched exactly."""
    return as_filter(values)


def measures_filter(values: "StringFilter | Iterable[str] | None") -> StringFilter:
    """Measure filter; codenames are matched case-insensitively."""
    if isinstance(values, RestrictedTo) and not values.fold_case:
        return RestrictedTo(values.values, fold_case=True)
    return as_filter(values, fold_case=True)


@dataclass(frozen=True)
class YearRange:
    """Inclusive range of years to import; ``(0, 0)`` imports every year."""

    start: int = 0
    end: int = 0

    @property
    def is_unfiltered(self) -> bool:
        return self.start == 0 and self.end == 0

    def allows(self, year: int) -> bool:
        if self.is_unfiltered:
            return True
        return self.start <= year <= self.end


ALL_YEARS = YearRange(0, 0)


def as_year_range(years: "YearRange | tuple[int, int] | None") -> YearRange:
    if years is None:
        return ALL_YEARS
    if isinstance(years, YearRange):
        return years
    start, end = years
    return YearRange(int(start), int(end))


def validate_year(token: "str | int", cutoff: int = YEAR_CUTOFF) -> int:
    """Convert a year token to an integer.

    ``"0"`` is accepted as the no-filter sentinel. Anything else must be
    exactly four digits and lie before ``cutoff``.

    Raises:
        MalformedInputError: If the token is not a valid year.
    """
    if isinstance(token, bool):
        raise MalformedInputError(f"Invalid year: {token!r}")
    text = str(token).strip()
    if text == "0":
        return 0
    if len(text) != 4 or not (text.isascii() and text.isdigit()):
        raise MalformedInputError(f"Invalid year: {token!r}")
    year = int(text)
    if year >= cutoff:
        raise MalformedInputError(f"Invalid year: {token!r} (must be before {cutoff})")
    return year
