"""Yearly value series and the measures that own them."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import MeasureMismatchError, NotFoundError
from .merge import merge_into

NO_DATA = "<no data>"
STAT_HEADERS = ("Average", "Diff.", "% Diff.")


def format_value(value: float) -> str:
    """Format a value in fixed-point notation with six decimals."""
    return f"{value:.6f}"


def align_columns(header: list[str], values: list[str]) -> tuple[str, str]:
    """Right-align a header row and a value row column by column."""
    widths = [max(len(h), len(v)) for h, v in zip(header, values)]
    header_line = " ".join(h.rjust(w) for h, w in zip(header, widths))
    value_line = " ".join(v.rjust(w) for v, w in zip(values, widths))
    return header_line, value_line


class ValueSeries:
    """Values keyed by year, always iterated in ascending year order."""

    def __init__(self, values: dict[int, float] | None = None) -> None:
        self._values: dict[int, float] = {}
        if values:
            for year, value in values.items():
                self.set(year, value)

    def set(self, year: int, value: float) -> None:
        """Insert or replace the value for ``year``."""
        self._values[int(year)] = float(value)

    def get(self, year: int) -> float:
        """Return the value for ``year``.

        Raises:
            NotFoundError: If the series has no value for the year.
        """
        try:
            return self._values[year]
        except KeyError:
            raise NotFoundError(f"No value found for year {year}") from None

    def size(self) -> int:
        return len(self._values)

    def years(self) -> list[int]:
        return sorted(self._values)

    def items(self) -> list[tuple[int, float]]:
        return [(year, self._values[year]) for year in self.years()]

    def mean(self) -> float:
        """Arithmetic mean of all values, or 0 for an empty series."""
        if not self._values:
            return 0.0
        return sum(self._values.values()) / len(self._values)

    def delta(self) -> float:
        """Value at the last year minus value at the first year.

        Returns 0 when the series holds fewer than two years.
        """
        if len(self._values) < 2:
            return 0.0
        years = self.years()
        return self._values[years[-1]] - self._values[years[0]]

    def delta_percent(self) -> float:
        """Change from first to last year as a percentage of the first value."""
        delta = self.delta()
        if delta == 0:
            return 0.0
        first = self._values[self.years()[0]]
        if first == 0:
            return 0.0
        return delta / first * 100

    def merge(self, other: "ValueSeries") -> None:
        """Merge ``other`` into this series; ``other`` wins on shared years."""
        merge_into(self._values, other._values)

    def copy(self) -> "ValueSeries":
        return ValueSeries(self._values)

    def to_dict(self) -> dict[int, float]:
        return dict(self.items())

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.years())

    def __contains__(self, year: object) -> bool:
        return year in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValueSeries):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"ValueSeries({self.to_dict()!r})"


@dataclass
class Measure:
    """A statistical indicator tracked over years.

    The codename is lowercased on construction, the label is kept as given.
    Two measures are equal when codename, label and every value match.
    """

    codename: str
    label: str
    series: ValueSeries = field(default_factory=ValueSeries)

    def __post_init__(self) -> None:
        self.codename = self.codename.lower()

    def set_value(self, year: int, value: float) -> None:
        self.series.set(year, value)

    def get_value(self, year: int) -> float:
        return self.series.get(year)

    def size(self) -> int:
        return self.series.size()

    def get_average(self) -> float:
        return self.series.mean()

    def get_difference(self) -> float:
        return self.series.delta()

    def get_difference_as_percentage(self) -> float:
        return self.series.delta_percent()

    def merge(self, other: "Measure") -> None:
        """Merge another measure's values into this one.

        Values from ``other`` replace values for the same year; years only
        present here are kept. The label is left unchanged.

        Raises:
            MeasureMismatchError: If the codenames differ.
        """
        if other.codename != self.codename:
            raise MeasureMismatchError(
                f"Cannot merge measure '{other.codename}' into '{self.codename}'"
            )
        self.series.merge(other.series)

    def copy(self) -> "Measure":
        """Independent copy; changes to either side do not affect the other."""
        return Measure(self.codename, self.label, self.series.copy())

    def to_json(self) -> dict[str, float]:
        return {str(year): value for year, value in self.series.items()}

    def to_table(self) -> str:
        """Render the measure as a title line plus header and value rows."""
        title = f"{self.label} ({self.codename})"
        if not self.series:
            return f"{title}\n{NO_DATA}"

        header = [str(year) for year in self.series.years()]
        header.extend(STAT_HEADERS)
        values = [format_value(value) for _, value in self.series.items()]
        values.extend(
            format_value(stat)
            for stat in (
                self.get_average(),
                self.get_difference(),
                self.get_difference_as_percentage(),
            )
        )
        header_line, value_line = align_columns(header, values)
        return f"{title}\n{header_line}\n{value_line}"

    def __str__(self) -> str:
        return self.to_table()
