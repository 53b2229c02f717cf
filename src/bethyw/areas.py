"""The AreaStore aggregate: every imported Area keyed by authority code."""

import json
from collections.abc import Iterable, Iterator
from typing import Any, TextIO

from . import parsers
from .area import Area
from .datasets import ColumnMapping, SourceType
from .errors import NotFoundError, UnsupportedSourceTypeError
from .filters import StringFilter, YearRange, areas_filter, as_year_range, measures_filter

FilterArg = StringFilter | Iterable[str] | None
YearsArg = YearRange | tuple[int, int] | None


def _source_type(tag: "SourceType | str") -> SourceType:
    if isinstance(tag, SourceType):
        return tag
    try:
        return SourceType(tag)
    except ValueError:
        raise UnsupportedSourceTypeError(f"Unexpected data type: {tag!r}") from None


class AreaStore:
    """Areas keyed by authority code, iterated in ascending code order.

    Data enters through ``upsert`` or one of the import methods; both merge
    new data over existing data. Not safe for use from several threads.
    """

    def __init__(self) -> None:
        self._areas: dict[str, Area] = {}

    def upsert(self, code: str, area: Area) -> None:
        """Insert an area, or merge it into the area already stored under ``code``.

        The incoming area is the newer data: its names and values replace
        the stored ones where both exist, and everything else is kept. A new
        area is stored as a copy.
        """
        existing = self._areas.get(code)
        if existing is None:
            self._areas[code] = area.copy()
        else:
            existing.merge(area)

    def lookup(self, code: str) -> Area:
        """Return the area stored under ``code``.

        Raises:
            NotFoundError: If no area has that code.
        """
        try:
            return self._areas[code]
        except KeyError:
            raise NotFoundError(f"No area found matching {code}") from None

    def count(self) -> int:
        return len(self._areas)

    def codes(self) -> list[str]:
        return sorted(self._areas)

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, code: object) -> bool:
        return code in self._areas

    def __iter__(self) -> Iterator[Area]:
        return (self._areas[code] for code in self.codes())

    # Imports

    def import_authority_codes(
        self, stream: TextIO, cols: ColumnMapping, areas: FilterArg = None
    ) -> None:
        """Import an authority code CSV (code, English name, Welsh name)."""
        parsers.import_authority_codes(self, stream, cols, areas_filter(areas))

    def import_json_records(
        self,
        stream: TextIO,
        cols: ColumnMapping,
        areas: FilterArg = None,
        measures: FilterArg = None,
        years: YearsArg = None,
    ) -> None:
        """Import a StatsWales JSON document."""
        parsers.import_json_records(
            self, stream, cols, areas_filter(areas), measures_filter(measures), as_year_range(years)
        )

    def import_year_series(
        self,
        stream: TextIO,
        cols: ColumnMapping,
        areas: FilterArg = None,
        measures: FilterArg = None,
        years: YearsArg = None,
    ) -> None:
        """Import a single-measure CSV with one column per year."""
        parsers.import_year_series(
            self, stream, cols, areas_filter(areas), measures_filter(measures), as_year_range(years)
        )

    def populate(
        self,
        stream: TextIO,
        source_type: "SourceType | str",
        cols: ColumnMapping,
        areas: FilterArg = None,
        measures: FilterArg = None,
        years: YearsArg = None,
    ) -> None:
        """Import ``stream`` with the importer matching ``source_type``.

        Omitted filters import everything.

        Args:
            stream: Open text stream, read to the end.
            source_type: A SourceType or its string value.
            cols: Column role to header/field name mapping.
            areas: Authority codes to import (exact match).
            measures: Measure codenames to import (case-insensitive).
            years: Inclusive (start, end) range; (0, 0) means every year.

        Raises:
            UnsupportedSourceTypeError: If the source type is unknown.
            InvalidMappingError: If ``cols`` is too small for the source type.
            MalformedInputError: If the input cannot be parsed.
        """
        kind = _source_type(source_type)
        parsers.check_mapping(kind, cols)

        if kind is SourceType.AUTHORITY_CODE_CSV:
            self.import_authority_codes(stream, cols, areas)
        elif kind is SourceType.WELSH_STATS_JSON:
            self.import_json_records(stream, cols, areas, measures, years)
        elif kind is SourceType.AUTHORITY_BY_YEAR_CSV:
            self.import_year_series(stream, cols, areas, measures, years)
        else:
            raise UnsupportedSourceTypeError(f"Unexpected data type: {kind!r}")

    # Rendering

    def to_table(self) -> str:
        """Render every area as a text block, in authority code order."""
        return "\n\n\n".join(area.to_table() for area in self)

    def to_json(self) -> dict[str, Any]:
        return {code: self._areas[code].to_json() for code in self.codes()}

    def to_json_string(self) -> str:
        """Serialise the store as JSON; an empty store gives ``{}``."""
        return json.dumps(self.to_json(), ensure_ascii=False, allow_nan=False)

    def __str__(self) -> str:
        return self.to_table()

    def __repr__(self) -> str:
        return f"AreaStore({self.codes()!r})"
