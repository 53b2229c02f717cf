"""Importers that read a source stream into an AreaStore.

Each importer consumes the whole stream, applies the area, measure and year
filters, and hands freshly built ``Area`` objects to ``AreaStore.upsert`` so
that new data is merged over what the store already holds.
"""

import csv
import json
import math
from typing import TYPE_CHECKING, Any, TextIO

from .area import ENGLISH, WELSH, Area
from .datasets import ColumnMapping, SourceColumn, SourceType
from .errors import InvalidMappingError, MalformedInputError
from .filters import UNFILTERED, ALL_YEARS, StringFilter, YearRange, validate_year
from .measure import Measure

if TYPE_CHECKING:
    from .areas import AreaStore

# Minimum number of column roles each source type needs
MIN_COLUMNS = {
    SourceType.AUTHORITY_CODE_CSV: 3,
    SourceType.WELSH_STATS_JSON: 6,
    SourceType.AUTHORITY_BY_YEAR_CSV: 3,
}

# Key of the row array in StatsWales JSON documents
JSON_RECORDS_KEY = "value"

# Field holding the reading when a mapping does not name one
DEFAULT_VALUE_FIELD = "Data"

AUTHORITY_CODE_FIELDS = 3


def check_readable(stream: TextIO) -> None:
    """Fail fast on a closed or write-only stream.

    Raises:
        MalformedInputError: If the stream cannot be read.
    """
    if getattr(stream, "closed", False):
        raise MalformedInputError("Input stream is closed")
    readable = getattr(stream, "readable", None)
    if readable is not None and not readable():
        raise MalformedInputError("Input stream is not readable")


def check_mapping(source_type: SourceType, cols: ColumnMapping) -> None:
    """Check that ``cols`` has enough entries for ``source_type``.

    Raises:
        InvalidMappingError: If the mapping is too small.
    """
    required = MIN_COLUMNS[source_type]
    if len(cols) < required:
        raise InvalidMappingError(
            f"{source_type.value} needs at least {required} columns, got {len(cols)}"
        )


def _role(cols: ColumnMapping, role: SourceColumn) -> str:
    try:
        return cols[role]
    except KeyError:
        raise InvalidMappingError(f"Column mapping has no entry for {role.value}") from None


def _field(row: dict[str, Any], name: str) -> Any:
    try:
        return row[name]
    except KeyError:
        raise MalformedInputError(f"Record is missing field '{name}'") from None


def parse_number(token: Any) -> float:
    """Convert a JSON number or a numeric string into a finite float.

    Raises:
        MalformedInputError: If the token is not numeric, or is NaN or infinite.
    """
    if isinstance(token, bool):
        raise MalformedInputError(f"Invalid number: {token!r}")
    try:
        if isinstance(token, (int, float)):
            value = float(token)
        else:
            value = float(str(token).strip())
    except (ValueError, OverflowError):
        raise MalformedInputError(f"Invalid number: {token!r}") from None
    if not math.isfinite(value):
        raise MalformedInputError(f"Invalid number: {token!r}")
    return value


def _single_measure(cols: ColumnMapping) -> tuple[str, str] | None:
    """Codename and label for sources that hold one fixed measure."""
    if SourceColumn.SINGLE_MEASURE_CODE not in cols:
        return None
    codename = cols[SourceColumn.SINGLE_MEASURE_CODE]
    return codename, cols.get(SourceColumn.SINGLE_MEASURE_NAME, codename)


def import_authority_codes(
    store: "AreaStore",
    stream: TextIO,
    cols: ColumnMapping,
    areas_filter: StringFilter = UNFILTERED,
) -> None:
    """Import ``code,English name,Welsh name`` rows.

    The first line is a header and is skipped. Every other non-blank line
    must have exactly three fields.

    Raises:
        MalformedInputError: On an empty stream or a row with the wrong
            number of fields.
    """
    check_readable(stream)
    check_mapping(SourceType.AUTHORITY_CODE_CSV, cols)

    reader = csv.reader(stream)
    try:
        if next(reader, None) is None:
            raise MalformedInputError("Authority code file is empty")

        for row in reader:
            if not row:
                continue
            if len(row) != AUTHORITY_CODE_FIELDS:
                raise MalformedInputError(
                    f"Line {reader.line_num}: expected {AUTHORITY_CODE_FIELDS} fields, "
                    f"got {len(row)}"
                )
            code, name_eng, name_cym = (value.strip() for value in row)
            if not areas_filter.allows(code):
                continue

            area = Area(code)
            area.set_name(ENGLISH, name_eng)
            area.set_name(WELSH, name_cym)
            store.upsert(code, area)
    except csv.Error as e:
        raise MalformedInputError(f"Line {reader.line_num}: {e}") from e


def import_json_records(
    store: "AreaStore",
    stream: TextIO,
    cols: ColumnMapping,
    areas_filter: StringFilter = UNFILTERED,
    measures_filter: StringFilter = UNFILTERED,
    years_filter: YearRange = ALL_YEARS,
) -> None:
    """Import StatsWales JSON records.

    Each record names an area, a measure, a year and a reading through the
    column mapping. Records outside the area or measure filter are skipped.
    Records outside the year filter still create the area and measure but
    their reading is not stored. Only English names are available here.

    Raises:
        MalformedInputError: On invalid JSON, a missing field, or a bad year
            or number.
        InvalidMappingError: If a required column role is missing.
    """
    check_readable(stream)
    check_mapping(SourceType.WELSH_STATS_JSON, cols)

    code_field = _role(cols, SourceColumn.AUTH_CODE)
    name_field = _role(cols, SourceColumn.AUTH_NAME_ENG)
    year_field = _role(cols, SourceColumn.YEAR)
    value_field = cols.get(SourceColumn.VALUE, DEFAULT_VALUE_FIELD)
    single = _single_measure(cols)
    if single is None:
        measure_code_field = _role(cols, SourceColumn.MEASURE_CODE)
        measure_name_field = _role(cols, SourceColumn.MEASURE_NAME)

    try:
        document = json.load(stream)
    except json.JSONDecodeError as e:
        raise MalformedInputError(f"Invalid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get(JSON_RECORDS_KEY), list):
        raise MalformedInputError(f"Expected a JSON object with a '{JSON_RECORDS_KEY}' array")

    for row in document[JSON_RECORDS_KEY]:
        if not isinstance(row, dict):
            raise MalformedInputError(f"Expected a JSON object record, got {row!r}")

        code = str(_field(row, code_field))
        if not areas_filter.allows(code):
            continue

        if single is None:
            codename = str(_field(row, measure_code_field))
            label = str(_field(row, measure_name_field))
        else:
            codename, label = single
        if not measures_filter.allows(codename):
            continue

        year = validate_year(_field(row, year_field))
        value = parse_number(_field(row, value_field))

        measure = Measure(codename, label)
        if years_filter.allows(year):
            measure.set_value(year, value)

        area = Area(code)
        area.set_name(ENGLISH, str(_field(row, name_field)))
        area.set_measure(codename, measure)
        store.upsert(code, area)


def import_year_series(
    store: "AreaStore",
    stream: TextIO,
    cols: ColumnMapping,
    areas_filter: StringFilter = UNFILTERED,
    measures_filter: StringFilter = UNFILTERED,
    years_filter: YearRange = ALL_YEARS,
) -> None:
    """Import one measure laid out as one row per area and one column per year.

    The header holds the authority code column followed by year columns,
    e.g. ``AuthorityCode,1991,1992``. The measure's codename and label come
    from the mapping. Areas gain no names from this source. Empty cells are
    treated as missing readings.

    Raises:
        MalformedInputError: On an empty stream, a missing code column, a bad
            year header, a row of the wrong width or a bad number.
        InvalidMappingError: If the mapping has no single measure codename.
    """
    check_readable(stream)
    check_mapping(SourceType.AUTHORITY_BY_YEAR_CSV, cols)

    code_column = _role(cols, SourceColumn.AUTH_CODE)
    single = _single_measure(cols)
    if single is None:
        raise InvalidMappingError(
            f"Column mapping has no entry for {SourceColumn.SINGLE_MEASURE_CODE.value}"
        )
    codename, label = single

    reader = csv.reader(stream)
    try:
        header = next(reader, None)
        if header is None:
            raise MalformedInputError("Year series file is empty")
        header = [name.strip().lstrip("\ufeff") for name in header]
        if code_column not in header:
            raise MalformedInputError(f"Header has no '{code_column}' column")
        code_index = header.index(code_column)
        year_columns = [
            (index, validate_year(name)) for index, name in enumerate(header) if index != code_index
        ]

        if not measures_filter.allows(codename):
            return

        for row in reader:
            if not row:
                continue
            if len(row) != len(header):
                raise MalformedInputError(
                    f"Line {reader.line_num}: expected {len(header)} fields, got {len(row)}"
                )
            code = row[code_index].strip()
            if not areas_filter.allows(code):
                continue

            measure = Measure(codename, label)
            for index, year in year_columns:
                cell = row[index].strip()
                if not cell:
                    continue
                value = parse_number(cell)
                if years_filter.allows(year):
                    measure.set_value(year, value)

            area = Area(code)
            area.set_measure(codename, measure)
            store.upsert(code, area)
    except csv.Error as e:
        raise MalformedInputError(f"Line {reader.line_num}: {e}") from e
