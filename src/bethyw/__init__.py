"""Beth Yw? Welsh Government statistics parser."""

from .area import Area
from .areas import AreaStore
from .datasets import ColumnMapping, DatasetConfig, DatasetRegistry, SourceColumn, SourceType
from .errors import (
    BethYwError,
    InputOpenError,
    InvalidMappingError,
    MalformedInputError,
    MeasureMismatchError,
    NotFoundError,
    UnsupportedSourceTypeError,
)
from .filters import (
    ALL_YEARS,
    UNFILTERED,
    RestrictedTo,
    Unfiltered,
    YearRange,
    validate_year,
)
from .measure import Measure, ValueSeries
from .merge import merge_into

__all__ = [
    "Area",
    "AreaStore",
    "Measure",
    "ValueSeries",
    "merge_into",
    "ColumnMapping",
    "DatasetConfig",
    "DatasetRegistry",
    "SourceColumn",
    "SourceType",
    "ALL_YEARS",
    "UNFILTERED",
    "RestrictedTo",
    "Unfiltered",
    "YearRange",
    "validate_year",
    "BethYwError",
    "InputOpenError",
    "InvalidMappingError",
    "MalformedInputError",
    "MeasureMismatchError",
    "NotFoundError",
    "UnsupportedSourceTypeError",
]
