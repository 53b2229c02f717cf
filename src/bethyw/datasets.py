"""Dataset registry: which files to import and how their columns map.

The registry is a YAML document. The bundled ``datasets.yml`` describes the
StatsWales files; a different registry can be loaded with
``DatasetRegistry.from_yaml``.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

DEFAULT_REGISTRY_PATH = Path(__file__).parent / "datasets.yml"


class SourceType(Enum):
    """Layout of a source file, used to pick an importer."""

    AUTHORITY_CODE_CSV = "authority_code_csv"  # code,name (eng),name (cym)
    WELSH_STATS_JSON = "welsh_stats_json"  # StatsWales JSON rows under "value"
    AUTHORITY_BY_YEAR_CSV = "authority_by_year_csv"  # one row per area, one column per year


class SourceColumn(Enum):
    """Logical column roles a column mapping can name."""

    AUTH_CODE = "auth_code"
    AUTH_NAME_ENG = "auth_name_eng"
    AUTH_NAME_CYM = "auth_name_cym"
    MEASURE_CODE = "measure_code"
    MEASURE_NAME = "measure_name"
    SINGLE_MEASURE_CODE = "single_measure_code"
    SINGLE_MEASURE_NAME = "single_measure_name"
    YEAR = "year"
    VALUE = "value"


ColumnMapping = dict[SourceColumn, str]


def parse_cols(data: dict[str, str]) -> ColumnMapping:
    """Convert a YAML ``cols`` section into a column mapping.

    Raises:
        ValueError: If a key is not a known column role.
    """
    cols: ColumnMapping = {}
    for role, column in data.items():
        try:
            cols[SourceColumn(role)] = str(column)
        except ValueError:
            raise ValueError(f"Unknown column role: {role}") from None
    return cols


@dataclass
class DatasetConfig:
    """One importable source file."""

    code: str
    name: str
    file: str
    parser: SourceType
    cols: ColumnMapping = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DatasetConfig":
        """Create DatasetConfig from YAML dict."""
        for key in ("code", "file", "parser"):
            if key not in data:
                raise KeyError(f"Dataset must have '{key}' field")
        try:
            parser = SourceType(data["parser"])
        except ValueError:
            raise ValueError(f"Unknown parser for dataset {data['code']}: {data['parser']}") from None
        return cls(
            code=data["code"],
            name=data.get("name", data["code"]),
            file=data["file"],
            parser=parser,
            cols=parse_cols(data.get("cols", {})),
        )


@dataclass
class DatasetRegistry:
    """The areas file plus every dataset that can be imported."""

    areas: DatasetConfig
    datasets: list[DatasetConfig]

    @classmethod
    def from_yaml(cls, path: Path) -> "DatasetRegistry":
        """Load a registry from a YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if "areas" not in data:
            raise KeyError("Registry must have an 'areas' section")

        return cls(
            areas=DatasetConfig.from_dict(data["areas"]),
            datasets=[DatasetConfig.from_dict(d) for d in data.get("datasets", [])],
        )

    @classmethod
    def default(cls) -> "DatasetRegistry":
        """Load the bundled StatsWales registry."""
        return cls.from_yaml(DEFAULT_REGISTRY_PATH)

    def dataset_codes(self) -> list[str]:
        return [dataset.code for dataset in self.datasets]

    def get_dataset(self, code: str) -> DatasetConfig:
        """Get a dataset by its code."""
        for dataset in self.datasets:
            if dataset.code == code:
                return dataset
        raise ValueError(f"No dataset matches key: {code}")
