"""Shared fixtures: column mappings and small source documents."""

import json

import pytest

from bethyw.datasets import ColumnMapping, SourceColumn


@pytest.fixture
def areas_cols() -> ColumnMapping:
    return {
        SourceColumn.AUTH_CODE: "Local authority code",
        SourceColumn.AUTH_NAME_ENG: "Name (eng)",
        SourceColumn.AUTH_NAME_CYM: "Name (cym)",
    }


@pytest.fixture
def json_cols() -> ColumnMapping:
    return {
        SourceColumn.AUTH_CODE: "Localauthority_Code",
        SourceColumn.AUTH_NAME_ENG: "Localauthority_ItemName_ENG",
        SourceColumn.MEASURE_CODE: "Measure_Code",
        SourceColumn.MEASURE_NAME: "Measure_ItemName_ENG",
        SourceColumn.YEAR: "Year_Code",
        SourceColumn.VALUE: "Data",
    }


@pytest.fixture
def year_series_cols() -> ColumnMapping:
    return {
        SourceColumn.AUTH_CODE: "AuthorityCode",
        SourceColumn.SINGLE_MEASURE_CODE: "pop",
        SourceColumn.SINGLE_MEASURE_NAME: "Population",
    }


@pytest.fixture
def areas_csv() -> str:
    return (
        "Local authority code,Name (eng),Name (cym)\n"
        "W06000001,Isle of Anglesey,Ynys Môn\n"
        "W06000011,Swansea,Abertawe\n"
        "W06000015,Cardiff,Caerdydd\n"
    )


def _json_record(
    code: str, name: str, measure: str, label: str, year: str, value: object
) -> dict[str, object]:
    return {
        "Localauthority_Code": code,
        "Localauthority_ItemName_ENG": name,
        "Measure_Code": measure,
        "Measure_ItemName_ENG": label,
        "Year_Code": year,
        "Data": value,
    }


@pytest.fixture
def json_record():
    """Factory for StatsWales JSON rows matching the json_cols mapping."""
    return _json_record


@pytest.fixture
def popden_json() -> str:
    rows = [
        _json_record("W06000011", "Swansea", "Pop", "Population", "1991", 230000.0),
        _json_record("W06000011", "Swansea", "Pop", "Population", "1992", 231000.0),
        _json_record("W06000011", "Swansea", "Dens", "Population density", "1991", 602.5),
        _json_record("W06000015", "Cardiff", "Pop", "Population", "1991", 296000.0),
    ]
    return json.dumps({"odata.metadata": "", "value": rows})


@pytest.fixture
def year_series_csv() -> str:
    return (
        "AuthorityCode,1991,1992,1993\n"
        "W06000001,69123,69379,69772\n"
        "W06000011,230000,231000,232000\n"
    )
