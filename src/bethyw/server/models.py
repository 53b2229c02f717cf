"""Pydantic models for the HTTP API."""

from pydantic import BaseModel


class AreaData(BaseModel):
    """Names and yearly values of one area."""

    names: dict[str, str]
    measures: dict[str, dict[str, float]]


class MeasureSummary(BaseModel):
    """One measure of one area with its derived statistics."""

    code: str
    codename: str
    label: str
    values: dict[str, float]
    average: float
    diff: float
    diff_percent: float
