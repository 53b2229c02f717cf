"""HTTP API endpoints over the loaded AreaStore."""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from ..errors import NotFoundError
from . import state
from .models import AreaData, MeasureSummary

router = APIRouter()


@router.get("/api/areas")
def list_areas() -> dict[str, AreaData]:
    """Every area, keyed by authority code."""
    return {code: AreaData(**data) for code, data in state.store.to_json().items()}


@router.get("/api/areas/{code}")
def get_area(code: str) -> AreaData:
    try:
        area = state.store.lookup(code)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return AreaData(**area.to_json())


@router.get("/api/areas/{code}/measures/{codename}")
def get_measure(code: str, codename: str) -> MeasureSummary:
    """One measure of an area with average and first-to-last change."""
    try:
        measure = state.store.lookup(code).get_measure(codename)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return MeasureSummary(
        code=code,
        codename=measure.codename,
        label=measure.label,
        values=measure.to_json(),
        average=measure.get_average(),
        diff=measure.get_difference(),
        diff_percent=measure.get_difference_as_percentage(),
    )


@router.get("/api/table", response_class=PlainTextResponse)
def get_table() -> str:
    """The store rendered as text tables."""
    return state.store.to_table()
