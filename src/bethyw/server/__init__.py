"""FastAPI server exposing a loaded AreaStore.

- models.py: Pydantic response models
- state.py: the store being served
- endpoints.py: HTTP API endpoints
"""

from fastapi import FastAPI

from .endpoints import router
from .models import AreaData, MeasureSummary
from .state import configure

app = FastAPI(title="Beth Yw?")
app.include_router(router)

__all__ = ["app", "configure", "AreaData", "MeasureSummary"]
