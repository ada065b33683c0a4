"""Vitals endpoint served at both ``/`` and ``/vitals``."""

from fastapi import APIRouter, Depends

from api.dependencies import get_vitals_service
from api.schemas import VitalsResponse
from vitals.service import VitalsService


router = APIRouter()


# Sync route: FastAPI runs it in the thread pool, so the one-second CPU
# sample blocks a worker thread rather than the event loop.
@router.get("/", response_model=VitalsResponse, tags=["vitals"])
@router.get("/vitals", response_model=VitalsResponse, tags=["vitals"])
def vitals(service: VitalsService = Depends(get_vitals_service)) -> VitalsResponse:
    return VitalsResponse.from_snapshot(service.respond())
