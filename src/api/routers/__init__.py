"""HTTP router factory wiring the gated vitals endpoints."""

from fastapi import APIRouter, Depends

from api.dependencies import require_access

from . import vitals


def create_router() -> APIRouter:
    router = APIRouter()
    router.include_router(vitals.router, dependencies=[Depends(require_access)])
    return router
