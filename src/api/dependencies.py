"""Shared FastAPI dependencies exposing the vitals service and access gate."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from security.gate import AccessGate
from vitals.service import VitalsService


def get_vitals_service(request: Request) -> VitalsService:
    service: Optional[VitalsService] = getattr(request.app.state, "vitals_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Vitals service not ready")
    return service


def get_access_gate(request: Request) -> AccessGate:
    return request.app.state.access_gate


def require_access(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
    gate: AccessGate = Depends(get_access_gate),
) -> None:
    """Run the allowlist, rate-limit and API-key stages for this request."""
    client_host = request.client.host if request.client else None
    gate.check(client_host, x_api_key)
