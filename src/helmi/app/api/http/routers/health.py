"""Liveness endpoint used by the Kubernetes liveness probe.

If this fails, Kubernetes restarts the broker container. It checks nothing
beyond the process answering and requires no authentication.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from helmi.app.api.http.errors import empty_response

router = APIRouter(tags=["health"])


@router.get("/liveness", summary="Liveness probe")
async def liveness() -> JSONResponse:
    return empty_response()
