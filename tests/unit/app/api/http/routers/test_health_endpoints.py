"""Unit tests for the liveness endpoint."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from helmi.app.api.http.routers.health import router


def test_liveness_returns_empty_object() -> None:
    app = FastAPI()
    app.include_router(router)

    response = TestClient(app).get("/liveness")

    assert response.status_code == 200
    assert response.json() == {}
