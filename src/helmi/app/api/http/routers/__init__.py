"""HTTP routers of the broker."""

from helmi.app.api.http.routers import broker, health

__all__ = ["broker", "health"]
