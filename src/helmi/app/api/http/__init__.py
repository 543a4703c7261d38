"""HTTP surface of the broker: FastAPI routers, schemas and dependencies."""
