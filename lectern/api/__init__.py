"""HTTP surface: FastAPI application, routers and dependencies."""
