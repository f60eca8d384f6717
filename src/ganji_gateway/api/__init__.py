"""HTTP surface: FastAPI app, middleware and versioned routers."""
