"""API Layer — FastAPI routers, request dependencies, middleware and error handlers."""
