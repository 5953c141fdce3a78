"""HTTP server package: FastAPI app, request handler, and schemas."""
