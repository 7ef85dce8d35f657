"""HTTP API for lyrics conversion (FastAPI)."""
