"""HTTP surface of the dispute arbiter (FastAPI)."""
