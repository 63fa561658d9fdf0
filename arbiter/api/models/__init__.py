"""API request/response models (pydantic v2)."""
