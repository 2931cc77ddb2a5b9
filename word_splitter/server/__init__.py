"""HTTP API: FastAPI app and its pydantic request/response models."""
