"""
SaaS Kit billing API package.

The FastAPI application lives in api.app; import it from there
(``uvicorn api.app:app``).
"""
