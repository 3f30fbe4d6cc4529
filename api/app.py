"""Entry point for uvicorn: `uvicorn api.app:app`."""
from fastapi import FastAPI

from api.app_factory import build_app
from api.core.config import get_settings

app = build_app(get_settings())


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    return app
