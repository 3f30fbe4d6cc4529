"""Application factory: wires settings, storage, routers and static mounts."""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from api.core.config import Settings
from api.core.logging import configure_logging
from api.repositories import Storage, build_storage
from api.routers import pages as pages_router
from api.routers import places as places_router
from api.services.place_service import PlaceService

logger = logging.getLogger(__name__)

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")
TEMPLATES = os.path.join(BASE, "..", "templates")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data: https://*.tile.openstreetmap.org https://unpkg.com https://raw.githubusercontent.com; "
            "style-src 'self' 'unsafe-inline' https://unpkg.com; "
            "script-src 'self' 'unsafe-inline' https://unpkg.com; "
            "connect-src 'self' https://nominatim.openstreetmap.org",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def file_response(self, *args, **kwargs):
        resp = super().file_response(*args, **kwargs)
        # upload names are unique per file, so the content never changes
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"
        return resp


def build_app(settings: Settings, storage: Storage | None = None) -> FastAPI:
    """Build a fully wired app; storage defaults to the configured backend."""
    configure_logging(settings.log_level)
    app = FastAPI(title="Memory Map API")

    os.makedirs(settings.uploads_dir, exist_ok=True)
    if storage is None:
        storage = build_storage(settings)
    app.state.settings = settings
    app.state.place_service = PlaceService(storage, settings.uploads_dir)
    app.state.templates = Jinja2Templates(directory=TEMPLATES)

    app.mount("/static", StaticFiles(directory=WEB), name="static")
    app.mount("/uploads", CachedStaticFiles(directory=settings.uploads_dir), name="uploads")

    allowed_cors = {settings.public_base_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:8000", "http://127.0.0.1:8000"})
    allowed_cors = {origin for origin in allowed_cors if origin}
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(allowed_cors),
            allow_credentials=False,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")

    app.include_router(places_router.router)
    app.include_router(pages_router.router)
    app.add_api_route(
        settings.admin_path,
        pages_router.admin_page,
        methods=["GET"],
        response_class=HTMLResponse,
        include_in_schema=False,
    )

    logger.info("Memory map ready (uploads in %s, admin at %s)", settings.uploads_dir, settings.admin_path)
    return app
