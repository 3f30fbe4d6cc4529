from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse

router = APIRouter(prefix="", tags=["pages"])

SITE_TITLE = "Nos souvenirs"


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    templates = _templates(request)
    return templates.TemplateResponse(request, "index.html", {"title": SITE_TITLE})


def admin_page(request: Request):
    """Admin panel; mounted by the app factory at the unlisted ADMIN_PATH."""
    templates = _templates(request)
    return templates.TemplateResponse(request, "admin.html", {"title": f"{SITE_TITLE} - admin"})


@router.get("/health")
def health():
    return {"ok": True}


# Chrome devtools probe; answering avoids a noisy 404 in the logs
@router.get("/.well-known/appspecific/com.chrome.devtools.json", include_in_schema=False)
def chrome_devtools_wellknown():
    return PlainTextResponse("", status_code=204)
