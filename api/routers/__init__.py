"""
FastAPI routers grouped by concern (REST API for places/photos, HTML pages).

Each file inside this package exposes an APIRouter that the app factory
includes. This keeps endpoint definitions close to their use cases.
"""
