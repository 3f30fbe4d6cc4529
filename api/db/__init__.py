"""SQL backend: engine/session helpers and the places/photos/counters tables."""

from .session import Base, get_engine, transaction
from .models import Counter, Photo, Place

__all__ = ["Base", "get_engine", "transaction", "Place", "Photo", "Counter"]
