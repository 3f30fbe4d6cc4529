"""
High-level use cases for the memory map API.

Each service module orchestrates repositories/adapters to implement business
rules (create a place, cascade deletes, accept uploads, etc.).

Routers (FastAPI endpoints) call these services instead of manipulating the
JSON document or the uploads directory directly.
"""
