"""
Core utilities shared across the memory map API.

This package hosts configuration helpers (env vars, paths, upload limits) and
the logging setup. Services and routers depend on these primitives instead of
reading the environment themselves.
"""
