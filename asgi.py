"""
asgi.py -- ASGI entry point for AuthGate.

api/main.py builds the app; this module only re-exports it so process
managers have a stable import path. A presentation layer (HTML pages, if
any) would be mounted here, keeping api/ free of rendering concerns.

Run with:  uvicorn asgi:app --reload
"""

from api.main import app

__all__ = ["app"]
