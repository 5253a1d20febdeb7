"""auth/ -- Authentication and authorization core for AuthGate.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/. api/ imports from auth/, not the other way around.
The one exception is auth/dependencies.py, which is part of FastAPI's
dependency injection system and may import from fastapi.
"""
