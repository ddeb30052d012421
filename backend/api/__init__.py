"""
API ROUTES PACKAGE
==================
API route definitions for the Pine Script designer.
"""
from .indicator_routes import router as indicator_router


def register_routes(app):
    """Register all API routes with the FastAPI app."""
    app.include_router(indicator_router)


__all__ = [
    'indicator_router',
    'register_routes',
]
