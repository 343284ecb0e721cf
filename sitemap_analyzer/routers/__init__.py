# ==============================================================================
# routers/__init__.py — API Route Handlers
# ==============================================================================
# Purpose: FastAPI route handlers for the application
# ==============================================================================

from .analysis_router import router as analysis_router

__all__ = [
    'analysis_router',
]
