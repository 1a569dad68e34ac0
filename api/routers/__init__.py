"""
Router package for the HypertroQ upload proxy.

Part of HQ-18: Upload proxy

- health: liveness endpoint
- uploads: proxy for files the backend serves under /uploads
"""

from api.routers.health import router as health_router
from api.routers.uploads import router as uploads_router

__all__ = [
    "health_router",
    "uploads_router",
]
