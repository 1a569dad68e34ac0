"""
FastAPI Dependency Providers for the HypertroQ upload proxy.

Part of HQ-18: Upload proxy

Routers depend on these providers rather than reading settings or building
HTTP transports themselves, so tests can swap them out.

Usage in routers:
    from api.deps import get_backend_base_url

    @router.get("/api/uploads/{file_path:path}")
    async def proxy_upload(backend_base: str = Depends(get_backend_base_url)):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_upstream_transport] = lambda: httpx.MockTransport(handler)
"""

from typing import Optional

import httpx
from fastapi import Depends

from backend.settings import Settings, get_settings as _get_settings


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Upstream Providers
# =============================================================================


def get_backend_base_url(settings: Settings = Depends(get_settings)) -> str:
    """Backend host serving /uploads (API URL without /api/v1)."""
    return settings.backend_base_url


def get_upstream_timeout(settings: Settings = Depends(get_settings)) -> float:
    return settings.request_timeout_seconds


def get_upstream_transport() -> Optional[httpx.AsyncBaseTransport]:
    """
    Transport for upstream requests.

    None means httpx's default network transport; tests override this with
    an httpx.MockTransport.
    """
    return None


__all__ = [
    "get_settings",
    "get_backend_base_url",
    "get_upstream_timeout",
    "get_upstream_transport",
]
