"""
API package for the HypertroQ upload proxy.

Part of HQ-18: Upload proxy

This package contains:
- deps.py: FastAPI dependency providers for DI
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_backend_base_url,
    get_settings,
    get_upstream_timeout,
    get_upstream_transport,
)

__all__ = [
    # Settings
    "get_settings",
    # Upstream
    "get_backend_base_url",
    "get_upstream_timeout",
    "get_upstream_transport",
]
