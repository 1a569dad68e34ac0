"""
Profile image URL helpers.

Part of HQ-18: Upload proxy

The backend serves uploaded files under /uploads on its own host. Clients
load them through the proxy at /api/uploads instead, so absolute upload URLs
are rewritten; avatar endpoints and cloud storage URLs are used as given.
"""

import logging
import re
from typing import Optional, Union

logger = logging.getLogger(__name__)

PROXY_PREFIX = "/api/uploads/"
CLOUD_STORAGE_PREFIX = "https://storage.googleapis.com/"

_BACKEND_UPLOAD_URL = re.compile(r"^https?://[^/]+/uploads/(.+)$")


def get_avatar_url(url: Optional[str], backend_base: str) -> Optional[str]:
    """
    Convert a profile image URL from the backend into a displayable one.

    Args:
        url: profile_image_url as returned by the backend
        backend_base: backend host without the /api/v1 suffix

    Returns:
        The URL to load, or None when the user has no image.
    """
    if not url:
        return None

    # Relative avatar endpoint, e.g. /api/v1/users/{id}/avatar
    if url.startswith("/api/v1/users/") and "/avatar" in url:
        return f"{backend_base.rstrip('/')}{url}"

    if url.startswith(PROXY_PREFIX) or url.startswith(CLOUD_STORAGE_PREFIX):
        return url

    if "/api/v1/users/" in url and "/avatar" in url:
        return url

    match = _BACKEND_UPLOAD_URL.match(url)
    if match:
        return f"{PROXY_PREFIX}{match.group(1)}"

    logger.warning("Unknown avatar URL format: %s", url)
    return url


def with_cache_busting(url: Optional[str], key: Union[str, int]) -> str:
    """Append a `t=<key>` query parameter so a replaced image is refetched."""
    if not url:
        return ""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}t={key}"
