"""
Uploads proxy router.

Part of HQ-18: Upload proxy

Serves files the backend stores under /uploads through this app's own
origin, so browsers can load avatars without cross-origin requests to the
backend host.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from api.deps import get_backend_base_url, get_upstream_timeout, get_upstream_transport

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=3600"

router = APIRouter(
    prefix="/api/uploads",
    tags=["Uploads"],
)


def is_safe_upload_path(file_path: str) -> bool:
    """True when `file_path` stays inside /uploads (no empty or '..' segments)."""
    segments = file_path.replace("\\", "/").split("/")
    return all(segment not in ("", ".", "..") for segment in segments)


@router.get("/{file_path:path}")
async def proxy_upload(
    file_path: str,
    request: Request,
    backend_base: str = Depends(get_backend_base_url),
    timeout: float = Depends(get_upstream_timeout),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_upstream_transport),
):
    """
    Fetch `{backend}/uploads/{file_path}` and return it.

    Returns:
        The file body with the upstream content type, cacheable for an hour.
        A non-2xx upstream answer keeps its status with {"error": "File not found"};
        an unreachable backend yields 500 {"error": "Failed to fetch file"};
        a path escaping /uploads yields 400 {"error": "Invalid file path"}.
    """
    if not is_safe_upload_path(file_path):
        logger.warning("Rejected upload path %r", file_path)
        return JSONResponse({"error": "Invalid file path"}, status_code=400)

    url = f"{backend_base.rstrip('/')}/uploads/{file_path}"
    headers = {"Accept": request.headers.get("accept", "*/*")}

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            upstream = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Error proxying file {file_path}: {e}")
        return JSONResponse({"error": "Failed to fetch file"}, status_code=500)

    if not upstream.is_success:
        logger.info("Upload %s not served by backend: %s", file_path, upstream.status_code)
        return JSONResponse({"error": "File not found"}, status_code=upstream.status_code)

    return Response(
        content=upstream.content,
        status_code=200,
        media_type=upstream.headers.get("content-type", "application/octet-stream"),
        headers={"Cache-Control": CACHE_CONTROL},
    )
