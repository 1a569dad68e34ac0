"""
Health check router.

Part of HQ-18: Upload proxy

Liveness endpoint for monitoring and load balancers.
"""

from fastapi import APIRouter

router = APIRouter(
    tags=["Health"],
)


@router.get("/health")
def health():
    """
    Simple liveness endpoint for the proxy app.

    Returns:
        dict: Status indicator for health checks
    """
    return {"status": "ok", "service": "hypertroq-client"}
