from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe for load balancers and uptime monitors.

    Returns:
        dict: ``status`` ("ok") and the deployment environment name.
    """

    return {"status": "ok", "env": settings.app_env}
