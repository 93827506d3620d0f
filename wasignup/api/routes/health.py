"""
Health check endpoint.
"""

import time
from typing import Any

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    """Liveness probe; never touches the platform or the registry."""
    return {"status": "ok", "timestamp": str(int(time.time()))}
