"""
Health check for API v1.

Public and excluded from the activity log, so load balancers can poll it.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

router = APIRouter()


@router.get("")
async def health() -> Dict[str, Any]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
