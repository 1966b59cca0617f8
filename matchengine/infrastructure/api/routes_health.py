"""Health check endpoint."""

from fastapi import APIRouter, Depends

from matchengine.application.ports.record_store import RecordStore
from matchengine.config import settings
from matchengine.infrastructure.api.dependencies import get_record_store

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(store: RecordStore = Depends(get_record_store)):
    """Check API and record store connectivity."""
    try:
        await store.find("providers", limit=1)
        store_status = "connected"
    except Exception as e:
        store_status = f"error: {e}"

    return {
        "status": "ok" if store_status == "connected" else "degraded",
        "record_store": store_status,
        "backend": settings.record_store_backend,
        "service": "matchengine - assignment lifecycle & auto-rematch",
    }
