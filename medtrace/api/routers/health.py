# medtrace/api/routers/health.py

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from medtrace.api.dependencies import get_ledger
from medtrace.config.settings import get_settings
from medtrace.ledger.ledger import Ledger

router = APIRouter()


@router.get("/health")
async def health(request: Request, ledger: Annotated[Ledger, Depends(get_ledger)]):
    """Liveness plus ledger size. No actor header required."""
    settings = get_settings()
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "environment": settings.environment,
        "version": settings.version,
        "persistence": "database" if settings.database_url else "memory",
        "events": len(ledger.log),
        "products": len(ledger.registry),
        "correlation_id": request.state.correlation_id,
    }
