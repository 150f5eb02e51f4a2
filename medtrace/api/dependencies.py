"""FastAPI dependency injection: Ledger, Settler, CustodyService, actor, correlation_id."""

import logging
from typing import Annotated

from fastapi import Depends, Request

from medtrace.application.custody_service import CustodyService
from medtrace.application.settlement import Settler
from medtrace.config.settings import get_settings
from medtrace.infrastructure.database.transaction_store_db import DbTransactionStore
from medtrace.infrastructure.payment.simulated_settler import SimulatedSettler
from medtrace.ledger.ledger import Ledger

_ledger: Ledger | None = None
_settler: Settler | None = None


def get_ledger() -> Ledger:
    """Return the process-wide ledger, replaying the durable store on first use if one is configured."""
    global _ledger
    if _ledger is None:
        settings = get_settings()
        if settings.database_url:
            _ledger = Ledger.open(DbTransactionStore.from_url(settings.database_url))
        else:
            _ledger = Ledger()
    return _ledger


def get_settler() -> Settler:
    """Return singleton settler."""
    global _settler
    if _settler is None:
        _settler = SimulatedSettler()
    return _settler


async def get_custody_service(
    ledger: Annotated[Ledger, Depends(get_ledger)],
    settler: Annotated[Settler, Depends(get_settler)],
) -> CustodyService:
    """Build CustodyService with injected ledger, settler, policy and logger."""
    settings = get_settings()
    return CustodyService(
        ledger=ledger,
        settler=settler,
        logger=logging.getLogger("medtrace.custody"),
        require_settlement=settings.require_settlement,
        settlement_address=settings.settlement_address,
    )


def get_actor_id(request: Request) -> str:
    """Extract actor_id from request.state (set by middleware)."""
    return request.state.actor_id


def get_correlation_id(request: Request) -> str:
    """Extract correlation_id from request.state (set by middleware)."""
    return getattr(request.state, "correlation_id", "") or ""
