"""Cost schedule router: GET /costs."""

from typing import List

from fastapi import APIRouter

from medtrace.application.costs import TransactionCost, describe, format_eth_amount
from medtrace.domain.schemas.product import CostResponse

router = APIRouter()


@router.get("/", response_model=List[CostResponse])
async def list_costs():
    """Cost charged per custody action when the service settles on the caller's behalf."""
    return [
        CostResponse(
            action=cost.name,
            amount=cost.value,
            display=format_eth_amount(cost.value),
            description=describe(cost),
        )
        for cost in TransactionCost
    ]
