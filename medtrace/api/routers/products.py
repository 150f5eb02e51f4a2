"""Products API router: custody transitions, lookups and history."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from medtrace.api.dependencies import get_actor_id, get_custody_service
from medtrace.application.custody_service import CustodyService
from medtrace.domain.models.product import ProductStatus
from medtrace.domain.schemas.product import (
    AssignRequest,
    IntegrityResponse,
    ProductCreateRequest,
    ProductResponse,
    SellRequest,
    SellResponse,
    TransactionResponse,
    VerifyRequest,
    VerifyResponse,
)

router = APIRouter()


@router.post("/", response_model=ProductResponse, status_code=201)
async def create_product(
    body: ProductCreateRequest,
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    """Register a product; the calling actor is its manufacturer and first holder."""
    return await service.create_product(body, actor_id)


@router.get("/", response_model=List[ProductResponse])
async def list_products(
    service: Annotated[CustodyService, Depends(get_custody_service)],
    manufacturer_id: Annotated[Optional[str], Query()] = None,
    holder_id: Annotated[Optional[str], Query()] = None,
    status: Annotated[Optional[ProductStatus], Query()] = None,
):
    return await service.list_products(manufacturer_id, holder_id, status)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    """Get product by id or QR code."""
    product = await service.get_product(product_id)
    if product is None:
        return JSONResponse(status_code=404, content={"detail": "Product not found"})
    return product


@router.get("/{product_id}/history", response_model=List[TransactionResponse])
async def get_history(
    product_id: str,
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    """Ledger events for a product in append order. Unknown products have an empty history."""
    return await service.get_history(product_id)


@router.get("/{product_id}/integrity", response_model=IntegrityResponse)
async def check_integrity(
    product_id: str,
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    return await service.check_integrity(product_id)


@router.post("/{product_id}/assign", response_model=ProductResponse)
async def assign_product(
    product_id: str,
    body: AssignRequest,
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    return await service.assign_product(product_id, body)


@router.post("/{product_id}/sell", response_model=SellResponse)
async def sell_product(
    product_id: str,
    body: SellRequest,
    service: Annotated[CustodyService, Depends(get_custody_service)],
):
    return await service.sell_product(product_id, body)


@router.post("/{product_id}/verify", response_model=VerifyResponse)
async def verify_product(
    product_id: str,
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[CustodyService, Depends(get_custody_service)],
    body: Optional[VerifyRequest] = None,
):
    """Verify by product id or QR code. Not found is a negative result (found=false), not an error."""
    return await service.verify_product(product_id, body or VerifyRequest(), actor_id)
