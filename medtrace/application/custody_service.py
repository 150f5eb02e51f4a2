"""Custody application service: settle (optionally), then apply the custody transition on the ledger."""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from medtrace.application.costs import TransactionCost
from medtrace.application.exceptions import SettlementError, SettlementRequiredError
from medtrace.application.settlement import Settler, build_memo
from medtrace.domain.exceptions import ProductNotFoundError
from medtrace.domain.models.product import ProductStatus
from medtrace.domain.models.transaction import SettlementRef
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
from medtrace.domain.validators.product_validator import (
    validate_actor_id,
    validate_assignment,
    validate_product_data,
    validate_sale,
)
from medtrace.ledger.ledger import Ledger


class CustodyService:
    """
    Application-layer orchestration only. No HTTP, no FastAPI.
    Settlement happens strictly before the ledger transition; if it fails the
    transition is never attempted and nothing is written.
    """

    def __init__(
        self,
        ledger: Ledger,
        settler: Optional[Settler],
        logger: logging.Logger,
        require_settlement: bool = False,
        settlement_address: str = "",
    ) -> None:
        self._ledger = ledger
        self._settler = settler
        self._logger = logger
        self._require_settlement = require_settlement
        self._settlement_address = settlement_address

    async def _settlement_for(
        self,
        settlement: Optional[SettlementRef],
        pay: bool,
        cost: TransactionCost,
        **memo_fields: str,
    ) -> Optional[SettlementRef]:
        if settlement is None and pay:
            if self._settler is None:
                raise SettlementRequiredError("No payment provider is configured")
            memo = build_memo(cost.name, **memo_fields)
            try:
                settlement = await self._settler.settle(self._settlement_address, cost.value, memo)
            except SettlementError as e:
                self._logger.error(
                    "settlement_failed",
                    extra={"product_id": memo_fields.get("product_id"), "error": e.message},
                )
                raise
            self._logger.info(
                "settlement_obtained",
                extra={
                    "product_id": memo_fields.get("product_id"),
                    "settlement_id": settlement.transaction_id,
                },
            )
        if settlement is None and self._require_settlement:
            raise SettlementRequiredError("A settlement reference is required for this transition")
        return settlement

    async def _run(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a ledger call on a worker thread. It may block on a per-product lock or a store commit."""
        return await asyncio.to_thread(fn, *args)

    async def _require_product(self, product_id: str) -> None:
        if await self._run(self._ledger.get_product, product_id) is None:
            raise ProductNotFoundError(product_id)

    async def create_product(self, request: ProductCreateRequest, actor_id: str) -> ProductResponse:
        data = request.to_domain()
        validate_product_data(data)
        validate_actor_id(actor_id, "manufacturer_id")
        settlement = await self._settlement_for(
            request.settlement.to_domain() if request.settlement else None,
            request.pay,
            TransactionCost.ADD_PRODUCT,
            manufacturer=actor_id,
            batch_number=data.batch_number,
        )
        product_id = await self._run(self._ledger.create_product, data, actor_id, settlement)
        self._logger.info("product_created", extra={"product_id": product_id, "kind": "created"})
        return ProductResponse.from_domain(await self._run(self._ledger.get_product, product_id))

    async def assign_product(self, product_id: str, request: AssignRequest) -> ProductResponse:
        validate_assignment(request.distributor_id, request.dispatch_date)
        await self._require_product(product_id)
        settlement = await self._settlement_for(
            request.settlement.to_domain() if request.settlement else None,
            request.pay,
            TransactionCost.ASSIGN_PRODUCT,
            product_id=product_id,
            distributor=request.distributor_id,
        )
        await self._run(
            self._ledger.assign_product,
            product_id,
            request.distributor_id,
            request.dispatch_date,
            settlement,
        )
        self._logger.info("product_assigned", extra={"product_id": product_id, "kind": "assigned"})
        return ProductResponse.from_domain(await self._run(self._ledger.get_product, product_id))

    async def sell_product(self, product_id: str, request: SellRequest) -> SellResponse:
        validate_sale(request.healthcare_provider_id)
        await self._require_product(product_id)
        settlement = await self._settlement_for(
            request.settlement.to_domain() if request.settlement else None,
            request.pay,
            TransactionCost.SELL_PRODUCT,
            product_id=product_id,
            healthcare_provider=request.healthcare_provider_id,
        )
        qr_code = await self._run(
            self._ledger.sell_product, product_id, request.healthcare_provider_id, settlement
        )
        self._logger.info("product_sold", extra={"product_id": product_id, "kind": "sold"})
        return SellResponse(product_id=product_id, qr_code=qr_code)

    async def verify_product(self, query: str, request: VerifyRequest, verifier_id: str) -> VerifyResponse:
        """
        Verification accepts a product id or a QR code. The verification fee (if paid) is
        settled before the lookup; an unknown product is a negative result, not an error.
        """
        settlement = await self._settlement_for(
            request.settlement.to_domain() if request.settlement else None,
            request.pay,
            TransactionCost.VIEW_HISTORY,
            product_query=query,
            verifier=verifier_id,
        )
        product = await self._run(self._ledger.resolve, query)
        found = product is not None and await self._run(
            self._ledger.verify_product, product.id, settlement, verifier_id
        )
        if not found:
            self._logger.info("product_not_found", extra={"product_id": query})
            return VerifyResponse(found=False)
        self._logger.info("product_verified", extra={"product_id": product.id, "kind": "verified"})
        current = await self._run(self._ledger.get_product, product.id)
        history = await self._run(self._ledger.get_history, product.id)
        return VerifyResponse(
            found=True,
            product=ProductResponse.from_domain(current),
            history=[TransactionResponse.from_domain(t) for t in history],
        )

    async def get_product(self, query: str) -> Optional[ProductResponse]:
        product = await self._run(self._ledger.resolve, query)
        if product is None:
            return None
        return ProductResponse.from_domain(product)

    async def get_history(self, product_id: str) -> List[TransactionResponse]:
        history = await self._run(self._ledger.get_history, product_id)
        return [TransactionResponse.from_domain(t) for t in history]

    async def list_products(
        self,
        manufacturer_id: Optional[str] = None,
        holder_id: Optional[str] = None,
        status: Optional[ProductStatus] = None,
    ) -> List[ProductResponse]:
        if manufacturer_id:
            products = await self._run(self._ledger.products_by_manufacturer, manufacturer_id)
        elif holder_id:
            products = await self._run(self._ledger.products_held_by, holder_id)
        else:
            products = await self._run(self._ledger.list_products)
        if holder_id:
            products = [p for p in products if p.current_holder_id == holder_id]
        if status is not None:
            products = [p for p in products if p.status == status]
        return [ProductResponse.from_domain(p) for p in products]

    async def check_integrity(self, product_id: str) -> IntegrityResponse:
        history = await self._run(self._ledger.get_history, product_id)
        if not history:
            raise ProductNotFoundError(product_id)
        return IntegrityResponse(
            product_id=product_id,
            valid=await self._run(self._ledger.verify_integrity, product_id),
            events=len(history),
        )
