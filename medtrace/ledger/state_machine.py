"""Custody state machine: validates transitions and applies them to the log and registry atomically."""

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from medtrace.domain.exceptions import ProductNotFoundError
from medtrace.domain.identifiers import IdentifierGenerator
from medtrace.domain.models.product import Product, ProductData
from medtrace.domain.models.transaction import (
    SettlementRef,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from medtrace.domain.validators.product_validator import (
    validate_actor_id,
    validate_assignment,
    validate_product_data,
    validate_sale,
)
from medtrace.ledger.product_registry import ProductRegistry
from medtrace.ledger.transaction_log import TransactionLog

DEFAULT_VERIFIER = "verification_system"


class CustodyStateMachine:
    """
    manufactured -> assigned -> sold, with verification as an overlay event.

    Assign and sell accept any prior status: re-assigning re-targets the holder and
    re-selling keeps the original QR code. Every transition on a product runs under
    that product's lock, so the log append and the registry update are never
    observed half-done.
    """

    def __init__(
        self,
        log: TransactionLog,
        registry: ProductRegistry,
        identifiers: Optional[IdentifierGenerator] = None,
    ) -> None:
        self._log = log
        self._registry = registry
        self._identifiers = identifiers or IdentifierGenerator()
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.Lock()
            return lock

    @contextmanager
    def product_scope(self, product_id: str) -> Iterator[None]:
        """Mutual exclusion for one product's transitions and consistent reads."""
        with self._lock_for(product_id):
            yield

    def _require(self, product_id: str) -> Product:
        product = self._registry.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _record(self, draft: TransactionDraft) -> Transaction:
        event = self._log.append(draft)
        self._registry.upsert_from_event(event)
        return event

    def create(
        self,
        data: ProductData,
        manufacturer_id: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> Product:
        """Register a new product in `manufactured` state held by its manufacturer."""
        validate_product_data(data)
        validate_actor_id(manufacturer_id, "manufacturer_id")
        while True:
            product_id = self._identifiers.product_id()
            with self.product_scope(product_id):
                if product_id in self._registry:
                    continue
                self._record(
                    TransactionDraft(
                        product_id=product_id,
                        kind=TransactionKind.CREATED,
                        actor_from=manufacturer_id,
                        payload=data.to_payload(),
                        settlement_ref=settlement_ref,
                    )
                )
                return self._require(product_id)

    def assign(
        self,
        product_id: str,
        distributor_id: str,
        dispatch_date: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> Transaction:
        """Hand custody to a distributor."""
        validate_assignment(distributor_id, dispatch_date)
        # Products are never deleted, so an unknown id can be rejected before locking.
        self._require(product_id)
        with self.product_scope(product_id):
            product = self._require(product_id)
            return self._record(
                TransactionDraft(
                    product_id=product_id,
                    kind=TransactionKind.ASSIGNED,
                    actor_from=product.current_holder_id,
                    actor_to=distributor_id,
                    payload={"dispatch_date": dispatch_date},
                    settlement_ref=settlement_ref,
                )
            )

    def sell(
        self,
        product_id: str,
        healthcare_provider_id: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> str:
        """Hand custody to a healthcare provider. Returns the product's QR code."""
        validate_sale(healthcare_provider_id)
        self._require(product_id)
        with self.product_scope(product_id):
            product = self._require(product_id)
            qr_code = product.qr_code or self._identifiers.qr_code(product_id)
            self._record(
                TransactionDraft(
                    product_id=product_id,
                    kind=TransactionKind.SOLD,
                    actor_from=product.current_holder_id,
                    actor_to=healthcare_provider_id,
                    payload={"qr_code": qr_code},
                    settlement_ref=settlement_ref,
                )
            )
            return qr_code

    def verify(
        self,
        product_id: str,
        settlement_ref: Optional[SettlementRef] = None,
        verifier_id: Optional[str] = None,
    ) -> Transaction:
        """Record that a verification lookup happened. Status is unchanged."""
        self._require(product_id)
        with self.product_scope(product_id):
            self._require(product_id)
            return self._record(
                TransactionDraft(
                    product_id=product_id,
                    kind=TransactionKind.VERIFIED,
                    actor_from=verifier_id or DEFAULT_VERIFIER,
                    payload={"verified": True},
                    settlement_ref=settlement_ref,
                )
            )
