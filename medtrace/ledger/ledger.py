"""Ledger: transaction log (authoritative) plus product registry (derived), behind the custody operations."""

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from medtrace.domain.exceptions import ProductNotFoundError
from medtrace.domain.identifiers import IdentifierGenerator, parse_qr_code
from medtrace.domain.models.product import Product, ProductData, ProductStatus
from medtrace.domain.models.transaction import SettlementRef, Transaction
from medtrace.ledger.product_registry import ProductRegistry
from medtrace.ledger.state_machine import CustodyStateMachine
from medtrace.ledger.store import TransactionStore
from medtrace.ledger.transaction_log import TransactionLog, utcnow


class Ledger:
    """
    Exclusive owner of one transaction log and its product registry.
    Construct once at process start and pass the instance to callers.
    The ledger does no I/O of its own beyond an optional store, and never logs.
    """

    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        identifiers: Optional[IdentifierGenerator] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        identifiers = identifiers or IdentifierGenerator()
        self._log = TransactionLog(identifiers=identifiers, store=store, clock=clock)
        self._registry = ProductRegistry.replay(self._log.all())
        self._machine = CustodyStateMachine(self._log, self._registry, identifiers)

    @classmethod
    def open(cls, store: TransactionStore, **kwargs) -> "Ledger":
        """Load a persisted log and rebuild the registry by full replay."""
        return cls(store=store, **kwargs)

    @property
    def log(self) -> TransactionLog:
        return self._log

    @property
    def registry(self) -> ProductRegistry:
        return self._registry

    # -- transitions --------------------------------------------------------

    def create_product(
        self,
        data: ProductData,
        actor_id: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> str:
        return self._machine.create(data, actor_id, settlement_ref).id

    def assign_product(
        self,
        product_id: str,
        distributor_id: str,
        dispatch_date: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> None:
        self._machine.assign(product_id, distributor_id, dispatch_date, settlement_ref)

    def sell_product(
        self,
        product_id: str,
        holder_id: str,
        settlement_ref: Optional[SettlementRef] = None,
    ) -> str:
        return self._machine.sell(product_id, holder_id, settlement_ref)

    def verify_product(
        self,
        product_id: str,
        settlement_ref: Optional[SettlementRef] = None,
        verifier_id: Optional[str] = None,
    ) -> bool:
        """Unknown products are a negative verification: returns False and writes nothing."""
        try:
            self._machine.verify(product_id, settlement_ref, verifier_id)
        except ProductNotFoundError:
            return False
        return True

    # -- reads --------------------------------------------------------------

    def get_product(self, product_id: str) -> Optional[Product]:
        if product_id not in self._registry:
            return None
        with self._machine.product_scope(product_id):
            return self._registry.get(product_id)

    def get_history(self, product_id: str) -> Tuple[Transaction, ...]:
        if product_id not in self._registry:
            return self._log.history(product_id)
        with self._machine.product_scope(product_id):
            return self._log.history(product_id)

    def resolve(self, query: str) -> Optional[Product]:
        """Look a product up by id or by the QR code issued at sale."""
        query = query.strip()
        product = self.get_product(query)
        if product is not None:
            return product
        product = self._registry.find_by_qr_code(query)
        if product is not None:
            return product
        embedded = parse_qr_code(query)
        return self.get_product(embedded) if embedded else None

    def products_by_manufacturer(self, manufacturer_id: str) -> List[Product]:
        return self._registry.list_by(lambda p: p.manufacturer_id == manufacturer_id)

    def products_held_by(
        self, holder_id: str, status: Optional[ProductStatus] = None
    ) -> List[Product]:
        return self._registry.list_by(
            lambda p: p.current_holder_id == holder_id and (status is None or p.status == status)
        )

    def list_products(self) -> List[Product]:
        return self._registry.list_by(lambda p: True)

    # -- maintenance --------------------------------------------------------

    def verify_integrity(self, product_id: str) -> bool:
        return self._log.verify_integrity(product_id)

    def rebuild_registry(self) -> None:
        """Trust the log: discard the registry view and replay every event."""
        self._registry.rebuild(self._log.all)
