"""Product registry: a materialized view of current product state, derived from the transaction log."""

import threading
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from medtrace.domain.exceptions import RegistryInconsistencyError
from medtrace.domain.models.product import Product, ProductStatus
from medtrace.domain.models.transaction import Transaction, TransactionKind

# Status each kind moves a product to; verification leaves status untouched.
_STATUS_FOR_KIND: Dict[TransactionKind, ProductStatus] = {
    TransactionKind.CREATED: ProductStatus.MANUFACTURED,
    TransactionKind.ASSIGNED: ProductStatus.ASSIGNED,
    TransactionKind.SOLD: ProductStatus.SOLD,
}


def apply_event(current: Optional[Product], event: Transaction) -> Product:
    """Return the product snapshot after `event`. Pure; raises if the event cannot apply."""
    if event.kind is TransactionKind.CREATED:
        if current is not None:
            raise RegistryInconsistencyError(f"Product {event.product_id} already exists")
        payload = event.payload
        return Product(
            id=event.product_id,
            name=payload["name"],
            batch_number=payload["batch_number"],
            expiration_date=payload["expiration_date"],
            description=payload.get("description", ""),
            manufacturer_id=event.actor_from,
            current_holder_id=event.actor_from,
            status=ProductStatus.MANUFACTURED,
            settlement_ref=event.settlement_ref,
        )

    if current is None:
        raise RegistryInconsistencyError(
            f"Cannot apply {event.kind.value} event to unknown product {event.product_id}"
        )

    settlement_ref = event.settlement_ref or current.settlement_ref
    if event.kind is TransactionKind.VERIFIED:
        return replace(current, settlement_ref=settlement_ref)

    return replace(
        current,
        status=_STATUS_FOR_KIND[event.kind],
        current_holder_id=event.actor_to,
        # The QR code is fixed at the first sale.
        qr_code=current.qr_code or event.payload.get("qr_code"),
        settlement_ref=settlement_ref,
    )


class ProductRegistry:
    """
    Point lookups and queries over current product state.
    Only the custody state machine applies events; any disagreement with the log is
    resolved by rebuilding from the log.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._products: Dict[str, Product] = {}
        self._qr_index: Dict[str, str] = {}
        # Last applied log sequence per product; re-applying an older event is a no-op.
        self._applied: Dict[str, int] = {}

    @classmethod
    def replay(cls, events: Iterable[Transaction]) -> "ProductRegistry":
        """Build a fresh registry by applying `events` in order."""
        registry = cls()
        for event in events:
            registry.upsert_from_event(event)
        return registry

    def _apply_locked(self, event: Transaction) -> None:
        last = self._applied.get(event.product_id)
        if last is not None and event.sequence <= last:
            return
        product = apply_event(self._products.get(event.product_id), event)
        self._products[product.id] = product
        if product.qr_code:
            self._qr_index[product.qr_code] = product.id
        self._applied[product.id] = event.sequence

    def upsert_from_event(self, event: Transaction) -> None:
        with self._lock:
            self._apply_locked(event)

    def rebuild(self, events: Callable[[], Iterable[Transaction]]) -> None:
        """
        Discard current state and replay. `events` is called while the registry lock is
        held, so transitions appended concurrently are either in the replay or applied after it.
        """
        with self._lock:
            self._products = {}
            self._qr_index = {}
            self._applied = {}
            for event in events():
                self._apply_locked(event)

    def get(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def find_by_qr_code(self, qr_code: str) -> Optional[Product]:
        with self._lock:
            product_id = self._qr_index.get(qr_code)
            return self._products.get(product_id) if product_id else None

    def list_by(self, predicate: Callable[[Product], bool]) -> List[Product]:
        """Products matching `predicate`, in insertion order."""
        with self._lock:
            snapshot = list(self._products.values())
        return [p for p in snapshot if predicate(p)]

    def __contains__(self, product_id: object) -> bool:
        with self._lock:
            return product_id in self._products

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)
