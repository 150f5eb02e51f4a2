"""Transaction store protocol. The transaction log writes through to it; infrastructure implements it."""

from typing import Iterable, Protocol

from medtrace.domain.models.transaction import Transaction


class TransactionStore(Protocol):
    """Durable, append-only backing for the transaction log. Source of truth across restarts."""

    def append(self, txn: Transaction) -> None:
        """Persist one event. Must not return before the event is durable."""
        ...

    def load(self) -> Iterable[Transaction]:
        """Yield every persisted event in global append order."""
        ...
