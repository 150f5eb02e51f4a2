"""DB-backed transaction store. Persists ledger events to the ledger_transactions table."""

from datetime import datetime
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.engine import Engine

from medtrace.domain.models.transaction import SettlementRef, Transaction, TransactionKind
from medtrace.infrastructure.database.models import LedgerTransaction
from medtrace.infrastructure.database.session import (
    Base,
    create_ledger_engine,
    create_session_factory,
)


class DbTransactionStore:
    """Append-only event table. Implements TransactionStore protocol."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        Base.metadata.create_all(bind=engine)

    @classmethod
    def from_url(cls, database_url: str) -> "DbTransactionStore":
        return cls(create_ledger_engine(database_url))

    def append(self, txn: Transaction) -> None:
        """Insert and commit one event."""
        settlement = txn.settlement_ref
        orm = LedgerTransaction(
            sequence=txn.sequence,
            transaction_id=txn.id,
            product_id=txn.product_id,
            kind=txn.kind.value,
            timestamp=txn.timestamp.isoformat(),
            actor_from=txn.actor_from,
            actor_to=txn.actor_to,
            payload=dict(txn.payload),
            integrity_hash=txn.integrity_hash,
            previous_hash=txn.previous_hash,
            settlement_transaction_id=settlement.transaction_id if settlement else None,
            settlement_cost=settlement.cost if settlement else None,
        )
        with self._session_factory() as session:
            session.add(orm)
            session.commit()

    def load(self) -> Iterator[Transaction]:
        """Yield every event ordered by sequence."""
        stmt = select(LedgerTransaction).order_by(LedgerTransaction.sequence)
        with self._session_factory() as session:
            rows = session.execute(stmt).scalars().all()
        for orm in rows:
            settlement = None
            if orm.settlement_transaction_id is not None:
                settlement = SettlementRef(
                    transaction_id=orm.settlement_transaction_id,
                    cost=orm.settlement_cost or "",
                )
            yield Transaction(
                id=orm.transaction_id,
                product_id=orm.product_id,
                kind=TransactionKind(orm.kind),
                timestamp=datetime.fromisoformat(orm.timestamp),
                actor_from=orm.actor_from,
                actor_to=orm.actor_to,
                payload=orm.payload or {},
                integrity_hash=orm.integrity_hash,
                previous_hash=orm.previous_hash,
                sequence=orm.sequence,
                settlement_ref=settlement,
            )

    def dispose(self) -> None:
        self._engine.dispose()
