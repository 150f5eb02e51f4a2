# medtrace/infrastructure/database/models.py

from sqlalchemy import JSON, Column, Integer, String

from medtrace.infrastructure.database.session import Base


class LedgerTransaction(Base):
    """ORM model for persisted ledger events. Rows are inserted once and never updated."""

    __tablename__ = "ledger_transactions"

    sequence = Column(Integer, primary_key=True, autoincrement=False)
    transaction_id = Column(String, nullable=False, unique=True)
    product_id = Column(String, nullable=False, index=True)
    kind = Column(String, nullable=False)
    # ISO-8601 text so the hashed representation survives the round trip exactly.
    timestamp = Column(String, nullable=False)
    actor_from = Column(String, nullable=True)
    actor_to = Column(String, nullable=True)
    payload = Column(JSON, nullable=False)
    integrity_hash = Column(String, nullable=False)
    previous_hash = Column(String, nullable=False)
    settlement_transaction_id = Column(String, nullable=True)
    settlement_cost = Column(String, nullable=True)
