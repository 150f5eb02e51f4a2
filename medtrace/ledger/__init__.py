"""Ledger core: transaction log, product registry, custody state machine."""

from medtrace.ledger.integrity import GENESIS_HASH, verify_chain
from medtrace.ledger.ledger import Ledger
from medtrace.ledger.product_registry import ProductRegistry, apply_event
from medtrace.ledger.state_machine import CustodyStateMachine
from medtrace.ledger.store import TransactionStore
from medtrace.ledger.transaction_log import TransactionLog

__all__ = [
    "CustodyStateMachine",
    "GENESIS_HASH",
    "Ledger",
    "ProductRegistry",
    "TransactionLog",
    "TransactionStore",
    "apply_event",
    "verify_chain",
]
