# Application layer: services that orchestrate the ledger and external collaborators.

from medtrace.application.custody_service import CustodyService
from medtrace.application.exceptions import (
    ApplicationError,
    PaymentFailedError,
    ProviderUnavailableError,
    SettlementError,
    SettlementRequiredError,
    UserRejectedError,
)
from medtrace.application.settlement import Settler, build_memo, memo_to_hex

__all__ = [
    "CustodyService",
    "ApplicationError",
    "PaymentFailedError",
    "ProviderUnavailableError",
    "SettlementError",
    "SettlementRequiredError",
    "UserRejectedError",
    "Settler",
    "build_memo",
    "memo_to_hex",
]
