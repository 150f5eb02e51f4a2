"""Simulated payment provider. Used when no real wallet is wired; implements the Settler protocol."""

import logging
import secrets
from typing import Optional, Type

from medtrace.application.exceptions import SettlementError
from medtrace.application.settlement import memo_to_hex
from medtrace.domain.models.transaction import SettlementRef

logger = logging.getLogger(__name__)


class SimulatedSettler:
    """
    Returns a wallet-style transaction hash (0x + 64 hex) and reports the requested
    amount as the cost paid. Optionally fails every call with a given SettlementError.
    """

    def __init__(self, fail_with: Optional[Type[SettlementError]] = None) -> None:
        self._fail_with = fail_with
        self.settled: list[SettlementRef] = []

    async def settle(self, to_address: str, amount: str, memo: bytes) -> SettlementRef:
        if self._fail_with is not None:
            raise self._fail_with(f"Simulated settlement failure for {amount} to {to_address}")
        ref = SettlementRef(transaction_id="0x" + secrets.token_hex(32), cost=amount)
        logger.info(
            "settlement_simulated",
            extra={"settlement_id": ref.transaction_id, "memo": memo_to_hex(memo)},
        )
        self.settled.append(ref)
        return ref
