"""Settlement capability. Injected into the custody service, never into the ledger."""

import json
from datetime import datetime, timezone
from typing import Any, Protocol

from medtrace.domain.models.transaction import SettlementRef


class Settler(Protocol):
    """
    Settles a value transfer with an external payment provider.
    Raises PaymentFailedError, UserRejectedError or ProviderUnavailableError; never retried here.
    """

    async def settle(self, to_address: str, amount: str, memo: bytes) -> SettlementRef:
        """Transfer `amount` to `to_address` with `memo` attached. Returns (transaction id, cost paid)."""
        ...


def build_memo(action: str, **fields: Any) -> bytes:
    """Canonical JSON memo describing the custody action being paid for."""
    body = {
        "action": action,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **fields,
    }
    return json.dumps(body, sort_keys=True).encode("utf-8")


def memo_to_hex(memo: bytes) -> str:
    """0x-prefixed hex, the form wallets expect for call data."""
    return "0x" + memo.hex()
