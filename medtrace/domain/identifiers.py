"""Identifier generation for products, QR codes and ledger transactions. Pure, non-blocking."""

import secrets
import string
import time
from typing import Callable, Optional

PRODUCT_PREFIX = "MED"
QR_PREFIX = "QR"

_BASE36 = string.digits + string.ascii_lowercase


def _random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class IdentifierGenerator:
    """
    Collision-resistant, human-scannable identifiers.

    Products:     MED-<epoch millis>-<4 uppercase base36>
    Transactions: 9 lowercase base36 chars
    QR codes:     QR-<product id>-<epoch millis>
    """

    def __init__(self, clock: Callable[[], int] = _epoch_millis) -> None:
        self._clock = clock

    def product_id(self) -> str:
        return f"{PRODUCT_PREFIX}-{self._clock()}-{_random_base36(4).upper()}"

    def transaction_id(self) -> str:
        return _random_base36(9)

    def qr_code(self, product_id: str) -> str:
        return f"{QR_PREFIX}-{product_id}-{self._clock()}"


def parse_qr_code(code: str) -> Optional[str]:
    """Return the product id embedded in a QR code, or None if `code` is not a QR code."""
    prefix = f"{QR_PREFIX}-"
    if not code.startswith(prefix):
        return None
    # Product ids contain dashes themselves; only the trailing timestamp is split off.
    body, sep, millis = code[len(prefix):].rpartition("-")
    if not sep or not body or not millis.isdigit():
        return None
    return body
