"""Transition cost schedule (ETH) used when the service settles on the caller's behalf."""

from decimal import Decimal
from enum import Enum

WEI_PER_ETH = Decimal(10) ** 18


class TransactionCost(str, Enum):
    ADD_PRODUCT = "0.001"
    ASSIGN_PRODUCT = "0.0008"
    SELL_PRODUCT = "0.0006"
    VIEW_HISTORY = "0.0002"  # verification


_DESCRIPTIONS = {
    TransactionCost.ADD_PRODUCT: "Adding product to blockchain",
    TransactionCost.ASSIGN_PRODUCT: "Assigning product to distributor",
    TransactionCost.SELL_PRODUCT: "Recording product sale",
    TransactionCost.VIEW_HISTORY: "Verifying product authenticity",
}


def format_eth_amount(amount: str) -> str:
    return f"{amount} ETH"


def calculate_gas_cost(gas_price: int, gas_limit: int) -> str:
    """Gas price (wei) times gas limit, in ETH with six decimals."""
    cost_in_eth = Decimal(gas_price) * Decimal(gas_limit) / WEI_PER_ETH
    return f"{cost_in_eth:.6f}"


def describe(cost: TransactionCost) -> str:
    return _DESCRIPTIONS[cost]
