# src/kraken_adapter/market_data/precision.py

"""
Formats order values to the number of decimals Kraken accepts for a market.

Values are truncated toward zero, never rounded, so an order is never sent
larger or pricier than the caller asked for.
"""

from decimal import ROUND_DOWN, Decimal
from typing import Union

from .models import Market

Number = Union[int, float, str, Decimal]


def truncate(value: Number, digits: int) -> float:
    quantum = Decimal(1).scaleb(-int(digits))
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_DOWN))


def amount_to_precision(market: Market, amount: Number) -> float:
    return truncate(amount, market.precision.amount)


def price_to_precision(market: Market, price: Number) -> float:
    return truncate(price, market.precision.price)


def cost_to_precision(market: Market, cost: Number) -> float:
    return truncate(cost, market.precision.price)


def fee_to_precision(market: Market, fee: Number) -> float:
    return truncate(fee, market.precision.amount)
