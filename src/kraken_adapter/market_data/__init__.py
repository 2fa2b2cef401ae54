from .api import TIMEFRAMES, MarketDataAPI
from .catalog import MarketCatalog
from .models import (
    Balance,
    BalanceAccount,
    Fee,
    Market,
    MarketLimits,
    MarketPrecision,
    MinMax,
    Order,
    OrderBook,
    PlacedOrder,
    Ticker,
    Trade,
    Withdrawal,
)

__all__ = [
    "TIMEFRAMES",
    "Balance",
    "BalanceAccount",
    "Fee",
    "Market",
    "MarketCatalog",
    "MarketDataAPI",
    "MarketLimits",
    "MarketPrecision",
    "MinMax",
    "Order",
    "OrderBook",
    "PlacedOrder",
    "Ticker",
    "Trade",
    "Withdrawal",
]
