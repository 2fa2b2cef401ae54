from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union


def iso8601(timestamp: Optional[int]) -> Optional[str]:
    """Millisecond epoch -> ``2021-01-01T00:00:00.000Z``."""
    if timestamp is None:
        return None
    moment = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(timestamp) % 1000:03d}Z"


@dataclass(frozen=True)
class MinMax:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class MarketLimits:
    amount: MinMax
    price: MinMax
    cost: MinMax


@dataclass(frozen=True)
class MarketPrecision:
    amount: int
    price: int


@dataclass(frozen=True)
class Market:
    id: str
    symbol: str
    base: str
    quote: str
    altname: str
    darkpool: bool
    active: bool
    precision: MarketPrecision
    limits: MarketLimits
    maker: Optional[float] = None
    taker: Optional[float] = None
    lot: Optional[float] = None
    info: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)


@dataclass
class Ticker:
    symbol: Optional[str]
    timestamp: int
    high: float
    low: float
    bid: float
    ask: float
    vwap: float
    open: float
    last: float
    base_volume: float
    # Kraken's ticker does not carry these; they are never derived.
    close: Optional[float] = None
    first: Optional[float] = None
    change: Optional[float] = None
    percentage: Optional[float] = None
    average: Optional[float] = None
    quote_volume: Optional[float] = None
    info: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def datetime(self) -> Optional[str]:
        return iso8601(self.timestamp)


@dataclass
class OrderBook:
    bids: List[List[float]]
    asks: List[List[float]]
    timestamp: int

    @property
    def datetime(self) -> Optional[str]:
        return iso8601(self.timestamp)


@dataclass
class Trade:
    id: Optional[str]
    order: Optional[str]
    timestamp: int
    symbol: Optional[str]
    type: str
    side: str
    price: float
    amount: float
    info: Any = field(default=None, repr=False)

    @property
    def datetime(self) -> Optional[str]:
        return iso8601(self.timestamp)


@dataclass
class Fee:
    cost: Optional[float]
    currency: Optional[str] = None
    rate: Optional[float] = None


@dataclass
class Order:
    id: Optional[str]
    timestamp: int
    status: Optional[str]
    symbol: Optional[str]
    type: str
    side: str
    price: Optional[float]
    cost: Optional[float]
    amount: float
    filled: float
    remaining: float
    fee: Optional[Fee] = None
    info: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def datetime(self) -> Optional[str]:
        return iso8601(self.timestamp)


@dataclass
class BalanceAccount:
    free: float
    used: float
    total: float


@dataclass
class Balance:
    accounts: Dict[str, BalanceAccount] = field(default_factory=dict)
    info: Dict[str, Any] = field(default_factory=dict, repr=False)

    def __getitem__(self, currency: str) -> BalanceAccount:
        return self.accounts[currency]

    def __contains__(self, currency: object) -> bool:
        return currency in self.accounts

    @property
    def free(self) -> Dict[str, float]:
        return {code: account.free for code, account in self.accounts.items()}

    @property
    def used(self) -> Dict[str, float]:
        return {code: account.used for code, account in self.accounts.items()}

    @property
    def total(self) -> Dict[str, float]:
        return {code: account.total for code, account in self.accounts.items()}


@dataclass
class PlacedOrder:
    # Kraken can answer one AddOrder with several txids.
    id: Union[str, List[str]]
    info: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Withdrawal:
    id: Any
    info: Dict[str, Any] = field(default_factory=dict, repr=False)
