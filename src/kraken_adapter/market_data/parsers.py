# src/kraken_adapter/market_data/parsers.py

"""
Pure conversions from Kraken payloads to the canonical records in ``models``.

None of these functions perform I/O. When a payload does not name its market
directly, the caller passes the :class:`MarketCatalog` to resolve it from; an
unresolved market leaves ``symbol`` unset.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from kraken_adapter.connection.exceptions import MalformedPayloadError

from .catalog import MarketCatalog
from .currencies import normalize_asset
from .models import Balance, BalanceAccount, Fee, Market, Order, OrderBook, Ticker, Trade

Clock = Callable[[], int]

FEE_IN_QUOTE_FLAG = "fciq"
FEE_IN_BASE_FLAG = "fcib"


def milliseconds() -> int:
    return int(time.time() * 1000)


def safe_float(container: Mapping[str, Any], key: str) -> Optional[float]:
    value = container.get(key)
    if value is None or value == "":
        return None
    return float(value)


def _resolve(
    market: Optional[Market], catalog: Optional[MarketCatalog], code: Optional[str]
) -> Optional[Market]:
    if market is not None or catalog is None:
        return market
    return catalog.find_by_altname_or_id(code)


def parse_ticker(ticker: Dict[str, Any], market: Optional[Market] = None, clock: Clock = milliseconds) -> Ticker:
    # Kraken's ticker has no timestamp of its own; use the time it was parsed.
    return Ticker(
        symbol=market.symbol if market else None,
        timestamp=clock(),
        high=float(ticker["h"][1]),
        low=float(ticker["l"][1]),
        bid=float(ticker["b"][0]),
        ask=float(ticker["a"][0]),
        vwap=float(ticker["p"][1]),
        open=float(ticker["o"]),
        last=float(ticker["c"][0]),
        base_volume=float(ticker["v"][1]),
        info=ticker,
    )


def parse_ohlcv(ohlcv: Sequence[Any]) -> List[float]:
    """
    ``[time, open, high, low, close, vwap, volume, count]`` ->
    ``[time_ms, open, high, low, close, volume]``.
    """
    return [
        int(ohlcv[0]) * 1000,
        float(ohlcv[1]),
        float(ohlcv[2]),
        float(ohlcv[3]),
        float(ohlcv[4]),
        float(ohlcv[6]),  # vwap is ohlcv[5]
    ]


def parse_order_book(book: Dict[str, Any], clock: Clock = milliseconds) -> OrderBook:
    def side(levels: Iterable[Sequence[Any]]) -> List[List[float]]:
        return [[float(level[0]), float(level[1])] for level in levels]

    return OrderBook(
        bids=side(book["bids"]),
        asks=side(book["asks"]),
        timestamp=clock(),
    )


@dataclass(frozen=True)
class PrivateTradeRecord:
    """A trade from TradesHistory / QueryTrades: a mapping with ``ordertxid``."""

    payload: Mapping[str, Any]


@dataclass(frozen=True)
class PublicTradeRow:
    """A trade from the public Trades feed: ``[price, volume, time, side, type, misc]``."""

    payload: Sequence[Any]


RawTrade = Union[PrivateTradeRecord, PublicTradeRow]


def classify_trade(raw: Any) -> RawTrade:
    if isinstance(raw, Mapping):
        if "ordertxid" in raw:
            return PrivateTradeRecord(raw)
        raise MalformedPayloadError(f"Trade record without ordertxid: {raw!r}")
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)) and len(raw) >= 5:
        return PublicTradeRow(raw)
    raise MalformedPayloadError(f"Unrecognized trade payload: {raw!r}")


def parse_trade(
    raw: Any, market: Optional[Market] = None, catalog: Optional[MarketCatalog] = None
) -> Trade:
    record = raw if isinstance(raw, (PrivateTradeRecord, PublicTradeRow)) else classify_trade(raw)

    if isinstance(record, PrivateTradeRecord):
        trade = record.payload
        market = _resolve(market, catalog, trade.get("pair"))
        return Trade(
            id=trade.get("id"),
            order=trade["ordertxid"],
            timestamp=int(float(trade["time"]) * 1000),
            symbol=market.symbol if market else None,
            type=trade["ordertype"],
            side=trade["type"],
            price=float(trade["price"]),
            amount=float(trade["vol"]),
            info=trade,
        )

    row = record.payload
    return Trade(
        id=None,
        order=None,
        timestamp=int(float(row[2]) * 1000),
        symbol=market.symbol if market else None,
        type="limit" if row[4] == "l" else "market",
        side="sell" if row[3] == "s" else "buy",
        price=float(row[0]),
        amount=float(row[1]),
        info=row,
    )


def parse_trades(
    trades: Iterable[Any], market: Optional[Market] = None, catalog: Optional[MarketCatalog] = None
) -> List[Trade]:
    return [parse_trade(trade, market, catalog) for trade in trades]


def _fee_currency(flags: str, market: Optional[Market]) -> Optional[str]:
    if market is None:
        return None
    if FEE_IN_QUOTE_FLAG in flags:
        return market.quote
    if FEE_IN_BASE_FLAG in flags:
        return market.base
    return None


def parse_order(
    order: Dict[str, Any], market: Optional[Market] = None, catalog: Optional[MarketCatalog] = None
) -> Order:
    description = order["descr"]
    market = _resolve(market, catalog, description.get("pair"))

    amount = float(order["vol"])
    filled = float(order["vol_exec"])

    price = safe_float(description, "price")
    if not price:
        price = safe_float(order, "price")

    fee = None
    if "fee" in order:
        fee = Fee(
            cost=safe_float(order, "fee"),
            currency=_fee_currency(order.get("oflags") or "", market),
        )

    return Order(
        id=order.get("id"),
        timestamp=int(float(order["opentm"]) * 1000),
        status=order.get("status"),
        symbol=market.symbol if market else None,
        type=description["ordertype"],
        side=description["type"],
        price=price,
        cost=safe_float(order, "cost"),
        amount=amount,
        filled=filled,
        remaining=amount - filled,
        fee=fee,
        info=order,
    )


def parse_orders(
    orders: Mapping[str, Dict[str, Any]],
    market: Optional[Market] = None,
    catalog: Optional[MarketCatalog] = None,
) -> List[Order]:
    """Parse an id-keyed mapping of orders (OpenOrders / ClosedOrders / QueryOrders)."""
    return [parse_order(dict(order, id=order_id), market, catalog) for order_id, order in orders.items()]


def parse_balance(balances: Dict[str, Any]) -> Balance:
    # Balance does not report funds held by open orders, so ``used`` is always 0.
    accounts = {}
    for asset, value in balances.items():
        total = float(value)
        accounts[normalize_asset(asset)] = BalanceAccount(free=total, used=0.0, total=total)
    return Balance(accounts=accounts, info=balances)
