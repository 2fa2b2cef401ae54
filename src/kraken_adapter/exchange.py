# src/kraken_adapter/exchange.py

"""The uniform method set over Kraken's public and private REST endpoints."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from kraken_adapter.config import AdapterConfig
from kraken_adapter.connection.rest_client import PRIVATE_ENDPOINTS, PUBLIC_ENDPOINTS, KrakenRESTClient
from kraken_adapter.connection.signer import RequestSigner
from kraken_adapter.connection.transport import RequestsTransport, Transport
from kraken_adapter.execution.adapter import KrakenExecutionAdapter
from kraken_adapter.logging_config import structured_log_extra
from kraken_adapter.market_data import precision
from kraken_adapter.market_data.api import TIMEFRAMES, MarketDataAPI
from kraken_adapter.market_data.catalog import MarketCatalog
from kraken_adapter.market_data.models import (
    Balance,
    Market,
    Order,
    OrderBook,
    PlacedOrder,
    Ticker,
    Trade,
    Withdrawal,
)
from kraken_adapter.market_data.parsers import Clock, milliseconds

logger = logging.getLogger(__name__)

HAS = {
    "fetchTickers": True,
    "fetchOHLCV": True,
    "fetchOrder": True,
    "fetchOpenOrders": True,
    "fetchClosedOrders": True,
    "fetchMyTrades": True,
    "withdraw": True,
}


class KrakenExchange:
    """
    Kraken behind an exchange-agnostic interface.

    One instance owns one :class:`MarketCatalog`; the public and private
    operation sets both resolve symbols against it.
    """

    id = "kraken"
    name = "Kraken"
    has = HAS
    timeframes = TIMEFRAMES
    api = {"public": PUBLIC_ENDPOINTS, "private": PRIVATE_ENDPOINTS}

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        transport: Optional[Transport] = None,
        signer: Optional[RequestSigner] = None,
        clock: Clock = milliseconds,
    ):
        signer = signer or RequestSigner(api_key=api_key, api_secret=api_secret)
        self.client = KrakenRESTClient(signer=signer, transport=transport)
        self.catalog = MarketCatalog(self.client)
        self.market_data = MarketDataAPI(self.client, self.catalog, clock=clock)
        self.execution = KrakenExecutionAdapter(self.client, self.catalog)

    @classmethod
    def from_config(cls, config: AdapterConfig, transport: Optional[Transport] = None) -> "KrakenExchange":
        signer = RequestSigner(
            api_url=config.api_url,
            api_key=config.credentials.api_key,
            api_secret=config.credentials.api_secret,
            version=config.api_version,
        )
        transport = transport or RequestsTransport(
            calls_per_second=config.calls_per_second,
            request_timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
        logger.info(
            "Kraken exchange configured",
            extra=structured_log_extra(
                event="exchange_configured",
                api_url=config.api_url,
                private_enabled=config.credentials.complete,
            ),
        )
        return cls(transport=transport, signer=signer)

    # Markets

    def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        return self.market_data.load_markets(reload=reload)

    def fetch_markets(self) -> List[Market]:
        return self.catalog.fetch_markets()

    @property
    def markets(self) -> Dict[str, Market]:
        return {m.symbol: m for m in self.catalog.markets}

    @property
    def symbols(self) -> List[str]:
        return self.catalog.symbols

    def market(self, symbol: str) -> Market:
        self.catalog.load()
        return self.catalog.market(symbol)

    def amount_to_precision(self, symbol: str, amount: float) -> float:
        return precision.amount_to_precision(self.market(symbol), amount)

    def price_to_precision(self, symbol: str, price: float) -> float:
        return precision.price_to_precision(self.market(symbol), price)

    def cost_to_precision(self, symbol: str, cost: float) -> float:
        return precision.cost_to_precision(self.market(symbol), cost)

    def fee_to_precision(self, symbol: str, fee: float) -> float:
        return precision.fee_to_precision(self.market(symbol), fee)

    # Public

    def fetch_ticker(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> Ticker:
        return self.market_data.fetch_ticker(symbol, params)

    def fetch_tickers(
        self, symbols: Optional[Iterable[str]] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Ticker]:
        return self.market_data.fetch_tickers(symbols, params)

    def fetch_order_book(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> OrderBook:
        return self.market_data.fetch_order_book(symbol, params)

    def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[List[float]]:
        return self.market_data.fetch_ohlcv(symbol, timeframe, since, limit, params)

    def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Trade]:
        return self.market_data.fetch_trades(symbol, since, limit, params)

    # Private

    def fetch_balance(self, params: Optional[Dict[str, Any]] = None) -> Balance:
        return self.execution.fetch_balance(params)

    def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: Optional[float] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> PlacedOrder:
        return self.execution.create_order(symbol, order_type, side, amount, price, params)

    def fetch_order(
        self, order_id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        return self.execution.fetch_order(order_id, symbol, params)

    def fetch_open_orders(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        return self.execution.fetch_open_orders(symbol, params)

    def fetch_closed_orders(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        return self.execution.fetch_closed_orders(symbol, params)

    def fetch_my_trades(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Trade]:
        return self.execution.fetch_my_trades(symbol, params)

    def cancel_order(
        self, order_id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return self.execution.cancel_order(order_id, symbol, params)

    def withdraw(
        self,
        currency: str,
        amount: float,
        address: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Withdrawal:
        return self.execution.withdraw(currency, amount, address, params)
