# src/kraken_adapter/market_data/api.py

import logging
from typing import Any, Dict, Iterable, List, Optional

from kraken_adapter.connection.exceptions import NotSupportedError
from kraken_adapter.connection.rest_client import KrakenRESTClient
from kraken_adapter.logging_config import structured_log_extra

from .catalog import MarketCatalog, is_darkpool_id
from .models import Market, OrderBook, Ticker, Trade
from .parsers import Clock, milliseconds, parse_ohlcv, parse_order_book, parse_ticker, parse_trades

logger = logging.getLogger(__name__)

# Canonical timeframe -> Kraken OHLC interval in minutes.
TIMEFRAMES = {
    "1m": "1",
    "5m": "5",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "4h": "240",
    "1d": "1440",
    "1w": "10080",
    "2w": "21600",
}


def _since_and_limit(rows: List[Any], timestamp_of, since: Optional[int], limit: Optional[int]) -> List[Any]:
    # With ``since`` the oldest rows after it are kept, otherwise the most recent ones.
    if since is not None:
        rows = [row for row in rows if timestamp_of(row) >= since]
        if limit is not None:
            rows = rows[:limit]
    elif limit is not None:
        rows = rows[-limit:] if limit > 0 else []
    return rows


class MarketDataAPI:
    """
    Public Kraken endpoints: markets, tickers, order books, candles and trades.
    """

    def __init__(
        self,
        client: KrakenRESTClient,
        catalog: Optional[MarketCatalog] = None,
        clock: Clock = milliseconds,
    ):
        self._client = client
        self.catalog = catalog or MarketCatalog(client)
        self._clock = clock

    def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        markets = self.catalog.load(reload=reload)
        return {m.symbol: m for m in markets}

    def _reject_darkpool(self, symbol: str, what: str) -> None:
        if is_darkpool_id(symbol):
            raise NotSupportedError(f"kraken does not provide {what} for darkpool symbol {symbol}")

    def _public_market(self, symbol: str, what: str) -> Market:
        # Checked before and after resolution so no request is made for darkpool symbols.
        self._reject_darkpool(symbol, what)
        self.catalog.load()
        market = self.catalog.market(symbol)
        if market.darkpool:
            raise NotSupportedError(f"kraken does not provide {what} for darkpool symbol {symbol}")
        return market

    def fetch_ticker(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> Ticker:
        market = self._public_market(symbol, "a ticker")
        request = {"pair": market.id}
        request.update(params or {})
        result = self._client.get_public("Ticker", request)
        return parse_ticker(result[market.id], market, clock=self._clock)

    def fetch_tickers(
        self, symbols: Optional[Iterable[str]] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Ticker]:
        wanted = set(symbols) if symbols is not None else None
        for symbol in wanted or ():
            self._reject_darkpool(symbol, "tickers")
        self.catalog.load()
        pairs = [
            m.id
            for m in self.catalog.markets
            if m.active and not m.darkpool and (wanted is None or m.symbol in wanted)
        ]
        if not pairs:
            return {}

        request = {"pair": ",".join(pairs)}
        request.update(params or {})
        result = self._client.get_public("Ticker", request)

        tickers: Dict[str, Ticker] = {}
        for market_id, ticker in result.items():
            market = self.catalog.market_by_id(market_id)
            if market is None:
                logger.warning(
                    "Ticker returned for unknown pair %s",
                    market_id,
                    extra=structured_log_extra(event="ticker_unknown_pair", pair=market_id),
                )
                continue
            tickers[market.symbol] = parse_ticker(ticker, market, clock=self._clock)
        return tickers

    def fetch_order_book(self, symbol: str, params: Optional[Dict[str, Any]] = None) -> OrderBook:
        market = self._public_market(symbol, "an order book")
        request = {"pair": market.id}
        request.update(params or {})
        result = self._client.get_public("Depth", request)
        return parse_order_book(result[market.id], clock=self._clock)

    def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[List[float]]:
        if timeframe not in TIMEFRAMES:
            raise NotSupportedError(
                f"Unsupported timeframe: {timeframe}. Supported: {list(TIMEFRAMES)}"
            )
        self.catalog.load()
        market = self.catalog.market(symbol)
        request: Dict[str, Any] = {"pair": market.id, "interval": TIMEFRAMES[timeframe]}
        if since:
            request["since"] = int(since / 1000)
        request.update(params or {})

        result = self._client.get_public("OHLC", request)
        candles = [parse_ohlcv(row) for row in result[market.id]]
        return _since_and_limit(candles, lambda c: c[0], since, limit)

    def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Trade]:
        self.catalog.load()
        market = self.catalog.market(symbol)
        request: Dict[str, Any] = {"pair": market.id}
        request.update(params or {})

        result = self._client.get_public("Trades", request)
        trades = parse_trades(result[market.id], market)
        return _since_and_limit(trades, lambda t: t.timestamp, since, limit)
