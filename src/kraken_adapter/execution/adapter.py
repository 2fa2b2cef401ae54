# src/kraken_adapter/execution/adapter.py

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from kraken_adapter.connection.classifier import unknown_order_as_not_found
from kraken_adapter.connection.exceptions import OrderNotFoundError, ParameterRequiredError
from kraken_adapter.connection.rest_client import KrakenRESTClient
from kraken_adapter.logging_config import structured_log_extra
from kraken_adapter.market_data.catalog import MarketCatalog
from kraken_adapter.market_data.models import Balance, Order, PlacedOrder, Trade, Withdrawal
from kraken_adapter.market_data.parsers import parse_balance, parse_order, parse_orders, parse_trades

from .router import build_order_payload

logger = logging.getLogger(__name__)


def _fixed_amount(amount: float) -> str:
    return format(Decimal(str(amount)), "f")


def _filter_by_symbol(records: List[Any], symbol: Optional[str]) -> List[Any]:
    if symbol is None:
        return records
    return [record for record in records if record.symbol == symbol]


class KrakenExecutionAdapter:
    """
    Private (signed) Kraken endpoints: balances, orders, fills and withdrawals.

    Every call makes sure the market catalog is loaded first, since parsed
    orders and trades are resolved against it.
    """

    def __init__(self, client: KrakenRESTClient, catalog: MarketCatalog):
        self.client = client
        self.catalog = catalog

    def _with(self, request: Dict[str, Any], params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        merged = dict(request)
        merged.update(params or {})
        return merged

    def fetch_balance(self, params: Optional[Dict[str, Any]] = None) -> Balance:
        self.catalog.load()
        result = self.client.get_private("Balance", params)
        return parse_balance(result)

    def create_order(
        self,
        symbol: str,
        order_type: str,
        side: str,
        amount: float,
        price: Optional[float] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> PlacedOrder:
        self.catalog.load()
        market = self.catalog.market(symbol)
        payload = build_order_payload(market, order_type, side, amount, price, params)

        result = self.client.get_private("AddOrder", payload)
        txids = result["txid"]
        order_id = txids if len(txids) > 1 else txids[0]

        logger.info(
            "Order placed on %s",
            symbol,
            extra=structured_log_extra(
                event="order_placed",
                symbol=symbol,
                pair=market.id,
                order_id=",".join(txids),
                side=side,
                ordertype=order_type,
            ),
        )
        return PlacedOrder(id=order_id, info=result)

    def fetch_order(
        self, order_id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Order:
        self.catalog.load()
        result = self.client.get_private(
            "QueryOrders", self._with({"trades": "true", "txid": order_id}, params)
        )
        if order_id not in result:
            raise OrderNotFoundError(f"kraken order {order_id} not found", payload=result)

        market = self.catalog.market(symbol) if symbol else None
        raw = dict(result[order_id], id=order_id)
        return parse_order(raw, market, self.catalog)

    def fetch_open_orders(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        self.catalog.load()
        result = self.client.get_private("OpenOrders", params)
        orders = parse_orders(result["open"], catalog=self.catalog)
        return _filter_by_symbol(orders, symbol)

    def fetch_closed_orders(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Order]:
        self.catalog.load()
        result = self.client.get_private("ClosedOrders", params)
        orders = parse_orders(result["closed"], catalog=self.catalog)
        return _filter_by_symbol(orders, symbol)

    def fetch_my_trades(
        self, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> List[Trade]:
        self.catalog.load()
        result = self.client.get_private("TradesHistory", params)
        raw_trades = [dict(trade, id=trade_id) for trade_id, trade in result["trades"].items()]
        return _filter_by_symbol(parse_trades(raw_trades, catalog=self.catalog), symbol)

    def cancel_order(
        self, order_id: str, symbol: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        self.catalog.load()
        outcome = self.client.call("CancelOrder", self._with({"txid": order_id}, params), private=True)
        result = outcome.refine(unknown_order_as_not_found).unwrap()

        logger.info(
            "Order cancelled",
            extra=structured_log_extra(event="order_cancelled", order_id=order_id, symbol=symbol),
        )
        return result

    def withdraw(
        self, currency: str, amount: float, address: Optional[str] = None, params: Optional[Dict[str, Any]] = None
    ) -> Withdrawal:
        params = params or {}
        # Kraken withdraws only to addresses pre-registered under a key name.
        if "key" not in params:
            raise ParameterRequiredError(
                "kraken withdraw requires a 'key' parameter "
                "(withdrawal key name, as set up on your account)"
            )

        self.catalog.load()
        result = self.client.get_private(
            "Withdraw", self._with({"asset": currency, "amount": _fixed_amount(amount)}, params)
        )
        refid = result.get("refid") if isinstance(result, dict) else result

        logger.info(
            "Withdrawal requested",
            extra=structured_log_extra(event="withdrawal_requested", currency=currency, refid=refid),
        )
        return Withdrawal(id=refid, info=result)
