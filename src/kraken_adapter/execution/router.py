# src/kraken_adapter/execution/router.py

import logging
from typing import Any, Dict, Optional

from kraken_adapter.connection.exceptions import ParameterRequiredError
from kraken_adapter.logging_config import structured_log_extra
from kraken_adapter.market_data.models import Market
from kraken_adapter.market_data.precision import amount_to_precision, price_to_precision

logger = logging.getLogger(__name__)

ORDER_SIDES = ("buy", "sell")


def _fixed(value: float, digits: int) -> str:
    # Kraken rejects exponent notation such as "1e-05".
    return f"{value:.{digits}f}"


def build_order_payload(
    market: Market,
    order_type: str,
    side: str,
    amount: float,
    price: Optional[float] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Construct the Kraken AddOrder payload. Volume and price are truncated to
    the market's precision; extra ``params`` are passed through unchanged and
    win over the computed fields.
    """
    if side not in ORDER_SIDES:
        raise ValueError(f"Unsupported order side: {side}")

    payload: Dict[str, Any] = {
        "pair": market.id,
        "type": side,
        "ordertype": order_type,
        "volume": _fixed(amount_to_precision(market, amount), market.precision.amount),
    }

    if order_type == "limit":
        if price is None:
            raise ParameterRequiredError(f"kraken limit order on {market.symbol} requires a price")
        payload["price"] = _fixed(price_to_precision(market, price), market.precision.price)

    payload.update(params or {})
    logger.debug(
        "Built AddOrder payload",
        extra=structured_log_extra(
            event="order_payload_built", pair=market.id, symbol=market.symbol, ordertype=order_type, side=side
        ),
    )
    return payload
