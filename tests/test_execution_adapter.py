import pytest

from conftest import make_order, ok
from kraken_adapter.connection.exceptions import (
    KrakenAPIError,
    OrderNotFoundError,
    ParameterRequiredError,
    ServiceUnavailableError,
)
from kraken_adapter.execution.router import build_order_payload


def test_fetch_balance(exchange, stub_transport):
    stub_transport.responses["Balance"] = ok({"ZUSD": "10.0", "XXBT": "0.5"})

    balance = exchange.fetch_balance()

    assert balance.total == {"USD": 10.0, "BTC": 0.5}
    assert balance["BTC"].used == 0.0
    assert stub_transport.endpoints == ["AssetPairs", "Balance"]


def test_build_order_payload_truncates(catalog):
    payload = build_order_payload(catalog.market("BTC/USD"), "limit", "buy", 0.123456789, 30000.19)

    assert payload == {
        "pair": "XXBTZUSD",
        "type": "buy",
        "ordertype": "limit",
        "volume": "0.12345678",
        "price": "30000.1",
    }


def test_build_order_payload_market_has_no_price(catalog):
    payload = build_order_payload(catalog.market("BTC/USD"), "market", "sell", 0.00001, params={"oflags": "fciq"})

    assert "price" not in payload
    assert payload["volume"] == "0.00001000"
    assert payload["oflags"] == "fciq"


def test_limit_order_requires_price(catalog):
    with pytest.raises(ParameterRequiredError):
        build_order_payload(catalog.market("BTC/USD"), "limit", "buy", 1)


def test_unknown_side_rejected(catalog):
    with pytest.raises(ValueError):
        build_order_payload(catalog.market("BTC/USD"), "limit", "hold", 1, 1)


def test_create_order_single_txid(exchange, stub_transport):
    stub_transport.responses["AddOrder"] = ok({"descr": {"order": "buy 1 XBTUSD"}, "txid": ["OABC"]})

    placed = exchange.create_order("BTC/USD", "limit", "buy", 1.999999999, 30000.05)

    assert placed.id == "OABC"
    assert placed.info["descr"]["order"] == "buy 1 XBTUSD"
    body = stub_transport.body_of("AddOrder")
    assert body["pair"] == "XXBTZUSD"
    assert body["volume"] == "1.99999999"
    assert body["price"] == "30000.0"
    assert list(body)[0] == "nonce"


def test_create_order_multiple_txids(exchange, stub_transport):
    stub_transport.responses["AddOrder"] = ok({"txid": ["O1", "O2"]})

    assert exchange.create_order("BTC/USD", "market", "sell", 1).id == ["O1", "O2"]


def test_fetch_order(exchange, stub_transport):
    stub_transport.responses["QueryOrders"] = ok({"OID": make_order()})

    order = exchange.fetch_order("OID")

    assert order.id == "OID"
    assert order.symbol == "BTC/USD"
    assert order.fee.currency == "USD"
    body = stub_transport.body_of("QueryOrders")
    assert body["txid"] == "OID"
    assert body["trades"] == "true"


def test_fetch_order_missing_from_result(exchange, stub_transport):
    stub_transport.responses["QueryOrders"] = ok({})

    with pytest.raises(OrderNotFoundError):
        exchange.fetch_order("OID")


def test_fetch_open_orders_filters_by_symbol(exchange, stub_transport):
    eth_descr = {"pair": "ETHEUR", "type": "sell", "ordertype": "limit", "price": "2000"}
    stub_transport.responses["OpenOrders"] = ok(
        {"open": {"O1": make_order(status="open"), "O2": make_order(status="open", descr=eth_descr)}}
    )

    assert [o.id for o in exchange.fetch_open_orders()] == ["O1", "O2"]
    assert [o.id for o in exchange.fetch_open_orders("ETH/EUR")] == ["O2"]


def test_fetch_closed_orders(exchange, stub_transport):
    stub_transport.responses["ClosedOrders"] = ok({"closed": {"O1": make_order()}, "count": 1})

    orders = exchange.fetch_closed_orders("BTC/USD")

    assert len(orders) == 1
    assert orders[0].remaining == 1.0


def test_fetch_my_trades_injects_ids(exchange, stub_transport):
    stub_transport.responses["TradesHistory"] = ok(
        {
            "trades": {
                "T1": {"ordertxid": "O1", "pair": "XXBTZUSD", "time": 1, "type": "buy", "ordertype": "limit", "price": "1", "vol": "2"},
                "T2": {"ordertxid": "O2", "pair": "XETHZEUR", "time": 2, "type": "sell", "ordertype": "market", "price": "3", "vol": "4"},
            },
            "count": 2,
        }
    )

    trades = exchange.fetch_my_trades()
    assert [(t.id, t.symbol) for t in trades] == [("T1", "BTC/USD"), ("T2", "ETH/EUR")]
    assert [t.id for t in exchange.fetch_my_trades("ETH/EUR")] == ["T2"]


def test_cancel_order_success(exchange, stub_transport):
    stub_transport.responses["CancelOrder"] = ok({"count": 1})

    assert exchange.cancel_order("OID") == {"count": 1}
    assert stub_transport.body_of("CancelOrder")["txid"] == "OID"


def test_cancel_unknown_order_raises_not_found(exchange, stub_transport):
    stub_transport.responses["CancelOrder"] = {"error": ["EOrder:Unknown order"]}

    with pytest.raises(OrderNotFoundError):
        exchange.cancel_order("OID")


def test_cancel_other_errors_are_unchanged(exchange, stub_transport):
    stub_transport.responses["CancelOrder"] = {"error": ["EService:Unavailable"]}
    with pytest.raises(ServiceUnavailableError):
        exchange.cancel_order("OID")

    stub_transport.responses["CancelOrder"] = {"error": ["EGeneral:Invalid arguments"]}
    with pytest.raises(KrakenAPIError) as excinfo:
        exchange.cancel_order("OID")
    assert not isinstance(excinfo.value, OrderNotFoundError)


def test_withdraw_requires_key_before_any_request(exchange, stub_transport):
    with pytest.raises(ParameterRequiredError, match="'key'"):
        exchange.withdraw("XBT", 0.5, "bc1qaddress")
    assert stub_transport.calls == []


def test_withdraw(exchange, stub_transport):
    stub_transport.responses["Withdraw"] = ok({"refid": "AGBSO6T-UFMTTQ-I7KGS6"})

    withdrawal = exchange.withdraw("XBT", 0.5, params={"key": "cold-wallet"})

    assert withdrawal.id == "AGBSO6T-UFMTTQ-I7KGS6"
    body = stub_transport.body_of("Withdraw")
    assert body == {"nonce": body["nonce"], "asset": "XBT", "amount": "0.5", "key": "cold-wallet"}


def test_withdraw_small_amount_is_sent_fixed_point(exchange, stub_transport):
    stub_transport.responses["Withdraw"] = ok({"refid": "AGBSO6T-UFMTTQ-I7KGS6"})

    exchange.withdraw("XBT", 0.00005, params={"key": "cold-wallet"})

    assert stub_transport.body_of("Withdraw")["amount"] == "0.00005"
