"""Shared fixtures: canned Kraken payloads and a transport that never touches the network."""
from __future__ import annotations

import urllib.parse
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from kraken_adapter.connection.rest_client import KrakenRESTClient
from kraken_adapter.connection.signer import RequestSigner
from kraken_adapter.exchange import KrakenExchange
from kraken_adapter.market_data.catalog import MarketCatalog

# base64("Secret")
TEST_SECRET = "U2VjcmV0"
TEST_KEY = "test_key"
FIXED_NOW_MS = 1609459200000


class StubTransport:
    """Answers each endpoint with a canned envelope (or raises a canned exception)."""

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[SimpleNamespace] = []

    def send(self, url, method, headers=None, body=None):
        endpoint = urllib.parse.urlsplit(url).path.rsplit("/", 1)[-1]
        self.calls.append(
            SimpleNamespace(url=url, method=method, headers=headers, body=body, endpoint=endpoint)
        )
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def endpoints(self) -> List[str]:
        return [call.endpoint for call in self.calls]

    def body_of(self, endpoint: str) -> Dict[str, str]:
        call = next(c for c in reversed(self.calls) if c.endpoint == endpoint)
        return dict(urllib.parse.parse_qsl(call.body))


def ok(result: Any) -> Dict[str, Any]:
    return {"error": [], "result": result}


@pytest.fixture
def asset_pairs() -> Dict[str, Any]:
    """A trimmed AssetPairs result covering the shapes the catalog must handle."""
    return {
        "XXBTZUSD": {
            "altname": "XBTUSD",
            "wsname": "XBT/USD",
            "aclass_base": "currency",
            "base": "XXBT",
            "aclass_quote": "currency",
            "quote": "ZUSD",
            "lot": "unit",
            "pair_decimals": 1,
            "lot_decimals": 8,
            "lot_multiplier": 1,
            "fees": [[0, 0.26], [50000, 0.24]],
            "fees_maker": [[0, 0.16], [50000, 0.14]],
            "fee_volume_currency": "ZUSD",
            "ordermin": "0.0001",
            "status": "online",
        },
        "XETHZEUR": {
            "altname": "ETHEUR",
            "base": "XETH",
            "quote": "ZEUR",
            "pair_decimals": 2,
            "lot_decimals": 8,
            "fees": [[0, 0.26]],
        },
        "XXBTZEUR.d": {
            "altname": "XBTEUR.d",
            "base": "XXBT",
            "quote": "ZEUR",
            "pair_decimals": 1,
            "lot_decimals": 8,
            "fees": [[0, 0.26]],
            "fees_maker": [[0, 0.16]],
        },
        "XTZUSD": {
            "altname": "XTZUSD",
            "base": "XTZ",
            "quote": "ZUSD",
            "pair_decimals": 4,
            "lot_decimals": 8,
            "fees": [[0, 0.26]],
        },
    }


@pytest.fixture
def stub_transport(asset_pairs) -> StubTransport:
    return StubTransport({"AssetPairs": ok(asset_pairs)})


@pytest.fixture
def rest_client(stub_transport) -> KrakenRESTClient:
    signer = RequestSigner(api_key=TEST_KEY, api_secret=TEST_SECRET)
    return KrakenRESTClient(signer=signer, transport=stub_transport)


@pytest.fixture
def catalog(rest_client) -> MarketCatalog:
    catalog = MarketCatalog(rest_client)
    catalog.load()
    return catalog


@pytest.fixture
def exchange(stub_transport) -> KrakenExchange:
    return KrakenExchange(
        api_key=TEST_KEY,
        api_secret=TEST_SECRET,
        transport=stub_transport,
        clock=lambda: FIXED_NOW_MS,
    )


RAW_TICKER = {
    "a": ["30010.0", "1", "1.000"],
    "b": ["30000.0", "2", "2.000"],
    "c": ["30005.5", "0.01"],
    "v": ["100.5", "2500.25"],
    "p": ["30001.1", "29950.9"],
    "t": [1000, 25000],
    "l": ["29500.0", "29000.0"],
    "h": ["30500.0", "31000.0"],
    "o": "29800.0",
}


def make_order(**overrides) -> Dict[str, Any]:
    """A QueryOrders/ClosedOrders entry for XBTUSD, half filled, fee in quote."""
    order = {
        "refid": None,
        "status": "closed",
        "opentm": 1609459200.1234,
        "descr": {"pair": "XBTUSD", "type": "buy", "ordertype": "limit", "price": "30000.0"},
        "vol": "1.50000000",
        "vol_exec": "0.50000000",
        "cost": "15000.0",
        "fee": "24.0",
        "price": "30000.0",
        "oflags": "fciq",
    }
    order.update(overrides)
    return order
