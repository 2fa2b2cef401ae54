# tests/test_rest_client.py

import pytest

from conftest import TEST_KEY, StubTransport, ok
from kraken_adapter.connection.exceptions import (
    AuthError,
    KrakenAPIError,
    NetworkError,
    NotSupportedError,
    ServiceUnavailableError,
)
from kraken_adapter.connection.rest_client import KrakenRESTClient
from kraken_adapter.connection.signer import RequestSigner


def test_public_request_success():
    transport = StubTransport({"Time": ok({"unixtime": 123456})})
    client = KrakenRESTClient(transport=transport)

    assert client.get_public("Time") == {"unixtime": 123456}
    assert transport.calls[0].method == "GET"


def test_private_request_is_signed(rest_client, stub_transport):
    stub_transport.responses["Balance"] = ok({"ZUSD": "1.0"})

    rest_client.get_private("Balance")

    call = stub_transport.calls[-1]
    assert call.method == "POST"
    assert call.headers["API-Key"] == TEST_KEY
    assert call.headers["API-Sign"]
    assert call.body.startswith("nonce=")


def test_private_request_missing_credentials_never_sends():
    transport = StubTransport({"Balance": ok({})})
    client = KrakenRESTClient(signer=RequestSigner(), transport=transport)

    with pytest.raises(AuthError):
        client.get_private("Balance")
    assert transport.calls == []


def test_api_error_raised(rest_client, stub_transport):
    stub_transport.responses["Depth"] = {"error": ["EGeneral:Invalid arguments"]}

    with pytest.raises(KrakenAPIError, match="EGeneral:Invalid arguments"):
        rest_client.get_public("Depth", {"pair": "nope"})


def test_call_returns_outcome_without_raising(rest_client, stub_transport):
    stub_transport.responses["CancelOrder"] = {"error": ["EService:Unavailable"]}

    outcome = rest_client.call("CancelOrder", {"txid": "X"}, private=True)

    assert not outcome.ok
    assert isinstance(outcome.error, ServiceUnavailableError)


def test_transport_failure_propagates_unchanged(rest_client, stub_transport):
    failure = NetworkError("connection reset")
    stub_transport.responses["Time"] = failure

    with pytest.raises(NetworkError) as excinfo:
        rest_client.get_public("Time")
    assert excinfo.value is failure


@pytest.mark.parametrize(
    "endpoint, private",
    [("Balance", False), ("Ticker", True), ("NoSuchEndpoint", False)],
)
def test_unknown_endpoint_rejected_before_signing(rest_client, stub_transport, endpoint, private):
    with pytest.raises(NotSupportedError, match=endpoint):
        rest_client.call(endpoint, private=private)
    assert stub_transport.calls == []
