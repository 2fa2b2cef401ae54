# src/kraken_adapter/connection/rest_client.py

import logging
from typing import Any, Dict, Optional

from kraken_adapter.logging_config import structured_log_extra

from .classifier import ResponseOutcome, classify_response
from .exceptions import NotSupportedError
from .signer import RequestSigner
from .transport import RequestsTransport, Transport

logger = logging.getLogger(__name__)

PUBLIC_ENDPOINTS = ("Assets", "AssetPairs", "Depth", "OHLC", "Spread", "Ticker", "Time", "Trades")
PRIVATE_ENDPOINTS = (
    "AddOrder",
    "Balance",
    "CancelOrder",
    "ClosedOrders",
    "DepositAddresses",
    "DepositMethods",
    "DepositStatus",
    "Ledgers",
    "OpenOrders",
    "OpenPositions",
    "QueryLedgers",
    "QueryOrders",
    "QueryTrades",
    "TradeBalance",
    "TradesHistory",
    "TradeVolume",
    "Withdraw",
    "WithdrawCancel",
    "WithdrawInfo",
    "WithdrawStatus",
)


class KrakenRESTClient:
    """
    Signs, sends and classifies Kraken REST calls.

    ``call`` returns a :class:`ResponseOutcome` so callers can refine an error
    before raising it; ``get_public`` and ``get_private`` raise straight away.
    Transport failures are never caught here.
    """

    def __init__(
        self,
        signer: Optional[RequestSigner] = None,
        transport: Optional[Transport] = None,
    ):
        self.signer = signer or RequestSigner()
        self.transport = transport or RequestsTransport()

    def call(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, private: bool = False
    ) -> ResponseOutcome:
        api = "private" if private else "public"
        endpoints = PRIVATE_ENDPOINTS if private else PUBLIC_ENDPOINTS
        if endpoint not in endpoints:
            raise NotSupportedError(f"kraken has no {api} endpoint {endpoint}")
        request = self.signer.sign(endpoint, api=api, params=params)

        logger.debug(
            "Kraken %s request %s",
            api,
            endpoint,
            extra=structured_log_extra(event="kraken_request", endpoint=endpoint, api=api),
        )
        envelope = self.transport.send(
            request.url, request.method, headers=request.headers, body=request.body
        )

        outcome = classify_response(envelope)
        if not outcome.ok:
            logger.warning(
                "Kraken %s reported an error: %s",
                endpoint,
                "; ".join(outcome.error.errors),
                extra=structured_log_extra(
                    event="kraken_error",
                    endpoint=endpoint,
                    error_kind=type(outcome.error).__name__,
                ),
            )
        return outcome

    def get_public(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Makes a GET request to a public Kraken API endpoint."""
        return self.call(endpoint, params=params, private=False).unwrap()

    def get_private(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Makes a signed POST request to a private Kraken API endpoint."""
        return self.call(endpoint, params=params, private=True).unwrap()
