# src/kraken_adapter/connection/exceptions.py

from typing import Any, Dict, List, Optional


class KrakenAPIError(Exception):
    """Base exception for all Kraken API related errors.

    Raised directly for any application-level error Kraken reports that has no
    more specific kind. ``errors`` holds Kraken's error list and ``payload`` the
    decoded response envelope, when one was received.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.errors = list(errors or [])
        self.payload = payload


class NetworkError(KrakenAPIError):
    """Raised when the transport fails to deliver a request or a response."""


class ServiceUnavailableError(NetworkError):
    """Raised when Kraken API is down, busy or in maintenance. Safe to retry."""


class RateLimitError(KrakenAPIError):
    """Raised when API rate limits are exceeded."""


class AuthError(KrakenAPIError):
    """Raised when authentication fails (invalid API key, signature, or nonce)."""


class OrderNotFoundError(KrakenAPIError):
    """Raised when the referenced order no longer exists on the exchange."""


class NotSupportedError(KrakenAPIError):
    """Raised for operations Kraken cannot serve for a symbol (e.g. darkpool books)."""


class BadSymbolError(KrakenAPIError):
    """Raised when a symbol is not present in the market catalog."""


class ParameterRequiredError(KrakenAPIError):
    """Raised when a call is missing a parameter Kraken requires."""


class MalformedPayloadError(KrakenAPIError):
    """Raised when a payload does not have any of the shapes Kraken documents."""
