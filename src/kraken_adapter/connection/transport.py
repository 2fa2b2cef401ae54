# src/kraken_adapter/connection/transport.py

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from kraken_adapter.logging_config import structured_log_extra

from .exceptions import MalformedPayloadError, NetworkError, RateLimitError, ServiceUnavailableError
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "kraken-adapter/0.1.0"


class Transport(Protocol):
    def send(
        self,
        url: str,
        method: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]: ...


class RequestsTransport:
    """
    Delivers signed requests over a ``requests.Session`` and decodes the JSON envelope.

    HTTP-level failures are mapped onto the adapter's error kinds here; Kraken's
    own ``error`` list is left for the response classifier.
    """

    def __init__(
        self,
        calls_per_second: float = 1 / 3,
        request_timeout: float = 10.0,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.rate_limiter = rate_limiter or RateLimiter(calls_per_second)
        self.request_timeout = request_timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def send(
        self,
        url: str,
        method: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[str] = None,
    ) -> Dict[str, Any]:
        self.rate_limiter.wait()

        try:
            response = self.session.request(
                method.upper(),
                url,
                headers=headers or {},
                data=body,
                timeout=self.request_timeout,
            )

            if response.status_code == 429:
                raise RateLimitError("Rate limit exceeded (HTTP 429)")
            if 500 <= response.status_code < 600:
                raise ServiceUnavailableError(
                    f"Kraken API Service Error: HTTP {response.status_code}"
                )

            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise ServiceUnavailableError(f"Request timed out: {e}") from e
        except requests.exceptions.HTTPError as e:
            raise NetworkError(f"HTTP Error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network Error: {e}") from e

        try:
            envelope = response.json()
        except ValueError as e:
            logger.warning(
                "Kraken returned a non-JSON body",
                extra=structured_log_extra(event="transport_invalid_json", url=url),
            )
            raise MalformedPayloadError(f"Invalid JSON in response from {url}") from e

        if not isinstance(envelope, dict):
            raise MalformedPayloadError(f"Unexpected response envelope from {url}: {envelope!r}")
        return envelope
