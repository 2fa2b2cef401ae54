# src/kraken_adapter/connection/classifier.py

"""Turns Kraken response envelopes into results or typed errors."""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .exceptions import (
    AuthError,
    KrakenAPIError,
    OrderNotFoundError,
    RateLimitError,
    ServiceUnavailableError,
)

SERVICE_UNAVAILABLE_MARKERS = ("EService:Unavailable", "EService:Busy")
RATE_LIMIT_MARKERS = ("EAPI:Rate limit exceeded", "EOrder:Rate limit exceeded")
AUTH_MARKERS = ("EAPI:Invalid key", "EAPI:Invalid signature", "EAPI:Invalid nonce")
UNKNOWN_ORDER_MARKER = "EOrder:Unknown order"


@dataclass(frozen=True)
class ResponseOutcome:
    """Either the ``result`` of a successful call or the ``error`` Kraken reported."""

    result: Any = None
    error: Optional[KrakenAPIError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def refine(
        self, mapper: Callable[[KrakenAPIError], KrakenAPIError]
    ) -> "ResponseOutcome":
        """Replace the error with a more specific one; successes pass through."""
        if self.error is None:
            return self
        return ResponseOutcome(result=self.result, error=mapper(self.error))

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.result


def _matches(errors: List[str], markers) -> bool:
    return any(marker in error for error in errors for marker in markers)


def classify_errors(
    errors: List[str], payload: Optional[Dict[str, Any]] = None
) -> Optional[KrakenAPIError]:
    if not errors:
        return None

    message = "kraken " + json.dumps(payload if payload is not None else {"error": errors})
    if _matches(errors, SERVICE_UNAVAILABLE_MARKERS):
        return ServiceUnavailableError(message, errors=errors, payload=payload)
    if _matches(errors, RATE_LIMIT_MARKERS):
        return RateLimitError(message, errors=errors, payload=payload)
    if _matches(errors, AUTH_MARKERS):
        return AuthError(message, errors=errors, payload=payload)
    return KrakenAPIError(message, errors=errors, payload=payload)


def classify_response(envelope: Dict[str, Any]) -> ResponseOutcome:
    errors = envelope.get("error") or []
    if isinstance(errors, str):
        errors = [errors]
    error = classify_errors(list(errors), envelope)
    if error is not None:
        return ResponseOutcome(error=error)
    return ResponseOutcome(result=envelope.get("result"))


def unknown_order_as_not_found(error: KrakenAPIError) -> KrakenAPIError:
    """Cancel-order refinement: a generic error naming an unknown order becomes OrderNotFoundError."""
    if type(error) is KrakenAPIError and _matches(error.errors, (UNKNOWN_ORDER_MARKER,)):
        return OrderNotFoundError(
            f"cancel_order failed: {str(error)}", errors=error.errors, payload=error.payload
        )
    return error
