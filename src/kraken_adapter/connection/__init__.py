from .classifier import ResponseOutcome, classify_response
from .exceptions import (
    AuthError,
    BadSymbolError,
    KrakenAPIError,
    MalformedPayloadError,
    NetworkError,
    NotSupportedError,
    OrderNotFoundError,
    ParameterRequiredError,
    RateLimitError,
    ServiceUnavailableError,
)
from .nonce import NonceGenerator
from .rest_client import PRIVATE_ENDPOINTS, PUBLIC_ENDPOINTS, KrakenRESTClient
from .signer import RequestSigner, SignedRequest, sign_message
from .transport import RequestsTransport, Transport

__all__ = [
    "AuthError",
    "BadSymbolError",
    "KrakenAPIError",
    "KrakenRESTClient",
    "MalformedPayloadError",
    "NetworkError",
    "NonceGenerator",
    "NotSupportedError",
    "OrderNotFoundError",
    "PRIVATE_ENDPOINTS",
    "PUBLIC_ENDPOINTS",
    "ParameterRequiredError",
    "RateLimitError",
    "RequestSigner",
    "RequestsTransport",
    "ResponseOutcome",
    "ServiceUnavailableError",
    "SignedRequest",
    "Transport",
    "classify_response",
    "sign_message",
]
