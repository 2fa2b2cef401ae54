# src/kraken_adapter/connection/signer.py

import base64
import hashlib
import hmac
import urllib.parse
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import AuthError
from .nonce import NonceGenerator

KRAKEN_API_URL = "https://api.kraken.com"
API_VERSION = "0"


def sign_message(api_secret: str, urlpath: str, nonce: str, postdata: str) -> str:
    """
    API-Sign = base64(HMAC-SHA512(base64-decoded secret, urlpath + SHA256(nonce + postdata)))

    ``postdata`` is the url-encoded request body, which already carries the nonce.
    """
    sha256 = hashlib.sha256((str(nonce) + postdata).encode()).digest()
    message = urlpath.encode() + sha256
    mac = hmac.new(base64.b64decode(api_secret), message, hashlib.sha512)
    return base64.b64encode(mac.digest()).decode()


@dataclass
class SignedRequest:
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


class RequestSigner:
    """Builds ready-to-send public and private Kraken requests."""

    def __init__(
        self,
        api_url: str = KRAKEN_API_URL,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        nonce_generator: Optional[NonceGenerator] = None,
        version: str = API_VERSION,
    ):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.api_secret = api_secret
        self.version = version
        self.nonce_generator = nonce_generator or NonceGenerator()

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def urlpath(self, endpoint: str, api: str = "public") -> str:
        return f"/{self.version}/{api}/{endpoint}"

    def sign(
        self,
        endpoint: str,
        api: str = "public",
        params: Optional[Dict[str, Any]] = None,
    ) -> SignedRequest:
        params = params or {}
        urlpath = self.urlpath(endpoint, api)

        if api == "public":
            if params:
                urlpath += "?" + urllib.parse.urlencode(params)
            return SignedRequest(url=self.api_url + urlpath, method="GET")

        if not self.has_credentials:
            raise AuthError("API key and secret are required for private endpoints.")

        nonce = str(self.nonce_generator.generate())
        data: Dict[str, Any] = {"nonce": nonce}
        data.update(params)
        body = urllib.parse.urlencode(data)

        headers = {
            "API-Key": self.api_key,
            "API-Sign": sign_message(self.api_secret, urlpath, nonce, body),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        return SignedRequest(
            url=self.api_url + urlpath, method="POST", headers=headers, body=body
        )
