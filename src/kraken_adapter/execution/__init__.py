# src/kraken_adapter/execution/__init__.py

from .adapter import KrakenExecutionAdapter
from .router import build_order_payload

__all__ = [
    "KrakenExecutionAdapter",
    "build_order_payload",
]
