from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def _mask(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value[:4] + "..." if len(value) > 8 else "***"


@dataclass
class Credentials:
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    source: Optional[str] = None

    @property
    def complete(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def __repr__(self) -> str:
        # Never render the secret; the key is shortened.
        return (
            "Credentials("
            f"api_key={_mask(self.api_key)!r}, "
            f"api_secret={'***' if self.api_secret else None!r}, "
            f"source={self.source!r})"
        )

    __str__ = __repr__
