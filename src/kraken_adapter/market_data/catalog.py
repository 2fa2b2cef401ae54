# src/kraken_adapter/market_data/catalog.py

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from kraken_adapter.connection.exceptions import BadSymbolError, MalformedPayloadError
from kraken_adapter.connection.rest_client import KrakenRESTClient
from kraken_adapter.logging_config import structured_log_extra

from .currencies import normalize_asset
from .models import Market, MarketLimits, MarketPrecision, MinMax

logger = logging.getLogger(__name__)

DARKPOOL_MARKER = ".d"

# Pairs Kraken trades (or traded) that AssetPairs does not list.
INACTIVE_MARKETS = (
    {"id": "XXLMZEUR", "symbol": "XLM/EUR", "base": "XLM", "quote": "EUR", "altname": "XLMEUR"},
)
INACTIVE_PRECISION = MarketPrecision(amount=8, price=8)


def is_darkpool_id(code: str) -> bool:
    return DARKPOOL_MARKER in code


def placeholder_limits(precision: MarketPrecision) -> MarketLimits:
    """
    Bounds derived from decimal counts only. Kraken does not publish these; they
    are not the limits the exchange enforces.
    """
    return MarketLimits(
        amount=MinMax(min=10.0 ** -precision.amount, max=10.0 ** precision.amount),
        price=MinMax(min=10.0 ** -precision.price, max=None),
        cost=MinMax(min=0.0, max=None),
    )


def _first_tier_rate(tiers: Any) -> float:
    # Tiers are [[volume, percent fee], ...]; the first tier is the base rate.
    return float(tiers[0][1]) / 100


def parse_market(pair_id: str, pair: Dict[str, Any]) -> Market:
    """Convert one ``AssetPairs`` entry into a :class:`Market`."""
    base = normalize_asset(pair["base"])
    quote = normalize_asset(pair["quote"])
    altname = pair["altname"]
    darkpool = is_darkpool_id(pair_id)

    precision = MarketPrecision(amount=int(pair["lot_decimals"]), price=int(pair["pair_decimals"]))
    limits = placeholder_limits(precision)

    maker = None
    if "fees_maker" in pair:
        maker = _first_tier_rate(pair["fees_maker"])

    return Market(
        id=pair_id,
        symbol=altname if darkpool else f"{base}/{quote}",
        base=base,
        quote=quote,
        altname=altname,
        darkpool=darkpool,
        active=True,
        precision=precision,
        limits=limits,
        maker=maker,
        taker=_first_tier_rate(pair["fees"]),
        lot=limits.amount.min,
        info=pair,
    )


def inactive_markets() -> List[Market]:
    limits = placeholder_limits(INACTIVE_PRECISION)
    defaults = Market(
        id="",
        symbol="",
        base="",
        quote="",
        altname="",
        darkpool=False,
        active=False,
        precision=INACTIVE_PRECISION,
        limits=limits,
        lot=limits.amount.min,
    )
    return [replace(defaults, **entry) for entry in INACTIVE_MARKETS]


@dataclass(frozen=True)
class _CatalogSnapshot:
    markets: List[Market] = field(default_factory=list)
    by_symbol: Dict[str, Market] = field(default_factory=dict)
    by_id: Dict[str, Market] = field(default_factory=dict)
    by_altname: Dict[str, Market] = field(default_factory=dict)

    @classmethod
    def build(cls, markets: List[Market]) -> "_CatalogSnapshot":
        return cls(
            markets=list(markets),
            by_symbol={m.symbol: m for m in markets},
            by_id={m.id: m for m in markets},
            by_altname={m.altname: m for m in markets},
        )


class MarketCatalog:
    """
    Kraken's tradable pairs, indexed by canonical symbol, native id and altname.

    ``load`` fetches ``AssetPairs`` at most once per catalog unless asked to
    reload. Concurrent first callers share one fetch, and a finished load is
    published as a single snapshot so lookups never see partial indexes.
    """

    def __init__(self, client: KrakenRESTClient):
        self._client = client
        self._lock = threading.Lock()
        self._snapshot: Optional[_CatalogSnapshot] = None

    @property
    def loaded(self) -> bool:
        return self._snapshot is not None

    def load(self, reload: bool = False) -> List[Market]:
        snapshot = self._snapshot
        if snapshot is not None and not reload:
            return list(snapshot.markets)

        with self._lock:
            # Another caller may have finished the load while we waited.
            if self._snapshot is not None and (not reload or self._snapshot is not snapshot):
                return list(self._snapshot.markets)

            markets = self.fetch_markets()
            self._snapshot = _CatalogSnapshot.build(markets)

        logger.info(
            "Market catalog loaded with %d markets",
            len(markets),
            extra=structured_log_extra(event="catalog_loaded", market_count=len(markets)),
        )
        return markets

    def fetch_markets(self) -> List[Market]:
        """Fetch and parse ``AssetPairs`` plus the known inactive markets, without indexing."""
        result = self._client.get_public("AssetPairs")
        if result is None:
            raise MalformedPayloadError("AssetPairs response carries no result")

        markets = [parse_market(pair_id, pair) for pair_id, pair in result.items()]
        listed = {m.id for m in markets}
        markets.extend(m for m in inactive_markets() if m.id not in listed)
        return markets

    def _current(self) -> _CatalogSnapshot:
        return self._snapshot or _CatalogSnapshot()

    @property
    def markets(self) -> List[Market]:
        return list(self._current().markets)

    @property
    def symbols(self) -> List[str]:
        return list(self._current().by_symbol)

    def market(self, symbol: str) -> Market:
        try:
            return self._current().by_symbol[symbol]
        except KeyError:
            raise BadSymbolError(f"kraken does not have market symbol {symbol}") from None

    def market_by_id(self, market_id: str) -> Optional[Market]:
        return self._current().by_id.get(market_id)

    def find_by_altname_or_id(self, code: Optional[str]) -> Optional[Market]:
        if code is None:
            return None
        snapshot = self._current()
        return snapshot.by_altname.get(code) or snapshot.by_id.get(code)
