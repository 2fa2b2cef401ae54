# src/kraken_adapter/market_data/currencies.py

COMMON_CURRENCY_CODES = {
    "XBT": "BTC",
    "XDG": "DOGE",
    "BCC": "BCH",
    "DRK": "DASH",
}

ASSET_CLASS_PREFIXES = ("X", "Z")


def common_currency_code(code: str) -> str:
    return COMMON_CURRENCY_CODES.get(code, code)


def strip_asset_prefix(code: str) -> str:
    """
    Drops the single leading ``X`` (crypto) or ``Z`` (fiat) Kraken puts on its
    four-letter asset codes: ``XXBT`` -> ``XBT``, ``ZUSD`` -> ``USD``.

    Only the first character is looked at. Codes of three characters or fewer
    are native tickers (``XTZ``, ``ZRX``) and are returned unchanged.
    """
    if len(code) > 3 and code[0] in ASSET_CLASS_PREFIXES:
        return code[1:]
    return code


def normalize_asset(code: str) -> str:
    """Kraken asset code -> canonical currency code."""
    return common_currency_code(strip_asset_prefix(code))
