"""Package initialization and shared metadata.

:data:`APP_VERSION` comes from the installed ``kraken-adapter`` distribution
metadata, or ``"0.0.0-dev"`` when running from a source checkout.
"""

from importlib import metadata


def _determine_version() -> str:
    """Return the package version string without raising during import."""

    try:
        return metadata.version("kraken-adapter")
    except metadata.PackageNotFoundError:
        return "0.0.0-dev"


APP_VERSION: str = _determine_version()
__version__: str = APP_VERSION

from .exchange import KrakenExchange  # noqa: E402

__all__ = ["APP_VERSION", "KrakenExchange", "__version__"]
