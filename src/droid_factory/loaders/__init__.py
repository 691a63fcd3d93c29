from .marketplace import LoadedMarketplace, load_marketplace, marketplace_root
from .plugins import normalize_plugins

__all__ = [
    "LoadedMarketplace",
    "load_marketplace",
    "marketplace_root",
    "normalize_plugins",
]
