"""Holdings data-access layer: cache-aware fetching of portfolio holdings."""

__version__ = "0.1.0"
