"""Enumerations for domain models."""

from enum import Enum


class DataSource(str, Enum):
    """Where a snapshot handed to the presentation layer came from."""

    NETWORK = "network"
    CACHE = "cache"
    FALLBACK = "fallback"  # Demo data; never produced by the orchestrator itself
