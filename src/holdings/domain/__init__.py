"""Domain layer: value types for holdings and cache entries."""
