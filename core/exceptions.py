"""
Exception hierarchy for the triad arbitrage scanner.
"""
from typing import Any, Optional


class TriadArbitrageError(Exception):
    """Base exception for all scanner errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(TriadArbitrageError):
    """Raised when a required setting is missing or invalid."""

    pass


class EmptyRouteSetError(TriadArbitrageError):
    """Raised when the monitor finds no persisted routes to evaluate."""

    def __init__(self, key: str):
        super().__init__(
            f"No triads found under Redis key {key!r}. Run the scanner first!",
            {"key": key},
        )
        self.key = key


class RouteSchemaError(TriadArbitrageError):
    """Raised when a persisted route record does not match the route schema."""

    pass


class InvalidPairError(TriadArbitrageError):
    """Raised when a pair is built from a token and itself."""

    pass
