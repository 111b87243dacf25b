"""Exception classes for the NeuroFuel advisor backend."""

from typing import Optional


class NeuroFuelError(Exception):
    """Base exception for all NeuroFuel errors."""
    pass


class ConfigError(NeuroFuelError):
    """Raised when an environment value cannot be parsed."""
    pass


class ProviderError(NeuroFuelError):
    """Raised when the remote completion provider fails or times out."""

    def __init__(self, message: str, status: Optional[int] = None, kind: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.kind = kind
