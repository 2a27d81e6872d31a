"""
Exception classes for Vault KV SDK.
"""

from typing import Any, List, Optional


class VaultError(Exception):
    """Base exception for Vault KV SDK."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[str]] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        self.body = body


class ConfigurationError(VaultError):
    """Client configuration error."""
    pass


class AuthenticationError(VaultError):
    """Token missing, invalid or not permitted."""
    pass


class NotFoundError(VaultError):
    """Secret path not found."""
    pass


class ValidationError(VaultError):
    """Request validation failed."""
    pass


class RateLimitError(VaultError):
    """Rate limit exceeded."""
    pass


class ServerError(VaultError):
    """Remote store failed to handle the request."""
    pass


class TransportError(VaultError):
    """Connection to the remote store failed."""
    pass
