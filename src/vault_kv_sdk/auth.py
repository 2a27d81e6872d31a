"""
Authentication methods for Vault KV SDK.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class AuthMethod(ABC):
    """Base class for authentication methods."""

    @abstractmethod
    def get_headers(self) -> Dict[str, str]:
        """Get authentication headers."""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Whether credentials are available to attach to a request."""
        pass


class TokenAuth(AuthMethod):
    """Static token authentication."""

    HEADER = "X-Vault-Token"

    def __init__(self, token: Optional[str] = None):
        """
        Initialize token authentication.

        Args:
            token: The Vault token, may be supplied later via ``token``
        """
        self.token = token

    def is_configured(self) -> bool:
        return bool(self.token)

    def get_headers(self) -> Dict[str, str]:
        """Get authentication headers."""
        return {
            self.HEADER: self.token or "",
            "X-Vault-Request": "true",
            "Content-Type": "application/json",
        }

    def __repr__(self) -> str:
        state = "set" if self.token else "unset"
        return f"TokenAuth(token=<{state}>)"
