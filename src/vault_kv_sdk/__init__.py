"""
Vault KV Python SDK

Client for versioned key/value secrets stored behind the Vault HTTP API.
Provides write, read, list and delete with token authentication and
typed error handling.
"""

from .client import VaultClient
from .auth import AuthMethod, TokenAuth
from .exceptions import (
    VaultError,
    ConfigurationError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    RateLimitError,
    ServerError,
    TransportError,
)
from .models import VaultResponse, VersionMetadata, WriteResult, ReadResult, ListResult
from .config import ClientConfig, VaultSettings
from .tls import ClientCertificate

__version__ = "1.0.0"

__all__ = [
    "VaultClient",
    "AuthMethod",
    "TokenAuth",
    "VaultError",
    "ConfigurationError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "TransportError",
    "VaultResponse",
    "VersionMetadata",
    "WriteResult",
    "ReadResult",
    "ListResult",
    "ClientConfig",
    "VaultSettings",
    "ClientCertificate",
]
