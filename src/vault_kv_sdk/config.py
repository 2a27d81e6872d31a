"""
Configuration classes for Vault KV SDK.
"""

from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_ADDRESS = "https://127.0.0.1:8200"
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


class VaultSettings(BaseSettings):
    """The standard ``VAULT_*`` environment variables."""
    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    addr: str = Field(DEFAULT_ADDRESS, description="Vault server address")
    token: Optional[SecretStr] = Field(None, description="Vault token")
    namespace: Optional[str] = Field(None, description="Vault Enterprise namespace")
    cacert: Optional[str] = Field(None, description="Path to CA bundle file")
    client_cert: Optional[str] = Field(None, description="Path to PEM client certificate")
    client_key: Optional[str] = Field(None, description="Path to PEM client private key")
    skip_verify: bool = Field(False, description="Disable TLS verification")
    client_timeout: Optional[float] = Field(None, gt=0, description="Request timeout in seconds")

    @field_validator("client_timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value):
        """Accept ``30``, ``30s``, ``1.5m``, ``1h`` or ``500ms``."""
        if not isinstance(value, str):
            return value
        raw = value.strip().lower()
        for suffix in sorted(_DURATION_UNITS, key=len, reverse=True):
            if raw.endswith(suffix):
                number, scale = raw[: -len(suffix)], _DURATION_UNITS[suffix]
                break
        else:
            number, scale = raw, 1.0
        try:
            return float(number) * scale
        except ValueError:
            raise ValueError(f"not a duration: {value!r}") from None

    @classmethod
    def load(cls) -> "VaultSettings":
        """
        Read the settings from the process environment.

        Raises:
            ConfigurationError: If a variable holds an unusable value
        """
        try:
            return cls()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Vault environment: {e}") from e


class ClientConfig(BaseModel):
    """Transport configuration for the Vault client."""
    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    max_connections: int = Field(10, ge=1, description="Maximum number of connections")
    verify_ssl: bool = Field(True, description="Whether to verify SSL certificates")
    ca_bundle: Optional[str] = Field(None, description="Path to CA bundle file")
    client_cert: Optional[str] = Field(None, description="Path to PEM client certificate")
    client_key: Optional[str] = Field(None, description="Path to PEM client private key")
    client_key_password: Optional[str] = Field(None, description="Password for the client key")
    namespace: Optional[str] = Field(None, description="Vault Enterprise namespace")

    # Logging configuration
    log_requests: bool = Field(False, description="Whether to log HTTP requests")
    log_responses: bool = Field(False, description="Whether to log HTTP responses")

    @model_validator(mode="after")
    def _check_client_cert_pair(self) -> "ClientConfig":
        if bool(self.client_cert) != bool(self.client_key):
            raise ValueError("client_cert and client_key must be set together")
        return self

    @classmethod
    def from_env(cls, settings: Optional[VaultSettings] = None) -> "ClientConfig":
        """
        Build a configuration from ``VaultSettings``.

        Args:
            settings: Pre-loaded settings, read from the environment if omitted

        Raises:
            ConfigurationError: If the environment holds unusable values
        """
        settings = settings or VaultSettings.load()
        values = {
            "verify_ssl": not settings.skip_verify,
            "ca_bundle": settings.cacert,
            "client_cert": settings.client_cert,
            "client_key": settings.client_key,
            "namespace": settings.namespace,
        }
        if settings.client_timeout is not None:
            values["timeout"] = settings.client_timeout

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid Vault configuration: {e}") from e
