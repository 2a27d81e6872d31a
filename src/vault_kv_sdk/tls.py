"""
TLS helpers for Vault KV SDK.
"""

import ssl
from pathlib import Path
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from .config import ClientConfig
from .exceptions import ConfigurationError


class ClientCertificate:
    """PEM client certificate presented during the TLS handshake."""

    def __init__(
        self,
        cert_path: str,
        key_path: str,
        key_password: Optional[str] = None,
    ):
        """
        Initialize and validate a client certificate.

        Args:
            cert_path: Path to client certificate file
            key_path: Path to private key file
            key_password: Optional password for private key
        """
        self.cert_path = Path(cert_path)
        self.key_path = Path(key_path)
        self.key_password = key_password

        self._load_certificate()

    def _load_certificate(self) -> None:
        """Load the certificate and key, and check that they belong together."""
        try:
            self.certificate = x509.load_pem_x509_certificate(self.cert_path.read_bytes())

            password = self.key_password.encode() if self.key_password else None
            self.private_key = serialization.load_pem_private_key(
                self.key_path.read_bytes(), password=password
            )
        except (OSError, ValueError, TypeError) as e:
            raise ConfigurationError(f"Failed to load client certificate: {e}") from e

        public_format = serialization.PublicFormat.SubjectPublicKeyInfo
        cert_public = self.certificate.public_key().public_bytes(
            serialization.Encoding.DER, public_format
        )
        key_public = self.private_key.public_key().public_bytes(
            serialization.Encoding.DER, public_format
        )
        if cert_public != key_public:
            raise ConfigurationError(
                f"Client key {self.key_path} does not match certificate {self.cert_path}"
            )

    @property
    def subject(self) -> str:
        return self.certificate.subject.rfc4514_string()

    def load_into(self, context: ssl.SSLContext) -> None:
        context.load_cert_chain(
            str(self.cert_path), str(self.key_path), password=self.key_password
        )


def build_verify(config: ClientConfig) -> Union[bool, ssl.SSLContext]:
    """
    Build the ``verify`` argument for the httpx clients.

    Returns ``True`` when the library defaults apply, ``False`` when
    verification is disabled without a client certificate, and an
    ``ssl.SSLContext`` otherwise.
    """
    if not config.ca_bundle and not config.client_cert:
        return config.verify_ssl

    if config.verify_ssl:
        try:
            context = ssl.create_default_context(cafile=config.ca_bundle)
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(f"Failed to load CA bundle {config.ca_bundle}: {e}") from e
    else:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    if config.client_cert:
        certificate = ClientCertificate(
            config.client_cert, config.client_key, config.client_key_password
        )
        try:
            certificate.load_into(context)
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(f"Failed to load client certificate: {e}") from e

    return context
