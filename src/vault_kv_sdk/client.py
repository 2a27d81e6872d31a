"""
Vault KV Client

Main client class for reading and writing secrets in a versioned
key/value store over the Vault HTTP API.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

import httpx
from pydantic import JsonValue, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .auth import TokenAuth
from .config import ClientConfig, VaultSettings
from .exceptions import (
    VaultError,
    AuthenticationError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
    RateLimitError,
    ServerError,
    TransportError,
)
from .models import VaultResponse, WriteResult, ReadResult, ListResult
from .tls import build_verify

logger = logging.getLogger(__name__)

API_PREFIX = "/v1/"

_payload_adapter = TypeAdapter(Dict[str, JsonValue])

T = TypeVar("T")


class VaultClient:
    """
    Client for a versioned key/value secrets API.

    Every operation issues exactly one request, with no retries and no
    caching, and is available both synchronously (``write``) and
    asynchronously (``awrite``). Paths are passed to the API as given, so
    versioned mounts are addressed as ``<mount>/data/<name>`` for secrets and
    ``<mount>/metadata/<prefix>`` for listings.

    The token may be changed with ``set_token`` between operations but not
    while requests are in flight; the client does no locking of its own.
    """

    def __init__(
        self,
        address: str,
        token: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Vault client.

        The underlying httpx clients are opened on first use, so a client
        used only synchronously never holds an async connection pool.

        Args:
            address: Absolute http(s) URL of the Vault server
            token: Optional token, may be supplied later with ``set_token``
            config: Optional client configuration
            transport: Optional httpx transport for the sync client
            async_transport: Optional httpx transport for the async client

        Raises:
            ConfigurationError: If the address is not an absolute http(s) URL
                or the TLS material cannot be loaded
        """
        self.address = self._validate_address(address)
        self.auth = TokenAuth(token)
        self.config = config or ClientConfig()

        self._http_options = {
            "timeout": self.config.timeout,
            "limits": httpx.Limits(
                max_keepalive_connections=self.config.max_connections,
                max_connections=self.config.max_connections,
            ),
            "verify": build_verify(self.config),
        }
        self._transport = transport
        self._async_transport = async_transport
        self._client: Optional[httpx.Client] = None
        self._async_client: Optional[httpx.AsyncClient] = None
        self._open_lock = threading.Lock()

    @classmethod
    def from_env(
        cls,
        settings: Optional[VaultSettings] = None,
        **kwargs: Any,
    ) -> "VaultClient":
        """
        Build a client from ``VAULT_ADDR``, ``VAULT_TOKEN`` and the other
        variables read by ``VaultSettings``.

        Raises:
            ConfigurationError: If the environment holds unusable values
        """
        settings = settings or VaultSettings.load()
        return cls(
            settings.addr,
            token=settings.token.get_secret_value() if settings.token else None,
            config=ClientConfig.from_env(settings),
            **kwargs,
        )

    @staticmethod
    def _validate_address(address: str) -> str:
        if not isinstance(address, str) or not address.strip():
            raise ConfigurationError(f"Vault address must be a non-empty URL, got {address!r}")
        try:
            url = httpx.URL(address.strip())
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid Vault address {address!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigurationError(
                f"Vault address must be an absolute http(s) URL, got {address!r}"
            )
        if url.query or url.fragment:
            raise ConfigurationError(
                f"Vault address must not carry a query or fragment, got {address!r}"
            )
        return address.strip().rstrip("/")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    def _get_client(self) -> httpx.Client:
        with self._open_lock:
            if self._client is None:
                self._client = httpx.Client(transport=self._transport, **self._http_options)
            return self._client

    def _get_async_client(self) -> httpx.AsyncClient:
        with self._open_lock:
            if self._async_client is None:
                self._async_client = httpx.AsyncClient(
                    transport=self._async_transport, **self._http_options
                )
            return self._async_client

    def close(self):
        """
        Close the sync HTTP client.

        An async client opened by ``a*`` calls can only be closed from a
        coroutine; use ``aclose`` or ``async with`` for mixed use.
        """
        if self._client is not None:
            self._client.close()

    async def aclose(self):
        """Close both HTTP clients."""
        if self._async_client is not None:
            await self._async_client.aclose()
        self.close()
    @property
    def token(self) -> Optional[str]:
        return self.auth.token

    def set_token(self, token: str) -> None:
        """Store the token sent with subsequent requests. No I/O is performed."""
        self.auth.token = token

    # Request plumbing

    def _prepare(self, method: str, path: str) -> tuple:
        """Build the URL and headers, refusing to proceed without a token."""
        if not self.auth.is_configured():
            raise AuthenticationError(f"No token set, refusing to {method} {path!r}")

        clean = (path or "").strip().strip("/")
        if not clean:
            raise ValidationError("Secret path must not be empty")

        headers = self.auth.get_headers()
        if self.config.namespace:
            headers["X-Vault-Namespace"] = self.config.namespace

        url = f"{self.address}{API_PREFIX}{clean}"
        if self.config.log_requests:
            logger.debug(f"{method} {url}")
        return url, headers

    def _make_request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Make a synchronous HTTP request."""
        url, headers = self._prepare(method, path)
        try:
            response = self._get_client().request(method=method, url=url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise TransportError(f"Failed to connect to Vault at {self.address}: {e}") from e
        self._handle_response(response)
        return response

    async def _make_async_request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Make an asynchronous HTTP request."""
        url, headers = self._prepare(method, path)
        try:
            response = await self._get_async_client().request(
                method=method, url=url, headers=headers, **kwargs
            )
        except httpx.RequestError as e:
            logger.error(f"Async request failed: {method} {url}: {e}")
            raise TransportError(f"Failed to connect to Vault at {self.address}: {e}") from e
        self._handle_response(response)
        return response

    def _handle_response(self, response: httpx.Response) -> None:
        """Handle HTTP response and raise appropriate exceptions."""
        if self.config.log_responses:
            logger.debug(
                f"{response.request.method} {response.request.url.path} -> {response.status_code}"
            )
        if response.is_success:
            return

        try:
            body = response.json()
        except ValueError:
            body = {"errors": [response.text] if response.text else []}

        errors = body.get("errors") if isinstance(body, dict) else None
        errors = [str(e) for e in errors] if isinstance(errors, list) else []
        status = response.status_code
        message = "; ".join(errors) or response.reason_phrase or "Unknown error"
        details = {"status_code": status, "errors": errors, "body": body}

        if status in (401, 403):
            raise AuthenticationError(message, **details)
        elif status == 404:
            raise NotFoundError(message, **details)
        elif status == 400:
            raise ValidationError(message, **details)
        elif status == 429:
            raise RateLimitError(message, **details)
        elif status >= 500:
            raise ServerError(f"HTTP {status}: {message}", **details)
        else:
            raise VaultError(f"HTTP {status}: {message}", **details)

    def _decode(self, response: httpx.Response, result: Callable[[Dict[str, Any]], T]) -> T:
        """Unwrap the response envelope and build ``result`` from its ``data``."""
        if response.status_code == 204 or not response.content:
            envelope = VaultResponse()
        else:
            try:
                envelope = VaultResponse.model_validate(response.json())
            except (ValueError, PydanticValidationError) as e:
                raise ServerError(
                    f"Undecodable response from Vault: {e}",
                    status_code=response.status_code,
                    body=response.text,
                ) from e
            for warning in envelope.warnings or []:
                logger.warning(f"Vault warning for {response.request.url.path}: {warning}")

        try:
            return result(envelope.data or {})
        except PydanticValidationError as e:
            raise ServerError(
                f"Unexpected response shape from Vault: {e}",
                status_code=response.status_code,
                body=envelope.data,
            ) from e

    @staticmethod
    def _encode_payload(payload: Mapping[str, Any]) -> bytes:
        if not isinstance(payload, Mapping):
            raise ValidationError(
                f"Secret payload must be a mapping, got {type(payload).__name__}"
            )
        try:
            body = _payload_adapter.validate_python(dict(payload))
            return json.dumps(body, allow_nan=False).encode("utf-8")
        except (PydanticValidationError, ValueError) as e:
            raise ValidationError(f"Secret payload is not valid JSON: {e}") from e

    # Secret operations

    def write(self, path: str, payload: Mapping[str, Any]) -> WriteResult:
        """
        Write a new version of a secret.

        Args:
            path: Secret path, e.g. ``secret/data/app``
            payload: Request body, conventionally ``{"data": {...}}``

        Returns:
            Metadata of the created version
        """
        content = self._encode_payload(payload)
        response = self._make_request("POST", path, content=content)
        return self._decode(response, WriteResult.model_validate)

    async def awrite(self, path: str, payload: Mapping[str, Any]) -> WriteResult:
        """Write a new version of a secret (async)."""
        content = self._encode_payload(payload)
        response = await self._make_async_request("POST", path, content=content)
        return self._decode(response, WriteResult.model_validate)

    def read(self, path: str, version: Optional[int] = None) -> ReadResult:
        """
        Read the latest, or a given, version of a secret.

        A path that never existed and a path whose latest version was
        soft deleted both raise ``NotFoundError``; the decoded body stays
        available on the exception.
        """
        params = {"version": version} if version is not None else None
        response = self._make_request("GET", path, params=params)
        return self._decode(response, ReadResult.from_response_data)

    async def aread(self, path: str, version: Optional[int] = None) -> ReadResult:
        """Read the latest, or a given, version of a secret (async)."""
        params = {"version": version} if version is not None else None
        response = await self._make_async_request("GET", path, params=params)
        return self._decode(response, ReadResult.from_response_data)

    def list(self, path: str) -> ListResult:
        """List the immediate children of a path. Missing paths list as empty."""
        try:
            response = self._make_request("LIST", path)
        except NotFoundError:
            logger.debug(f"Nothing to list under {path!r}")
            return ListResult()
        return self._decode(response, ListResult.model_validate)

    async def alist(self, path: str) -> ListResult:
        """List the immediate children of a path (async)."""
        try:
            response = await self._make_async_request("LIST", path)
        except NotFoundError:
            logger.debug(f"Nothing to list under {path!r}")
            return ListResult()
        return self._decode(response, ListResult.model_validate)

    def delete(self, path: str) -> None:
        """Soft delete the latest version of a secret. Missing paths are a no-op."""
        try:
            self._make_request("DELETE", path)
        except NotFoundError:
            logger.debug(f"Nothing to delete at {path!r}")

    async def adelete(self, path: str) -> None:
        """Soft delete the latest version of a secret (async)."""
        try:
            await self._make_async_request("DELETE", path)
        except NotFoundError:
            logger.debug(f"Nothing to delete at {path!r}")
