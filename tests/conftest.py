"""
Shared fixtures: an in-process fake of the Vault KV v2 HTTP API.
"""

import json
import os
from collections import defaultdict

import httpx
import pytest
import pytest_asyncio

from vault_kv_sdk import VaultClient

ROOT_TOKEN = "root"
TIMESTAMP = "2026-01-01T00:00:00.000000Z"


class FakeVault:
    """Just enough of a versioned KV mount at ``secret/`` to drive the client."""

    def __init__(self, token: str = ROOT_TOKEN, mount: str = "secret"):
        self.token = token
        self.mount = mount
        self.versions = defaultdict(list)
        self.requests = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @staticmethod
    def _reply(status: int, data=None, errors=None, **extra) -> httpx.Response:
        if status == 204:
            return httpx.Response(204)
        if errors is not None:
            return httpx.Response(status, json={"errors": errors, **extra})
        body = {
            "request_id": "00000000-0000-0000-0000-000000000000",
            "lease_id": "",
            "renewable": False,
            "lease_duration": 0,
            "data": data,
            "wrap_info": None,
            "warnings": None,
            "auth": None,
        }
        return httpx.Response(status, json=body)

    @staticmethod
    def _metadata(entry: dict, version: int) -> dict:
        return {
            "version": version,
            "created_time": TIMESTAMP,
            "deletion_time": entry["deletion_time"],
            "destroyed": False,
            "custom_metadata": None,
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("X-Vault-Token") != self.token:
            return self._reply(403, errors=["permission denied"])

        path = request.url.path
        if not path.startswith("/v1/"):
            return self._reply(404, errors=["unsupported path"])
        parts = path[len("/v1/"):].split("/", 2)
        mount, kind = parts[0], parts[1] if len(parts) > 1 else ""
        rest = parts[2] if len(parts) > 2 else ""
        if mount != self.mount or kind not in ("data", "metadata"):
            return self._reply(404, errors=[f"no handler for route \"{path[4:]}\""])

        method = request.method
        if method == "GET" and request.url.params.get("list") == "true":
            method = "LIST"

        if kind == "metadata" and method == "LIST":
            return self._list(rest)
        if kind == "data" and method in ("POST", "PUT"):
            return self._write(rest, json.loads(request.content or b"{}"))
        if kind == "data" and method == "GET":
            return self._read(rest, request.url.params.get("version"))
        if kind == "data" and method == "DELETE":
            return self._delete(rest)
        return self._reply(405, errors=["unsupported operation"])

    def _write(self, name: str, body: dict) -> httpx.Response:
        if not isinstance(body.get("data"), dict):
            return self._reply(400, errors=["no data provided"])
        history = self.versions[name]
        history.append({"data": body["data"], "deletion_time": ""})
        return self._reply(200, data=self._metadata(history[-1], len(history)))

    def _read(self, name: str, version) -> httpx.Response:
        history = self.versions.get(name)
        if not history:
            return self._reply(404, errors=[])
        number = int(version) if version else len(history)
        if number < 1 or number > len(history):
            return self._reply(404, errors=[])
        entry = history[number - 1]
        metadata = self._metadata(entry, number)
        if entry["deletion_time"]:
            return httpx.Response(404, json={"data": {"data": None, "metadata": metadata}})
        return self._reply(200, data={"data": entry["data"], "metadata": metadata})

    def _delete(self, name: str) -> httpx.Response:
        history = self.versions.get(name)
        if history:
            history[-1]["deletion_time"] = TIMESTAMP
        return self._reply(204)

    def _list(self, prefix: str) -> httpx.Response:
        prefix = f"{prefix.strip('/')}/" if prefix.strip("/") else ""
        keys = []
        for name in sorted(self.versions):
            if not self.versions[name] or not name.startswith(prefix):
                continue
            child, sep, _ = name[len(prefix):].partition("/")
            key = child + sep
            if key not in keys:
                keys.append(key)
        if not keys:
            return self._reply(404, errors=[])
        return self._reply(200, data={"keys": keys})


@pytest.fixture
def fake_vault():
    return FakeVault()


@pytest.fixture
def client(fake_vault):
    transport = fake_vault.transport()
    with VaultClient(
        "http://localhost:8200",
        transport=transport,
        async_transport=transport,
    ) as client:
        client.set_token(ROOT_TOKEN)
        yield client


@pytest_asyncio.fixture
async def async_client(fake_vault):
    transport = fake_vault.transport()
    async with VaultClient(
        "http://localhost:8200",
        token=ROOT_TOKEN,
        transport=transport,
        async_transport=transport,
    ) as client:
        yield client


@pytest.fixture
def vault_env(monkeypatch):
    """Start from an environment without any ``VAULT_*`` variables."""
    for name in list(os.environ):
        if name.upper().startswith("VAULT_"):
            monkeypatch.delenv(name)
    return monkeypatch
