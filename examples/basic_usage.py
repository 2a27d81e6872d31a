#!/usr/bin/env python3
"""
Basic usage example for Vault KV Python SDK

Run a development server first:
    docker run --rm --cap-add=IPC_LOCK -p 8200:8200 hashicorp/vault server -dev -dev-root-token-id=root
"""

import asyncio
import logging

from vault_kv_sdk import VaultClient, ClientConfig, NotFoundError


def main():
    logging.basicConfig(level=logging.DEBUG)
    config = ClientConfig(timeout=10, log_requests=True)

    with VaultClient("http://localhost:8200", config=config) as vault:
        vault.set_token("root")

        written = vault.write("secret/data/test", {"data": {"key": "value"}})
        print(f"Wrote version {written.version}")

        secret = vault.read("secret/data/test")
        print(f"Read key: {secret.data['key']}")

        listing = vault.list("secret/metadata")
        print(f"Keys: {listing.keys}")

        print(f"Deleted: {vault.delete('secret/data/test')}")

        try:
            vault.read("secret/data/test")
        except NotFoundError as e:
            print(f"Gone after delete: {e.status_code}")


async def amain():
    async with VaultClient.from_env() as vault:
        listing = await vault.alist("secret/metadata")
        print(f"Keys (async): {listing.keys}")


if __name__ == "__main__":
    main()
    asyncio.run(amain())
