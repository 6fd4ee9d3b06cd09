# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fetch verified contract ABIs from Etherscan-compatible explorer APIs."""

from __future__ import annotations

import json
from typing import Any, Final

import httpx

from .abi import ABIDescriptor, parse_abi
from .errors import AbiFetchError, AbiNotFoundError

ETHERSCAN_MAINNET_URL: Final[str] = "https://api.etherscan.io/api"
ETHERSCAN_NETWORK_URL: Final[str] = "https://api-{network}.etherscan.io/api"
BLOCKSCOUT_NETWORKS: Final[dict[str, str]] = {
    "poa-core": "https://blockscout.com/poa/core/api",
}
MAINNET: Final[str] = "mainnet"
SUCCESS_STATUS: Final[str] = "1"
REQUEST_TIMEOUT: Final[float] = 30.0


def explorer_url(network: str) -> str:
    """Return the explorer API endpoint serving ``network``."""

    if network in BLOCKSCOUT_NETWORKS:
        return BLOCKSCOUT_NETWORKS[network]
    if network == MAINNET:
        return ETHERSCAN_MAINNET_URL
    return ETHERSCAN_NETWORK_URL.format(network=network)


class ExplorerClient:
    """Client for the ``contract/getabi`` explorer endpoint."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        client: httpx.Client | None = None,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialise the client.

        Args:
            api_key: Optional explorer API key sent as ``apikey``.
            client: Preconfigured HTTP client, mainly for tests.
            timeout: Request timeout in seconds when ``client`` is omitted.
        """

        self._api_key = api_key
        self._client = client or httpx.Client(timeout=timeout)
        self._owns_client = client is None

    def __enter__(self) -> ExplorerClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def fetch_abi(self, contract_name: str, network: str, address: str) -> ABIDescriptor:
        """Return the verified ABI of ``address`` on ``network``.

        Raises:
            AbiNotFoundError: If the explorer has no verified ABI for the address.
            AbiFetchError: If the explorer cannot be reached or answers with an
                HTTP error or unreadable payload.
        """

        params = {"module": "contract", "action": "getabi", "address": address}
        if self._api_key:
            params["apikey"] = self._api_key
        try:
            response = self._client.get(explorer_url(network), params=params)
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPStatusError as exc:
            raise AbiFetchError(network, address, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise AbiFetchError(network, address, str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            raise AbiFetchError(network, address, "response is not JSON") from exc

        if not isinstance(payload, dict) or str(payload.get("status")) != SUCCESS_STATUS:
            detail = payload.get("result") if isinstance(payload, dict) else None
            raise AbiNotFoundError(network, address, str(detail) if detail else None)
        try:
            entries = json.loads(payload["result"])
        except (TypeError, ValueError) as exc:
            raise AbiFetchError(network, address, "ABI payload is not valid JSON") from exc
        return parse_abi(contract_name, entries, source=f"{network}:{address}")


def fetch_abi(contract_name: str, network: str, address: str, *, api_key: str | None = None) -> ABIDescriptor:
    """Fetch the ABI of ``address`` using a short-lived :class:`ExplorerClient`."""

    with ExplorerClient(api_key=api_key) as client:
        return client.fetch_abi(contract_name, network, address)


__all__ = ["ExplorerClient", "explorer_url", "fetch_abi"]
