"""
Esplora REST API backend (mempool.space, blockstream.info and self-hosted instances).

Only the address UTXO endpoint is used:

    GET {base_url}/address/{address}/utxo

which returns a JSON array of objects shaped like::

    {"txid": "...", "vout": 0, "value": 1234,
     "status": {"confirmed": true, "block_height": 800000,
                "block_hash": "...", "block_time": 1690000000}}
"""

from __future__ import annotations

import asyncio

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from utxoview.backends.base import UTXOBackend
from utxoview.errors import APIError, DecodingError, NetworkError
from utxoview.models import UTXO

DEFAULT_TIMEOUT = 30.0

# Retries only cover transport failures (connect errors, timeouts);
# HTTP error responses are returned to the caller as APIError straight away.
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY = 0.5

# Longest API error body kept in an APIError message
MAX_ERROR_BODY = 500

_utxo_list_adapter: TypeAdapter[list[UTXO]] = TypeAdapter(list[UTXO])


class EsploraBackend(UTXOBackend):
    """
    UTXO backend using an Esplora-compatible HTTP API.

    Anything with an Esplora API works; mempool.space is the default.
    """

    def __init__(
        self,
        base_url: str = "https://mempool.space/api",
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Esplora backend.

        Args:
            base_url: API root, e.g. https://mempool.space/api
            timeout: Per-request timeout in seconds
            max_retries: Extra attempts after a transport failure
            retry_delay: Base delay for exponential backoff between attempts
            client: Optional preconfigured httpx client (proxies, transports).
                The caller keeps ownership and closes it.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def address_utxo_url(self, address: str) -> str:
        return f"{self.base_url}/address/{address}/utxo"

    async def _get(self, url: str) -> httpx.Response:
        """GET with exponential backoff on transport errors."""
        attempt = 0
        while True:
            try:
                return await self.client.get(url)
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    logger.error(f"Esplora request failed: {url} - {e}")
                    raise NetworkError(e) from e
                delay = self.retry_delay * (2**attempt)
                attempt += 1
                logger.warning(
                    f"Esplora request failed ({e}), retry {attempt}/{self.max_retries} "
                    f"in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
            except httpx.HTTPError as e:
                logger.error(f"Esplora request failed: {url} - {e}")
                raise NetworkError(e) from e

    async def get_address_utxos(self, address: str) -> list[UTXO]:
        url = self.address_utxo_url(address)
        response = await self._get(url)

        if not response.is_success:
            body = response.text[:MAX_ERROR_BODY]
            logger.error(f"Esplora API error {response.status_code} for {address}: {body}")
            raise APIError(response.status_code, body)

        try:
            utxos = _utxo_list_adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to decode UTXOs for {address}: {e}")
            raise DecodingError(e) from e

        logger.debug(f"Found {len(utxos)} UTXOs for {address}")
        return utxos

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
