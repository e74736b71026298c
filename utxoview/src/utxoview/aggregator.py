"""
UTXO aggregation across one or many source addresses.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from utxoview.backends.base import AddressDeriver, UTXOBackend
from utxoview.classifier import classify
from utxoview.errors import (
    AddressDerivationFailedError,
    ExtendedKeyUnsupportedError,
    InvalidInputError,
    NoUTXOsFoundError,
)
from utxoview.models import (
    UTXO,
    AddressList,
    AggregationOutcome,
    ExtendedKey,
    FetchRequest,
    InvalidRequest,
    SingleAddress,
)

DEFAULT_MAX_CONCURRENCY = 8


class UTXOAggregator:
    """
    Turns a FetchRequest into an AggregationOutcome.

    Multi-address requests fan out one task per address and join on all of
    them. If at least one address yields UTXOs the outcome is a success and
    the remaining failures are kept as per-source diagnostics.
    """

    def __init__(
        self,
        backend: UTXOBackend,
        deriver: AddressDeriver | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.backend = backend
        self.deriver = deriver
        self.max_concurrency = max_concurrency

    async def fetch_input(self, raw: str) -> AggregationOutcome:
        return await self.fetch(classify(raw))

    async def fetch(self, request: FetchRequest) -> AggregationOutcome:
        if isinstance(request, SingleAddress):
            return await self._fetch_single(request.address)
        if isinstance(request, AddressList):
            return await self._fetch_many(list(request.addresses))
        if isinstance(request, ExtendedKey):
            return await self._fetch_extended_key(request.key)
        if isinstance(request, InvalidRequest):
            raise InvalidInputError(request.raw)
        raise TypeError(f"Unknown fetch request: {request!r}")

    async def fetch_address(self, address: str) -> list[UTXO]:
        """Fetch one address and stamp every UTXO with it as origin."""
        utxos = await self.backend.get_address_utxos(address)
        return [utxo.with_origin(address) for utxo in utxos]

    async def _fetch_single(self, address: str) -> AggregationOutcome:
        logger.info(f"Fetching UTXOs for {address}")
        utxos = await self.fetch_address(address)
        if not utxos:
            raise NoUTXOsFoundError()
        return AggregationOutcome(utxos=utxos)

    async def _fetch_many(self, addresses: list[str]) -> AggregationOutcome:
        logger.info(f"Fetching UTXOs for {len(addresses)} addresses")
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch_one(address: str) -> list[UTXO]:
            async with semaphore:
                return await self.fetch_address(address)

        results = await asyncio.gather(
            *(fetch_one(address) for address in addresses), return_exceptions=True
        )

        combined: list[UTXO] = []
        errors: dict[str, Exception] = {}
        first_error: Exception | None = None

        for address, result in zip(addresses, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(f"Fetch failed for {address}: {result}")
                errors.setdefault(address, result)
                if first_error is None:
                    first_error = result
                continue
            if isinstance(result, BaseException):
                raise result
            logger.debug(f"{address}: {len(result)} UTXOs")
            combined.extend(result)

        if not combined:
            if first_error is not None:
                raise first_error
            raise NoUTXOsFoundError()

        if errors:
            logger.warning(
                f"Partial fetch: {len(errors)}/{len(addresses)} addresses failed, "
                f"returning {len(combined)} UTXOs"
            )
        else:
            logger.info(f"Fetched {len(combined)} UTXOs from {len(addresses)} addresses")

        return AggregationOutcome(utxos=combined, per_source_errors=errors)

    async def _fetch_extended_key(self, key: str) -> AggregationOutcome:
        if self.deriver is None:
            raise AddressDerivationFailedError("No address deriver configured.")

        try:
            addresses = list(self.deriver.derive_addresses(key))
        except ExtendedKeyUnsupportedError:
            raise
        except Exception as e:
            logger.error(f"Address derivation failed: {e}")
            raise AddressDerivationFailedError(str(e)) from e

        if not addresses:
            raise AddressDerivationFailedError("Deriver returned no addresses.")

        logger.info(f"Derived {len(addresses)} addresses from extended key")
        return await self._fetch_many(addresses)
