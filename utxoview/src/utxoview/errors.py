"""
Error taxonomy for UTXO fetching and aggregation.
"""

from __future__ import annotations


class UTXOViewError(Exception):
    """Base class for every error surfaced by the engine."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(UTXOViewError):
    def __init__(self, raw: str = "") -> None:
        super().__init__("Invalid input format.")
        self.raw = raw


class NetworkError(UTXOViewError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class DecodingError(UTXOViewError):
    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Decoding error: {cause}")
        self.cause = cause


class APIError(UTXOViewError):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"API error (status {status_code}): {message}")
        self.status_code = status_code
        self.api_message = message


class NoUTXOsFoundError(UTXOViewError):
    def __init__(self) -> None:
        super().__init__("No UTXOs found.")


class ExtendedKeyUnsupportedError(UTXOViewError):
    def __init__(self, key: str = "") -> None:
        super().__init__("Extended public key fetching is not supported by this deriver.")
        self.key = key


class AddressDerivationFailedError(UTXOViewError):
    def __init__(self, reason: str = "") -> None:
        message = "Failed to derive addresses from extended public key."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)
        self.reason = reason
