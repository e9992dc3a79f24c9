# PATH: core/exceptions.py
"""
Typed exceptions for XARB.

Every error carries an ErrorCode. Only metadata failures are absorbed
inside the pipeline; everything else ends the evaluation.
"""

from typing import Any, Optional

from core.constants import ErrorCode


class XarbError(Exception):
    """Base exception for XARB."""

    def __init__(
        self,
        message: str = "",
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(XarbError):
    """Malformed or missing input (opportunity fields, amounts, decimals)."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        code: ErrorCode = ErrorCode.VALIDATION_INVALID_FIELD,
    ):
        super().__init__(message, code, details)


class ConfigError(XarbError):
    """Configuration file or environment is unusable."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)


class UnsupportedChainError(XarbError):
    """No adapter or provider is configured for the chain."""

    def __init__(self, chain: str, details: Optional[dict] = None):
        super().__init__(
            f"Unsupported chain: {chain}",
            ErrorCode.UNSUPPORTED_CHAIN,
            {"chain": chain, **(details or {})},
        )
        self.chain = chain


class InfraError(XarbError):
    """Infrastructure-related errors (RPC, timeouts)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INFRA_RPC_ERROR,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, details)


class MetadataResolutionError(XarbError):
    """Token metadata lookup failed. Absorbed by the resolver."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.METADATA_LOOKUP_FAILED, details)


class QuoteFetchError(XarbError):
    """
    A venue could not produce a quote.

    Carries the venue identity and the raw venue error payload when the
    venue returned one.
    """

    def __init__(
        self,
        message: str,
        venue: str,
        code: ErrorCode = ErrorCode.QUOTE_FETCH_FAILED,
        payload: Any = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, {"venue": venue, **(details or {})})
        self.venue = venue
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["venue"] = self.venue
        if self.payload is not None:
            data["payload"] = self.payload
        return data
