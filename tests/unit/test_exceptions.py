# PATH: tests/unit/test_exceptions.py
"""
Unit tests for typed exceptions and error codes.
"""

import unittest

from core.constants import ErrorCode
from core.exceptions import (
    ConfigError,
    InfraError,
    MetadataResolutionError,
    QuoteFetchError,
    UnsupportedChainError,
    ValidationError,
    XarbError,
)


class TestXarbError(unittest.TestCase):
    """Base error contract."""

    def test_str_includes_code(self):
        error = XarbError("something broke", ErrorCode.UNKNOWN)
        self.assertEqual(str(error), "[UNKNOWN] something broke")

    def test_to_dict(self):
        error = XarbError("bad", ErrorCode.INFRA_TIMEOUT, {"chain": "base"})
        self.assertEqual(error.to_dict(), {
            "error_code": "INFRA_TIMEOUT",
            "message": "bad",
            "details": {"chain": "base"},
        })

    def test_details_default_to_empty(self):
        self.assertEqual(XarbError("x").details, {})

    def test_subclasses_are_xarb_errors(self):
        for error in (
            ValidationError("v"),
            ConfigError("c"),
            UnsupportedChainError("avalanche"),
            InfraError("i"),
            MetadataResolutionError("m"),
            QuoteFetchError("q", venue="0x"),
        ):
            with self.subTest(error=type(error).__name__):
                self.assertIsInstance(error, XarbError)


class TestErrorCodes(unittest.TestCase):
    """Each error type carries its code."""

    def test_validation_default_code(self):
        self.assertEqual(ValidationError("x").code, ErrorCode.VALIDATION_INVALID_FIELD)

    def test_validation_code_override(self):
        error = ValidationError("x", code=ErrorCode.VALIDATION_MISSING_FIELD)
        self.assertEqual(error.code, ErrorCode.VALIDATION_MISSING_FIELD)

    def test_config_code(self):
        self.assertEqual(ConfigError("x").code, ErrorCode.CONFIG_INVALID)

    def test_unsupported_chain(self):
        error = UnsupportedChainError("avalanche", {"reason": "no quote venue"})
        self.assertEqual(error.code, ErrorCode.UNSUPPORTED_CHAIN)
        self.assertEqual(error.chain, "avalanche")
        self.assertEqual(error.details, {"chain": "avalanche", "reason": "no quote venue"})
        self.assertIn("avalanche", error.message)

    def test_metadata_code(self):
        self.assertEqual(MetadataResolutionError("x").code, ErrorCode.METADATA_LOOKUP_FAILED)

    def test_infra_default_code(self):
        self.assertEqual(InfraError("x").code, ErrorCode.INFRA_RPC_ERROR)


class TestQuoteFetchError(unittest.TestCase):
    """Venue errors keep the venue payload."""

    def test_payload_in_dict(self):
        error = QuoteFetchError(
            "0x quote failed",
            venue="0x",
            code=ErrorCode.QUOTE_HTTP_ERROR,
            payload={"reason": "INSUFFICIENT_ASSET_LIQUIDITY"},
            details={"chain": "ethereum"},
        )
        data = error.to_dict()

        self.assertEqual(data["venue"], "0x")
        self.assertEqual(data["payload"], {"reason": "INSUFFICIENT_ASSET_LIQUIDITY"})
        self.assertEqual(data["details"], {"venue": "0x", "chain": "ethereum"})
        self.assertEqual(data["error_code"], "QUOTE_HTTP_ERROR")

    def test_no_payload_omitted(self):
        data = QuoteFetchError("timeout", venue="jupiter").to_dict()
        self.assertNotIn("payload", data)
        self.assertEqual(data["error_code"], "QUOTE_FETCH_FAILED")


if __name__ == "__main__":
    unittest.main()
