# PATH: tests/unit/test_error_codes.py
"""
Unit tests for core/exceptions.py - typed errors and error codes.
"""

import unittest

from core.exceptions import (
    ConfigError,
    ContractRevertedError,
    DecodeError,
    DexArbError,
    ErrorCode,
    FetchError,
    NetworkError,
)


class TestErrorCodeValues(unittest.TestCase):
    """Error codes are stable strings (they end up in logs and reports)."""

    def test_fetch_codes(self):
        self.assertEqual(ErrorCode.FETCH_NETWORK.value, "FETCH_NETWORK")
        self.assertEqual(ErrorCode.FETCH_CONTRACT_REVERTED.value, "FETCH_CONTRACT_REVERTED")
        self.assertEqual(ErrorCode.FETCH_DECODE_ERROR.value, "FETCH_DECODE_ERROR")

    def test_config_codes(self):
        self.assertEqual(ErrorCode.CONFIG_MISSING.value, "CONFIG_MISSING")
        self.assertEqual(ErrorCode.CONFIG_INVALID.value, "CONFIG_INVALID")


class TestFetchErrorTaxonomy(unittest.TestCase):
    """Every fetch failure kind is a FetchError with its own code."""

    def test_network_error(self):
        e = NetworkError("connection refused")
        self.assertIsInstance(e, FetchError)
        self.assertEqual(e.code, ErrorCode.FETCH_NETWORK)

    def test_contract_reverted_error(self):
        e = ContractRevertedError("execution reverted")
        self.assertIsInstance(e, FetchError)
        self.assertEqual(e.code, ErrorCode.FETCH_CONTRACT_REVERTED)

    def test_decode_error(self):
        e = DecodeError("bad data")
        self.assertIsInstance(e, FetchError)
        self.assertEqual(e.code, ErrorCode.FETCH_DECODE_ERROR)

    def test_config_error_is_not_fetch_error(self):
        e = ConfigError("missing router_a", code=ErrorCode.CONFIG_MISSING)
        self.assertIsInstance(e, DexArbError)
        self.assertNotIsInstance(e, FetchError)
        self.assertEqual(e.code, ErrorCode.CONFIG_MISSING)

    def test_config_error_defaults_to_invalid(self):
        self.assertEqual(ConfigError("bad").code, ErrorCode.CONFIG_INVALID)


class TestErrorContract(unittest.TestCase):
    """String form and dict form."""

    def test_str_includes_code(self):
        e = NetworkError("timeout", details={"dex": "QuickSwap"})
        self.assertEqual(str(e), "[FETCH_NETWORK] timeout")

    def test_to_dict(self):
        e = DecodeError("short result", details={"words": 1})
        self.assertEqual(e.to_dict(), {
            "error_code": "FETCH_DECODE_ERROR",
            "message": "short result",
            "details": {"words": 1},
        })

    def test_details_default_to_empty_dict(self):
        e = NetworkError("x")
        self.assertEqual(e.details, {})
        e.details["dex"] = "A"
        self.assertEqual(NetworkError("y").details, {})


if __name__ == "__main__":
    unittest.main()
