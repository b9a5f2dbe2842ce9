# PATH: tests/unit/test_imports_contract.py
"""
Import contract smoke tests.

PURPOSE: Catch ImportError regressions EARLY.
RUN FIRST: python -m pytest tests/unit/test_imports_contract.py -v
"""

import unittest


class TestPackageImports(unittest.TestCase):

    def test_core(self):
        from core import CycleStatus, ErrorCode, FetchError, ProtocolVariant, get_logger
        self.assertEqual(CycleStatus.FAILED.value, "FAILED")
        self.assertTrue(issubclass(FetchError, Exception))
        self.assertEqual(ErrorCode.FETCH_NETWORK.value, "FETCH_NETWORK")
        self.assertEqual(len(ProtocolVariant), 2)
        self.assertTrue(callable(get_logger))

    def test_chains(self):
        from chains import RPCProvider
        self.assertTrue(hasattr(RPCProvider, "eth_call"))

    def test_dex(self):
        from dex import CALLING_CONVENTIONS, QuoteSourceAdapter
        self.assertTrue(hasattr(QuoteSourceAdapter, "get_quote"))
        self.assertEqual(len(CALLING_CONVENTIONS), 2)

    def test_strategy(self):
        from strategy import ArbitrageEngine, Scheduler, compute_profit, evaluate, normalize
        for obj in (ArbitrageEngine, Scheduler, compute_profit, evaluate, normalize):
            self.assertTrue(callable(obj))

    def test_config(self):
        from config import Settings, load_settings
        self.assertTrue(callable(load_settings))
        self.assertTrue(hasattr(Settings, "token_pair"))

    def test_cli(self):
        from strategy.jobs.run_monitor import main
        self.assertEqual(main.name, "main")


if __name__ == "__main__":
    unittest.main()
