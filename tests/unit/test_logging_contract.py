# PATH: tests/unit/test_logging_contract.py
"""
Tests for logging contract enforcement.

No kwargs to logger; only extra={"context": {...}} allowed.
"""

import ast
import json
import logging
import unittest
from pathlib import Path
from typing import Any, Dict, List

from core.exceptions import ConfigError, ErrorCode
from core.logging import (
    ConsoleFormatter,
    ContextAdapter,
    JSONFormatter,
    clear_global_context,
    get_logger,
    log_error,
    log_opportunity,
    set_global_context,
    setup_logging,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent
SOURCE_PACKAGES = ("core", "chains", "dex", "strategy", "config")


class TestLoggingContractEnforcement(unittest.TestCase):
    """AST-based tests for logging contract."""

    ALLOWED_KWARGS = {"exc_info", "extra", "stack_info", "stacklevel"}

    def _find_logger_violations(self, source_code: str) -> List[Dict[str, Any]]:
        """Find logger calls with invalid kwargs using AST."""
        violations = []
        tree = ast.parse(source_code)

        for node in ast.walk(tree):
            if not isinstance(node, ast.Call) or not isinstance(node.func, ast.Attribute):
                continue

            method_name = node.func.attr
            if method_name not in ("debug", "info", "warning", "error", "critical", "exception"):
                continue

            obj = node.func.value
            if isinstance(obj, ast.Name):
                is_logger = "log" in obj.id.lower()
            elif isinstance(obj, ast.Attribute):
                is_logger = "log" in obj.attr.lower()
            else:
                is_logger = False

            if not is_logger:
                continue

            for kw in node.keywords:
                if kw.arg and kw.arg not in self.ALLOWED_KWARGS:
                    violations.append({
                        "line": node.lineno,
                        "method": method_name,
                        "invalid_kwarg": kw.arg,
                    })

        return violations

    def test_detector_catches_violation(self):
        violations = self._find_logger_violations('logger.info("x", cycle=1)\n')
        self.assertEqual(violations[0]["invalid_kwarg"], "cycle")

    def test_sources_have_no_invalid_kwargs(self):
        files = [
            path
            for package in SOURCE_PACKAGES
            for path in sorted((PROJECT_ROOT / package).rglob("*.py"))
        ]
        self.assertTrue(files)

        msg = ""
        for filepath in files:
            for v in self._find_logger_violations(filepath.read_text(encoding="utf-8")):
                msg += f"  {filepath.relative_to(PROJECT_ROOT)}:{v['line']}: logger.{v['method']}(..., {v['invalid_kwarg']}=...)\n"
        if msg:
            self.fail("Logging violations:\n" + msg)


def _record(msg: str = "Cycle complete", context: Dict[str, Any] | None = None, exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord("dexarb.engine", logging.INFO, __file__, 1, msg, None, exc_info)
    if context is not None:
        record.context = context
    return record


class TestJSONFormatter(unittest.TestCase):

    def tearDown(self):
        clear_global_context()

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(_record(context={"cycle": 12})))
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["logger"], "dexarb.engine")
        self.assertEqual(entry["message"], "Cycle complete")
        self.assertEqual(entry["context"], {"cycle": 12})

    def test_error_code_lifted_to_top_level(self):
        entry = json.loads(JSONFormatter().format(_record(context={"error_code": "FETCH_NETWORK", "cycle": 7})))
        self.assertEqual(entry["error_code"], "FETCH_NETWORK")
        self.assertEqual(entry["context"]["cycle"], 7)

    def test_global_context_merged(self):
        set_global_context(service="dexarb-monitor", chain_id=137)
        entry = json.loads(JSONFormatter().format(_record(context={"cycle": 1})))
        self.assertEqual(entry["context"]["service"], "dexarb-monitor")
        self.assertEqual(entry["context"]["chain_id"], 137)
        self.assertEqual(entry["context"]["cycle"], 1)

    def test_non_json_values_stringified(self):
        from decimal import Decimal
        entry = json.loads(JSONFormatter().format(_record(context={"net": Decimal("18.0")})))
        self.assertEqual(entry["context"]["net"], "18.0")

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = _record(exc_info=sys.exc_info())
        entry = json.loads(JSONFormatter().format(record))
        self.assertIn("ValueError: boom", entry["context"]["exception"])


class TestConsoleFormatter(unittest.TestCase):

    def test_context_truncated(self):
        line = ConsoleFormatter().format(_record(context={"a": 1, "b": 2, "c": 3, "d": 4, "e": 5}))
        self.assertIn("Cycle complete", line)
        self.assertIn("a=1", line)
        self.assertIn("(+1 more)", line)


class TestContextAdapter(unittest.TestCase):
    """Adapter context and call context are merged into record.context."""

    def setUp(self):
        self.captured_records = []

        class CapturingHandler(logging.Handler):
            def __init__(self, records_list):
                super().__init__()
                self.records = records_list

            def emit(self, record):
                self.records.append(record)

        self.base = logging.getLogger(f"test_capture_{id(self)}")
        self.base.setLevel(logging.DEBUG)
        self.base.handlers = [CapturingHandler(self.captured_records)]
        self.base.propagate = False

    def test_merge(self):
        adapter = ContextAdapter(self.base, {"dex": "QuickSwap"})
        adapter.info("Quote fetched", extra={"context": {"latency_ms": 50}})
        record = self.captured_records[0]
        self.assertEqual(record.context, {"dex": "QuickSwap", "latency_ms": 50})

    def test_log_opportunity(self):
        adapter = ContextAdapter(self.base, {})
        log_opportunity(adapter, buy_dex="QuickSwap", sell_dex="SushiSwap", net_profit="18.0000 USDC", cycle=3)
        record = self.captured_records[0]
        self.assertEqual(record.levelno, logging.INFO)
        self.assertEqual(record.context["buy_dex"], "QuickSwap")
        self.assertEqual(record.context["cycle"], 3)

    def test_log_error(self):
        adapter = ContextAdapter(self.base, {})
        error = ConfigError("Missing required setting: router_a", code=ErrorCode.CONFIG_MISSING, details={"key": "router_a"})
        log_error(adapter, error, path="settings.yaml")
        record = self.captured_records[0]
        self.assertEqual(record.levelno, logging.ERROR)
        self.assertEqual(record.getMessage(), "[CONFIG_MISSING] Missing required setting: router_a")
        self.assertEqual(record.context["error_code"], "CONFIG_MISSING")
        self.assertEqual(record.context["key"], "router_a")
        self.assertEqual(record.context["path"], "settings.yaml")

    def test_get_logger_returns_adapter(self):
        self.assertIsInstance(get_logger("dexarb.test", dex="A"), ContextAdapter)


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        logging.getLogger().handlers.clear()

    def test_file_handler_is_json(self):
        import tempfile
        with tempfile.TemporaryDirectory() as tmp:
            log_file = Path(tmp) / "monitor.log"
            setup_logging(level="DEBUG", json_output=False, log_file=str(log_file))

            root = logging.getLogger()
            self.assertEqual(root.level, logging.DEBUG)
            self.assertIsInstance(root.handlers[0].formatter, ConsoleFormatter)
            self.assertIsInstance(root.handlers[1].formatter, JSONFormatter)
            self.assertEqual(logging.getLogger("httpx").level, logging.WARNING)

            for handler in root.handlers:
                handler.close()


if __name__ == "__main__":
    unittest.main()
