"""
Tests for xrpl_core.logging_config — handler setup and formatters.

Covers:
  - Human (plain and coloured) and JSON formatters
  - Level name validation
  - Handler replacement on repeated setup
  - Optional JSON file output
  - Setup from a LoggingConfig section
"""

from __future__ import annotations

import json
import logging
import os
import sys
import tempfile
import unittest

from xrpl_core.config import LoggingConfig
from xrpl_core.logging_config import (
    LIBRARY_LOGGER,
    _HumanFormatter,
    _JSONFormatter,
    setup_logging,
    setup_logging_from_config,
)


def _record(msg="hello %s", args=("world",), level=logging.INFO):
    return logging.LogRecord("xrpl_core.seed", level, __file__, 1, msg, args, None)


class TestFormatters(unittest.TestCase):

    def test_json_formatter(self):
        line = _JSONFormatter().format(_record())
        obj = json.loads(line)
        self.assertEqual(list(obj), ["level", "logger", "message", "time"])
        self.assertEqual(obj["level"], "info")
        self.assertEqual(obj["logger"], "xrpl_core.seed")
        self.assertEqual(obj["message"], "hello world")
        self.assertTrue(obj["time"].endswith("+00:00"))
        self.assertRegex(obj["time"], r"T\d\d:\d\d:\d\d\.\d{3}\+")

    def test_json_formatter_error(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "xrpl_core", logging.ERROR, __file__, 1, "failed", (), sys.exc_info(),
            )
        obj = json.loads(_JSONFormatter().format(record))
        self.assertEqual(obj["level"], "error")
        self.assertIn("RuntimeError: boom", obj["error"])

    def test_human_formatter_plain(self):
        line = _HumanFormatter().format(_record(level=logging.WARNING))
        self.assertRegex(line, r"^\d\d:\d\d:\d\d WARNING xrpl_core\.seed \| hello world$")
        self.assertNotIn("\033[", line)

    def test_human_formatter_colour(self):
        line = _HumanFormatter(colour=True).format(_record())
        self.assertIn("\033[34mINFO   \033[0m", line)
        self.assertTrue(line.endswith("xrpl_core.seed | hello world"))


class TestSetupLogging(unittest.TestCase):

    def tearDown(self):
        logger = logging.getLogger(LIBRARY_LOGGER)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)

    def test_level_and_single_console_handler(self):
        setup_logging(level="DEBUG")
        logger = setup_logging(level="warning")
        self.assertEqual(logger.name, LIBRARY_LOGGER)
        self.assertEqual(logger.level, logging.WARNING)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0].formatter, _HumanFormatter)

    def test_json_console(self):
        logger = setup_logging(fmt="json")
        self.assertIsInstance(logger.handlers[0].formatter, _JSONFormatter)

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            setup_logging(fmt="xml")

    def test_unknown_level(self):
        with self.assertRaises(ValueError):
            setup_logging(level="LOUD")
        self.assertEqual(logging.getLogger(LIBRARY_LOGGER).handlers, [])

    def test_numeric_level(self):
        self.assertEqual(setup_logging(level=logging.DEBUG).level, logging.DEBUG)

    def test_file_handler_writes_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "logs", "core.log")
            logger = setup_logging(level="INFO", log_file=path)
            self.assertEqual(len(logger.handlers), 2)
            logging.getLogger("xrpl_core.keys").info("derived %s key", "ed25519")
            for handler in logger.handlers:
                handler.flush()
            with open(path, encoding="utf-8") as f:
                obj = json.loads(f.readline())
            self.assertEqual(obj["message"], "derived ed25519 key")
            self.assertEqual(obj["logger"], "xrpl_core.keys")
            self.tearDown()

    def test_from_config(self):
        logger = setup_logging_from_config(LoggingConfig(level="ERROR", format="json"))
        self.assertEqual(logger.level, logging.ERROR)
        self.assertIsInstance(logger.handlers[0].formatter, _JSONFormatter)


if __name__ == "__main__":
    unittest.main()
