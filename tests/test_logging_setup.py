"""Tests for the console logging setup."""

import logging
import unittest

import colorlog

from stream_audit.logging_setup import _setup_logging, log


class TestSetupLogging(unittest.TestCase):
    def tearDown(self):
        log.handlers.clear()
        log.setLevel(logging.NOTSET)

    def test_single_colored_handler(self):
        _setup_logging()
        _setup_logging()
        self.assertEqual(len(log.handlers), 1)
        self.assertIsInstance(log.handlers[0].formatter, colorlog.ColoredFormatter)
        self.assertEqual(log.level, logging.INFO)

    def test_debug_format_names_source_module(self):
        _setup_logging(debug=True)
        self.assertEqual(log.level, logging.DEBUG)
        record = logging.LogRecord(
            "stream-audit", logging.DEBUG, "/x/retry.py", 42, "waiting", None, None,
        )
        text = log.handlers[0].formatter.format(record)
        self.assertIn("retry:42", text)
        self.assertIn("waiting", text)

    def test_default_format_omits_source(self):
        _setup_logging()
        record = logging.LogRecord(
            "stream-audit", logging.INFO, "/x/retry.py", 42, "waiting", None, None,
        )
        self.assertNotIn("retry:42", log.handlers[0].formatter.format(record))


if __name__ == "__main__":
    unittest.main()
