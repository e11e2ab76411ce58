"""
Unit tests for logging utilities.
"""

import logging
import os
import tempfile
import unittest

from log_utils import setup_logging


class TestLogUtils(unittest.TestCase):
    """Test logging utilities."""

    def tearDown(self):
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def test_setup_logging_default(self):
        """Test default logging setup."""
        logger = setup_logging()
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual(logging.getLogger().level, logging.INFO)

    def test_setup_logging_verbose(self):
        """Test verbose logging setup."""
        setup_logging(verbose=True)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        self.assertEqual(logging.getLogger("botocore").level, logging.WARNING)

    def test_setup_logging_with_file(self):
        """Test a file handler is added when a log file is given."""
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "run.log")
            setup_logging(log_file=log_file)
            logging.getLogger("test").info("hello")
            for handler in logging.getLogger().handlers:
                handler.flush()

            handler_types = [type(h) for h in logging.getLogger().handlers]
            self.assertIn(logging.FileHandler, handler_types)
            with open(log_file) as f:
                self.assertIn("hello", f.read())
            self.tearDown()


if __name__ == "__main__":
    unittest.main()
