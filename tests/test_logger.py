import logging
import os
import tempfile
import unittest

import support  # noqa: F401

from utils import logger as log_module
from utils.logger import configure_logging, get_logger


class ConfigureLoggingTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.log_path = os.path.join(self.temp_dir.name, "atelier.log")

    def tearDown(self):
        configure_logging()
        self.temp_dir.cleanup()

    def test_settings_reach_existing_loggers(self):
        logger = get_logger("tests.logging")
        configure_logging(debug=True, log_file=self.log_path)
        self.assertEqual(logger.level, logging.DEBUG)

        logger.debug("written to the log file")
        with open(self.log_path) as f:
            self.assertIn("written to the log file", f.read())

    def test_defaults_restore_info_level_and_close_file(self):
        configure_logging(debug=True, log_file=self.log_path)
        console = log_module._log_console
        configure_logging()

        logger = get_logger("tests.logging.later")
        self.assertEqual(logger.level, logging.INFO)
        self.assertTrue(console.file.closed)
        self.assertIsNone(log_module._log_console)


if __name__ == "__main__":
    unittest.main()
