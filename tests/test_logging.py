"""Test logging module"""

import logging
import unittest

from lcs.utils.logging import (
    ConsoleLogger,
    LoglistLogger,
    get_logger,
)


class TestLoglistLogger(unittest.TestCase):

    def test_records_all_levels(self):
        logger = LoglistLogger()
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        logger.critical("c")
        self.assertEqual(
            logger.get_logs(),
            [
                "DEBUG - d",
                "INFO - i",
                "WARNING - w",
                "ERROR - e",
                "CRITICAL - c",
            ],
        )

    def test_filter(self):
        logger = LoglistLogger()
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        logger.error("e")
        self.assertEqual(logger.count_logs(1), 3)
        self.assertEqual(logger.count_logs(2), 2)
        self.assertEqual(logger.get_logs(3), ["ERROR - e"])

    def test_level(self):
        logger = LoglistLogger()
        logger.set_level(logging.WARNING)
        self.assertEqual(logger.get_level(), logging.WARNING)
        logger.debug("d")
        logger.info("i")
        logger.warning("w")
        self.assertEqual(logger.get_logs(), ["WARNING - w"])

    def test_clear(self):
        logger = LoglistLogger()
        logger.error("e")
        logger.clear_logs()
        self.assertEqual(logger.count_logs(), 0)


class TestConsoleLogger(unittest.TestCase):

    def test_level(self):
        logger = get_logger("lcs.tests.console")
        self.assertIsInstance(logger, ConsoleLogger)
        self.assertEqual(logger.get_level(), logging.INFO)
        logger.set_level(logging.DEBUG)
        self.assertEqual(logger.get_level(), logging.DEBUG)

    def test_level_already_set_is_kept(self):
        logging.getLogger("lcs.tests.preset").setLevel(logging.DEBUG)
        logger = get_logger("lcs.tests.preset")
        self.assertEqual(logger.get_level(), logging.DEBUG)

    def test_default_logger(self):
        from lcs.utils import logger

        self.assertIsInstance(logger, ConsoleLogger)

    def test_messages(self):
        logger = ConsoleLogger("lcs.tests.messages")
        with self.assertLogs("lcs.tests.messages", level="DEBUG") as cm:
            logger.set_level(logging.DEBUG)
            logger.debug("debug message")
            logger.warning("warning message")
        self.assertEqual(
            cm.output,
            [
                "DEBUG:lcs.tests.messages:debug message",
                "WARNING:lcs.tests.messages:warning message",
            ],
        )


if __name__ == "__main__":
    unittest.main()
