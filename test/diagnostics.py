# python
"""
Diagnostics module behavioral tests (opt-in debug logging).

Scope
- Validate enable_debug(): level handling, single rich handler, bad levels.
- Validate that the parser and the matcher emit debug records.

Conventions
- Test method names follow CamelCase per project convention.
- Handlers added to the "vertin" logger are removed after each test.
"""

from __future__ import annotations

import logging
import unittest
from unittest import TestCase

from rich.logging import RichHandler

from vertin import Argument, Flag, ParserOptions, command, create_parser, enable_debug, match_commands


class TestEnableDebug(TestCase):
    """Behavioral tests for enable_debug()."""

    def setUp(self):
        self.logger = logging.getLogger("vertin")
        self.level = self.logger.level
        self.handlers = list(self.logger.handlers)

    def tearDown(self):
        self.logger.handlers[:] = self.handlers
        self.logger.setLevel(self.level)

    def testAttachesRichHandler(self):
        logger = enable_debug()
        self.assertIs(logger, self.logger)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertTrue(any(isinstance(handler, RichHandler) for handler in logger.handlers))

    def testIdempotent(self):
        enable_debug()
        enable_debug("info")
        handlers = [handler for handler in self.logger.handlers if isinstance(handler, RichHandler)]
        self.assertEqual(len(handlers), 1)
        self.assertEqual(self.logger.level, logging.INFO)

    def testNumericLevel(self):
        self.assertEqual(enable_debug(logging.WARNING).level, logging.WARNING)

    def testUnknownLevelRejected(self):
        with self.assertRaises(ValueError):
            enable_debug("loud")

    def testWrongTypeRejected(self):
        with self.assertRaises(TypeError):
            enable_debug(True)


class TestDebugRecords(TestCase):
    """Behavioral tests for the records emitted while matching and parsing."""

    def testParserRecords(self):
        parser = create_parser(ParserOptions(arguments={"source": Argument()}, flags={"verbose": Flag()}))
        with self.assertLogs("vertin.parser", logging.DEBUG) as logs:
            parser(["a", "--verbose", "--unknown"])
        self.assertTrue(any("unknown flag '--unknown'" in line for line in logs.output))

    def testMatcherRecords(self):
        build = command(lambda context: None, name="build")
        with self.assertLogs("vertin.matcher", logging.DEBUG) as logs:
            match_commands(["build"], [build], None, 0)
        self.assertTrue(any("matched 'build'" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
