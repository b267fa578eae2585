# python
"""
Faults module behavioral tests (codes, options, rendering, trigger).

Scope
- Validate class-level defaults (code, title) and per-instance overrides.
- Validate __replace__ keeps the type, merges options and keeps the cause.
- Validate trigger(): raise outside shell mode, render and exit in shell mode.
- Validate rich rendering in plain and fancy (panel) layouts.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured through a color-less rich Console.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from vertin import faults
from vertin.faults import (
    CommandException,
    ConfigurationError,
    FaultCode,
    InvalidValueError,
    MissingRequiredError,
    ParseError,
    UnknownFlagError,
    getdoc,
    trigger,
)


def render(fault):
    console = Console(color_system=None, force_terminal=False, width=200)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "11111")

    def testCodesAreUnique(self):
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))


class TestCommandException(TestCase):
    """Behavioral tests for CommandException and its subclasses."""

    def testStrIsMessage(self):
        self.assertEqual(str(UnknownFlagError("unknown flag '-x'")), "unknown flag '-x'")

    def testStrWithoutMessage(self):
        self.assertEqual(str(CommandException()), "")

    def testClassDefaults(self):
        fault = MissingRequiredError("missing")
        self.assertIs(fault.code, FaultCode.MISSING_REQUIRED)
        self.assertEqual(fault.title, "missing required parameter")
        self.assertIsNone(fault.hint)

    def testOptionOverrides(self):
        fault = ConfigurationError("x", code=FaultCode.UNKNOWN_COMMAND, title="other", hint="do it")
        self.assertIs(fault.code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(fault.title, "other")
        self.assertEqual(fault.hint, "do it")

    def testOptionsReadOnly(self):
        fault = ParseError("x", token="-x")
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"  # type: ignore[index]

    def testParseErrorsShareBase(self):
        self.assertTrue(issubclass(UnknownFlagError, ParseError))
        self.assertTrue(issubclass(InvalidValueError, ParseError))
        self.assertTrue(issubclass(ParseError, CommandException))

    def testReplaceMergesOptionsAndKeepsCause(self):
        cause = ValueError("bad")
        fault = InvalidValueError("invalid", token="x")
        fault.__cause__ = cause
        replaced = fault.__replace__(shell=False, prog="tool")
        self.assertIsInstance(replaced, InvalidValueError)
        self.assertEqual(replaced.options["token"], "x")
        self.assertEqual(replaced.options["prog"], "tool")
        self.assertIs(replaced.__cause__, cause)

    def testRenderPlain(self):
        output = render(UnknownFlagError("unknown flag '-x'", hint="check the spelling"))
        self.assertIn("11111", output)
        self.assertIn("Unknown Flag", output)
        self.assertIn("unknown flag '-x'", output)
        self.assertIn("check the spelling", output)

    def testRenderFancy(self):
        output = render(UnknownFlagError("unknown flag '-x'", fancy=True))
        self.assertIn("unknown flag '-x'", output)
        self.assertIn("Unknown Flag", output)


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownFlagError) as context:
            trigger(UnknownFlagError("unknown flag '-x'"), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testShellRendersAndExits(self):
        stream = io.StringIO()
        console = Console(file=stream, color_system=None, force_terminal=False, width=200)
        with mock.patch.object(faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(UnknownFlagError("unknown flag '-x'"), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("unknown flag '-x'", stream.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestGetdoc(TestCase):
    """Behavioral tests for getdoc()."""

    def testMissingDocIsNone(self):
        self.assertIsNone(getdoc(FaultCode.INVALID_VALUE))

    def testRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11132)


if __name__ == "__main__":
    unittest.main()
