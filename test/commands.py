# python
"""
Commands module behavioral tests (declaration, composition, validation).

Scope
- Validate metadata defaults (name, descr, exec_name) and sanitization.
- Validate composition: children, parent attachment, duplicate exec names.
- Validate the root command restrictions.
- Validate validate_commands() and validate_root_command().
- Validate Command.__invoke__ through invoke().

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (command, rootcommand, invoke, Argument, Flag).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from vertin import (
    Argument,
    Command,
    Flag,
    MissingRequiredError,
    Number,
    command,
    invoke,
    rootcommand,
    validate_commands,
    validate_root_command,
)


def noop(context):
    """do nothing"""


class TestCommand(TestCase):
    """Behavioral tests for Command construction."""

    def testDefaultsFromHandler(self):
        @command
        def build(context):
            """build the project"""

        self.assertEqual(build.name, "build")
        self.assertEqual(build.exec_name, "build")
        self.assertEqual(build.descr, "build the project")
        self.assertIsNone(build.version)
        self.assertEqual(build.children, ())

    def testExplicitMetadata(self):
        listing = command(noop, name="listing", descr="list things", version="2.0", exec_name="ls")
        self.assertEqual(listing.name, "listing")
        self.assertEqual(listing.exec_name, "ls")
        self.assertEqual(listing.version, "2.0")

    def testNameTrimmedAndNonEmpty(self):
        self.assertEqual(command(noop, name="  build ").name, "build")
        with self.assertRaises(ValueError):
            command(noop, name="  ")

    def testDashedExecNameRejected(self):
        with self.assertRaises(ValueError):
            command(noop, exec_name="--build")

    def testHandlerMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("build")

    def testParametersBecomeOptions(self):
        serve = command(noop, arguments={"files": Argument(count="all")}, flags={"port": Flag(Number, alias="p")})
        self.assertEqual(list(serve.arguments), ["files"])
        self.assertEqual(list(serve.flags), ["port"])
        self.assertIs(serve.options.flags["port"], serve.flags["port"])

    def testInvalidParametersFailEarly(self):
        with self.assertRaises(ValueError):
            command(noop, arguments={"files": Argument(count="all"), "target": Argument()})

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            command(noop).name = "other"

    def testRepr(self):
        self.assertTrue(repr(command(noop)).startswith("command("))


class TestComposition(TestCase):
    """Behavioral tests for subcommands."""

    def testChildrenKeepOrder(self):
        first = command(noop, name="first")
        second = command(noop, name="second")
        parent = command(noop, name="parent", children=[first, second])
        self.assertEqual(parent.children, (first, second))

    def testAttachThroughDecorator(self):
        build = command(noop, name="build")

        @build.command(exec_name="w")
        def watch(context):
            """watch the sources"""

        self.assertEqual(build.children, (watch,))
        self.assertEqual(watch.exec_name, "w")

    def testAttachDirect(self):
        build = command(noop, name="build")
        watch = build.command(noop, "watch")
        self.assertEqual(build.children, (watch,))

    def testDuplicateExecNameRejected(self):
        build = command(noop, name="build")
        build.command(noop, "watch")
        with self.assertRaises(ValueError):
            build.command(noop, "other", exec_name="watch")
        with self.assertRaises(ValueError):
            command(noop, children=[command(noop, name="a"), command(noop, name="a")])

    def testChildrenMustBeCommands(self):
        with self.assertRaises(TypeError):
            command(noop, children=[noop])

    def testRuntimeSwitchesInherited(self):
        build = command(noop, name="build", shell=True, colorful=True)
        watch = build.command(noop, "watch")
        self.assertTrue(watch.shell)
        self.assertTrue(watch.colorful)
        self.assertFalse(watch.fancy)


class TestRootCommand(TestCase):
    """Behavioral tests for rootcommand()."""

    def testNames(self):
        root = rootcommand(noop)
        self.assertEqual(root.name, "__root__")
        self.assertEqual(root.exec_name, "__root__")
        self.assertEqual(root.descr, "do nothing")

    def testDecoratorForm(self):
        @rootcommand(flags={"verbose": Flag(alias="v")})
        def main(context):
            """the tool"""

        self.assertEqual(list(main.flags), ["verbose"])

    def testUndocumentedHandlerGetsPlaceholder(self):
        root = rootcommand(lambda context: None)
        self.assertEqual(root.descr, "__root_description__")
        validate_root_command(root)

    def testExplicitDescriptionWins(self):
        self.assertEqual(rootcommand(noop, descr="the tool").descr, "the tool")

    def testCannotHaveChildren(self):
        root = rootcommand(noop)
        with self.assertRaises(ValueError):
            root.command(noop, "child")

    def testCannotBeAChild(self):
        with self.assertRaises(ValueError):
            command(noop, children=[rootcommand(noop)])


class TestValidators(TestCase):
    """Behavioral tests for validate_commands() and validate_root_command()."""

    def testValidForest(self):
        build = command(noop, name="build")
        build.command(noop, "watch")
        validate_commands([build, command(noop, name="clean")])

    def testDuplicateSiblingsRejected(self):
        with self.assertRaises(ValueError):
            validate_commands([command(noop, name="a"), command(noop, name="a")])

    def testMissingDescriptionRejected(self):
        with self.assertRaises(ValueError):
            validate_commands([command(lambda context: None, name="bare")])

    def testNestedProblemsFound(self):
        parent = command(noop, name="parent")
        parent.command(lambda context: None, "bare")
        with self.assertRaises(ValueError):
            validate_commands([parent])

    def testNonCommandRejected(self):
        with self.assertRaises(TypeError):
            validate_commands([noop])

    def testRootNeedsDescription(self):
        with self.assertRaises(ValueError):
            validate_root_command(Command(lambda context: None, name="__root__", exec_name="__root__"))

    def testRootWithChildrenRejected(self):
        root = Command(noop, name="__root__", exec_name="__root__", children=[command(noop, name="x")])
        with self.assertRaises(ValueError):
            validate_root_command(root)

    def testRootAccepted(self):
        validate_root_command(rootcommand(noop))


class TestInvoke(TestCase):
    """Behavioral tests for Command.__invoke__."""

    def setUp(self):
        self.build = command(lambda context: ("build", context), name="build", descr="build")
        self.build.command(
            lambda context: ("watch", context),
            "watch",
            "watch",
            arguments={"target": Argument(required=True)},
        )

    def testSelfIsFallback(self):
        name, context = invoke(self.build, ["x"])
        self.assertEqual(name, "build")
        self.assertEqual(context.path, ())

    def testChildSelected(self):
        name, context = invoke(self.build, "watch out.txt")
        self.assertEqual(name, "watch")
        self.assertEqual(context.arguments, {"target": "out.txt"})
        self.assertEqual(context.path, ("watch",))

    def testFaultsRaisedOutsideShell(self):
        with self.assertRaises(MissingRequiredError):
            invoke(self.build, ["watch"])


if __name__ == "__main__":
    unittest.main()
