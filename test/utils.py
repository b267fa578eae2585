# python
"""
Utilities module behavioral tests (sentinel, coalesce, rename, mirror, ordinal).

Scope
- Validate the Unset sentinel: singleton, falsy, printable, copy-stable, sealed.
- Validate coalesce() keeps legitimate falsy values.
- Validate rename() in both call forms and mirror() read-only views.
- Validate ordinal() wording used by fault messages.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from vertin.utils import Unset, UnsetType, coalesce, mirror, ordinal, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testNotEqualToNone(self):
        self.assertNotEqual(Unset, None)

    def testCopyDeepcopyPickleKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testSubclassingRejected(self):
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testUnsetBecomesDefault(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testUnsetBecomesNoneByDefault(self):
        self.assertIsNone(coalesce(Unset))

    def testFalsyValuesPreserved(self):
        for value in (None, 0, "", [], False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testDirectForm(self):
        def original():
            pass

        renamed = rename(original, "renamed")
        self.assertIs(renamed, original)
        self.assertEqual(renamed.__name__, "renamed")
        self.assertEqual(renamed.__qualname__, "renamed")

    def testDecoratorForm(self):
        @rename("decorated")
        def original():
            pass

        self.assertEqual(original.__name__, "decorated")

    def testBuiltinRejected(self):
        with self.assertRaises(TypeError):
            rename(len, "size")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):
    """Behavioral tests for mirror() read-only views."""

    class Holder:
        items = mirror("items")
        table = mirror("table")
        name = mirror("name")

        def __init__(self):
            self._items = [1, 2]
            self._table = {"a": 1}
            self._name = "holder"

    def testSequenceBecomesTuple(self):
        self.assertEqual(self.Holder().items, (1, 2))

    def testMappingBecomesProxy(self):
        table = self.Holder().table
        self.assertIsInstance(table, MappingProxyType)
        with self.assertRaises(TypeError):
            table["b"] = 2  # type: ignore[index]

    def testStringUnchanged(self):
        self.assertEqual(self.Holder().name, "holder")

    def testNoSetter(self):
        with self.assertRaises(AttributeError):
            self.Holder().name = "other"


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal()."""

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(24), "24th")

    def testTeens(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(112), "112th")

    def testNonPositiveRejected(self):
        with self.assertRaises(ValueError):
            ordinal(0)


if __name__ == "__main__":
    unittest.main()
