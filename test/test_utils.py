"""
Utilities behavioral tests (Unset sentinel, coalesce, rename, ordinal).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argdecode.utils import Unset, UnsetType, coalesce, ordinal, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self):
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testSealed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self):
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual((function.__name__, function.__qualname__), ("named", "named"))

    def testDecoratorForm(self):
        @rename("field")
        def run():
            pass

        self.assertEqual(run.__name__, "field")

    def testArity(self):
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "a", "b")

    def testRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(5, "x")
        with self.assertRaises(TypeError):
            rename(lambda: None, 5)
        with self.assertRaises(TypeError):
            rename(5)


class TestOrdinal(TestCase):
    """Behavioral tests for ordinal()."""

    def testWords(self):
        self.assertEqual([ordinal(number) for number in (1, 2, 3, 10)], ["first", "second", "third", "tenth"])

    def testSuffixes(self):
        cases = {11: "11th", 12: "12th", 13: "13th", 21: "21st", 22: "22nd", 23: "23rd", 103: "103rd", 112: "112th"}
        for number, label in cases.items():
            with self.subTest(number=number):
                self.assertEqual(ordinal(number), label)

    def testRejectsNonIntegers(self):
        for value in (1.0, "1", True):
            with self.subTest(value=value):
                with self.assertRaises(TypeError):
                    ordinal(value)


if __name__ == "__main__":
    unittest.main()
