# python
"""
Tests for the internal utilities.

This module verifies:
- Singleton, falsy and final semantics of the Unset sentinel.
- coalesce() preserving legitimate falsey values.
- rename() in both forms, and mirror() returning read-only views.
- ordinal() word and suffix forms used by parse faults.
"""
import copy
import unittest
from types import MappingProxyType
from unittest import TestCase

from flagset.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the Unset sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce/rename/mirror/ordinal.
    """

    def testCoalescePreservesFalsey(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIs(coalesce(False, True), False)
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, "fallback"))

    def testRenameForms(self) -> None:
        def work():
            pass

        self.assertIs(rename(work, "job"), work)
        self.assertEqual(work.__name__, "job")

        @rename("task")
        def other():
            pass

        self.assertEqual(other.__qualname__, "task")

        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsReadOnlyViews(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            count = mirror("count")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._count = 3

        holder = Holder()
        self.assertEqual(holder.items, (1, 2))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.count, 3)
        with self.assertRaises(AttributeError):
            holder.count = 4

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
