# python
"""
Descriptor and name-validation behavioral tests.

Scope
- Validate the short/long option name grammar (including the "" sentinel).
- Validate ValueKind tagging and descriptor construction.
- Validate display forms, representation, and copying semantics.
- Validate the select/group validator factories.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from flagset import (
    Descriptor,
    ValueKind,
    validate_short,
    validate_long,
    choices,
    selection,
    MalformedNameError,
    FaultCode,
)


class TestNameValidation(TestCase):
    """Behavioral tests for the option name grammar."""

    def testShortAcceptsLetterOrDigit(self):
        for name in ("-d", "-Z", "-0"):
            self.assertEqual(validate_short(name), name)

    def testShortEmptyIsSentinel(self):
        self.assertEqual(validate_short(""), "")

    def testShortRejectsMalformed(self):
        for name in ("d", "--d", "-dd", "-_", "-é", "-", "-d\n"):
            with self.subTest(name=name), self.assertRaises(MalformedNameError) as caught:
                validate_short(name)
            self.assertIs(caught.exception.code, FaultCode.MALFORMED_NAME)

    def testShortErrorNamesOffenderAndShape(self):
        with self.assertRaises(MalformedNameError) as caught:
            validate_short("-ab")
        self.assertIn("-ab", str(caught.exception))
        self.assertIn("-<letter|digit>", str(caught.exception))

    def testLongAcceptsWords(self):
        for name in ("--debug", "--log-file", "--a.b", "--x_1", "--ab", "--9z"):
            self.assertEqual(validate_long(name), name)

    def testLongEmptyIsSentinel(self):
        self.assertEqual(validate_long(""), "")

    def testLongRejectsMalformed(self):
        for name in ("--a", "-debug", "--debug-", "--_debug", "--de bug", "--de=bug", "---debug", "--"):
            with self.subTest(name=name), self.assertRaises(MalformedNameError):
                validate_long(name)

    def testNonStringNamesRejected(self):
        with self.assertRaises(TypeError):
            validate_short(1)
        with self.assertRaises(TypeError):
            validate_long(None)


class TestValueKind(TestCase):
    """Behavioral tests for the tagged value kind."""

    def testBoolBeforeInt(self):
        self.assertIs(ValueKind.of(True), ValueKind.BOOL)
        self.assertIs(ValueKind.of(0), ValueKind.INT)
        self.assertIs(ValueKind.of(""), ValueKind.STRING)

    def testUnsupportedIsNone(self):
        self.assertIsNone(ValueKind.of(1.5))
        self.assertIsNone(ValueKind.of(None))


class TestDescriptor(TestCase):
    """Behavioral tests for standalone descriptors."""

    def testConstructionDefaults(self):
        d = Descriptor("-d", "--debug", False, "Run in debug mode")
        self.assertEqual(d.short, "-d")
        self.assertEqual(d.long, "--debug")
        self.assertIs(d.value, False)
        self.assertIs(d.kind, ValueKind.BOOL)
        self.assertFalse(d.specified)
        self.assertIsNone(d.children)
        self.assertIsNone(d.index)
        self.assertIsNone(d.owner)

    def testConstructionValidatesNames(self):
        with self.assertRaises(MalformedNameError):
            Descriptor("-dd", "--debug", False, "Run in debug mode")

    def testDisplayForms(self):
        self.assertEqual(str(Descriptor("-l", "--limit", 2, "Limit")), "-l (--limit)")
        self.assertEqual(str(Descriptor("", "--input", "", "Input")), "--input")
        self.assertEqual(str(Descriptor("-o", "", "", "Output")), "-o")

    def testPrimaryName(self):
        self.assertEqual(Descriptor("-l", "--limit", 2, "Limit").name, "-l")
        self.assertEqual(Descriptor("", "--input", "", "Input").name, "--input")

    def testPropertiesAreReadOnly(self):
        d = Descriptor("-d", "--debug", False, "Run in debug mode")
        with self.assertRaises(AttributeError):
            d.value = True

    def testReprListsFields(self):
        text = repr(Descriptor("-d", "--debug", False, "Run in debug mode"))
        self.assertTrue(text.startswith("descriptor("))
        self.assertIn("short='-d'", text)
        self.assertIn("value=False", text)

    def testCopyIsIndependentAndUnowned(self):
        d = Descriptor("-o", "--oper", "add", "Operation", validator=choices(["add", "del"]))
        duplicate = copy.copy(d)
        self.assertIsNot(duplicate, d)
        self.assertEqual(duplicate.value, "add")
        self.assertIs(duplicate.validator, d.validator)
        self.assertIsNone(duplicate.owner)

    def testGroupCopyOwnsItsChildrenTable(self):
        d = Descriptor("-o", "--oper", "", "Operation", children={})
        duplicate = copy.copy(d)
        self.assertIsNotNone(duplicate.children)
        self.assertIsNot(duplicate.validator, d.validator)

    def testSelectedIsNoneForOrdinaryDescriptors(self):
        self.assertIsNone(Descriptor("-d", "", False, "Debug").selected)


class TestValidators(TestCase):
    """Behavioral tests for the validator factories."""

    def testChoicesAcceptsAllowed(self):
        validator = choices(["add", "get"])
        self.assertIsNone(validator("add"))

    def testChoicesRejectionListsAllowed(self):
        validator = choices(["add", "get", "upd", "del"])
        with self.assertRaises(ValueError) as caught:
            validator("xyz")
        for value in ("add", "get", "upd", "del"):
            self.assertIn(repr(value), str(caught.exception))

    def testSelectionWithoutChildren(self):
        with self.assertRaises(ValueError) as caught:
            selection({})("anything")
        self.assertEqual(str(caught.exception), "no expected values registered")

    def testSelectionSeesLaterChildren(self):
        children = {}
        validator = selection(children)
        children["add"] = object()
        self.assertIsNone(validator("add"))
        with self.assertRaises(ValueError) as caught:
            validator("mod")
        self.assertIn("'add'", str(caught.exception))


if __name__ == "__main__":
    unittest.main()
