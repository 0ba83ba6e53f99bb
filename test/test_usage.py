# python
"""
Usage rendering behavioral tests.

Scope
- Validate that every descriptor shows up with its names, value and doc.
- Validate group selectors listing their children and nested child sections.
- Validate plain/fancy modes and the printing helper.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from flagset import OptionSet, render, usage
from flagset import rendering


def _text(renderable):
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestRender(TestCase):
    """Behavioral tests for render()."""

    def setUp(self):
        self.flags = OptionSet("main", "Main options")
        self.flags.boolean("-d", "--debug", False, "Run in debug mode")
        self.flags.string("", "--input", "", "Input filename")
        self.flags.integer("-l", "--limit", 2, "Limit nr of records")
        self.oper = self.flags.group("-o", "--oper", "Select operation")
        add = OptionSet("add", "Add user")
        add.string("-n", "--name", "", "Name to add")
        self.oper.add_child(add)

    def testRowsListEveryDescriptor(self):
        output = _text(render(self.flags, colorful=False))
        for fragment in ("Usage:", "--debug", "false", "--input", '""', "-l", "2", "Limit nr of records"):
            self.assertIn(fragment, output)

    def testGroupListsChildrenAndNestedSections(self):
        output = _text(render(self.flags, colorful=False))
        self.assertIn("{add}", output)
        self.assertIn("add — Add user", output)
        self.assertIn("Name to add", output)

    def testCurrentValuesAreShown(self):
        self.flags.parse(["--limit=42", "-o", "add"])
        output = _text(render(self.flags, colorful=False))
        self.assertIn("42", output)

    def testFancy(self):
        output = _text(render(self.flags, colorful=True, fancy=True))
        self.assertIn("--debug", output)
        self.assertIn("Usage:", output)

    def testEmptySet(self):
        output = _text(render(OptionSet(), colorful=False))
        self.assertIn("Usage:", output)

    def testRejectsNonSets(self):
        with self.assertRaises(TypeError):
            render({"-d": True})


class TestUsage(TestCase):
    """Behavioral tests for usage()."""

    def testPrintsToConsole(self):
        flags = OptionSet("main")
        flags.boolean("-d", "--debug", False, "Run in debug mode")
        buffer = io.StringIO()
        with mock.patch.object(rendering, "Console", lambda **options: Console(file=buffer, width=120, color_system=None)):
            usage(flags, colorful=False)
        self.assertIn("--debug", buffer.getvalue())


if __name__ == "__main__":
    unittest.main()
