"""
Usage rendering tests.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked line by line on plain (colorless) output.
"""
import io
import unittest
from unittest import TestCase

from heron import Argument, Command, Parser, Usage, render


class BasicOptions:
    a: str = Argument("A", "the A string")
    c: str = Argument("C", "the C string", required=True)
    flag: bool = Argument("Flag", default=False)
    n1: int = Argument("N1", required=True)


class CopyOptions:
    source: str = Argument("Source", "the source file", required=True)
    target: str = Argument("Target", "the target file", required=True)
    overwrite: bool = Argument("Overwrite", default=True)


class DeleteOptions:
    source: str = Argument("Source", required=True)


class CommandOptions:
    copy: CopyOptions = Command("Copy", "copy a file")
    delete: DeleteOptions = Command("Delete")
    fail_silently: bool = Argument("FailSilently", default=False)


class TestUsage(TestCase):
    """Behavioral tests for the usage block."""

    def testHeaderListsRequiredSwitches(self):
        lines = render(Parser(BasicOptions(), io.StringIO())).splitlines()
        self.assertEqual(lines[0], "Usage: basic-options -C:value (the C string) -N1:value")

    def testOptionsBlock(self):
        lines = render(Parser(BasicOptions(), io.StringIO())).splitlines()
        self.assertEqual(lines[1:], [
            "",
            "Options:",
            "    /A:value (the A string)",
            "    /Flag",
        ])

    def testCustomProg(self):
        text = render(Parser(BasicOptions(), io.StringIO(), prog="basic"))
        self.assertTrue(text.startswith("Usage: basic -C:value"))

    def testNoOptionsBlockWithoutOptionals(self):
        lines = render(Parser(DeleteOptions(), io.StringIO())).splitlines()
        self.assertEqual(lines, ["Usage: delete-options -Source:value"])

    def testCommandsRenderedRecursively(self):
        lines = render(Parser(CommandOptions(), io.StringIO(), prog="files")).splitlines()
        self.assertEqual(lines, [
            "Usage: files",
            "",
            "Options:",
            "    /FailSilently",
            "",
            "Commands:",
            "Copy (copy a file)",
            "Usage: files /Copy -Source:value (the source file) -Target:value (the target file)",
            "",
            "Options:",
            "    /Overwrite",
            "Delete",
            "Usage: files /Delete -Source:value",
        ])

    def testChildUsageCarriesRoute(self):
        parser = Parser(CommandOptions(), io.StringIO(), prog="files")
        self.assertTrue(parser.children["Copy"].getusage().startswith("Usage: files /Copy -Source:value"))

    def testUsageIsRestartable(self):
        parser = Parser(BasicOptions(), io.StringIO())
        usage = Usage(parser)
        self.assertEqual(list(map(str, usage.lines())), list(map(str, usage.lines())))
        self.assertEqual(render(parser), parser.getusage())

    def testUsagePrintsToOutput(self):
        buffer = io.StringIO()
        parser = Parser(BasicOptions(), buffer)
        parser.usage()
        self.assertEqual(buffer.getvalue(), parser.getusage())

    def testColorfulOutputCarriesStyles(self):
        buffer = io.StringIO()
        Parser(BasicOptions(), buffer, colorful=True).usage()
        self.assertIn("\x1b[", buffer.getvalue())

    def testPlainOutputHasNoControlCodes(self):
        buffer = io.StringIO()
        Parser(BasicOptions(), buffer).usage()
        self.assertNotIn("\x1b[", buffer.getvalue())


if __name__ == '__main__':
    # Allow running this test module directly: `python -m pytest` or `python usage.py`.
    unittest.main()
