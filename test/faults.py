"""
Fault tests (codes, options, merging, rich rendering).
"""
import io
import sys
import unittest
from types import SimpleNamespace
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from heron.faults import *


def rendered(fault):
    buffer = io.StringIO()
    Console(file=buffer, color_system=None, soft_wrap=True).print(fault)
    return buffer.getvalue()


class TestFaultCode(TestCase):
    """Behavioral tests for FaultCode."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.NULL_ARGUMENT, 21101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 21111)
        self.assertEqual(FaultCode.MISSING_ARGUMENT, 21112)
        self.assertEqual(FaultCode.INVALID_VALUE, 21113)
        self.assertEqual(FaultCode.RESPONSE_FILE, 21121)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "21111")

    def testNormalizeUsesHostCodes(self):
        with patch.object(sys.modules["__main__"], "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.INVALID_VALUE.normalize(), "21113")


class TestParserException(TestCase):
    """Behavioral tests for ParserException and its subclasses."""

    def testMessageAndOptions(self):
        fault = UnknownOptionError("unknown option 'X'", code=FaultCode.UNKNOWN_OPTION, input="X")
        self.assertEqual(str(fault), "unknown option 'X'")
        self.assertEqual(fault.message, "unknown option 'X'")
        self.assertEqual(fault.options["input"], "X")

    def testOptionsAreReadOnly(self):
        fault = InvalidValueError("invalid", value="Boo")
        with self.assertRaises(TypeError):
            fault.options["value"] = "Other"

    def testHierarchy(self):
        for cls in (NullArgumentError, UnknownOptionError, MissingArgumentError, InvalidValueError, ResponseFileError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ParserException))
        self.assertTrue(issubclass(NullArgumentError, TypeError))
        self.assertFalse(issubclass(UnknownOptionError, TypeError))

    def testMergeKeepsTypeAndMessage(self):
        fault = MissingArgumentError("missing required argument 'N1'", input="N1")
        merged = merge(fault, colorful=True, input="N2")

        self.assertIsInstance(merged, MissingArgumentError)
        self.assertEqual(merged.message, fault.message)
        self.assertEqual(merged.options["input"], "N2")
        self.assertTrue(merged.options["colorful"])
        self.assertEqual(fault.options["input"], "N1")

    def testMergeRejectsOtherExceptions(self):
        with self.assertRaises(TypeError):
            merge(ValueError("boom"))

    def testRichRendering(self):
        fault = UnknownOptionError(
            "unknown option 'Zzz'",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="run 'files ?' to see all available options",
            tool=SimpleNamespace(prog="files"),
        )
        output = rendered(fault)

        self.assertIn("[ files — 21111 | Unknown Option ]", output)
        self.assertIn("unknown option 'Zzz'", output)
        self.assertIn("→ run 'files ?' to see all available options", output)

    def testRichRenderingWithoutContext(self):
        output = rendered(ResponseFileError("error reading response file 'x'"))
        self.assertIn("ResponseFileError", output)
        self.assertIn("error reading response file 'x'", output)


if __name__ == '__main__':
    # Allow running this test module directly: `python -m pytest` or `python faults.py`.
    unittest.main()
