"""
Faults behavioral tests (structured errors, groups, warnings, rendering and triggering).

Scope
- Validate error payloads, messages, equality and copy.replace support.
- Validate DecodeErrors aggregation (errors triples, subgroup derivation).
- Validate trigger() in library mode (raise/warn) and shell mode (print/exit).
- Validate host integration through __main__ (__codes__, __docs__, __prog__).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering assertions use a plain (colorless) rich console writing to a buffer.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argdecode import (
    CardinalityError,
    DanglingValueError,
    DecodeErrors,
    DecodeWarning,
    EmptyValueWarning,
    FaultCode,
    MissingFieldError,
    TypeMismatchError,
    decode,
    field,
    getdoc,
    normalize,
    record,
    render,
    trigger,
)


def capture(renderable):
    buffer = io.StringIO()
    Console(file=buffer, width=200, color_system=None).print(renderable)
    return buffer.getvalue()


class TestDecodeError(TestCase):
    """Behavioral tests for DecodeError and its subclasses."""

    def testMessage(self):
        error = TypeMismatchError("Integer", "String", path=("age",))
        self.assertEqual(str(error), "expected integer, found string at 'age'")

    def testMessageWithoutPath(self):
        self.assertEqual(str(TypeMismatchError("Integer", "String")), "expected integer, found string")

    def testWildcardPath(self):
        self.assertEqual(str(TypeMismatchError("Integer", "String", path=("num", "*"))), "expected integer, found string at 'num.*'")

    def testDefaults(self):
        self.assertEqual(MissingFieldError("Float").found, "Nothing")
        self.assertEqual(CardinalityError("String").found, "List")

    def testDanglingMessage(self):
        error = DanglingValueError("Name", "Value", token="stray", position="first")
        self.assertEqual(error.message, "dangling value 'stray' at first position")
        self.assertEqual(DanglingValueError("Name", "Value").message, "expected name, found value")

    def testEqualityIgnoresOptions(self):
        self.assertEqual(MissingFieldError("Integer", path=("a",)), MissingFieldError("Integer", path=("a",), shell=True))
        self.assertEqual(len({MissingFieldError("Integer", path=("a",)), MissingFieldError("Integer", path=["a"])}), 1)

    def testEqualityComparesFaultType(self):
        self.assertNotEqual(TypeMismatchError("Integer", "Nothing", path=("a",)), MissingFieldError("Integer", path=("a",)))

    def testRepr(self):
        self.assertEqual(repr(MissingFieldError("Integer", path=("a",))), "MissingFieldError('Integer', 'Nothing', path=('a',))")

    def testReplace(self):
        error = TypeMismatchError("Integer", "String", path=("*",), prog="tool")
        moved = copy.replace(error, path=("num", "*"))
        self.assertEqual(moved.path, ("num", "*"))
        self.assertEqual(moved.options["prog"], "tool")
        self.assertEqual(error.path, ("*",))

    def testPayloadMustBeText(self):
        with self.assertRaises(TypeError):
            TypeMismatchError(1, "String")

    def testCodes(self):
        self.assertEqual(MissingFieldError.code, FaultCode.MISSING_FIELD)
        self.assertEqual(TypeMismatchError.code, 21102)
        self.assertEqual(CardinalityError.code, 21103)
        self.assertEqual(DanglingValueError.code, 21111)
        self.assertEqual(EmptyValueWarning.code, 22111)

    def testRender(self):
        self.assertEqual(render(("files", "*")), "files.*")
        self.assertEqual(render(()), "<root>")


class TestDecodeErrors(TestCase):
    """Behavioral tests for the DecodeErrors group."""

    def setUp(self):
        self.group = DecodeErrors([
            MissingFieldError("String", path=("name",)),
            TypeMismatchError("Integer", "String", path=("age",)),
        ])

    def testIsExceptionGroup(self):
        self.assertIsInstance(self.group, ExceptionGroup)
        self.assertEqual(len(self.group.exceptions), 2)

    def testErrors(self):
        self.assertEqual(self.group.errors, [
            ("String", "Nothing", ("name",)),
            ("Integer", "String", ("age",)),
        ])

    def testSubgroupKeepsType(self):
        missing = self.group.subgroup(lambda error: isinstance(error, MissingFieldError))
        self.assertIsInstance(missing, DecodeErrors)
        self.assertEqual(missing.errors, [("String", "Nothing", ("name",))])

    def testExceptStar(self):
        caught = []
        try:
            raise self.group
        except* TypeMismatchError as group:
            caught.extend(group.exceptions)
        except* MissingFieldError as group:
            caught.extend(group.exceptions)
        self.assertEqual(len(caught), 2)

    def testRenderListsEveryError(self):
        output = capture(copy.replace(self.group, prog="tool"))
        self.assertIn("Decode Failed (2)", output)
        self.assertIn("expected string, found nothing at 'name'", output)
        self.assertIn("expected integer, found string at 'age'", output)


class TestTrigger(TestCase):
    """Behavioral tests for trigger() and rendering."""

    def testRaisesInLibraryMode(self):
        with self.assertRaises(MissingFieldError):
            trigger(MissingFieldError("String", path=("name",)))

    def testOptionsAreMerged(self):
        with self.assertRaises(DecodeErrors) as context:
            trigger(DecodeErrors([MissingFieldError("String")]), prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testShellModeExits(self):
        buffer = io.StringIO()
        with mock.patch("argdecode.faults.console", Console(file=buffer, width=200, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                trigger(TypeMismatchError("Integer", "String", path=("age",)), shell=True, prog="tool")
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("[ tool - 21102 | Type Mismatch ]", output)
        self.assertIn("expected integer, found string at 'age'", output)

    def testFancyRendering(self):
        output = capture(copy.replace(MissingFieldError("Integer", path=("age",)), fancy=True, prog="tool"))
        self.assertIn("21101", output)
        self.assertIn("expected integer, found nothing at 'age'", output)

    def testHintOverride(self):
        output = capture(copy.replace(MissingFieldError("Integer"), hint="try --age 3", prog="tool"))
        self.assertIn("try --age 3", output)

    def testWarningIsEmitted(self):
        with self.assertWarns(EmptyValueWarning):
            trigger(EmptyValueWarning("empty inline value for '--foo'"))

    def testWarningInShellModeIsPrinted(self):
        buffer = io.StringIO()
        with mock.patch("argdecode.faults.console", Console(file=buffer, width=200, color_system=None)):
            trigger(EmptyValueWarning("empty inline value for '--foo'"), shell=True, prog="tool")
        self.assertIn("22111", buffer.getvalue())
        self.assertIn("empty inline value for '--foo'", buffer.getvalue())

    def testWarningsAreDecodeWarnings(self):
        self.assertTrue(issubclass(EmptyValueWarning, DecodeWarning))
        self.assertTrue(issubclass(DecodeWarning, Warning))

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestHost(TestCase):
    """Behavioral tests for __main__ integration."""

    def testCodeLabels(self):
        self.assertEqual(FaultCode.MISSING_FIELD.normalize(), "21101")
        with mock.patch.object(sys.modules["__main__"], "__codes__", {FaultCode.MISSING_FIELD: "E-MISSING"}, create=True):
            self.assertEqual(FaultCode.MISSING_FIELD.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.TYPE_MISMATCH.normalize(), "21102")

    def testDocs(self):
        self.assertIsNone(getdoc(FaultCode.DANGLING_VALUE))
        with mock.patch.object(sys.modules["__main__"], "__docs__", {FaultCode.DANGLING_VALUE: "put it after --"}, create=True):
            self.assertEqual(getdoc(FaultCode.DANGLING_VALUE), "put it after --")

    def testDocsReachDecodeFaults(self):
        docs = {FaultCode.MISSING_FIELD: "see --help for required options", FaultCode.TYPE_MISMATCH: "numbers only"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            with self.assertRaises(DecodeErrors) as context:
                decode(record(lambda name=field("--name"), age=field("--age", type=int): (name, age)), ["--age", "old"])
        missing, mismatch = context.exception.exceptions
        self.assertEqual(missing.options["docs"], "see --help for required options")
        self.assertEqual(mismatch.options["docs"], "numbers only")
        output = capture(context.exception)
        self.assertIn("see --help for required options", output)
        self.assertIn("numbers only", output)

    def testDocsReachTokenizerFaults(self):
        docs = {FaultCode.DANGLING_VALUE: "values go after --", FaultCode.EMPTY_INLINE_VALUE: "drop the ="}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            with self.assertRaises(DecodeErrors) as context:
                normalize(["stray"], strict=True)
            with self.assertWarns(EmptyValueWarning) as warned:
                normalize(["--foo="])
        self.assertEqual(context.exception.exceptions[0].options["docs"], "values go after --")
        self.assertEqual(warned.warning.options["docs"], "drop the =")
        self.assertIn("drop the =", capture(warned.warning))

    def testNoDocsNoDocsLine(self):
        with self.assertRaises(DecodeErrors) as context:
            decode(field("--name"), [])
        self.assertIsNone(context.exception.exceptions[0].options["docs"])
        self.assertNotIn("ⓘ", capture(context.exception))

    def testDocsRequireFaultCode(self):
        with self.assertRaises(TypeError):
            getdoc(21111)

    def testProgName(self):
        with mock.patch.object(sys.modules["__main__"], "__prog__", "host", create=True):
            output = capture(MissingFieldError("String"))
        self.assertIn("[ host - 21101 | Missing Field ]", output)


if __name__ == "__main__":
    unittest.main()
