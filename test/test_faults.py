"""
Faults module behavioral tests (exit statuses, fault codes, rendering, triggering).

Scope
- Validate the sysexits table and handler result normalization.
- Validate host overrides read from __main__ (__codes__, __prog__, __styles__).
- Validate rendering of errors, warnings and grouped exits, plain and fancy.
- Validate trigger(): shell rendering vs raising/warning.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argbind.faults import (
    ExitStatus,
    FaultCode,
    ConfigurationError,
    DuplicateNameError,
    ReservedNameError,
    CommandException,
    UnknownSwitchError,
    MissingOptionValueError,
    CommandWarning,
    MultipleOptionValuesWarning,
    CommandExit,
    trigger,
)


def _console(**options):
    return Console(file=io.StringIO(), width=200, **{"color_system": None, "force_terminal": False} | options)


class TestExitStatus(TestCase):
    """The exit status table mirrors <sysexits.h>."""

    def testValuesMatchSysexits(self):
        self.assertEqual({status.name: status.value for status in ExitStatus}, {
            "OK": 0,
            "USAGE": 64,
            "DATAERR": 65,
            "NOINPUT": 66,
            "NOUSER": 67,
            "NOHOST": 68,
            "UNAVAILABLE": 69,
            "SOFTWARE": 70,
            "OSERR": 71,
            "OSFILE": 72,
            "CANTCREAT": 73,
            "IOERR": 74,
            "TEMPFAIL": 75,
            "PROTOCOL": 76,
            "NOPERM": 77,
            "CONFIG": 78,
        })

    def testNormalizeNoneIsOk(self):
        self.assertIs(ExitStatus.normalize(None), ExitStatus.OK)

    def testNormalizeMembersAndIntegers(self):
        self.assertIs(ExitStatus.normalize(ExitStatus.IOERR), ExitStatus.IOERR)
        self.assertIs(ExitStatus.normalize(78), ExitStatus.CONFIG)
        self.assertIs(ExitStatus.normalize(0), ExitStatus.OK)

    def testNormalizeKeepsUnknownIntegers(self):
        result = ExitStatus.normalize(1)
        self.assertEqual(result, 1)
        self.assertNotIsInstance(result, ExitStatus)

    def testNormalizeMapsBooleansThroughInt(self):
        self.assertIs(ExitStatus.normalize(False), ExitStatus.OK)
        result = ExitStatus.normalize(True)
        self.assertEqual(result, 1)
        self.assertIs(type(result), int)

    def testNormalizeRejectsOtherTypes(self):
        for result in ("0", 1.0, []):
            with self.subTest(result=result):
                with self.assertRaises(TypeError):
                    ExitStatus.normalize(result)


class TestFaultCode(TestCase):
    """Stable codes, optionally relabeled by the host."""

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_SWITCH.normalize(), "11112")

    def testNormalizeHonorsHostCodes(self):
        codes = {FaultCode.UNKNOWN_SWITCH: "E-SWITCH"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_SWITCH.normalize(), "E-SWITCH")
            self.assertEqual(FaultCode.NULL_ARGUMENT.normalize(), "11002")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))


class TestConfigurationError(TestCase):
    """Programming mistakes in the descriptor list."""

    def testHierarchy(self):
        for cls in (DuplicateNameError, ReservedNameError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ConfigurationError))
                self.assertTrue(issubclass(cls, ValueError))
                self.assertFalse(issubclass(cls, CommandException))

    def testCarriesName(self):
        error = DuplicateNameError("duplicate name '-v'", "-v")
        self.assertEqual(error.name, "-v")
        self.assertEqual(str(error), "duplicate name '-v'")


class TestRendering(TestCase):
    """Faults render a header, the message and a hint."""

    def setUp(self):
        self.console = _console()
        self.options = {
            "prog": "tool",
            "console": self.console,
            "colorful": False,
        }

    @property
    def output(self):
        return self.console.file.getvalue()

    def testErrorLayout(self):
        error = UnknownSwitchError(
            "unknown option '--bogus' at first position",
            title="unknown option",
            code=FaultCode.UNKNOWN_SWITCH,
            hint="try 'tool --help'",
        )
        self.console.print(error.__replace__(**self.options))
        self.assertEqual(self.output.splitlines(), [
            "[ tool : 11112 | Unknown Option ]",
            "unknown option '--bogus' at first position",
            " → try 'tool --help'",
        ])

    def testWarningLayout(self):
        warning = MultipleOptionValuesWarning(
            "multiple values for --output",
            title="multiple values",
            code=FaultCode.MULTIPLE_OPTION_VALUES_WARNING,
            hint="keep a single one",
            **self.options
        )
        self.console.print(warning)
        self.assertEqual(self.output.splitlines()[0], "[ tool : 12127 | Multiple Values ]")
        self.assertIn("multiple values for --output", self.output)

    def testFancyErrorIsPanel(self):
        error = MissingOptionValueError("no value for --output", title="missing option", fancy=True, **self.options)
        self.console.print(error)
        self.assertIn("no value for --output", self.output)
        self.assertIn("Missing Option", self.output.splitlines()[0])

    def testHostProgramName(self):
        error = MissingOptionValueError("no value for --output", title="missing option", **self.options)
        with mock.patch.object(sys.modules["__main__"], "__prog__", "renamed", create=True):
            self.console.print(error)
        self.assertTrue(self.output.startswith("[ renamed :"))

    def testColorfulUsesPaletteAndHostStyles(self):
        console = _console(color_system="truecolor", force_terminal=True)
        error = MissingOptionValueError(
            "no value for --output",
            title="missing option",
            prog="tool",
            console=console,
            colorful=True,
        )
        with mock.patch.object(sys.modules["__main__"], "__styles__", {"error-message": "bold red"}, create=True):
            console.print(error)
        output = console.file.getvalue()
        self.assertIn("\x1b[", output)
        self.assertIn("no value for --output", output)

    def testExitGroupsEveryError(self):
        exit = CommandExit([
            MissingOptionValueError("no value for --a", title="missing option"),
            MissingOptionValueError("no value for --b", title="missing option"),
        ], **self.options)
        self.console.print(exit)
        lines = self.output.splitlines()
        self.assertEqual(lines[0], "[ tool : Bad Exit ]")
        self.assertIn("no value for --a", lines)
        self.assertIn("no value for --b", lines)

    def testReplaceMergesOptions(self):
        error = UnknownSwitchError("message", input="--x")
        replaced = error.__replace__(shell=False)
        self.assertIsNot(replaced, error)
        self.assertEqual(dict(replaced.options), {"input": "--x", "shell": False})
        self.assertEqual(dict(error.options), {"input": "--x"})


class TestTrigger(TestCase):
    """trigger() renders in shell mode, raises or warns otherwise."""

    def setUp(self):
        self.console = _console()

    def testErrorInShellModeRendersAndReturnsUsage(self):
        status = trigger(UnknownSwitchError("unknown option '--x'"), console=self.console, colorful=False, shell=True)
        self.assertIs(status, ExitStatus.USAGE)
        self.assertIn("unknown option '--x'", self.console.file.getvalue())

    def testErrorOutsideShellModeRaises(self):
        with self.assertRaises(UnknownSwitchError) as context:
            trigger(UnknownSwitchError("unknown option '--x'", input="--x"), shell=False)
        self.assertEqual(context.exception.options["input"], "--x")
        self.assertEqual(str(context.exception), "unknown option '--x'")

    def testWarningInShellModeRenders(self):
        result = trigger(MultipleOptionValuesWarning("multiple values"), console=self.console, colorful=False)
        self.assertIsNone(result)
        self.assertIn("multiple values", self.console.file.getvalue())

    def testWarningOutsideShellModeWarns(self):
        with self.assertWarns(MultipleOptionValuesWarning):
            trigger(MultipleOptionValuesWarning("multiple values"), shell=False)

    def testExitOutsideShellModeRaises(self):
        with self.assertRaises(CommandExit):
            trigger(CommandExit([MissingOptionValueError("no value for --a")]), shell=False)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testWarningIsAWarning(self):
        self.assertTrue(issubclass(CommandWarning, Warning))


if __name__ == "__main__":
    unittest.main()
