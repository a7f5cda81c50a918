"""
Argbind exit statuses, faults (errors and warnings) and rendering.

Scope
- ExitStatus: the process exit codes returned by a run, matching the BSD
  sysexits convention value for value.
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings), grouped by domain.
- ConfigurationError: raised for mistakes in the declared descriptors themselves
  (duplicate or reserved names). Never rendered, never mapped to an exit code.
- CommandException / CommandWarning: user-input faults that carry a message plus
  rendering options and know how to render themselves with rich.
- trigger(): central entry point to surface a fault with runtime options.

Severity
- configuration error → raised unconditionally (a bug in the program).
- usage error (CommandException) → rendered, run returns ExitStatus.USAGE;
  raised instead when the runner is not in shell mode.
- soft diagnostic (CommandWarning) → rendered, or emitted through warnings.warn
  when the runner is not in shell mode; never aborts.

Integration
- The commands layer creates faults with title/code/hint and calls trigger(fault, **ctx).
- Host applications may define __styles__, __prog__ and __codes__ in __main__.
"""
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class ExitStatus(IntEnum):
    """
    process exit statuses; values match <sysexits.h> bit for bit.

    OK is the only success value. the runner itself only ever produces OK
    (help/version) and USAGE (malformed invocation); every other status comes
    from the bound handler.
    """
    OK          = 0
    USAGE       = 64  # command line usage error
    DATAERR     = 65  # data format error
    NOINPUT     = 66  # cannot open input
    NOUSER      = 67  # addressee unknown
    NOHOST      = 68  # host name unknown
    UNAVAILABLE = 69  # service unavailable
    SOFTWARE    = 70  # internal software error
    OSERR       = 71  # system error (e.g., can't fork)
    OSFILE      = 72  # critical OS file missing
    CANTCREAT   = 73  # can't create (user) output file
    IOERR       = 74  # input/output error
    TEMPFAIL    = 75  # temp failure; user is invited to retry
    PROTOCOL    = 76  # remote error in protocol
    NOPERM      = 77  # permission denied
    CONFIG      = 78  # configuration error

    @classmethod
    def normalize(cls, result, /):
        """
        convert a handler result into an exit status.

        - None → OK (handlers that simply return).
        - a member → itself.
        - an int in the table → the matching member; any other int is kept as-is.
        - bool → int(result) first, so False is OK and True is 1.
        - anything else → TypeError.
        """
        if result is None:
            return cls.OK
        if not isinstance(result, int):
            raise TypeError(f"handler must return None, an ExitStatus or an integer, not {type(result).__name__!r}")
        try:
            return cls(int(result))
        except ValueError:
            return int(result)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - argument vector (1100x)
      • EMPTY_ARGUMENTS, NULL_ARGUMENT, MALFORMED_ARGUMENTS
    - switches (1111x)
      • UNKNOWN_SWITCH, OPTION_VALUE_REQUIRED
    - binding (1112x)
      • MISSING_OPTION_VALUE, MULTIPLE_OPTION_VALUES
    - warnings (12xxx)
      • MISSING_OPTION_VALUE_WARNING, MULTIPLE_OPTION_VALUES_WARNING
    """
    # --- argument vector errors (11xxx) ---
    EMPTY_ARGUMENTS                = 11001
    NULL_ARGUMENT                  = 11002
    MALFORMED_ARGUMENTS            = 11003

    # --- switch errors (11xxx) ---
    UNKNOWN_SWITCH                 = 11112
    OPTION_VALUE_REQUIRED          = 11117

    # --- binding errors (11xxx) ---
    MISSING_OPTION_VALUE           = 11126
    MULTIPLE_OPTION_VALUES         = 11127

    # --- warnings (12xxx) ---
    MISSING_OPTION_VALUE_WARNING   = 12126
    MULTIPLE_OPTION_VALUES_WARNING = 12127

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(ValueError):
    """
    the declared descriptor list is invalid.

    this is a programming mistake, not a user-input problem: it is detected
    before argv is read and always propagates to the caller.
    """
    def __init__(self, message, name):
        super().__init__(message)
        self.name = name


class DuplicateNameError(ConfigurationError): ...
class ReservedNameError(ConfigurationError): ...


def _renderer(options, palette):
    """
    Internal: build the (styler, text) pair shared by the fault renderers.

    - styler(style) resolves a palette key, or "" when colorful is off.
    - text(fragment, style) wraps a fragment into a rich Text, styled only when colorful.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if options.get("colorful", True) else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not options.get("colorful", True):
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _program(options):
    return getattr(__import__("__main__"), "__prog__", options.get("prog") or "argbind")


class CommandException(Exception):
    """
    base type for usage errors.

    options (set at construction or merged later through __replace__)
    - title, code (FaultCode), hint: copy shown to the user.
    - prog, console, shell, fancy, colorful: runtime context from the runner.
    - any other payload (input, index, argument, suggestions, ...).
    """
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(_program(self.options), styler("prog-name")),
            " : ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", True):
            raise self from None
        self.options["console"].print(self)
        return ExitStatus.USAGE

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyArgumentsError(CommandException): ...
class NullArgumentError(CommandException): ...
class MalformedArgumentsError(CommandException): ...
class UnknownSwitchError(CommandException): ...
class OptionValueRequiredError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class MultipleOptionValuesError(CommandException): ...


class CommandWarning(Warning):
    """
    base type for soft diagnostics; same options as CommandException.
    """
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            text(_program(self.options), styler("prog-name")),
            " : ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", "warning").title(), styler("warning-title")),
            " ]"
        )
        message = text(self.message, styler("warning-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", True):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options["console"].print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingOptionValueWarning(CommandWarning): ...
class MultipleOptionValuesWarning(CommandWarning): ...


class CommandExit(ExceptionGroup[CommandException]):
    """
    several usage errors of one run, reported together.
    """
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def __rich__(self):
        styler, text = _renderer(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Exit)
        })

        header = Text.assemble(
            "[ ",
            text(_program(self.options), styler("prog-name")),
            " : ",
            text(self.message.title(), styler("title")),
            " ]"
        )
        renders = [exception.__replace__(**self.options) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", True):
            raise self from None
        self.options["console"].print(self)
        return ExitStatus.USAGE

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is printed on options["console"] and errors return
      ExitStatus.USAGE; otherwise errors are raised and warnings go through warnings.warn.

    returns
    - whatever __trigger__ returns (ExitStatus.USAGE for errors, None for warnings).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "ExitStatus",
    "FaultCode",
    "ConfigurationError",
    "DuplicateNameError",
    "ReservedNameError",
    "CommandException",
    "EmptyArgumentsError",
    "NullArgumentError",
    "MalformedArgumentsError",
    "UnknownSwitchError",
    "OptionValueRequiredError",
    "MissingOptionValueError",
    "MultipleOptionValuesError",
    "CommandWarning",
    "MissingOptionValueWarning",
    "MultipleOptionValuesWarning",
    "CommandExit",
    "trigger",
)
