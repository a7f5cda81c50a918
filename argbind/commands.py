"""
Argbind command layer: bind argv to a handler through declared descriptors.

What this module provides
- Arguments: a reusable runner configured with help text and rendering options.
  Arguments.run(argv, handler, *params) scans argv once against the declared
  Option/Flag descriptors, binds one value per descriptor (in declaration order)
  plus the positional arguments, calls the handler once and returns an exit status.
- invoke(handler, *params, argv=..., **options): one-shot convenience runner that
  defaults to sys.argv.

Run phases
- registry: every alias of every descriptor is registered once; a duplicate or a
  reserved name ("--help", "--version") raises a ConfigurationError before argv
  is looked at.
- help/version: "--help" anywhere in argv (the program name included) renders the
  help and returns OK. "--version" does the same with the version line when the
  runner has a version; otherwise it is just an unknown option.
- scan: options consume the following token, flags record their presence, "--"
  turns every later token into a positional argument, unknown switches abort.
- bind: options merge their values across aliases, flags are True if any alias
  was seen; the handler is partially applied one descriptor at a time.
- invoke: the handler receives the positional list last; its result is mapped
  through ExitStatus.normalize.

Quick start
    from argbind import Arguments, Option, Flag, ExitStatus

    def main(output, verbose, positionals):
        print(output, verbose, positionals)
        return ExitStatus.OK

    status = Arguments("Copy things around.", "Report bugs upstream.").run(
        ["copy", "-o", "out.txt", "--verbose", "a.txt"],
        main,
        Option("-o", "--output"),
        Flag("-v", "--verbose"),
    )

Faults
- Usage errors (empty argv, absent entries, an argument string with unbalanced
  quotes, unknown option, option without a value, and in strict mode an option
  given zero or several values) are rendered on the console and mapped to
  ExitStatus.USAGE; with shell=False they are raised instead.
- In lenient mode (strict=False) value-count anomalies are warnings and binding
  continues with the first value (or None).
"""
import difflib
import functools
import shlex
import sys
from collections import defaultdict, namedtuple
from collections.abc import Iterable

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import Option, Flag
from .faults import *
from .faults import _renderer
from .utils import *

HELP_OPTION = "--help"
VERSION_OPTION = "--version"

# Per-run scan state; built once by _scanargs and consumed by _bindargs.
Scan = namedtuple("Scan", (
    "values",
    "positionals",
    "flags",
))


class Arguments:
    """
    Command-line runner: descriptors + argv → handler call → exit status.

    The instance only holds configuration; every run keeps its scan state local,
    so a runner can be reused and shared between threads (each with its own console).
    """

    description = mirror("description")
    notes = mirror("notes")
    version = mirror("version")
    console = mirror("console")
    shell = mirror("shell")
    strict = mirror("strict")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(
            self,
            description="",
            notes="",
            *,
            version=Unset,
            console=Unset,
            shell=True,
            strict=True,
            fancy=False,
            colorful=True,
    ):
        """
        Parameters
        - description: str
          Free-form text shown after the usage line of the help.
        - notes: str
          Free-form text shown at the end of the help.
        - version: Unset | str
          When given, "--version" prints "<program> <version>" and returns OK.
        - console: Unset | rich.console.Console
          Output channel for help, version and faults. Defaults to Console(stderr=True).
          The runner writes to it but never closes it.
        - shell: bool
          True renders usage errors and returns ExitStatus.USAGE; False raises them.
        - strict: bool
          True treats an option given zero or several values as a usage error;
          False only warns and binds the first value (or None).
        - fancy: bool
          Wrap help and faults in panels.
        - colorful: bool
          Apply the style palette (overridable through __main__.__styles__).
        """
        if not isinstance(description, str):
            raise TypeError("Arguments() 'description' must be a string")
        if not isinstance(notes, str):
            raise TypeError("Arguments() 'notes' must be a string")
        if not isinstance(version, str | Unset):
            raise TypeError("Arguments() 'version' must be a string")
        elif isinstance(version, str) and not (version := version.strip()):
            raise ValueError("Arguments() 'version' cannot be empty")
        if not isinstance(console, Console | Unset):
            raise TypeError("Arguments() 'console' must be a rich console")

        self._description = description
        self._notes = notes
        self._version = coalesce(version)
        self._console = Console(stderr=True) if console is Unset else console
        self._shell = bool(shell)
        self._strict = bool(strict)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    def __repr__(self):
        return "arguments(description=%r, version=%r, shell=%r, strict=%r)" % (
            self._description, self._version, self._shell, self._strict
        )

    def _context(self, prog):
        # Runtime options merged into every fault of a run.
        return {
            "prog": prog,
            "console": self._console,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        }

    def _helper(self, prog):
        """
        Render the help to the console.

        Layout (plain form)
            Usage: <prog> [OPTION]...

            <description>

             Standard Options:

              --help        Display this help message.
              --version     Display version information.

            <notes>
        """
        styler, text = _renderer({"colorful": self._colorful}, {
            "usage-label": "bold #00E6FF",  # CYAN → signature info color
            "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
            "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
            "description-section": "italic #A3A3A3",  # Neutral gray
            "group-label": "bold #FFFFFF",  # Pure white headers
            "option-name": "bold #00E6FF",  # CYAN for options
            "argument-description": "#9CA3AF",  # Muted gray
            "notes-section": "#737373",  # Dim footer gray
            "panel-title": "bold #FF4D94",  # Magenta branding
        })

        lines = [
            Text.assemble(
                text("Usage:", styler("usage-label")),
                " ",
                text(prog, styler("program-name")),
                " ",
                text("[OPTION]...", styler("usage-section")),
            ),
            Text(""),
            text(self._description, styler("description-section")),
            Text(""),
            text(" Standard Options:", styler("group-label")),
            Text(""),
            Text.assemble(
                "  ",
                text(HELP_OPTION, styler("option-name")),
                " " * (14 - len(HELP_OPTION)),
                text("Display this help message.", styler("argument-description")),
            ),
            Text.assemble(
                "  ",
                text(VERSION_OPTION, styler("option-name")),
                " " * (14 - len(VERSION_OPTION)),
                text("Display version information.", styler("argument-description")),
            ),
            Text(""),
            text(self._notes, styler("notes-section")),
        ]

        render = Text("\n").join(lines)
        if self._fancy:
            render = Panel(Group(render), title=text(prog, styler("panel-title")), title_align="left")
        self._console.print(render, soft_wrap=True)

    def _versioner(self, prog):
        """
        Render "<prog> <version>" to the console.
        """
        styler, text = _renderer({"colorful": self._colorful}, {
            "program-name": "bold #FF4D94",  # Magenta-pink brand pop
            "program-version": "bold #00E6FF",  # Cyan version (clear contrast)
        })
        self._console.print(
            Text.assemble(text(prog, styler("program-name")), " ", text(self._version, styler("program-version"))),
            soft_wrap=True
        )

    def _readnames(self, params):
        """
        Build the name registry: (allnames, optionnames).

        - every alias of every descriptor lands in allnames; aliases of options
          also land in optionnames.
        - a name seen twice (across options and flags alike) raises DuplicateNameError;
          "--help" and "--version" raise ReservedNameError.
        - anything but an Option or a Flag raises TypeError.
        """
        allnames = set()
        optionnames = set()

        def register(name):
            if name in (HELP_OPTION, VERSION_OPTION):
                raise ReservedNameError("name %r is reserved" % name, name)
            if name in allnames:
                raise DuplicateNameError("duplicate name %r" % name, name)
            allnames.add(name)

        for param in params:
            if not isinstance(param, Option | Flag):
                raise TypeError("run() descriptors must be options or flags, not %r" % type(param).__name__)
            param.foreach(register)
            if isinstance(param, Option):
                param.foreach(optionnames.add)

        return frozenset(allnames), frozenset(optionnames)

    def _scanargs(self, argv, allnames, optionnames, prog):
        r"""
        Tokenize argv into a Scan(values, positionals, flags).

        rules (argv[0] is the program name and is never scanned)
        - "--": every later token is a positional, verbatim; scanning stops.
        - "-..." not in allnames: UnknownSwitchError.
        - "-..." in optionnames: the next token is its value (repeats accumulate);
          none left is an OptionValueRequiredError.
        - "-..." in allnames only: flag presence.
        - anything else (the empty string included): positional.

        raises
        - EmptyArgumentsError / NullArgumentError before scanning when argv is empty
          or has an absent (None) entry.
        """
        if not argv:
            raise EmptyArgumentsError(
                "argument vector is empty",
                title="empty arguments",
                code=FaultCode.EMPTY_ARGUMENTS,
                hint="pass at least the program name as the first argument",
            )

        for index, token in enumerate(argv):
            if token is None:
                if index:
                    message = "absent argument at %s position" % ordinal(index)
                else:
                    message = "absent program name"
                raise NullArgumentError(
                    message,
                    title="absent argument",
                    code=FaultCode.NULL_ARGUMENT,
                    index=index,
                    hint="every entry of the argument vector must be a string",
                )

        values = defaultdict(list)
        positionals = []
        flags = set()

        index = 1
        while index < len(argv):
            token = argv[index]

            if token == "--":
                positionals.extend(argv[index + 1:])
                break

            if token.startswith("-"):
                if token not in allnames:
                    suggestions = difflib.get_close_matches(token, sorted(allnames), 5)
                    try:
                        hint = "did you mean %r? you can also run '%s --help' to see the standard options" % (
                            suggestions[0], prog
                        )
                    except IndexError:
                        hint = "try '%s --help' to see the standard options" % prog
                    raise UnknownSwitchError(
                        "unknown option %r at %s position" % (token, ordinal(index)),
                        title="unknown option",
                        code=FaultCode.UNKNOWN_SWITCH,
                        input=token,
                        index=index,
                        suggestions=suggestions,
                        hint=hint,
                    )

                if token in optionnames:
                    index += 1
                    if index == len(argv):
                        raise OptionValueRequiredError(
                            "no value supplied for option %r at %s position" % (token, ordinal(index - 1)),
                            title="option value required",
                            code=FaultCode.OPTION_VALUE_REQUIRED,
                            input=token,
                            index=index - 1,
                            hint="pass a value after a space (for example: %s <value>)" % token,
                        )
                    values[token].append(argv[index])
                else:
                    flags.add(token)
            else:
                positionals.append(token)

            index += 1

        return Scan(values, positionals, flags)

    def _bindargs(self, scan, callback, params, context):
        """
        Partially apply callback with one value per descriptor, in declaration order.

        - Option: its values merged across aliases (short alias first). Exactly one
          is expected; otherwise a Missing/MultipleOptionValues fault is produced.
          strict: faults are collected and raised together as CommandExit.
          lenient: faults are warnings, triggered right away; the first value
          (or None) is bound.
        - Flag: True if any alias was seen, else False.

        Returns the partially applied callback, waiting for the positional list.
        """
        faults = []

        for param in params:
            if isinstance(param, Option):
                values = []
                param.foreach(lambda name: values.extend(scan.values.get(name, ())))

                if len(values) != 1:
                    fault = self._cardinality(param, values)
                    if self._strict:
                        faults.append(fault)
                    else:
                        trigger(fault, **context)

                callback = functools.partial(callback, values[0] if values else None)
            else:
                callback = functools.partial(callback, any(name in scan.flags for name in param.names))

        if faults:
            raise CommandExit(faults)

        return callback

    def _cardinality(self, param, values):
        names = " or ".join(param.names)
        if not values:
            exception = MissingOptionValueError if self._strict else MissingOptionValueWarning
            return exception(
                "no value for %s" % param.longname,
                title="missing option",
                code=FaultCode.MISSING_OPTION_VALUE if self._strict else FaultCode.MISSING_OPTION_VALUE_WARNING,
                argument=param,
                hint="pass it once (for example: %s <value>)" % param.longname,
            )
        exception = MultipleOptionValuesError if self._strict else MultipleOptionValuesWarning
        return exception(
            "multiple values for %s" % param.longname,
            title="multiple values",
            code=FaultCode.MULTIPLE_OPTION_VALUES if self._strict else FaultCode.MULTIPLE_OPTION_VALUES_WARNING,
            argument=param,
            values=tuple(values),
            hint="keep a single %s; it was given %d times" % (names, len(values)),
        )

    def run(self, argv, callback, /, *params):
        """
        Bind argv to callback through params and return the exit status.

        Parameters
        - argv: Iterable[str | None] | str
          The full argument vector, program name first. A string is split with
          shlex.split; unbalanced quotes are a usage error. None entries are
          reported as usage errors.
        - callback: Callable
          Called once as callback(*bound, positionals): one str (or None in lenient
          mode) per Option and one bool per Flag, in params order, then the
          positional list. It returns None, an ExitStatus, or an int.
        - *params: Option | Flag
          The descriptor list. Names must be unique across all of them.

        Returns
        - ExitStatus.OK for help/version, ExitStatus.USAGE for usage errors,
          otherwise ExitStatus.normalize(callback(...)).

        Raises
        - ConfigurationError: duplicate or reserved names (always).
        - TypeError: callback not callable, bad descriptor or argv entry types.
        - CommandException / CommandExit: usage errors when shell is False.
        """
        if not callable(callback):
            raise TypeError("run() second argument must be callable")

        allnames, optionnames = self._readnames(params)

        if isinstance(argv, str):
            try:
                argv = shlex.split(argv)
            except ValueError as error:
                fault = MalformedArgumentsError(
                    "malformed argument string: %s" % str(error).lower(),
                    title="malformed arguments",
                    code=FaultCode.MALFORMED_ARGUMENTS,
                    input=argv,
                    hint="close every quote or escape it with a backslash",
                )
                return trigger(fault, **self._context(getattr(__import__("__main__"), "__prog__", "argbind")))
        elif isinstance(argv, Iterable):
            argv = list(argv)
        else:
            raise TypeError("run() first argument must be a string or an iterable of strings")

        for token in argv:
            if token is not None and not isinstance(token, str):
                raise TypeError("run() argument vector entries must be strings, not %r" % type(token).__name__)

        prog = getattr(__import__("__main__"), "__prog__", argv[0] if argv and argv[0] is not None else "argbind")

        if HELP_OPTION in argv:
            self._helper(prog)
            return ExitStatus.OK

        if self._version is not None and VERSION_OPTION in argv:
            self._versioner(prog)
            return ExitStatus.OK

        context = self._context(prog)

        try:
            scan = self._scanargs(argv, allnames, optionnames, prog)
            callback = self._bindargs(scan, callback, params, context)
        except (CommandException, CommandExit) as fault:
            return trigger(fault, **context)

        return ExitStatus.normalize(callback(scan.positionals))


def invoke(callback, /, *params, argv=Unset, **options):
    """
    Convenience runner: Arguments(**options).run(argv, callback, *params).

    Parameters
    - callback, *params: as in Arguments.run.
    - argv: Unset | Iterable[str] | str
      Defaults to sys.argv.
    - **options: forwarded to Arguments (description, notes, version, console,
      shell, strict, fancy, colorful).

    Returns
    - the exit status of the run (an int, usually an ExitStatus member).
    """
    return Arguments(**options).run(coalesce(argv, sys.argv), callback, *params)


__all__ = (
    # Public API surface for consumers of argbind.commands.
    "Arguments",
    "Scan",
    "invoke",
    "HELP_OPTION",
    "VERSION_OPTION",
)
