r"""
Argbind parameter descriptors.

Overview
- Descriptors
  • Option: named, value-bearing parameter with a required long name and an
    optional short alias (e.g., -o/--output). Values are strings.
  • Flag: named, presence-only parameter (no payload), e.g., -v/--verbose.
  Both share the ParamName identity: a canonical long name plus an optional
  short alias, immutable once constructed.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties.

Naming rules (validated on construction)
- One or two names, given in any order.
- Exactly one long name matching r"--[^\W\d_](-?[^\W_]+)*" (Unicode letters allowed).
- At most one short name matching r"-[^\W_]" (a single letter or digit).
- Names are trimmed; the alias order is always short first, then long.

Quick example:
    >>> from argbind.arguments import Option, Flag
    >>> output = Option("-o", "--output")
    >>> verbose = Flag("--verbose", "-v")
    >>> verbose.names
    ('-v', '--verbose')
    >>> output
    option(names=('-o', '--output'))

Public API
- Classes: Option, Flag
"""
import builtins
import functools
import operator
import re

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable, sealed types.

    Responsibilities
    - Expose the names listed in __introspectable__ as read-only properties
      (backed by "_{name}" attributes, see mirror()).
    - Provide stable __repr__/__rich_repr__ for diagnostics; __displayable__
      narrows what they show (defaults to __introspectable__).
    - Seal classes built with sealed=True against subclassing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages, e.g. "param-name", "option", "flag".
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation, e.g. flag(names=('-v', '--verbose')).
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_names(cls, names, /):
    """
    Internal: validate the one-or-two names of a descriptor.

    Returns
    - (shortname, longname): shortname is None when only a long name was given.

    Raises
    - TypeError: when no name, more than two names, or a non-string name is given.
    - ValueError: when a name is empty, misspelled, or two names of the same kind are given.
    """
    if not names:
        raise TypeError(f"{cls.__typename__} must specify a long name")
    if len(names) > 2:
        raise TypeError(f"{cls.__typename__} takes at most two names (a short and a long one)")

    shortname = None
    longname = None

    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")

        if re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name):
            if longname is not None:
                raise ValueError(f"{cls.__typename__} cannot have two long names ({longname!r} and {name!r})")
            longname = name
        elif re.fullmatch(r"-[^\W_]", name):
            if shortname is not None:
                raise ValueError(f"{cls.__typename__} cannot have two short names ({shortname!r} and {name!r})")
            shortname = name
        else:
            raise ValueError(
                f"{cls.__typename__} name {name!r} must be a long name (--name) or a short name (-n)"
            )

    if longname is None:
        raise ValueError(f"{cls.__typename__} must specify a long name")

    return shortname, longname


class ParamName(metaclass=ArgumentType):
    """
    Identity shared by every descriptor: a canonical long name and an optional short alias.

    Not instantiated directly; use Option or Flag.

    Properties
    - longname: canonical name ("--output"), used in diagnostics.
    - shortname: the short alias ("-o") or None.
    - names: every alias, short first when present, then the long name.
    """

    __introspectable__ = (
        "names",
        "longname",
        "shortname",
    )
    __displayable__ = (
        "names",
    )

    def __new__(cls, *names):
        if cls is ParamName:
            raise TypeError("type 'ParamName' cannot be instantiated directly, use Option or Flag")

        self = super().__new__(cls)
        self._shortname, self._longname = _sanitize_names(cls, names)
        self._names = (self._longname,) if self._shortname is None else (self._shortname, self._longname)
        return self

    def foreach(self, visit, /):
        """
        Call visit(name) once per alias, short alias first when present.
        """
        if not callable(visit):
            raise TypeError("foreach() argument must be callable")
        for name in self._names:
            visit(name)


class Option(ParamName, sealed=True):
    """
    Named, value-bearing parameter.

    An Option expects exactly one value across all of its aliases; the value is
    the token following the option name and is delivered to the handler unmodified.
    Only string values are supported, so 'type' is always str.
    """

    __introspectable__ = ParamName.__introspectable__ + (
        "type",
    )
    __displayable__ = ParamName.__displayable__

    def __new__(cls, *names, type=str):
        if type is not builtins.str:
            raise TypeError(f"{cls.__typename__} 'type' must be str (other value types are not supported)")

        self = super().__new__(cls, *names)
        self._type = type
        return self


class Flag(ParamName, sealed=True):
    """
    Named, presence-only parameter.

    A Flag is bound as True when any of its aliases appears on the command line,
    and as False otherwise.
    """


__all__ = (
    # Classes (descriptors)
    "ParamName",
    "Option",
    "Flag",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
