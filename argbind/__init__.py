"""
argbind: bind a command line to a plain handler through Option and Flag descriptors.

    >>> from argbind import Arguments, Option, Flag
    >>> Arguments("Copy things.").run(["copy", "-o", "out"], print, Option("-o", "--output"))
    out []
    <ExitStatus.OK: 0>
"""
from collections import namedtuple

__title__ = "argbind"
__author__ = "The argbind authors"
__license__ = "MIT"
# Keep in sync with pyproject.toml.
__version__ = "0.1.0"

from .arguments import *
from .commands import *
from .faults import *

VersionInfo = namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
))

# Keep in sync with __version__.
version_info = VersionInfo(0, 1, 0, "final", 0)

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
)

# Public API of the submodules, re-exported at the package level.
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
