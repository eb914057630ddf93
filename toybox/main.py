"""The multiplexer: find a command by name and run it with parsed options."""

from __future__ import annotations

import bisect
import enum
import os
import sys
from dataclasses import dataclass, field
from typing import Callable

from .args import get_optflags
from .lib import ToyError, format_error

__all__ = ["ToyFlag", "Toy", "ToyContext", "ToyBox", "main"]

_TOY_PATHS = ("usr/", "bin/", "sbin/")


class ToyFlag(enum.IntFlag):
    """How a command is installed and started."""

    USR = 1 << 0
    BIN = 1 << 1
    SBIN = 1 << 2
    LOCATION = (1 << 4) - 1
    NOFORK = 1 << 4
    UMASK = 1 << 5


@dataclass
class Toy:
    """One command: its name, entry point, option string and flags."""

    name: str
    main: Callable | None = None
    options: str | None = None
    flags: int = 0


@dataclass
class ToyContext:
    """State shared with the running command."""

    which: Toy
    argv: list
    exitval: int = 0
    optflags: int = 0
    optargs: list = field(default_factory=list)
    values: dict = field(default_factory=dict)
    old_umask: int | None = None

    @property
    def optc(self):
        return len(self.optargs)


class ToyBox:
    """A table of commands with the multiplexer entry first."""

    def __init__(self, toys=()):
        toys = list(toys)
        if toys and toys[0].name == "toybox":
            head, rest = toys[0], toys[1:]
        else:
            head, rest = Toy("toybox", None, None, 0), toys
        if head.main is None:
            head.main = self._toybox_main
        self.toys = [head] + sorted(rest, key=lambda t: t.name)
        self._names = [t.name for t in self.toys[1:]]
        self.context = None

    def find(self, name):
        """The command called name, or None."""
        if name.startswith("toybox"):
            return self.toys[0]
        pos = bisect.bisect_left(self._names, name)
        if pos < len(self._names) and self._names[pos] == name:
            return self.toys[pos + 1]
        return None

    def init(self, toy, argv):
        """Set up the context for toy with its parsed command line."""
        argv = list(argv)
        ctx = ToyContext(which=toy, argv=argv)
        self.context = ctx
        if toy.options:
            parsed = get_optflags(toy.options, argv)
            ctx.optflags = parsed.flags
            ctx.optargs = parsed.optargs
            ctx.values = parsed.values
        else:
            ctx.optargs = argv[1:]
        if toy.flags & ToyFlag.UMASK:
            ctx.old_umask = os.umask(0)
        return ctx

    def exec(self, argv):
        """Run the command named by argv[0]; None if there is no such command.

        Returns the command's exit value.
        """
        toy = self.find(argv[0])
        if toy is None:
            return None
        ctx = self.init(toy, argv)
        toy.main(ctx)
        return ctx.exitval

    def listing(self, show_paths=False):
        """The space-separated command list, wrapped after 65 columns."""
        out = []
        width = 0
        for toy in self.toys[1:]:
            if not toy.flags & ToyFlag.LOCATION:
                continue
            if show_paths:
                for bit, prefix in enumerate(_TOY_PATHS):
                    if toy.flags & (1 << bit):
                        out.append(prefix)
                        width += len(prefix)
            out.append(f"{toy.name} ")
            width += len(toy.name) + 1
            if width > 65:
                out.append("\n")
                width = 0
        out.append("\n")
        return "".join(out)

    def install_list(self, with_paths=False):
        """One entry per installable command, optionally with its directory."""
        lines = []
        for toy in self.toys[1:]:
            if not toy.flags & ToyFlag.LOCATION:
                continue
            prefix = ""
            if with_paths:
                prefix = "".join(
                    p for bit, p in enumerate(_TOY_PATHS) if toy.flags & (1 << bit)
                )
            lines.append(prefix + toy.name)
        return lines

    def _dispatch(self, args):
        if args and not args[0].startswith("-"):
            rc = self.exec(args)
            if rc is None:
                self.context = ToyContext(which=self.toys[0], argv=list(args))
                raise ToyError(f"Unknown command {args[0]}")
            return rc
        sys.stdout.write(self.listing(show_paths=bool(args)))
        return 0

    def _toybox_main(self, ctx):
        ctx.exitval = self._dispatch(ctx.argv[1:]) or ctx.exitval

    def run(self, argv):
        """Start the command named by the program name; return the exit status."""
        args = list(argv)
        if args:
            args[0] = args[0].rsplit("/", 1)[-1]
        try:
            return self._dispatch(args)
        except ToyError as exc:
            which = self.context.which.name if self.context else self.toys[0].name
            print(format_error(which, exc.msg), file=sys.stderr)
            return exc.exitval


def main(argv=None):
    """Entry point for the toybox command."""
    if argv is None:
        argv = sys.argv
    return ToyBox().run(argv)