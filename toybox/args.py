"""Command line option parsing driven by a compact option string.

The option string lists option characters; each one owns a bit in the
resulting flag word, the rightmost option being bit 0. After a character:

  ``:``  takes a string argument (the last one given wins)
  ``*``  takes a string argument, collected into a list
  ``#``  takes a numeric argument (k/m/g/... suffixes allowed)
  ``@``  counts how often it was given
  ``(name)``  a long option name for it
  ``|``  marks it required, ``^`` stops parsing after it
  ``+X`` / ``~X`` / ``!X`` enable, disable or exclude option X

At the start of the string: ``^`` stop at the first non-option,
``<N`` / ``>N`` the least / most leftover arguments, ``?`` keep unknown
options as arguments, ``&`` the first argument (twice: every argument)
needs no dash.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .lib import ToyError, atolx

__all__ = ["Option", "OptionSpec", "ParsedArgs", "parse_optstring", "get_optflags"]

_ARG_TYPES = ":*#@"
_RELATIONS = "+~!"


@dataclass(eq=False)
class Option:
    """One option from the option string."""

    char: str | None = None
    longopts: list = field(default_factory=list)
    type: str | None = None
    required: bool = False
    stop: bool = False
    enables: list = field(default_factory=list)
    disables: list = field(default_factory=list)
    excludes: list = field(default_factory=list)
    bit: int = 0

    @property
    def key(self):
        """The name its value is stored under: its character or first long name."""
        return self.char if self.char is not None else self.longopts[0]

    @property
    def enable_mask(self):
        return self.bit | _mask(self.enables)

    @property
    def disable_mask(self):
        return _mask(self.disables)

    @property
    def exclude_mask(self):
        return _mask(self.excludes)

    def _claimed(self):
        return self.char is not None or bool(self.longopts)


def _mask(options):
    value = 0
    for opt in options:
        value |= opt.bit
    return value


@dataclass
class OptionSpec:
    """A parsed option string."""

    options: list = field(default_factory=list)
    stopearly: int = 0
    minargs: int = 0
    maxargs: int | None = None
    noerror: int = 0
    nodash: int = 0

    def find(self, char):
        return next((o for o in self.options if o.char == char), None)


@dataclass
class ParsedArgs:
    """Result of parsing: flag word, leftover arguments and option values."""

    flags: int
    optargs: list
    values: dict
    spec: OptionSpec

    @property
    def optc(self):
        return len(self.optargs)


def parse_optstring(options):
    """Turn an option string into an OptionSpec."""
    spec = OptionSpec()
    options = options or ""
    pos = 0
    while pos < len(options):
        ch = options[pos]
        if ch == "^":
            spec.stopearly += 1
        elif ch in "<>":
            pos += 1
            digit = ord(options[pos]) - ord("0") if pos < len(options) else -ord("0")
            if ch == "<":
                spec.minargs = digit
            else:
                spec.maxargs = digit
        elif ch == "?":
            spec.noerror += 1
        elif ch == "&":
            spec.nodash += 1
        else:
            break
        pos += 1

    if pos >= len(options):
        spec.stopearly += 1

    current = None
    while pos < len(options):
        ch = options[pos]
        if current is None:
            current = Option()
            spec.options.append(current)
        if ch == "(":
            end = options.find(")", pos + 1)
            if end < 0:
                raise ToyError("Bug1 in get_opt")
            current.longopts.append(options[pos + 1:end])
            pos = end
        elif ch in _ARG_TYPES:
            current.type = ch
        elif ch in _RELATIONS:
            pos += 1
            if pos >= len(options):
                raise ToyError("Bug2 in get_opt")
            target = next(
                (o for o in reversed(spec.options) if o.char == options[pos]), None
            )
            if target is None:
                raise ToyError("Bug3 in get_opt")
            (current.enables, current.disables, current.excludes)[
                _RELATIONS.index(ch)
            ].append(target)
        elif ch == "[":
            pass
        elif ch == "|":
            current.required = True
        elif ch == "^":
            current.stop = True
        elif current._claimed():
            current = None
            continue
        else:
            current.char = ch
        pos += 1

    count = len(spec.options)
    for index, opt in enumerate(spec.options):
        opt.bit = 1 << (count - 1 - index)
    return spec


class _Parser:
    def __init__(self, spec, argv):
        self.spec = spec
        self.argv = list(argv)
        self.flags = 0
        self.optargs = []
        self.stopearly = spec.stopearly
        self.index = 0
        self.nodash_now = False
        self.values = {}
        for opt in spec.options:
            if opt.type:
                self.values[opt.key] = {":": None, "*": [], "#": 0, "@": 0}[opt.type]

    def gotflag(self, opt, rest, shown, long_value=None):
        """Apply one option; rest is the text after it. Returns (unknown, rest)."""
        if opt is None:
            if self.spec.noerror:
                return True, rest
            raise ToyError(f"Unknown option {shown}")
        self.flags |= opt.enable_mask
        self.flags &= ~opt.disable_mask
        if opt.stop:
            self.stopearly = 2
        if opt.type:
            value = rest if long_value is None else long_value
            if not self.nodash_now and value == "":
                self.index += 1
                if self.index >= len(self.argv):
                    name = opt.char if opt.char is not None else opt.key
                    raise ToyError(f"Missing argument to -{name}")
                value = self.argv[self.index]
            if opt.type == ":":
                self.values[opt.key] = value
            elif opt.type == "*":
                self.values[opt.key].append(value)
            elif opt.type == "#":
                self.values[opt.key] = atolx(value)
            else:
                self.values[opt.key] += 1
            rest = ""
        return False, rest

    def notflag(self):
        if self.stopearly:
            self.stopearly += 1
        self.optargs.append(self.argv[self.index])

    def long_option(self, body):
        for opt in reversed(self.spec.options):
            for name in reversed(opt.longopts):
                if not body.startswith(name):
                    continue
                if len(body) > len(name):
                    if body[len(name)] == "=" and opt.type:
                        return opt, body[len(name) + 1:]
                    continue
                return opt, None
        return None, None

    def parse_one(self):
        arg = self.argv[self.index]
        if self.stopearly > 1:
            return self.notflag()
        self.nodash_now = False
        if arg.startswith("-"):
            if arg == "-":
                return self.notflag()
            body = arg[1:]
            if body.startswith("-"):
                body = body[1:]
                if not body:
                    self.stopearly += 2
                    return self.notflag()
                opt, value = self.long_option(body)
                if opt is None and self.spec.noerror:
                    return self.notflag()
                self.gotflag(opt, "", body, "" if value is None else value)
                return None
            rest = body
        else:
            if self.spec.nodash and (self.spec.nodash > 1 or self.index == 1):
                self.nodash_now = True
                rest = arg
            else:
                return self.notflag()

        saved = self.flags
        while rest:
            opt = self.spec.find(rest[0])
            unknown, rest = self.gotflag(opt, rest[1:], rest)
            if unknown:
                self.flags = saved
                return self.notflag()
        return None

    def run(self):
        self.index = 1
        while self.index < len(self.argv):
            self.parse_one()
            self.index += 1

        spec = self.spec
        if len(self.optargs) < spec.minargs:
            plural = "s" if spec.minargs != 1 else ""
            third = "s" if spec.minargs == 1 else ""
            raise ToyError(f"Need{third} {spec.minargs} argument{plural}")
        if spec.maxargs is not None and len(self.optargs) > spec.maxargs:
            plural = "" if spec.maxargs == 1 else "s"
            raise ToyError(f"Max {spec.maxargs} argument{plural}")
        return ParsedArgs(self.flags, self.optargs, self.values, spec)


def get_optflags(options, argv):
    """Parse argv (argv[0] being the command name) against an option string."""
    spec = options if isinstance(options, OptionSpec) else parse_optstring(options)
    return _Parser(spec, argv).run()