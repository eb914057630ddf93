# toybox

A small multi-call command toolkit. One entry point dispatches to named
commands ("toys"), each described by a compact option string. A set of
helpers covers the chores such commands share: path handling, line reading,
temporary-file replacement, CRC tables and error reporting.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## The command

```
toybox
```

`toybox` looks up the command named by its first argument and runs it with
the remaining arguments. With no arguments it prints the list of commands it
knows; with a first argument starting with `-` it prints that list with each
command's install directory (`usr/`, `bin/`, `sbin/`) in front. An unknown
command name is reported on stderr and gives exit status 1.

The `toybox` command as installed starts with an empty command table, so
its listing is empty. Commands are added by building a `ToyBox` with your
own `Toy` entries (see below).

## Modules

- `toybox.main`: `ToyBox` holds the table of `Toy` entries (name, entry
  point, option string, flags), finds a toy by name (`ToyBox.find`),
  prepares its `ToyContext` with the parsed command line (`ToyBox.init`),
  runs it (`ToyBox.exec`, `ToyBox.run`) and produces the command listings
  (`ToyBox.listing`, `ToyBox.install_list`). `ToyFlag` holds the install
  location and behaviour flags; a toy flagged `ToyFlag.UMASK` starts with a
  umask of 0 and the old one saved in `ToyContext.old_umask`. `main` is the
  entry point of the `toybox` command.
- `toybox.args`: `get_optflags(options, argv)` parses a command line against
  an option string such as `"ab:c:d"` and returns a `ParsedArgs` with the
  flag word, the leftover arguments and the option values;
  `parse_optstring` turns the option string into an `OptionSpec` of
  `Option` entries. Errors raise `ToyError`.
- `toybox.lib`: shared helpers — `abspath`, `mkpath`, `find_in_path`,
  `utoa`, `itoa`, `atolx`, `crc_table`, `fdlength`, `readlink`,
  `get_rawline`, `get_line`, `sendfile`, `loopfiles`, `pidfile`, `regcomp`,
  `format_error`, the `TempCopy` context manager and the `ToyError`
  exception.
- `toybox.llist`: `DoubleList`, items appended at the tail and popped from
  the head.
- `toybox.depfile`: `FileList` records configuration file names once each,
  newest first, and writes a make-style dependency file.

## Examples

Parsing options:

```python
from toybox.args import get_optflags

parsed = get_optflags("ab:c:d", ["command", "-b", "fruit", "-d", "walrus"])
parsed.flags     # 5  (-b = 4, -d = 1)
parsed.optargs   # ["walrus"]
parsed.values    # {"b": "fruit", "c": None}
```

Running a command through the multiplexer:

```python
from toybox.main import Toy, ToyBox, ToyFlag

def hello_main(ctx):
    print("hello", *ctx.optargs)

box = ToyBox([Toy("hello", hello_main, None, ToyFlag.BIN)])
box.run(["toybox", "hello", "world"])   # prints "hello world", returns 0
box.listing()                           # "hello \n"
box.install_list(with_paths=True)       # ["bin/hello"]
```

Size suffixes:

```python
from toybox.lib import atolx

atolx("4k")   # 4096
```

Replacing a file through a temporary copy (on a clean exit the rest of the
source is copied and the copy replaces the file; on an exception the copy
is deleted):

```python
from toybox.lib import TempCopy

with open("notes.txt", "rb") as source:
    with TempCopy(source, "notes.txt") as copy:
        copy.file.write(b"new first line\n")
```

## What it does not do

The package has no bzip2 decoder, no directory-tree walker and no reader
for the system mount table, and it ships no commands of its own beyond the
`toybox` dispatcher: any real command has to be supplied as a `Toy`.