import os

import pytest

from toybox.main import Toy, ToyBox, ToyFlag, main


def _box(calls):
    def record(ctx):
        calls.append((ctx.which.name, ctx.optflags, list(ctx.optargs)))

    return ToyBox(
        [
            Toy("ls", record, "la", ToyFlag.BIN),
            Toy("cat", record, None, ToyFlag.BIN),
            Toy("mount", record, None, ToyFlag.BIN | ToyFlag.USR),
            Toy("hidden", record, None, 0),
        ]
    )


def test_flag_locations_in_install_list():
    box = ToyBox(
        [
            Toy("a", None, None, ToyFlag.SBIN),
            Toy("b", None, None, ToyFlag.USR | ToyFlag.SBIN),
            Toy("c", None, None, ToyFlag.NOFORK),
        ]
    )
    assert box.install_list() == ["a", "b"]
    assert box.install_list(with_paths=True) == ["sbin/a", "usr/sbin/b"]


def test_find():
    box = _box([])
    assert box.find("ls").name == "ls"
    assert box.find("toybox-extra").name == "toybox"
    assert box.find("nope") is None
    assert box.find("") is None


def test_run_parses_options():
    calls = []
    box = _box(calls)
    assert box.run(["/bin/ls", "-l", "dir"]) == 0
    assert calls == [("ls", 2, ["dir"])]


def test_run_through_toybox_name():
    calls = []
    box = _box(calls)
    assert box.run(["toybox", "cat", "a"]) == 0
    assert calls == [("cat", 0, ["a"])]


def test_unknown_command(capsys):
    box = _box([])
    assert box.run(["toybox", "frob"]) == 1
    assert "Unknown command frob" in capsys.readouterr().err


def test_listing(capsys):
    box = _box([])
    assert box.listing() == "cat ls mount \n"
    assert box.listing(show_paths=True) == "bin/cat bin/ls usr/bin/mount \n"
    box.run(["toybox"])
    assert capsys.readouterr().out == "cat ls mount \n"


def test_listing_wraps():
    box = ToyBox([Toy(f"cmd{i:02d}", None, None, ToyFlag.BIN) for i in range(20)])
    lines = box.listing().split("\n")
    assert len(lines) > 2
    assert all(len(line) <= 72 for line in lines)


def test_install_list():
    box = _box([])
    assert box.install_list() == ["cat", "ls", "mount"]
    assert box.install_list(with_paths=True)[-1] == "usr/bin/mount"


def test_umask_flag_saved():
    box = ToyBox([Toy("m", lambda ctx: None, None, ToyFlag.UMASK)])
    old = os.umask(0o022)
    try:
        ctx = box.init(box.find("m"), ["m"])
        assert ctx.old_umask == 0o022
    finally:
        os.umask(old)


def test_exit_value_returned():
    def fail(ctx):
        ctx.exitval = 3

    box = ToyBox([Toy("f", fail, None, ToyFlag.BIN)])
    assert box.exec(["f"]) == 3


def test_main_default_listing(capsys):
    assert main(["toybox"]) == 0
    assert capsys.readouterr().out == "\n"


def test_option_error_reported(capsys):
    box = _box([])
    assert box.run(["ls", "-z"]) == 1
    assert "ls: Unknown option z" in capsys.readouterr().err