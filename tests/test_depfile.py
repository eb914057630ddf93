import pytest

from toybox.depfile import FileList
from toybox.lib import ToyError


def test_lookup_dedups_newest_first():
    files = FileList()
    files.lookup("Config.in")
    files.lookup("toys/Config.in")
    assert files.lookup("Config.in") == "Config.in"
    assert list(files) == ["toys/Config.in", "Config.in"]
    assert len(files) == 2


def test_write_dep(tmp_path):
    files = FileList()
    files.lookup("one")
    files.lookup("two")
    target = tmp_path / "deps.d"
    files.write_dep(str(target), str(tmp_path / "tmp"))
    assert target.read_text() == (
        "deps_config := \\\n\ttwo \\\n\tone\n"
        "\ninclude/config/auto.conf: \\\n\t$(deps_config)\n\n$(deps_config): ;\n"
    )
    assert not (tmp_path / "tmp").exists()


def test_write_dep_unwritable(tmp_path):
    with pytest.raises(ToyError):
        FileList().write_dep(str(tmp_path / "d"), str(tmp_path / "no" / "tmp"))