import pytest

from toybox.args import get_optflags, parse_optstring
from toybox.lib import ToyError, atolx


def test_documented_example():
    parsed = get_optflags("ab:c:d", ["command", "-b", "fruit", "-d", "walrus"])
    assert parsed.flags == 5
    assert parsed.optargs == ["walrus"]
    assert parsed.optc == 1
    assert parsed.values == {"b": "fruit", "c": None}


def test_bits_rightmost_is_lowest():
    spec = parse_optstring("xyz")
    assert [o.bit for o in spec.options] == [4, 2, 1]


def test_combined_short_flags():
    spec = parse_optstring("abc")
    parsed = get_optflags(spec, ["cmd", "-ac"])
    assert parsed.flags == spec.find("a").bit | spec.find("c").bit


def test_attached_argument():
    parsed = get_optflags("f:", ["cmd", "-fname", "rest"])
    assert parsed.values["f"] == "name"
    assert parsed.optargs == ["rest"]


def test_enable_and_disable():
    spec = parse_optstring("ab+ac~a")
    parsed = get_optflags(spec, ["cmd", "-b"])
    assert parsed.flags == spec.find("a").bit | spec.find("b").bit
    parsed = get_optflags(spec, ["cmd", "-a", "-c"])
    assert parsed.flags == spec.find("c").bit


def test_unknown_option_raises():
    with pytest.raises(ToyError, match="Unknown option"):
        get_optflags("a", ["cmd", "-q"])


def test_noerror_keeps_unknown():
    parsed = get_optflags("?a", ["cmd", "-aq", "--zz"])
    assert parsed.flags == 0
    assert parsed.optargs == ["-aq", "--zz"]


def test_missing_argument():
    with pytest.raises(ToyError, match="Missing argument"):
        get_optflags("f:", ["cmd", "-f"])


def test_minargs_and_maxargs():
    with pytest.raises(ToyError, match="Needs 1 argument"):
        get_optflags("<1a", ["cmd"])
    with pytest.raises(ToyError, match="Max 1 argument"):
        get_optflags(">1a", ["cmd", "x", "y"])


def test_stop_at_first_nonoption():
    parsed = get_optflags("^a", ["cmd", "x", "-a"])
    assert parsed.flags == 0
    assert parsed.optargs == ["x", "-a"]


def test_double_dash_ends_options():
    parsed = get_optflags("a", ["cmd", "--", "-a"])
    assert parsed.flags == 0
    assert parsed.optargs[-1] == "-a"


def test_long_options():
    spec = parse_optstring("a(along)f:(file)")
    parsed = get_optflags(spec, ["cmd", "--along", "--file=out"])
    assert parsed.flags == spec.find("a").bit | spec.find("f").bit
    assert parsed.values["f"] == "out"


def test_longopt_only_option():
    spec = parse_optstring("(verbose)q")
    parsed = get_optflags(spec, ["cmd", "--verbose"])
    assert parsed.flags == spec.options[0].bit


def test_nodash_first_argument():
    spec = parse_optstring("&xv")
    parsed = get_optflags(spec, ["tar", "xv", "yv"])
    assert parsed.flags == spec.find("x").bit | spec.find("v").bit
    assert parsed.optargs == ["yv"]


def test_single_dash_is_argument():
    parsed = get_optflags("a", ["cmd", "-"])
    assert parsed.optargs == ["-"]