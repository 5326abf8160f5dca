import pytest

from chesscore.options import (
    Option,
    OptionsMap,
    OptionType,
    case_insensitive_less,
    default_options,
)


def test_spin_accepts_value_in_range():
    opt = Option.spin(16, 1, 1024)
    opt.set("32")
    assert int(opt) == 32
    assert float(opt) == 32.0


def test_spin_ignores_out_of_range():
    opt = Option.spin(16, 1, 1024)
    opt.set("0")
    assert int(opt) == 16
    opt.set("2000")
    assert int(opt) == 16


def test_spin_rejects_non_numeric():
    opt = Option.spin(16, 1, 1024)
    with pytest.raises(ValueError):
        opt.set("lots")


def test_check_values():
    opt = Option.check(False)
    assert bool(opt) is False
    opt.set("true")
    assert bool(opt) is True
    opt.set("yes")
    assert str(opt) == "true"


def test_string_ignores_empty():
    opt = Option.string("abc")
    opt.set("")
    assert str(opt) == "abc"
    opt.set("def ghi")
    assert str(opt) == "def ghi"


def test_string_has_no_numeric_value():
    with pytest.raises(TypeError):
        float(Option.string("x"))


def test_button_fires_callback():
    calls = []
    opt = Option.button(calls.append)
    opt.set("")
    assert calls == [opt]
    assert opt.type is OptionType.BUTTON


def test_on_change_sees_new_value():
    seen = []
    opt = Option.spin(10, 0, 100, lambda o: seen.append(int(o)))
    opt.set("42")
    opt.set("500")
    assert seen == [42]


def test_combo_choices():
    opt = Option.combo("Both var Black var White", "Both")
    opt.set("Black")
    assert opt.matches("black")
    opt.set("Green")
    assert opt.matches("Black")
    opt.set("var")
    assert opt.matches("Black")
    opt.set("WHITE")
    assert str(opt) == "WHITE"
    assert opt.matches("white")


def test_matches_needs_combo():
    with pytest.raises(TypeError):
        Option.spin(1, 0, 2).matches("1")


def test_case_insensitive_less():
    assert case_insensitive_less("apple", "Banana")
    assert not case_insensitive_less("Banana", "apple")
    assert not case_insensitive_less("Hash", "hash")
    assert not case_insensitive_less("hash", "Hash")


def test_map_lookup_ignores_case():
    options = OptionsMap()
    hash_opt = options.add("Hash", Option.spin(16, 1, 64))
    assert "hash" in options
    assert options["HASH"] is hash_opt
    assert "Threads" not in options
    with pytest.raises(KeyError):
        options["Threads"]


def test_map_replaces_and_keeps_name():
    options = OptionsMap()
    options.add("Hash", Option.spin(16, 1, 64))
    replacement = options.add("hash", Option.spin(8, 1, 64))
    assert len(options) == 1
    assert list(options) == ["Hash"]
    assert options["Hash"] is replacement


def test_map_iterates_sorted_ignoring_case():
    options = OptionsMap()
    for name in ["beta", "Alpha", "gamma", "Delta"]:
        options.add(name, Option.check(False))
    assert list(options) == ["Alpha", "beta", "Delta", "gamma"]


def test_format_uci_keeps_insertion_order():
    options = OptionsMap()
    options.add("Zeta", Option.check(True))
    options.add("Alpha", Option.button())
    lines = options.format_uci().split("\n")
    assert lines[0] == ""
    assert lines[1] == "option name Zeta type check default true"
    assert lines[2] == "option name Alpha type button"


def test_default_options_format():
    options = default_options("nn-test.nnue")
    lines = options.format_uci().split("\n")[1:]
    assert len(lines) == len(options)
    assert lines[0] == "option name Debug Log File type string default "
    assert "option name Hash type spin default 16 min 1 max 33554432" in lines
    assert "option name Clear Hash type button" in lines
    assert "option name SyzygyPath type string default <empty>" in lines
    assert lines[-1] == "option name EvalFile type string default nn-test.nnue"


def test_default_options_handlers():
    changes = []
    options = default_options("nn.nnue", {"Threads": lambda o: changes.append(int(o))})
    options["threads"].set("4")
    options["threads"].set("9999")
    assert changes == [4]
    assert int(options["Threads"]) == 4
    assert bool(options["Syzygy50MoveRule"]) is True