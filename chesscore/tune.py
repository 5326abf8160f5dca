"""Expose engine parameters as spin options for tuning sessions."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, Sequence, TextIO

from chesscore.options import Option, OptionsMap

Range = tuple[int, int]


def default_range(value: int) -> Range:
    """Default option limits: from zero to twice the value."""
    return (0, 2 * value) if value > 0 else (2 * value, 0)


class SetRange:
    """Computes an option's limits, by a function or as fixed bounds."""

    def __init__(
        self,
        fun: Optional[Callable[[int], Range]] = None,
        minimum: int = 0,
        maximum: int = 0,
    ) -> None:
        self.fun = fun
        self.range = (minimum, maximum)

    def __call__(self, value: int) -> Range:
        return self.fun(value) if self.fun is not None else self.range


def next_name(names: str) -> tuple[str, str]:
    """Take the next comma-separated name, keeping parentheses balanced.

    Returns the name with whitespace removed and the remaining text.
    """
    name = ""
    while True:
        if not names:
            raise ValueError(f"unbalanced parentheses in parameter name {name!r}")
        token, comma, rest = names.partition(",")
        names = rest if comma else ""
        words = token.split()
        name += words[0] if words else token
        if name.count("(") == name.count(")"):
            return name, names


@dataclass
class Param:
    """A tunable integer parameter."""

    value: int


@dataclass
class ScoreParam:
    """A tunable middle-game / end-game score pair."""

    mg: int
    eg: int


class _Entry:
    def init_option(self) -> None:
        raise NotImplementedError

    def read_option(self) -> None:
        raise NotImplementedError


class _IntEntry(_Entry):
    def __init__(self, tune: "Tune", name: str, param: Param, rng: SetRange) -> None:
        self.tune, self.name, self.param, self.rng = tune, name, param, rng

    def init_option(self) -> None:
        self.tune._make_option(self.name, self.param.value, self.rng)

    def read_option(self) -> None:
        if self.name in self.tune.options:
            self.param.value = int(self.tune.options[self.name])


class _ScoreEntry(_Entry):
    def __init__(self, tune: "Tune", name: str, param: ScoreParam, rng: SetRange) -> None:
        self.tune, self.name, self.param, self.rng = tune, name, param, rng

    def init_option(self) -> None:
        self.tune._make_option("m" + self.name, self.param.mg, self.rng)
        self.tune._make_option("e" + self.name, self.param.eg, self.rng)

    def read_option(self) -> None:
        options = self.tune.options
        if "m" + self.name in options:
            self.param.mg = int(options["m" + self.name])
        if "e" + self.name in options:
            self.param.eg = int(options["e" + self.name])


class _PostUpdateEntry(_Entry):
    def __init__(self, update: Callable[[], None]) -> None:
        self.update = update

    def init_option(self) -> None:
        pass

    def read_option(self) -> None:
        self.update()


class Tune:
    """Registers parameters and keeps them in sync with their options."""

    def __init__(
        self,
        options: Optional[OptionsMap] = None,
        results: Optional[Mapping[str, int]] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.options = options if options is not None else OptionsMap()
        self.results = dict(results or {})
        self.out = out
        self.update_on_last = False
        self._entries: list[_Entry] = []
        self._last_option: Optional[Option] = None

    def add(self, names: str, *args: object) -> None:
        """Register parameters named by the comma-separated ``names``.

        Arguments may be ``Param``, ``ScoreParam``, nested lists of these, a
        ``SetRange`` that applies to the arguments after it, or a callable run
        after values are updated. Each consumes one name.
        """
        text = names.strip()
        if text.startswith("(") and text.endswith(")"):
            text = text[1:-1]
        self._add(SetRange(default_range), text, args)

    def _add(self, rng: SetRange, names: str, args: Sequence[object]) -> None:
        for arg in args:
            name, names = next_name(names)
            if isinstance(arg, SetRange):
                rng = arg
            elif isinstance(arg, (list, tuple)):
                for i, item in enumerate(arg):
                    self._add(rng, f"{name}[{i}]", (item,))
            elif isinstance(arg, Param):
                self._entries.append(_IntEntry(self, name, arg, rng))
            elif isinstance(arg, ScoreParam):
                self._entries.append(_ScoreEntry(self, name, arg, rng))
            elif callable(arg):
                self._entries.append(_PostUpdateEntry(arg))
            else:
                raise TypeError(f"parameter type not supported: {type(arg).__name__}")

    def init(self) -> None:
        """Create the options for every parameter, then read them back."""
        for entry in self._entries:
            entry.init_option()
        self.read_options()

    def read_options(self) -> None:
        """Copy option values into the parameters and run post updates."""
        for entry in self._entries:
            entry.read_option()

    def _on_tune(self, option: Option) -> None:
        if not self.update_on_last or option is self._last_option:
            self.read_options()

    def _make_option(self, name: str, value: int, rng: SetRange) -> None:
        low, high = rng(value)
        if low == high:
            return
        value = self.results.get(name, value)
        low, high = rng(value)
        option = self.options.add(name, Option.spin(value, low, high, self._on_tune))
        self._last_option = option
        out = self.out if self.out is not None else sys.stdout
        print(f"{name},{value},{low},{high},{(high - low) / 20.0:g},0.0020", file=out)