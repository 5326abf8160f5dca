"""Engine options as defined by the UCI protocol."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Optional

OnChange = Callable[["Option"], None]

MAX_HASH_MB = 33554432


def case_insensitive_less(a: str, b: str) -> bool:
    """Return True when ``a`` sorts before ``b`` ignoring letter case."""
    return a.lower() < b.lower()


class OptionType(enum.Enum):
    """Kinds of option known to the UCI protocol."""

    STRING = "string"
    CHECK = "check"
    BUTTON = "button"
    SPIN = "spin"
    COMBO = "combo"


@dataclass(eq=False)
class Option:
    """A single UCI option with its default and current value."""

    type: OptionType
    default: str = ""
    current: str = ""
    minimum: int = 0
    maximum: int = 0
    on_change: Optional[OnChange] = None

    @classmethod
    def string(cls, value: str = "", on_change: Optional[OnChange] = None) -> "Option":
        return cls(OptionType.STRING, value, value, on_change=on_change)

    @classmethod
    def check(cls, value: bool = False, on_change: Optional[OnChange] = None) -> "Option":
        text = "true" if value else "false"
        return cls(OptionType.CHECK, text, text, on_change=on_change)

    @classmethod
    def button(cls, on_change: Optional[OnChange] = None) -> "Option":
        return cls(OptionType.BUTTON, on_change=on_change)

    @classmethod
    def spin(
        cls,
        value: float,
        minimum: int,
        maximum: int,
        on_change: Optional[OnChange] = None,
    ) -> "Option":
        text = f"{float(value):f}"
        return cls(OptionType.SPIN, text, text, minimum, maximum, on_change)

    @classmethod
    def combo(
        cls, choices: str, current: str, on_change: Optional[OnChange] = None
    ) -> "Option":
        """Create a combo; ``choices`` lists the entries separated by ``var``."""
        return cls(OptionType.COMBO, choices, current, on_change=on_change)

    def set(self, value: str) -> "Option":
        """Update the current value and fire the change callback.

        Values that are empty, malformed for a check, out of range for a spin
        or not among a combo's choices are silently ignored, as the GUI is
        responsible for sending valid values.
        """
        if self.type is not OptionType.BUTTON and not value:
            return self
        if self.type is OptionType.CHECK and value not in ("true", "false"):
            return self
        if self.type is OptionType.SPIN:
            number = float(value)
            if number < self.minimum or number > self.maximum:
                return self
        if self.type is OptionType.COMBO:
            choices = {token.lower() for token in self.default.split()}
            if value.lower() not in choices or value == "var":
                return self

        if self.type is not OptionType.BUTTON:
            self.current = value
        if self.on_change is not None:
            self.on_change(self)
        return self

    def matches(self, text: str) -> bool:
        """Compare a combo's current value with ``text``, ignoring case."""
        if self.type is not OptionType.COMBO:
            raise TypeError(f"matches() needs a combo option, not {self.type.value}")
        return self.current.lower() == text.lower()

    def __float__(self) -> float:
        if self.type is OptionType.SPIN:
            return float(self.current)
        if self.type is OptionType.CHECK:
            return 1.0 if self.current == "true" else 0.0
        raise TypeError(f"a {self.type.value} option has no numeric value")

    def __int__(self) -> int:
        return int(float(self))

    def __bool__(self) -> bool:
        return float(self) != 0.0

    def __str__(self) -> str:
        return self.current


class OptionsMap:
    """Options keyed by case-insensitive name, remembering insertion order."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[str, Option]] = {}

    def add(self, name: str, option: Option) -> Option:
        """Register ``option`` under ``name``, replacing any previous one."""
        previous = self._entries.pop(name.lower(), None)
        stored_name = previous[0] if previous else name
        self._entries[name.lower()] = (stored_name, option)
        return option

    def __getitem__(self, name: str) -> Option:
        try:
            return self._entries[name.lower()][1]
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        names = (stored for stored, _ in self._entries.values())
        return iter(sorted(names, key=str.lower))

    def __len__(self) -> int:
        return len(self._entries)

    def format_uci(self) -> str:
        """Describe every option in insertion order, as sent after ``uci``."""
        parts = []
        for name, option in self._entries.values():
            line = f"\noption name {name} type {option.type.value}"
            if option.type in (OptionType.STRING, OptionType.CHECK, OptionType.COMBO):
                line += f" default {option.default}"
            elif option.type is OptionType.SPIN:
                line += (
                    f" default {int(float(option.default))}"
                    f" min {option.minimum} max {option.maximum}"
                )
            parts.append(line)
        return "".join(parts)


def default_options(
    eval_file: str, handlers: Optional[Mapping[str, OnChange]] = None
) -> OptionsMap:
    """Build the engine's options with their hard-coded defaults.

    ``handlers`` maps option names to the callbacks run when they change.
    """
    hooks = dict(handlers or {})
    options = OptionsMap()

    def hook(name: str) -> Optional[OnChange]:
        return hooks.get(name)

    options.add("Debug Log File", Option.string("", hook("Debug Log File")))
    options.add("Threads", Option.spin(1, 1, 512, hook("Threads")))
    options.add("Hash", Option.spin(16, 1, MAX_HASH_MB, hook("Hash")))
    options.add("Clear Hash", Option.button(hook("Clear Hash")))
    options.add("Ponder", Option.check(False, hook("Ponder")))
    options.add("MultiPV", Option.spin(1, 1, 500, hook("MultiPV")))
    options.add("Skill Level", Option.spin(20, 0, 20, hook("Skill Level")))
    options.add("Move Overhead", Option.spin(10, 0, 5000, hook("Move Overhead")))
    options.add("Slow Mover", Option.spin(100, 10, 1000, hook("Slow Mover")))
    options.add("nodestime", Option.spin(0, 0, 10000, hook("nodestime")))
    options.add("UCI_Chess960", Option.check(False, hook("UCI_Chess960")))
    options.add("UCI_AnalyseMode", Option.check(False, hook("UCI_AnalyseMode")))
    options.add("UCI_LimitStrength", Option.check(False, hook("UCI_LimitStrength")))
    options.add("UCI_Elo", Option.spin(1350, 1350, 2850, hook("UCI_Elo")))
    options.add("UCI_ShowWDL", Option.check(False, hook("UCI_ShowWDL")))
    options.add("SyzygyPath", Option.string("<empty>", hook("SyzygyPath")))
    options.add("SyzygyProbeDepth", Option.spin(1, 1, 100, hook("SyzygyProbeDepth")))
    options.add("Syzygy50MoveRule", Option.check(True, hook("Syzygy50MoveRule")))
    options.add("SyzygyProbeLimit", Option.spin(7, 0, 7, hook("SyzygyProbeLimit")))
    options.add("Use NNUE", Option.check(True, hook("Use NNUE")))
    options.add("EvalFile", Option.string(eval_file, hook("EvalFile")))
    return options