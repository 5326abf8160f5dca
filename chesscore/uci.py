"""Parsing and formatting helpers for UCI protocol commands."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from chesscore.options import Option, OptionsMap

WHITE, BLACK = 0, 1

_SIDED_FIELDS = {
    "wtime": ("time", WHITE),
    "btime": ("time", BLACK),
    "winc": ("inc", WHITE),
    "binc": ("inc", BLACK),
}
_SCALAR_FIELDS = {"movestogo", "depth", "nodes", "movetime", "mate", "perft"}

_WIN_A = (-3.68389304, 30.07065921, -60.52878723, 149.53378557)
_WIN_B = (-2.0181857, 15.85685038, -29.83452023, 47.59078827)


@dataclass
class _GoLimits:
    start_time: int = 0
    time: list[int] = field(default_factory=lambda: [0, 0])
    inc: list[int] = field(default_factory=lambda: [0, 0])
    movestogo: int = 0
    depth: int = 0
    nodes: int = 0
    movetime: int = 0
    mate: int = 0
    perft: int = 0
    infinite: bool = False
    ponder: bool = False
    searchmoves: list[Any] = field(default_factory=list)


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def parse_setoption(text: str) -> tuple[str, str]:
    """Split the arguments of ``setoption`` into option name and value."""
    tokens = iter(text.split())
    next(tokens, None)  # the "name" keyword
    name_parts = []
    for token in tokens:
        if token == "value":
            break
        name_parts.append(token)
    return " ".join(name_parts), " ".join(tokens)


def apply_setoption(options: OptionsMap, text: str) -> Option:
    """Apply a ``setoption`` command to ``options`` and return the option."""
    name, value = parse_setoption(text)
    if name not in options:
        raise KeyError(f"No such option: {name}")
    return options[name].set(value)


def _read_int(tokens: Iterator[str]) -> Optional[int]:
    token = next(tokens, None)
    if token is None:
        return None
    try:
        return int(token)
    except ValueError:
        return None


def parse_go(
    text: str,
    to_move: Callable[[str], Any],
    now: Optional[Callable[[], int]] = None,
) -> _GoLimits:
    """Read the search limits of a ``go`` command.

    ``to_move`` turns a move in coordinate notation into a move; ``now``
    returns the current time in milliseconds and is read first of all.
    Parsing stops at the first number that cannot be read.
    """
    limits = _GoLimits(start_time=(now or _now_ms)())
    tokens = iter(text.split())
    for token in tokens:
        if token == "searchmoves":
            limits.searchmoves.extend(to_move(move) for move in tokens)
        elif token in _SIDED_FIELDS:
            attr, side = _SIDED_FIELDS[token]
            number = _read_int(tokens)
            getattr(limits, attr)[side] = number or 0
            if number is None:
                break
        elif token in _SCALAR_FIELDS:
            number = _read_int(tokens)
            setattr(limits, token, number or 0)
            if number is None:
                break
        elif token == "infinite":
            limits.infinite = True
        elif token == "ponder":
            limits.ponder = True
    return limits


def win_rate_model(value: int, ply: int, pawn_value: int) -> int:
    """Return the per mille chance of winning with ``value`` at ``ply``."""
    m = min(240, ply) / 64.0
    a = ((_WIN_A[0] * m + _WIN_A[1]) * m + _WIN_A[2]) * m + _WIN_A[3]
    b = ((_WIN_B[0] * m + _WIN_B[1]) * m + _WIN_B[2]) * m + _WIN_B[3]
    x = min(max(100.0 * value / pawn_value, -2000.0), 2000.0)
    return int(0.5 + 1000 / (1 + math.exp((a - x) / b)))


def format_value(value: int, mate: int, max_ply: int, pawn_value: int) -> str:
    """Render a score as ``cp <centipawns>`` or ``mate <moves>``."""
    if abs(value) > mate:
        raise ValueError(f"score {value} lies outside the mate range")
    if abs(value) < mate - max_ply:
        return f"cp {_trunc_div(value * 100, pawn_value)}"
    plies = mate - value + 1 if value > 0 else -mate - value
    return f"mate {_trunc_div(plies, 2)}"


def format_wdl(value: int, ply: int, pawn_value: int) -> str:
    """Render win/draw/loss per mille figures for ``value`` at ``ply``."""
    win = win_rate_model(value, ply, pawn_value)
    loss = win_rate_model(-value, ply, pawn_value)
    return f" wdl {win} {1000 - win - loss} {loss}"


def square_name(square: int) -> str:
    """Name a square index 0..63 in algebraic notation, a1 being 0."""
    if not 0 <= square < 64:
        raise ValueError(f"no such square: {square}")
    return "abcdefgh"[square & 7] + "12345678"[square >> 3]