"""Time allotment for a single move."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Optional


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


@dataclass
class Limits:
    """Search limits as given by a ``go`` command; times in milliseconds."""

    time: list[int] = field(default_factory=lambda: [0, 0])
    inc: list[int] = field(default_factory=lambda: [0, 0])
    npmsec: int = 0
    movestogo: int = 0
    start_time: int = 0
    depth: int = 0
    nodes: int = 0
    movetime: int = 0
    mate: int = 0
    perft: int = 0
    infinite: bool = False
    searchmoves: list[Any] = field(default_factory=list)


class TimeManagement:
    """Computes the optimum and maximum time to think about the current move."""

    def __init__(self) -> None:
        self.available_nodes = 0  # used in 'nodes as time' mode
        self.start_time = 0
        self.optimum_time = 0
        self.maximum_time = 0
        self._npmsec = 0

    def init(
        self,
        limits: Limits,
        us: int,
        ply: int,
        move_overhead: int = 10,
        slow_mover: int = 100,
        nodestime: int = 0,
        ponder: bool = False,
    ) -> None:
        """Set the time bounds for the move at ``ply`` played by side ``us``.

        With ``nodestime`` set, times are converted to nodes and ``limits``
        is updated accordingly.
        """
        if nodestime:
            if not self.available_nodes:  # only once at game start
                self.available_nodes = nodestime * limits.time[us]
            limits.time[us] = int(self.available_nodes)
            limits.inc[us] *= nodestime
            limits.npmsec = nodestime
        self._npmsec = limits.npmsec

        self.start_time = limits.start_time
        mtg = min(limits.movestogo, 50) if limits.movestogo else 50

        # Keep time_left positive since it is used as a divisor
        time_left = max(
            1,
            limits.time[us] + limits.inc[us] * (mtg - 1) - move_overhead * (2 + mtg),
        )
        time_left = _trunc_div(slow_mover * time_left, 100)

        if limits.movestogo == 0:
            opt_scale = min(
                0.0084 + math.pow(ply + 3.0, 0.5) * 0.0042,
                0.2 * limits.time[us] / time_left,
            )
            max_scale = min(7.0, 4.0 + ply / 12.0)
        else:
            opt_scale = min(
                (0.8 + ply / 128.0) / mtg, 0.8 * limits.time[us] / time_left
            )
            max_scale = min(6.3, 1.5 + 0.11 * mtg)

        self.optimum_time = int(opt_scale * time_left)
        self.maximum_time = int(
            min(0.8 * limits.time[us] - move_overhead, max_scale * self.optimum_time)
        )

        if ponder:
            self.optimum_time += _trunc_div(self.optimum_time, 4)

    def optimum(self) -> int:
        return self.optimum_time

    def maximum(self) -> int:
        return self.maximum_time

    def elapsed(self, nodes_searched: int = 0, now: Optional[int] = None) -> int:
        """Time used so far, or nodes searched in 'nodes as time' mode."""
        if self._npmsec:
            return int(nodes_searched)
        current = _now_ms() if now is None else now
        return current - self.start_time