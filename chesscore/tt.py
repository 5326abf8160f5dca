"""Transposition table: a shared hash of search results."""

from __future__ import annotations

import enum
from dataclasses import dataclass

DEPTH_OFFSET = -7
CLUSTER_SIZE = 3
CLUSTER_BYTES = 32

GENERATION_BITS = 3
GENERATION_DELTA = 1 << GENERATION_BITS
GENERATION_CYCLE = 255 + GENERATION_DELTA
GENERATION_MASK = (0xFF << GENERATION_BITS) & 0xFF

_KEY_MASK = (1 << 64) - 1


def _int16(value: int) -> int:
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


class Bound(enum.IntEnum):
    """Kind of bound a stored value represents."""

    NONE = 0
    UPPER = 1
    LOWER = 2
    EXACT = UPPER | LOWER


@dataclass(slots=True)
class TTEntry:
    """One packed table entry: key, depth, generation, bound, move and values."""

    key16: int = 0
    depth8: int = 0
    gen_bound8: int = 0
    move16: int = 0
    value16: int = 0
    eval16: int = 0
    depth_offset: int = DEPTH_OFFSET

    @property
    def move(self) -> int:
        return self.move16

    @property
    def value(self) -> int:
        return self.value16

    @property
    def eval_value(self) -> int:
        return self.eval16

    def depth(self) -> int:
        return self.depth8 + self.depth_offset

    def is_pv(self) -> bool:
        return bool(self.gen_bound8 & 0x4)

    def bound(self) -> Bound:
        return Bound(self.gen_bound8 & 0x3)

    def save(
        self,
        key: int,
        value: int,
        pv: bool,
        bound: Bound,
        depth: int,
        move: int,
        eval_value: int,
        generation: int,
    ) -> None:
        """Store a node's data, keeping more valuable data already present."""
        key16 = key & 0xFFFF

        # Preserve any existing move for the same position
        if move or key16 != self.key16:
            self.move16 = move & 0xFFFF

        if (
            bound == Bound.EXACT
            or key16 != self.key16
            or depth - self.depth_offset > self.depth8 - 4
        ):
            if not self.depth_offset < depth < 256 + self.depth_offset:
                raise ValueError(f"depth {depth} cannot be stored")
            self.key16 = key16
            self.depth8 = (depth - self.depth_offset) & 0xFF
            self.gen_bound8 = (generation | (int(bool(pv)) << 2) | int(bound)) & 0xFF
            self.value16 = _int16(value)
            self.eval16 = _int16(eval_value)


class TranspositionTable:
    """A power-free array of clusters, each holding CLUSTER_SIZE entries."""

    def __init__(self, mb_size: int = 16, depth_offset: int = DEPTH_OFFSET) -> None:
        self.depth_offset = depth_offset
        self.generation = 0
        self.cluster_count = 0
        self._clusters: dict[int, list[TTEntry]] = {}
        self.resize(mb_size)

    def resize(self, mb_size: int) -> None:
        """Set the size in megabytes and empty the table."""
        if mb_size < 1:
            raise ValueError(f"cannot allocate {mb_size}MB for transposition table")
        self.cluster_count = mb_size * 1024 * 1024 // CLUSTER_BYTES
        self.clear()

    def clear(self) -> None:
        """Reset every entry to zero."""
        self._clusters = {}

    def new_search(self) -> None:
        """Advance the generation; the low bits are kept for other data."""
        self.generation = (self.generation + GENERATION_DELTA) & 0xFF

    def cluster_index(self, key: int) -> int:
        """Map a 64-bit key to a cluster index."""
        return ((key & _KEY_MASK) * self.cluster_count) >> 64

    def _cluster(self, index: int) -> list[TTEntry]:
        cluster = self._clusters.get(index)
        if cluster is None:
            cluster = [
                TTEntry(depth_offset=self.depth_offset) for _ in range(CLUSTER_SIZE)
            ]
            self._clusters[index] = cluster
        return cluster

    def _replace_value(self, entry: TTEntry) -> int:
        age = (GENERATION_CYCLE + self.generation - entry.gen_bound8) & GENERATION_MASK
        return entry.depth8 - age

    def probe(self, key: int) -> tuple[bool, TTEntry]:
        """Look up ``key``; return whether it was found and the entry to use.

        On a miss the entry is an empty or the least valuable one, to be
        overwritten by the caller.
        """
        cluster = self._cluster(self.cluster_index(key))
        key16 = key & 0xFFFF
        for entry in cluster:
            if entry.key16 == key16 or not entry.depth8:
                entry.gen_bound8 = (
                    self.generation | (entry.gen_bound8 & (GENERATION_DELTA - 1))
                ) & 0xFF
                return bool(entry.depth8), entry
        return False, min(cluster, key=self._replace_value)

    def save(
        self,
        entry: TTEntry,
        key: int,
        value: int,
        pv: bool,
        bound: Bound,
        depth: int,
        move: int,
        eval_value: int,
    ) -> None:
        """Save into ``entry`` stamped with the current generation."""
        entry.save(key, value, pv, bound, depth, move, eval_value, self.generation)

    def hashfull(self) -> int:
        """Approximate per mille occupation by entries of this generation."""
        count = 0
        for index in range(min(1000, self.cluster_count)):
            for entry in self._clusters.get(index, ()):
                if entry.depth8 and (entry.gen_bound8 & GENERATION_MASK) == self.generation:
                    count += 1
        return count // CLUSTER_SIZE