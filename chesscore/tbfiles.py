"""Locating, reading and indexing endgame tablebase files."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

_MAGICS = {
    "WDL": bytes((0x71, 0xE8, 0x23, 0x5D)),
    "DTZ": bytes((0xD7, 0x66, 0x0C, 0xA5)),
}
_SUFFIXES = {"WDL": ".rtbw", "DTZ": ".rtbz"}


class TableType(enum.Enum):
    """Kind of tablebase: win/draw/loss or distance to zeroing move."""

    WDL = "WDL"
    DTZ = "DTZ"

    @property
    def suffix(self) -> str:
        return _SUFFIXES[self.value]

    @property
    def magic(self) -> bytes:
        return _MAGICS[self.value]


class CorruptTableError(Exception):
    """A tablebase file has the wrong size or header."""


def find_table_file(
    paths: str, name: str, sep: str = os.pathsep
) -> Optional[Path]:
    """Return the first ``<dir>/<name>`` that exists among ``sep``-separated dirs."""
    if not paths:
        return None
    directories = paths.split(sep)
    if paths.endswith(sep):
        directories.pop()
    for directory in directories:
        candidate = Path(f"{directory}/{name}")
        if candidate.is_file():
            return candidate
    return None


def read_table_file(path: Union[str, Path], table_type: TableType) -> bytes:
    """Read a table file, check its size and header, and return its body.

    The returned data starts just after the four magic bytes.
    """
    data = Path(path).read_bytes()
    if len(data) % 64 != 16:
        raise CorruptTableError(f"Corrupt tablebase file {path}")
    if data[:4] != table_type.magic:
        raise CorruptTableError(f"Corrupted table in file {path}")
    return data[4:]


def table_file_name(
    white: str, black: str, white_is_stronger: bool, table_type: TableType
) -> str:
    """Build a file name such as ``KRvK.rtbw`` from each side's pieces."""
    code = f"{white}v{black}" if white_is_stronger else f"{black}v{white}"
    return code + table_type.suffix


@dataclass
class _Slot:
    key: int
    wdl: Any
    dtz: Any


class TableHash:
    """Robin Hood hash from material key to a (WDL, DTZ) table pair."""

    SIZE = 1 << 12  # indexed by the key's 12 low bits
    OVERFLOW = 1  # extra bucket past the end, always kept empty

    def __init__(self) -> None:
        self._slots: list[Optional[_Slot]] = [None] * (self.SIZE + self.OVERFLOW)

    def _home(self, key: int) -> int:
        return key & (self.SIZE - 1)

    def insert(self, key: int, wdl: Any, dtz: Any) -> None:
        """Add or replace the tables stored under ``key``."""
        if wdl is None:
            raise ValueError("a WDL table is required")
        entry = _Slot(key, wdl, dtz)
        home = self._home(key)
        for bucket in range(home, self.SIZE + self.OVERFLOW - 1):
            other = self._slots[bucket]
            if other is None or other.key == entry.key:
                self._slots[bucket] = entry
                return
            # Displace an element that is closer to its home than we are
            other_home = self._home(other.key)
            if other_home > home:
                self._slots[bucket], entry = entry, other
                home = other_home
        raise OverflowError("TB hash table size too low!")

    def get(self, key: int) -> Optional[tuple[Any, Any]]:
        """Return the (WDL, DTZ) pair stored under ``key``, or None."""
        for slot in self._slots[self._home(key):]:
            if slot is None:
                return None
            if slot.key == key:
                return slot.wdl, slot.dtz
        return None

    def clear(self) -> None:
        """Remove every entry."""
        self._slots = [None] * (self.SIZE + self.OVERFLOW)

    def __len__(self) -> int:
        """Number of distinct WDL tables stored."""
        return len({id(slot.wdl) for slot in self._slots if slot is not None})